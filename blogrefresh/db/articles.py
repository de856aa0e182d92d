"""Article storage."""

from typing import Any, Dict, List, Optional

from psycopg import Connection

from ..models import Article


ARTICLE_COLUMNS = """
    id, title, original_content, updated_content, source_url,
    reference_urls AS "references", created_at, updated_at
"""


def _to_article(row: Dict[str, Any]) -> Article:
    """Build an Article from a dict row."""
    data = dict(row)
    data["references"] = list(data.get("references") or [])
    return Article(**data)


class ArticleStore:
    """Read and write Article records."""

    def exists_by_source_url(self, conn: Connection, source_url: str) -> bool:
        """Check whether a record with this source URL is already stored."""
        with conn.cursor() as cur:
            cur.execute(
                "SELECT 1 FROM articles WHERE source_url = %s LIMIT 1",
                (source_url,),
            )
            return cur.fetchone() is not None

    def create_article(
        self,
        conn: Connection,
        title: str,
        original_content: str,
        source_url: str,
    ) -> int:
        """Insert a new record and return its ID."""
        with conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO articles (title, original_content, source_url)
                VALUES (%s, %s, %s)
                RETURNING id
                """,
                (title, original_content, source_url),
            )
            article_id = cur.fetchone()["id"]
        conn.commit()
        return article_id

    def find_refresh_candidates(
        self,
        conn: Connection,
        limit: Optional[int] = None,
    ) -> List[Article]:
        """Get records whose updated content is still empty."""
        query = f"""
            SELECT {ARTICLE_COLUMNS}
            FROM articles
            WHERE updated_content IS NULL OR updated_content = ''
            ORDER BY id
        """
        params: tuple = ()
        if limit is not None:
            query += " LIMIT %s"
            params = (limit,)

        with conn.cursor() as cur:
            cur.execute(query, params)
            return [_to_article(row) for row in cur.fetchall()]

    def save_refresh(
        self,
        conn: Connection,
        article_id: int,
        updated_content: str,
        references: List[str],
    ) -> bool:
        """
        Write updated content and references in a single update.

        Records that already carry updated content are left untouched.

        Returns:
            True if the record was updated
        """
        with conn.cursor() as cur:
            cur.execute(
                """
                UPDATE articles
                SET updated_content = %s, reference_urls = %s
                WHERE id = %s
                  AND (updated_content IS NULL OR updated_content = '')
                """,
                (updated_content, list(references), article_id),
            )
            updated = cur.rowcount == 1
        conn.commit()
        return updated

    def list_articles(self, conn: Connection) -> List[Article]:
        """Get all records in insertion order."""
        with conn.cursor() as cur:
            cur.execute(f"SELECT {ARTICLE_COLUMNS} FROM articles ORDER BY id")
            return [_to_article(row) for row in cur.fetchall()]

    def get_article(self, conn: Connection, article_id: int) -> Optional[Article]:
        """Get a single record by ID."""
        with conn.cursor() as cur:
            cur.execute(
                f"SELECT {ARTICLE_COLUMNS} FROM articles WHERE id = %s",
                (article_id,),
            )
            row = cur.fetchone()
        return _to_article(row) if row else None
