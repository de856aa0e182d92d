"""Configuration models."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


DEFAULT_BLOCKED_DOMAINS = [
    "beyondchats.com",
    "youtube.com",
    "facebook.com",
    "twitter.com",
    "linkedin.com",
    "reddit.com",
    "quora.com",
    "pinterest.com",
    "instagram.com",
    "amazon.com",
    "wikipedia.org",
]


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("blogrefresh", description="Database name")
    user: str = Field("blogrefresh", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field("BLOGREFRESH_DB_PASSWORD", description="Environment variable for password")
    dsn_env: Optional[str] = Field("DATABASE_URL", description="Environment variable holding a full DSN")


class SiteConfig(BaseModel):
    """Source blog the discovery job scrapes."""

    base_url: str = Field("https://beyondchats.com/blogs/", description="Paginated listing URL")
    default_last_page: int = Field(15, description="Last page assumed when pagination can't be read", ge=1)
    articles_to_collect: int = Field(5, description="Number of oldest articles to select", ge=1, le=100)
    page_delay: float = Field(0.5, description="Minimum seconds between listing page fetches", ge=0.0)
    article_delay: float = Field(1.0, description="Minimum seconds between article scrapes", ge=0.0)
    max_content_chars: int = Field(10000, description="Cap on stored original content", ge=1)
    timeout: float = Field(30.0, description="HTTP timeout in seconds", gt=0.0)
    user_agent: str = Field("blogrefresh/1.0 (+article refresher)", description="User-Agent for the source site")

    @field_validator("base_url")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """Pagination URLs are built relative to the base, so it must end in '/'."""
        return v if v.endswith("/") else v + "/"


class SearchConfig(BaseModel):
    """Web search provider configuration (Serper)."""

    endpoint: str = Field("https://google.serper.dev/search", description="Search API endpoint")
    api_key_env: Optional[str] = Field("SERPER_API_KEY", description="Environment variable for API key")
    api_key: Optional[str] = Field(None, description="API key (prefer api_key_env)")
    num_results: int = Field(10, description="Organic results requested per query", ge=1, le=100)
    max_references: int = Field(2, description="Reference links kept per article", ge=1, le=10)
    query_suffix: str = Field(" blog article", description="Text appended to the article title")
    blocked_domains: List[str] = Field(
        default_factory=lambda: list(DEFAULT_BLOCKED_DOMAINS),
        description="Domains never used as references",
    )
    timeout: float = Field(15.0, description="HTTP timeout in seconds", gt=0.0)


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = Field("groq", description="LLM provider (groq, openai)")
    model: str = Field("openai/gpt-oss-20b", description="Model name")
    api_key_env: Optional[str] = Field("GROQ_API_KEY", description="Environment variable for API key")
    api_key: Optional[str] = Field(None, description="API key (prefer api_key_env)")
    base_url: Optional[str] = Field(
        "https://api.groq.com/openai/v1",
        description="Base URL of the OpenAI-compatible API",
    )
    temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(4000, ge=1)


class RefreshConfig(BaseModel):
    """Refresh job parameters."""

    reference_delay: float = Field(1.0, description="Minimum seconds between reference scrapes", ge=0.0)
    record_delay: float = Field(2.0, description="Pause after each saved record", ge=0.0)
    reference_max_chars: int = Field(5000, description="Cap on scraped reference text", ge=1)
    reference_timeout: float = Field(10.0, description="HTTP timeout for reference pages", gt=0.0)
    original_prompt_chars: int = Field(3000, description="Original text included in the prompt", ge=1)
    reference_prompt_chars: int = Field(4000, description="Combined reference text included in the prompt", ge=1)


class ConfigModel(BaseModel):
    """Main configuration model."""

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    site: SiteConfig = Field(default_factory=SiteConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    refresh: RefreshConfig = Field(default_factory=RefreshConfig)
