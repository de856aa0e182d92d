"""Database management for blogrefresh."""

from .articles import ArticleStore
from .connection import close_connection_pool, get_connection, get_connection_pool
from .init import init_database, validate_connection

__all__ = [
    "ArticleStore",
    "close_connection_pool",
    "get_connection",
    "get_connection_pool",
    "init_database",
    "validate_connection",
]
