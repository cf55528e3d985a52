"""Database utilities for constructing connection URLs and engine options"""
from typing import Any

from sqlalchemy.pool import StaticPool


def get_database_url(driver: str, path: str | None = None) -> str:
    """
    Construct a SQLite database URL.

    Args:
        driver: SQLAlchemy dialect+driver (e.g., 'sqlite+pysqlite')
        path: Database file path; None means an in-memory database

    Returns:
        Complete database URL string

    Example:
        >>> get_database_url("sqlite+pysqlite", "inventory.db")
        'sqlite+pysqlite:///inventory.db'
    """
    if not path:
        return f"{driver}:///:memory:"
    return f"{driver}:///{path}"


def is_memory_url(url: str) -> bool:
    """True when the URL points at a process-local in-memory SQLite database."""
    return url.startswith("sqlite") and (url.endswith(":memory:") or url.endswith("://"))


def engine_options(url: str) -> dict[str, Any]:
    """
    Extra create_engine() keyword arguments for a database URL.

    An in-memory SQLite database only lives as long as its connection, so every
    session of the application must share one connection (StaticPool).
    """
    if not url.startswith("sqlite"):
        return {}
    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if is_memory_url(url):
        options["poolclass"] = StaticPool
    return options
