"""Database configuration — reads the drafts connection URL from environment.

Supports two modes:
1. A single ``DRAFTS_DATABASE_URL`` env var (takes precedence).
2. A local SQLite file ``drafts.db`` under ``SURVEY_DRAFTS_DIR``
   (default ``~/.survey_runtime``), convenient for the CLI.

The URL is always returned with an async driver prefix for the async
SQLAlchemy engine.
"""

import os
from pathlib import Path


def get_drafts_dir() -> Path:
    """Directory holding the default SQLite drafts database."""
    return Path(os.getenv("SURVEY_DRAFTS_DIR", str(Path.home() / ".survey_runtime")))


def get_async_url() -> str:
    """Return an async connection URL for the drafts database."""
    url = os.getenv("DRAFTS_DATABASE_URL")
    if url:
        # Ensure an async driver prefix is present
        if url.startswith("sqlite://"):
            return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url
    return f"sqlite+aiosqlite:///{get_drafts_dir() / 'drafts.db'}"


def is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")
