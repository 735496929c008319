"""Application settings for the comic book catalog.

Environment variables are loaded from a ``.env`` file using ``python-dotenv``
and exposed through a Pydantic settings object. The storage root is handed to
:class:`~comicbooks.infrastructure.asset_store.AssetStore` explicitly by the
entry points; nothing below reads it back as ambient state.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

# Load environment variables from a .env file if present
load_dotenv()

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_UPLOAD_DIR = os.path.join("data", "uploads")
DEFAULT_DB_PATH = os.path.join("data", "comicbooks.sqlite3")
DEFAULT_PAGE_SIZE = 20


class Settings(BaseModel):
    """Immutable settings object used across the application."""

    storage_root: Path
    db_path: Path
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1)

    model_config = ConfigDict(frozen=True)


def _build_settings() -> Settings:
    """Construct the ``Settings`` instance based on environment variables."""

    storage_root = os.getenv("COMICBOOKS_UPLOAD_DIR", DEFAULT_UPLOAD_DIR).strip()
    if not storage_root:
        raise RuntimeError("COMICBOOKS_UPLOAD_DIR must not be empty")

    db_path = os.getenv("COMICBOOKS_DB_PATH", DEFAULT_DB_PATH).strip()
    if not db_path:
        raise RuntimeError("COMICBOOKS_DB_PATH must not be empty")

    raw_page_size = os.getenv("COMICBOOKS_PAGE_SIZE", str(DEFAULT_PAGE_SIZE))
    try:
        page_size = int(raw_page_size)
    except ValueError:
        raise RuntimeError(f"COMICBOOKS_PAGE_SIZE must be an integer, got {raw_page_size!r}")
    if page_size < 1:
        raise RuntimeError("COMICBOOKS_PAGE_SIZE must be at least 1")

    return Settings(storage_root=Path(storage_root), db_path=Path(db_path), page_size=page_size)


# Public settings instance
settings = _build_settings()

# Convenient exports
UPLOAD_DIR = settings.storage_root
DB_PATH = settings.db_path
