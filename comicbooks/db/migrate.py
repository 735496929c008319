"""Simple SQLite migration runner."""

from __future__ import annotations

import re
import sqlite3
from pathlib import Path
from typing import Iterable

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def applied_versions(cursor: sqlite3.Cursor) -> set[str]:
    cursor.execute("CREATE TABLE IF NOT EXISTS schema_migrations (version TEXT PRIMARY KEY)")
    rows = cursor.execute("SELECT version FROM schema_migrations").fetchall()
    return {row[0] for row in rows}


def available_migrations(migrations_dir: Path = MIGRATIONS_DIR) -> Iterable[tuple[str, Path]]:
    pattern = re.compile(r"V(\d+)__.+\.sql$")
    for path in sorted(migrations_dir.glob("V*__*.sql")):
        match = pattern.match(path.name)
        if match:
            yield match.group(1), path


def apply_migrations(conn: sqlite3.Connection) -> list[str]:
    """Apply pending migrations on ``conn`` and return the versions applied."""
    cursor = conn.cursor()
    done = applied_versions(cursor)
    applied: list[str] = []
    for version, path in available_migrations():
        if version in done:
            continue
        cursor.executescript(path.read_text(encoding="utf-8"))
        cursor.execute("INSERT INTO schema_migrations (version) VALUES (?)", (version,))
        conn.commit()
        applied.append(version)
    return applied


def connect(db_path: str | Path) -> sqlite3.Connection:
    """Open ``db_path`` (creating parent directories) with the schema applied."""
    path = Path(db_path)
    if str(path) != ":memory:":
        path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path), timeout=30.0, check_same_thread=False)
    conn.execute("PRAGMA busy_timeout = 30000;")
    apply_migrations(conn)
    return conn


if __name__ == "__main__":
    from comicbooks.config.settings import settings

    connect(settings.db_path).close()
