from __future__ import annotations

import argparse
import sys
from pathlib import Path


def main() -> int:
    # Ensure project root (containing 'comicbooks') is importable
    project_root = Path(__file__).resolve().parents[1]
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))

    from comicbooks.db.migrate import connect

    parser = argparse.ArgumentParser(description="Initialize SQLite database schema")
    parser.add_argument(
        "--db",
        default=None,
        help="Path to SQLite DB file (default: COMICBOOKS_DB_PATH from settings)",
    )
    args = parser.parse_args()

    db_path = args.db
    if db_path is None:
        from comicbooks.config.settings import settings

        db_path = settings.db_path

    # connect() creates parent directories and applies pending migrations
    connect(db_path).close()

    print(f"Initialized schema at: {Path(db_path).resolve()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
