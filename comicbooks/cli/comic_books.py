from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Sequence

from comicbooks.application.services.comic_book_service import ComicBookService
from comicbooks.db.migrate import connect
from comicbooks.domain.errors import CatalogError, http_status_for
from comicbooks.domain.value_objects.enums import AssetRole
from comicbooks.infrastructure.asset_store import AssetStore
from comicbooks.repositories.comic_books import ComicBook
from comicbooks.repositories.sqlite.comic_books_sqlite import ComicBooksRepoSqlite


def _dump(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2, default=str)


def exit_code_for(exc: CatalogError) -> int:
    """1 for client errors (4xx), 2 for server errors (5xx)."""
    return 1 if http_status_for(exc) < 500 else 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Manage comic books and their images")
    p.add_argument("--db", default=None, help="Path to SQLite DB (default: from settings)")
    p.add_argument(
        "--storage-root", default=None, help="Asset storage directory (default: from settings)"
    )
    sub = p.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Create a comic book")
    create.add_argument("--title", required=True)
    create.add_argument("--author", default=None)
    create.add_argument("--description", default=None)

    get = sub.add_parser("get", help="Show one comic book")
    get.add_argument("--id", type=int, required=True)

    ls = sub.add_parser("list", help="List comic books page by page")
    ls.add_argument("--page", type=int, default=0)
    ls.add_argument("--size", type=int, default=None)

    delete = sub.add_parser("delete", help="Delete a comic book (stored images are kept)")
    delete.add_argument("--id", type=int, required=True)

    upload = sub.add_parser("upload", help="Upload a cover or background image")
    upload.add_argument("--id", type=int, required=True)
    upload.add_argument(
        "--role", required=True, help="One of: " + ", ".join(r.value for r in AssetRole)
    )
    upload.add_argument("--filename", default=None, help="Name to take the extension from")
    upload.add_argument("file", type=Path)
    return p


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    db_path, storage_root = args.db, args.storage_root
    page_size = getattr(args, "size", None)
    if db_path is None or storage_root is None or (args.command == "list" and page_size is None):
        # Settings are only read when an option was left to its default
        from comicbooks.config.settings import settings

        db_path = db_path or settings.db_path
        storage_root = storage_root or settings.storage_root
        if page_size is None:
            page_size = settings.page_size

    conn = connect(db_path)
    try:
        svc = ComicBookService(ComicBooksRepoSqlite(conn), AssetStore(storage_root))
        try:
            if args.command == "create":
                book = svc.save(
                    ComicBook(
                        id=None, title=args.title, author=args.author, description=args.description
                    )
                )
                print(_dump(asdict(book)))
            elif args.command == "get":
                print(_dump(asdict(svc.find_one(args.id))))
            elif args.command == "list":
                try:
                    page = svc.find_all(page=args.page, size=int(page_size))
                except ValueError as exc:
                    print(f"error (400): {exc}", file=sys.stderr)
                    return 1
                print(
                    _dump(
                        {
                            "items": [asdict(b) for b in page.items],
                            "page": page.page,
                            "size": page.size,
                            "total": page.total,
                            "total_pages": page.total_pages,
                        }
                    )
                )
            elif args.command == "delete":
                svc.delete(args.id)
                print(f"Deleted comic book {args.id}")
            else:
                content = args.file.read_bytes()
                filename = args.filename or args.file.name
                book = svc.upload_asset(args.id, args.role, filename, content)
                print(_dump(asdict(book)))
        except CatalogError as exc:
            print(f"error ({http_status_for(exc)}): {exc}", file=sys.stderr)
            return exit_code_for(exc)
        return 0
    finally:
        conn.close()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
