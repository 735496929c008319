from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from typing import Sequence

from comicbooks.application.services.profile_service import ProfileService
from comicbooks.cli.comic_books import exit_code_for
from comicbooks.db.migrate import connect
from comicbooks.domain.errors import CatalogError, http_status_for
from comicbooks.repositories.profiles import Profile
from comicbooks.repositories.sqlite.profiles_sqlite import ProfilesRepoSqlite


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Manage user profiles")
    p.add_argument("--db", default=None, help="Path to SQLite DB (default: from settings)")
    sub = p.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Create a profile")
    create.add_argument("--username", required=True)
    create.add_argument("--display-name", default=None)
    create.add_argument("--bio", default=None)

    get = sub.add_parser("get", help="Show one profile")
    get.add_argument("--id", type=int, required=True)

    ls = sub.add_parser("list", help="List profiles page by page")
    ls.add_argument("--page", type=int, default=0)
    ls.add_argument("--size", type=int, default=None, help="Page size (default: from settings)")

    delete = sub.add_parser("delete", help="Delete a profile")
    delete.add_argument("--id", type=int, required=True)
    return p


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    db_path = args.db
    page_size = getattr(args, "size", None)
    if db_path is None or (args.command == "list" and page_size is None):
        # Settings are only read when an option was left to its default
        from comicbooks.config.settings import settings

        db_path = db_path or settings.db_path
        if page_size is None:
            page_size = settings.page_size

    conn = connect(db_path)
    try:
        svc = ProfileService(ProfilesRepoSqlite(conn))
        try:
            if args.command == "create":
                profile = svc.save(
                    Profile(
                        id=None,
                        username=args.username,
                        display_name=args.display_name,
                        bio=args.bio,
                    )
                )
                print(json.dumps(asdict(profile), ensure_ascii=False))
            elif args.command == "get":
                print(json.dumps(asdict(svc.find_one(args.id)), ensure_ascii=False))
            elif args.command == "list":
                try:
                    page = svc.find_all(page=args.page, size=int(page_size))
                except ValueError as exc:
                    print(f"error (400): {exc}", file=sys.stderr)
                    return 1
                for profile in page.items:
                    print(f"{profile.id}: {profile.username} ({profile.display_name or '-'})")
                print(f"page {page.page + 1}/{max(page.total_pages, 1)}, total {page.total}")
            else:
                svc.delete(args.id)
                print(f"Deleted profile {args.id}")
        except CatalogError as exc:
            print(f"error ({http_status_for(exc)}): {exc}", file=sys.stderr)
            return exit_code_for(exc)
        return 0
    finally:
        conn.close()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
