from __future__ import annotations

import sqlite3
from typing import Optional

from comicbooks.domain.errors import NotFound

from ..comic_books import ComicBook, ComicBooksRepo

_COLUMNS = "comic_book_id, title, author, description, cover_path, image_path"


class ComicBooksRepoSqlite(ComicBooksRepo):
    """SQLite implementation of :class:`ComicBooksRepo`."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS comic_books (
                comic_book_id INTEGER PRIMARY KEY,
                title TEXT NOT NULL,
                author TEXT,
                description TEXT,
                cover_path TEXT,
                image_path TEXT
            )
            """
        )
        self._conn.commit()

    def get_by_id(self, comic_book_id: int) -> Optional[ComicBook]:
        cur = self._conn.execute(
            f"SELECT {_COLUMNS} FROM comic_books WHERE comic_book_id = ?",
            (comic_book_id,),
        )
        row = cur.fetchone()
        if row:
            return ComicBook(*row)
        return None

    def list_all(self, *, limit: int = 100, offset: int = 0) -> list[ComicBook]:
        cur = self._conn.execute(
            f"SELECT {_COLUMNS} FROM comic_books ORDER BY comic_book_id LIMIT ? OFFSET ?",
            (limit, offset),
        )
        return [ComicBook(*row) for row in cur.fetchall()]

    def count(self) -> int:
        row = self._conn.execute("SELECT COUNT(*) FROM comic_books").fetchone()
        return int(row[0]) if row else 0

    def insert(self, comic_book: ComicBook) -> int:
        values = (
            comic_book.title,
            comic_book.author,
            comic_book.description,
            comic_book.cover_path,
            comic_book.image_path,
        )
        if comic_book.id is None:
            cur = self._conn.execute(
                "INSERT INTO comic_books (title, author, description, cover_path, image_path)"
                " VALUES (?, ?, ?, ?, ?)",
                values,
            )
        else:
            cur = self._conn.execute(
                f"INSERT INTO comic_books ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
                (comic_book.id, *values),
            )
        self._conn.commit()
        rowid = cur.lastrowid
        if rowid is None:
            raise RuntimeError("SQLite insert failed: no lastrowid (table: comic_books)")
        return int(rowid)

    def update(self, comic_book: ComicBook) -> None:
        cur = self._conn.execute(
            """
            UPDATE comic_books
            SET title = ?, author = ?, description = ?, cover_path = ?, image_path = ?
            WHERE comic_book_id = ?
            """,
            (
                comic_book.title,
                comic_book.author,
                comic_book.description,
                comic_book.cover_path,
                comic_book.image_path,
                comic_book.id,
            ),
        )
        self._conn.commit()
        if cur.rowcount == 0:
            raise NotFound("ComicBook", int(comic_book.id or 0))

    def delete(self, comic_book_id: int) -> None:
        self._conn.execute(
            "DELETE FROM comic_books WHERE comic_book_id = ?",
            (comic_book_id,),
        )
        self._conn.commit()
