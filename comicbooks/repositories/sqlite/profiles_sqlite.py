from __future__ import annotations

import sqlite3
from typing import Optional

from comicbooks.domain.errors import NotFound

from ..profiles import Profile, ProfilesRepo


class ProfilesRepoSqlite(ProfilesRepo):
    """SQLite implementation of :class:`ProfilesRepo`."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS profiles (
                profile_id INTEGER PRIMARY KEY,
                username TEXT NOT NULL,
                display_name TEXT,
                bio TEXT
            )
            """
        )
        self._conn.commit()

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        cur = self._conn.execute(
            "SELECT profile_id, username, display_name, bio FROM profiles WHERE profile_id = ?",
            (profile_id,),
        )
        row = cur.fetchone()
        if row:
            return Profile(*row)
        return None

    def list_all(self, *, limit: int = 100, offset: int = 0) -> list[Profile]:
        cur = self._conn.execute(
            "SELECT profile_id, username, display_name, bio FROM profiles"
            " ORDER BY profile_id LIMIT ? OFFSET ?",
            (limit, offset),
        )
        return [Profile(*row) for row in cur.fetchall()]

    def count(self) -> int:
        row = self._conn.execute("SELECT COUNT(*) FROM profiles").fetchone()
        return int(row[0]) if row else 0

    def insert(self, profile: Profile) -> int:
        if profile.id is None:
            cur = self._conn.execute(
                "INSERT INTO profiles (username, display_name, bio) VALUES (?, ?, ?)",
                (profile.username, profile.display_name, profile.bio),
            )
        else:
            cur = self._conn.execute(
                "INSERT INTO profiles (profile_id, username, display_name, bio)"
                " VALUES (?, ?, ?, ?)",
                (profile.id, profile.username, profile.display_name, profile.bio),
            )
        self._conn.commit()
        rowid = cur.lastrowid
        if rowid is None:
            raise RuntimeError("SQLite insert failed: no lastrowid (table: profiles)")
        return int(rowid)

    def update(self, profile: Profile) -> None:
        cur = self._conn.execute(
            "UPDATE profiles SET username = ?, display_name = ?, bio = ? WHERE profile_id = ?",
            (profile.username, profile.display_name, profile.bio, profile.id),
        )
        self._conn.commit()
        if cur.rowcount == 0:
            raise NotFound("Profile", int(profile.id or 0))

    def delete(self, profile_id: int) -> None:
        self._conn.execute(
            "DELETE FROM profiles WHERE profile_id = ?",
            (profile_id,),
        )
        self._conn.commit()
