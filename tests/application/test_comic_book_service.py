from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Iterator, Optional

import pytest

from comicbooks.application.services.comic_book_service import ComicBookService
from comicbooks.domain.errors import InvalidRole, NotFound, PersistenceFailure, StorageUnavailable
from comicbooks.domain.value_objects.enums import AssetRole
from comicbooks.infrastructure.asset_store import AssetStore
from comicbooks.repositories.comic_books import ComicBook, ComicBooksRepo
from comicbooks.repositories.sqlite.comic_books_sqlite import ComicBooksRepoSqlite


@pytest.fixture
def repo() -> Iterator[ComicBooksRepoSqlite]:
    conn = sqlite3.connect(":memory:")
    yield ComicBooksRepoSqlite(conn)
    conn.close()


@pytest.fixture
def store(tmp_path: Path) -> AssetStore:
    return AssetStore(tmp_path / "assets")


class _FailingUpdateRepo(ComicBooksRepo):
    """Wraps a real repo but refuses updates."""

    def __init__(self, inner: ComicBooksRepo) -> None:
        self.inner = inner

    def get_by_id(self, comic_book_id: int) -> Optional[ComicBook]:
        return self.inner.get_by_id(comic_book_id)

    def list_all(self, *, limit: int = 100, offset: int = 0) -> list[ComicBook]:
        return self.inner.list_all(limit=limit, offset=offset)

    def count(self) -> int:
        return self.inner.count()

    def insert(self, comic_book: ComicBook) -> int:
        return self.inner.insert(comic_book)

    def update(self, comic_book: ComicBook) -> None:
        raise sqlite3.OperationalError("database is locked")

    def delete(self, comic_book_id: int) -> None:
        self.inner.delete(comic_book_id)


class _RecordingStore:
    def __init__(self) -> None:
        self.calls: list[tuple[int, AssetRole, str, bytes]] = []

    def store_asset(
        self, record_id: int, role: AssetRole | str, filename: str, content: bytes
    ) -> Path:
        self.calls.append((record_id, AssetRole.parse(role), filename, content))
        return Path("/data/assets") / str(record_id) / f"{record_id}-{AssetRole.parse(role).value}"


def test_save_inserts_then_updates(repo: ComicBooksRepoSqlite, store: AssetStore) -> None:
    svc = ComicBookService(repo, store)
    created = svc.save(ComicBook(id=None, title="Watchmen", author="Alan Moore"))
    assert created.id is not None

    svc.save(ComicBook(id=created.id, title="Watchmen (Absolute)", author="Alan Moore"))
    assert svc.find_one(created.id).title == "Watchmen (Absolute)"


def test_find_all_paginates(repo: ComicBooksRepoSqlite, store: AssetStore) -> None:
    svc = ComicBookService(repo, store)
    for i in range(5):
        svc.save(ComicBook(id=None, title=f"Issue #{i}"))

    first = svc.find_all(page=0, size=2)
    assert [b.title for b in first.items] == ["Issue #0", "Issue #1"]
    assert first.total == 5
    assert first.total_pages == 3
    assert first.has_next

    last = svc.find_all(page=2, size=2)
    assert [b.title for b in last.items] == ["Issue #4"]
    assert not last.has_next

    with pytest.raises(ValueError):
        svc.find_all(page=-1, size=2)


def test_find_one_missing_raises_not_found(repo: ComicBooksRepoSqlite, store: AssetStore) -> None:
    svc = ComicBookService(repo, store)
    with pytest.raises(NotFound) as exc_info:
        svc.find_one(404)
    assert exc_info.value.record_id == 404
    assert exc_info.value.entity == "ComicBook"


def test_delete_keeps_stored_assets(repo: ComicBooksRepoSqlite, store: AssetStore) -> None:
    svc = ComicBookService(repo, store)
    book = svc.save(ComicBook(id=None, title="Saga"))
    assert book.id is not None
    updated = svc.upload_asset(book.id, "cover", "saga.png", b"png")
    svc.delete(book.id)
    with pytest.raises(NotFound):
        svc.find_one(book.id)
    assert Path(updated.cover_path or "").read_bytes() == b"png"


def test_upload_cover_updates_record(repo: ComicBooksRepoSqlite, store: AssetStore) -> None:
    svc = ComicBookService(repo, store)
    repo.insert(ComicBook(id=42, title="Hellboy"))

    updated = svc.upload_asset(42, "cover", "photo.JPG", b"abc")

    expected = store.root / "42" / "42-cover.JPG"
    assert updated.cover_path == str(expected)
    assert updated.image_path is None
    assert expected.read_bytes() == b"abc"
    assert repo.get_by_id(42) == updated


def test_upload_background_sets_image_path(repo: ComicBooksRepoSqlite, store: AssetStore) -> None:
    svc = ComicBookService(repo, store)
    repo.insert(ComicBook(id=42, title="Hellboy", cover_path="/old/cover.png"))

    updated = svc.upload_asset(42, AssetRole.BACKGROUND, "coverimage", b"")

    expected = store.root / "42" / "42-background"
    assert updated.image_path == str(expected)
    assert updated.cover_path == "/old/cover.png"
    assert expected.read_bytes() == b""


def test_upload_missing_record_writes_nothing(
    repo: ComicBooksRepoSqlite, store: AssetStore
) -> None:
    svc = ComicBookService(repo, store)
    with pytest.raises(NotFound):
        svc.upload_asset(99, "cover", "x.png", b"abc")
    assert list(store.root.iterdir()) == []


def test_upload_invalid_role_fails_before_storage(repo: ComicBooksRepoSqlite) -> None:
    recording = _RecordingStore()
    svc = ComicBookService(repo, recording)
    repo.insert(ComicBook(id=1, title="Bone"))

    with pytest.raises(InvalidRole):
        svc.upload_asset(1, "poster", "x.png", b"abc")
    assert recording.calls == []
    assert repo.get_by_id(1) == ComicBook(id=1, title="Bone")


def test_upload_storage_failure_leaves_record_unchanged(
    repo: ComicBooksRepoSqlite, tmp_path: Path
) -> None:
    blocker = tmp_path / "blocked"
    blocker.write_text("")
    svc = ComicBookService(repo, AssetStore(blocker))
    repo.insert(ComicBook(id=3, title="Maus"))

    with pytest.raises(StorageUnavailable):
        svc.upload_asset(3, "cover", "m.png", b"abc")
    assert repo.get_by_id(3) == ComicBook(id=3, title="Maus")


def test_upload_persistence_failure_leaves_orphaned_file(
    repo: ComicBooksRepoSqlite, store: AssetStore
) -> None:
    repo.insert(ComicBook(id=8, title="Sandman"))
    svc = ComicBookService(_FailingUpdateRepo(repo), store)

    with pytest.raises(PersistenceFailure) as exc_info:
        svc.upload_asset(8, "cover", "s.jpg", b"dream")

    orphan = store.root / "8" / "8-cover.jpg"
    assert exc_info.value.orphaned_path == orphan
    assert isinstance(exc_info.value.cause, sqlite3.OperationalError)
    assert orphan.read_bytes() == b"dream"
    assert repo.get_by_id(8) == ComicBook(id=8, title="Sandman")


def test_upload_delegates_parsed_role(repo: ComicBooksRepoSqlite) -> None:
    recording = _RecordingStore()
    svc = ComicBookService(repo, recording)
    repo.insert(ComicBook(id=2, title="Akira"))

    updated = svc.upload_asset(2, "background", "akira.tif", b"\x00\x01")

    assert recording.calls == [(2, AssetRole.BACKGROUND, "akira.tif", b"\x00\x01")]
    assert updated.image_path == str(Path("/data/assets/2/2-background"))


class _DeletingStore:
    """Writes the asset, then removes the record as a concurrent delete would."""

    def __init__(self, inner: AssetStore, repo: ComicBooksRepo) -> None:
        self.inner = inner
        self.repo = repo

    def store_asset(
        self, record_id: int, role: AssetRole | str, filename: str, content: bytes
    ) -> Path:
        path = self.inner.store_asset(record_id, role, filename, content)
        self.repo.delete(record_id)
        return path


def test_upload_record_deleted_mid_upload_raises_persistence_failure(
    repo: ComicBooksRepoSqlite, store: AssetStore
) -> None:
    repo.insert(ComicBook(id=5, title="Bone"))
    svc = ComicBookService(repo, _DeletingStore(store, repo))

    with pytest.raises(PersistenceFailure) as exc_info:
        svc.upload_asset(5, "cover", "bone.png", b"png")

    orphan = store.root / "5" / "5-cover.png"
    assert exc_info.value.orphaned_path == orphan
    assert isinstance(exc_info.value.cause, NotFound)
    assert orphan.read_bytes() == b"png"
    assert repo.get_by_id(5) is None


def test_save_with_unknown_id_raises_not_found(
    repo: ComicBooksRepoSqlite, store: AssetStore
) -> None:
    svc = ComicBookService(repo, store)
    with pytest.raises(NotFound):
        svc.save(ComicBook(id=77, title="Nowhere"))
