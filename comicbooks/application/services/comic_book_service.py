from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Protocol

from comicbooks.domain.errors import NotFound, PersistenceFailure
from comicbooks.domain.value_objects.enums import AssetRole
from comicbooks.domain.value_objects.page import Page
from comicbooks.logging_config import get_logger
from comicbooks.repositories.comic_books import ComicBook, ComicBooksRepo

logger = get_logger("comic_book_service")


class _AssetStoreProto(Protocol):
    def store_asset(
        self, record_id: int, role: AssetRole | str, filename: str, content: bytes
    ) -> Path: ...


class ComicBookService:
    """Manage comic book records and their cover/background images.

    - CRUD and pagination are delegated to a :class:`ComicBooksRepo`.
    - ``upload_asset`` stores the file first and then records its path; a
      failed record update leaves the file orphaned and raises
      :class:`PersistenceFailure`.
    """

    def __init__(self, repo: ComicBooksRepo, asset_store: _AssetStoreProto) -> None:
        self._repo = repo
        self._assets = asset_store

    def save(self, comic_book: ComicBook) -> ComicBook:
        logger.debug("Request to save ComicBook", extra={"comic_book": repr(comic_book)})
        if comic_book.id is None:
            new_id = self._repo.insert(comic_book)
            return replace(comic_book, id=new_id)
        self._repo.update(comic_book)
        return comic_book

    def find_all(self, page: int = 0, size: int = 20) -> Page[ComicBook]:
        logger.debug("Request to get all ComicBooks", extra={"page": page, "size": size})
        if page < 0 or size < 1:
            raise ValueError("page must be >= 0 and size must be >= 1")
        items = self._repo.list_all(limit=size, offset=page * size)
        return Page(items=items, page=page, size=size, total=self._repo.count())

    def find_one(self, comic_book_id: int) -> ComicBook:
        logger.debug("Request to get ComicBook", extra={"comic_book_id": comic_book_id})
        comic_book = self._repo.get_by_id(comic_book_id)
        if comic_book is None:
            raise NotFound("ComicBook", comic_book_id)
        return comic_book

    def delete(self, comic_book_id: int) -> None:
        # Stored assets are left on disk.
        logger.debug("Request to delete ComicBook", extra={"comic_book_id": comic_book_id})
        self._repo.delete(comic_book_id)

    def upload_asset(
        self, comic_book_id: int, role: AssetRole | str, filename: str, content: bytes
    ) -> ComicBook:
        """Store ``content`` as the ``role`` image of a comic book and record its path.

        :raises NotFound: no comic book with ``comic_book_id``.
        :raises InvalidRole: ``role`` is neither ``cover`` nor ``background``.
        :raises StorageUnavailable: the file could not be written; the record is unchanged.
        :raises PersistenceFailure: the file was written but the record update failed.
        """
        comic_book = self.find_one(comic_book_id)
        asset_role = AssetRole.parse(role)
        stored_path = self._assets.store_asset(comic_book_id, asset_role, filename, content)

        if asset_role is AssetRole.COVER:
            updated = replace(comic_book, cover_path=str(stored_path))
        else:
            updated = replace(comic_book, image_path=str(stored_path))

        try:
            self._repo.update(updated)
        except Exception as exc:
            logger.error(
                "Asset stored but record update failed; file is orphaned",
                extra={"comic_book_id": comic_book_id, "path": str(stored_path)},
            )
            raise PersistenceFailure(comic_book_id, stored_path, exc) from exc
        return updated
