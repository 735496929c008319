from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class ComicBook:
    id: int | None
    title: str
    author: Optional[str] = None
    description: Optional[str] = None
    cover_path: Optional[str] = None
    image_path: Optional[str] = None


class ComicBooksRepo(ABC):
    """Repository interface for comic books."""

    @abstractmethod
    def get_by_id(self, comic_book_id: int) -> Optional[ComicBook]:
        """Retrieve a comic book by identifier."""

    @abstractmethod
    def list_all(self, *, limit: int = 100, offset: int = 0) -> list[ComicBook]:
        """List comic books ordered by identifier with pagination."""

    @abstractmethod
    def count(self) -> int:
        """Return the total number of comic books."""

    @abstractmethod
    def insert(self, comic_book: ComicBook) -> int:
        """Persist a new comic book and return its identifier."""

    @abstractmethod
    def update(self, comic_book: ComicBook) -> None:
        """Update an existing comic book.

        :raises NotFound: no comic book with ``comic_book.id`` exists.
        """

    @abstractmethod
    def delete(self, comic_book_id: int) -> None:
        """Remove a comic book by identifier."""
