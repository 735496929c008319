"""Record store interfaces and implementations.

This package defines abstract repository interfaces for catalog records and
the SQLite adapters under :mod:`repositories.sqlite`.
"""
from __future__ import annotations

from .comic_books import ComicBook, ComicBooksRepo
from .profiles import Profile, ProfilesRepo

__all__ = ["ComicBook", "ComicBooksRepo", "Profile", "ProfilesRepo"]
