from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class Profile:
    id: int | None
    username: str
    display_name: Optional[str] = None
    bio: Optional[str] = None


class ProfilesRepo(ABC):
    """Repository interface for user profiles."""

    @abstractmethod
    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        """Retrieve a profile by identifier."""

    @abstractmethod
    def list_all(self, *, limit: int = 100, offset: int = 0) -> list[Profile]:
        """List profiles ordered by identifier with pagination."""

    @abstractmethod
    def count(self) -> int:
        """Return the total number of profiles."""

    @abstractmethod
    def insert(self, profile: Profile) -> int:
        """Persist a new profile and return its identifier."""

    @abstractmethod
    def update(self, profile: Profile) -> None:
        """Update an existing profile.

        :raises NotFound: no profile with ``profile.id`` exists.
        """

    @abstractmethod
    def delete(self, profile_id: int) -> None:
        """Remove a profile by identifier."""
