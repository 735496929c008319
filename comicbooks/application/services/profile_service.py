from __future__ import annotations

from dataclasses import replace

from comicbooks.domain.errors import NotFound
from comicbooks.domain.value_objects.page import Page
from comicbooks.logging_config import get_logger
from comicbooks.repositories.profiles import Profile, ProfilesRepo

logger = get_logger("profile_service")


class ProfileService:
    """CRUD and pagination for user profiles."""

    def __init__(self, repo: ProfilesRepo) -> None:
        self._repo = repo

    def save(self, profile: Profile) -> Profile:
        logger.debug("Request to save Profile", extra={"profile": repr(profile)})
        if profile.id is None:
            new_id = self._repo.insert(profile)
            return replace(profile, id=new_id)
        self._repo.update(profile)
        return profile

    def find_all(self, page: int = 0, size: int = 20) -> Page[Profile]:
        logger.debug("Request to get all Profiles", extra={"page": page, "size": size})
        if page < 0 or size < 1:
            raise ValueError("page must be >= 0 and size must be >= 1")
        items = self._repo.list_all(limit=size, offset=page * size)
        return Page(items=items, page=page, size=size, total=self._repo.count())

    def find_one(self, profile_id: int) -> Profile:
        logger.debug("Request to get Profile", extra={"profile_id": profile_id})
        profile = self._repo.get_by_id(profile_id)
        if profile is None:
            raise NotFound("Profile", profile_id)
        return profile

    def delete(self, profile_id: int) -> None:
        logger.debug("Request to delete Profile", extra={"profile_id": profile_id})
        self._repo.delete(profile_id)
