from __future__ import annotations

from enum import Enum

from ..errors import InvalidRole


class AssetRole(str, Enum):
    COVER = "cover"
    BACKGROUND = "background"

    @classmethod
    def parse(cls, value: "AssetRole | str") -> "AssetRole":
        """Return the role for ``value`` or raise :class:`InvalidRole`."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidRole(value) from None
