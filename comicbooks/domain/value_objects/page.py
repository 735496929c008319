from __future__ import annotations

import math
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of a paginated listing (0-based page index)."""

    items: list[Any] = Field(default_factory=list)
    page: int = Field(0, ge=0, description="Zero-based page index")
    size: int = Field(..., ge=1, description="Requested page size")
    total: int = Field(0, ge=0, description="Total number of records")

    model_config = ConfigDict(frozen=True)

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.total else 0

    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.total_pages
