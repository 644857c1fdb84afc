"""Pagination result model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Page(BaseModel):
    """One page of wrapped entities plus the size of the whole result set.

    items holds repository instances, not plain data, hence
    arbitrary_types_allowed.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total_items: int = Field(default=0, ge=0)
    items: list[Any] = Field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return -(-self.total_items // self.limit)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages
