"""Paged result model for listing endpoints."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Generic, TypeVar

from pydantic import BaseModel, Field, computed_field

T = TypeVar("T")


def page_slice(source: Sequence[T], page_size: int, page_number: int) -> list[T]:
    """Items of a 1-based page."""
    start = page_size * (page_number - 1)
    return list(source[start : start + page_size])


class PagedResult(BaseModel, Generic[T]):
    """One page of items plus the paging metadata a view needs."""

    items: list[T] = Field(default_factory=list)
    total_items: int = Field(default=0, ge=0)
    page_size: int = Field(gt=0)
    page_number: int = Field(default=1, ge=1)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.page_size)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    @computed_field  # type: ignore[prop-decorator]
    @property
    def next_page_number(self) -> int:
        return self.page_number + 1 if self.has_next_page else 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def previous_page_number(self) -> int:
        return self.page_number - 1 if self.has_previous_page else 0
