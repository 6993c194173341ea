"""Paginated list envelope returned by the collaborator API."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """DRF-style page: ``{count, next, previous, results}``."""

    count: int = 0
    next: str | None = None
    previous: str | None = None
    results: list[T] = []

    @property
    def has_next(self) -> bool:
        return self.next is not None
