"""
Listing component models.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Literal

from content_api.rules.models import FieldVisibility

SortOrder = Literal["asc", "desc"]


class ListBuilderError(Exception):
    """Raised when list parameters reference unknown or disallowed fields."""

    def __init__(self, message: str, parameter: str | None = None) -> None:
        self.parameter = parameter
        super().__init__(message)


@dataclass(frozen=True)
class FieldDescriptor:
    """A listable field: API name plus the storage column it is read from."""

    name: str
    column: str
    visibility: FieldVisibility = "yes"
    searchable: bool = False
    sortable: bool = True

    @property
    def is_default(self) -> bool:
        return self.visibility in ("always", "yes")


@dataclass(frozen=True)
class ListQuery:
    """Fully resolved query handed to the list repository."""

    locale: str
    select: list[FieldDescriptor]
    sort_by: FieldDescriptor | None = None
    sort_order: SortOrder = "asc"
    search: str | None = None
    search_fields: list[FieldDescriptor] = field(default_factory=list)
    ids: list[int] | None = None
    excluded_ids: list[int] = field(default_factory=list)
    limit: int = 20
    offset: int = 0


@dataclass(frozen=True)
class ListRequest:
    """Raw list parameters as they arrive on the request."""

    locale: str | None = None
    fields: str | None = None
    sort_by: str | None = None
    sort_order: str | None = None
    search: str | None = None
    search_fields: str | None = None
    page: int | None = None
    limit: int | None = None
    ids: str | None = None
    excluded_ids: str | None = None


@dataclass(frozen=True)
class PaginatedRepresentation:
    items: list[dict[str, Any]]
    resource_key: str
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        if self.limit <= 0:
            return 1
        return max(1, math.ceil(self.total / self.limit))

    def to_dict(self) -> dict[str, Any]:
        return {
            "_embedded": {self.resource_key: self.items},
            "limit": self.limit,
            "total": self.total,
            "page": self.page,
            "pages": self.pages,
        }
