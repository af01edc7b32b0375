"""
Listing component - field descriptors, list builder and request initialization.

The list builder collects select fields, sorting, search, id filters and
paging, then resolves them into a ListQuery for the list repository.
Field descriptors come from the `lists` section of the rules file.
"""

from __future__ import annotations

import logging
from typing import Any

from content_api.rules.models import Rules

from .models import (
    FieldDescriptor,
    ListBuilderError,
    ListQuery,
    ListRequest,
    PaginatedRepresentation,
    SortOrder,
)
from .ports import ListRepoPort

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20
DEFAULT_MAX_LIMIT = 100

# Largest value SQLite can bind as INTEGER
SQLITE_MAX_INTEGER = 2**63 - 1


# --- Field Descriptors ---


def get_field_descriptors(
    rules: Rules,
    resource_key: str,
    available_columns: list[str],
) -> dict[str, FieldDescriptor]:
    """
    Build the field descriptors configured for a resource.

    Raises ListBuilderError if the resource has no list configuration or a
    descriptor references a column the repository does not provide.
    """
    list_rules = rules.lists.get(resource_key)
    if list_rules is None:
        raise ListBuilderError(f"No list configuration for resource '{resource_key}'")

    descriptors: dict[str, FieldDescriptor] = {}
    for rule in list_rules.fields:
        if rule.column not in available_columns:
            raise ListBuilderError(
                f"Field '{rule.name}' references unknown column '{rule.column}'"
            )
        descriptors[rule.name] = FieldDescriptor(
            name=rule.name,
            column=rule.column,
            visibility=rule.visibility,
            searchable=rule.searchable,
            sortable=rule.sortable,
        )
    return descriptors


# --- List Builder ---


class ListBuilder:
    """Accumulates list parameters and executes them against a list repository."""

    def __init__(
        self,
        repo: ListRepoPort,
        resource_key: str,
        *,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = DEFAULT_MAX_LIMIT,
    ) -> None:
        self._repo = repo
        self.resource_key = resource_key
        self._max_limit = max_limit
        self._parameters: dict[str, Any] = {}
        self._select: list[FieldDescriptor] = []
        self._sort_by: FieldDescriptor | None = None
        self._sort_order: SortOrder = "asc"
        self._search: str | None = None
        self._search_fields: list[FieldDescriptor] = []
        self._ids: list[int] | None = None
        self._excluded_ids: list[int] = []
        self._limit = default_limit
        self._page = 1

    # Parameters

    def set_parameter(self, name: str, value: Any) -> None:
        self._parameters[name] = value

    def get_parameter(self, name: str) -> Any:
        return self._parameters.get(name)

    # Fields

    def add_select_field(self, descriptor: FieldDescriptor) -> None:
        if descriptor.visibility == "never":
            raise ListBuilderError(f"Field '{descriptor.name}' cannot be selected", "fields")
        if descriptor not in self._select:
            self._select.append(descriptor)

    def sort(self, descriptor: FieldDescriptor, order: str = "asc") -> None:
        if not descriptor.sortable:
            raise ListBuilderError(f"Field '{descriptor.name}' is not sortable", "sort_by")
        if order not in ("asc", "desc"):
            raise ListBuilderError(f"Invalid sort order '{order}'", "sort_order")
        self._sort_by = descriptor
        self._sort_order = order  # type: ignore[assignment]

    def search(self, term: str) -> None:
        self._search = term

    def add_search_field(self, descriptor: FieldDescriptor) -> None:
        if not descriptor.searchable:
            raise ListBuilderError(f"Field '{descriptor.name}' is not searchable", "search_fields")
        if descriptor not in self._search_fields:
            self._search_fields.append(descriptor)

    def in_ids(self, ids: list[int]) -> None:
        self._ids = list(ids)

    def not_in_ids(self, ids: list[int]) -> None:
        self._excluded_ids = list(ids)

    # Paging

    def set_limit(self, limit: int) -> None:
        if limit < 1:
            raise ListBuilderError("limit must be at least 1", "limit")
        self._limit = min(limit, self._max_limit)

    def get_limit(self) -> int:
        return self._limit

    def set_current_page(self, page: int) -> None:
        if page < 1:
            raise ListBuilderError("page must be at least 1", "page")
        self._page = page

    def get_current_page(self) -> int:
        return self._page

    # Execution

    def build_query(self) -> ListQuery:
        locale = self.get_parameter("locale")
        if not locale:
            raise ListBuilderError("The 'locale' parameter is required for lists", "locale")

        offset = (self._page - 1) * self._limit
        if offset > SQLITE_MAX_INTEGER:
            raise ListBuilderError(f"page {self._page} is out of range", "page")

        return ListQuery(
            locale=locale,
            select=list(self._select),
            sort_by=self._sort_by,
            sort_order=self._sort_order,
            search=self._search,
            search_fields=list(self._search_fields),
            ids=self._ids,
            excluded_ids=list(self._excluded_ids),
            limit=self._limit,
            offset=offset,
        )

    def execute(self) -> list[dict[str, Any]]:
        query = self.build_query()
        if not query.select:
            raise ListBuilderError("No fields selected", "fields")
        rows = self._repo.list(query)
        logger.debug(
            "List %s page=%d limit=%d returned %d rows",
            self.resource_key,
            self._page,
            self._limit,
            len(rows),
        )
        return rows

    def count(self) -> int:
        return self._repo.count(self.build_query())


# --- Request Initialization ---


def _split(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _parse_ids(value: str | None, parameter: str) -> list[int]:
    try:
        ids = [int(part) for part in _split(value)]
    except ValueError as e:
        raise ListBuilderError(f"'{parameter}' must be a comma separated list of ids", parameter) from e
    if any(abs(i) > SQLITE_MAX_INTEGER for i in ids):
        raise ListBuilderError(f"'{parameter}' contains an id out of range", parameter)
    return ids


def _lookup(
    descriptors: dict[str, FieldDescriptor], name: str, parameter: str
) -> FieldDescriptor:
    descriptor = descriptors.get(name)
    if descriptor is None:
        raise ListBuilderError(f"Unknown field '{name}'", parameter)
    return descriptor


def initialize_list_builder(
    builder: ListBuilder,
    descriptors: dict[str, FieldDescriptor],
    request: ListRequest,
) -> ListBuilder:
    """
    Apply request parameters (fields, sorting, search, ids, paging) to a builder.

    When `fields` is omitted all default-visible fields are selected; fields
    with visibility "always" are selected in every case.
    """
    if request.fields:
        for name in _split(request.fields):
            builder.add_select_field(_lookup(descriptors, name, "fields"))
    else:
        for descriptor in descriptors.values():
            if descriptor.is_default:
                builder.add_select_field(descriptor)

    for descriptor in descriptors.values():
        if descriptor.visibility == "always":
            builder.add_select_field(descriptor)

    if request.sort_by:
        builder.sort(
            _lookup(descriptors, request.sort_by, "sort_by"),
            (request.sort_order or "asc").lower(),
        )

    if request.search:
        builder.search(request.search)
        names = _split(request.search_fields) or [
            d.name for d in descriptors.values() if d.searchable
        ]
        for name in names:
            builder.add_search_field(_lookup(descriptors, name, "search_fields"))

    if request.ids is not None:
        builder.in_ids(_parse_ids(request.ids, "ids"))
    if request.excluded_ids:
        builder.not_in_ids(_parse_ids(request.excluded_ids, "excluded_ids"))

    if request.limit is not None:
        builder.set_limit(request.limit)
    if request.page is not None:
        builder.set_current_page(request.page)

    return builder


def run_list(
    request: ListRequest,
    *,
    repo: ListRepoPort,
    rules: Rules,
    resource_key: str,
) -> PaginatedRepresentation:
    """Build, initialize and execute a list for one resource."""
    descriptors = get_field_descriptors(rules, resource_key, repo.available_columns())
    list_rules = rules.lists[resource_key]

    builder = ListBuilder(
        repo,
        resource_key,
        default_limit=list_rules.default_limit,
        max_limit=list_rules.max_limit,
    )
    builder.set_parameter("locale", request.locale)
    initialize_list_builder(builder, descriptors, request)
    if not request.sort_by and list_rules.default_sort_by in descriptors:
        builder.sort(descriptors[list_rules.default_sort_by])

    return PaginatedRepresentation(
        items=builder.execute(),
        resource_key=resource_key,
        page=builder.get_current_page(),
        limit=builder.get_limit(),
        total=builder.count(),
    )
