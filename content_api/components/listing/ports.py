"""
Listing component port definitions.
"""

from __future__ import annotations

from typing import Any, Protocol

from .models import ListQuery


class ListRepoPort(Protocol):
    """Executes resolved list queries."""

    def available_columns(self) -> list[str]:
        """Column keys field descriptors may reference."""
        ...

    def list(self, query: ListQuery) -> list[dict[str, Any]]:
        """Return one page of rows, keyed by field descriptor name."""
        ...

    def count(self, query: ListQuery) -> int:
        """Return the number of rows matching the query filters (ignores paging)."""
        ...
