"""
Content component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from content_api.domain.entities import Example


class TimePort(Protocol):
    """Port for time operations."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...


class ExampleRepoPort(Protocol):
    """Repository interface for Example persistence."""

    def get_by_id(self, example_id: int) -> Example | None:
        """Get an example with all dimension contents."""
        ...

    def save(self, example: Example) -> Example:
        """Insert or update; assigns the id on first save."""
        ...

    def delete(self, example_id: int) -> None:
        """Delete an example and its dimension contents."""
        ...
