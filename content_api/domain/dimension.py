"""
Dimension attributes - select which (locale, stage) projection of a content
entity an operation works on.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from content_api.domain.entities import STAGE_DRAFT, STAGES, Stage


class InvalidDimensionAttributesError(Exception):
    """Raised when query parameters do not describe a valid dimension."""

    def __init__(self, key: str, value: Any, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid dimension attribute '{key}'={value!r}: {reason}")


@dataclass(frozen=True)
class DimensionAttributes:
    locale: str | None = None
    stage: Stage = STAGE_DRAFT

    def with_stage(self, stage: Stage) -> DimensionAttributes:
        return DimensionAttributes(locale=self.locale, stage=stage)

    @classmethod
    def from_query(
        cls,
        params: Mapping[str, Any],
        *,
        locales: list[str],
        default_locale: str,
    ) -> DimensionAttributes:
        """
        Build attributes from request query parameters, e.g.
        {"locale": "en", "stage": "draft", "action": "publish"}.

        Keys other than locale and stage are ignored.
        """
        locale = params.get("locale") or default_locale
        stage = params.get("stage") or STAGE_DRAFT

        if locale not in locales:
            raise InvalidDimensionAttributesError(
                "locale", locale, f"must be one of {locales}"
            )
        if stage not in STAGES:
            raise InvalidDimensionAttributesError("stage", stage, f"must be one of {list(STAGES)}")

        return cls(locale=locale, stage=stage)
