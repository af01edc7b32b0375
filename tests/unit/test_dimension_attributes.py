"""
Dimension attribute parsing tests.
"""

from __future__ import annotations

import pytest

from content_api.domain.dimension import DimensionAttributes, InvalidDimensionAttributesError

LOCALES = ["en", "de"]


def _from(params: dict[str, str]) -> DimensionAttributes:
    return DimensionAttributes.from_query(params, locales=LOCALES, default_locale="en")


class TestFromQuery:
    def test_reads_locale_and_stage(self) -> None:
        attrs = _from({"locale": "de", "stage": "live"})

        assert attrs == DimensionAttributes(locale="de", stage="live")

    def test_defaults(self) -> None:
        assert _from({}) == DimensionAttributes(locale="en", stage="draft")

    def test_ignores_other_parameters(self) -> None:
        attrs = _from({"locale": "en", "action": "publish", "page": "2"})

        assert attrs == DimensionAttributes(locale="en", stage="draft")

    def test_unknown_locale_rejected(self) -> None:
        with pytest.raises(InvalidDimensionAttributesError) as exc:
            _from({"locale": "fr"})

        assert exc.value.key == "locale"

    def test_unknown_stage_rejected(self) -> None:
        with pytest.raises(InvalidDimensionAttributesError) as exc:
            _from({"stage": "archived"})

        assert exc.value.key == "stage"


class TestDerivedAttributes:
    def test_with_stage(self) -> None:
        attrs = DimensionAttributes(locale="en", stage="draft")

        assert attrs.with_stage("live") == DimensionAttributes(locale="en", stage="live")
