"""
Content component models: the resolved projection and component errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from content_api.domain.dimension import DimensionAttributes
from content_api.domain.entities import ExampleDimensionContent, Stage, WorkflowPlace

# --- Errors ---


class ContentManagerError(Exception):
    """Raised when content cannot be persisted or transitioned as requested."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class ContentNotFoundError(Exception):
    """Raised when an entity has no content for the requested dimension."""

    def __init__(self, entity_id: int | None, attributes: DimensionAttributes) -> None:
        self.entity_id = entity_id
        self.attributes = attributes
        super().__init__(
            f"No content found for entity {entity_id} "
            f"(locale={attributes.locale!r}, stage={attributes.stage!r})"
        )


# --- Projection ---


@dataclass(frozen=True)
class ContentProjection:
    """
    Locale/stage specific view of a content entity.

    Built by layering the localized dimension content over the unlocalized
    one; localized values win wherever they are set.
    """

    entity_id: int | None
    locale: str | None
    stage: Stage
    title: str | None = None
    template_key: str | None = None
    template_data: dict[str, Any] = field(default_factory=dict)
    excerpt_title: str | None = None
    excerpt_description: str | None = None
    seo_title: str | None = None
    seo_description: str | None = None
    seo_no_index: bool = False
    workflow_place: WorkflowPlace | None = None
    workflow_published: datetime | None = None
    available_locales: list[str] = field(default_factory=list)

    def get_workflow_place(self) -> WorkflowPlace | None:
        return self.workflow_place

    @classmethod
    def merge(
        cls,
        entity_id: int | None,
        unlocalized: ExampleDimensionContent | None,
        localized: ExampleDimensionContent,
    ) -> ContentProjection:
        def pick(name: str) -> Any:
            value = getattr(localized, name)
            if value is None and unlocalized is not None:
                return getattr(unlocalized, name)
            return value

        template_data: dict[str, Any] = {}
        if unlocalized is not None:
            template_data.update(unlocalized.template_data)
        template_data.update(localized.template_data)

        return cls(
            entity_id=entity_id,
            locale=localized.locale,
            stage=localized.stage,
            title=pick("title"),
            template_key=pick("template_key"),
            template_data=template_data,
            excerpt_title=pick("excerpt_title"),
            excerpt_description=pick("excerpt_description"),
            seo_title=pick("seo_title"),
            seo_description=pick("seo_description"),
            seo_no_index=localized.seo_no_index,
            workflow_place=localized.workflow_place,
            workflow_published=localized.workflow_published,
            available_locales=list(
                (unlocalized.available_locales if unlocalized is not None else None) or []
            ),
        )
