from datetime import UTC, datetime
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, Field

# --- Enums / Literals ---
Stage = Literal["draft", "live"]
WorkflowPlace = Literal["unpublished", "draft", "published"]

STAGE_DRAFT: Stage = "draft"
STAGE_LIVE: Stage = "live"
STAGES: tuple[Stage, ...] = (STAGE_DRAFT, STAGE_LIVE)


def _utcnow() -> datetime:
    return datetime.now(UTC)


# --- Dimension Content ---


class ExampleDimensionContent(BaseModel):
    """
    Stored content of an Example for a single (locale, stage) dimension.

    The unlocalized dimension (locale=None) carries values shared by all
    locales, e.g. available_locales. Localized dimensions carry the
    template, excerpt, seo and workflow data.
    """

    locale: str | None = None
    stage: Stage = STAGE_DRAFT

    # Template
    title: str | None = None
    template_key: str | None = None
    template_data: dict[str, Any] = Field(default_factory=dict)

    # Excerpt
    excerpt_title: str | None = None
    excerpt_description: str | None = None

    # Seo
    seo_title: str | None = None
    seo_description: str | None = None
    seo_no_index: bool = False

    # Workflow
    workflow_place: WorkflowPlace | None = None
    workflow_published: datetime | None = None

    # Unlocalized only
    available_locales: list[str] | None = None


# --- Example ---


class Example(BaseModel):
    """Main entity; its content lives in dimension contents."""

    RESOURCE_KEY: ClassVar[str] = "examples"
    TYPE_KEY: ClassVar[str] = "example"

    id: int | None = None
    created: datetime = Field(default_factory=_utcnow)
    changed: datetime = Field(default_factory=_utcnow)
    dimension_contents: list[ExampleDimensionContent] = Field(default_factory=list)

    def find_dimension_content(
        self, locale: str | None, stage: Stage
    ) -> ExampleDimensionContent | None:
        for dimension_content in self.dimension_contents:
            if dimension_content.locale == locale and dimension_content.stage == stage:
                return dimension_content
        return None

    def add_dimension_content(self, dimension_content: ExampleDimensionContent) -> None:
        existing = self.find_dimension_content(dimension_content.locale, dimension_content.stage)
        if existing is not None:
            self.dimension_contents.remove(existing)
        self.dimension_contents.append(dimension_content)

    def remove_dimension_content(self, locale: str | None, stage: Stage) -> None:
        existing = self.find_dimension_content(locale, stage)
        if existing is not None:
            self.dimension_contents.remove(existing)
