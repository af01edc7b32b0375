from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from content_api.domain.entities import Stage, WorkflowPlace


# --- Example Content ---
class ExampleDataRequest(BaseModel):
    """
    Content data for one dimension. Keys other than the ones below are
    stored as template data.
    """

    model_config = ConfigDict(extra="allow")

    template: str | None = None
    title: str | None = None
    excerpt_title: str | None = None
    excerpt_description: str | None = None
    seo_title: str | None = None
    seo_description: str | None = None
    seo_no_index: bool | None = None


class ExampleResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    locale: str | None
    stage: Stage
    template: str | None = None
    title: str | None = None
    excerpt_title: str | None = None
    excerpt_description: str | None = None
    seo_title: str | None = None
    seo_description: str | None = None
    seo_no_index: bool = False
    workflow_place: WorkflowPlace | None = None
    workflow_published: str | None = None
    available_locales: list[str] = []


# --- Lists ---
class PaginatedListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    embedded: dict[str, list[dict[str, Any]]] = Field(alias="_embedded")
    limit: int
    total: int
    page: int
    pages: int
