from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from content_api.domain.entities import WorkflowPlace

FieldVisibility = Literal["always", "yes", "no", "never"]


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class ContentRules(BaseModel):
    locales: list[str]
    default_locale: str
    templates: list[str]
    default_template: str

    @model_validator(mode="after")
    def _defaults_are_known(self) -> "ContentRules":
        if self.default_locale not in self.locales:
            raise ValueError(f"default_locale '{self.default_locale}' not in locales")
        if self.default_template not in self.templates:
            raise ValueError(f"default_template '{self.default_template}' not in templates")
        return self


class TransitionRule(BaseModel):
    from_places: list[WorkflowPlace] = Field(alias="from")
    to: WorkflowPlace

    model_config = ConfigDict(populate_by_name=True)


class WorkflowRules(BaseModel):
    transitions: dict[str, TransitionRule]


class FieldDescriptorRule(BaseModel):
    name: str
    column: str
    visibility: FieldVisibility = "yes"
    searchable: bool = False
    sortable: bool = True


class ListRules(BaseModel):
    default_limit: int = 20
    max_limit: int = 100
    default_sort_by: str = "id"
    fields: list[FieldDescriptorRule]


class Rules(BaseModel):
    project: ProjectRules
    content: ContentRules
    workflow: WorkflowRules
    lists: dict[str, ListRules]
