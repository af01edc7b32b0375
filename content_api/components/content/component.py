"""
Content component - dimension-scoped content persistence and publishing workflow.

An Example keeps one dimension content per (locale, stage):
- (None, draft) / (None, live): unlocalized values, e.g. available_locales
- (locale, draft): the editable content of a locale
- (locale, live): the published copy of a locale

Writes always go to the draft stage. Publishing copies draft to live,
unpublishing removes the live copy and remove_draft restores draft from live.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from content_api.domain.dimension import DimensionAttributes
from content_api.domain.entities import (
    STAGE_DRAFT,
    STAGE_LIVE,
    Example,
    ExampleDimensionContent,
)
from content_api.domain.workflow import (
    WORKFLOW_DEFAULT_PLACE,
    WORKFLOW_PLACE_PUBLISHED,
    WORKFLOW_TRANSITION_PUBLISH,
    WORKFLOW_TRANSITION_REMOVE_DRAFT,
    WORKFLOW_TRANSITION_UNPUBLISH,
    Workflow,
    WorkflowTransition,
)
from content_api.rules.models import Rules

from .models import ContentManagerError, ContentNotFoundError, ContentProjection
from .ports import TimePort

logger = logging.getLogger(__name__)

# Keys managed by the content manager itself; never written from request data
RESERVED_KEYS = frozenset(
    {"id", "locale", "stage", "workflow_place", "workflow_published", "available_locales"}
)

class ContentManager:
    """Persists, resolves, transitions and normalizes dimension content."""

    def __init__(
        self,
        *,
        time: TimePort,
        workflow: Workflow,
        templates: list[str],
        default_template: str,
    ) -> None:
        self._time = time
        self._workflow = workflow
        self._templates = templates
        self._default_template = default_template

    # --- persist ---

    def persist(
        self,
        example: Example,
        data: Mapping[str, Any],
        dimension_attributes: DimensionAttributes,
    ) -> ContentProjection:
        """
        Map request data onto the draft dimension contents of example.

        Returns the draft projection for the locale. The caller is responsible
        for saving the example afterwards.
        """
        if dimension_attributes.stage != STAGE_DRAFT:
            raise ContentManagerError(
                f"Content can only be persisted in the '{STAGE_DRAFT}' stage", field="stage"
            )
        locale = dimension_attributes.locale
        if locale is None:
            raise ContentManagerError("A locale is required to persist content", field="locale")

        values = {k: v for k, v in data.items() if k not in RESERVED_KEYS}

        template = values.pop("template", None)
        if template is not None and template not in self._templates:
            raise ContentManagerError(
                f"Unknown template '{template}'. Allowed: {self._templates}",
                field="template",
            )

        unlocalized = self._get_or_create(example, None)
        localized = self._get_or_create(example, locale)

        locales = unlocalized.available_locales or []
        if locale not in locales:
            unlocalized.available_locales = [*locales, locale]

        if template is not None:
            localized.template_key = template
        elif localized.template_key is None:
            localized.template_key = self._default_template

        localized.title = values.pop("title", None)

        localized.excerpt_title = values.pop("excerpt_title", None)
        localized.excerpt_description = values.pop("excerpt_description", None)

        localized.seo_title = values.pop("seo_title", None)
        localized.seo_description = values.pop("seo_description", None)
        localized.seo_no_index = bool(values.pop("seo_no_index", False))

        localized.template_data = values

        if localized.workflow_place is None:
            localized.workflow_place = WORKFLOW_DEFAULT_PLACE

        example.changed = self._time.now_utc()

        logger.debug("Persisted example %s (locale=%s)", example.id, locale)
        return ContentProjection.merge(example.id, unlocalized, localized)

    # --- resolve ---

    def resolve(
        self,
        example: Example,
        dimension_attributes: DimensionAttributes,
    ) -> ContentProjection:
        """Return the projection for the requested locale and stage."""
        localized = example.find_dimension_content(
            dimension_attributes.locale, dimension_attributes.stage
        )
        if localized is None:
            raise ContentNotFoundError(example.id, dimension_attributes)

        unlocalized = example.find_dimension_content(None, dimension_attributes.stage)
        return ContentProjection.merge(example.id, unlocalized, localized)

    # --- apply_transition ---

    def apply_transition(
        self,
        example: Example,
        dimension_attributes: DimensionAttributes,
        transition: WorkflowTransition | str,
    ) -> ContentProjection:
        """
        Apply a workflow transition to the draft content of a locale.

        Returns the resulting draft projection.
        """
        draft_attributes = dimension_attributes.with_stage(STAGE_DRAFT)
        locale = draft_attributes.locale

        draft = example.find_dimension_content(locale, STAGE_DRAFT)
        if draft is None:
            raise ContentNotFoundError(example.id, draft_attributes)

        new_place = self._workflow.apply(draft.workflow_place, transition)
        now = self._time.now_utc()

        if transition == WORKFLOW_TRANSITION_PUBLISH:
            draft.workflow_published = now
            draft.workflow_place = new_place
            self._publish(example, draft)
        elif transition == WORKFLOW_TRANSITION_UNPUBLISH:
            draft.workflow_published = None
            draft.workflow_place = new_place
            self._unpublish(example, locale)
        elif transition == WORKFLOW_TRANSITION_REMOVE_DRAFT:
            draft = self._remove_draft(example, draft_attributes)
            draft.workflow_place = new_place
        else:
            draft.workflow_place = new_place

        example.changed = now

        logger.info(
            "Applied transition %s to example %s (locale=%s) -> %s",
            transition,
            example.id,
            locale,
            new_place,
        )
        unlocalized = example.find_dimension_content(None, STAGE_DRAFT)
        return ContentProjection.merge(example.id, unlocalized, draft)

    def _publish(self, example: Example, draft: ExampleDimensionContent) -> None:
        locale = draft.locale

        example.add_dimension_content(
            draft.model_copy(
                deep=True,
                update={"stage": STAGE_LIVE, "workflow_place": WORKFLOW_PLACE_PUBLISHED},
            )
        )

        draft_unlocalized = example.find_dimension_content(None, STAGE_DRAFT)
        live_unlocalized = example.find_dimension_content(None, STAGE_LIVE)
        live_locales = list((live_unlocalized.available_locales if live_unlocalized else None) or [])
        if locale is not None and locale not in live_locales:
            live_locales.append(locale)

        if draft_unlocalized is not None:
            live_unlocalized = draft_unlocalized.model_copy(deep=True, update={"stage": STAGE_LIVE})
        else:
            live_unlocalized = ExampleDimensionContent(locale=None, stage=STAGE_LIVE)
        live_unlocalized.available_locales = live_locales
        example.add_dimension_content(live_unlocalized)

    def _unpublish(self, example: Example, locale: str | None) -> None:
        example.remove_dimension_content(locale, STAGE_LIVE)

        live_unlocalized = example.find_dimension_content(None, STAGE_LIVE)
        if live_unlocalized is None:
            return

        live_locales = [x for x in live_unlocalized.available_locales or [] if x != locale]
        if live_locales:
            live_unlocalized.available_locales = live_locales
        else:
            example.remove_dimension_content(None, STAGE_LIVE)

    def _remove_draft(
        self, example: Example, draft_attributes: DimensionAttributes
    ) -> ExampleDimensionContent:
        live = example.find_dimension_content(draft_attributes.locale, STAGE_LIVE)
        if live is None:
            raise ContentNotFoundError(example.id, draft_attributes.with_stage(STAGE_LIVE))

        restored = live.model_copy(deep=True, update={"stage": STAGE_DRAFT})
        example.add_dimension_content(restored)

        live_unlocalized = example.find_dimension_content(None, STAGE_LIVE)
        draft_unlocalized = example.find_dimension_content(None, STAGE_DRAFT)
        if live_unlocalized is not None:
            # Draft keeps its own locale list; other locales may have unpublished drafts
            draft_locales = (
                draft_unlocalized.available_locales if draft_unlocalized is not None else None
            )
            example.add_dimension_content(
                live_unlocalized.model_copy(
                    deep=True,
                    update={"stage": STAGE_DRAFT, "available_locales": draft_locales},
                )
            )
        return restored

    # --- normalize ---

    def normalize(self, projection: ContentProjection) -> dict[str, Any]:
        """Convert a projection into a flat, JSON-ready dict."""
        normalized: dict[str, Any] = dict(projection.template_data)
        normalized.update(
            {
                "locale": projection.locale,
                "stage": projection.stage,
                "template": projection.template_key,
                "title": projection.title,
                "excerpt_title": projection.excerpt_title,
                "excerpt_description": projection.excerpt_description,
                "seo_title": projection.seo_title,
                "seo_description": projection.seo_description,
                "seo_no_index": projection.seo_no_index,
                "workflow_place": projection.workflow_place,
                "workflow_published": projection.workflow_published.isoformat()
                if projection.workflow_published
                else None,
                "available_locales": list(projection.available_locales),
            }
        )
        return normalized

    # --- helpers ---

    def _get_or_create(self, example: Example, locale: str | None) -> ExampleDimensionContent:
        dimension_content = example.find_dimension_content(locale, STAGE_DRAFT)
        if dimension_content is None:
            dimension_content = ExampleDimensionContent(locale=locale, stage=STAGE_DRAFT)
            if locale is None:
                dimension_content.available_locales = []
            example.add_dimension_content(dimension_content)
        return dimension_content


def workflow_from_rules(rules: Rules) -> Workflow:
    return Workflow(
        {
            name: (list(rule.from_places), rule.to)  # type: ignore[misc]
            for name, rule in rules.workflow.transitions.items()
        }
    )


def create_content_manager(rules: Rules, time: TimePort) -> ContentManager:
    """Build a ContentManager configured from rules."""
    return ContentManager(
        time=time,
        workflow=workflow_from_rules(rules),
        templates=list(rules.content.templates),
        default_template=rules.content.default_template,
    )
