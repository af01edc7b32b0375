"""
Publishing workflow for localized dimension contents.

Places:
- unpublished: never published, or taken offline
- published: live content matches the draft
- draft: live content exists, draft has pending changes

Transitions:
- publish:      unpublished|draft -> published
- unpublish:    published|draft   -> unpublished
- create_draft: published         -> draft
- remove_draft: draft             -> published
"""

from __future__ import annotations

from typing import Literal

from content_api.domain.entities import WorkflowPlace

WorkflowTransition = Literal["publish", "unpublish", "create_draft", "remove_draft"]

WORKFLOW_PLACE_UNPUBLISHED: WorkflowPlace = "unpublished"
WORKFLOW_PLACE_DRAFT: WorkflowPlace = "draft"
WORKFLOW_PLACE_PUBLISHED: WorkflowPlace = "published"

WORKFLOW_TRANSITION_PUBLISH: WorkflowTransition = "publish"
WORKFLOW_TRANSITION_UNPUBLISH: WorkflowTransition = "unpublish"
WORKFLOW_TRANSITION_CREATE_DRAFT: WorkflowTransition = "create_draft"
WORKFLOW_TRANSITION_REMOVE_DRAFT: WorkflowTransition = "remove_draft"

WORKFLOW_DEFAULT_PLACE: WorkflowPlace = WORKFLOW_PLACE_UNPUBLISHED

DEFAULT_TRANSITIONS: dict[WorkflowTransition, tuple[list[WorkflowPlace], WorkflowPlace]] = {
    "publish": (["unpublished", "draft"], "published"),
    "unpublish": (["published", "draft"], "unpublished"),
    "create_draft": (["published"], "draft"),
    "remove_draft": (["draft"], "published"),
}


class WorkflowTransitionError(Exception):
    """Raised when a transition is unknown or not allowed from the current place."""

    def __init__(self, place: str | None, transition: str, reason: str = "") -> None:
        self.place = place
        self.transition = transition
        self.reason = reason
        msg = f"Cannot apply transition '{transition}' from place '{place}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class Workflow:
    """Validates and resolves workflow transitions."""

    def __init__(
        self,
        transitions: dict[WorkflowTransition, tuple[list[WorkflowPlace], WorkflowPlace]]
        | None = None,
    ) -> None:
        self._transitions = transitions or DEFAULT_TRANSITIONS

    def can_apply(self, place: WorkflowPlace | None, transition: str) -> bool:
        rule = self._transitions.get(transition)  # type: ignore[call-overload]
        if rule is None:
            return False
        froms, _ = rule
        return (place or WORKFLOW_DEFAULT_PLACE) in froms

    def get_enabled_transitions(self, place: WorkflowPlace | None) -> list[WorkflowTransition]:
        current = place or WORKFLOW_DEFAULT_PLACE
        return [name for name, (froms, _) in self._transitions.items() if current in froms]

    def apply(self, place: WorkflowPlace | None, transition: str) -> WorkflowPlace:
        """Return the place reached by applying transition from place."""
        if transition not in self._transitions:
            raise WorkflowTransitionError(place, transition, "unknown transition")

        if not self.can_apply(place, transition):
            raise WorkflowTransitionError(
                place,
                transition,
                f"enabled transitions: {self.get_enabled_transitions(place)}",
            )

        _, to_place = self._transitions[transition]  # type: ignore[index]
        return to_place
