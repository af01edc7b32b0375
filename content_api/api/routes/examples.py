import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response

from content_api.adapters.sqlite.repos import SQLiteExampleListRepo, SQLiteExampleRepo
from content_api.api.deps import (
    get_content_manager,
    get_dimension_attributes,
    get_example_list_repo,
    get_example_repo,
    get_rules,
)
from content_api.api.schemas import ExampleDataRequest, ExampleResponse, PaginatedListResponse
from content_api.components.content import (
    ContentManager,
    ContentManagerError,
    ContentNotFoundError,
    ContentProjection,
    ExampleRepoPort,
)
from content_api.components.listing import ListBuilderError, ListRequest, run_list
from content_api.domain.dimension import DimensionAttributes
from content_api.domain.entities import Example
from content_api.domain.workflow import (
    WORKFLOW_PLACE_PUBLISHED,
    WORKFLOW_TRANSITION_CREATE_DRAFT,
    WORKFLOW_TRANSITION_PUBLISH,
    WORKFLOW_TRANSITION_REMOVE_DRAFT,
    WORKFLOW_TRANSITION_UNPUBLISH,
    WorkflowTransitionError,
)
from content_api.rules.models import Rules

logger = logging.getLogger(__name__)

router = APIRouter()

ACTION_PUBLISH = "publish"
ACTION_UNPUBLISH = "unpublish"
ACTION_REMOVE_DRAFT = "remove-draft"


@contextmanager
def content_errors() -> Iterator[None]:
    """Translate content and workflow errors into HTTP errors."""
    try:
        yield
    except ContentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except (ContentManagerError, WorkflowTransitionError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


def _find_or_404(repo: ExampleRepoPort, example_id: int) -> Example:
    example = repo.get_by_id(example_id)
    if example is None:
        raise HTTPException(status_code=404, detail="Example not found")
    return example


def _resolve(
    manager: ContentManager, example: Example, projection: ContentProjection
) -> dict[str, Any]:
    """Normalize the projection and add the entity id (assigned on first save)."""
    resolved = manager.normalize(projection)
    resolved["id"] = example.id
    return resolved


def _data(req: ExampleDataRequest) -> dict[str, Any]:
    return req.model_dump(exclude_unset=True)


@router.get("", response_model=PaginatedListResponse)
def list_examples(
    fields: str | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
    search: str | None = None,
    search_fields: str | None = None,
    page: int | None = None,
    limit: int | None = None,
    ids: str | None = None,
    excluded_ids: str | None = None,
    dimension_attributes: DimensionAttributes = Depends(get_dimension_attributes),
    repo: SQLiteExampleListRepo = Depends(get_example_list_repo),
    rules: Rules = Depends(get_rules),
) -> dict[str, Any]:
    """Paginated list of examples in one locale."""
    request = ListRequest(
        locale=dimension_attributes.locale,
        fields=fields,
        sort_by=sort_by,
        sort_order=sort_order,
        search=search,
        search_fields=search_fields,
        page=page,
        limit=limit,
        ids=ids,
        excluded_ids=excluded_ids,
    )
    try:
        representation = run_list(request, repo=repo, rules=rules, resource_key=Example.RESOURCE_KEY)
    except ListBuilderError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return representation.to_dict()


@router.get("/{example_id}", response_model=ExampleResponse)
def get_example(
    example_id: int,
    dimension_attributes: DimensionAttributes = Depends(get_dimension_attributes),
    repo: SQLiteExampleRepo = Depends(get_example_repo),
    manager: ContentManager = Depends(get_content_manager),
) -> dict[str, Any]:
    """Load an example and resolve its content for the requested dimension."""
    example = _find_or_404(repo, example_id)

    with content_errors():
        projection = manager.resolve(example, dimension_attributes)

    return _resolve(manager, example, projection)


@router.post("", response_model=ExampleResponse, status_code=201)
def create_example(
    req: ExampleDataRequest,
    action: str | None = None,
    dimension_attributes: DimensionAttributes = Depends(get_dimension_attributes),
    repo: SQLiteExampleRepo = Depends(get_example_repo),
    manager: ContentManager = Depends(get_content_manager),
) -> dict[str, Any]:
    """Create an example and save its content for the requested dimension."""
    example = Example()

    with content_errors():
        projection = manager.persist(example, _data(req), dimension_attributes)
        repo.save(example)

        if action == ACTION_PUBLISH:
            projection = manager.apply_transition(
                example, dimension_attributes, WORKFLOW_TRANSITION_PUBLISH
            )
            repo.save(example)

    logger.info("Created example %s (locale=%s)", example.id, dimension_attributes.locale)
    return _resolve(manager, example, projection)


@router.post("/{example_id}", response_model=ExampleResponse)
def trigger_example(
    example_id: int,
    action: str | None = None,
    dimension_attributes: DimensionAttributes = Depends(get_dimension_attributes),
    repo: SQLiteExampleRepo = Depends(get_example_repo),
    manager: ContentManager = Depends(get_content_manager),
) -> dict[str, Any]:
    """Apply the workflow transition named by the action parameter."""
    example = _find_or_404(repo, example_id)

    transitions = {
        ACTION_UNPUBLISH: WORKFLOW_TRANSITION_UNPUBLISH,
        ACTION_REMOVE_DRAFT: WORKFLOW_TRANSITION_REMOVE_DRAFT,
    }
    transition = transitions.get(action or "")
    if transition is None:
        raise HTTPException(status_code=400, detail=f"Unrecognized action: {action}")

    with content_errors():
        projection = manager.apply_transition(example, dimension_attributes, transition)
        repo.save(example)

    return _resolve(manager, example, projection)


@router.put("/{example_id}", response_model=ExampleResponse)
def update_example(
    example_id: int,
    req: ExampleDataRequest,
    action: str | None = None,
    dimension_attributes: DimensionAttributes = Depends(get_dimension_attributes),
    repo: SQLiteExampleRepo = Depends(get_example_repo),
    manager: ContentManager = Depends(get_content_manager),
) -> dict[str, Any]:
    """Save content for the requested dimension; edits to published content open a draft."""
    example = _find_or_404(repo, example_id)

    with content_errors():
        projection = manager.persist(example, _data(req), dimension_attributes)
        if projection.get_workflow_place() == WORKFLOW_PLACE_PUBLISHED:
            projection = manager.apply_transition(
                example, dimension_attributes, WORKFLOW_TRANSITION_CREATE_DRAFT
            )
        repo.save(example)

        if action == ACTION_PUBLISH:
            projection = manager.apply_transition(
                example, dimension_attributes, WORKFLOW_TRANSITION_PUBLISH
            )
            repo.save(example)

    return _resolve(manager, example, projection)


@router.delete("/{example_id}", status_code=204)
def delete_example(
    example_id: int,
    repo: SQLiteExampleRepo = Depends(get_example_repo),
) -> Response:
    """Delete an example; its dimension contents are removed with it."""
    _find_or_404(repo, example_id)
    repo.delete(example_id)
    logger.info("Deleted example %s", example_id)
    return Response(status_code=204)
