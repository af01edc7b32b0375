"""
Listing component - paginated, filterable lists described by field descriptors.
"""

from .component import (
    ListBuilder,
    get_field_descriptors,
    initialize_list_builder,
    run_list,
)
from .models import (
    FieldDescriptor,
    ListBuilderError,
    ListQuery,
    ListRequest,
    PaginatedRepresentation,
)
from .ports import ListRepoPort

__all__ = [
    # Entry points
    "ListBuilder",
    "get_field_descriptors",
    "initialize_list_builder",
    "run_list",
    # Models
    "FieldDescriptor",
    "ListBuilderError",
    "ListQuery",
    "ListRequest",
    "PaginatedRepresentation",
    # Ports
    "ListRepoPort",
]
