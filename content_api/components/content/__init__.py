"""
Content component - dimension content persistence and publishing workflow.
"""

from .component import (
    ContentManager,
    create_content_manager,
    workflow_from_rules,
)
from .models import (
    ContentManagerError,
    ContentNotFoundError,
    ContentProjection,
)
from .ports import ExampleRepoPort, TimePort

__all__ = [
    "ContentManager",
    "create_content_manager",
    "workflow_from_rules",
    "ContentManagerError",
    "ContentNotFoundError",
    "ContentProjection",
    "ExampleRepoPort",
    "TimePort",
]
