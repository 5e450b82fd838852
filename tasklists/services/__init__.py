"""Service layer implementations."""

from .exclusion_service import ExclusionResolver
from .scan_service import DocumentScanner
from .aggregate_service import TodoAggregator
from .sync_service import ReverseSyncService, patch_markers
from .todo_service import TodoService

__all__ = [
    "ExclusionResolver",
    "DocumentScanner",
    "TodoAggregator",
    "ReverseSyncService",
    "patch_markers",
    "TodoService",
]
