"""Domain models and protocols."""

from .models import (
    INDENT_UNIT,
    TaskType,
    EventKind,
    DocumentRef,
    Todo,
    TodoDocument,
    TodoGroup,
    AggregateDocument,
    DocumentEvent,
    AggregateResult,
    SyncResult,
)
from .protocols import DocumentStore
from .exceptions import AggregateDocumentError, NotADocumentError

__all__ = [
    "INDENT_UNIT",
    "TaskType",
    "EventKind",
    "DocumentRef",
    "Todo",
    "TodoDocument",
    "TodoGroup",
    "AggregateDocument",
    "DocumentEvent",
    "AggregateResult",
    "SyncResult",
    "DocumentStore",
    "AggregateDocumentError",
    "NotADocumentError",
]
