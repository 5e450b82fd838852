"""Document store implementations."""

from .memory import InMemoryDocumentStore
from .filesystem import FilesystemDocumentStore

__all__ = [
    "InMemoryDocumentStore",
    "FilesystemDocumentStore",
]
