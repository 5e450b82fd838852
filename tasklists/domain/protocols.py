"""Protocol definitions for dependency injection."""

from typing import Protocol, runtime_checkable, Optional, Sequence

from .models import DocumentRef


@runtime_checkable
class DocumentStore(Protocol):
    """Protocol for the hierarchical document store holding the notes."""

    async def list_documents(self) -> Sequence[DocumentRef]:
        """List every candidate document (folders excluded)."""
        ...

    async def read(self, document: DocumentRef) -> str:
        """Read a document's full text."""
        ...

    async def write(self, document: DocumentRef, text: str) -> None:
        """Replace a document's full text."""
        ...

    async def exists(self, path: str) -> bool:
        """Check if a file or folder exists at path."""
        ...

    async def resolve(self, path: str) -> Optional[DocumentRef]:
        """Resolve a path to a ref, None if nothing is there."""
        ...

    async def create(self, path: str, text: str = "") -> DocumentRef:
        """Create a new document, return its ref."""
        ...
