"""In-memory implementation of the document store for testing."""

from typing import Optional, Sequence
import posixpath
import time

from tasklists.domain.models import DocumentRef, normalize_path


class InMemoryDocumentStore:
    """In-memory implementation of DocumentStore for testing."""

    def __init__(self, extension: str = ".md") -> None:
        self._extension = extension
        self._entries: dict[str, DocumentRef] = {}
        self._contents: dict[str, str] = {}
        self.writes: list[str] = []

    def add_folder(self, path: str, created_at: float = 0.0) -> DocumentRef:
        """Add a folder, creating missing ancestors."""
        path = normalize_path(path)
        existing = self._entries.get(path)
        if existing is not None:
            if not existing.is_folder:
                raise ValueError(f"Document {path} already exists")
            return existing

        folder = DocumentRef(
            path=path,
            parent=self._ensure_parent(path),
            created_at=created_at,
            modified_at=created_at,
            is_folder=True,
        )
        self._entries[path] = folder
        return folder

    def add_document(
        self,
        path: str,
        contents: str = "",
        created_at: float = 0.0,
        modified_at: Optional[float] = None,
    ) -> DocumentRef:
        """Add a document, creating missing parent folders."""
        path = normalize_path(path)
        if path in self._entries:
            raise ValueError(f"Document {path} already exists")

        document = DocumentRef(
            path=path,
            parent=self._ensure_parent(path),
            created_at=created_at,
            modified_at=created_at if modified_at is None else modified_at,
        )
        self._entries[path] = document
        self._contents[path] = contents
        return document

    def remove(self, path: str) -> bool:
        """Remove a document or folder (and everything under it)."""
        path = normalize_path(path)
        if path not in self._entries:
            return False
        prefix = f"{path}/"
        for key in [k for k in self._entries if k == path or k.startswith(prefix)]:
            del self._entries[key]
            self._contents.pop(key, None)
        return True

    def contents_of(self, path: str) -> str:
        """Current text of a document (test helper)."""
        return self._contents[normalize_path(path)]

    def _ensure_parent(self, path: str) -> Optional[DocumentRef]:
        parent_path = posixpath.dirname(path)
        if not parent_path:
            return None
        return self.add_folder(parent_path)

    async def list_documents(self) -> Sequence[DocumentRef]:
        """List documents with the configured extension."""
        return [
            ref
            for ref in self._entries.values()
            if not ref.is_folder and ref.path.endswith(self._extension)
        ]

    async def read(self, document: DocumentRef) -> str:
        """Read a document's text."""
        if document.path not in self._contents:
            raise FileNotFoundError(f"Document {document.path} not found")
        return self._contents[document.path]

    async def write(self, document: DocumentRef, text: str) -> None:
        """Replace a document's text."""
        if document.path not in self._contents:
            raise FileNotFoundError(f"Document {document.path} not found")
        self._contents[document.path] = text
        current = self._entries[document.path]
        self._entries[document.path] = DocumentRef(
            path=current.path,
            parent=current.parent,
            created_at=current.created_at,
            modified_at=max(time.time(), current.modified_at + 1),
        )
        self.writes.append(document.path)

    async def exists(self, path: str) -> bool:
        """Check if a file or folder exists."""
        return normalize_path(path) in self._entries

    async def resolve(self, path: str) -> Optional[DocumentRef]:
        """Resolve a path to its ref."""
        return self._entries.get(normalize_path(path))

    async def create(self, path: str, text: str = "") -> DocumentRef:
        """Create a new document."""
        path = normalize_path(path)
        if path in self._entries:
            raise FileExistsError(f"Document {path} already exists")
        return self.add_document(path, text, created_at=time.time())
