"""Filesystem document store rooted at a vault directory."""

from pathlib import Path
from typing import Optional, Sequence
import asyncio
import logging
import os

import aiofiles
import aiofiles.os

from tasklists.domain.models import DocumentRef, normalize_path


logger = logging.getLogger(__name__)


class FilesystemDocumentStore:
    """Document store backed by a directory tree.

    Hidden directories (``.git``, ``.obsidian``...) are not scanned. Paths
    that resolve outside the root never resolve to a document.

    Undecodable bytes are carried through as lone surrogates
    (``surrogateescape``), so a note with a stray byte is still scanned and
    patched without being corrupted.
    """

    def __init__(
        self,
        root: str | Path,
        *,
        extension: str = ".md",
        encoding: str = "utf-8",
    ) -> None:
        """Initialize filesystem store.

        Args:
            root: Vault root directory
            extension: Suffix of files listed as documents
            encoding: Text encoding used for reads and writes
        """
        self._root = Path(root).resolve()
        self._extension = extension
        self._encoding = encoding

    @property
    def root(self) -> Path:
        return self._root

    def _full_path(self, path: str) -> Optional[Path]:
        """Absolute path inside the root, None if it escapes the root."""
        full = (self._root / normalize_path(path)).resolve()
        if full != self._root and self._root not in full.parents:
            return None
        return full

    def _checked_path(self, path: str) -> Path:
        full = self._full_path(path)
        if full is None:
            raise PermissionError(f"Path {path} is outside {self._root}")
        return full

    def _ref_for(self, path: str) -> Optional[DocumentRef]:
        path = normalize_path(path)
        if not path:
            return None
        full = self._full_path(path)
        if full is None:
            logger.debug(f"Refusing path outside the vault: {path}")
            return None
        try:
            stat = full.stat()
        except FileNotFoundError:
            return None

        parent_path = os.path.dirname(path)
        return DocumentRef(
            path=path,
            parent=self._ref_for(parent_path) if parent_path else None,
            created_at=getattr(stat, "st_birthtime", stat.st_ctime),
            modified_at=stat.st_mtime,
            is_folder=full.is_dir(),
        )

    def _list_documents(self) -> list[DocumentRef]:
        documents: list[DocumentRef] = []
        for dirpath, dirnames, filenames in os.walk(self._root):
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
            for filename in sorted(filenames):
                if not filename.endswith(self._extension):
                    continue
                relative = Path(dirpath, filename).relative_to(self._root)
                ref = self._ref_for(relative.as_posix())
                if ref is not None:
                    documents.append(ref)
        return documents

    async def list_documents(self) -> Sequence[DocumentRef]:
        """List all documents under the root."""
        return await asyncio.to_thread(self._list_documents)

    async def read(self, document: DocumentRef) -> str:
        """Read a document's text."""
        full = self._checked_path(document.path)
        async with aiofiles.open(
            full, encoding=self._encoding, errors="surrogateescape", newline=""
        ) as f:
            return await f.read()

    async def _write_text(self, full: Path, text: str) -> None:
        # newline="" keeps line endings exactly as rendered
        async with aiofiles.open(
            full, "w", encoding=self._encoding, errors="surrogateescape", newline=""
        ) as f:
            await f.write(text)

    async def write(self, document: DocumentRef, text: str) -> None:
        """Replace a document's text."""
        full = self._checked_path(document.path)
        if not await aiofiles.os.path.isfile(full):
            raise FileNotFoundError(f"Document {document.path} not found")
        await self._write_text(full, text)
        logger.debug(f"Wrote {document.path}")

    async def exists(self, path: str) -> bool:
        """Check if a file or folder exists inside the root."""
        full = self._full_path(path)
        return full is not None and await aiofiles.os.path.exists(full)

    async def resolve(self, path: str) -> Optional[DocumentRef]:
        """Resolve a path to its ref."""
        return await asyncio.to_thread(self._ref_for, path)

    async def create(self, path: str, text: str = "") -> DocumentRef:
        """Create a new document, including missing folders."""
        full = self._checked_path(path)
        if await aiofiles.os.path.exists(full):
            raise FileExistsError(f"Document {path} already exists")

        await aiofiles.os.makedirs(full.parent, exist_ok=True)
        await self._write_text(full, text)
        ref = await self.resolve(path)
        if ref is None:
            raise FileNotFoundError(f"Document {path} vanished after creation")
        logger.info(f"Created {ref.path}")
        return ref
