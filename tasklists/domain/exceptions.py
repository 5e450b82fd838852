"""Errors that abort an aggregation or sync run."""


class AggregateDocumentError(RuntimeError):
    """The aggregate document can neither be found nor created."""

    def __init__(self, filename: str, reason: str = "") -> None:
        self.filename = filename
        message = f"Unable to resolve or create aggregate document: {filename}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class NotADocumentError(ValueError):
    """A path expected to be a document resolved to a folder."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Expected a document but found a folder: {path}")
