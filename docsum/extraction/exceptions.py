class ExtractionError(Exception):
    """Base exception for document text extraction."""


class DocumentExtractionError(ExtractionError):
    """Raised when a document cannot be extracted; wraps the page-level cause."""

    def __init__(self, document_name: str, reason: str) -> None:
        super().__init__(f"Failed to extract text from '{document_name}': {reason}")
        self.document_name = document_name
        self.reason = reason


class InvalidTransitionError(ExtractionError):
    """Raised when an extraction event does not fit the current state."""
