class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class BatchError(ProcessorError):
    """Raised when no document in a batch produced a usable result."""


class FileReadError(ProcessorError):
    """Raised when an input file cannot be read from disk."""
