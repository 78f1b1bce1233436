from dataclasses import dataclass, field
from datetime import datetime, timezone

from docsum.extraction.models import Document
from docsum.radiology.report import MergedReport


@dataclass(frozen=True)
class SourceFile:
    """A file handed to the processor, before any extraction."""

    name: str
    raw_bytes: bytes
    mime_type: str = ""


@dataclass
class BatchExtractionResult:
    """Outcome of extracting text from a batch of files."""

    documents: list[Document] = field(default_factory=list)
    empty_files: list[str] = field(default_factory=list)
    failed_files: list[str] = field(default_factory=list)
    skipped_files: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DocumentSummary:
    """A generated summary, ready for display or export."""

    filename: str
    content: str
    summary: str
    radiology_json: str | None = None
    report: MergedReport | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
