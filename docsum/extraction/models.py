from dataclasses import dataclass, replace
from enum import Enum


class ExtractionStage(str, Enum):
    TEXT = "text"
    OCR = "ocr"


@dataclass(frozen=True)
class ExtractionProgress:
    """Snapshot of one extraction run, handed to progress observers."""

    total_pages: int
    text_processed: int = 0
    ocr_processed: int = 0
    ocr_total: int = 0
    current_page: int = 0
    stage: ExtractionStage = ExtractionStage.TEXT


@dataclass(frozen=True)
class Document:
    """An uploaded file and, once extracted, its plain-text content."""

    name: str
    size_bytes: int
    raw_bytes: bytes
    content: str = ""

    @classmethod
    def from_bytes(cls, name: str, raw_bytes: bytes) -> "Document":
        return cls(name=name, size_bytes=len(raw_bytes), raw_bytes=raw_bytes)

    @property
    def has_text(self) -> bool:
        return bool(self.content.strip())

    def with_content(self, content: str) -> "Document":
        return replace(self, content=content)
