import mimetypes
from pathlib import Path

from docsum.processor.exceptions import FileReadError
from docsum.processor.models import SourceFile

PDF_MIME_TYPE = "application/pdf"


def is_pdf(file: SourceFile) -> bool:
    """Accept files declared as PDF or carrying a .pdf suffix."""
    return file.mime_type == PDF_MIME_TYPE or file.name.lower().endswith(".pdf")


class FileLoader:
    """Reads input files from disk."""

    def load(self, path: Path) -> SourceFile:
        """Read a file's bytes.

        Raises:
            FileReadError: if the file does not exist or cannot be read.
        """
        if not path.is_file():
            raise FileReadError(f"File not found: {path}")
        try:
            raw_bytes = path.read_bytes()
        except OSError as exc:
            raise FileReadError(f"Cannot read {path}: {exc}") from exc
        mime_type, _ = mimetypes.guess_type(path.name)
        return SourceFile(name=path.name, raw_bytes=raw_bytes, mime_type=mime_type or "")

    def load_all(self, paths: list[Path]) -> list[SourceFile]:
        return [self.load(path) for path in paths]
