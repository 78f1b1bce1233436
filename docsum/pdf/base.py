from abc import ABC, abstractmethod
from types import TracebackType

from PIL import Image

from docsum.pdf.exceptions import PdfExtractionError

RENDER_SCALE = 2.0


def check_page_number(page_number: int, page_count: int) -> None:
    """Raise PdfExtractionError unless page_number is within 1..page_count."""
    if not 1 <= page_number <= page_count:
        raise PdfExtractionError(
            f"Page {page_number} out of range (document has {page_count} pages)"
        )


class LoadedPdf(ABC):
    """An opened PDF document, addressed by 1-based page numbers."""

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Number of pages in the document."""

    @abstractmethod
    def page_text(self, page_number: int) -> str:
        """Return the embedded text of one page.

        Text items are joined with single spaces in the order the parser
        reports them; empty items are skipped.

        Returns:
            The page text, or an empty string if the page has no text layer.

        Raises:
            PdfExtractionError: if the page cannot be opened.
        """

    @abstractmethod
    def render_page(self, page_number: int) -> Image.Image:
        """Rasterize one page at RENDER_SCALE into an in-memory bitmap.

        Raises:
            PageRenderError: if no bitmap can be produced for the page.
        """

    @abstractmethod
    def close(self) -> None:
        """Release parser resources."""

    def __enter__(self) -> "LoadedPdf":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class BasePdfEngine(ABC):
    """Contract for all PDF parsing adapters."""

    @abstractmethod
    def open(self, pdf_bytes: bytes) -> LoadedPdf:
        """Load a PDF from raw bytes.

        Raises:
            PdfExtractionError: if the bytes are not a readable PDF.
        """
