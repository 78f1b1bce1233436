import io

import pdfplumber
from pdfplumber.page import Page
from PIL import Image

from docsum.pdf.base import RENDER_SCALE, BasePdfEngine, LoadedPdf, check_page_number
from docsum.pdf.exceptions import PageRenderError, PdfExtractionError

# pdfplumber measures pages in PDF points (72 per inch).
_POINTS_PER_INCH = 72


class PdfPlumberDocument(LoadedPdf):
    """A PDF opened with pdfplumber."""

    def __init__(self, pdf: pdfplumber.PDF) -> None:
        self._pdf = pdf

    @property
    def page_count(self) -> int:
        return len(self._pdf.pages)

    def page_text(self, page_number: int) -> str:
        page = self._page(page_number)
        try:
            words = page.extract_words()
        except Exception as exc:
            raise PdfExtractionError(
                f"pdfplumber could not read text of page {page_number}: {exc}"
            ) from exc
        return " ".join(word["text"] for word in words if word.get("text"))

    def render_page(self, page_number: int) -> Image.Image:
        page = self._page(page_number)
        try:
            image = page.to_image(resolution=int(_POINTS_PER_INCH * RENDER_SCALE))
        except Exception as exc:
            raise PageRenderError(
                f"pdfplumber could not render page {page_number}: {exc}"
            ) from exc
        bitmap = image.original
        if bitmap is None or bitmap.width == 0 or bitmap.height == 0:
            raise PageRenderError(f"Unable to render PDF page {page_number} for OCR")
        return bitmap

    def close(self) -> None:
        self._pdf.close()

    def _page(self, page_number: int) -> Page:
        check_page_number(page_number, self.page_count)
        try:
            return self._pdf.pages[page_number - 1]
        except Exception as exc:
            raise PdfExtractionError(
                f"pdfplumber could not open page {page_number}: {exc}"
            ) from exc


class PdfPlumberAdapter(BasePdfEngine):
    """Opens PDFs using pdfplumber."""

    def open(self, pdf_bytes: bytes) -> LoadedPdf:
        try:
            pdf = pdfplumber.open(io.BytesIO(pdf_bytes))
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber could not open document: {exc}") from exc
        try:
            # pdfplumber parses lazily; touching the page list surfaces bad input here.
            _ = pdf.pages
        except Exception as exc:
            pdf.close()
            raise PdfExtractionError(f"pdfplumber could not open document: {exc}") from exc
        return PdfPlumberDocument(pdf)
