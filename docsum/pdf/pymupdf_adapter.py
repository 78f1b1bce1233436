import pymupdf
from PIL import Image

from docsum.pdf.base import RENDER_SCALE, BasePdfEngine, LoadedPdf, check_page_number
from docsum.pdf.exceptions import PageRenderError, PdfExtractionError

_PIL_MODES = {1: "L", 3: "RGB", 4: "RGBA"}


class PyMuPdfDocument(LoadedPdf):
    """A PDF opened with PyMuPDF."""

    def __init__(self, doc: pymupdf.Document) -> None:
        self._doc = doc

    @property
    def page_count(self) -> int:
        return int(self._doc.page_count)

    def page_text(self, page_number: int) -> str:
        page = self._load_page(page_number)
        try:
            content = page.get_text("dict")
        except Exception as exc:
            raise PdfExtractionError(
                f"pymupdf could not read text of page {page_number}: {exc}"
            ) from exc
        items = [
            span.get("text", "")
            for block in content.get("blocks", [])
            for line in block.get("lines", [])
            for span in line.get("spans", [])
        ]
        return " ".join(item for item in items if item)

    def render_page(self, page_number: int) -> Image.Image:
        page = self._load_page(page_number)
        try:
            pix = page.get_pixmap(
                matrix=pymupdf.Matrix(RENDER_SCALE, RENDER_SCALE), alpha=False
            )
        except Exception as exc:
            raise PageRenderError(
                f"pymupdf could not render page {page_number}: {exc}"
            ) from exc
        mode = _PIL_MODES.get(pix.n)
        if mode is None or pix.width == 0 or pix.height == 0:
            raise PageRenderError(f"Unable to render PDF page {page_number} for OCR")
        return Image.frombytes(mode, (pix.width, pix.height), pix.samples)

    def close(self) -> None:
        self._doc.close()

    def _load_page(self, page_number: int) -> pymupdf.Page:
        check_page_number(page_number, self.page_count)
        try:
            return self._doc.load_page(page_number - 1)
        except Exception as exc:
            raise PdfExtractionError(
                f"pymupdf could not open page {page_number}: {exc}"
            ) from exc


class PyMuPdfAdapter(BasePdfEngine):
    """Opens PDFs using PyMuPDF."""

    def open(self, pdf_bytes: bytes) -> LoadedPdf:
        try:
            doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")  # type: ignore[no-untyped-call]
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf could not open document: {exc}") from exc
        return PyMuPdfDocument(doc)
