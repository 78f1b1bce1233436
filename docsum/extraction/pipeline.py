"""Document text acquisition: text layer first, OCR for pages without one."""

import asyncio
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

from docsum.extraction.exceptions import DocumentExtractionError
from docsum.extraction.models import Document, ExtractionProgress
from docsum.extraction.state import (
    Event,
    ExtractionState,
    Failed,
    Finished,
    OcrRead,
    OcrStarted,
    PdfLoaded,
    TextRead,
    TextStarted,
    initial_state,
    transition,
)
from docsum.logging.logger import Log
from docsum.ocr.base import BaseOcrEngine
from docsum.ocr.exceptions import OcrError
from docsum.pdf.base import BasePdfEngine, LoadedPdf
from docsum.pdf.exceptions import PdfExtractionError

ProgressCallback = Callable[[ExtractionProgress], None]

T = TypeVar("T")


class _ExtractionRun:
    """Holds the state of one document run and publishes progress."""

    def __init__(self, on_progress: ProgressCallback | None) -> None:
        self.state: ExtractionState = initial_state()
        self._on_progress = on_progress

    def advance(self, event: Event) -> None:
        self.state, progress = transition(self.state, event)
        if progress is not None and self._on_progress is not None:
            self._on_progress(progress)


class DocumentExtractionPipeline:
    """Extracts plain text from PDF bytes, one page at a time.

    Each page is first read from its text layer. Pages without text are
    rendered and passed to the OCR engine. Pages are never processed in
    parallel since the OCR engine is a single shared worker.
    """

    PAGE_SEPARATOR = "\n\n"

    def __init__(self, pdf_engine: BasePdfEngine, ocr_engine: BaseOcrEngine) -> None:
        self._pdf_engine = pdf_engine
        self._ocr_engine = ocr_engine

    async def extract_document(
        self,
        document: Document,
        on_progress: ProgressCallback | None = None,
    ) -> Document:
        """Return a copy of the document with its extracted content set."""
        content = await self.extract(document.raw_bytes, document.name, on_progress)
        return document.with_content(content)

    async def extract(
        self,
        pdf_bytes: bytes,
        name: str = "document",
        on_progress: ProgressCallback | None = None,
    ) -> str:
        """Extract the text of a PDF.

        Args:
            pdf_bytes: Raw PDF file content.
            name: Document name, used in logs and errors.
            on_progress: Optional observer called synchronously with each
                progress snapshot. Exceptions it raises propagate.

        Returns:
            Page texts joined by a blank line and stripped. An empty string
            means no page had readable text.

        Raises:
            DocumentExtractionError: if the document, a page, the renderer or
                the OCR engine fails.
        """
        Log.info(f"Extracting text from '{name}' ({len(pdf_bytes)} bytes)")
        run = _ExtractionRun(on_progress)
        # PDF handles stay on one thread for the whole run, closing included.
        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="pdf") as executor:
            try:
                pdf = await self._call(executor, self._pdf_engine.open, pdf_bytes)
                try:
                    run.advance(PdfLoaded(pdf.page_count))
                    page_texts = []
                    for page_number in range(1, pdf.page_count + 1):
                        text = await self._read_page(executor, pdf, page_number, name, run)
                        if text:
                            page_texts.append(text)
                finally:
                    await self._call(executor, pdf.close)
            except (PdfExtractionError, OcrError) as exc:
                run.advance(Failed(str(exc)))
                Log.error(f"Extraction of '{name}' failed: {exc}")
                raise DocumentExtractionError(name, str(exc)) from exc

        run.advance(Finished())
        content = self.PAGE_SEPARATOR.join(page_texts).strip()
        progress = run.state.progress
        Log.info(
            f"Extracted {len(content)} chars from '{name}' "
            f"({progress.total_pages} pages, {progress.ocr_total} via OCR)"
        )
        return content

    async def _read_page(
        self,
        executor: ThreadPoolExecutor,
        pdf: LoadedPdf,
        page_number: int,
        name: str,
        run: _ExtractionRun,
    ) -> str:
        run.advance(TextStarted(page_number))
        text = await self._call(executor, pdf.page_text, page_number)
        has_text = bool(text.strip())
        run.advance(TextRead(page_number, has_text))
        if has_text:
            return text

        run.advance(OcrStarted(page_number))
        image = await self._call(executor, pdf.render_page, page_number)
        ocr_text = await self._ocr_engine.recognize(image)
        run.advance(OcrRead(page_number))
        if ocr_text.strip():
            return ocr_text
        Log.debug(f"No text recognized on page {page_number} of '{name}'")
        return ""

    @staticmethod
    async def _call(
        executor: ThreadPoolExecutor, func: Callable[..., T], *args: object
    ) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(executor, func, *args)
