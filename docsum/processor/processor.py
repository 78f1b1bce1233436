import asyncio
from collections.abc import Awaitable, Callable, Sequence

from docsum.config.settings import Settings
from docsum.extraction.exceptions import DocumentExtractionError
from docsum.extraction.models import Document, ExtractionProgress
from docsum.extraction.pipeline import DocumentExtractionPipeline
from docsum.llm.exceptions import LlmError
from docsum.llm.factory import LlmClientFactory
from docsum.llm.summarizer import Summarizer
from docsum.logging.logger import Log
from docsum.ocr.factory import get_ocr_engine
from docsum.pdf.factory import PdfEngineFactory
from docsum.processor.exceptions import BatchError
from docsum.processor.file_loader import is_pdf
from docsum.processor.models import BatchExtractionResult, DocumentSummary, SourceFile
from docsum.radiology.exceptions import RadiologyError
from docsum.radiology.extractor import RadiologyExtractor
from docsum.radiology.models import RadiologyExtraction
from docsum.radiology.report import MergedReport, format_report, merge_report, to_json

FileProgressCallback = Callable[[str, ExtractionProgress], None]


class BatchProcessor:
    """Runs batches of files through extraction and the language model.

    Files are handled strictly one at a time. A failure on one file is
    logged and recorded; its siblings are still processed.
    """

    def __init__(
        self,
        *,
        pipeline: DocumentExtractionPipeline,
        summarizer: Summarizer,
        radiology_extractor: RadiologyExtractor,
        request_delay_seconds: float = 0.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._pipeline = pipeline
        self._summarizer = summarizer
        self._radiology_extractor = radiology_extractor
        self._request_delay_seconds = request_delay_seconds
        self._sleep = sleep

    async def load_documents(
        self,
        files: Sequence[SourceFile],
        on_progress: FileProgressCallback | None = None,
    ) -> BatchExtractionResult:
        """Extract text from every PDF in files."""
        result = BatchExtractionResult()
        for file in files:
            if not is_pdf(file):
                Log.warning(f"Skipping '{file.name}': not a PDF")
                result.skipped_files.append(file.name)
                continue

            observer = None
            if on_progress is not None:
                observer = _bind_file(on_progress, file.name)
            document = Document.from_bytes(file.name, file.raw_bytes)
            try:
                document = await self._pipeline.extract_document(document, observer)
            except DocumentExtractionError as exc:
                Log.error(f"Skipping '{file.name}': {exc.reason}")
                result.failed_files.append(file.name)
                continue

            if not document.has_text:
                Log.warning(f"No readable text found in '{file.name}'")
                result.empty_files.append(file.name)
                continue
            result.documents.append(document)

        Log.info(
            f"Loaded {len(result.documents)} documents "
            f"({len(result.empty_files)} empty, {len(result.failed_files)} failed, "
            f"{len(result.skipped_files)} skipped)"
        )
        return result

    async def summarize(self, documents: Sequence[Document]) -> list[DocumentSummary]:
        """Summarize each document; documents whose summary fails are left out.

        Raises:
            BatchError: if documents is empty or no summary could be generated.
        """
        if not documents:
            raise BatchError("Please upload at least one PDF document")

        summaries: list[DocumentSummary] = []
        for index, document in enumerate(documents):
            await self._pause(index)
            try:
                summary = await self._summarizer.summarize(document.content)
            except LlmError as exc:
                Log.error(f"Error summarizing '{document.name}': {exc}")
                continue
            summaries.append(
                DocumentSummary(
                    filename=document.name,
                    content=document.content,
                    summary=summary,
                )
            )

        if not summaries:
            raise BatchError("Failed to generate summaries. Please check your API configuration.")
        return summaries

    async def radiology_report(self, documents: Sequence[Document]) -> DocumentSummary:
        """Build one radiology report from one or more documents.

        A single document yields its own extraction. Several documents are
        extracted one by one and merged; documents that fail are left out
        of the merge and of the report count.

        Raises:
            BatchError: if documents is empty or every extraction failed.
        """
        if not documents:
            raise BatchError("Please upload at least one PDF document.")

        extractions: list[RadiologyExtraction] = []
        for index, document in enumerate(documents):
            await self._pause(index)
            try:
                extractions.append(await self._radiology_extractor.extract(document.content))
            except (LlmError, RadiologyError) as exc:
                Log.error(f"Error extracting radiology data from '{document.name}': {exc}")

        if not extractions:
            raise BatchError("Failed to extract radiology data from the selected PDFs.")

        if len(documents) == 1:
            document = documents[0]
            report = MergedReport(extraction=extractions[0], document_count=1)
            return DocumentSummary(
                filename=f"Radiology extraction ({document.name})",
                content=document.content,
                summary=format_report(report),
                radiology_json=to_json(report.extraction),
                report=report,
            )

        report = merge_report(extractions)
        Log.info(f"Merged radiology data from {report.document_count} reports")
        return DocumentSummary(
            filename=f"Radiology batch ({report.document_count} PDFs)",
            content="\n\n".join(f"--- {d.name} ---\n{d.content}" for d in documents),
            summary=format_report(report),
            radiology_json=to_json(report.extraction),
            report=report,
        )

    async def _pause(self, index: int) -> None:
        """Space out provider requests after the first one."""
        if index > 0 and self._request_delay_seconds > 0:
            await self._sleep(self._request_delay_seconds)


def _bind_file(
    on_progress: FileProgressCallback, name: str
) -> Callable[[ExtractionProgress], None]:
    def observer(progress: ExtractionProgress) -> None:
        on_progress(name, progress)

    return observer


def build_pipeline(settings: Settings) -> DocumentExtractionPipeline:
    return DocumentExtractionPipeline(
        pdf_engine=PdfEngineFactory.create(settings),
        ocr_engine=get_ocr_engine(settings),
    )


def build_processor(settings: Settings) -> BatchProcessor:
    """Build a BatchProcessor with all required adapters."""
    client = LlmClientFactory.create(settings)
    summarizer = Summarizer(
        client=client,
        model=settings.openai_model_name,
        temperature=settings.openai_temperature,
        max_words=settings.summary_max_words,
    )
    radiology_extractor = RadiologyExtractor(
        client=client,
        model=settings.openai_model_name,
        temperature=settings.openai_temperature,
        min_report_chars=settings.min_report_chars,
    )
    return BatchProcessor(
        pipeline=build_pipeline(settings),
        summarizer=summarizer,
        radiology_extractor=radiology_extractor,
        request_delay_seconds=settings.batch_request_delay_seconds,
    )
