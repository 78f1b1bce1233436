import argparse
import asyncio
import sys
from pathlib import Path

from docsum.config.settings import Settings
from docsum.extraction.models import ExtractionProgress, ExtractionStage
from docsum.llm.factory import LlmClientFactory
from docsum.logging.logger import Log
from docsum.processor.exceptions import ProcessorError
from docsum.processor.file_loader import FileLoader
from docsum.processor.models import DocumentSummary
from docsum.processor.processor import build_processor
from docsum.radiology.report import completeness


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="docsum", description="Summarize PDF documents and radiology reports"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    summarize = commands.add_parser("summarize", help="Summarize each PDF")
    summarize.add_argument("files", nargs="+", type=Path)

    radiology = commands.add_parser(
        "radiology", help="Extract and merge structured radiology data"
    )
    radiology.add_argument("files", nargs="+", type=Path)
    radiology.add_argument(
        "--json", action="store_true", help="Print the merged extraction as JSON"
    )

    commands.add_parser("check", help="Test the language-model connection")
    return parser.parse_args(argv)


def format_progress(name: str, progress: ExtractionProgress) -> str:
    text_pct = _percent(progress.text_processed, progress.total_pages)
    line = (
        f"{name}: page {progress.current_page}/{progress.total_pages} "
        f"[{progress.stage.value}] text {text_pct}%"
    )
    if progress.ocr_total > 0:
        ocr_pct = _percent(progress.ocr_processed, progress.ocr_total)
        line += f", ocr {ocr_pct}%"
    return line


def _percent(done: int, total: int) -> int:
    return round(done / total * 100) if total > 0 else 0


def _print_progress(name: str, progress: ExtractionProgress) -> None:
    if progress.stage is ExtractionStage.OCR or progress.text_processed == progress.current_page:
        print(format_progress(name, progress), file=sys.stderr)


async def run(args: argparse.Namespace, settings: Settings) -> int:
    if args.command == "check":
        configured = LlmClientFactory.is_configured(settings)
        Log.info(f"LLM provider configured: {configured}")
        if not configured:
            return 1
        client = LlmClientFactory.create(settings)
        return 0 if await client.check_connection(settings.openai_model_name) else 1

    processor = build_processor(settings)
    files = FileLoader().load_all(args.files)
    loaded = await processor.load_documents(files, on_progress=_print_progress)
    if loaded.empty_files:
        print(f"No readable text found in: {', '.join(loaded.empty_files)}", file=sys.stderr)
    if loaded.failed_files:
        print(f"Could not read: {', '.join(loaded.failed_files)}", file=sys.stderr)
    if not loaded.documents:
        print("No readable text found in the selected PDF files.", file=sys.stderr)
        return 1

    if args.command == "summarize":
        for summary in await processor.summarize(loaded.documents):
            _print_summary(summary)
        return 0

    report = await processor.radiology_report(loaded.documents)
    if args.json:
        print(report.radiology_json)
        return 0
    _print_summary(report)
    if report.report is not None:
        print(f"Completeness: {completeness(report.report.extraction)}%")
    return 0


def _print_summary(summary: DocumentSummary) -> None:
    print(f"== {summary.filename}")
    print(summary.summary)
    print()


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> configure logging -> run one command."""
    args = parse_args(argv)
    try:
        settings = Settings()
        Log.configure(settings.log_level)
        return asyncio.run(run(args, settings))
    except (ProcessorError, ValueError) as exc:
        Log.error(str(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())
