from docsum.config.settings import Settings
from docsum.ocr.base import BaseOcrEngine
from docsum.ocr.tesseract_adapter import TesseractOcrEngine

_engine: BaseOcrEngine | None = None


def create_ocr_engine(settings: Settings) -> BaseOcrEngine:
    """Build a new OCR engine from settings."""
    return TesseractOcrEngine(
        language=settings.ocr_language,
        tesseract_cmd=settings.ocr_tesseract_cmd,
        tessdata_dir=settings.ocr_tessdata_dir,
    )


def get_ocr_engine(settings: Settings) -> BaseOcrEngine:
    """Return the process-wide OCR engine, creating it on first use."""
    global _engine  # noqa: PLW0603
    if _engine is None:
        _engine = create_ocr_engine(settings)
    return _engine
