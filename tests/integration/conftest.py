import io
import shutil
from pathlib import Path

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from docsum.config.settings import Settings

REPORT_LINES = (
    "BILATERAL DIGITAL SCREENING MAMMOGRAM",
    "Comparison: prior exam dated 2023-01-01.",
    "The breasts are heterogeneously dense (category C).",
    "No suspicious mass, calcification or architectural distortion.",
    "IMPRESSION: Negative. BI-RADS 1. Routine screening in 12 months.",
)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return Settings(llm_provider="example", batch_request_delay_seconds=0.0)


@pytest.fixture(scope="session")
def tesseract_available() -> None:
    if shutil.which("tesseract") is None:
        pytest.skip("tesseract binary not installed")


@pytest.fixture()
def report_pdf_bytes() -> bytes:
    """A one-page radiology report with a text layer."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    y = 720
    for line in REPORT_LINES:
        c.drawString(72, y, line)
        y -= 18
    c.save()
    return buf.getvalue()


@pytest.fixture()
def files_root(tmp_path: Path) -> Path:
    return tmp_path
