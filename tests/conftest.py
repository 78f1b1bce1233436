import io
from collections.abc import Callable
from typing import Any

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from docsum.radiology.models import RadiologyExtraction
from docsum.radiology.validator import validate_and_build


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def mixed_pdf_bytes() -> bytes:
    """Generate a three-page PDF: text, blank, text."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "First page text")
    c.showPage()
    c.showPage()
    c.drawString(72, 720, "Third page text")
    c.save()
    return buf.getvalue()


def _extraction_payload(**overrides: Any) -> dict[str, Any]:
    """A schema-valid raw extraction with optional top-level overrides."""
    payload: dict[str, Any] = {
        "summary": "Routine screening mammogram.",
        "birads": {"value": 2, "confidence": "medium", "evidence": ["BI-RADS 2"]},
        "breast_density": {"value": "B", "evidence": ["Density B"]},
        "exam": {"type": "screening", "laterality": "bilateral", "evidence": ["Screening"]},
        "comparison": {"prior_exam_date": "2023-01-01", "evidence": ["Prior exam"]},
        "findings": [
            {
                "laterality": "left",
                "location": "upper outer quadrant",
                "description": "Benign calcifications.",
                "assessment": "benign",
                "evidence": ["Calcifications"],
            }
        ],
        "recommendations": [
            {
                "action": "Routine screening",
                "timeframe": "12 months",
                "evidence": ["Routine follow-up"],
            }
        ],
        "red_flags": [],
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def extraction_payload() -> Callable[..., dict[str, Any]]:
    """Factory for raw extraction JSON objects."""
    return _extraction_payload


@pytest.fixture()
def make_extraction() -> Callable[..., RadiologyExtraction]:
    """Build a RadiologyExtraction from extraction_payload() overrides."""

    def _make(**overrides: Any) -> RadiologyExtraction:
        return validate_and_build(_extraction_payload(**overrides))

    return _make
