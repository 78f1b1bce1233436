import json
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from docsum.radiology.merge import merge
from docsum.radiology.models import RadiologyExtraction

# Field paths counted by completeness(); list fields are probed through their first item.
COMPLETENESS_FIELDS = (
    "summary",
    "birads.value",
    "birads.confidence",
    "birads.evidence",
    "breast_density.value",
    "breast_density.evidence",
    "exam.type",
    "exam.laterality",
    "exam.evidence",
    "comparison.prior_exam_date",
    "comparison.evidence",
    "findings",
    "findings.0.laterality",
    "findings.0.location",
    "findings.0.description",
    "findings.0.assessment",
    "findings.0.evidence",
    "recommendations",
    "recommendations.0.action",
    "recommendations.0.timeframe",
    "recommendations.0.evidence",
    "red_flags",
)


@dataclass(frozen=True)
class MergedReport:
    """A merged extraction and the number of reports it was built from."""

    extraction: RadiologyExtraction
    document_count: int


def merge_report(extractions: Sequence[RadiologyExtraction]) -> MergedReport:
    return MergedReport(extraction=merge(extractions), document_count=len(extractions))


def format_report(report: MergedReport) -> str:
    """Render a merged report as plain text for display or copying."""
    merged = report.extraction
    summary = merged.summary if merged.summary.strip() else "No summary details available."

    findings = [
        f"- {f.laterality}{f' at {f.location}' if f.location else ''}: "
        f"{f.description} ({f.assessment})"
        for f in merged.findings
    ] or ["- None"]
    recommendations = [
        f"- {r.action}{f' ({r.timeframe})' if r.timeframe else ''}"
        for r in merged.recommendations
    ] or ["- None"]
    red_flags = ", ".join(merged.red_flags) if merged.red_flags else "None"

    birads = merged.birads.value if merged.birads.value is not None else "Unknown"
    lines = [
        f"Radiology batch summary ({report.document_count} reports)",
        "",
        "Summary:",
        summary,
        "",
        f"BI-RADS: {birads} ({merged.birads.confidence})",
        f"Breast density: {merged.breast_density.value or 'Unknown'}",
        f"Exam: {merged.exam.type or 'Unknown'} ({merged.exam.laterality or 'Unknown'})",
        f"Comparison date: {merged.comparison.prior_exam_date or 'None'}",
        "",
        "Findings:",
        *findings,
        "",
        "Recommendations:",
        *recommendations,
        "",
        f"Red flags: {red_flags}",
    ]
    return "\n".join(lines)


def to_json(extraction: RadiologyExtraction) -> str:
    return json.dumps(extraction.to_dict(), indent=2, ensure_ascii=False)


def completeness(extraction: RadiologyExtraction) -> int:
    """Percentage (0-100) of schema fields that carry a value."""
    data = extraction.to_dict()
    filled = sum(1 for path in COMPLETENESS_FIELDS if _is_filled(_lookup(data, path)))
    return round(filled / len(COMPLETENESS_FIELDS) * 100)


def _lookup(data: Any, path: str) -> Any:
    current = data
    for part in path.split("."):
        if isinstance(current, list):
            index = int(part)
            current = current[index] if index < len(current) else None
        elif isinstance(current, dict):
            current = current.get(part)
        else:
            return None
    return current


def _is_filled(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, list):
        return bool(value)
    if isinstance(value, float):
        return math.isfinite(value)
    return True
