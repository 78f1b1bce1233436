"""Validates raw parsed JSON against the radiology extraction schema."""

from typing import Any

from docsum.radiology.exceptions import ExtractionValidationError
from docsum.radiology.models import (
    ASSESSMENTS,
    BIRADS_MAX,
    BIRADS_MIN,
    CONFIDENCE_LEVELS,
    DENSITY_CATEGORIES,
    EXAM_LATERALITIES,
    FINDING_LATERALITIES,
    Birads,
    BreastDensity,
    Comparison,
    Evidence,
    Exam,
    Finding,
    RadiologyExtraction,
    Recommendation,
)

_TOP_LEVEL_FIELDS = (
    "summary",
    "birads",
    "breast_density",
    "exam",
    "comparison",
    "findings",
    "recommendations",
    "red_flags",
)


def validate_and_build(data: dict[str, Any]) -> RadiologyExtraction:
    """Validate raw parsed JSON and build a RadiologyExtraction.

    Nothing is coerced or guessed: a value of the wrong type or outside its
    allowed set rejects the whole extraction.

    Raises:
        ExtractionValidationError: on any validation failure.
    """
    if not isinstance(data, dict):
        raise ExtractionValidationError("Extraction must be an object")
    for name in _TOP_LEVEL_FIELDS:
        if name not in data:
            raise ExtractionValidationError(f"Missing required top-level field: {name}")
    return RadiologyExtraction(
        summary=_require_str(data["summary"], "summary"),
        birads=_build_birads(_require_object(data["birads"], "birads")),
        breast_density=_build_density(_require_object(data["breast_density"], "breast_density")),
        exam=_build_exam(_require_object(data["exam"], "exam")),
        comparison=_build_comparison(_require_object(data["comparison"], "comparison")),
        findings=tuple(
            _build_finding(_require_object(item, f"findings[{i}]"), f"findings[{i}]")
            for i, item in enumerate(_require_list(data["findings"], "findings"))
        ),
        recommendations=tuple(
            _build_recommendation(
                _require_object(item, f"recommendations[{i}]"), f"recommendations[{i}]"
            )
            for i, item in enumerate(_require_list(data["recommendations"], "recommendations"))
        ),
        red_flags=_build_strings(data["red_flags"], "red_flags"),
    )


def _build_birads(raw: dict[str, Any]) -> Birads:
    value = raw.get("value")
    if value is not None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ExtractionValidationError("'birads.value' must be a number or null")
        if isinstance(value, float) and not value.is_integer():
            raise ExtractionValidationError(
                f"'birads.value' must be an integer, got {value!r}"
            )
        if not BIRADS_MIN <= value <= BIRADS_MAX:
            raise ExtractionValidationError(
                f"'birads.value' must be an integer {BIRADS_MIN}-{BIRADS_MAX}, got {value!r}"
            )
        value = int(value)
    confidence = _require_choice(raw.get("confidence"), CONFIDENCE_LEVELS, "birads.confidence")
    return Birads(
        value=value,
        confidence=confidence,
        evidence=_build_evidence(raw, "birads"),
    )


def _build_density(raw: dict[str, Any]) -> BreastDensity:
    return BreastDensity(
        value=_optional_choice(raw.get("value"), DENSITY_CATEGORIES, "breast_density.value"),
        evidence=_build_evidence(raw, "breast_density"),
    )


def _build_exam(raw: dict[str, Any]) -> Exam:
    return Exam(
        type=_optional_str(raw.get("type"), "exam.type"),
        laterality=_optional_choice(raw.get("laterality"), EXAM_LATERALITIES, "exam.laterality"),
        evidence=_build_evidence(raw, "exam"),
    )


def _build_comparison(raw: dict[str, Any]) -> Comparison:
    return Comparison(
        prior_exam_date=_optional_str(raw.get("prior_exam_date"), "comparison.prior_exam_date"),
        evidence=_build_evidence(raw, "comparison"),
    )


def _build_finding(raw: dict[str, Any], path: str) -> Finding:
    return Finding(
        laterality=_require_choice(raw.get("laterality"), FINDING_LATERALITIES, f"{path}.laterality"),
        location=_optional_str(raw.get("location"), f"{path}.location"),
        description=_require_str(raw.get("description"), f"{path}.description"),
        assessment=_require_choice(raw.get("assessment"), ASSESSMENTS, f"{path}.assessment"),
        evidence=_build_evidence(raw, path),
    )


def _build_recommendation(raw: dict[str, Any], path: str) -> Recommendation:
    return Recommendation(
        action=_require_str(raw.get("action"), f"{path}.action"),
        timeframe=_optional_str(raw.get("timeframe"), f"{path}.timeframe"),
        evidence=_build_evidence(raw, path),
    )


def _build_evidence(raw: dict[str, Any], path: str) -> Evidence:
    if "evidence" not in raw:
        raise ExtractionValidationError(f"Missing required field: {path}.evidence")
    return _build_strings(raw["evidence"], f"{path}.evidence")


def _build_strings(raw: Any, path: str) -> tuple[str, ...]:
    items = _require_list(raw, path)
    for i, item in enumerate(items):
        if not isinstance(item, str):
            raise ExtractionValidationError(f"'{path}[{i}]' must be a string")
    return tuple(items)


def _require_object(raw: Any, path: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise ExtractionValidationError(f"'{path}' must be an object")
    return raw


def _require_list(raw: Any, path: str) -> list[Any]:
    if not isinstance(raw, list):
        raise ExtractionValidationError(f"'{path}' must be a list")
    return raw


def _require_str(raw: Any, path: str) -> str:
    if not isinstance(raw, str):
        raise ExtractionValidationError(f"'{path}' must be a string")
    return raw


def _optional_str(raw: Any, path: str) -> str | None:
    if raw is None:
        return None
    return _require_str(raw, path)


def _require_choice(raw: Any, choices: tuple[str, ...], path: str) -> str:
    if raw not in choices:
        raise ExtractionValidationError(
            f"'{path}' must be one of {list(choices)}, got {raw!r}"
        )
    return str(raw)


def _optional_choice(raw: Any, choices: tuple[str, ...], path: str) -> str | None:
    if raw is None:
        return None
    return _require_choice(raw, choices, path)
