"""Merges per-document radiology extractions into a single record.

Each field has its own policy: a pure reducer folded over the inputs in
order, plus a finishing step that turns the accumulator into the field
value. Ordinal fields keep the most severe value; evidence and list fields
keep the de-duplicated union in first-seen order.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from functools import reduce
from typing import Generic, TypeVar

from docsum.radiology.dates import parse_exam_date
from docsum.radiology.models import (
    CONFIDENCE_LEVELS,
    DENSITY_CATEGORIES,
    Birads,
    BreastDensity,
    Comparison,
    Evidence,
    Exam,
    Finding,
    RadiologyExtraction,
    Recommendation,
)

A = TypeVar("A")
V = TypeVar("V")
T = TypeVar("T")


@dataclass(frozen=True)
class FieldPolicy(Generic[A, V]):
    """How one field is combined across extractions."""

    initial: A
    step: Callable[[A, RadiologyExtraction], A]
    finish: Callable[[A], V]

    def apply(self, extractions: Iterable[RadiologyExtraction]) -> V:
        return self.finish(reduce(self.step, extractions, self.initial))


def _identity(value: T) -> T:
    return value


def merge_unique_strings(acc: tuple[str, ...], values: Iterable[str]) -> tuple[str, ...]:
    """Append trimmed, non-empty values not already present in acc."""
    merged = list(acc)
    for value in values:
        cleaned = value.strip()
        if cleaned and cleaned not in merged:
            merged.append(cleaned)
    return tuple(merged)


def merge_unique_items(acc: tuple[T, ...], items: Iterable[T]) -> tuple[T, ...]:
    """Append items not structurally equal to one already present in acc."""
    merged = list(acc)
    for item in items:
        if item not in merged:
            merged.append(item)
    return tuple(merged)


def evidence_policy(
    get: Callable[[RadiologyExtraction], Evidence],
) -> FieldPolicy[Evidence, Evidence]:
    return FieldPolicy((), lambda acc, e: merge_unique_strings(acc, get(e)), _identity)


def _render_summary(parts: tuple[str, ...]) -> str:
    if len(parts) > 1:
        return "\n".join(f"- {part}" for part in parts)
    return parts[0] if parts else ""


SUMMARY: FieldPolicy[tuple[str, ...], str] = FieldPolicy(
    (), lambda acc, e: merge_unique_strings(acc, [e.summary]), _render_summary
)


def _max_birads(acc: int | None, e: RadiologyExtraction) -> int | None:
    value = e.birads.value
    if value is None:
        return acc
    return value if acc is None else max(acc, value)


def _ranked_max(ranking: tuple[str, ...]) -> Callable[[str | None, str | None], str | None]:
    def pick(acc: str | None, value: str | None) -> str | None:
        if value not in ranking:
            return acc
        if acc is None or ranking.index(value) > ranking.index(acc):
            return value
        return acc

    return pick


_max_confidence = _ranked_max(CONFIDENCE_LEVELS)
_max_density = _ranked_max(DENSITY_CATEGORIES)

BIRADS_VALUE: FieldPolicy[int | None, int | None] = FieldPolicy(None, _max_birads, _identity)

BIRADS_CONFIDENCE: FieldPolicy[str | None, str] = FieldPolicy(
    None,
    lambda acc, e: _max_confidence(acc, e.birads.confidence),
    lambda acc: acc or CONFIDENCE_LEVELS[0],
)

BREAST_DENSITY: FieldPolicy[str | None, str | None] = FieldPolicy(
    None, lambda acc, e: _max_density(acc, e.breast_density.value), _identity
)


EXAM_TYPE: FieldPolicy[str | None, str | None] = FieldPolicy(
    None, lambda acc, e: acc if acc is not None else (e.exam.type or None), _identity
)


@dataclass(frozen=True)
class LateralityAcc:
    first: str | None = None
    seen: frozenset[str] = frozenset()


def _step_laterality(acc: LateralityAcc, e: RadiologyExtraction) -> LateralityAcc:
    value = e.exam.laterality
    if value is None:
        return acc
    return LateralityAcc(
        first=acc.first if acc.first is not None else value,
        seen=acc.seen | {value},
    )


def _finish_laterality(acc: LateralityAcc) -> str | None:
    if "bilateral" in acc.seen or {"left", "right"} <= acc.seen:
        return "bilateral"
    return acc.first


EXAM_LATERALITY: FieldPolicy[LateralityAcc, str | None] = FieldPolicy(
    LateralityAcc(), _step_laterality, _finish_laterality
)


@dataclass(frozen=True)
class PriorDateAcc:
    """Most recent parseable date and, separately, the first raw value seen."""

    latest: tuple[datetime, str] | None = None
    first_raw: str | None = None


def _step_prior_date(acc: PriorDateAcc, e: RadiologyExtraction) -> PriorDateAcc:
    raw = e.comparison.prior_exam_date
    if not raw:
        return acc
    first_raw = acc.first_raw if acc.first_raw is not None else raw
    latest = acc.latest
    parsed = parse_exam_date(raw)
    # Strictly later only: equal dates keep the first spelling seen.
    if parsed is not None and (latest is None or parsed > latest[0]):
        latest = (parsed, raw)
    return PriorDateAcc(latest=latest, first_raw=first_raw)


def _finish_prior_date(acc: PriorDateAcc) -> str | None:
    """Prefer the most recent parseable date; fall back to the first raw value
    only when no value parses as a date."""
    if acc.latest is not None:
        return acc.latest[1]
    return acc.first_raw


PRIOR_EXAM_DATE: FieldPolicy[PriorDateAcc, str | None] = FieldPolicy(
    PriorDateAcc(), _step_prior_date, _finish_prior_date
)


def _clean_finding(finding: Finding) -> Finding:
    return Finding(
        laterality=finding.laterality,
        location=finding.location,
        description=finding.description,
        assessment=finding.assessment,
        evidence=merge_unique_strings((), finding.evidence),
    )


def _clean_recommendation(recommendation: Recommendation) -> Recommendation:
    return Recommendation(
        action=recommendation.action,
        timeframe=recommendation.timeframe,
        evidence=merge_unique_strings((), recommendation.evidence),
    )


FINDINGS: FieldPolicy[tuple[Finding, ...], tuple[Finding, ...]] = FieldPolicy(
    (), lambda acc, e: merge_unique_items(acc, map(_clean_finding, e.findings)), _identity
)

RECOMMENDATIONS: FieldPolicy[tuple[Recommendation, ...], tuple[Recommendation, ...]] = FieldPolicy(
    (),
    lambda acc, e: merge_unique_items(acc, map(_clean_recommendation, e.recommendations)),
    _identity,
)

RED_FLAGS: FieldPolicy[tuple[str, ...], tuple[str, ...]] = FieldPolicy(
    (), lambda acc, e: merge_unique_strings(acc, e.red_flags), _identity
)


def merge(extractions: Sequence[RadiologyExtraction]) -> RadiologyExtraction:
    """Combine extractions from several reports into one.

    Inputs are not modified. The result depends only on the inputs and
    their order.

    Raises:
        ValueError: if extractions is empty.
    """
    if not extractions:
        raise ValueError("merge() requires at least one extraction")
    return RadiologyExtraction(
        summary=SUMMARY.apply(extractions),
        birads=Birads(
            value=BIRADS_VALUE.apply(extractions),
            confidence=BIRADS_CONFIDENCE.apply(extractions),
            evidence=evidence_policy(lambda e: e.birads.evidence).apply(extractions),
        ),
        breast_density=BreastDensity(
            value=BREAST_DENSITY.apply(extractions),
            evidence=evidence_policy(lambda e: e.breast_density.evidence).apply(extractions),
        ),
        exam=Exam(
            type=EXAM_TYPE.apply(extractions),
            laterality=EXAM_LATERALITY.apply(extractions),
            evidence=evidence_policy(lambda e: e.exam.evidence).apply(extractions),
        ),
        comparison=Comparison(
            prior_exam_date=PRIOR_EXAM_DATE.apply(extractions),
            evidence=evidence_policy(lambda e: e.comparison.evidence).apply(extractions),
        ),
        findings=FINDINGS.apply(extractions),
        recommendations=RECOMMENDATIONS.apply(extractions),
        red_flags=RED_FLAGS.apply(extractions),
    )
