from dataclasses import dataclass, field
from typing import Any

# Ordinal scales, lowest first.
CONFIDENCE_LEVELS = ("low", "medium", "high")
DENSITY_CATEGORIES = ("A", "B", "C", "D")

EXAM_LATERALITIES = ("left", "right", "bilateral")
FINDING_LATERALITIES = ("left", "right", "bilateral", "unknown")
ASSESSMENTS = (
    "benign",
    "probably_benign",
    "suspicious",
    "highly_suggestive_malignancy",
    "incomplete",
    "unknown",
)

BIRADS_MIN = 0
BIRADS_MAX = 6

Evidence = tuple[str, ...]


@dataclass(frozen=True)
class Birads:
    """BI-RADS assessment category."""

    value: int | None = None
    confidence: str = "low"
    evidence: Evidence = ()


@dataclass(frozen=True)
class BreastDensity:
    value: str | None = None
    evidence: Evidence = ()


@dataclass(frozen=True)
class Exam:
    type: str | None = None
    laterality: str | None = None
    evidence: Evidence = ()


@dataclass(frozen=True)
class Comparison:
    prior_exam_date: str | None = None
    evidence: Evidence = ()


@dataclass(frozen=True)
class Finding:
    """A single imaging finding."""

    laterality: str
    description: str
    assessment: str
    location: str | None = None
    evidence: Evidence = ()


@dataclass(frozen=True)
class Recommendation:
    action: str
    timeframe: str | None = None
    evidence: Evidence = ()


@dataclass(frozen=True)
class RadiologyExtraction:
    """Structured data extracted from one mammography/radiology report."""

    summary: str = ""
    birads: Birads = field(default_factory=Birads)
    breast_density: BreastDensity = field(default_factory=BreastDensity)
    exam: Exam = field(default_factory=Exam)
    comparison: Comparison = field(default_factory=Comparison)
    findings: tuple[Finding, ...] = ()
    recommendations: tuple[Recommendation, ...] = ()
    red_flags: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-compatible shape used by the extraction schema."""
        return {
            "summary": self.summary,
            "birads": {
                "value": self.birads.value,
                "confidence": self.birads.confidence,
                "evidence": list(self.birads.evidence),
            },
            "breast_density": {
                "value": self.breast_density.value,
                "evidence": list(self.breast_density.evidence),
            },
            "exam": {
                "type": self.exam.type,
                "laterality": self.exam.laterality,
                "evidence": list(self.exam.evidence),
            },
            "comparison": {
                "prior_exam_date": self.comparison.prior_exam_date,
                "evidence": list(self.comparison.evidence),
            },
            "findings": [
                {
                    "laterality": f.laterality,
                    "location": f.location,
                    "description": f.description,
                    "assessment": f.assessment,
                    "evidence": list(f.evidence),
                }
                for f in self.findings
            ],
            "recommendations": [
                {
                    "action": r.action,
                    "timeframe": r.timeframe,
                    "evidence": list(r.evidence),
                }
                for r in self.recommendations
            ],
            "red_flags": list(self.red_flags),
        }
