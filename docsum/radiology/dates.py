from datetime import datetime, timezone

from dateutil import parser as _dtparse

# Components missing from the text (day, month) fall back to the first of the period.
_DEFAULT = datetime(2000, 1, 1)


def parse_exam_date(value: str | None) -> datetime | None:
    """Parse a date as written in a radiology report.

    Accepts ISO 8601 and the free-form spellings reports use ("March 5 2024",
    "Mar. 5, 2024", "5 March, 2024", a bare year). Aware values are converted
    to naive UTC so all results compare with each other.

    Returns:
        A datetime, or None if the value is empty or not a recognizable date.
    """
    if not value:
        return None
    raw = value.strip()
    if not raw:
        return None
    try:
        parsed = _dtparse.parse(raw, default=_DEFAULT)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
