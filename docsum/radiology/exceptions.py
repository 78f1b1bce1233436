class RadiologyError(Exception):
    """Base exception for radiology extraction and reporting."""


class ExtractionValidationError(RadiologyError):
    """Raised when a structured extraction does not match the expected schema."""


class ReportTooShortError(RadiologyError):
    """Raised when report text is too short to extract anything from."""
