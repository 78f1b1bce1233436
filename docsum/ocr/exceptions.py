class OcrError(Exception):
    """Raised when the OCR worker cannot be started or fails to recognize a page."""
