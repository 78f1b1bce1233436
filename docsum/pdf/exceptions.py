class PdfExtractionError(Exception):
    """Raised when a PDF or one of its pages cannot be read."""


class PageRenderError(PdfExtractionError):
    """Raised when a page cannot be rasterized into a bitmap."""
