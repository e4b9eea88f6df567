class PdfError(Exception):
    """Base exception for document rendering and native extraction."""


class PdfRenderError(PdfError):
    """Raised when pages cannot be rasterized."""


class ToolUnavailableError(PdfError):
    """Raised when a native extraction tool is not installed."""


class NativeToolError(PdfError):
    """Raised when a native extraction tool exits with an error."""


class VectorExtractionError(PdfError):
    """Raised when vector drawings cannot be read from a document."""
