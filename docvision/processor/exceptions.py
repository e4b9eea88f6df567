class ProcessorError(Exception):
    """Base exception for run-level pipeline errors."""


class DocumentNotFoundError(ProcessorError):
    """Raised when the source document does not exist."""


class UnsupportedDocumentError(ProcessorError):
    """Raised when the source file is not a PDF."""


class OutputSetupError(ProcessorError):
    """Raised when the output directory for a run cannot be prepared."""
