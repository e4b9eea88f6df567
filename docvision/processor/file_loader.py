from pathlib import Path

from docvision.processor.exceptions import DocumentNotFoundError, UnsupportedDocumentError

PDF_SIGNATURE = b"%PDF"


class FileLoader:
    """Resolves the source document path and checks that it is a PDF."""

    def resolve(self, path: Path) -> Path:
        """Return the absolute path of a readable PDF.

        Raises:
            DocumentNotFoundError: if the file does not exist.
            UnsupportedDocumentError: if the file lacks a PDF signature.
        """
        resolved = path.expanduser().resolve()
        if not resolved.is_file():
            raise DocumentNotFoundError(f"File not found: {resolved}")
        try:
            with open(resolved, "rb") as fh:
                header = fh.read(1024)
        except OSError as exc:
            raise DocumentNotFoundError(f"File not readable: {resolved}: {exc}") from exc
        if PDF_SIGNATURE not in header:
            raise UnsupportedDocumentError(f"{resolved.name} is not a PDF document")
        return resolved
