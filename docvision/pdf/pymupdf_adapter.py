from pathlib import Path

import pymupdf

from docvision.pdf.base import BasePdfRasterizer, page_file_name
from docvision.pdf.exceptions import PdfRenderError


class PyMuPdfAdapter(BasePdfRasterizer):
    """Renders PDF pages using PyMuPDF."""

    def rasterize(self, pdf_path: Path, output_dir: Path, dpi: int) -> list[Path]:
        try:
            written: list[Path] = []
            with pymupdf.open(pdf_path) as doc:  # type: ignore[no-untyped-call]
                for index, page in enumerate(doc):
                    target = output_dir / page_file_name(index)
                    page.get_pixmap(dpi=dpi).save(str(target))
                    written.append(target)
            return written
        except Exception as exc:
            raise PdfRenderError(f"pymupdf rendering failed: {exc}") from exc

    def page_count(self, pdf_path: Path) -> int:
        try:
            with pymupdf.open(pdf_path) as doc:  # type: ignore[no-untyped-call]
                return doc.page_count
        except Exception as exc:
            raise PdfRenderError(f"pymupdf could not open document: {exc}") from exc
