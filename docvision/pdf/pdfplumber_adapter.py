from pathlib import Path

import pdfplumber

from docvision.pdf.base import BasePdfRasterizer, page_file_name
from docvision.pdf.exceptions import PdfRenderError


class PdfPlumberAdapter(BasePdfRasterizer):
    """Renders PDF pages using pdfplumber."""

    def rasterize(self, pdf_path: Path, output_dir: Path, dpi: int) -> list[Path]:
        try:
            written: list[Path] = []
            with pdfplumber.open(pdf_path) as pdf:
                for index, page in enumerate(pdf.pages):
                    target = output_dir / page_file_name(index)
                    page.to_image(resolution=dpi).save(target, format="PNG")
                    written.append(target)
            return written
        except Exception as exc:
            raise PdfRenderError(f"pdfplumber rendering failed: {exc}") from exc

    def page_count(self, pdf_path: Path) -> int:
        try:
            with pdfplumber.open(pdf_path) as pdf:
                return len(pdf.pages)
        except Exception as exc:
            raise PdfRenderError(f"pdfplumber could not open document: {exc}") from exc
