from pathlib import Path

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from tests.helpers import make_textured_image, write_checker_pdf


@pytest.fixture()
def textured_image(tmp_path: Path) -> Path:
    return make_textured_image(tmp_path / "textured.png")


@pytest.fixture()
def sample_pdf_path(tmp_path: Path) -> Path:
    """A minimal single-page PDF with known text content."""
    path = tmp_path / "sample.pdf"
    c = canvas.Canvas(str(path), pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return path


@pytest.fixture()
def checker_pdf_path(tmp_path: Path) -> Path:
    """Three visually distinct pages with enough contrast to pass validation."""
    return write_checker_pdf(tmp_path / "checker.pdf", (24, 36, 48))
