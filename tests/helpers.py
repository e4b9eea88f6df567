from pathlib import Path

import numpy as np
from PIL import Image
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


def make_textured_image(path: Path, size: tuple[int, int] = (200, 150), cell: int = 10) -> Path:
    """Write a high-contrast checkerboard image that passes image validation."""
    width, height = size
    xs = np.arange(width)[None, :] // cell
    ys = np.arange(height)[:, None] // cell
    pattern = ((xs + ys) % 2) * 160 + 40
    rgb = np.stack([pattern, np.roll(pattern, cell // 2, axis=1), pattern[::-1]], axis=2)
    Image.fromarray(rgb.astype(np.uint8)).save(path)
    return path


def make_flat_image(path: Path, size: tuple[int, int] = (200, 150), value: int = 128) -> Path:
    Image.new("RGB", size, (value, value, value)).save(path)
    return path


def draw_checker_page(c: canvas.Canvas, cell: float, text: str) -> None:
    """Fill a page with a black/white checkerboard so its render is not blank."""
    width, height = letter
    rows = int(height // cell) + 1
    cols = int(width // cell) + 1
    for row in range(rows):
        for col in range(cols):
            if (row + col) % 2 == 0:
                c.rect(col * cell, row * cell, cell, cell, stroke=0, fill=1)
    c.setFillColorRGB(1, 0, 0)
    c.drawString(72, 720, text)
    c.setFillColorRGB(0, 0, 0)


def write_checker_pdf(path: Path, cells: tuple[float, ...]) -> Path:
    """One checkerboard page per entry in `cells`."""
    c = canvas.Canvas(str(path), pagesize=letter)
    for number, cell in enumerate(cells, start=1):
        draw_checker_page(c, cell, f"Page {number} content")
        c.showPage()
    c.save()
    return path


def draw_dot_emblem(c: canvas.Canvas, x: float, y: float, rows: int = 8, cols: int = 8) -> None:
    """Draw a grid of nearly touching dots that reads as one piece of vector artwork."""
    for row in range(rows):
        for col in range(cols):
            c.circle(x + col * 7, y + row * 7, 3, stroke=0, fill=1)


def write_photo_pdf(path: Path, photo: Path, emblem_pages: tuple[int, ...] = ()) -> Path:
    """Two pages showing `photo` full-bleed; pages listed in `emblem_pages` also carry vector art."""
    width, height = letter
    c = canvas.Canvas(str(path), pagesize=letter)
    for index in range(2):
        c.drawImage(str(photo), 0, 0, width, height)
        if index in emblem_pages:
            draw_dot_emblem(c, 72, 600)
        c.showPage()
    c.save()
    return path
