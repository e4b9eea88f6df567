from pathlib import Path

import pytesseract
from PIL import Image

from docvision.ocr.base import BaseOcrEngine
from docvision.ocr.exceptions import OcrError


class TesseractAdapter(BaseOcrEngine):
    """Recognizes text with the Tesseract engine through pytesseract."""

    def __init__(self, language: str = "eng") -> None:
        self._language = language

    def recognize(self, image_path: Path) -> str:
        try:
            with Image.open(image_path) as image:
                return pytesseract.image_to_string(image, lang=self._language)
        except pytesseract.TesseractNotFoundError as exc:
            raise OcrError("tesseract is not installed or not on PATH") from exc
        except (pytesseract.TesseractError, OSError) as exc:
            raise OcrError(f"tesseract failed on {image_path.name}: {exc}") from exc
