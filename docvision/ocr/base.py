from abc import ABC, abstractmethod
from pathlib import Path


class BaseOcrEngine(ABC):
    """Contract for all OCR adapters."""

    @abstractmethod
    def recognize(self, image_path: Path) -> str:
        """Extract plain text from an image.

        Returns:
            Recognized text, possibly empty.

        Raises:
            OcrError: if the engine fails.
        """
