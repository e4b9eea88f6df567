from abc import ABC, abstractmethod
from pathlib import Path

from docvision.summarization.models import PageText


class BaseSummarizer(ABC):
    """Contract for page summarizers."""

    @abstractmethod
    async def summarize(self, image_path: Path) -> PageText | None:
        """Derive a title and description from a rendered page.

        Returns:
            PageText, or None when the page carries no recognizable text.

        Raises:
            SummarizationError: when the completion call or its output fails.
        """
