import re
from abc import ABC, abstractmethod
from pathlib import Path

PAGE_FILE_PREFIX = "page"
PAGE_FILE_RE = re.compile(rf"^{PAGE_FILE_PREFIX}-\d+\.png$")


def page_file_name(index: int) -> str:
    """Sortable file name for the render of page `index` (0-based)."""
    return f"{PAGE_FILE_PREFIX}-{index + 1:03d}.png"


class BasePdfRasterizer(ABC):
    """Contract for all PDF page rasterization adapters."""

    @abstractmethod
    def rasterize(self, pdf_path: Path, output_dir: Path, dpi: int) -> list[Path]:
        """Render every page of a PDF to a PNG file.

        Args:
            pdf_path: Source document.
            output_dir: Existing directory receiving one file per page,
                named with `page_file_name`.
            dpi: Render resolution.

        Returns:
            Paths of the written files in page order.

        Raises:
            PdfRenderError: if rendering fails for any reason.
        """

    @abstractmethod
    def page_count(self, pdf_path: Path) -> int:
        """Return the number of pages.

        Raises:
            PdfRenderError: if the document cannot be opened.
        """


class BaseExtractionTool(ABC):
    """Contract for extractors that write embedded assets of a PDF into a directory."""

    name: str = ""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the extractor can run in this environment."""

    @abstractmethod
    async def run(self, pdf_path: Path, output_dir: Path) -> None:
        """Write zero or more asset files into `output_dir`.

        File names must not match `PAGE_FILE_RE`.
        """
