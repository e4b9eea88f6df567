import asyncio
from pathlib import Path

from docvision.hashing.content_hasher import ContentHasher
from docvision.logging.logger import Log
from docvision.pdf.base import BasePdfRasterizer
from docvision.processor.models import PageImage


class PageRenderer:
    """Converts document pages into hashed raster images."""

    def __init__(self, rasterizer: BasePdfRasterizer, hasher: ContentHasher, dpi: int) -> None:
        self._rasterizer = rasterizer
        self._hasher = hasher
        self._dpi = dpi

    async def render(self, document_path: Path, output_dir: Path) -> list[PageImage]:
        """Render every page to `output_dir`, in page order.

        Raises:
            PdfRenderError: if the rasterizer fails.
        """
        paths = await asyncio.to_thread(
            self._rasterizer.rasterize, document_path, output_dir, self._dpi
        )
        digests = await asyncio.gather(
            *(asyncio.to_thread(self._hasher.image_digest, path) for path in paths)
        )
        Log.info(f"Rendered {len(paths)} pages of {document_path.name}")
        return [
            PageImage(index=index, path=path, content_hash=digest)
            for index, (path, digest) in enumerate(zip(paths, digests))
        ]

    async def page_count(self, document_path: Path) -> int:
        return await asyncio.to_thread(self._rasterizer.page_count, document_path)
