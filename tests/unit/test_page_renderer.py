from pathlib import Path
from unittest.mock import MagicMock

import pytest

from docvision.hashing.content_hasher import ContentHasher
from docvision.pdf.exceptions import PdfRenderError
from docvision.pdf.page_renderer import PageRenderer
from docvision.pdf.pymupdf_adapter import PyMuPdfAdapter


class TestPageRenderer:
    @pytest.mark.asyncio
    async def test_returns_hashed_pages_in_order(self, checker_pdf_path: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        out.mkdir()
        renderer = PageRenderer(PyMuPdfAdapter(), ContentHasher(), dpi=40)
        pages = await renderer.render(checker_pdf_path, out)
        assert [p.index for p in pages] == [0, 1, 2]
        assert len({p.content_hash for p in pages}) == 3
        assert pages[0].content_hash == ContentHasher().image_digest(pages[0].path)

    @pytest.mark.asyncio
    async def test_passes_dpi(self, tmp_path: Path) -> None:
        rasterizer = MagicMock()
        rasterizer.rasterize.return_value = []
        renderer = PageRenderer(rasterizer, ContentHasher(), dpi=72)
        assert await renderer.render(tmp_path / "doc.pdf", tmp_path) == []
        rasterizer.rasterize.assert_called_once_with(tmp_path / "doc.pdf", tmp_path, 72)

    @pytest.mark.asyncio
    async def test_propagates_render_error(self, tmp_path: Path) -> None:
        rasterizer = MagicMock()
        rasterizer.rasterize.side_effect = PdfRenderError("broken")
        renderer = PageRenderer(rasterizer, ContentHasher(), dpi=72)
        with pytest.raises(PdfRenderError, match="broken"):
            await renderer.render(tmp_path / "doc.pdf", tmp_path)

    @pytest.mark.asyncio
    async def test_page_count(self, checker_pdf_path: Path) -> None:
        renderer = PageRenderer(PyMuPdfAdapter(), ContentHasher(), dpi=40)
        assert await renderer.page_count(checker_pdf_path) == 3
