"""Pulls embedded images and vectors out of a document and filters them."""

import asyncio
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from docvision.hashing.content_hasher import ContentHasher
from docvision.imaging.validator import ImageValidator
from docvision.logging.logger import Log
from docvision.pdf.base import PAGE_FILE_RE, BaseExtractionTool
from docvision.processor.models import AssetKind, Document, EmbeddedAsset

RASTER_SUFFIXES = frozenset({".png", ".jpg", ".jpeg", ".tif", ".tiff"})
VECTOR_SUFFIXES = frozenset({".svg"})
MIN_VECTOR_BYTES = 1024

BACKGROUND_MIN_SIDE = 500
BACKGROUND_SQUARE_TOLERANCE = 0.05
MIN_PIXEL_DENSITY = 0.10
NEAR_WHITE = 240
_DENSITY_SAMPLE = (100, 100)


def pixel_density(path: Path) -> float:
    """Fraction of pixels that are not near-white, after downsampling to 100x100."""
    with Image.open(path) as img:
        img.thumbnail(_DENSITY_SAMPLE)
        with img.convert("RGB") as rgb:
            pixels = np.asarray(rgb)
    near_white = np.all(pixels > NEAR_WHITE, axis=2)
    return 1.0 - float(near_white.mean())


def _is_large_square(path: Path) -> bool:
    with Image.open(path) as img:
        width, height = img.size
    if min(width, height) < BACKGROUND_MIN_SIDE:
        return False
    return abs(width - height) <= BACKGROUND_SQUARE_TOLERANCE * max(width, height)


class AssetExtractor:
    """Runs the available extraction tools and keeps the distinct, useful output.

    Files are deduplicated against `seen_hashes`, a set owned by the run caches.
    """

    def __init__(
        self,
        *,
        tools: list[BaseExtractionTool],
        hasher: ContentHasher,
        validator: ImageValidator,
        seen_hashes: set[str],
        timeout_seconds: float = 60.0,
        batch_size: int = 10,
    ) -> None:
        self._tools = tools
        self._hasher = hasher
        self._validator = validator
        self._seen_hashes = seen_hashes
        self._timeout_seconds = timeout_seconds
        self._batch_size = batch_size

    async def extract(self, document: Document, output_dir: Path) -> list[EmbeddedAsset]:
        """Run the tools and filter their output within one deadline.

        When the deadline passes, the assets accepted so far are returned.
        """
        tools = [tool for tool in self._tools if tool.is_available()]
        if not tools:
            Log.warning("No asset extraction tool is available; skipping assets")
            return []

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._timeout_seconds
        await self._run_tools(tools, document.path, output_dir, self._timeout_seconds)

        candidates = sorted(
            path
            for path in output_dir.iterdir()
            if path.is_file() and path.suffix.lower() in RASTER_SUFFIXES | VECTOR_SUFFIXES
        )
        assets: list[EmbeddedAsset] = []
        if not candidates:
            return assets
        try:
            await asyncio.wait_for(
                self._scan(document, candidates, assets),
                timeout=max(deadline - loop.time(), 0.0),
            )
        except asyncio.TimeoutError:
            Log.warning(
                f"Asset extraction exceeded {self._timeout_seconds}s while scanning; "
                f"keeping {len(assets)} accepted files"
            )
            accepted = {asset.path for asset in assets}
            for path in candidates:
                if path not in accepted and not PAGE_FILE_RE.match(path.name):
                    self._discard(path)
        assets.sort(key=lambda asset: asset.path)
        Log.info(
            f"Kept {len(assets)} of {len(candidates)} extracted files for {document.path.name}"
        )
        return assets

    async def _run_tools(
        self,
        tools: list[BaseExtractionTool],
        pdf_path: Path,
        output_dir: Path,
        timeout: float,
    ) -> None:
        tasks = [asyncio.create_task(tool.run(pdf_path, output_dir)) for tool in tools]
        done, pending = await asyncio.wait(tasks, timeout=timeout)
        if pending:
            Log.warning(f"Asset extraction exceeded {timeout}s; stopping unfinished tools")
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
        for tool, task in zip(tools, tasks):
            if task in done and task.exception() is not None:
                Log.warning(f"{tool.name} failed: {task.exception()}")

    async def _scan(
        self, document: Document, candidates: list[Path], assets: list[EmbeddedAsset]
    ) -> None:
        for start in range(0, len(candidates), self._batch_size):
            batch = candidates[start : start + self._batch_size]
            await asyncio.gather(*(self._collect(document, path, assets) for path in batch))

    async def _collect(
        self, document: Document, path: Path, assets: list[EmbeddedAsset]
    ) -> None:
        asset = await self._accept(document, path)
        if asset is not None:
            assets.append(asset)

    async def _accept(self, document: Document, path: Path) -> EmbeddedAsset | None:
        if PAGE_FILE_RE.match(path.name):
            return None
        try:
            digest = await asyncio.to_thread(self._hasher.image_digest, path)
        except OSError as exc:
            Log.warning(f"Skipping unreadable asset {path.name}: {exc}")
            return None
        if digest in self._seen_hashes:
            Log.debug(f"Duplicate asset {path.name} dropped")
            self._discard(path)
            return None
        self._seen_hashes.add(digest)

        if path.suffix.lower() in VECTOR_SUFFIXES:
            kind = AssetKind.VECTOR
            keep = path.stat().st_size >= MIN_VECTOR_BYTES
        else:
            kind = AssetKind.RASTER
            keep = await self._validator.is_valid(path) and not await self._is_page_background(path)

        if not keep:
            self._discard(path)
            return None
        return EmbeddedAsset(
            source_hash=document.content_hash,
            path=path,
            content_hash=digest,
            kind=kind,
        )

    async def _is_page_background(self, path: Path) -> bool:
        """Large square renders that are almost entirely white are page backgrounds."""
        try:
            if not await asyncio.to_thread(_is_large_square, path):
                return False
            density = await asyncio.to_thread(pixel_density, path)
        except (OSError, UnidentifiedImageError) as exc:
            Log.warning(f"Cannot inspect asset {path.name}: {exc}")
            return True
        return density < MIN_PIXEL_DENSITY

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            Log.warning(f"Could not remove rejected asset {path.name}: {exc}")
