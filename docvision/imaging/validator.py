"""Quality gate for page renders, extracted assets and crops."""

import asyncio
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from docvision.hashing.content_hasher import ContentHasher
from docvision.imaging.geometry import MAX_ASPECT_RATIO, MIN_ASPECT_RATIO
from docvision.logging.logger import Log

MIN_SIDE = 50
LARGE_SIDE = 1000
SAMPLE_SIZE = (100, 100)
MIN_MEAN = 10.0
MAX_MEAN = 245.0
MIN_STDDEV = 15.0


class ImageValidator:
    """Rejects images that are too small, oddly shaped, blank or flat.

    Verdicts are memoized by image content hash in the `verdicts` mapping,
    which the owner clears between runs.
    """

    def __init__(self, hasher: ContentHasher, verdicts: dict[str, bool]) -> None:
        self._hasher = hasher
        self._verdicts = verdicts

    async def is_valid(self, path: Path) -> bool:
        try:
            digest = await asyncio.to_thread(self._hasher.image_digest, path)
        except OSError as exc:
            Log.warning(f"Cannot read image {path.name}: {exc}")
            return False
        cached = self._verdicts.get(digest)
        if cached is not None:
            return cached
        verdict = await asyncio.to_thread(self.check, path)
        self._verdicts[digest] = verdict
        return verdict

    @staticmethod
    def check(path: Path) -> bool:
        """Run the quality heuristics synchronously, without caching."""
        try:
            with Image.open(path) as img:
                width, height = img.size
                if width < MIN_SIDE or height < MIN_SIDE:
                    return False
                if not MIN_ASPECT_RATIO <= width / height <= MAX_ASPECT_RATIO:
                    return False
                if width > LARGE_SIDE or height > LARGE_SIDE:
                    img.thumbnail(SAMPLE_SIZE)
                with img.convert("L") as sample:
                    pixels = np.asarray(sample, dtype=np.float64)
        except (OSError, UnidentifiedImageError) as exc:
            Log.warning(f"Cannot decode image {path.name}: {exc}")
            return False

        mean = float(pixels.mean())
        stddev = float(pixels.std())
        if not MIN_MEAN < mean < MAX_MEAN:
            return False
        return stddev > MIN_STDDEV
