"""Content-aware framing: place a fixed-aspect window over the busiest region."""

from pathlib import Path

import numpy as np
from PIL import Image

from docvision.imaging.geometry import BoundingBox

SCENE_ASPECT_RATIO = 3 / 2
SCENE_MAX_SIDE = 1200
WINDOW_FRACTION = 0.85
_ANALYSIS_SIDE = 256


def saliency_map(image: Image.Image) -> np.ndarray:
    """Edge energy plus colour saturation, one value per pixel."""
    rgb = np.asarray(image.convert("RGB"), dtype=np.float64)
    gray = rgb.mean(axis=2)
    grad_y, grad_x = np.gradient(gray)
    edges = np.hypot(grad_x, grad_y)
    saturation = rgb.max(axis=2) - rgb.min(axis=2)
    return edges + 0.5 * saturation


def attention_box(
    image: Image.Image,
    aspect_ratio: float = SCENE_ASPECT_RATIO,
    window_fraction: float = WINDOW_FRACTION,
) -> BoundingBox:
    """Return the `aspect_ratio` window with the highest total saliency.

    The window is `window_fraction` of the largest window of that aspect that
    fits the image, so the result is always a real crop of the page.
    """
    width, height = image.size
    win_w = min(width, height * aspect_ratio) * window_fraction
    win_h = win_w / aspect_ratio

    analysis = image.copy()
    analysis.thumbnail((_ANALYSIS_SIDE, _ANALYSIS_SIDE))
    scale = width / analysis.width
    saliency = saliency_map(analysis)
    analysis.close()

    rows, cols = saliency.shape
    win_rows = max(1, min(rows, round(win_h / scale)))
    win_cols = max(1, min(cols, round(win_w / scale)))

    integral = np.pad(saliency.cumsum(axis=0).cumsum(axis=1), ((1, 0), (1, 0)))
    sums = (
        integral[win_rows:, win_cols:]
        - integral[: rows + 1 - win_rows, win_cols:]
        - integral[win_rows:, : cols + 1 - win_cols]
        + integral[: rows + 1 - win_rows, : cols + 1 - win_cols]
    )
    best_row, best_col = np.unravel_index(int(np.argmax(sums)), sums.shape)

    left = min(best_col * scale, width - win_w)
    top = min(best_row * scale, height - win_h)
    return BoundingBox.clipped(left, top, left + win_w, top + win_h, width, height)


def save_attention_crop(
    source: Path,
    destination: Path,
    max_side: int = SCENE_MAX_SIDE,
) -> BoundingBox:
    """Crop `source` around its most salient region and write it to `destination`."""
    with Image.open(source) as img:
        box = attention_box(img)
        with img.crop(box.as_crop_box()) as crop:
            crop.thumbnail((max_side, max_side))
            crop.save(destination)
    return box
