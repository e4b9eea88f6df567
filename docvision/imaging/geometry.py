"""Pixel-space bounding boxes with clipping, padding and overlap tests."""

import math
from collections.abc import Iterable
from dataclasses import dataclass

LOGO_PADDING_RATIO = 0.05
PHOTO_PADDING_RATIO = 0.10
OVERLAP_THRESHOLD = 0.70
MIN_ASPECT_RATIO = 0.2
MAX_ASPECT_RATIO = 5.0


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle, always inside its image.

    Build instances with `clipped` so that `0 <= left`, `0 <= top`,
    `left + width <= image_width` and `top + height <= image_height` hold.
    """

    left: int
    top: int
    width: int
    height: int

    @classmethod
    def clipped(
        cls,
        left: float,
        top: float,
        right: float,
        bottom: float,
        image_width: int,
        image_height: int,
    ) -> "BoundingBox":
        x0 = min(max(0, math.floor(left)), image_width)
        y0 = min(max(0, math.floor(top)), image_height)
        x1 = min(max(x0, math.ceil(right)), image_width)
        y1 = min(max(y0, math.ceil(bottom)), image_height)
        return cls(left=x0, top=y0, width=x1 - x0, height=y1 - y0)

    @classmethod
    def from_points(
        cls,
        points: Iterable[tuple[float, float]],
        image_width: int,
        image_height: int,
    ) -> "BoundingBox":
        """Extents of a polygon, clipped to the image."""
        xs, ys = zip(*points)
        return cls.clipped(min(xs), min(ys), max(xs), max(ys), image_width, image_height)

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def aspect_ratio(self) -> float:
        if self.height == 0:
            return 0.0
        return self.width / self.height

    def has_usable_shape(self, min_side: int) -> bool:
        return (
            self.width >= min_side
            and self.height >= min_side
            and MIN_ASPECT_RATIO <= self.aspect_ratio <= MAX_ASPECT_RATIO
        )

    def padded(
        self, pad_x: float, pad_y: float, image_width: int, image_height: int
    ) -> "BoundingBox":
        return BoundingBox.clipped(
            self.left - pad_x,
            self.top - pad_y,
            self.right + pad_x,
            self.bottom + pad_y,
            image_width,
            image_height,
        )

    def intersection_area(self, other: "BoundingBox") -> int:
        width = min(self.right, other.right) - max(self.left, other.left)
        height = min(self.bottom, other.bottom) - max(self.top, other.top)
        if width <= 0 or height <= 0:
            return 0
        return width * height

    def overlaps(self, other: "BoundingBox", threshold: float = OVERLAP_THRESHOLD) -> bool:
        """True when the shared area is at least `threshold` of either box."""
        shared = self.intersection_area(other)
        if shared == 0:
            return False
        return shared >= threshold * self.area or shared >= threshold * other.area

    def as_crop_box(self) -> tuple[int, int, int, int]:
        """(left, upper, right, lower) as Pillow's crop expects."""
        return (self.left, self.top, self.right, self.bottom)
