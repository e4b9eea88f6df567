from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from docvision.imaging.geometry import BoundingBox


class FeatureKind(str, Enum):
    LOGO = "logo"
    PHOTO = "photo"
    SCENE = "scene"


@dataclass(frozen=True)
class DetectedFeature:
    """A cropped region written to disk."""

    kind: FeatureKind
    box: BoundingBox
    path: Path
    label: str = ""
    score: float = 0.0


@dataclass
class DetectionResult:
    logos: list[DetectedFeature] = field(default_factory=list)
    photos: list[DetectedFeature] = field(default_factory=list)
    scenes: list[DetectedFeature] = field(default_factory=list)
