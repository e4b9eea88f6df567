from dataclasses import dataclass, field
from enum import Enum


class AnnotationKind(str, Enum):
    LOGO = "logo"
    OBJECT = "object"
    LABEL = "label"


@dataclass(frozen=True)
class Vertex:
    """Absolute pixel vertex."""

    x: int = 0
    y: int = 0


@dataclass(frozen=True)
class NormalizedVertex:
    """Vertex in 0..1 image-relative coordinates."""

    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class LogoAnnotation:
    description: str
    score: float
    vertices: list[Vertex] = field(default_factory=list)


@dataclass(frozen=True)
class ObjectAnnotation:
    name: str
    score: float
    vertices: list[NormalizedVertex] = field(default_factory=list)


@dataclass(frozen=True)
class LabelAnnotation:
    description: str
    score: float


@dataclass(frozen=True)
class LogoResult:
    kind: AnnotationKind = AnnotationKind.LOGO
    annotations: list[LogoAnnotation] = field(default_factory=list)


@dataclass(frozen=True)
class ObjectResult:
    kind: AnnotationKind = AnnotationKind.OBJECT
    annotations: list[ObjectAnnotation] = field(default_factory=list)


@dataclass(frozen=True)
class LabelResult:
    kind: AnnotationKind = AnnotationKind.LABEL
    annotations: list[LabelAnnotation] = field(default_factory=list)


AnnotationResult = LogoResult | ObjectResult | LabelResult
