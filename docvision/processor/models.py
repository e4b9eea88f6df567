from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path


@dataclass(frozen=True)
class Document:
    """A source document identified by its content hash."""

    path: Path
    content_hash: str
    page_count: int = 0


@dataclass(frozen=True)
class PageImage:
    """One rendered page."""

    index: int
    path: Path
    content_hash: str


class AssetKind(str, Enum):
    RASTER = "raster"
    VECTOR = "vector"


@dataclass(frozen=True)
class EmbeddedAsset:
    """An image or vector graphic extracted from the source document."""

    source_hash: str
    path: Path
    content_hash: str
    kind: AssetKind


def output_ref(document_hash: str, path: Path) -> str:
    """Stable reference `<document-hash>/<file>` for a pipeline-owned file."""
    return f"{document_hash}/{path.name}"


@dataclass(frozen=True)
class PageSummary:
    """Everything the pipeline learned about one page."""

    index: int
    image: str
    title: str
    description: str
    embedded_images: list[str] = field(default_factory=list)
    logos: list[str] = field(default_factory=list)
    photos: list[str] = field(default_factory=list)
    scenes: list[str] = field(default_factory=list)

    def to_dict(self, base_url: str = "") -> dict[str, object]:
        """JSON shape handed to downstream consumers."""
        prefix = f"{base_url.rstrip('/')}/" if base_url else ""
        return {
            "imageUrl": f"{prefix}{self.image}",
            "title": self.title,
            "description": self.description,
            "embeddedImages": [f"{prefix}{ref}" for ref in self.embedded_images],
            "logos": [f"{prefix}{ref}" for ref in self.logos],
            "photos": [f"{prefix}{ref}" for ref in self.photos],
            "scenes": [f"{prefix}{ref}" for ref in self.scenes],
        }


@dataclass(frozen=True)
class ProcessingSession:
    """The most recently completed pipeline run."""

    document_path: Path
    document_hash: str
    output_dir: Path
    timestamp: datetime
    pages: tuple[PageSummary, ...] = ()
