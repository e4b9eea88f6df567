from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from docvision.processor.models import Document, EmbeddedAsset, PageImage, PageSummary


@dataclass(slots=True)
class PipelineContext:
    source_path: Path
    document: Document | None = None
    output_dir: Path | None = None
    assets: list[EmbeddedAsset] = field(default_factory=list)
    rendered_pages: list[PageImage] = field(default_factory=list)
    pages: list[PageImage] = field(default_factory=list)
    summaries: list[PageSummary] = field(default_factory=list)


class PipelineStep(ABC):
    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
