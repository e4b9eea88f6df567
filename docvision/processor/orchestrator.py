import os
from pathlib import Path

from docvision.config.settings import Settings
from docvision.detection.feature_detector import FeatureDetector
from docvision.hashing.content_hasher import ContentHasher
from docvision.imaging.validator import ImageValidator
from docvision.logging.logger import Log
from docvision.pdf.base import BaseExtractionTool
from docvision.pdf.factory import PdfRasterizerFactory
from docvision.pdf.native_tools import default_tools
from docvision.pdf.page_renderer import PageRenderer
from docvision.processor.asset_extractor import AssetExtractor
from docvision.processor.caches import RunCaches
from docvision.processor.file_loader import FileLoader
from docvision.processor.models import PageSummary
from docvision.processor.pipeline import PipelineContext, PipelineStep
from docvision.processor.session_store import SessionStore
from docvision.processor.steps import (
    ExtractAndRenderStep,
    HashDocumentStep,
    PrepareOutputStep,
    ProcessPagesStep,
    PublishSessionStep,
    SelectPagesStep,
)
from docvision.summarization.factory import SummarizerFactory
from docvision.vision.factory import AnnotationClientFactory

MAX_PAGE_WORKERS = 3


def page_worker_count(limit: int = MAX_PAGE_WORKERS) -> int:
    """Pages processed at once: available parallelism, capped at `limit`."""
    return max(1, min(MAX_PAGE_WORKERS, limit, os.cpu_count() or 1))


class PipelineOrchestrator:
    """Drives one document through the pipeline.

    Pipeline: hash -> prepare output -> extract assets + render pages ->
    select pages -> summarize + detect per page -> publish session.
    """

    def __init__(
        self,
        steps: list[PipelineStep],
        session_store: SessionStore,
        detector: FeatureDetector,
    ) -> None:
        self._steps = steps
        self._session_store = session_store
        self._detector = detector

    @property
    def session_store(self) -> SessionStore:
        return self._session_store

    @property
    def detector(self) -> FeatureDetector:
        return self._detector

    async def process(self, document_path: Path) -> list[PageSummary]:
        """Run the full pipeline and return page summaries in page order.

        Raises:
            ProcessorError: if the input cannot be resolved or the output
                directory cannot be prepared.
        """
        Log.info(f"Processing document {document_path}")
        context = PipelineContext(source_path=document_path)
        for step in self._steps:
            context = await step.run(context)
        return list(context.summaries)


def build_orchestrator(
    settings: Settings,
    output_root: Path | None = None,
    tools: list[BaseExtractionTool] | None = None,
) -> PipelineOrchestrator:
    """Build a PipelineOrchestrator with all required adapters.

    Raises:
        ConfigurationError: if the annotation provider lacks credentials.
    """
    hasher = ContentHasher()
    caches = RunCaches(settings.annotation_concurrency)
    validator = ImageValidator(hasher, caches.validation_verdicts)
    renderer = PageRenderer(
        PdfRasterizerFactory.create(settings), hasher, dpi=settings.render_dpi
    )
    asset_extractor = AssetExtractor(
        tools=default_tools() if tools is None else tools,
        hasher=hasher,
        validator=validator,
        seen_hashes=caches.seen_asset_hashes,
        timeout_seconds=settings.asset_extraction_timeout_seconds,
        batch_size=settings.asset_scan_batch_size,
    )
    detector = FeatureDetector(
        client=AnnotationClientFactory.create(settings),
        cache=caches.annotations,
        hasher=hasher,
        validator=validator,
    )
    session_store = SessionStore()
    steps: list[PipelineStep] = [
        HashDocumentStep(FileLoader(), hasher, renderer, caches),
        PrepareOutputStep(output_root or Path(settings.output_root)),
        ExtractAndRenderStep(asset_extractor, renderer),
        SelectPagesStep(validator, caches.seen_page_hashes),
        ProcessPagesStep(
            SummarizerFactory.create(settings),
            detector,
            worker_count=page_worker_count(settings.max_page_workers),
        ),
        PublishSessionStep(session_store),
    ]
    return PipelineOrchestrator(steps, session_store, detector)
