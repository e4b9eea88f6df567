import asyncio
import shutil
from datetime import datetime, timezone
from pathlib import Path

from docvision.detection.feature_detector import FeatureDetector
from docvision.detection.models import DetectionResult
from docvision.hashing.content_hasher import ContentHasher
from docvision.imaging.validator import ImageValidator
from docvision.logging.logger import Log
from docvision.pdf.exceptions import PdfError
from docvision.pdf.page_renderer import PageRenderer
from docvision.processor.asset_extractor import AssetExtractor
from docvision.processor.caches import RunCaches
from docvision.processor.exceptions import OutputSetupError
from docvision.processor.file_loader import FileLoader
from docvision.processor.models import (
    Document,
    EmbeddedAsset,
    PageImage,
    PageSummary,
    ProcessingSession,
    output_ref,
)
from docvision.processor.pipeline import PipelineContext, PipelineStep
from docvision.processor.session_store import SessionStore
from docvision.summarization.base import BaseSummarizer
from docvision.summarization.exceptions import SummarizationError
from docvision.summarization.models import PageText


def _require_document(context: PipelineContext) -> Document:
    if context.document is None:
        raise ValueError("PipelineContext.document must be set before this step")
    return context.document


def _require_output_dir(context: PipelineContext) -> Path:
    if context.output_dir is None:
        raise ValueError("PipelineContext.output_dir must be set before this step")
    return context.output_dir


class HashDocumentStep(PipelineStep):
    def __init__(
        self,
        file_loader: FileLoader,
        hasher: ContentHasher,
        renderer: PageRenderer,
        caches: RunCaches,
    ) -> None:
        self._file_loader = file_loader
        self._hasher = hasher
        self._renderer = renderer
        self._caches = caches

    async def run(self, context: PipelineContext) -> PipelineContext:
        path = self._file_loader.resolve(context.source_path)
        digest = await asyncio.to_thread(self._hasher.document_digest, path)
        try:
            page_count = await self._renderer.page_count(path)
        except PdfError as exc:
            Log.warning(f"Could not count pages of {path.name}: {exc}")
            page_count = 0
        self._caches.reset()
        context.document = Document(path=path, content_hash=digest, page_count=page_count)
        Log.info(f"Hashed {path.name} ({page_count} pages): {digest}")
        return context


class PrepareOutputStep(PipelineStep):
    def __init__(self, output_root: Path) -> None:
        self._output_root = output_root

    async def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        output_dir = self._output_root / document.content_hash
        try:
            await asyncio.to_thread(self._recreate, output_dir)
        except OSError as exc:
            raise OutputSetupError(f"Cannot prepare output directory {output_dir}: {exc}") from exc
        context.output_dir = output_dir
        return context

    @staticmethod
    def _recreate(output_dir: Path) -> None:
        if output_dir.exists():
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True)


class ExtractAndRenderStep(PipelineStep):
    """Asset extraction and page rendering run side by side; both must finish."""

    def __init__(self, asset_extractor: AssetExtractor, renderer: PageRenderer) -> None:
        self._asset_extractor = asset_extractor
        self._renderer = renderer

    async def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        output_dir = _require_output_dir(context)
        context.assets, context.rendered_pages = await asyncio.gather(
            self._extract(document, output_dir),
            self._render(document, output_dir),
        )
        return context

    async def _extract(self, document: Document, output_dir: Path) -> list[EmbeddedAsset]:
        try:
            return await self._asset_extractor.extract(document, output_dir)
        except (PdfError, OSError) as exc:
            Log.warning(f"Asset extraction failed for {document.path.name}: {exc}")
            return []

    async def _render(self, document: Document, output_dir: Path) -> list[PageImage]:
        try:
            return await self._renderer.render(document.path, output_dir)
        except (PdfError, OSError) as exc:
            Log.error(f"Page rendering failed for {document.path.name}: {exc}")
            return []


class SelectPagesStep(PipelineStep):
    """Keeps valid pages and drops pages whose render repeats an earlier one."""

    def __init__(self, validator: ImageValidator, seen_hashes: set[str]) -> None:
        self._validator = validator
        self._seen_hashes = seen_hashes

    async def run(self, context: PipelineContext) -> PipelineContext:
        verdicts = await asyncio.gather(
            *(self._validator.is_valid(page.path) for page in context.rendered_pages)
        )
        selected: list[PageImage] = []
        for page, valid in zip(context.rendered_pages, verdicts):
            if not valid:
                Log.info(f"Page {page.index} rejected by image validation")
                continue
            if page.content_hash in self._seen_hashes:
                Log.debug(f"Page {page.index} duplicates an earlier page")
                continue
            self._seen_hashes.add(page.content_hash)
            selected.append(page)
        context.pages = selected
        return context


class ProcessPagesStep(PipelineStep):
    """Summarizes and detects features page by page, in bounded batches."""

    def __init__(
        self,
        summarizer: BaseSummarizer,
        detector: FeatureDetector,
        worker_count: int,
    ) -> None:
        self._summarizer = summarizer
        self._detector = detector
        self._worker_count = max(1, worker_count)

    async def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        output_dir = _require_output_dir(context)
        asset_refs = [output_ref(document.content_hash, asset.path) for asset in context.assets]

        summaries: list[PageSummary] = []
        for start in range(0, len(context.pages), self._worker_count):
            batch = context.pages[start : start + self._worker_count]
            results = await asyncio.gather(
                *(self._process_page(document, page, output_dir, asset_refs) for page in batch)
            )
            summaries.extend(summary for summary in results if summary is not None)
        context.summaries = sorted(summaries, key=lambda summary: summary.index)
        return context

    async def _process_page(
        self,
        document: Document,
        page: PageImage,
        output_dir: Path,
        asset_refs: list[str],
    ) -> PageSummary | None:
        page_text, detection = await asyncio.gather(
            self._summarize(page),
            self._detector.detect(page, output_dir),
        )
        if page_text is None:
            await asyncio.to_thread(self._discard_features, detection)
            return None
        return self._assemble(document, page, page_text, detection, asset_refs)

    @staticmethod
    def _discard_features(detection: DetectionResult) -> None:
        for feature in [*detection.logos, *detection.photos, *detection.scenes]:
            try:
                feature.path.unlink(missing_ok=True)
            except OSError as exc:
                Log.warning(f"Could not remove crop {feature.path.name}: {exc}")

    async def _summarize(self, page: PageImage) -> PageText | None:
        try:
            return await self._summarizer.summarize(page.path)
        except SummarizationError as exc:
            Log.warning(f"Summary failed for page {page.index}, dropping page: {exc}")
            return None

    @staticmethod
    def _assemble(
        document: Document,
        page: PageImage,
        page_text: PageText,
        detection: DetectionResult,
        asset_refs: list[str],
    ) -> PageSummary:
        def refs(paths: list[Path]) -> list[str]:
            return [output_ref(document.content_hash, path) for path in paths]

        return PageSummary(
            index=page.index,
            image=output_ref(document.content_hash, page.path),
            title=page_text.title,
            description=page_text.description,
            embedded_images=list(asset_refs) if page.index == 0 else [],
            logos=refs([feature.path for feature in detection.logos]),
            photos=refs([feature.path for feature in detection.photos]),
            scenes=refs([feature.path for feature in detection.scenes]),
        )


class PublishSessionStep(PipelineStep):
    def __init__(self, session_store: SessionStore) -> None:
        self._session_store = session_store

    async def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        self._session_store.replace(
            ProcessingSession(
                document_path=document.path,
                document_hash=document.content_hash,
                output_dir=_require_output_dir(context),
                timestamp=datetime.now(timezone.utc),
                pages=tuple(context.summaries),
            )
        )
        Log.info(f"Published {len(context.summaries)} page summaries for {document.path.name}")
        return context
