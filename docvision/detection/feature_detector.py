"""Turns annotation geometry into cropped logo, photo and scene files."""

import asyncio
from collections.abc import Awaitable
from dataclasses import asdict
from pathlib import Path
from typing import TypeVar

from PIL import Image

from docvision.detection.models import DetectedFeature, DetectionResult, FeatureKind
from docvision.detection.vocabulary import is_photo_category, is_scene_label
from docvision.hashing.content_hasher import ContentHasher
from docvision.imaging.attention_crop import save_attention_crop
from docvision.imaging.geometry import (
    LOGO_PADDING_RATIO,
    PHOTO_PADDING_RATIO,
    BoundingBox,
)
from docvision.imaging.validator import ImageValidator
from docvision.logging.logger import Log
from docvision.processor.models import PageImage
from docvision.vision.cache import AnnotationCache
from docvision.vision.client_base import BaseAnnotationClient
from docvision.vision.exceptions import AnnotationError
from docvision.vision.models import (
    AnnotationKind,
    AnnotationResult,
    LabelAnnotation,
    LabelResult,
    LogoResult,
    ObjectResult,
)

T = TypeVar("T")

MIN_POLYGON_VERTICES = 3
PHOTO_MIN_SIDE = 50
PHOTO_MIN_UNMATCHED_SCORE = 0.8
SCENE_MIN_SCORE = 0.75
PAGE_COVERAGE_RATIO = 0.9


def _image_size(path: Path) -> tuple[int, int]:
    with Image.open(path) as img:
        return img.size


def _save_crop(source: Path, box: BoundingBox, target: Path) -> None:
    with Image.open(source) as img, img.crop(box.as_crop_box()) as crop:
        crop.save(target)


class FeatureDetector:
    """Detects logos, subject photos and scenic framing on one page image.

    Annotation calls go through the run's AnnotationCache, so each image is
    sent to the service at most once per annotation kind.
    """

    def __init__(
        self,
        *,
        client: BaseAnnotationClient,
        cache: AnnotationCache,
        hasher: ContentHasher,
        validator: ImageValidator,
    ) -> None:
        self._client = client
        self._cache = cache
        self._hasher = hasher
        self._validator = validator

    async def detect(self, page: PageImage, output_dir: Path) -> DetectionResult:
        try:
            size = await asyncio.to_thread(_image_size, page.path)
        except OSError as exc:
            Log.warning(f"Cannot open page {page.index} for detection: {exc}")
            return DetectionResult()

        logos, photos, scene_labels = await asyncio.gather(
            self._guarded("logo", page, self._detect_logos(page, size, output_dir), []),
            self._guarded("photo", page, self._detect_photos(page, size, output_dir), []),
            self._guarded("scene label", page, self._scene_labels(page), []),
        )
        scenes: list[DetectedFeature] = []
        if scene_labels and not self._covers_page(photos, size):
            scenes = await self._guarded(
                "scene",
                page,
                self._crop_scene(page, scene_labels, output_dir),
                [],
            )
        Log.info(
            f"Page {page.index}: {len(logos)} logos, {len(photos)} photos, {len(scenes)} scenes"
        )
        return DetectionResult(logos=logos, photos=photos, scenes=scenes)

    async def raw_detect(self, image_path: Path) -> dict[str, list[dict[str, object]]]:
        """Raw logo and object annotations for a single image, without cropping."""
        digest = await asyncio.to_thread(self._hasher.image_digest, image_path)
        logos, objects = await asyncio.gather(
            self._annotate(image_path, digest, AnnotationKind.LOGO),
            self._annotate(image_path, digest, AnnotationKind.OBJECT),
        )
        return {
            "logos": [asdict(logo) for logo in logos.annotations],
            "objects": [asdict(obj) for obj in objects.annotations],
        }

    async def _annotate(
        self, image_path: Path, content_hash: str, kind: AnnotationKind
    ) -> AnnotationResult:
        async def compute() -> AnnotationResult:
            image_bytes = await asyncio.to_thread(image_path.read_bytes)
            return await self._client.annotate(image_bytes, kind)

        return await self._cache.get_or_compute(content_hash, kind, compute)

    async def _detect_logos(
        self, page: PageImage, size: tuple[int, int], output_dir: Path
    ) -> list[DetectedFeature]:
        result = await self._annotate(page.path, page.content_hash, AnnotationKind.LOGO)
        if not isinstance(result, LogoResult):
            raise AnnotationError(f"Expected logo result, got {result.kind.value}")
        width, height = size
        features: list[DetectedFeature] = []
        for logo in result.annotations:
            if len(logo.vertices) < MIN_POLYGON_VERTICES:
                Log.debug(f"Skipping logo '{logo.description}' with malformed geometry")
                continue
            xs = [v.x for v in logo.vertices]
            ys = [v.y for v in logo.vertices]
            pad = LOGO_PADDING_RATIO * min(max(xs) - min(xs), max(ys) - min(ys))
            box = BoundingBox.clipped(
                min(xs) - pad, min(ys) - pad, max(xs) + pad, max(ys) + pad, width, height
            )
            if box.area == 0:
                continue
            target = output_dir / f"logo-{page.index + 1:03d}-{len(features) + 1}.png"
            await asyncio.to_thread(_save_crop, page.path, box, target)
            features.append(
                DetectedFeature(
                    kind=FeatureKind.LOGO,
                    box=box,
                    path=target,
                    label=logo.description,
                    score=logo.score,
                )
            )
        return features

    async def _detect_photos(
        self, page: PageImage, size: tuple[int, int], output_dir: Path
    ) -> list[DetectedFeature]:
        result = await self._annotate(page.path, page.content_hash, AnnotationKind.OBJECT)
        if not isinstance(result, ObjectResult):
            raise AnnotationError(f"Expected object result, got {result.kind.value}")
        width, height = size
        accepted: list[BoundingBox] = []
        features: list[DetectedFeature] = []
        for obj in result.annotations:
            if not is_photo_category(obj.name) and obj.score < PHOTO_MIN_UNMATCHED_SCORE:
                continue
            if len(obj.vertices) < MIN_POLYGON_VERTICES:
                continue
            box = BoundingBox.from_points(
                ((v.x * width, v.y * height) for v in obj.vertices), width, height
            )
            if not box.has_usable_shape(PHOTO_MIN_SIDE):
                continue
            if any(box.overlaps(other) for other in accepted):
                Log.debug(f"Suppressed overlapping '{obj.name}' on page {page.index}")
                continue

            padded = box.padded(
                PHOTO_PADDING_RATIO * box.width, PHOTO_PADDING_RATIO * box.height, width, height
            )
            target = output_dir / f"photo-{page.index + 1:03d}-{len(features) + 1}.png"
            await asyncio.to_thread(_save_crop, page.path, padded, target)
            if not await self._validator.is_valid(target):
                target.unlink(missing_ok=True)
                continue
            accepted.append(box)
            features.append(
                DetectedFeature(
                    kind=FeatureKind.PHOTO,
                    box=padded,
                    path=target,
                    label=obj.name,
                    score=obj.score,
                )
            )
        return features

    async def _scene_labels(self, page: PageImage) -> list[LabelAnnotation]:
        result = await self._annotate(page.path, page.content_hash, AnnotationKind.LABEL)
        if not isinstance(result, LabelResult):
            raise AnnotationError(f"Expected label result, got {result.kind.value}")
        return [
            label
            for label in result.annotations
            if label.score > SCENE_MIN_SCORE and is_scene_label(label.description)
        ]

    async def _crop_scene(
        self, page: PageImage, labels: list[LabelAnnotation], output_dir: Path
    ) -> list[DetectedFeature]:
        best = max(labels, key=lambda label: label.score)
        target = output_dir / f"scene-{page.index + 1:03d}.png"
        box = await asyncio.to_thread(save_attention_crop, page.path, target)
        return [
            DetectedFeature(
                kind=FeatureKind.SCENE,
                box=box,
                path=target,
                label=best.description,
                score=best.score,
            )
        ]

    @staticmethod
    def _covers_page(photos: list[DetectedFeature], size: tuple[int, int]) -> bool:
        page_area = size[0] * size[1]
        return any(photo.box.area >= PAGE_COVERAGE_RATIO * page_area for photo in photos)

    @staticmethod
    async def _guarded(stage: str, page: PageImage, work: Awaitable[T], empty: T) -> T:
        try:
            return await work
        except (AnnotationError, OSError, ValueError) as exc:
            Log.warning(f"{stage.capitalize()} detection failed on page {page.index}: {exc}")
            return empty
