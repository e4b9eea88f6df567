import asyncio
from pathlib import Path
from typing import Any

from google.api_core import exceptions as google_exceptions
from google.cloud import vision

from docvision.config.exceptions import ConfigurationError
from docvision.vision.client_base import BaseAnnotationClient
from docvision.vision.exceptions import AnnotationError
from docvision.vision.models import (
    AnnotationKind,
    AnnotationResult,
    LabelAnnotation,
    LabelResult,
    LogoAnnotation,
    LogoResult,
    NormalizedVertex,
    ObjectAnnotation,
    ObjectResult,
    Vertex,
)


class GoogleVisionAdapter(BaseAnnotationClient):
    """Annotation client built on the Google Cloud Vision API.

    The synchronous client runs in a worker thread so the event loop stays free.
    """

    def __init__(self, *, credentials_path: str) -> None:
        path = Path(credentials_path) if credentials_path else None
        if path is None or not path.is_file():
            raise ConfigurationError(
                "google_application_credentials must point to a service account file"
            )
        try:
            self._client = vision.ImageAnnotatorClient.from_service_account_file(str(path))
        except (ValueError, OSError) as exc:
            raise ConfigurationError(f"Invalid Google credentials: {exc}") from exc

    async def annotate(self, image_bytes: bytes, kind: AnnotationKind) -> AnnotationResult:
        response = await asyncio.to_thread(self._request, image_bytes, kind)
        if response.error.message:
            raise AnnotationError(f"Vision {kind.value} detection failed: {response.error.message}")
        if kind is AnnotationKind.LOGO:
            return self._to_logo_result(response)
        if kind is AnnotationKind.OBJECT:
            return self._to_object_result(response)
        return self._to_label_result(response)

    def _request(self, image_bytes: bytes, kind: AnnotationKind) -> Any:
        image = vision.Image(content=image_bytes)
        try:
            if kind is AnnotationKind.LOGO:
                return self._client.logo_detection(image=image)
            if kind is AnnotationKind.OBJECT:
                return self._client.object_localization(image=image)
            return self._client.label_detection(image=image)
        except google_exceptions.GoogleAPIError as exc:
            raise AnnotationError(f"Vision API error: {exc}") from exc

    @staticmethod
    def _to_logo_result(response: Any) -> LogoResult:
        return LogoResult(
            annotations=[
                LogoAnnotation(
                    description=logo.description,
                    score=logo.score,
                    vertices=[Vertex(x=v.x, y=v.y) for v in logo.bounding_poly.vertices],
                )
                for logo in response.logo_annotations
            ]
        )

    @staticmethod
    def _to_object_result(response: Any) -> ObjectResult:
        return ObjectResult(
            annotations=[
                ObjectAnnotation(
                    name=obj.name,
                    score=obj.score,
                    vertices=[
                        NormalizedVertex(x=v.x, y=v.y)
                        for v in obj.bounding_poly.normalized_vertices
                    ],
                )
                for obj in response.localized_object_annotations
            ]
        )

    @staticmethod
    def _to_label_result(response: Any) -> LabelResult:
        return LabelResult(
            annotations=[
                LabelAnnotation(description=label.description, score=label.score)
                for label in response.label_annotations
            ]
        )
