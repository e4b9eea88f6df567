"""Example annotation client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseAnnotationClient and register the provider in AnnotationClientFactory.
"""

from docvision.vision.client_base import BaseAnnotationClient
from docvision.vision.models import (
    AnnotationKind,
    AnnotationResult,
    LabelResult,
    LogoResult,
    ObjectResult,
)


class ExampleAnnotationClient(BaseAnnotationClient):
    """Example adapter that detects nothing.

    No network calls and no credentials. Useful for local development and for
    running the pipeline with summaries only.
    """

    async def annotate(self, image_bytes: bytes, kind: AnnotationKind) -> AnnotationResult:
        _ = image_bytes
        if kind is AnnotationKind.LOGO:
            return LogoResult()
        if kind is AnnotationKind.OBJECT:
            return ObjectResult()
        return LabelResult()
