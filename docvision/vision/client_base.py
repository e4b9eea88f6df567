from abc import ABC, abstractmethod

from docvision.vision.models import AnnotationKind, AnnotationResult


class BaseAnnotationClient(ABC):
    """Contract for provider-specific image annotation clients."""

    @abstractmethod
    async def annotate(self, image_bytes: bytes, kind: AnnotationKind) -> AnnotationResult:
        """Annotate one image for one kind of detection.

        Returns:
            LogoResult, ObjectResult or LabelResult matching `kind`.

        Raises:
            AnnotationError: on any provider failure.
        """
