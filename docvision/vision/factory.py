from docvision.config.settings import Settings
from docvision.vision.client_base import BaseAnnotationClient
from docvision.vision.example_client_adapter import ExampleAnnotationClient
from docvision.vision.google_vision_adapter import GoogleVisionAdapter


class AnnotationClientFactory:
    """Creates the configured annotation client."""

    PROVIDERS = ("example", "google")

    @classmethod
    def create(cls, settings: Settings) -> BaseAnnotationClient:
        """Create an annotation client from application settings.

        Raises:
            ConfigurationError: if the google provider has no usable credentials.
            ValueError: for an unknown provider.
        """
        provider = settings.annotation_provider.lower()
        if provider == "example":
            return ExampleAnnotationClient()
        if provider == "google":
            return GoogleVisionAdapter(
                credentials_path=settings.google_application_credentials
            )
        raise ValueError(
            f"Unknown annotation provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
