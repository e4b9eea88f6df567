from typing import ClassVar

from docvision.concurrency.retry import RetryPolicy
from docvision.config.settings import Settings
from docvision.ocr.tesseract_adapter import TesseractAdapter
from docvision.summarization.base import BaseSummarizer
from docvision.summarization.client_base import BaseCompletionClient
from docvision.summarization.example_client_adapter import ExampleClientAdapter
from docvision.summarization.openai_client_adapter import OpenAIClientAdapter
from docvision.summarization.summarizer import Summarizer


class SummarizerFactory:
    """Creates the configured summarizer."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "mistral": "https://api.mistral.ai/v1",
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseSummarizer:
        """Create a configured summarizer from application settings."""
        provider = settings.summarization_provider.lower()
        return Summarizer(
            ocr=TesseractAdapter(language=settings.ocr_language),
            client=cls._create_client(provider, settings),
            model="example" if provider == "example" else settings.summarization_model_name,
            temperature=settings.summarization_temperature,
            retry_policy=RetryPolicy(
                max_attempts=settings.summary_max_attempts,
                base_delay=settings.summary_retry_base_delay_seconds,
            ),
        )

    @classmethod
    def _create_client(cls, provider: str, settings: Settings) -> BaseCompletionClient:
        if provider == "example":
            return ExampleClientAdapter()
        return OpenAIClientAdapter(
            api_key=settings.summarization_api_key,
            timeout_seconds=settings.summarization_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        configured = settings.summarization_base_url.strip()
        if provider == "openai":
            return configured or None
        if provider == "openai_compatible":
            if not configured:
                raise ValueError(
                    "summarization_base_url is required for "
                    "summarization_provider=openai_compatible"
                )
            return configured
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return configured or default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown summarization provider '{provider}'. Choose from: {supported}"
        )
