from abc import ABC, abstractmethod


class BaseCompletionClient(ABC):
    """Contract for provider-specific text-completion clients."""

    @abstractmethod
    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        """Return provider response as plain text.

        Raises:
            CompletionRateLimitedError: on HTTP 429.
            MissingCredentialError: if no API key is configured.
            SummarizationError: on any other failure.
        """
