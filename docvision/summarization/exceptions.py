class SummarizationError(Exception):
    """Raised when a page summary cannot be produced."""


class CompletionNetworkError(SummarizationError):
    """Raised when the completion provider call fails due to network/infrastructure issues."""


class CompletionRateLimitedError(SummarizationError):
    """Raised when the completion provider answers HTTP 429."""


class MissingCredentialError(SummarizationError):
    """Raised when no API key is configured for the completion provider."""
