"""Failure taxonomy for story generation.

Every error raised by the pipeline derives from ``StoryGenerationError`` so the
service boundary can classify it into an HTTP status and a user-facing message.
"""


class StoryGenerationError(Exception):
    """Base class for all story pipeline failures."""


class ConfigurationError(StoryGenerationError):
    """A credential or setting required for this invocation is missing."""


class ProviderError(StoryGenerationError):
    """The language-model provider could not produce a story."""

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(message)


class ProviderHttpError(ProviderError):
    def __init__(self, provider: str, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(provider, f"{provider} API error: {status} - {body}")


class EmptyGenerationError(ProviderError):
    def __init__(self, provider: str) -> None:
        super().__init__(provider, f"No story generated by {provider}")


class StorageError(StoryGenerationError):
    """The profile update failed or did not match exactly one row."""

    def __init__(self, message: str, status: int | None = None) -> None:
        self.message = message
        self.status = status
        super().__init__(message)
