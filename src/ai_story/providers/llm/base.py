from enum import Enum
from typing import Protocol


class ProviderChoice(str, Enum):
    GEMINI = "gemini"
    OPENAI = "openai"


class StoryProvider(Protocol):
    """Language-model backend turning one prompt into story text.

    Implementations make exactly one network attempt per ``generate`` call:
    no retry, no streaming, no fallback to another provider. Retrying is the
    caller's decision.

    Raises:
        ProviderHttpError: the provider answered with a non-2xx status.
        EmptyGenerationError: the provider answered 2xx without usable text.
        ProviderError: the request never completed (connect error, timeout).
    """

    name: str

    async def generate(self, prompt: str, max_tokens: int) -> str: ...
