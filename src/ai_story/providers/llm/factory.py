import httpx

from ai_story.config import Settings
from ai_story.errors import ConfigurationError
from ai_story.providers.llm.base import ProviderChoice, StoryProvider
from ai_story.providers.llm.gemini import GeminiProvider
from ai_story.providers.llm.openai import OpenAIProvider


def build_story_provider(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> StoryProvider:
    choice = settings.require_provider_credentials()

    if choice is ProviderChoice.GEMINI:
        return GeminiProvider(
            api_key=settings.provider_api_key(choice),
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout_seconds=settings.llm_timeout_seconds,
            transport=transport,
        )

    if choice is ProviderChoice.OPENAI:
        return OpenAIProvider(
            api_key=settings.provider_api_key(choice),
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            timeout_seconds=settings.llm_timeout_seconds,
            transport=transport,
        )

    raise ConfigurationError(f"Unsupported AI_PROVIDER='{settings.ai_provider}'")
