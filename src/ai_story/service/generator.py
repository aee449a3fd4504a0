import logging
from dataclasses import dataclass
from typing import Any, Callable

import httpx
from pydantic import ValidationError

from ai_story.api.schemas import GenerateStoryError, GenerateStoryRequest, GenerateStoryResponse
from ai_story.config import Settings, load_settings
from ai_story.errors import ConfigurationError, EmptyGenerationError, ProviderError, StorageError
from ai_story.providers.llm.base import ProviderChoice
from ai_story.storage.profiles import ProfileStore
from ai_story.workflow.generation import GenerationOrchestrator, StoryWorkflow

logger = logging.getLogger(__name__)

CONFIGURATION_MESSAGE = "AI service configuration error. Please contact support."
QUOTA_MESSAGE = "AI quota exceeded. Please try again later or contact support."
UNAVAILABLE_MESSAGE = "AI service temporarily unavailable. Please try again later."
DEFAULT_FAILURE_MESSAGE = "Failed to generate AI story"


@dataclass(frozen=True)
class StoryOutcome:
    status_code: int
    payload: dict[str, Any]


def classify_failure(exc: Exception) -> tuple[int, str]:
    """Map a pipeline failure to ``(http_status, user-facing message)``."""
    if isinstance(exc, ConfigurationError):
        return 503, CONFIGURATION_MESSAGE
    if isinstance(exc, EmptyGenerationError):
        return 503, UNAVAILABLE_MESSAGE
    if isinstance(exc, ProviderError):
        if "quota" in str(exc).lower():
            return 429, QUOTA_MESSAGE
        return 503, UNAVAILABLE_MESSAGE
    if isinstance(exc, StorageError):
        return 500, exc.message
    return 500, str(exc) or DEFAULT_FAILURE_MESSAGE


class StoryService:
    """Request boundary for story generation.

    Reads configuration fresh for every call, runs the workflow and converts
    any failure into a JSON error payload. It never raises.
    """

    def __init__(
        self,
        settings_factory: Callable[[], Settings] = load_settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings_factory = settings_factory
        self.transport = transport

    async def generate(self, body: bytes) -> StoryOutcome:
        provider_name = ProviderChoice.GEMINI.value
        try:
            settings = self._load_settings()
            provider_name = settings.reported_provider
            payload = GenerateStoryRequest.model_validate_json(body)
            workflow = StoryWorkflow(
                orchestrator=GenerationOrchestrator.from_settings(settings, transport=self.transport),
                store=ProfileStore.from_settings(settings, transport=self.transport),
            )
            result = await workflow.run(payload.to_story_request())
        except Exception as exc:
            logger.exception("story.failed provider=%s type=%s", provider_name, exc.__class__.__name__)
            status_code, message = classify_failure(exc)
            error = GenerateStoryError(error=message, provider=provider_name)
            return StoryOutcome(status_code=status_code, payload=error.model_dump())

        logger.info(
            "story.completed provider=%s sections=%d max_tokens=%d",
            provider_name,
            result.content_sections,
            result.token_limit,
        )
        response = GenerateStoryResponse(
            story=result.story,
            profile=result.profile,
            token_limit=result.token_limit,
            content_sections=result.content_sections,
        )
        return StoryOutcome(status_code=200, payload=response.model_dump(by_alias=True))

    def _load_settings(self) -> Settings:
        try:
            return self.settings_factory()
        except ValidationError as exc:
            raise ConfigurationError("Invalid service configuration") from exc
