import logging
from typing import Any

import httpx

from ai_story.errors import EmptyGenerationError, ProviderError, ProviderHttpError

logger = logging.getLogger(__name__)
BODY_LOG_LIMIT = 1000


class GeminiProvider:
    """Google Gemini ``generateContent`` over plain HTTP, single attempt."""

    name = "Gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout_seconds: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.endpoint = f"{base_url.rstrip('/')}/models/{model}:generateContent"
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    def build_payload(self, prompt: str, max_tokens: int) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": 1.0,
                "maxOutputTokens": max_tokens,
                "topP": 0.95,
                "topK": 50,
            },
        }

    async def generate(self, prompt: str, max_tokens: int) -> str:
        logger.info("llm.request provider=gemini model=%s max_tokens=%d", self.model, max_tokens)
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
                response = await client.post(
                    self.endpoint,
                    params={"key": self.api_key},
                    json=self.build_payload(prompt, max_tokens),
                )
        except httpx.HTTPError as exc:
            raise ProviderError(self.name, f"{self.name} API error: {exc.__class__.__name__} {exc}") from exc

        if not response.is_success:
            logger.warning(
                "llm.error provider=gemini status=%d body=%s",
                response.status_code,
                response.text[:BODY_LOG_LIMIT],
            )
            raise ProviderHttpError(self.name, response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError:
            payload = None
        text = self.extract_text(payload)
        if not text:
            raise EmptyGenerationError(self.name)
        logger.info("llm.response provider=gemini chars=%d", len(text))
        return text

    @staticmethod
    def extract_text(payload: Any) -> str | None:
        try:
            text = payload["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return None
        return text if isinstance(text, str) else None
