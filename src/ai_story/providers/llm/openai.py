import logging
from typing import Any

import httpx

from ai_story.errors import EmptyGenerationError, ProviderError, ProviderHttpError

logger = logging.getLogger(__name__)
BODY_LOG_LIMIT = 1000

SYSTEM_INSTRUCTION = (
    "You are transcribing a real human conversation. Capture their exact way of speaking, "
    "including pauses, emotions, and natural speech patterns."
)


class OpenAIProvider:
    """OpenAI chat completions over plain HTTP, single attempt."""

    name = "OpenAI"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str = "https://api.openai.com/v1",
        timeout_seconds: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.endpoint = f"{base_url.rstrip('/')}/chat/completions"
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    def build_payload(self, prompt: str, max_tokens: int) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_INSTRUCTION},
                {"role": "user", "content": prompt},
            ],
            "temperature": 1.0,
            "max_tokens": max_tokens,
            "presence_penalty": 0.3,
            "frequency_penalty": 0.3,
        }

    async def generate(self, prompt: str, max_tokens: int) -> str:
        logger.info("llm.request provider=openai model=%s max_tokens=%d", self.model, max_tokens)
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
                response = await client.post(
                    self.endpoint,
                    headers=headers,
                    json=self.build_payload(prompt, max_tokens),
                )
        except httpx.HTTPError as exc:
            raise ProviderError(self.name, f"{self.name} API error: {exc.__class__.__name__} {exc}") from exc

        if not response.is_success:
            logger.warning(
                "llm.error provider=openai status=%d body=%s",
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
        logger.info("llm.response provider=openai chars=%d", len(text))
        return text

    @staticmethod
    def extract_text(payload: Any) -> str | None:
        try:
            text = payload["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return None
        return text if isinstance(text, str) else None
