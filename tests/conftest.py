import json
from typing import Any, Callable

import httpx
import pytest

from ai_story.config import Settings

SUPABASE_HOST = "project.supabase.co"


def gemini_reply(text: str) -> dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


def openai_reply(text: str | None) -> dict[str, Any]:
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": text}}]}


class FakeUpstream:
    """Answers provider and PostgREST calls made through ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.provider_status = 200
        self.provider_body: Any = gemini_reply("generated story")
        self.storage_status = 200
        self.storage_body: Any = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == SUPABASE_HOST:
            return self._storage_response(request)
        return self._response(self.provider_status, self.provider_body)

    def _storage_response(self, request: httpx.Request) -> httpx.Response:
        if self.storage_body is not None:
            return self._response(self.storage_status, self.storage_body)
        profile_id = request.url.params["id"].removeprefix("eq.")
        row = {"id": profile_id, **json.loads(request.content)}
        return httpx.Response(self.storage_status, json=row)

    @staticmethod
    def _response(status: int, body: Any) -> httpx.Response:
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def provider_requests(self) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.host != SUPABASE_HOST]

    @property
    def storage_requests(self) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.host == SUPABASE_HOST]


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "AI_PROVIDER": "gemini",
            "GEMINI_API_KEY": "gemini-key",
            "OPENAI_API_KEY": "openai-key",
            "SUPABASE_URL": f"https://{SUPABASE_HOST}",
            "SUPABASE_SERVICE_ROLE_KEY": "service-key",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def replies() -> dict[str, Callable[..., dict[str, Any]]]:
    return {"gemini": gemini_reply, "openai": openai_reply}
