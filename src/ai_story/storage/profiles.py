import logging
from datetime import datetime, timezone
from typing import Any, Callable

import httpx

from ai_story.config import Settings
from ai_story.errors import StorageError
from ai_story.pipeline.request import StoryRequest

logger = logging.getLogger(__name__)
BODY_LOG_LIMIT = 1000
SINGLE_OBJECT_MEDIA_TYPE = "application/vnd.pgrst.object+json"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProfileStore:
    """Writes generated stories onto profile rows through Supabase PostgREST.

    The update is addressed by primary key and asks PostgREST for a single
    object, so zero or multiple matching rows come back as an error instead of
    a silent no-op. Nothing here is retried.
    """

    def __init__(
        self,
        base_url: str,
        service_key: str,
        table: str = "profiles",
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.endpoint = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self.service_key = service_key
        self.timeout_seconds = timeout_seconds
        self.transport = transport
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> "ProfileStore":
        settings.require_storage_credentials()
        return cls(
            base_url=settings.supabase_url,
            service_key=settings.supabase_service_role_key,
            table=settings.profiles_table,
            timeout_seconds=settings.storage_timeout_seconds,
            transport=transport,
        )

    def build_update(self, request: StoryRequest, story: str) -> dict[str, Any]:
        answers = {
            "story_answers": request.story_answers,
            "joy_humanity_answers": request.joy_humanity_answers,
            "passion_dreams_answers": request.passion_dreams_answers,
            "connection_preferences_answers": request.connection_preferences_answers,
            "open_ended_answer": request.open_ended_answer,
        }
        update: dict[str, Any] = {"story": story}
        update.update({column: value for column, value in answers.items() if value is not None})
        update["ai_generated_at"] = self.clock().isoformat()
        return update

    async def save_story(self, request: StoryRequest, story: str) -> dict[str, Any]:
        headers = {
            "apikey": self.service_key,
            "Authorization": f"Bearer {self.service_key}",
            "Accept": SINGLE_OBJECT_MEDIA_TYPE,
            "Prefer": "return=representation",
        }
        logger.info("storage.update profile_id=%s", request.profile_id)
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
                response = await client.patch(
                    self.endpoint,
                    params={"id": f"eq.{request.profile_id}"},
                    headers=headers,
                    json=self.build_update(request, story),
                )
        except httpx.HTTPError as exc:
            raise StorageError(f"Database update error: {exc.__class__.__name__} {exc}") from exc

        if not response.is_success:
            logger.error(
                "storage.error profile_id=%s status=%d body=%s",
                request.profile_id,
                response.status_code,
                response.text[:BODY_LOG_LIMIT],
            )
            raise StorageError(
                f"Database update error: {self._error_message(response)}",
                status=response.status_code,
            )

        profile = self._single_row(response)
        logger.info("storage.updated profile_id=%s", request.profile_id)
        return profile

    @staticmethod
    def _single_row(response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise StorageError("Database update error: unreadable response body") from exc
        if isinstance(payload, list):
            if len(payload) != 1:
                raise StorageError(f"Database update error: expected 1 row, got {len(payload)}")
            payload = payload[0]
        if not isinstance(payload, dict):
            raise StorageError("Database update error: unexpected response shape")
        return payload

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(payload, dict) and payload.get("message"):
            return str(payload["message"])
        return response.text or f"HTTP {response.status_code}"
