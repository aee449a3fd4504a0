from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ai_story.errors import ConfigurationError
from ai_story.providers.llm.base import ProviderChoice


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    ai_provider: str = Field(default="gemini", alias="AI_PROVIDER")

    gemini_api_key: str = Field(default="", alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-1.5-flash", alias="GEMINI_MODEL")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_BASE_URL",
    )

    openai_api_key: str = Field(default="", alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4o", alias="OPENAI_MODEL")
    openai_base_url: str = Field(default="https://api.openai.com/v1", alias="OPENAI_BASE_URL")

    llm_timeout_seconds: float = Field(default=60.0, alias="LLM_TIMEOUT_SECONDS")

    supabase_url: str = Field(default="", alias="SUPABASE_URL")
    supabase_service_role_key: str = Field(default="", alias="SUPABASE_SERVICE_ROLE_KEY")
    profiles_table: str = Field(default="profiles", alias="PROFILES_TABLE")
    storage_timeout_seconds: float = Field(default=30.0, alias="STORAGE_TIMEOUT_SECONDS")

    @property
    def provider_name(self) -> str:
        return self.ai_provider.strip().lower() or ProviderChoice.GEMINI.value

    @property
    def reported_provider(self) -> str:
        """Provider name for error payloads; unknown values report the default."""
        if self.provider_name in {choice.value for choice in ProviderChoice}:
            return self.provider_name
        return ProviderChoice.GEMINI.value

    def provider_choice(self) -> ProviderChoice:
        try:
            return ProviderChoice(self.provider_name)
        except ValueError as exc:
            raise ConfigurationError(f"Unsupported AI_PROVIDER='{self.ai_provider}'") from exc

    def provider_api_key(self, choice: ProviderChoice) -> str:
        if choice is ProviderChoice.OPENAI:
            return self.openai_api_key.strip()
        return self.gemini_api_key.strip()

    def require_provider_credentials(self) -> ProviderChoice:
        choice = self.provider_choice()
        if not self.provider_api_key(choice):
            raise ConfigurationError(f"{choice.value.upper()}_API_KEY environment variable is not set")
        return choice

    def require_storage_credentials(self) -> None:
        if not self.supabase_url.strip() or not self.supabase_service_role_key.strip():
            raise ConfigurationError("Supabase environment variables are not set")


def load_settings() -> Settings:
    """Read configuration fresh from the environment (one call per request)."""
    return Settings()
