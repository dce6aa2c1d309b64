"""Application settings loaded from environment variables."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """Context retrieval configuration. All values come from environment variables.

    An empty string means "not configured" for every credential and URL.
    """

    # Web search: SearXNG (primary, self-hosted)
    searxng_url: str = Field(default="")

    # Web search: Brave Search (fallback)
    brave_search_api_key: str = Field(default="")

    # Semantic memory
    qdrant_url: str = Field(default="")
    qdrant_api_key: str = Field(default="")
    voyage_api_key: str = Field(default="")

    # Auto-retrieval
    auto_retrieve_enabled: bool = Field(default=True)
    auto_retrieve_min_score: float = Field(default=0.5, ge=0.0, le=1.0)
    auto_retrieve_max_results: int = Field(default=5, ge=1)

    # Obsidian (Local REST API plugin)
    obsidian_rest_api_key: str = Field(default="")
    obsidian_rest_url: str = Field(default="https://127.0.0.1:27124")
    obsidian_context_enabled: bool = Field(default=True)
    obsidian_context_notes: str = Field(default="")
    obsidian_context_tag: str = Field(default="")

    # HTTP
    http_timeout_seconds: float = Field(default=20.0)

    # Prompt
    timezone: str = Field(default="Europe/Paris")

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_file=_env_file(), env_file_encoding="utf-8")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

    def get_obsidian_context_notes(self) -> list[str]:
        """Parse OBSIDIAN_CONTEXT_NOTES into a list of vault paths."""
        if not self.obsidian_context_notes.strip():
            return []
        return [p.strip() for p in self.obsidian_context_notes.split(",") if p.strip()]


settings = Settings()
