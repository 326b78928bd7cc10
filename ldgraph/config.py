"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - Settings only feed the service shell; core/ takes explicit arguments

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support (ADR: developer UX)
    - Defaults provided for every setting: works out-of-the-box without a .env
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Document rendering defaults (per-request options override these)
    default_context_url: str = "https://schema.org"
    pretty_print: bool = True

    # Request guard: larger graphs are rejected at the API boundary
    max_graph_entities: int = 10_000

    @field_validator("max_graph_entities")
    @classmethod
    def positive_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_graph_entities must be at least 1")
        return v

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
