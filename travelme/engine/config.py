"""Engine configuration and settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_BASE_DIR = Path(__file__).resolve().parents[2]
_ENV_FILE = _BASE_DIR / ".env"


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE, env_file_encoding="utf-8", extra="ignore"
    )

    # Catalog store
    database_url: str = Field(
        default="sqlite:///travelme.db",
        description="SQLAlchemy URL of the read-only place catalog",
    )
    catalog_ttl_seconds: int = Field(
        default=300, description="Place catalog cache TTL in seconds"
    )
    max_candidates: int = Field(
        default=30, description="Top-scored places sent to the LLM"
    )

    # Hosted LLM
    openai_api_key: str = Field(
        default="dummy-openai-api-key-for-tests",
        description="OpenAI API key for synthesis, judge and embeddings",
    )
    synthesis_models: list[str] = Field(
        default=["gpt-4o-mini", "gpt-4.1-mini"],
        description="Structured-generation models in priority order",
    )
    synthesis_timeout_s: float = Field(
        default=15.0, description="Hard timeout per synthesis attempt"
    )
    synthesis_temperature: float = Field(default=0.4)
    synthesis_max_tokens: int = Field(default=2048)

    judge_model: str = Field(
        default="gpt-4.1-nano", description="Cheaper model used as fact-checker"
    )
    judge_timeout_s: float = Field(default=3.0, description="Judge hard timeout")
    judge_max_tokens: int = Field(default=512)

    embedding_model: str = Field(default="text-embedding-3-small")
    embedding_timeout_s: float = Field(
        default=5.0, description="Embedding batch hard timeout"
    )
    embedding_max_chars: int = Field(
        default=512, description="Character budget per embedded text"
    )

    # Semantic validator thresholds
    semantic_verified_threshold: float = Field(default=0.6)
    semantic_ai_generated_threshold: float = Field(default=0.4)

    # Routing
    routing_base_url: str = Field(
        default="https://router.project-osrm.org",
        description="OSRM-compatible routing service",
    )
    routing_timeout_s: float = Field(default=6.0)
    enrich_travel_times: bool = Field(
        default=True, description="Annotate plans with walking times after delivery"
    )

    @field_validator("database_url", mode="after")
    @classmethod
    def _normalize_sqlite_url(cls, value: str) -> str:
        """Ensure relative sqlite URLs always point to the repo root."""
        sqlite_prefixes = ("sqlite:///", "sqlite+pysqlite:///")
        for prefix in sqlite_prefixes:
            if value.startswith(prefix):
                path = value[len(prefix) :]
                if path and path != ":memory:" and not path.startswith("/"):
                    abs_path = (_BASE_DIR / path).resolve()
                    return f"{prefix}{abs_path.as_posix()}"
        return value


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get engine settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


class MissingOpenAIKeyError(RuntimeError):
    """Raised when an OpenAI API key is not configured."""


def get_openai_api_key(settings: Settings | None = None) -> str:
    """Return a validated OpenAI API key or raise a helpful error."""
    settings = settings or get_settings()
    api_key = (settings.openai_api_key or "").strip()
    if not api_key or api_key.startswith("dummy-"):
        raise MissingOpenAIKeyError(
            "OpenAI API key is not configured. "
            "Set OPENAI_API_KEY in your environment (.env) to enable plan synthesis, "
            "the LLM judge and semantic validation."
        )
    return api_key
