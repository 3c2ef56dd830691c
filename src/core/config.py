"""Application settings and CORS configuration."""

import json
import os
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=(".env"), env_file_encoding="utf-8")

    # App
    APP_NAME: str = "PromptEnhancer"
    ENVIRONMENT: str = "development"  # development | production | test

    # CORS
    # Declared as a union so pydantic-settings hands CSV env values to the
    # validator instead of failing to JSON-decode them.
    CORS_ORIGINS: list[str] | str = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    ALLOW_CREDENTIALS: bool = True

    # Remote completion service (MiniMax chat completion v2)
    # MINIMAX_API_KEY is optional; without it every request takes the
    # deterministic template path.
    MINIMAX_API_KEY: str | None = None
    MINIMAX_GROUP_ID: str | None = None
    MINIMAX_BASE_URL: str = "https://api.minimax.io/v1"
    MINIMAX_MODEL: str = "MiniMax-M2.1"
    MINIMAX_TIMEOUT_SECONDS: float = 30.0

    # Enhancement pipeline
    PROMPT_LOCALE: str = "en"  # en | pt
    STREAM_TOKEN_DELAY_SECONDS: float = 0.01

    # In-memory history of recent results
    HISTORY_CAPACITY: int = 100

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: object) -> list[str]:
        """Accept a list, a comma-separated string or a JSON array string."""
        if isinstance(v, str):
            raw = v.strip()
            if raw.startswith("["):
                try:
                    v = json.loads(raw)
                except json.JSONDecodeError as e:
                    raise ValueError("CORS_ORIGINS JSON array is malformed") from e
            else:
                v = raw.split(",")
        if not isinstance(v, list):
            raise ValueError("CORS_ORIGINS must be a list or a string")
        return [origin for origin in (str(o).strip() for o in v) if origin]

    @field_validator("MINIMAX_TIMEOUT_SECONDS")
    @classmethod
    def _positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("MINIMAX_TIMEOUT_SECONDS must be greater than zero")
        return v

    @field_validator("STREAM_TOKEN_DELAY_SECONDS")
    @classmethod
    def _non_negative_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("STREAM_TOKEN_DELAY_SECONDS must not be negative")
        return v

    @field_validator("HISTORY_CAPACITY")
    @classmethod
    def _positive_capacity(cls, v: int) -> int:
        if v < 1:
            raise ValueError("HISTORY_CAPACITY must be at least 1")
        return v

    @field_validator("PROMPT_LOCALE", mode="before")
    @classmethod
    def _normalize_locale(cls, v: object) -> str:
        locale = str(v or "en").strip().lower()
        if locale not in {"en", "pt"}:
            raise ValueError("PROMPT_LOCALE must be 'en' or 'pt'")
        return locale

    @model_validator(mode="after")
    def _validate_cors_credentials(self) -> "Settings":
        """Browsers reject a wildcard origin on credentialed requests."""
        if self.ALLOW_CREDENTIALS and "*" in self.CORS_ORIGINS:
            raise ValueError(
                "CORS_ORIGINS may not contain '*' while ALLOW_CREDENTIALS is true; "
                "list the allowed origins explicitly"
            )
        return self


# Which dotenv file each environment reads; tests rely on defaults only.
_ENV_FILES = {"development": ".env.dev", "production": ".env.prod", "test": None}


@lru_cache
def get_settings() -> Settings:
    env = os.getenv("ENVIRONMENT", "development").strip().lower()
    if env not in _ENV_FILES:
        raise ValueError("ENVIRONMENT must be 'development', 'production', or 'test'")

    # `_env_file` is a runtime-only pydantic-settings argument unknown to mypy.
    settings = Settings(_env_file=_ENV_FILES[env])  # type: ignore[call-arg]
    settings.ENVIRONMENT = env
    return settings
