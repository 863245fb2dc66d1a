from functools import lru_cache
import json
from urllib.parse import urlsplit

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="Humanlab API", alias="APP_NAME")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    api_prefix: str = Field(default="/api", alias="API_PREFIX")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    cors_allowed_origins: str = Field(default="http://localhost:3000", alias="CORS_ALLOWED_ORIGINS")
    cors_allow_origin_regex: str = Field(default="", alias="CORS_ALLOW_ORIGIN_REGEX")

    sentry_dsn: str = Field(default="", alias="SENTRY_DSN")

    http_timeout_seconds: float = Field(default=60.0, alias="HTTP_TIMEOUT_SECONDS", gt=0)

    winston_api_key: SecretStr = Field(default=SecretStr(""), alias="WINSTON_API_KEY")
    winston_api_url: str = Field(
        default="https://api.gowinston.ai/v2/ai-content-detection",
        alias="WINSTON_API_URL",
    )
    detection_version: str = Field(default="4.0", alias="DETECTION_VERSION")
    detection_language: str = Field(default="en", alias="DETECTION_LANGUAGE")
    detection_min_chars: int = Field(default=300, alias="DETECTION_MIN_CHARS", ge=0)

    anthropic_api_key: SecretStr = Field(default=SecretStr(""), alias="ANTHROPIC_API_KEY")
    anthropic_api_url: str = Field(default="https://api.anthropic.com", alias="ANTHROPIC_API_URL")
    anthropic_version: str = Field(default="2023-06-01", alias="ANTHROPIC_VERSION")
    anthropic_model: str = Field(default="claude-3-5-sonnet-20241022", alias="ANTHROPIC_MODEL")
    anthropic_max_tokens: int = Field(default=8192, alias="ANTHROPIC_MAX_TOKENS", gt=0)
    anthropic_temperature: float = Field(default=1.0, alias="ANTHROPIC_TEMPERATURE", ge=0.0, le=1.0)

    gemini_api_key: SecretStr = Field(default=SecretStr(""), alias="GEMINI_API_KEY")
    gemini_api_url: str = Field(default="https://generativelanguage.googleapis.com", alias="GEMINI_API_URL")
    gemini_model: str = Field(default="gemini-2.0-flash", alias="GEMINI_MODEL")

    anthropic_system_prompt: str = Field(default="", alias="ANTHROPIC_SYSTEM_PROMPT")
    anthropic_user_prompt: str = Field(default="", alias="ANTHROPIC_USER_PROMPT")
    gemini_system_prompt: str = Field(default="", alias="GEMINI_SYSTEM_PROMPT")
    gemini_user_prompt: str = Field(default="", alias="GEMINI_USER_PROMPT")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        if not isinstance(value, str):
            return "INFO"
        normalized = value.strip().upper()
        if normalized in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            return normalized
        return "INFO"

    @field_validator("winston_api_url", "anthropic_api_url", "gemini_api_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().rstrip("/")
        return value

    @staticmethod
    def _normalize_origin(origin: str) -> str:
        candidate = origin.strip().strip("'\"")
        if not candidate:
            return ""

        if "://" not in candidate:
            candidate = f"https://{candidate}"

        parsed = urlsplit(candidate)
        if not parsed.scheme or not parsed.netloc:
            return ""

        # CORS matching is exact on scheme+host+port; paths must be removed.
        return f"{parsed.scheme}://{parsed.netloc}".rstrip("/")

    @property
    def cors_origins(self) -> list[str]:
        raw = self.cors_allowed_origins.strip()
        if not raw:
            return []

        values: list[str]
        if raw.startswith("["):
            try:
                parsed = json.loads(raw)
                if isinstance(parsed, list):
                    values = [str(item) for item in parsed]
                else:
                    values = [raw]
            except json.JSONDecodeError:
                values = [raw]
        else:
            values = raw.split(",")

        normalized = [self._normalize_origin(value) for value in values]
        return [origin for origin in normalized if origin]

    @property
    def cors_origin_regex(self) -> str | None:
        value = self.cors_allow_origin_regex.strip()
        return value or None

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()
