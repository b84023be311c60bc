from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "ProjectHub"
    app_env: str = "development"  # development, testing, production
    debug: bool = False

    # Database
    database_url: str
    database_migrations_url: str | None = None
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Temporal
    temporal_host: str = "localhost:7233"
    temporal_namespace: str = "default"
    temporal_task_queue: str = "projecthub-notifications"
    notification_retry_schedule: str | None = None  # Cron syntax, e.g. "*/15 * * * *"
    notification_retry_limit: int = 50

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    # Redis (optional - live queries stay process-local without it)
    redis_url: str | None = None  # e.g., "redis://localhost:6379/0"
    redis_pool_size: int = 10
    live_channel: str = "projecthub:changes"

    # Translation
    translation_timeout_seconds: float = 5.0
    mymemory_url: str = "https://api.mymemory.translated.net/get"
    libretranslate_url: str = "https://libretranslate.de/translate"
    developer_language: str = "en"

    # Telegram (if token or chat id is missing, alerts are logged but not sent)
    telegram_bot_token: str | None = None
    telegram_chat_id: str | None = None
    telegram_api_url: str = "https://api.telegram.org"
    notification_timeout_seconds: float = 10.0

    # Object storage (S3 compatible)
    storage_bucket: str = "projecthub-files"
    storage_endpoint_url: str | None = None
    storage_region: str = "us-east-1"
    storage_access_key_id: str | None = None
    storage_secret_access_key: str | None = None
    storage_url_expiry_seconds: int = 3600

    # Legacy feedback migration
    legacy_client_name: str = "Cliente Principal"
    legacy_client_email: str | None = "cliente@agualimpia.com"

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Validate CORS origins - reject wildcards when credentials are used."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @field_validator("developer_language")
    @classmethod
    def validate_developer_language(cls, v: str) -> str:
        if v not in ("en", "es"):
            raise ValueError("DEVELOPER_LANGUAGE must be 'en' or 'es'")
        return v

    @property
    def telegram_configured(self) -> bool:
        return bool(self.telegram_bot_token and self.telegram_chat_id)

    @property
    def storage_configured(self) -> bool:
        """Credentials or a custom endpoint (MinIO, LocalStack) enable object storage."""
        return bool(
            (self.storage_access_key_id and self.storage_secret_access_key)
            or self.storage_endpoint_url
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
