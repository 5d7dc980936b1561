"""DropZone configuration — Pydantic BaseSettings loaded from .env."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = "DropZone"
    debug: bool = True
    environment: str = "development"
    log_level: str = "INFO"
    # LC_COLLATE for name sorting; "" takes the environment's locale
    collation_locale: str = ""

    # Network
    host: str = "127.0.0.1"
    port: int = 8000
    api_prefix: str = "/api"
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:8000",
    ]

    # Record store: "sql" = local SQLite tables, "http" = remote record API
    record_backend: str = "sql"
    database_path: str = "./data/dropzone.db"
    record_api_url: str = "http://localhost:9000/api"
    record_project_id: str = ""
    record_public_key: str = ""
    record_timeout_seconds: float = 10.0

    # Simulated uploads
    upload_tick_seconds: float = 0.2
    upload_max_increment: float = 20.0
    upload_clear_delay_seconds: float = 1.0

    # Session
    notification_feed_size: int = 50

    @property
    def uses_http_backend(self) -> bool:
        return self.record_backend == "http"

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        env_prefix="DROPZONE_",
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, value: list[str] | str) -> list[str]:
        if isinstance(value, str) and not value.startswith("["):
            return [o.strip() for o in value.split(",") if o.strip()]
        if isinstance(value, list):
            return value
        return ["http://localhost:5173"]

    @field_validator("record_backend")
    @classmethod
    def check_record_backend(cls, value: str) -> str:
        value = value.lower()
        if value not in ("sql", "http"):
            raise ValueError(f"record_backend must be 'sql' or 'http', got {value!r}")
        return value

    @model_validator(mode="after")
    def _resolve_paths(self) -> "Settings":
        """Ensure the database path is absolute."""
        base = Path(__file__).resolve().parent.parent  # backend/
        if not Path(self.database_path).is_absolute():
            self.database_path = str(base / self.database_path)
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
