from __future__ import annotations
from pathlib import Path
import os
from typing import Sequence
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

def _base_dir() -> Path:
    return Path(__file__).resolve().parents[2]

def _env_files() -> Sequence[Path]:
    base = _base_dir()
    app_env = os.getenv("APP_ENV", "local")
    candidates = [
        base / ".env",
        base / f".env.{app_env}",
        base / ".env.local",
        base / f".env.{app_env}.local",
        base / "env" / app_env / ".env",
    ]
    seen = []
    for p in candidates:
        if p.is_file() and p not in seen:
            seen.append(p)
    return seen

class Settings(BaseSettings):
    app_env: str = Field(default="local", validation_alias="APP_ENV")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Mongo: MONGODB_SERVER_URL가 있으면 host/port/계정 설정보다 우선
    mongo_url: str | None = Field(default=None, validation_alias="MONGODB_SERVER_URL")
    mongo_host: str = Field(default="localhost", validation_alias="MONGO_HOST")
    mongo_port: int = Field(default=27017, validation_alias="MONGO_PORT")
    mongo_user: str | None = Field(default=None, validation_alias="MONGO_USER")
    mongo_password: str | None = Field(default=None, validation_alias="MONGO_PASSWORD")
    mongo_auth_source: str = Field(default="admin", validation_alias="MONGO_AUTH_SOURCE")
    mongo_db: str = Field(default="bookmarks", validation_alias="MONGO_DB")
    mongo_bookmarks_collection: str = Field(default="bookmarks", validation_alias="MONGO_BOOKMARKS_COLLECTION")
    mongo_timeout_ms: int = Field(default=5000, validation_alias="MONGO_TIMEOUT_MS")

    # Auth/JWT
    secret_key: str = Field(default="change-me-in-prod", validation_alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    cors_origins: str = Field(default="http://localhost:3000", validation_alias="CORS_ORIGINS")

    model_config = SettingsConfigDict(
        env_file=_env_files(),
        env_file_encoding="utf-8",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

settings = Settings()
