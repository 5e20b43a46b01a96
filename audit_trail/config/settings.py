# audit_trail/config/settings.py

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    app_name: str = "audit-trail"
    environment: Literal["dev", "test", "prod"] = "dev"
    debug: bool = False
    version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 5003

    # --- Security ---
    # Prune and single-record delete are refused unless this key is configured and presented.
    admin_api_key: Optional[str] = Field(None, min_length=16)

    # --- Database ---
    database_url: str = "sqlite+aiosqlite:///./audit_trail.db"
    db_pool_size: int = 10
    db_max_overflow: int = 20
    auto_create_schema: bool = True

    # --- Queries ---
    default_query_limit: int = Field(100, ge=1, le=1000)

    # --- Client (used by other services) ---
    audit_service_url: str = "http://localhost:5003"
    audit_client_timeout_seconds: float = 5.0

    # --- Observability ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()
