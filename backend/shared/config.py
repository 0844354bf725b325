"""
Centralized configuration for the AirMode backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., SUPABASE_*, APP_JWT_*, IDENTITY_*).
"""

from functools import lru_cache
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "AirMode API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Storage: "supabase" in production, "memory" for local runs and tests
    storage_backend: Literal["supabase", "memory"] = "supabase"

    # Supabase
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_db_url: str = ""  # direct Postgres URI, used by run_migrations.py

    # Application session tokens
    app_jwt_secret: str = ""
    app_jwt_expires_in_seconds: int = 30 * 24 * 60 * 60

    # Identity provider (Huawei Account Kit)
    identity_provider: str = "huawei"
    identity_client_id: str = ""
    identity_client_secret: str = ""
    identity_token_url: str = "https://oauth-login.cloud.huawei.com/oauth2/v3/token"
    identity_token_info_url: str = (
        "https://oauth-api.cloud.huawei.com/rest.php"
        "?nsp_fmt=JSON&nsp_svc=huawei.oauth2.user.getTokenInfo"
    )
    identity_timeout: float = 10.0

    # Users
    default_nickname_prefix: str = "飞友"

    # Airport data files loaded into the memory backend at startup
    airports_seed_dir: str = ""


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
