"""
Centralized configuration for the BillPoint client.

All settings are loaded from environment variables with sensible defaults.
Endpoint paths are relative to API_BASE_URL.
"""

from functools import lru_cache
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
    app_name: str = "BillPoint"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Backend API
    api_base_url: str = "https://your-api-base-url.com/api"
    login_endpoint: str = "/auth/login"
    signup_endpoint: str = "/auth/signup"
    logout_endpoint: str = "/auth/logout"
    request_timeout: float = 30.0  # seconds

    # Local storage
    storage_path: str = ".billpoint/storage.json"
    user_storage_key: str = "user"
    token_storage_key: str = "auth_token"

    @property
    def login_url(self) -> str:
        return f"{self.api_base_url}{self.login_endpoint}"

    @property
    def signup_url(self) -> str:
        return f"{self.api_base_url}{self.signup_endpoint}"

    @property
    def logout_url(self) -> str:
        return f"{self.api_base_url}{self.logout_endpoint}"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
