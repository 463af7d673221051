"""
Application configuration management
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # GitHub API Configuration
    github_token: str | None = Field(None)
    github_api_base_url: str = Field("https://api.github.com")
    github_request_delay: float = Field(0.1)

    # Database Configuration
    database_url: str = Field("sqlite:///./pr_code_reviews.db")

    # Application Configuration
    app_name: str = Field("PR Code Reviewer")
    app_version: str = Field("1.0.0")
    debug: bool = Field(False)
    host: str = Field("0.0.0.0")
    port: int = Field(8000)

    # API Configuration
    api_prefix: str = "/api/v1"
    docs_url: str = "/docs"
    redoc_url: str = "/redoc"

    # Logging Configuration
    log_level: str = Field("INFO")
    log_format: str = Field("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    # Review Configuration
    max_stored_code_length: int = Field(10000)
    max_analysis_length: int = Field(1_000_000)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def get_database_url() -> str:
    """Get database URL from settings"""
    return get_settings().database_url


def get_github_headers(token: str | None = None) -> dict:
    """Get GitHub API headers with authentication"""
    settings = get_settings()
    headers = {
        "Accept": "application/vnd.github.v3+json",
        "User-Agent": f"{settings.app_name}/{settings.app_version}",
    }
    access_token = token or settings.github_token
    if access_token:
        headers["Authorization"] = f"token {access_token}"
    return headers
