"""
Loaderkit Settings - Configuration management using Pydantic Settings.

Loads configuration from environment variables and .env files.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoaderkitSettings(BaseSettings):
    """
    Loaderkit configuration settings.

    Settings are loaded from:
    1. Environment variables (highest priority)
    2. .env file in current directory
    3. Default values (lowest priority)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="LK_",  # All Loaderkit env vars must start with LK_
    )

    # Paths
    home: Path = Field(
        default_factory=Path.home,
        description="Home directory holding the .loaderkit cache root (env: LK_HOME)",
    )

    config_file: str = Field(
        default="loaderkit.json",
        description="Project configuration file name (env: LK_CONFIG_FILE)",
    )

    # Registry endpoints
    github_api_url: str = Field(
        default="https://api.github.com",
        description="Base URL of the GitHub REST API (env: LK_GITHUB_API_URL)",
    )

    github_token: str | None = Field(
        default=None,
        description="Optional GitHub token for higher rate limits (env: LK_GITHUB_TOKEN)",
    )

    npm_registry_url: str = Field(
        default="https://registry.npmjs.org",
        description="Base URL of the npm registry (env: LK_NPM_REGISTRY_URL)",
    )

    http_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for registry requests (env: LK_HTTP_TIMEOUT)",
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR) (env: LK_LOG_LEVEL)",
    )

    @property
    def cache_root(self) -> Path:
        """Directory holding one private cache directory per loader asset."""
        return self.home / ".loaderkit" / "loader-files"


# Global settings instance
_settings: LoaderkitSettings | None = None


def get_settings() -> LoaderkitSettings:
    """
    Get the global settings instance.

    Creates the settings instance on first call, then returns cached instance.

    Returns:
        LoaderkitSettings instance
    """
    global _settings
    if _settings is None:
        _settings = LoaderkitSettings()
    return _settings


def reload_settings() -> LoaderkitSettings:
    """
    Reload settings from environment/files.

    Useful for testing or when .env file changes.

    Returns:
        Fresh LoaderkitSettings instance
    """
    global _settings
    _settings = LoaderkitSettings()
    return _settings
