"""
Application settings using Pydantic.

Provides environment-based configuration loading with MCPCONFIG_ prefix.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from mcpconfig.core.scope import Scope

APP_NAME = "mcpconfig"
DEFAULT_SERVER_NAME = "mcp-server"


class Settings(BaseSettings):
    """Application settings."""

    # Identity
    server_name: str | None = None  # Overrides the pyproject/package.json lookup

    # Registry
    registry_path: Path | None = None

    # Storage layout
    local_dir: str = f".{APP_NAME}"
    value_filename: str = "config.json"
    secrets_filename: str = ".env"

    # Which client path templates distribution writes to
    distribution_scope: Scope = Scope.GLOBAL

    # Logging
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(env_prefix="MCPCONFIG_")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
