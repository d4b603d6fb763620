"""Centralized configuration using Pydantic Settings.

This module provides a single source of truth for all configuration:
- where the layer registry file lives
- outbound source defaults (radius, icon, timeouts)
- Twitter credentials
- logging and server settings

Configuration can be overridden via environment variables:
- LAERTES_LAYERS_PATH=/etc/laertes/config.json
- LAERTES_SOURCES_DEFAULT_RADIUS_M=2000
- LAERTES_CONSUMER_KEY=...
- LAERTES_LOG_LEVEL=DEBUG
- etc.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class LayersConfig(BaseSettings):
    """Layer registry configuration.

    Environment variables prefixed with LAERTES_LAYERS_.
    """

    model_config = SettingsConfigDict(env_prefix="LAERTES_LAYERS_")

    path: Path = Field(default_factory=lambda: Path.cwd() / "config.json")


class SourcesConfig(BaseSettings):
    """Outbound data source configuration.

    Environment variables prefixed with LAERTES_SOURCES_.
    """

    model_config = SettingsConfigDict(env_prefix="LAERTES_SOURCES_")

    default_radius_m: float = 1500.0
    default_icon_url: str = "https://maps.gstatic.com/mapfiles/ms2/micons/blue-dot.png"
    http_timeout_seconds: float = 10.0
    source_timeout_seconds: float = 15.0
    endpoint_timeout_seconds: float = 12.0
    kml_url_suffix: str = ""
    max_posts: int = 100
    user_agent: str = "laertes"

    @property
    def endpoint_deadline_seconds(self) -> float:
        """Wall-clock budget for one map endpoint, at most 80% of the source deadline."""
        return min(self.endpoint_timeout_seconds, self.source_timeout_seconds * 0.8)


class TwitterConfig(BaseSettings):
    """Twitter OAuth 1.0a user-context credentials.

    Read from LAERTES_CONSUMER_KEY, LAERTES_CONSUMER_SECRET,
    LAERTES_ACCESS_TOKEN and LAERTES_ACCESS_TOKEN_SECRET. Missing values
    never fail startup; the social source reports them per request.
    """

    model_config = SettingsConfigDict(env_prefix="LAERTES_")

    consumer_key: Optional[SecretStr] = None
    consumer_secret: Optional[SecretStr] = None
    access_token: Optional[SecretStr] = None
    access_token_secret: Optional[SecretStr] = None

    @property
    def missing(self) -> tuple[str, ...]:
        """Names of the credentials that are unset or blank."""
        values = {
            "consumer_key": self.consumer_key,
            "consumer_secret": self.consumer_secret,
            "access_token": self.access_token,
            "access_token_secret": self.access_token_secret,
        }
        return tuple(
            name
            for name, value in values.items()
            if value is None or not value.get_secret_value().strip()
        )

    @property
    def is_complete(self) -> bool:
        """Check if all four credentials are present."""
        return not self.missing


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Environment variables prefixed with LAERTES_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="LAERTES_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ServerConfig(BaseSettings):
    """HTTP server configuration.

    Environment variables prefixed with LAERTES_SERVER_.
    """

    model_config = SettingsConfigDict(env_prefix="LAERTES_SERVER_")

    host: str = "127.0.0.1"
    port: int = 4567


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

    Sub-configurations can be accessed via attributes:

        config = get_config()
        print(config.sources.default_radius_m)
        print(config.layers.path)

    Environment variables prefixed with LAERTES_.
    """

    model_config = SettingsConfigDict(env_prefix="LAERTES_")

    layers: LayersConfig = Field(default_factory=LayersConfig)
    sources: SourcesConfig = Field(default_factory=SourcesConfig)
    twitter: TwitterConfig = Field(default_factory=TwitterConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.

    Returns:
        The application configuration instance.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache.

    Call this in tests to ensure a fresh configuration is loaded.
    """
    get_config.cache_clear()
