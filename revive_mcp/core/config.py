"""Configuration management for the Revive Adserver MCP server.

Provides Pydantic-based configuration classes for type-safe, validated configuration
management using environment variables.
"""

import os
from datetime import timedelta

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReviveSettings(BaseSettings):
    """Revive Adserver XML-RPC connection settings."""

    api_url: str = Field(default="", description="XML-RPC endpoint, e.g. https://ads.example.com/www/api/v2/xmlrpc/")
    api_username: str = Field(default="", description="Revive user name")
    api_password: str = Field(default="", description="Revive password")
    timeout_seconds: float = Field(default=30.0, description="HTTP timeout per XML-RPC call")
    session_lifetime_seconds: int = Field(
        default=86400, description="Assumed session lifetime when the logon response carries none"
    )
    agency_id: int = Field(default=1, description="Agency used for directory listings and agency statistics")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    user_agent: str = Field(default="Revive Adserver MCP Client/1.0", description="User-Agent header sent with each call")

    model_config = SettingsConfigDict(env_prefix="REVIVE_", case_sensitive=False, env_file=".env", extra="ignore")

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v):
        """Validate the endpoint scheme (only if provided)."""
        if not v:
            return v  # Allow empty - checked by validate_configuration at startup
        if not v.startswith(("http://", "https://")):
            raise ValueError("REVIVE_API_URL must start with http:// or https://")
        return v

    @field_validator("timeout_seconds", "session_lifetime_seconds")
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @property
    def session_lifetime(self) -> timedelta:
        return timedelta(seconds=self.session_lifetime_seconds)

    @property
    def missing_credentials(self) -> list[str]:
        """Names of the required environment variables that are not set."""
        required = {
            "REVIVE_API_URL": self.api_url,
            "REVIVE_API_USERNAME": self.api_username,
            "REVIVE_API_PASSWORD": self.api_password,
        }
        return [name for name, value in required.items() if not value]


class ServerSettings(BaseSettings):
    """MCP server settings."""

    transport: str = Field(default="stdio", description="MCP transport: stdio or http")
    host: str = Field(default="127.0.0.1", description="Bind address for the http transport")
    port: int = Field(default=8080, description="Port for the http transport")

    model_config = SettingsConfigDict(env_prefix="REVIVE_MCP_", case_sensitive=False, env_file=".env", extra="ignore")

    @field_validator("transport")
    @classmethod
    def validate_transport(cls, v):
        v = v.lower()
        if v not in ("stdio", "http"):
            raise ValueError("REVIVE_MCP_TRANSPORT must be 'stdio' or 'http'")
        return v


class AppConfig(BaseSettings):
    """Main application configuration."""

    log_level: str = Field(default="INFO", description="Root log level")

    revive: ReviveSettings = Field(default_factory=ReviveSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False, extra="ignore")


# Global configuration instance
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    global _config
    _config = None


def validate_configuration() -> None:
    """Validate configuration at startup.

    Raises:
        RuntimeError: If required configuration is missing or invalid
    """
    try:
        config = get_config()
    except Exception as e:
        raise RuntimeError(f"Configuration validation failed: {str(e)}") from e

    missing = config.revive.missing_credentials
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")


def is_production() -> bool:
    """Check if running in production (PRODUCTION or ENVIRONMENT=production)."""
    return bool(os.getenv("PRODUCTION")) or os.getenv("ENVIRONMENT", "development").lower() == "production"
