"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file

The variable names consumed by the service (``HARMONY_RPC``,
``RATE_LIMIT_PER_MINUTE``) are read through prefixed nested settings.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ up front.
# Values already present in the environment win over the file.
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=False)


def _build_chain_settings() -> "ChainSettings":
    """Build chain settings from environment.

    Pydantic Settings (v2) populates values from environment variables, but
    static type checkers treat fields as constructor arguments.
    """

    return ChainSettings()  # type: ignore[call-arg]


def _build_rate_limit_settings() -> "RateLimitSettings":
    return RateLimitSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    return LogSettings()  # type: ignore[call-arg]


def _build_cors_settings() -> "CORSSettings":
    return CORSSettings()  # type: ignore[call-arg]


class ChainSettings(BaseSettings):
    """Harmony node connection and proof metadata."""

    rpc: str = Field(
        "https://api.harmony.one",
        description="JSON-RPC endpoint of the Harmony node (HARMONY_RPC)",
    )
    timeout_seconds: float = Field(
        10.0,
        description="Timeout for a single JSON-RPC round-trip in seconds",
        gt=0,
    )
    vrf_address: str = Field(
        "0x00000000000000000000000000000000000000ff",
        description="Address of the VRF precompiled contract",
    )
    chain_name: str = Field(
        "harmony-one",
        description="Chain tag written into every proof",
    )
    explorer_block_url: str = Field(
        "https://explorer.harmony.one/block/{block_number}",
        description="Template for the human-facing verification URL",
    )

    model_config = SettingsConfigDict(
        env_prefix="HARMONY_",
        case_sensitive=False,
    )


class RateLimitSettings(BaseSettings):
    """Per-client fixed window rate limiting."""

    per_minute: int = Field(
        60,
        description="Maximum requests per client per window (RATE_LIMIT_PER_MINUTE)",
        ge=1,
    )
    window_seconds: int = Field(
        60,
        description="Rate limit window size in seconds",
        ge=1,
    )
    enabled: bool = Field(
        True,
        description="Enable per-client rate limiting",
    )
    max_clients: int = Field(
        10000,
        description="Upper bound on tracked clients before LRU eviction",
        ge=1,
    )
    include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )
    client_ip_header: str | None = Field(
        None,
        description=(
            "Trusted proxy header carrying the client address "
            "(e.g. CF-Connecting-IP). Falls back to the socket peer."
        ),
    )

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(5, description="Rotated log files to keep", ge=0)
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read and echo the correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class CORSSettings(BaseSettings):
    """Cross-origin response headers."""

    allow_origin: str = Field("*", description="Access-Control-Allow-Origin value")

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    chain: ChainSettings = Field(default_factory=_build_chain_settings)
    rate_limit: RateLimitSettings = Field(default_factory=_build_rate_limit_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)
    cors: CORSSettings = Field(default_factory=_build_cors_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()
