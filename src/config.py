"""Application configuration settings.

This module provides centralized configuration management using environment
variables with sensible defaults.
"""

import os
from dataclasses import dataclass, field


def _get_bool_env(name: str, default: bool = False) -> bool:
    """Get a boolean value from environment variable.

    Args:
        name: Environment variable name.
        default: Default value if not set.

    Returns:
        Boolean value from environment.
    """
    value = os.getenv(name, "").lower()
    if value in ("true", "1", "yes", "on"):
        return True
    if value in ("false", "0", "no", "off"):
        return False
    return default


def _get_float_env(name: str, default: float) -> float:
    """Get a float value from environment variable, ignoring garbage."""
    try:
        return float(os.getenv(name, ""))
    except ValueError:
        return default


def _get_int_env(name: str, default: int) -> int:
    """Get a non-negative int value from environment variable."""
    try:
        return max(0, int(os.getenv(name, "")))
    except ValueError:
        return default


def _get_list_env(name: str, default: list[str]) -> list[str]:
    """Get a comma-separated list from environment variable."""
    value = os.getenv(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables.

    Attributes:
        ALPHA_VANTAGE_API_KEY: Alpha Vantage API key (primary provider).
        FINNHUB_API_KEY: Finnhub API token (secondary provider).
        MARKET_DATA_TIMEOUT: Per-request timeout for provider calls, in seconds.
        MARKET_DATA_RETRIES: Extra transport-level attempts per provider call.
        CORS_ORIGINS: Allowed CORS origins for the HTTP API.
        DEBUG: Expose exception details in 500 responses.
    """

    # Data sources
    ALPHA_VANTAGE_API_KEY: str | None = None
    FINNHUB_API_KEY: str | None = None

    # Transport
    MARKET_DATA_TIMEOUT: float = 10.0
    MARKET_DATA_RETRIES: int = 0  # 0 keeps one request per provider

    # API
    CORS_ORIGINS: list[str] = field(default_factory=lambda: ["*"])
    DEBUG: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables.

        Returns:
            Settings instance populated from environment.
        """
        return cls(
            ALPHA_VANTAGE_API_KEY=os.getenv("ALPHA_VANTAGE_API_KEY"),
            FINNHUB_API_KEY=os.getenv("FINNHUB_API_KEY"),
            MARKET_DATA_TIMEOUT=_get_float_env("MARKET_DATA_TIMEOUT", 10.0),
            MARKET_DATA_RETRIES=_get_int_env("MARKET_DATA_RETRIES", 0),
            CORS_ORIGINS=_get_list_env("CORS_ORIGINS", ["*"]),
            DEBUG=_get_bool_env("DEBUG", default=False),
        )


# Global settings instance
settings = Settings.from_env()
