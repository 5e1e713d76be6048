"""Application configuration using Pydantic Settings.

This module centralizes runtime configuration for the Onboard service and the
terminal wizard. Values can be provided via environment variables (preferred)
or fall back to the defaults below. A ``Settings`` instance is intended to be
retrieved via ``get_settings`` which caches the object for reuse across the
process.

Environment variable prefix: ``ONBOARD_`` (e.g. ``ONBOARD_PORT``).
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime application settings.

    Attributes map directly to environment variables using the ``ONBOARD_``
    prefix (case-insensitive). For example, ``interface`` <- ``ONBOARD_INTERFACE``.
    """

    # Server settings
    # These settings control the device-side API.
    host: str = Field(
        default="0.0.0.0",
        description="Host interface to bind the server",
    )  # fmt: skip
    port: int = Field(
        default=8080,
        description="Server port",
    )  # fmt: skip
    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Application log level",
    )
    config_paths: list[str] = Field(
        default_factory=list,
        description="Configuration files or glob patterns, processed in lexicographic order of file name",
    )  # fmt: skip
    device_id: str = Field(
        default="",
        description="Identifier of the device being onboarded",
    )  # fmt: skip
    interface: str = Field(
        default="wlan0",
        description="Name of the network interface to report on",
    )  # fmt: skip
    ip_address: str = Field(
        default="10.0.0.1",
        description="Address of the device announced over mDNS",
    )  # fmt: skip
    advertise: bool = Field(
        default=True,
        description="Announce the device API over mDNS while the server runs",
    )  # fmt: skip

    # Wizard settings
    # These settings control the terminal wizard and its verification checks.
    server_url: str = Field(
        default="http://localhost:8080",
        description="Base URL of the device API used by the wizard",
    )  # fmt: skip
    request_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Timeout in seconds for a single API request",
    )  # fmt: skip
    check_max_attempts: int = Field(
        default=10,
        ge=1,
        description="Attempts before a verification check times out",
    )  # fmt: skip
    check_interval: float = Field(
        default=5.0,
        ge=0,
        description="Seconds to wait between verification attempts",
    )  # fmt: skip
    service_check_max_attempts: int = Field(
        default=20,
        ge=1,
        description="Attempts before a systemd unit check times out",
    )  # fmt: skip

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | None) -> str:
        """Normalize and validate log level."""
        if v is None:
            return "INFO"

        v_upper = str(v).upper()

        allowed = {"TRACE", "DEBUG", "INFO", "WARNING", "ERROR"}
        if v_upper not in allowed:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {', '.join(sorted(allowed))}")

        return v_upper

    model_config = SettingsConfigDict(
        env_prefix="ONBOARD_",  # Prefix for env vars
        case_sensitive=False,
        extra="ignore",  # Ignore unexpected env vars
        env_file=".env",  # Optional .env loading (if present)
        env_file_encoding="utf-8",
    )


@lru_cache
def get_settings() -> Settings:
    """Return the cached ``Settings`` instance.

    The first invocation reads environment variables / .env file; subsequent
    calls reuse the same object to ensure consistent config.
    """

    return Settings()


__all__ = ["Settings", "get_settings"]
