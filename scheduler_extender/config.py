"""Configuration for the Scheduler Extender Client

Extender settings are frozen Pydantic models so a constructed client can never
observe a configuration change. ``ExtenderConfig`` can be built directly by the
scheduler's own configuration loader or read from ``EXTENDER_*`` environment
variables.
"""

import os
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Seconds to wait for an extender when the configured timeout is zero.
DEFAULT_EXTENDER_TIMEOUT = 5.0


class TLSClientConfig(BaseModel):
    """TLS client material for talking to an extender over HTTPS.

    Inline ``*_data`` PEM strings take precedence over the matching ``*_file``.
    """

    cert_file: Optional[str] = Field(default=None, description="Client certificate file")
    key_file: Optional[str] = Field(default=None, description="Client private key file")
    ca_file: Optional[str] = Field(default=None, description="Trusted root certificates file")
    cert_data: Optional[str] = Field(default=None, description="PEM client certificate")
    key_data: Optional[str] = Field(default=None, description="PEM client private key")
    ca_data: Optional[str] = Field(default=None, description="PEM trusted root certificates")
    insecure: bool = Field(default=False, description="Skip server certificate verification")

    model_config = {"frozen": True, "extra": "forbid"}

    @property
    def has_ca(self) -> bool:
        return bool(self.ca_file) or bool(self.ca_data)

    @property
    def has_cert(self) -> bool:
        return bool(self.cert_file) or bool(self.cert_data)

    @property
    def has_key(self) -> bool:
        return bool(self.key_file) or bool(self.key_data)


class ExtenderConfig(BaseSettings):
    """Static configuration for one scheduler extender."""

    url_prefix: str = Field(default="", description="Base URL of the extender service")
    filter_verb: str = Field(default="", description="Filter endpoint; empty disables filtering")
    prioritize_verb: str = Field(
        default="", description="Prioritize endpoint; empty disables scoring"
    )
    weight: int = Field(default=0, description="Multiplier the scheduler applies to scores")
    enable_https: bool = Field(default=False, description="Talk to the extender over HTTPS")
    tls_config: Optional[TLSClientConfig] = Field(default=None, description="TLS client settings")
    http_timeout: float = Field(default=0.0, description="Request timeout in seconds (0 = default)")

    model_config = SettingsConfigDict(
        env_prefix="EXTENDER_",
        env_nested_delimiter="__",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @field_validator("weight")
    @classmethod
    def validate_weight(cls, v):
        if v < 0:
            raise ValueError("weight must be non-negative")
        return v

    @field_validator("http_timeout")
    @classmethod
    def validate_http_timeout(cls, v):
        if v < 0:
            raise ValueError("http_timeout cannot be negative")
        return v

    @property
    def effective_timeout(self) -> float:
        """Timeout actually used for requests."""
        if self.http_timeout == 0:
            return DEFAULT_EXTENDER_TIMEOUT
        return self.http_timeout


@dataclass
class LoggingConfig:
    """Configuration for extender client logging."""

    log_level: str = "INFO"
    log_format: str = "console"

    def __post_init__(self):
        """Validate logging configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level not in valid_levels:
            raise ValueError(f"Invalid log level: {self.log_level}")

        valid_formats = ["console", "json"]
        if self.log_format not in valid_formats:
            raise ValueError(f"Invalid log format: {self.log_format}")

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Load logging configuration from environment variables."""
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("LOG_FORMAT", "console").lower(),
        )
