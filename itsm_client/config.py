"""
ITSM Client Configuration

Environment-driven settings (prefix ITSM_CLIENT_), optionally read
from a local .env file. Session keys and tenant ids are NOT settings:
they are passed per call.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Transport and parsing settings for ServiceClient."""

    model_config = SettingsConfigDict(
        env_prefix="ITSM_CLIENT_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    base_url: str = Field(
        default="http://localhost:8080/ServiceAPI",
        min_length=1,
        description="Base URL of the remote service; operations are posted below it.",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    verify_tls: bool = Field(
        default=True,
        description="Verify the remote TLS certificate.",
    )
    user_agent: str = Field(
        default="itsm-client/0.1",
        min_length=1,
    )
    success_status: str = Field(
        default="Success",
        min_length=1,
        description="Status string the service uses for success.",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level used by the gateway.",
    )
