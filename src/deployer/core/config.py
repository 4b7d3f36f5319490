"""Configuration management for Deployer."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field


class ServerSettings(BaseModel):
    """Server settings loaded from environment variables."""

    host: str
    port: int
    webhook_secret: str | None = Field(default=None, repr=False)
    webhook_max_body_bytes: int


def _int_from_env(name: str, default: str) -> int:
    try:
        value = int(os.getenv(name, default))
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value <= 0:
        raise ValueError(f"{name} must be > 0")
    return value


def load_server_settings() -> ServerSettings:
    """Load HTTP server settings for webhook intake."""
    host = os.getenv("DEPLOYER_SERVER_HOST", "0.0.0.0")
    port = _int_from_env("DEPLOYER_SERVER_PORT", "8080")
    webhook_secret = os.getenv("DEPLOYER_WEBHOOK_SECRET") or None
    webhook_max_body_bytes = _int_from_env("DEPLOYER_WEBHOOK_MAX_BODY_BYTES", "262144")

    return ServerSettings(
        host=host,
        port=port,
        webhook_secret=webhook_secret,
        webhook_max_body_bytes=webhook_max_body_bytes,
    )
