"""Application settings (env/.env)."""

from __future__ import annotations

from typing import Literal

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["debug", "info", "warn", "error"]
Transport = Literal["stdio", "http"]


class Settings(BaseSettings):
    """Settings for the MCP server and the Paperless-ngx REST API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    paperless_url: AnyHttpUrl = Field(alias="PAPERLESS_URL")
    paperless_token: str = Field(alias="PAPERLESS_TOKEN", min_length=1)

    mcp_auth_token: str | None = Field(default=None, alias="MCP_AUTH_TOKEN")
    log_level: LogLevel = Field(default="info", alias="LOG_LEVEL")
    mcp_transport: Transport = Field(default="stdio", alias="MCP_TRANSPORT")
    mcp_host: str = Field(default="0.0.0.0", alias="MCP_HOST")
    mcp_http_port: int = Field(default=8080, alias="MCP_HTTP_PORT", ge=1, le=65535)

    http_timeout_seconds: float = Field(
        default=30.0,
        alias="HTTP_TIMEOUT_SECONDS",
        gt=0,
    )

    @field_validator("paperless_token", mode="before")
    @classmethod
    def _strip_token(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("mcp_auth_token", mode="before")
    @classmethod
    def _empty_auth_token_is_unset(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level", "mcp_transport", mode="before")
    @classmethod
    def _lowercase(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @property
    def paperless_base_url(self) -> str:
        return str(self.paperless_url).rstrip("/")


def mask_token(token: str | None) -> str:
    """Mask a secret for log output, keeping two characters at each end."""
    if not token:
        return ""
    if len(token) <= 4:
        return "****"
    return token[:2] + "*" * (len(token) - 4) + token[-2:]
