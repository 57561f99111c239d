"""Server configuration loaded from environment variables.

Environment Variables:
    GDRIVE_MCP_HOST: Bind address for the HTTP transport (default: 127.0.0.1)
    GDRIVE_MCP_PORT: Port for the HTTP transport (default: 8787)
    GDRIVE_MCP_REQUEST_TIMEOUT: Outbound request timeout in seconds (default: 30)
    GDRIVE_MCP_CONNECT_TIMEOUT: Outbound connect timeout in seconds (default: 10)
    GDRIVE_MCP_LOG_LEVEL: Logging level name (default: INFO)
    GOOGLE_DRIVE_ACCESS_TOKEN: Access token for the single-tenant stdio transport
    GOOGLE_DRIVE_BASE_URL: Drive API root override for the stdio transport
"""

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, Field, field_validator

from gdrive_mcp.auth import TenantCredentials

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8787
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_CONNECT_TIMEOUT = 10.0

# Environment variable -> settings field
ENV_VARS = {
    "GDRIVE_MCP_HOST": "host",
    "GDRIVE_MCP_PORT": "port",
    "GDRIVE_MCP_REQUEST_TIMEOUT": "request_timeout",
    "GDRIVE_MCP_CONNECT_TIMEOUT": "connect_timeout",
    "GDRIVE_MCP_LOG_LEVEL": "log_level",
    "GOOGLE_DRIVE_ACCESS_TOKEN": "access_token",
    "GOOGLE_DRIVE_BASE_URL": "base_url",
}


class ServerSettings(BaseModel):
    """Runtime settings for the server and its outbound HTTP client.

    Attributes:
        host: Bind address for the streamable HTTP transport.
        port: Bind port for the streamable HTTP transport.
        request_timeout: Total timeout for each Drive API call, in seconds.
        connect_timeout: Connect timeout for each Drive API call, in seconds.
        log_level: Root logging level name.
        access_token: Default token for stdio mode (HTTP mode uses headers).
        base_url: Default Drive API root override for stdio mode.
    """

    host: str = Field(default=DEFAULT_HOST)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    connect_timeout: float = Field(default=DEFAULT_CONNECT_TIMEOUT, gt=0)
    log_level: str = Field(default="INFO")
    access_token: str = Field(default="", repr=False)
    base_url: str | None = None

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("base_url")
    @classmethod
    def _blank_base_url_is_none(cls, value: str | None) -> str | None:
        return value.strip() or None if value else None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: object) -> "ServerSettings":
        """Load settings from the environment, then apply explicit overrides.

        Args:
            environ: Environment mapping (defaults to ``os.environ``).
            **overrides: Field values that win over the environment; ``None``
                values are ignored so unset CLI options fall through.

        Raises:
            pydantic.ValidationError: If a value cannot be coerced.
        """
        environ = os.environ if environ is None else environ
        values: dict[str, object] = {
            field: environ[var] for var, field in ENV_VARS.items() if environ.get(var)
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls.model_validate(values)

    def default_credentials(self) -> TenantCredentials:
        """Credentials used when a request carries no headers (stdio transport)."""
        return TenantCredentials(access_token=self.access_token, base_url=self.base_url)
