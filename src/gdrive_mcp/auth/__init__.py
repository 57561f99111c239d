"""Tenant credential handling for the Google Drive MCP server.

Quick Start:
    ```python
    from gdrive_mcp.auth import parse_tenant_credentials, validate_credentials

    credentials = parse_tenant_credentials(request.headers)
    validate_credentials(credentials)  # raises AuthenticationError
    ```
"""

from gdrive_mcp.auth.credentials import (
    ACCESS_TOKEN_HEADER,
    BASE_URL_HEADER,
    MISSING_TOKEN_MESSAGE,
    OPTIONAL_HEADERS,
    REQUIRED_HEADERS,
    TenantCredentials,
    parse_tenant_credentials,
    validate_credentials,
)

__all__ = [
    "ACCESS_TOKEN_HEADER",
    "BASE_URL_HEADER",
    "MISSING_TOKEN_MESSAGE",
    "OPTIONAL_HEADERS",
    "REQUIRED_HEADERS",
    "TenantCredentials",
    "parse_tenant_credentials",
    "validate_credentials",
]
