"""Shared pytest fixtures for gdrive-mcp tests.

This module provides reusable fixtures for tenant credentials, a mocked
shared httpx client, and Drive API response mocks.
"""

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from gdrive_mcp.auth import TenantCredentials
from gdrive_mcp.client import MULTIPART_BOUNDARY, DriveClient
from gdrive_mcp.config import ServerSettings

# =============================================================================
# Response Mocks
# =============================================================================


def create_mock_response(
    json_data: Any = None,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
    text: str | None = None,
) -> MagicMock:
    """Create a mock httpx Response object.

    JSON payloads get an ``application/json`` content type; otherwise the
    body is ``text`` with whatever content type ``headers`` declares.
    """
    mock_response = MagicMock(spec=httpx.Response)
    mock_response.status_code = status_code
    response_headers = dict(headers or {})
    if json_data is not None:
        response_headers.setdefault("content-type", "application/json; charset=UTF-8")
        mock_response.json.return_value = json_data
        mock_response.text = json.dumps(json_data)
    else:
        mock_response.json.side_effect = ValueError("No JSON body")
        mock_response.text = text or ""
    mock_response.headers = httpx.Headers(response_headers)
    return mock_response


@pytest.fixture
def make_response():
    """Factory fixture exposing ``create_mock_response`` to test modules."""
    return create_mock_response


# =============================================================================
# Upload Body Helpers
# =============================================================================


def split_multipart_body(body: bytes, boundary: str = MULTIPART_BOUNDARY) -> list[tuple[str, str]]:
    """Split a multipart/related upload body into (content type, payload) parts."""
    text = body.decode("utf-8")
    close_delimiter = f"\r\n--{boundary}--"
    if text.endswith(close_delimiter):
        text = text[: -len(close_delimiter)]

    parts = []
    for chunk in text.split(f"\r\n--{boundary}\r\n"):
        if not chunk:
            continue
        header, _, payload = chunk.partition("\r\n\r\n")
        parts.append((header.removeprefix("Content-Type: ").strip(), payload))
    return parts


@pytest.fixture
def split_multipart():
    """Fixture exposing ``split_multipart_body`` to test modules."""
    return split_multipart_body


# =============================================================================
# Credential Fixtures
# =============================================================================


@pytest.fixture
def credentials() -> TenantCredentials:
    """Credentials for a single test tenant."""
    return TenantCredentials(access_token="test_access_token_abc123")


@pytest.fixture
def empty_credentials() -> TenantCredentials:
    """Credentials with no access token."""
    return TenantCredentials()


# =============================================================================
# HTTP Client Fixtures
# =============================================================================


@pytest.fixture
def mock_http_client() -> AsyncMock:
    """Create a mock shared httpx.AsyncClient.

    Tests set ``mock_http_client.request.return_value`` (or ``side_effect``)
    to a response from ``create_mock_response``.
    """
    client = AsyncMock(spec=httpx.AsyncClient)
    client.request = AsyncMock(return_value=create_mock_response({}))
    return client


@pytest.fixture
def drive_client(credentials: TenantCredentials, mock_http_client: AsyncMock) -> DriveClient:
    """DriveClient bound to the test tenant and the mocked HTTP client."""
    return DriveClient(credentials, http_client=mock_http_client)


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def settings() -> ServerSettings:
    """Settings with no default (stdio) token."""
    return ServerSettings()


@pytest.fixture
def stdio_settings() -> ServerSettings:
    """Settings carrying a default token, as used by the stdio transport."""
    return ServerSettings(access_token="stdio_token_xyz")


# =============================================================================
# CLI Test Fixtures
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
