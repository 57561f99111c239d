"""Streamable HTTP transport.

Routes:
    POST /mcp   MCP endpoint (stateless, JSON responses). Requires the
                X-Google-Access-Token header; requests without it are
                rejected with 401 before any MCP processing.
    GET /health Liveness check.
    GET /       Server info, auth header documentation and tool list.
"""

import contextlib
import logging
from collections.abc import AsyncIterator

from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from gdrive_mcp.__version__ import __version__
from gdrive_mcp.auth import (
    ACCESS_TOKEN_HEADER,
    BASE_URL_HEADER,
    REQUIRED_HEADERS,
    parse_tenant_credentials,
    validate_credentials,
)
from gdrive_mcp.config import ServerSettings
from gdrive_mcp.errors import AuthenticationError
from gdrive_mcp.server.google_drive_server import SERVER_NAME, GoogleDriveServer
from gdrive_mcp.server.tool_definitions import TOOL_NAMES

logger = logging.getLogger(__name__)


class McpEndpoint:
    """ASGI endpoint that checks tenant headers before handing off to MCP."""

    def __init__(self, session_manager: StreamableHTTPSessionManager) -> None:
        self.session_manager = session_manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope)
        try:
            validate_credentials(parse_tenant_credentials(request.headers))
        except AuthenticationError as e:
            response = JSONResponse(
                {
                    "error": "Unauthorized",
                    "message": e.message,
                    "required_headers": REQUIRED_HEADERS,
                },
                status_code=401,
            )
            await response(scope, receive, send)
            return

        await self.session_manager.handle_request(scope, receive, send)


async def health(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "server": SERVER_NAME})


async def index(request: Request) -> JSONResponse:
    return JSONResponse(
        {
            "name": SERVER_NAME,
            "version": __version__,
            "description": "Google Drive MCP Server - Multi-tenant",
            "endpoints": {
                "mcp": "/mcp (POST) - Streamable HTTP MCP endpoint",
                "health": "/health - Health check",
            },
            "authentication": {
                "description": "Pass tenant credentials via request headers",
                "required_headers": {
                    ACCESS_TOKEN_HEADER: "OAuth access token for Google Drive API",
                },
                "optional_headers": {
                    BASE_URL_HEADER: "Override the default Google Drive API base URL",
                },
            },
            "tools": TOOL_NAMES,
        }
    )


def create_app(
    settings: ServerSettings | None = None,
    drive_server: GoogleDriveServer | None = None,
) -> Starlette:
    """Build the Starlette application.

    Args:
        settings: Server settings; loaded from the environment when omitted.
        drive_server: Pre-built server (tests); created from settings otherwise.

    Returns:
        Starlette app whose lifespan runs the MCP session manager and closes
        the shared HTTP client on shutdown.
    """
    drive_server = drive_server or GoogleDriveServer(settings)
    session_manager = StreamableHTTPSessionManager(
        app=drive_server.server,
        json_response=True,
        stateless=True,
    )

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        async with session_manager.run():
            logger.info(f"{SERVER_NAME} {__version__} ready, {len(TOOL_NAMES)} tools")
            try:
                yield
            finally:
                await drive_server.close()

    return Starlette(
        routes=[
            Route("/mcp", endpoint=McpEndpoint(session_manager), methods=["POST"]),
            Route("/health", endpoint=health, methods=["GET"]),
            Route("/", endpoint=index, methods=["GET"]),
        ],
        lifespan=lifespan,
    )
