"""Command-line interface for gdrive-mcp."""

import asyncio
import logging
import sys

import click
from pydantic import ValidationError

from gdrive_mcp.__version__ import __version__
from gdrive_mcp.config import ServerSettings


def _load_settings(**overrides: object) -> ServerSettings:
    try:
        settings = ServerSettings.from_env(**overrides)
    except ValidationError as e:
        click.echo(f"❌ Invalid configuration: {e}", err=True)
        sys.exit(1)
    logging.basicConfig(level=settings.log_level)
    return settings


access_token_option = click.option(
    "--access-token",
    envvar="GOOGLE_DRIVE_ACCESS_TOKEN",
    help="OAuth access token for the Drive API",
)
base_url_option = click.option(
    "--base-url",
    envvar="GOOGLE_DRIVE_BASE_URL",
    help="Override the Drive API base URL",
)


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Google Drive MCP Server - Expose the Drive REST API as MCP tools.

    Tools cover files, folders, permissions, comments, replies, revisions,
    shared drives, changes, apps, access proposals and account info.

    Use 'serve' for the multi-tenant HTTP transport (credentials per request
    via the X-Google-Access-Token header) or 'mcp' for a single-tenant stdio
    server.
    """
    pass


@main.command()
@click.option("--host", envvar="GDRIVE_MCP_HOST", help="Bind address (default: 127.0.0.1)")
@click.option("--port", envvar="GDRIVE_MCP_PORT", type=int, help="Bind port (default: 8787)")
@click.option("--log-level", envvar="GDRIVE_MCP_LOG_LEVEL", help="Logging level (default: INFO)")
def serve(host: str | None, port: int | None, log_level: str | None) -> None:
    """Start the multi-tenant streamable HTTP server.

    Each POST /mcp request must carry the tenant's OAuth token in the
    X-Google-Access-Token header.
    """
    import uvicorn

    from gdrive_mcp.server import create_app

    settings = _load_settings(host=host, port=port, log_level=log_level)
    click.echo(f"Starting gdrive-mcp on http://{settings.host}:{settings.port}", err=True)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


@main.command()
@access_token_option
@base_url_option
def mcp(access_token: str | None, base_url: str | None) -> None:
    """Start the single-tenant MCP server over stdio.

    This command is typically invoked by an MCP client such as Claude
    Desktop. The access token is read from --access-token or
    GOOGLE_DRIVE_ACCESS_TOKEN.
    """
    from gdrive_mcp.server import GoogleDriveServer

    settings = _load_settings(access_token=access_token, base_url=base_url)
    if not settings.access_token:
        click.echo(
            "❌ No access token. Set GOOGLE_DRIVE_ACCESS_TOKEN or pass --access-token.",
            err=True,
        )
        sys.exit(1)

    try:
        click.echo("Starting Google Drive MCP server...", err=True)
        asyncio.run(GoogleDriveServer(settings).run())
    except KeyboardInterrupt:
        click.echo("\nServer stopped.", err=True)
    except Exception as e:
        click.echo(f"❌ Server error: {e}", err=True)
        sys.exit(1)


@main.command()
@access_token_option
@base_url_option
def doctor(access_token: str | None, base_url: str | None) -> None:
    """Check configuration and connectivity to the Drive API."""
    from gdrive_mcp.client import DriveClient

    settings = _load_settings(access_token=access_token, base_url=base_url)

    click.echo("Google Drive MCP Status:")
    click.echo("")
    click.echo("Configuration:")
    click.echo(f"  HTTP bind: {settings.host}:{settings.port}")
    click.echo(f"  Request timeout: {settings.request_timeout}s")
    if settings.base_url:
        click.echo(f"  API base URL: {settings.base_url}")
    click.echo("")

    if not settings.access_token:
        click.echo("Connection:")
        click.echo("  ❌ No access token configured")
        click.echo("")
        click.echo("Set GOOGLE_DRIVE_ACCESS_TOKEN or pass --access-token.")
        sys.exit(1)

    async def check() -> dict:
        async with DriveClient(
            settings.default_credentials(), timeout=settings.request_timeout
        ) as client:
            return await client.test_connection()

    result = asyncio.run(check())

    click.echo("Connection:")
    if not result["connected"]:
        click.echo(f"  ❌ {result['message']}")
        sys.exit(1)

    click.echo(f"  ✓ {result['message']}")
    click.echo("")
    click.echo("✓ Ready to use!")


@main.command()
def tools() -> None:
    """List the available MCP tools."""
    from gdrive_mcp.server import TOOLS

    for tool in TOOLS:
        click.echo(f"{tool.name}: {tool.description}")
    click.echo("")
    click.echo(f"{len(TOOLS)} tools")


if __name__ == "__main__":
    main()
