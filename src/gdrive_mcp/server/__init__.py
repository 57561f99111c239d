"""MCP server package for Google Drive."""

from gdrive_mcp.server.google_drive_server import GoogleDriveServer, main
from gdrive_mcp.server.http_app import create_app
from gdrive_mcp.server.tool_definitions import TOOL_NAMES, TOOLS

__all__ = ["GoogleDriveServer", "TOOL_NAMES", "TOOLS", "create_app", "main"]
