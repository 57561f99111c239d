"""Google Drive MCP Server.

Multi-tenant MCP server exposing the Google Drive REST API v3 as tools.
"""

from gdrive_mcp.__version__ import __version__

__all__ = ["__version__"]
