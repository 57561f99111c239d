"""Google Drive MCP server.

Exposes the Drive REST API v3 as MCP tools. The server holds no
credentials of its own: each tool call resolves the caller's
``TenantCredentials`` (from the inbound HTTP request headers, or from
settings when running over stdio), builds a fresh ``DriveClient`` around
the shared connection pool and performs exactly one logical operation.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, TextContent, Tool

from gdrive_mcp.__version__ import __version__
from gdrive_mcp.auth import TenantCredentials, parse_tenant_credentials
from gdrive_mcp.client import DriveClient, watch_channel
from gdrive_mcp.config import ServerSettings
from gdrive_mcp.errors import ApiError
from gdrive_mcp.formatters import format_bytes, format_error, format_response
from gdrive_mcp.server.tool_definitions import DEFAULT_PAGE_SIZE, TOOL_PREFIX, TOOLS

logger = logging.getLogger(__name__)

SERVER_NAME = "gdrive-mcp"

ToolHandler = Callable[[DriveClient, dict[str, Any]], Awaitable[str | dict[str, Any]]]


def _page_size(arguments: dict[str, Any]) -> int:
    return arguments.get("pageSize", DEFAULT_PAGE_SIZE)


def _response_format(arguments: dict[str, Any]) -> str:
    return arguments.get("responseFormat", "json")


def _quota_bytes(value: str | None) -> str:
    if not value:
        return "Unknown"
    return format_bytes(int(value))


class GoogleDriveServer:
    """MCP server for the Google Drive API.

    Attributes:
        server: MCP Server instance.
        settings: Runtime settings (timeouts, stdio credentials).
    """

    def __init__(self, settings: ServerSettings | None = None) -> None:
        """Initialize the Google Drive MCP server.

        Args:
            settings: Server settings; loaded from the environment when omitted.
        """
        self.settings = settings or ServerSettings.from_env()
        self.server = Server(SERVER_NAME, version=__version__)
        self._http_client: httpx.AsyncClient | None = None
        self._handlers = self._build_handlers()
        self._setup_handlers()

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create shared HTTP client with connection pooling.

        Returns:
            Shared httpx.AsyncClient instance.
        """
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                http2=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                timeout=httpx.Timeout(
                    self.settings.request_timeout, connect=self.settings.connect_timeout
                ),
            )
        return self._http_client

    async def close(self) -> None:
        """Close the shared HTTP client and release resources."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    def _setup_handlers(self) -> None:
        """Register MCP tool handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """Return list of available tools."""
            return TOOLS

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
            """Handle tool calls."""
            return await self.handle_tool_call(name, arguments)

    def _resolve_credentials(self) -> TenantCredentials:
        """Credentials for the tool call currently being handled.

        Over streamable HTTP the request context carries the Starlette
        request; over stdio (or outside any request) there is none and the
        settings' default credentials apply.
        """
        try:
            request = self.server.request_context.request
        except LookupError:
            request = None

        headers = getattr(request, "headers", None)
        if headers is not None:
            return parse_tenant_credentials(headers)
        return self.settings.default_credentials()

    async def handle_tool_call(
        self,
        name: str,
        arguments: dict[str, Any] | None,
        credentials: TenantCredentials | None = None,
    ) -> CallToolResult:
        """Run one tool and wrap its outcome as an MCP result.

        Args:
            name: Tool name, with or without the ``googledrive_`` prefix.
            arguments: Tool arguments.
            credentials: Explicit credentials; resolved from the request
                context when omitted.

        Returns:
            CallToolResult with the rendered payload, or ``isError=True`` and
            a structured error payload. Never raises.
        """
        try:
            credentials = credentials or self._resolve_credentials()
            client = DriveClient(credentials, http_client=await self._get_http_client())
            result = await self._dispatch_tool(client, name, arguments or {})
        except ApiError as e:
            logger.warning(f"Tool {name} failed: [{e.code}] {e.message}")
            return self._error_result(e)
        except Exception as e:
            logger.exception(f"Error calling tool {name}")
            return self._error_result(e)

        text = result if isinstance(result, str) else json.dumps(result, indent=2)
        return CallToolResult(content=[TextContent(type="text", text=text)])

    @staticmethod
    def _error_result(error: BaseException) -> CallToolResult:
        return CallToolResult(
            content=[TextContent(type="text", text=json.dumps(format_error(error), indent=2))],
            isError=True,
        )

    def _build_handlers(self) -> dict[str, ToolHandler]:
        return {
            # About
            "get_about": self._get_about,
            "get_storage_quota": self._get_storage_quota,
            "get_user_info": self._get_user_info,
            "get_export_formats": self._get_export_formats,
            "get_import_formats": self._get_import_formats,
            "test_connection": self._test_connection,
            # Files
            "list_files": self._list_files,
            "get_file": self._get_file,
            "create_file": self._create_file,
            "update_file": self._update_file,
            "copy_file": self._copy_file,
            "delete_file": self._delete_file,
            "empty_trash": self._empty_trash,
            "export_file": self._export_file,
            "download_file": self._download_file,
            "generate_ids": self._generate_ids,
            "search_files": self._search_files,
            "list_labels": self._list_labels,
            "modify_labels": self._modify_labels,
            # Folders
            "create_folder": self._create_folder,
            "list_folder": self._list_folder,
            "move_file": self._move_file,
            # Permissions
            "list_permissions": self._list_permissions,
            "get_permission": self._get_permission,
            "share_with_user": self._share_with_user,
            "share_with_group": self._share_with_group,
            "share_with_domain": self._share_with_domain,
            "make_public": self._make_public,
            "update_permission": self._update_permission,
            "remove_permission": self._remove_permission,
            # Comments
            "list_comments": self._list_comments,
            "get_comment": self._get_comment,
            "create_comment": self._create_comment,
            "update_comment": self._update_comment,
            "delete_comment": self._delete_comment,
            "resolve_comment": self._resolve_comment,
            "reopen_comment": self._reopen_comment,
            # Replies
            "list_replies": self._list_replies,
            "get_reply": self._get_reply,
            "create_reply": self._create_reply,
            "update_reply": self._update_reply,
            "delete_reply": self._delete_reply,
            # Revisions
            "list_revisions": self._list_revisions,
            "get_revision": self._get_revision,
            "update_revision": self._update_revision,
            "delete_revision": self._delete_revision,
            "keep_revision": self._keep_revision,
            # Shared drives
            "list_drives": self._list_drives,
            "get_drive": self._get_drive,
            "create_drive": self._create_drive,
            "update_drive": self._update_drive,
            "delete_drive": self._delete_drive,
            "hide_drive": self._hide_drive,
            "unhide_drive": self._unhide_drive,
            "update_drive_restrictions": self._update_drive_restrictions,
            # Changes and channels
            "get_changes_start_token": self._get_changes_start_token,
            "list_changes": self._list_changes,
            "watch_changes": self._watch_changes,
            "watch_file": self._watch_file,
            "stop_channel": self._stop_channel,
            # Apps
            "list_apps": self._list_apps,
            "get_app": self._get_app,
            # Access proposals
            "list_access_proposals": self._list_access_proposals,
            "get_access_proposal": self._get_access_proposal,
            "accept_access_proposal": self._accept_access_proposal,
            "deny_access_proposal": self._deny_access_proposal,
            # Operations
            "get_operation": self._get_operation,
        }

    async def _dispatch_tool(
        self, client: DriveClient, name: str, arguments: dict[str, Any]
    ) -> str | dict[str, Any]:
        """Dispatch tool call to appropriate handler.

        Args:
            client: Drive client bound to the caller's credentials.
            name: Tool name.
            arguments: Tool arguments.

        Returns:
            Rendered text, or a dict to be serialized as JSON.

        Raises:
            ValueError: If tool name is not recognized.
        """
        handler = self._handlers.get(name.removeprefix(TOOL_PREFIX))
        if handler is None:
            raise ValueError(f"Unknown tool: {name}")

        return await handler(client, arguments)

    # =========================================================================
    # About
    # =========================================================================

    async def _get_about(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        about = await client.get_about(arguments.get("fields") or "*")
        return format_response(about, "json", "about")

    async def _get_storage_quota(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        """Storage quota with human-readable sizes.

        ``limit`` is absent for unlimited accounts, in which case the
        percentage is reported as unknown.
        """
        about = await client.get_about("storageQuota")
        quota = about.get("storageQuota") or {}

        limit = quota.get("limit")
        usage = quota.get("usage")
        if limit and usage and int(limit) > 0:
            percent_used = f"{int(usage) / int(limit) * 100:.2f}%"
        else:
            percent_used = "Unknown"

        return {
            "storageQuota": {
                "limit": _quota_bytes(limit),
                "usage": _quota_bytes(usage),
                "usageInDrive": _quota_bytes(quota.get("usageInDrive")),
                "usageInDriveTrash": _quota_bytes(quota.get("usageInDriveTrash")),
                "percentUsed": percent_used,
            },
            "raw": quota,
        }

    async def _get_user_info(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        about = await client.get_about("user")
        return format_response(about.get("user") or {}, "json", "user")

    async def _get_export_formats(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        about = await client.get_about("exportFormats")
        return {
            "exportFormats": about.get("exportFormats") or {},
            "description": "Map of Google Workspace MIME types to available export formats",
        }

    async def _get_import_formats(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        about = await client.get_about("importFormats")
        return {
            "importFormats": about.get("importFormats") or {},
            "description": "Map of MIME types to Google Workspace formats they can be converted to",
        }

    async def _test_connection(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        return await client.test_connection()

    # =========================================================================
    # Files
    # =========================================================================

    async def _list_files(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        include_shared = arguments.get("includeSharedDrives", True)
        page = await client.list_files(
            q=arguments.get("query"),
            page_size=_page_size(arguments),
            page_token=arguments.get("pageToken"),
            order_by=arguments.get("orderBy"),
            spaces=arguments.get("spaces"),
            include_items_from_all_drives=include_shared,
            supports_all_drives=include_shared,
        )
        return format_response(page.to_dict(), _response_format(arguments), "files")

    async def _get_file(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        file = await client.get_file(arguments["fileId"], arguments.get("fields"))
        return format_response(file, _response_format(arguments), "files")

    async def _create_file(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        """Create a file, uploading ``content`` inline when given."""
        parent_id = arguments.get("parentId")
        file = await client.create_file(
            name=arguments["name"],
            mime_type=arguments.get("mimeType"),
            parents=[parent_id] if parent_id else None,
            description=arguments.get("description"),
            content=arguments.get("content"),
        )
        return {"success": True, "message": "File created", "file": file}

    async def _update_file(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        file = await client.update_file(
            arguments["fileId"],
            name=arguments.get("name"),
            description=arguments.get("description"),
            content=arguments.get("content"),
            add_parents=arguments.get("addParents"),
            remove_parents=arguments.get("removeParents"),
            starred=arguments.get("starred"),
            trashed=arguments.get("trashed"),
        )
        return {"success": True, "message": "File updated", "file": file}

    async def _copy_file(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        parent_id = arguments.get("parentId")
        file = await client.copy_file(
            arguments["fileId"],
            name=arguments.get("name"),
            parents=[parent_id] if parent_id else None,
            description=arguments.get("description"),
        )
        return {"success": True, "message": "File copied", "file": file}

    async def _delete_file(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        file_id = arguments["fileId"]
        await client.delete_file(file_id)
        return {"success": True, "message": f"File {file_id} deleted"}

    async def _empty_trash(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        await client.empty_trash()
        return {"success": True, "message": "Trash emptied"}

    async def _export_file(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        return await client.export_file(arguments["fileId"], arguments["mimeType"])

    async def _download_file(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        return await client.download_file(arguments["fileId"])

    async def _generate_ids(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        ids = await client.generate_ids(arguments.get("count", 10), arguments.get("space", "drive"))
        return {"ids": ids}

    async def _search_files(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        page = await client.list_files(
            q=arguments["query"],
            page_size=_page_size(arguments),
            page_token=arguments.get("pageToken"),
            include_items_from_all_drives=True,
            supports_all_drives=True,
        )
        return format_response(page.to_dict(), _response_format(arguments), "files")

    async def _list_labels(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        labels = await client.list_labels(arguments["fileId"])
        return format_response(labels, _response_format(arguments), "labels")

    async def _modify_labels(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        result = await client.modify_labels(arguments["fileId"], arguments["labelModifications"])
        return {"success": True, "message": "Labels modified", "result": result}

    # =========================================================================
    # Folders
    # =========================================================================

    async def _create_folder(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        parent_id = arguments.get("parentId")
        folder = await client.create_folder(
            arguments["name"], parents=[parent_id] if parent_id else None
        )
        return {"success": True, "message": "Folder created", "folder": folder}

    async def _list_folder(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        page = await client.list_folder_contents(
            arguments["folderId"],
            page_size=_page_size(arguments),
            page_token=arguments.get("pageToken"),
            order_by=arguments.get("orderBy"),
        )
        return format_response(page.to_dict(), _response_format(arguments), "files")

    async def _move_file(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        """Move a file by reading its current parents, then re-parenting it."""
        file_id = arguments["fileId"]
        remove_parents = None
        if arguments.get("removeFromCurrentParent", True):
            current = await client.get_file(file_id)
            remove_parents = ",".join(current.get("parents") or [])

        file = await client.update_file(
            file_id,
            add_parents=arguments["newParentId"],
            remove_parents=remove_parents,
        )
        return {"success": True, "message": "File moved", "file": file}

    # =========================================================================
    # Permissions
    # =========================================================================

    async def _list_permissions(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        page = await client.list_permissions(
            arguments["fileId"],
            page_size=_page_size(arguments),
            page_token=arguments.get("pageToken"),
        )
        return format_response(page.to_dict(), _response_format(arguments), "permissions")

    async def _get_permission(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        permission = await client.get_permission(arguments["fileId"], arguments["permissionId"])
        return format_response(permission, _response_format(arguments), "permissions")

    async def _share_with_user(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        email = arguments["email"]
        permission = await client.create_permission(
            arguments["fileId"],
            role=arguments["role"],
            type="user",
            email_address=email,
            send_notification_email=arguments.get("sendNotification", True),
            email_message=arguments.get("emailMessage"),
            transfer_ownership=bool(arguments.get("transferOwnership")),
        )
        return {"success": True, "message": f"Shared with {email}", "permission": permission}

    async def _share_with_group(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        email = arguments["email"]
        permission = await client.create_permission(
            arguments["fileId"],
            role=arguments["role"],
            type="group",
            email_address=email,
            send_notification_email=arguments.get("sendNotification", True),
        )
        return {"success": True, "message": f"Shared with group {email}", "permission": permission}

    async def _share_with_domain(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        domain = arguments["domain"]
        permission = await client.create_permission(
            arguments["fileId"],
            role=arguments["role"],
            type="domain",
            domain=domain,
            allow_file_discovery=arguments.get("allowFileDiscovery", False),
        )
        return {"success": True, "message": f"Shared with domain {domain}", "permission": permission}

    async def _make_public(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        permission = await client.create_permission(
            arguments["fileId"],
            role=arguments.get("role", "reader"),
            type="anyone",
            allow_file_discovery=arguments.get("allowFileDiscovery", False),
        )
        return {
            "success": True,
            "message": "File is now publicly accessible",
            "permission": permission,
        }

    async def _update_permission(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        permission = await client.update_permission(
            arguments["fileId"],
            arguments["permissionId"],
            role=arguments["role"],
            expiration_time=arguments.get("expirationTime"),
        )
        return {"success": True, "message": "Permission updated", "permission": permission}

    async def _remove_permission(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        await client.delete_permission(arguments["fileId"], arguments["permissionId"])
        return {"success": True, "message": "Permission removed"}

    # =========================================================================
    # Comments
    # =========================================================================

    async def _list_comments(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        page = await client.list_comments(
            arguments["fileId"],
            page_size=_page_size(arguments),
            page_token=arguments.get("pageToken"),
            include_deleted=arguments.get("includeDeleted", False),
            start_modified_time=arguments.get("startModifiedTime"),
        )
        return format_response(page.to_dict(), _response_format(arguments), "comments")

    async def _get_comment(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        comment = await client.get_comment(
            arguments["fileId"],
            arguments["commentId"],
            include_deleted=arguments.get("includeDeleted", False),
        )
        return format_response(comment, _response_format(arguments), "comments")

    async def _create_comment(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        comment = await client.create_comment(
            arguments["fileId"], arguments["content"], anchor=arguments.get("anchor")
        )
        return {"success": True, "message": "Comment created", "comment": comment}

    async def _update_comment(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        comment = await client.update_comment(
            arguments["fileId"], arguments["commentId"], arguments["content"]
        )
        return {"success": True, "message": "Comment updated", "comment": comment}

    async def _delete_comment(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        await client.delete_comment(arguments["fileId"], arguments["commentId"])
        return {"success": True, "message": "Comment deleted"}

    async def _resolve_comment(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        reply = await client.create_reply(
            arguments["fileId"],
            arguments["commentId"],
            arguments.get("content") or "Resolved",
            action="resolve",
        )
        return {"success": True, "message": "Comment resolved", "reply": reply}

    async def _reopen_comment(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        reply = await client.create_reply(
            arguments["fileId"],
            arguments["commentId"],
            arguments.get("content") or "Reopened",
            action="reopen",
        )
        return {"success": True, "message": "Comment reopened", "reply": reply}

    # =========================================================================
    # Replies
    # =========================================================================

    async def _list_replies(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        page = await client.list_replies(
            arguments["fileId"],
            arguments["commentId"],
            page_size=_page_size(arguments),
            page_token=arguments.get("pageToken"),
            include_deleted=arguments.get("includeDeleted", False),
        )
        return format_response(page.to_dict(), _response_format(arguments), "replies")

    async def _get_reply(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        reply = await client.get_reply(
            arguments["fileId"],
            arguments["commentId"],
            arguments["replyId"],
            include_deleted=arguments.get("includeDeleted", False),
        )
        return format_response(reply, _response_format(arguments), "replies")

    async def _create_reply(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        reply = await client.create_reply(
            arguments["fileId"],
            arguments["commentId"],
            arguments["content"],
            action=arguments.get("action"),
        )
        return {"success": True, "message": "Reply created", "reply": reply}

    async def _update_reply(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        reply = await client.update_reply(
            arguments["fileId"], arguments["commentId"], arguments["replyId"], arguments["content"]
        )
        return {"success": True, "message": "Reply updated", "reply": reply}

    async def _delete_reply(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        await client.delete_reply(arguments["fileId"], arguments["commentId"], arguments["replyId"])
        return {"success": True, "message": "Reply deleted"}

    # =========================================================================
    # Revisions
    # =========================================================================

    async def _list_revisions(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        page = await client.list_revisions(
            arguments["fileId"],
            page_size=_page_size(arguments),
            page_token=arguments.get("pageToken"),
        )
        return format_response(page.to_dict(), _response_format(arguments), "revisions")

    async def _get_revision(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        revision = await client.get_revision(arguments["fileId"], arguments["revisionId"])
        return format_response(revision, _response_format(arguments), "revisions")

    async def _update_revision(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        revision = await client.update_revision(
            arguments["fileId"],
            arguments["revisionId"],
            keep_forever=arguments.get("keepForever"),
            publish_auto=arguments.get("publishAuto"),
            published=arguments.get("published"),
            published_outside_domain=arguments.get("publishedOutsideDomain"),
        )
        return {"success": True, "message": "Revision updated", "revision": revision}

    async def _delete_revision(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        await client.delete_revision(arguments["fileId"], arguments["revisionId"])
        return {"success": True, "message": "Revision deleted"}

    async def _keep_revision(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        revision = await client.update_revision(
            arguments["fileId"], arguments["revisionId"], keep_forever=True
        )
        return {"success": True, "message": "Revision marked to keep forever", "revision": revision}

    # =========================================================================
    # Shared drives
    # =========================================================================

    async def _list_drives(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        page = await client.list_drives(
            page_size=_page_size(arguments),
            page_token=arguments.get("pageToken"),
            q=arguments.get("query"),
        )
        return format_response(page.to_dict(), _response_format(arguments), "drives")

    async def _get_drive(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        drive = await client.get_drive(arguments["driveId"])
        return format_response(drive, _response_format(arguments), "drives")

    async def _create_drive(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        drive = await client.create_drive(
            arguments["requestId"], arguments["name"], theme_id=arguments.get("themeId")
        )
        return {"success": True, "message": "Shared drive created", "drive": drive}

    async def _update_drive(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        drive = await client.update_drive(
            arguments["driveId"],
            name=arguments.get("name"),
            color_rgb=arguments.get("colorRgb"),
            theme_id=arguments.get("themeId"),
        )
        return {"success": True, "message": "Shared drive updated", "drive": drive}

    async def _delete_drive(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        await client.delete_drive(arguments["driveId"])
        return {"success": True, "message": "Shared drive deleted"}

    async def _hide_drive(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        drive = await client.hide_drive(arguments["driveId"])
        return {"success": True, "message": "Shared drive hidden", "drive": drive}

    async def _unhide_drive(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        drive = await client.unhide_drive(arguments["driveId"])
        return {"success": True, "message": "Shared drive unhidden", "drive": drive}

    async def _update_drive_restrictions(
        self, client: DriveClient, arguments: dict[str, Any]
    ) -> dict[str, Any]:
        restrictions = {
            key: arguments.get(key)
            for key in (
                "adminManagedRestrictions",
                "copyRequiresWriterPermission",
                "domainUsersOnly",
                "driveMembersOnly",
                "sharingFoldersRequiresOrganizerPermission",
            )
        }
        drive = await client.update_drive(arguments["driveId"], restrictions=restrictions)
        return {"success": True, "message": "Drive restrictions updated", "drive": drive}

    # =========================================================================
    # Changes and channels
    # =========================================================================

    async def _get_changes_start_token(
        self, client: DriveClient, arguments: dict[str, Any]
    ) -> dict[str, Any]:
        token = await client.get_start_page_token(
            drive_id=arguments.get("driveId"), supports_all_drives=True
        )
        return {
            "startPageToken": token,
            "message": "Use this token with googledrive_list_changes to track future changes",
        }

    async def _list_changes(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        """Poll the change feed once.

        The message tells the caller whether to keep paging now or to
        store ``newStartPageToken`` for the next polling cycle.
        """
        changes = await client.list_changes(
            arguments["pageToken"],
            drive_id=arguments.get("driveId"),
            page_size=_page_size(arguments),
            include_items_from_all_drives=True,
            supports_all_drives=True,
            include_removed=arguments.get("includeRemoved", True),
            restrict_to_my_drive=arguments.get("restrictToMyDrive", False),
        )
        if changes.has_more:
            message = "More changes available. Use nextPageToken to continue."
        else:
            message = "No more changes. Save newStartPageToken for future polling."
        return {**changes.to_dict(), "hasMore": changes.has_more, "message": message}

    async def _watch_changes(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        channel = await client.watch_changes(
            arguments["pageToken"],
            watch_channel(
                arguments["channelId"],
                arguments["webhookUrl"],
                token=arguments.get("token"),
                expiration=arguments.get("expirationTime"),
            ),
            drive_id=arguments.get("driveId"),
            include_items_from_all_drives=True,
            supports_all_drives=True,
        )
        return {"success": True, "message": "Watch channel created", "channel": channel}

    async def _watch_file(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        channel = await client.watch_file(
            arguments["fileId"],
            watch_channel(
                arguments["channelId"],
                arguments["webhookUrl"],
                token=arguments.get("token"),
                expiration=arguments.get("expirationTime"),
            ),
        )
        return {"success": True, "message": "File watch channel created", "channel": channel}

    async def _stop_channel(self, client: DriveClient, arguments: dict[str, Any]) -> dict[str, Any]:
        await client.stop_channel(arguments["channelId"], arguments["resourceId"])
        return {"success": True, "message": "Watch channel stopped"}

    # =========================================================================
    # Apps
    # =========================================================================

    async def _list_apps(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        apps = await client.list_apps(
            app_filter_extensions=arguments.get("appFilterExtensions"),
            app_filter_mime_types=arguments.get("appFilterMimeTypes"),
            language_code=arguments.get("languageCode"),
        )
        return format_response({"items": apps, "hasMore": False}, _response_format(arguments), "apps")

    async def _get_app(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        app = await client.get_app(arguments["appId"])
        return format_response(app, _response_format(arguments), "apps")

    # =========================================================================
    # Access proposals
    # =========================================================================

    async def _list_access_proposals(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        page = await client.list_access_proposals(
            arguments["fileId"],
            page_size=_page_size(arguments),
            page_token=arguments.get("pageToken"),
        )
        return format_response(page.to_dict(), _response_format(arguments), "accessProposals")

    async def _get_access_proposal(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        proposal = await client.get_access_proposal(arguments["fileId"], arguments["proposalId"])
        return format_response(proposal, _response_format(arguments), "accessProposals")

    async def _accept_access_proposal(
        self, client: DriveClient, arguments: dict[str, Any]
    ) -> dict[str, Any]:
        await client.resolve_access_proposal(
            arguments["fileId"],
            arguments["proposalId"],
            "accept",
            role=arguments.get("role"),
            send_notification=arguments.get("sendNotification", True),
        )
        return {"success": True, "message": "Access proposal accepted"}

    async def _deny_access_proposal(
        self, client: DriveClient, arguments: dict[str, Any]
    ) -> dict[str, Any]:
        await client.resolve_access_proposal(
            arguments["fileId"],
            arguments["proposalId"],
            "deny",
            send_notification=arguments.get("sendNotification", True),
        )
        return {"success": True, "message": "Access proposal denied"}

    # =========================================================================
    # Operations
    # =========================================================================

    async def _get_operation(self, client: DriveClient, arguments: dict[str, Any]) -> str:
        operation = await client.get_operation(arguments["name"])
        return format_response(operation, "json", "operation")

    async def run(self) -> None:
        """Run the MCP server using stdio transport."""
        logger.info(f"Starting {SERVER_NAME} {__version__} on stdio")
        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            await self.close()


def main() -> None:
    """Entry point for the Google Drive MCP server over stdio."""
    settings = ServerSettings.from_env()
    logging.basicConfig(level=settings.log_level)
    server = GoogleDriveServer(settings)
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
