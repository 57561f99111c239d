"""MCP tool schemas for every Google Drive tool.

Argument names follow the Drive API's camelCase vocabulary so that values
can be forwarded without renaming. Read tools accept ``responseFormat``
(``json`` or ``markdown``).
"""

from typing import Any

from mcp.types import Tool

TOOL_PREFIX = "googledrive_"

PERMISSION_ROLES = ["owner", "organizer", "fileOrganizer", "writer", "commenter", "reader"]
USER_ROLES = ["reader", "commenter", "writer", "owner"]
GROUP_ROLES = ["reader", "commenter", "writer", "organizer", "fileOrganizer"]
DOMAIN_ROLES = ["reader", "commenter", "writer"]

DEFAULT_PAGE_SIZE = 100


def _string(description: str, **extra: Any) -> dict[str, Any]:
    return {"type": "string", "description": description, **extra}


def _boolean(description: str, default: bool | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "boolean", "description": description}
    if default is not None:
        schema["default"] = default
    return schema


def _page_size(maximum: int) -> dict[str, Any]:
    return {
        "type": "integer",
        "description": "Number of results per page",
        "minimum": 1,
        "maximum": maximum,
        "default": DEFAULT_PAGE_SIZE,
    }


_FILE_ID = _string("File or folder ID")
_PAGE_TOKEN = _string("Pagination token from a previous call's nextPageToken")
_RESPONSE_FORMAT = {
    "type": "string",
    "enum": ["json", "markdown"],
    "default": "json",
    "description": "Output format: 'json' for structured data, 'markdown' for readable tables",
}
_COMMENT_ID = _string("Comment ID")
_REPLY_ID = _string("Reply ID")
_REVISION_ID = _string("Revision ID")
_DRIVE_ID = _string("Shared drive ID")
_PERMISSION_ID = _string("Permission ID")
_PROPOSAL_ID = _string("Access proposal ID")


def _tool(name: str, description: str, properties: dict[str, Any] | None = None, required: list[str] | None = None) -> Tool:
    return Tool(
        name=f"{TOOL_PREFIX}{name}",
        description=description,
        inputSchema={
            "type": "object",
            "properties": properties or {},
            "required": required or [],
        },
    )


ABOUT_TOOLS = [
    _tool(
        "get_about",
        "Get information about the current user and Drive settings "
        "(user, storageQuota, importFormats, exportFormats, maxUploadSize, driveThemes, canCreateDrives)",
        {"fields": _string("Fields to return (comma-separated, default: all)")},
    ),
    _tool(
        "get_storage_quota",
        "Get the current storage quota and usage in human-readable units, with percent used",
    ),
    _tool(
        "get_user_info",
        "Get the authenticated user's display name, email address, photo link and permission ID",
    ),
    _tool(
        "get_export_formats",
        "Get the export formats available for Google Workspace files (use with googledrive_export_file)",
    ),
    _tool(
        "get_import_formats",
        "Get the MIME types that can be converted to Google Workspace formats on upload",
    ),
    _tool(
        "test_connection",
        "Check that the supplied access token can reach the Drive API",
    ),
]

FILE_TOOLS = [
    _tool(
        "list_files",
        "List files in Google Drive. Supports Drive query syntax, e.g. "
        "\"name contains 'report'\" or \"mimeType = 'application/pdf'\"",
        {
            "query": _string("Search query in Google Drive query format"),
            "pageSize": _page_size(1000),
            "pageToken": _PAGE_TOKEN,
            "orderBy": _string("Sort order (e.g., 'modifiedTime desc')"),
            "spaces": _string("Spaces to query (drive, appDataFolder)"),
            "includeSharedDrives": _boolean("Include shared drive items", default=True),
            "responseFormat": _RESPONSE_FORMAT,
        },
    ),
    _tool(
        "get_file",
        "Get metadata for a file or folder",
        {
            "fileId": _FILE_ID,
            "fields": _string("Fields to return (default: common file fields)"),
            "responseFormat": _RESPONSE_FORMAT,
        },
        ["fileId"],
    ),
    _tool(
        "create_file",
        "Create a file. Provide text content to upload it together with the metadata",
        {
            "name": _string("File name"),
            "mimeType": _string("MIME type (e.g., 'text/plain', 'application/vnd.google-apps.document')"),
            "parentId": _string("Parent folder ID (default: root)"),
            "description": _string("File description"),
            "content": _string("File content (text)"),
        },
        ["name"],
    ),
    _tool(
        "update_file",
        "Update a file's metadata and optionally replace its content",
        {
            "fileId": _FILE_ID,
            "name": _string("New name"),
            "description": _string("New description"),
            "content": _string("New content (text)"),
            "addParents": _string("Comma-separated parent IDs to add"),
            "removeParents": _string("Comma-separated parent IDs to remove"),
            "starred": _boolean("Starred status"),
            "trashed": _boolean("Move to (true) or restore from (false) trash"),
        },
        ["fileId"],
    ),
    _tool(
        "copy_file",
        "Create a copy of a file",
        {
            "fileId": _string("File ID to copy"),
            "name": _string("Name for the copy"),
            "parentId": _string("Parent folder ID for the copy"),
            "description": _string("Description for the copy"),
        },
        ["fileId"],
    ),
    _tool(
        "delete_file",
        "Permanently delete a file, skipping the trash. Use googledrive_update_file with trashed=true to trash instead",
        {"fileId": _string("File ID to delete")},
        ["fileId"],
    ),
    _tool(
        "empty_trash",
        "Permanently delete all files in the user's trash",
    ),
    _tool(
        "export_file",
        "Export a Google Workspace document to another format (e.g., text/plain, text/csv, application/pdf)",
        {
            "fileId": _string("File ID to export"),
            "mimeType": _string("Target MIME type"),
        },
        ["fileId", "mimeType"],
    ),
    _tool(
        "download_file",
        "Download the content of a binary (non-Workspace) file as text",
        {"fileId": _string("File ID to download")},
        ["fileId"],
    ),
    _tool(
        "generate_ids",
        "Generate file IDs for use in create or copy requests",
        {
            "count": {
                "type": "integer",
                "description": "Number of IDs",
                "minimum": 1,
                "maximum": 1000,
                "default": 10,
            },
            "space": _string("Space the IDs are for", enum=["drive", "appDataFolder"], default="drive"),
        },
    ),
    _tool(
        "search_files",
        "Search files across My Drive and shared drives using Drive query syntax "
        "(e.g., \"fullText contains 'budget'\", \"modifiedTime > '2024-01-01'\")",
        {
            "query": _string("Search query"),
            "pageSize": _page_size(1000),
            "pageToken": _PAGE_TOKEN,
            "responseFormat": _RESPONSE_FORMAT,
        },
        ["query"],
    ),
    _tool(
        "list_labels",
        "List the labels applied to a file",
        {"fileId": _FILE_ID, "responseFormat": _RESPONSE_FORMAT},
        ["fileId"],
    ),
    _tool(
        "modify_labels",
        "Apply, update or remove labels on a file",
        {
            "fileId": _FILE_ID,
            "labelModifications": {
                "type": "array",
                "items": {"type": "object"},
                "description": "Label modifications as defined by the Drive API (labelId, fieldModifications, removeLabel)",
            },
        },
        ["fileId", "labelModifications"],
    ),
]

FOLDER_TOOLS = [
    _tool(
        "create_folder",
        "Create a folder",
        {
            "name": _string("Folder name"),
            "parentId": _string("Parent folder ID (default: root)"),
        },
        ["name"],
    ),
    _tool(
        "list_folder",
        "List the non-trashed contents of a folder",
        {
            "folderId": _string("Folder ID (use 'root' for the root folder)"),
            "pageSize": _page_size(1000),
            "pageToken": _PAGE_TOKEN,
            "orderBy": _string("Sort order (e.g., 'folder,name')"),
            "responseFormat": _RESPONSE_FORMAT,
        },
        ["folderId"],
    ),
    _tool(
        "move_file",
        "Move a file or folder to another folder",
        {
            "fileId": _string("File ID to move"),
            "newParentId": _string("Destination folder ID"),
            "removeFromCurrentParent": _boolean("Remove from current parents", default=True),
        },
        ["fileId", "newParentId"],
    ),
]

PERMISSION_TOOLS = [
    _tool(
        "list_permissions",
        "List who has access to a file or folder",
        {
            "fileId": _FILE_ID,
            "pageSize": _page_size(100),
            "pageToken": _PAGE_TOKEN,
            "responseFormat": _RESPONSE_FORMAT,
        },
        ["fileId"],
    ),
    _tool(
        "get_permission",
        "Get a single permission",
        {"fileId": _FILE_ID, "permissionId": _PERMISSION_ID, "responseFormat": _RESPONSE_FORMAT},
        ["fileId", "permissionId"],
    ),
    _tool(
        "share_with_user",
        "Share a file or folder with a user by email",
        {
            "fileId": _FILE_ID,
            "email": _string("User email address", format="email"),
            "role": _string("Permission role", enum=USER_ROLES),
            "sendNotification": _boolean("Send notification email", default=True),
            "emailMessage": _string("Custom message for the notification email"),
            "transferOwnership": _boolean("Transfer ownership (required when role is owner)"),
        },
        ["fileId", "email", "role"],
    ),
    _tool(
        "share_with_group",
        "Share a file or folder with a Google Group",
        {
            "fileId": _FILE_ID,
            "email": _string("Group email address", format="email"),
            "role": _string("Permission role", enum=GROUP_ROLES),
            "sendNotification": _boolean("Send notification email", default=True),
        },
        ["fileId", "email", "role"],
    ),
    _tool(
        "share_with_domain",
        "Share a file or folder with everyone in a domain",
        {
            "fileId": _FILE_ID,
            "domain": _string("Domain name (e.g., 'example.com')"),
            "role": _string("Permission role", enum=DOMAIN_ROLES),
            "allowFileDiscovery": _boolean("Allow the file to be found through search", default=False),
        },
        ["fileId", "domain", "role"],
    ),
    _tool(
        "make_public",
        "Make a file or folder accessible to anyone with the link",
        {
            "fileId": _FILE_ID,
            "role": _string("Permission role", enum=DOMAIN_ROLES, default="reader"),
            "allowFileDiscovery": _boolean("Allow search engine indexing", default=False),
        },
        ["fileId"],
    ),
    _tool(
        "update_permission",
        "Change the role or expiration of an existing permission",
        {
            "fileId": _FILE_ID,
            "permissionId": _PERMISSION_ID,
            "role": _string("New permission role", enum=PERMISSION_ROLES),
            "expirationTime": _string("Expiration time (RFC 3339)"),
        },
        ["fileId", "permissionId", "role"],
    ),
    _tool(
        "remove_permission",
        "Revoke a permission",
        {"fileId": _FILE_ID, "permissionId": _PERMISSION_ID},
        ["fileId", "permissionId"],
    ),
]

COMMENT_TOOLS = [
    _tool(
        "list_comments",
        "List comments on a file",
        {
            "fileId": _FILE_ID,
            "pageSize": _page_size(100),
            "pageToken": _PAGE_TOKEN,
            "includeDeleted": _boolean("Include deleted comments", default=False),
            "startModifiedTime": _string("Only comments modified after this time (RFC 3339)"),
            "responseFormat": _RESPONSE_FORMAT,
        },
        ["fileId"],
    ),
    _tool(
        "get_comment",
        "Get a single comment",
        {
            "fileId": _FILE_ID,
            "commentId": _COMMENT_ID,
            "includeDeleted": _boolean("Return the comment even if deleted", default=False),
            "responseFormat": _RESPONSE_FORMAT,
        },
        ["fileId", "commentId"],
    ),
    _tool(
        "create_comment",
        "Add a comment to a file",
        {
            "fileId": _FILE_ID,
            "content": _string("Comment text"),
            "anchor": _string("Location anchor (JSON string)"),
        },
        ["fileId", "content"],
    ),
    _tool(
        "update_comment",
        "Edit a comment's text",
        {"fileId": _FILE_ID, "commentId": _COMMENT_ID, "content": _string("New comment text")},
        ["fileId", "commentId", "content"],
    ),
    _tool(
        "delete_comment",
        "Delete a comment",
        {"fileId": _FILE_ID, "commentId": _COMMENT_ID},
        ["fileId", "commentId"],
    ),
    _tool(
        "resolve_comment",
        "Resolve a comment by posting a reply with the resolve action",
        {
            "fileId": _FILE_ID,
            "commentId": _COMMENT_ID,
            "content": _string("Resolution message", default="Resolved"),
        },
        ["fileId", "commentId"],
    ),
    _tool(
        "reopen_comment",
        "Reopen a resolved comment by posting a reply with the reopen action",
        {
            "fileId": _FILE_ID,
            "commentId": _COMMENT_ID,
            "content": _string("Reopen message", default="Reopened"),
        },
        ["fileId", "commentId"],
    ),
]

REPLY_TOOLS = [
    _tool(
        "list_replies",
        "List replies to a comment",
        {
            "fileId": _FILE_ID,
            "commentId": _COMMENT_ID,
            "pageSize": _page_size(100),
            "pageToken": _PAGE_TOKEN,
            "includeDeleted": _boolean("Include deleted replies", default=False),
            "responseFormat": _RESPONSE_FORMAT,
        },
        ["fileId", "commentId"],
    ),
    _tool(
        "get_reply",
        "Get a single reply",
        {
            "fileId": _FILE_ID,
            "commentId": _COMMENT_ID,
            "replyId": _REPLY_ID,
            "includeDeleted": _boolean("Return the reply even if deleted", default=False),
            "responseFormat": _RESPONSE_FORMAT,
        },
        ["fileId", "commentId", "replyId"],
    ),
    _tool(
        "create_reply",
        "Reply to a comment, optionally resolving or reopening it",
        {
            "fileId": _FILE_ID,
            "commentId": _COMMENT_ID,
            "content": _string("Reply text"),
            "action": _string("Action to perform on the parent comment", enum=["resolve", "reopen"]),
        },
        ["fileId", "commentId", "content"],
    ),
    _tool(
        "update_reply",
        "Edit a reply's text",
        {
            "fileId": _FILE_ID,
            "commentId": _COMMENT_ID,
            "replyId": _REPLY_ID,
            "content": _string("New reply text"),
        },
        ["fileId", "commentId", "replyId", "content"],
    ),
    _tool(
        "delete_reply",
        "Delete a reply",
        {"fileId": _FILE_ID, "commentId": _COMMENT_ID, "replyId": _REPLY_ID},
        ["fileId", "commentId", "replyId"],
    ),
]

REVISION_TOOLS = [
    _tool(
        "list_revisions",
        "List a file's revisions",
        {
            "fileId": _FILE_ID,
            "pageSize": _page_size(1000),
            "pageToken": _PAGE_TOKEN,
            "responseFormat": _RESPONSE_FORMAT,
        },
        ["fileId"],
    ),
    _tool(
        "get_revision",
        "Get a single revision's metadata",
        {"fileId": _FILE_ID, "revisionId": _REVISION_ID, "responseFormat": _RESPONSE_FORMAT},
        ["fileId", "revisionId"],
    ),
    _tool(
        "update_revision",
        "Update a revision's retention and publishing settings",
        {
            "fileId": _FILE_ID,
            "revisionId": _REVISION_ID,
            "keepForever": _boolean("Keep this revision permanently"),
            "published": _boolean("Publish this revision (Workspace files only)"),
            "publishAuto": _boolean("Auto-publish subsequent revisions"),
            "publishedOutsideDomain": _boolean("Publish outside the domain"),
        },
        ["fileId", "revisionId"],
    ),
    _tool(
        "delete_revision",
        "Delete a revision of a binary file",
        {"fileId": _FILE_ID, "revisionId": _REVISION_ID},
        ["fileId", "revisionId"],
    ),
    _tool(
        "keep_revision",
        "Mark a revision to be kept forever",
        {"fileId": _FILE_ID, "revisionId": _REVISION_ID},
        ["fileId", "revisionId"],
    ),
]

DRIVE_TOOLS = [
    _tool(
        "list_drives",
        "List shared drives the user is a member of",
        {
            "pageSize": _page_size(100),
            "pageToken": _PAGE_TOKEN,
            "query": _string("Search query for shared drives"),
            "responseFormat": _RESPONSE_FORMAT,
        },
    ),
    _tool(
        "get_drive",
        "Get a shared drive's metadata",
        {"driveId": _DRIVE_ID, "responseFormat": _RESPONSE_FORMAT},
        ["driveId"],
    ),
    _tool(
        "create_drive",
        "Create a shared drive. requestId makes the call idempotent",
        {
            "name": _string("Shared drive name"),
            "requestId": _string("Unique request ID (e.g., a UUID)"),
            "themeId": _string("Theme ID"),
        },
        ["name", "requestId"],
    ),
    _tool(
        "update_drive",
        "Rename a shared drive or change its theme",
        {
            "driveId": _DRIVE_ID,
            "name": _string("New name"),
            "colorRgb": _string("Theme color (hex, e.g. '#4285f4')"),
            "themeId": _string("Theme ID"),
        },
        ["driveId"],
    ),
    _tool(
        "delete_drive",
        "Delete an empty shared drive",
        {"driveId": _DRIVE_ID},
        ["driveId"],
    ),
    _tool(
        "hide_drive",
        "Hide a shared drive from the default view",
        {"driveId": _DRIVE_ID},
        ["driveId"],
    ),
    _tool(
        "unhide_drive",
        "Restore a hidden shared drive to the default view",
        {"driveId": _DRIVE_ID},
        ["driveId"],
    ),
    _tool(
        "update_drive_restrictions",
        "Update a shared drive's sharing and copy restrictions",
        {
            "driveId": _DRIVE_ID,
            "adminManagedRestrictions": _boolean("Restrictions can only be changed by administrators"),
            "copyRequiresWriterPermission": _boolean("Copy, print and download require writer permission"),
            "domainUsersOnly": _boolean("Only users in the drive's domain can access"),
            "driveMembersOnly": _boolean("Only drive members can access"),
            "sharingFoldersRequiresOrganizerPermission": _boolean("Only organizers can share folders"),
        },
        ["driveId"],
    ),
]

CHANGE_TOOLS = [
    _tool(
        "get_changes_start_token",
        "Get the starting page token for tracking future changes",
        {"driveId": _string("Shared drive ID to track (optional)")},
    ),
    _tool(
        "list_changes",
        "List changes since a page token. Returns nextPageToken while more changes are "
        "available, and newStartPageToken once caught up",
        {
            "pageToken": _string("Page token from googledrive_get_changes_start_token or a previous call"),
            "pageSize": _page_size(1000),
            "driveId": _DRIVE_ID,
            "includeRemoved": _boolean("Include removed files", default=True),
            "restrictToMyDrive": _boolean("Only changes within My Drive", default=False),
        },
        ["pageToken"],
    ),
    _tool(
        "watch_changes",
        "Subscribe a webhook to change notifications",
        {
            "pageToken": _string("Starting page token"),
            "channelId": _string("Unique channel ID"),
            "webhookUrl": _string("HTTPS webhook URL", format="uri"),
            "token": _string("Verification token echoed in notifications"),
            "expirationTime": _string("Expiration time (Unix milliseconds)"),
            "driveId": _DRIVE_ID,
        },
        ["pageToken", "channelId", "webhookUrl"],
    ),
    _tool(
        "watch_file",
        "Subscribe a webhook to changes on a single file",
        {
            "fileId": _string("File ID to watch"),
            "channelId": _string("Unique channel ID"),
            "webhookUrl": _string("HTTPS webhook URL", format="uri"),
            "token": _string("Verification token echoed in notifications"),
            "expirationTime": _string("Expiration time (Unix milliseconds)"),
        },
        ["fileId", "channelId", "webhookUrl"],
    ),
    _tool(
        "stop_channel",
        "Stop a watch channel",
        {
            "channelId": _string("Channel ID"),
            "resourceId": _string("Resource ID returned when the channel was created"),
        },
        ["channelId", "resourceId"],
    ),
]

APP_TOOLS = [
    _tool(
        "list_apps",
        "List the user's installed Drive apps",
        {
            "appFilterExtensions": _string("Comma-separated file extensions to filter by"),
            "appFilterMimeTypes": _string("Comma-separated MIME types to filter by"),
            "languageCode": _string("Language code for localized names (BCP 47)"),
            "responseFormat": _RESPONSE_FORMAT,
        },
    ),
    _tool(
        "get_app",
        "Get an installed app's details",
        {"appId": _string("App ID"), "responseFormat": _RESPONSE_FORMAT},
        ["appId"],
    ),
]

ACCESS_PROPOSAL_TOOLS = [
    _tool(
        "list_access_proposals",
        "List pending requests for access to a file",
        {
            "fileId": _FILE_ID,
            "pageSize": _page_size(100),
            "pageToken": _PAGE_TOKEN,
            "responseFormat": _RESPONSE_FORMAT,
        },
        ["fileId"],
    ),
    _tool(
        "get_access_proposal",
        "Get a single access request",
        {"fileId": _FILE_ID, "proposalId": _PROPOSAL_ID, "responseFormat": _RESPONSE_FORMAT},
        ["fileId", "proposalId"],
    ),
    _tool(
        "accept_access_proposal",
        "Grant a pending access request",
        {
            "fileId": _FILE_ID,
            "proposalId": _PROPOSAL_ID,
            "role": _string("Role to grant", enum=GROUP_ROLES),
            "sendNotification": _boolean("Notify the requester", default=True),
        },
        ["fileId", "proposalId"],
    ),
    _tool(
        "deny_access_proposal",
        "Deny a pending access request",
        {
            "fileId": _FILE_ID,
            "proposalId": _PROPOSAL_ID,
            "sendNotification": _boolean("Notify the requester", default=True),
        },
        ["fileId", "proposalId"],
    ),
]

OPERATION_TOOLS = [
    _tool(
        "get_operation",
        "Get the status of a long-running operation",
        {"name": _string("Operation name")},
        ["name"],
    ),
]

TOOLS: list[Tool] = [
    *ABOUT_TOOLS,
    *FILE_TOOLS,
    *FOLDER_TOOLS,
    *PERMISSION_TOOLS,
    *COMMENT_TOOLS,
    *REPLY_TOOLS,
    *REVISION_TOOLS,
    *DRIVE_TOOLS,
    *CHANGE_TOOLS,
    *APP_TOOLS,
    *ACCESS_PROPOSAL_TOOLS,
    *OPERATION_TOOLS,
]

TOOL_NAMES = [tool.name for tool in TOOLS]
