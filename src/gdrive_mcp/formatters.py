"""Rendering of tool results as JSON or markdown, and of failures as error payloads."""

import json
import re
from datetime import datetime
from typing import Any, Literal

from gdrive_mcp.client.drive_client import FOLDER_MIME_TYPE
from gdrive_mcp.errors import ApiError, format_error_for_logging

ResponseFormat = Literal["json", "markdown"]

_BYTE_UNITS = ["B", "KB", "MB", "GB", "TB"]
_GENERIC_TABLE_MAX_COLUMNS = 5


def format_response(data: Any, response_format: ResponseFormat = "json", entity_type: str = "") -> str:
    """Render a tool result.

    Args:
        data: Page dict, list or single resource.
        response_format: ``json`` (indent 2) or ``markdown``.
        entity_type: Plural resource name (``files``, ``comments``...) used to
            pick the markdown table layout.

    Returns:
        Rendered text.
    """
    if response_format == "markdown":
        return format_markdown(data, entity_type)
    return json.dumps(data, indent=2)


def format_error(error: BaseException) -> dict[str, Any]:
    """Build the structured failure payload returned from a tool call."""
    message = f"Error: {error.message if isinstance(error, ApiError) else error}"
    if isinstance(error, ApiError) and error.retryable:
        message += " (retryable)"
    return {"error": message, "details": format_error_for_logging(error)}


def format_markdown(data: Any, entity_type: str) -> str:
    if isinstance(data, dict) and isinstance(data.get("items"), list):
        return _page_markdown(data, entity_type)
    if isinstance(data, list):
        return _table_for(entity_type, data)
    if isinstance(data, dict):
        return _object_markdown(data, entity_type)
    return str(data)


def _page_markdown(page: dict[str, Any], entity_type: str) -> str:
    items = page["items"]
    lines = [f"## {entity_type[:1].upper()}{entity_type[1:]}", "", f"**Showing:** {len(items)}"]
    if page.get("hasMore"):
        lines.append(f"**More available:** Yes (nextPageToken: `{page.get('nextPageToken')}`)")
    lines.append("")

    if not items:
        lines.append("_No items found._")
    else:
        lines.append(_table_for(entity_type, items))
    return "\n".join(lines)


def _object_markdown(data: dict[str, Any], entity_type: str) -> str:
    title = entity_type[:-1] if entity_type.endswith("s") else entity_type
    lines = [f"## {title[:1].upper()}{title[1:]}", ""]
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            lines.extend([f"**{format_key(key)}:**", "```json", json.dumps(value, indent=2), "```"])
        else:
            lines.append(f"**{format_key(key)}:** {_scalar(value)}")
    return "\n".join(lines)


def _table_for(entity_type: str, items: list[dict[str, Any]]) -> str:
    renderer = _TABLES.get(entity_type)
    if renderer is None:
        return _generic_table(items)
    header, row = renderer
    columns = len(header)
    lines = [
        "| " + " | ".join(header) + " |",
        "|" + "|".join(["---"] * columns) + "|",
    ]
    lines.extend("| " + " | ".join(row(item)) + " |" for item in items)
    return "\n".join(lines)


def _generic_table(items: list[Any]) -> str:
    if not items:
        return "_No items_"
    first = items[0] if isinstance(items[0], dict) else {}
    keys = list(first)[:_GENERIC_TABLE_MAX_COLUMNS]
    if not keys:
        return "\n".join(f"- {_scalar(item)}" for item in items)

    lines = ["| " + " | ".join(keys) + " |", "|" + "|".join(["---"] * len(keys)) + "|"]
    for item in items:
        record = item if isinstance(item, dict) else {}
        values = [_scalar(record[key]) if record.get(key) is not None else "-" for key in keys]
        lines.append("| " + " | ".join(values) + " |")
    return "\n".join(lines)


def _file_row(file: dict[str, Any]) -> list[str]:
    mime_type = file.get("mimeType")
    kind = "📁 Folder" if mime_type == FOLDER_MIME_TYPE else str(mime_type or "-")
    return [
        str(file.get("id") or "-"),
        str(file.get("name") or "-"),
        kind,
        _size(file.get("size")),
        _date(file.get("modifiedTime")),
    ]


def _permission_row(permission: dict[str, Any]) -> list[str]:
    return [
        str(permission.get("id") or "-"),
        str(permission.get("type") or "-"),
        str(permission.get("role") or "-"),
        str(permission.get("emailAddress") or permission.get("domain") or "-"),
    ]


def _comment_row(comment: dict[str, Any]) -> list[str]:
    return [
        str(comment.get("id") or "-"),
        truncate(comment.get("content") or "", 50),
        _author(comment),
        _date(comment.get("createdTime")),
        _yes_no(comment.get("resolved")),
    ]


def _reply_row(reply: dict[str, Any]) -> list[str]:
    return [
        str(reply.get("id") or "-"),
        truncate(reply.get("content") or "", 50),
        _author(reply),
        _date(reply.get("createdTime")),
    ]


def _revision_row(revision: dict[str, Any]) -> list[str]:
    return [
        str(revision.get("id") or "-"),
        _date(revision.get("modifiedTime")),
        _size(revision.get("size")),
        _yes_no(revision.get("keepForever")),
    ]


def _drive_row(drive: dict[str, Any]) -> list[str]:
    return [
        str(drive.get("id") or "-"),
        str(drive.get("name") or "-"),
        _date(drive.get("createdTime")),
        _yes_no(drive.get("hidden")),
    ]


_TABLES = {
    "files": (["ID", "Name", "Type", "Size", "Modified"], _file_row),
    "permissions": (["ID", "Type", "Role", "Email/Domain"], _permission_row),
    "comments": (["ID", "Content", "Author", "Created", "Resolved"], _comment_row),
    "replies": (["ID", "Content", "Author", "Created"], _reply_row),
    "revisions": (["ID", "Modified", "Size", "Keep Forever"], _revision_row),
    "drives": (["ID", "Name", "Created", "Hidden"], _drive_row),
}


def _author(item: dict[str, Any]) -> str:
    author = item.get("author") or {}
    return str(author.get("displayName") or "-")


def _yes_no(value: Any) -> str:
    return "Yes" if value else "No"


def _size(value: Any) -> str:
    if value in (None, ""):
        return "-"
    try:
        return format_bytes(int(value))
    except (TypeError, ValueError):
        return str(value)


def _date(value: Any) -> str:
    return format_date(value) if value else "-"


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_key(key: str) -> str:
    """Turn a camelCase key into Title Case words (``modifiedTime`` -> ``Modified Time``)."""
    spaced = re.sub(r"([A-Z])", r" \1", key).strip()
    return spaced[:1].upper() + spaced[1:]


def format_bytes(size: int) -> str:
    """Human-readable byte count with up to two decimals (``1536`` -> ``1.5 KB``)."""
    if size <= 0:
        return "0 B"
    value = float(size)
    index = 0
    while value >= 1024 and index < len(_BYTE_UNITS) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {_BYTE_UNITS[index]}"


def format_date(value: str) -> str:
    """Render an RFC 3339 timestamp as ``Jan 5, 2024``; unparsable input is returned as-is."""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}..."
