"""Google Drive REST client: request pipeline, result variants, uploads."""

from gdrive_mcp.client.drive_client import (
    API_BASE_URL,
    DEFAULT_FILE_FIELDS,
    FOLDER_MIME_TYPE,
    UPLOAD_BASE_URL,
    DriveClient,
    watch_channel,
)
from gdrive_mcp.client.multipart import MULTIPART_BOUNDARY, build_multipart_body
from gdrive_mcp.client.responses import (
    ApiResult,
    ChangeList,
    EmptyResult,
    JsonResult,
    Page,
    TextResult,
)

__all__ = [
    "API_BASE_URL",
    "ApiResult",
    "ChangeList",
    "DEFAULT_FILE_FIELDS",
    "DriveClient",
    "EmptyResult",
    "FOLDER_MIME_TYPE",
    "JsonResult",
    "MULTIPART_BOUNDARY",
    "Page",
    "TextResult",
    "UPLOAD_BASE_URL",
    "build_multipart_body",
    "watch_channel",
]
