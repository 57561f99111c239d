"""Google Drive REST API v3 client.

Reference: https://developers.google.com/drive/api/reference/rest/v3

Every operation funnels through ``DriveClient.request``, which attaches the
tenant's bearer token, performs exactly one HTTP call, classifies the
status code into the ``gdrive_mcp.errors`` taxonomy and returns a tagged
``ApiResult``. The resource methods below it are thin mappings from
keyword arguments to query strings and JSON bodies.

A ``DriveClient`` is created per tool invocation with that invocation's
``TenantCredentials``. The underlying ``httpx.AsyncClient`` may be shared
between instances for connection pooling; it carries no credentials.
"""

import json
import logging
from typing import Any, Literal
from urllib.parse import quote

import httpx

from gdrive_mcp.auth import TenantCredentials, validate_credentials
from gdrive_mcp.client.multipart import build_multipart_body
from gdrive_mcp.client.responses import (
    ApiResult,
    ChangeList,
    EmptyResult,
    JsonResult,
    Page,
    TextResult,
)
from gdrive_mcp.errors import (
    DEFAULT_RETRY_AFTER_SECONDS,
    ApiError,
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

# Google Drive API base URLs
API_BASE_URL = "https://www.googleapis.com/drive/v3"
UPLOAD_BASE_URL = "https://www.googleapis.com/upload/drive/v3"

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"

# Default fields for file reads; other resources default to "*"
DEFAULT_FILE_FIELDS = (
    "id,name,mimeType,description,starred,trashed,parents,size,createdTime,"
    "modifiedTime,webViewLink,webContentLink,iconLink,thumbnailLink,shared,"
    "ownedByMe,owners,capabilities"
)
ALL_FIELDS = "*"

PermissionRole = Literal["owner", "organizer", "fileOrganizer", "writer", "commenter", "reader"]
GranteeType = Literal["user", "group", "domain", "anyone"]


def _bool_param(value: bool | None) -> str | None:
    if value is None:
        return None
    return "true" if value else "false"


def _query(**params: Any) -> dict[str, str]:
    """Build a query dict, dropping unset (None) values and stringifying the rest."""
    query: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            query[key] = "true" if value else "false"
        else:
            query[key] = str(value)
    return query


def _compact(body: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None so they are not sent in JSON bodies."""
    return {key: value for key, value in body.items() if value is not None}


def _parse_retry_after(value: str | None) -> int:
    if not value:
        return DEFAULT_RETRY_AFTER_SECONDS
    try:
        seconds = int(value.strip())
    except ValueError:
        # HTTP-date form or garbage
        return DEFAULT_RETRY_AFTER_SECONDS
    return seconds if seconds >= 0 else DEFAULT_RETRY_AFTER_SECONDS


def _segment(value: str) -> str:
    """Percent-encode one path segment so ids cannot add query or fragment parts."""
    return quote(str(value), safe="")


def _error_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = json.loads(response.text)
    except (ValueError, TypeError):
        return {}
    return body if isinstance(body, dict) else {}


def _error_message(body: dict[str, Any], *, allow_top_level: bool) -> str | None:
    error = body.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str) and error["message"]:
        return error["message"]
    if allow_top_level and isinstance(body.get("message"), str) and body["message"]:
        return body["message"]
    return None


def watch_channel(
    channel_id: str,
    address: str,
    token: str | None = None,
    expiration: str | None = None,
) -> dict[str, Any]:
    """Build a ``web_hook`` notification channel body for watch requests."""
    return _compact(
        {
            "id": channel_id,
            "type": "web_hook",
            "address": address,
            "token": token,
            "expiration": expiration,
        }
    )


class DriveClient:
    """Request pipeline and resource operations for one tenant.

    Attributes:
        credentials: Tenant credentials for this client.
        base_url: Metadata API root (credential override or default).
        upload_url: Upload API root.

    Example:
        ```python
        credentials = TenantCredentials(access_token="ya29...")
        async with DriveClient(credentials) as client:
            page = await client.list_files(q="name contains 'report'")
        ```
    """

    def __init__(
        self,
        credentials: TenantCredentials,
        http_client: httpx.AsyncClient | None = None,
        timeout: httpx.Timeout | float | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            credentials: Tenant credentials (token validated lazily per call).
            http_client: Shared client for connection pooling. When omitted,
                a private client is created and closed by ``aclose``.
            timeout: Timeout for the private client (ignored when shared).
        """
        self.credentials = credentials
        self.base_url = (credentials.base_url or API_BASE_URL).rstrip("/")
        self.upload_url = UPLOAD_BASE_URL
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else 30.0
        )

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "DriveClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # =========================================================================
    # Request pipeline
    # =========================================================================

    def _auth_headers(self) -> dict[str, str]:
        validate_credentials(self.credentials)
        return {
            "Authorization": f"Bearer {self.credentials.access_token}",
            "Content-Type": "application/json",
        }

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json_body: Any = None,
        content: bytes | str | None = None,
        headers: dict[str, str] | None = None,
        upload: bool = False,
    ) -> ApiResult:
        """Perform one authenticated call against the Drive API.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE).
            path: Endpoint path relative to the API root, e.g. ``/files/abc``.
            params: Query parameters.
            json_body: JSON-serializable request body.
            content: Raw request body (multipart uploads).
            headers: Header overrides merged over the auth headers.
            upload: Route to the upload API root instead of the metadata root.

        Returns:
            JsonResult, TextResult or EmptyResult.

        Raises:
            AuthenticationError: No token, or the API answered 401.
            RateLimitError: The API answered 429.
            ForbiddenError: The API answered 403.
            NotFoundError: The API answered 404.
            ApiError: Any other non-2xx status.
        """
        request_headers = self._auth_headers()
        if headers:
            request_headers.update(headers)

        url = f"{self.upload_url if upload else self.base_url}{path}"
        logger.debug(f"{method} {url}")

        response = await self._http_client.request(
            method=method,
            url=url,
            params=params,
            json=json_body,
            content=content,
            headers=request_headers,
        )
        return self._interpret(response, path)

    def _interpret(self, response: httpx.Response, path: str) -> ApiResult:
        status = response.status_code

        if status == 429:
            retry_after = _parse_retry_after(response.headers.get("Retry-After"))
            raise RateLimitError("Rate limit exceeded", retry_after)

        if status == 401:
            raise AuthenticationError("Authentication failed. Check your OAuth access token.")

        if status == 403:
            message = _error_message(_error_body(response), allow_top_level=False)
            raise ForbiddenError(message or "Access denied")

        if status == 404:
            raise NotFoundError("Resource", path)

        if not 200 <= status < 300:
            message = _error_message(_error_body(response), allow_top_level=True)
            raise ApiError(message or f"API error: {status}", status_code=status)

        if status == 204:
            return EmptyResult()

        content_type = response.headers.get("content-type")
        if content_type and "application/json" in content_type:
            try:
                data = response.json()
            except ValueError:
                raise ApiError(f"Invalid JSON response from {path}", status_code=status) from None
            return JsonResult(data=data)

        return TextResult(text=response.text, content_type=content_type)

    async def _request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        """Run ``request`` and unwrap a JSON payload.

        An empty (204) response yields an empty dict.

        Raises:
            ApiError: If the API answered with a non-JSON body.
        """
        result = await self.request(method, path, **kwargs)
        if isinstance(result, JsonResult):
            return result.data
        if isinstance(result, EmptyResult):
            return {}
        raise ApiError(
            f"Expected JSON response from {path}, got {result.content_type or 'unknown content type'}"
        )

    async def _request_text(self, method: str, path: str, **kwargs: Any) -> str:
        result = await self.request(method, path, **kwargs)
        if isinstance(result, TextResult):
            return result.text
        if isinstance(result, JsonResult):
            return json.dumps(result.data, indent=2)
        return ""

    async def _request_page(self, path: str, items_key: str, params: dict[str, str]) -> Page:
        payload = await self._request_json("GET", path, params=params)
        return Page.from_response(payload, items_key)

    # =========================================================================
    # Connection / About
    # =========================================================================

    async def test_connection(self) -> dict[str, Any]:
        """Check the credentials by fetching the current user.

        Returns:
            ``{"connected": bool, "message": str}``; never raises.
        """
        try:
            about = await self.get_about("user")
        except Exception as e:
            return {"connected": False, "message": str(e) or "Connection failed"}

        user = about.get("user") or {}
        who = user.get("displayName") or user.get("emailAddress") or "unknown user"
        return {"connected": True, "message": f"Connected to Google Drive as {who}"}

    async def get_about(self, fields: str = ALL_FIELDS) -> dict[str, Any]:
        return await self._request_json("GET", "/about", params=_query(fields=fields or ALL_FIELDS))

    # =========================================================================
    # Files
    # =========================================================================

    async def list_files(
        self,
        q: str | None = None,
        page_size: int | None = None,
        page_token: str | None = None,
        fields: str | None = None,
        order_by: str | None = None,
        spaces: str | None = None,
        corpora: str | None = None,
        drive_id: str | None = None,
        include_items_from_all_drives: bool = False,
        supports_all_drives: bool = False,
    ) -> Page:
        params = _query(
            q=q or None,
            pageSize=page_size or None,
            pageToken=page_token or None,
            fields=f"nextPageToken,files({fields or DEFAULT_FILE_FIELDS})",
            orderBy=order_by or None,
            spaces=spaces or None,
            corpora=corpora or None,
            driveId=drive_id or None,
            includeItemsFromAllDrives=True if include_items_from_all_drives else None,
            supportsAllDrives=True if supports_all_drives else None,
        )
        return await self._request_page("/files", "files", params)

    async def get_file(self, file_id: str, fields: str | None = None) -> dict[str, Any]:
        params = _query(fields=fields or DEFAULT_FILE_FIELDS, supportsAllDrives=True)
        return await self._request_json("GET", f"/files/{_segment(file_id)}", params=params)

    async def create_file(
        self,
        name: str,
        mime_type: str | None = None,
        parents: list[str] | None = None,
        description: str | None = None,
        content: str | None = None,
    ) -> dict[str, Any]:
        """Create a file; inline ``content`` switches to a multipart upload."""
        metadata: dict[str, Any] = {"name": name}
        if mime_type:
            metadata["mimeType"] = mime_type
        if parents is not None:
            metadata["parents"] = parents
        if description:
            metadata["description"] = description

        if content:
            body, content_type = build_multipart_body(metadata, content, mime_type)
            return await self._request_json(
                "POST",
                "/files",
                params=_query(uploadType="multipart", fields=DEFAULT_FILE_FIELDS),
                content=body,
                headers={"Content-Type": content_type},
                upload=True,
            )

        return await self._request_json(
            "POST", "/files", params=_query(fields=DEFAULT_FILE_FIELDS), json_body=metadata
        )

    async def update_file(
        self,
        file_id: str,
        name: str | None = None,
        description: str | None = None,
        mime_type: str | None = None,
        content: str | None = None,
        add_parents: str | None = None,
        remove_parents: str | None = None,
        starred: bool | None = None,
        trashed: bool | None = None,
    ) -> dict[str, Any]:
        """Patch file metadata; inline ``content`` switches to a multipart upload."""
        params = _query(
            fields=DEFAULT_FILE_FIELDS,
            supportsAllDrives=True,
            addParents=add_parents or None,
            removeParents=remove_parents or None,
        )
        metadata = _compact(
            {
                "name": name,
                "description": description,
                "mimeType": mime_type,
                "starred": starred,
                "trashed": trashed,
            }
        )

        if content:
            body, content_type = build_multipart_body(metadata, content, mime_type)
            return await self._request_json(
                "PATCH",
                f"/files/{_segment(file_id)}",
                params={"uploadType": "multipart", **params},
                content=body,
                headers={"Content-Type": content_type},
                upload=True,
            )

        return await self._request_json(
            "PATCH", f"/files/{_segment(file_id)}", params=params, json_body=metadata
        )

    async def copy_file(
        self,
        file_id: str,
        name: str | None = None,
        parents: list[str] | None = None,
        description: str | None = None,
    ) -> dict[str, Any]:
        return await self._request_json(
            "POST",
            f"/files/{_segment(file_id)}/copy",
            params=_query(fields=DEFAULT_FILE_FIELDS, supportsAllDrives=True),
            json_body=_compact({"name": name, "parents": parents, "description": description}),
        )

    async def delete_file(self, file_id: str) -> None:
        await self.request(
            "DELETE", f"/files/{_segment(file_id)}", params=_query(supportsAllDrives=True)
        )

    async def empty_trash(self) -> None:
        await self.request("DELETE", "/files/trash")

    async def export_file(self, file_id: str, mime_type: str) -> str:
        return await self._request_text(
            "GET", f"/files/{_segment(file_id)}/export", params=_query(mimeType=mime_type)
        )

    async def download_file(self, file_id: str) -> str:
        return await self._request_text(
            "GET", f"/files/{_segment(file_id)}", params=_query(alt="media", supportsAllDrives=True)
        )

    async def generate_ids(self, count: int = 10, space: str = "drive") -> list[str]:
        response = await self._request_json(
            "GET", "/files/generateIds", params=_query(count=count, space=space)
        )
        return response.get("ids") or []

    async def list_labels(self, file_id: str) -> Any:
        return await self._request_json("GET", f"/files/{_segment(file_id)}/listLabels")

    async def modify_labels(self, file_id: str, label_modifications: Any) -> Any:
        return await self._request_json(
            "POST",
            f"/files/{_segment(file_id)}/modifyLabels",
            json_body={"labelModifications": label_modifications},
        )

    async def watch_file(self, file_id: str, channel: dict[str, Any]) -> dict[str, Any]:
        return await self._request_json(
            "POST",
            f"/files/{_segment(file_id)}/watch",
            params=_query(supportsAllDrives=True),
            json_body=channel,
        )

    # =========================================================================
    # Folders
    # =========================================================================

    async def create_folder(self, name: str, parents: list[str] | None = None) -> dict[str, Any]:
        return await self.create_file(name=name, mime_type=FOLDER_MIME_TYPE, parents=parents)

    async def list_folder_contents(
        self,
        folder_id: str,
        page_size: int | None = None,
        page_token: str | None = None,
        order_by: str | None = None,
    ) -> Page:
        return await self.list_files(
            q=f"'{folder_id}' in parents and trashed = false",
            page_size=page_size,
            page_token=page_token,
            order_by=order_by,
        )

    # =========================================================================
    # Permissions
    # =========================================================================

    async def list_permissions(
        self,
        file_id: str,
        page_size: int | None = None,
        page_token: str | None = None,
        supports_all_drives: bool = True,
    ) -> Page:
        params = _query(
            pageSize=page_size or None,
            pageToken=page_token or None,
            supportsAllDrives=supports_all_drives,
            fields="nextPageToken,permissions(*)",
        )
        return await self._request_page(f"/files/{_segment(file_id)}/permissions", "permissions", params)

    async def get_permission(self, file_id: str, permission_id: str) -> dict[str, Any]:
        return await self._request_json(
            "GET",
            f"/files/{_segment(file_id)}/permissions/{_segment(permission_id)}",
            params=_query(supportsAllDrives=True, fields=ALL_FIELDS),
        )

    async def create_permission(
        self,
        file_id: str,
        role: PermissionRole,
        type: GranteeType,
        email_address: str | None = None,
        domain: str | None = None,
        allow_file_discovery: bool | None = None,
        send_notification_email: bool | None = None,
        email_message: str | None = None,
        transfer_ownership: bool = False,
        move_to_new_owners_root: bool = False,
    ) -> dict[str, Any]:
        params = _query(
            supportsAllDrives=True,
            fields=ALL_FIELDS,
            sendNotificationEmail=send_notification_email,
            emailMessage=email_message or None,
            transferOwnership=True if transfer_ownership else None,
            moveToNewOwnersRoot=True if move_to_new_owners_root else None,
        )
        body: dict[str, Any] = {"role": role, "type": type}
        if email_address:
            body["emailAddress"] = email_address
        if domain:
            body["domain"] = domain
        if allow_file_discovery is not None:
            body["allowFileDiscovery"] = allow_file_discovery

        return await self._request_json(
            "POST", f"/files/{_segment(file_id)}/permissions", params=params, json_body=body
        )

    async def update_permission(
        self,
        file_id: str,
        permission_id: str,
        role: PermissionRole,
        expiration_time: str | None = None,
    ) -> dict[str, Any]:
        return await self._request_json(
            "PATCH",
            f"/files/{_segment(file_id)}/permissions/{_segment(permission_id)}",
            params=_query(supportsAllDrives=True, fields=ALL_FIELDS),
            json_body=_compact({"role": role, "expirationTime": expiration_time}),
        )

    async def delete_permission(self, file_id: str, permission_id: str) -> None:
        await self.request(
            "DELETE",
            f"/files/{_segment(file_id)}/permissions/{_segment(permission_id)}",
            params=_query(supportsAllDrives=True),
        )

    # =========================================================================
    # Comments
    # =========================================================================

    async def list_comments(
        self,
        file_id: str,
        page_size: int | None = None,
        page_token: str | None = None,
        include_deleted: bool = False,
        start_modified_time: str | None = None,
    ) -> Page:
        params = _query(
            pageSize=page_size or None,
            pageToken=page_token or None,
            includeDeleted=True if include_deleted else None,
            startModifiedTime=start_modified_time or None,
            fields="nextPageToken,comments(*)",
        )
        return await self._request_page(f"/files/{_segment(file_id)}/comments", "comments", params)

    async def get_comment(
        self, file_id: str, comment_id: str, include_deleted: bool = False
    ) -> dict[str, Any]:
        params = _query(fields=ALL_FIELDS, includeDeleted=True if include_deleted else None)
        return await self._request_json(
            "GET", f"/files/{_segment(file_id)}/comments/{_segment(comment_id)}", params=params
        )

    async def create_comment(
        self,
        file_id: str,
        content: str,
        anchor: str | None = None,
        quoted_file_content: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        body = _compact(
            {"content": content, "anchor": anchor, "quotedFileContent": quoted_file_content}
        )
        return await self._request_json(
            "POST", f"/files/{_segment(file_id)}/comments", params=_query(fields=ALL_FIELDS), json_body=body
        )

    async def update_comment(self, file_id: str, comment_id: str, content: str) -> dict[str, Any]:
        return await self._request_json(
            "PATCH",
            f"/files/{_segment(file_id)}/comments/{_segment(comment_id)}",
            params=_query(fields=ALL_FIELDS),
            json_body={"content": content},
        )

    async def delete_comment(self, file_id: str, comment_id: str) -> None:
        await self.request("DELETE", f"/files/{_segment(file_id)}/comments/{_segment(comment_id)}")

    # =========================================================================
    # Replies
    # =========================================================================

    async def list_replies(
        self,
        file_id: str,
        comment_id: str,
        page_size: int | None = None,
        page_token: str | None = None,
        include_deleted: bool = False,
    ) -> Page:
        params = _query(
            pageSize=page_size or None,
            pageToken=page_token or None,
            includeDeleted=True if include_deleted else None,
            fields="nextPageToken,replies(*)",
        )
        return await self._request_page(
            f"/files/{_segment(file_id)}/comments/{_segment(comment_id)}/replies", "replies", params
        )

    async def get_reply(
        self, file_id: str, comment_id: str, reply_id: str, include_deleted: bool = False
    ) -> dict[str, Any]:
        params = _query(fields=ALL_FIELDS, includeDeleted=True if include_deleted else None)
        path = f"/files/{_segment(file_id)}/comments/{_segment(comment_id)}/replies/{_segment(reply_id)}"
        return await self._request_json("GET", path, params=params)

    async def create_reply(
        self,
        file_id: str,
        comment_id: str,
        content: str,
        action: Literal["resolve", "reopen"] | None = None,
    ) -> dict[str, Any]:
        return await self._request_json(
            "POST",
            f"/files/{_segment(file_id)}/comments/{_segment(comment_id)}/replies",
            params=_query(fields=ALL_FIELDS),
            json_body=_compact({"content": content, "action": action}),
        )

    async def update_reply(
        self, file_id: str, comment_id: str, reply_id: str, content: str
    ) -> dict[str, Any]:
        return await self._request_json(
            "PATCH",
            f"/files/{_segment(file_id)}/comments/{_segment(comment_id)}/replies/{_segment(reply_id)}",
            params=_query(fields=ALL_FIELDS),
            json_body={"content": content},
        )

    async def delete_reply(self, file_id: str, comment_id: str, reply_id: str) -> None:
        await self.request(
            "DELETE",
            f"/files/{_segment(file_id)}/comments/{_segment(comment_id)}/replies/{_segment(reply_id)}",
        )

    # =========================================================================
    # Revisions
    # =========================================================================

    async def list_revisions(
        self, file_id: str, page_size: int | None = None, page_token: str | None = None
    ) -> Page:
        params = _query(
            pageSize=page_size or None,
            pageToken=page_token or None,
            fields="nextPageToken,revisions(*)",
        )
        return await self._request_page(f"/files/{_segment(file_id)}/revisions", "revisions", params)

    async def get_revision(self, file_id: str, revision_id: str) -> dict[str, Any]:
        return await self._request_json(
            "GET",
            f"/files/{_segment(file_id)}/revisions/{_segment(revision_id)}",
            params=_query(fields=ALL_FIELDS),
        )

    async def update_revision(
        self,
        file_id: str,
        revision_id: str,
        keep_forever: bool | None = None,
        publish_auto: bool | None = None,
        published: bool | None = None,
        published_outside_domain: bool | None = None,
    ) -> dict[str, Any]:
        body = _compact(
            {
                "keepForever": keep_forever,
                "publishAuto": publish_auto,
                "published": published,
                "publishedOutsideDomain": published_outside_domain,
            }
        )
        return await self._request_json(
            "PATCH",
            f"/files/{_segment(file_id)}/revisions/{_segment(revision_id)}",
            params=_query(fields=ALL_FIELDS),
            json_body=body,
        )

    async def delete_revision(self, file_id: str, revision_id: str) -> None:
        await self.request("DELETE", f"/files/{_segment(file_id)}/revisions/{_segment(revision_id)}")

    # =========================================================================
    # Shared drives
    # =========================================================================

    async def list_drives(
        self,
        page_size: int | None = None,
        page_token: str | None = None,
        q: str | None = None,
        use_domain_admin_access: bool = False,
    ) -> Page:
        params = _query(
            pageSize=page_size or None,
            pageToken=page_token or None,
            q=q or None,
            useDomainAdminAccess=True if use_domain_admin_access else None,
            fields="nextPageToken,drives(*)",
        )
        return await self._request_page("/drives", "drives", params)

    async def get_drive(self, drive_id: str, use_domain_admin_access: bool = False) -> dict[str, Any]:
        params = _query(
            fields=ALL_FIELDS,
            useDomainAdminAccess=True if use_domain_admin_access else None,
        )
        return await self._request_json("GET", f"/drives/{_segment(drive_id)}", params=params)

    async def create_drive(
        self, request_id: str, name: str, theme_id: str | None = None
    ) -> dict[str, Any]:
        """Create a shared drive; ``request_id`` makes the call idempotent."""
        return await self._request_json(
            "POST",
            "/drives",
            params=_query(requestId=request_id, fields=ALL_FIELDS),
            json_body=_compact({"name": name, "themeId": theme_id}),
        )

    async def update_drive(
        self,
        drive_id: str,
        name: str | None = None,
        color_rgb: str | None = None,
        theme_id: str | None = None,
        restrictions: dict[str, bool | None] | None = None,
    ) -> dict[str, Any]:
        body = _compact({"name": name, "colorRgb": color_rgb, "themeId": theme_id})
        if restrictions is not None:
            body["restrictions"] = _compact(restrictions)
        return await self._request_json(
            "PATCH", f"/drives/{_segment(drive_id)}", params=_query(fields=ALL_FIELDS), json_body=body
        )

    async def delete_drive(self, drive_id: str) -> None:
        await self.request("DELETE", f"/drives/{_segment(drive_id)}")

    async def hide_drive(self, drive_id: str) -> dict[str, Any]:
        return await self._request_json(
            "POST", f"/drives/{_segment(drive_id)}/hide", params=_query(fields=ALL_FIELDS)
        )

    async def unhide_drive(self, drive_id: str) -> dict[str, Any]:
        return await self._request_json(
            "POST", f"/drives/{_segment(drive_id)}/unhide", params=_query(fields=ALL_FIELDS)
        )

    # =========================================================================
    # Changes and channels
    # =========================================================================

    async def get_start_page_token(
        self, drive_id: str | None = None, supports_all_drives: bool = False
    ) -> str:
        params = _query(
            driveId=drive_id or None,
            supportsAllDrives=True if supports_all_drives else None,
        )
        response = await self._request_json("GET", "/changes/startPageToken", params=params)
        return response.get("startPageToken", "")

    async def list_changes(
        self,
        page_token: str,
        drive_id: str | None = None,
        page_size: int | None = None,
        spaces: str | None = None,
        include_items_from_all_drives: bool = False,
        supports_all_drives: bool = False,
        include_removed: bool | None = None,
        restrict_to_my_drive: bool = False,
    ) -> ChangeList:
        """List changes since ``page_token``.

        The result carries either ``next_page_token`` (more to read now) or
        ``new_start_page_token`` (caught up; persist it for the next poll).
        """
        params = _query(
            pageToken=page_token,
            driveId=drive_id or None,
            pageSize=page_size or None,
            spaces=spaces or None,
            includeItemsFromAllDrives=True if include_items_from_all_drives else None,
            supportsAllDrives=True if supports_all_drives else None,
            includeRemoved=include_removed,
            restrictToMyDrive=True if restrict_to_my_drive else None,
            fields="nextPageToken,newStartPageToken,changes(*)",
        )
        payload = await self._request_json("GET", "/changes", params=params)
        return ChangeList.from_response(payload)

    async def watch_changes(
        self,
        page_token: str,
        channel: dict[str, Any],
        drive_id: str | None = None,
        include_items_from_all_drives: bool = False,
        supports_all_drives: bool = False,
    ) -> dict[str, Any]:
        params = _query(
            pageToken=page_token,
            driveId=drive_id or None,
            includeItemsFromAllDrives=True if include_items_from_all_drives else None,
            supportsAllDrives=True if supports_all_drives else None,
        )
        return await self._request_json("POST", "/changes/watch", params=params, json_body=channel)

    async def stop_channel(self, channel_id: str, resource_id: str) -> None:
        await self.request(
            "POST", "/channels/stop", json_body={"id": channel_id, "resourceId": resource_id}
        )

    # =========================================================================
    # Apps
    # =========================================================================

    async def list_apps(
        self,
        app_filter_extensions: str | None = None,
        app_filter_mime_types: str | None = None,
        language_code: str | None = None,
    ) -> list[dict[str, Any]]:
        """List installed apps. Not paginated by the API."""
        params = _query(
            appFilterExtensions=app_filter_extensions or None,
            appFilterMimeTypes=app_filter_mime_types or None,
            languageCode=language_code or None,
            fields="items(*)",
        )
        response = await self._request_json("GET", "/apps", params=params)
        return response.get("items") or []

    async def get_app(self, app_id: str) -> dict[str, Any]:
        return await self._request_json("GET", f"/apps/{_segment(app_id)}", params=_query(fields=ALL_FIELDS))

    # =========================================================================
    # Access proposals
    # =========================================================================

    async def list_access_proposals(
        self, file_id: str, page_size: int | None = None, page_token: str | None = None
    ) -> Page:
        params = _query(pageSize=page_size or None, pageToken=page_token or None)
        return await self._request_page(
            f"/files/{_segment(file_id)}/accessproposals", "accessProposals", params
        )

    async def get_access_proposal(self, file_id: str, proposal_id: str) -> dict[str, Any]:
        return await self._request_json(
            "GET", f"/files/{_segment(file_id)}/accessproposals/{_segment(proposal_id)}"
        )

    async def resolve_access_proposal(
        self,
        file_id: str,
        proposal_id: str,
        action: Literal["accept", "deny"],
        role: str | None = None,
        view: str | None = None,
        send_notification: bool | None = None,
    ) -> None:
        params = _query(
            action=action,
            role=role or None,
            view=view or None,
            sendNotification=_bool_param(send_notification),
        )
        await self.request(
            "POST",
            f"/files/{_segment(file_id)}/accessproposals/{_segment(proposal_id)}:resolve",
            params=params,
        )

    # =========================================================================
    # Long-running operations
    # =========================================================================

    async def get_operation(self, operation_name: str) -> dict[str, Any]:
        return await self._request_json("GET", f"/operations/{_segment(operation_name)}")
