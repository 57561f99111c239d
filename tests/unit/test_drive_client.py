"""Unit tests for DriveClient.

Tests cover the request pipeline (authentication, status classification,
result variants), pagination normalization, multipart uploads, the change
cursor and the resource façade wire shapes.
"""

import json
from unittest.mock import AsyncMock

import pytest

from gdrive_mcp.auth import TenantCredentials
from gdrive_mcp.client import (
    API_BASE_URL,
    DEFAULT_FILE_FIELDS,
    FOLDER_MIME_TYPE,
    UPLOAD_BASE_URL,
    DriveClient,
    EmptyResult,
    JsonResult,
    TextResult,
    watch_channel,
)
from gdrive_mcp.client.multipart import MULTIPART_BOUNDARY
from gdrive_mcp.errors import (
    ApiError,
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
)


def request_kwargs(mock_http_client: AsyncMock, index: int = -1) -> dict:
    """Keyword arguments of a recorded ``request`` call."""
    return mock_http_client.request.call_args_list[index].kwargs


# =============================================================================
# Authentication
# =============================================================================


@pytest.mark.unit
class TestPipelineAuthentication:
    """Tests for credential handling before any network I/O."""

    @pytest.mark.asyncio
    async def test_should_raise_without_token_and_make_no_call(
        self, empty_credentials: TenantCredentials, mock_http_client: AsyncMock
    ) -> None:
        """Verify a missing token fails before the HTTP client is touched."""
        client = DriveClient(empty_credentials, http_client=mock_http_client)

        with pytest.raises(AuthenticationError) as exc_info:
            await client.get_file("abc")

        assert "X-Google-Access-Token" in exc_info.value.message
        mock_http_client.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_should_treat_whitespace_token_as_missing(self, mock_http_client: AsyncMock) -> None:
        """Verify a blank token is rejected like an absent one."""
        client = DriveClient(TenantCredentials(access_token="   "), http_client=mock_http_client)

        with pytest.raises(AuthenticationError):
            await client.list_files()

        mock_http_client.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_should_send_bearer_token(
        self, drive_client: DriveClient, mock_http_client: AsyncMock
    ) -> None:
        """Verify the Authorization and Content-Type headers are attached."""
        await drive_client.get_about()

        headers = request_kwargs(mock_http_client)["headers"]
        assert headers["Authorization"] == "Bearer test_access_token_abc123"
        assert headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_should_use_base_url_override_for_metadata_only(
        self, mock_http_client: AsyncMock
    ) -> None:
        """Verify X-Google-Base-URL redirects metadata calls but not uploads."""
        credentials = TenantCredentials(access_token="tok", base_url="https://proxy.example.com/drive/v3/")
        client = DriveClient(credentials, http_client=mock_http_client)

        await client.get_file("abc")
        assert request_kwargs(mock_http_client)["url"] == "https://proxy.example.com/drive/v3/files/abc"

        await client.create_file("notes.txt", content="hello")
        assert request_kwargs(mock_http_client)["url"] == f"{UPLOAD_BASE_URL}/files"


# =============================================================================
# Status classification
# =============================================================================


@pytest.mark.unit
class TestStatusClassification:
    """Tests for the ordered status-code rules."""

    @pytest.mark.asyncio
    async def test_should_raise_rate_limit_with_retry_after(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify 429 carries the Retry-After value."""
        mock_http_client.request.return_value = make_response(
            status_code=429, headers={"Retry-After": "120"}
        )

        with pytest.raises(RateLimitError) as exc_info:
            await drive_client.list_files()

        assert exc_info.value.retry_after_seconds == 120
        assert exc_info.value.retryable is True
        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    @pytest.mark.parametrize("retry_after", [None, "Wed, 21 Oct 2026 07:28:00 GMT", "soon", "-5"])
    async def test_should_default_retry_after_to_sixty(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response, retry_after
    ) -> None:
        """Verify absent, negative or unparsable Retry-After falls back to 60 seconds."""
        headers = {"Retry-After": retry_after} if retry_after else {}
        mock_http_client.request.return_value = make_response(status_code=429, headers=headers)

        with pytest.raises(RateLimitError) as exc_info:
            await drive_client.get_file("abc")

        assert exc_info.value.retry_after_seconds == 60

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "operation",
        [
            lambda c: c.get_file("abc"),
            lambda c: c.list_files(),
            lambda c: c.delete_file("abc"),
            lambda c: c.create_comment("abc", "hi"),
            lambda c: c.list_changes("token-1"),
            lambda c: c.hide_drive("drive-1"),
        ],
    )
    async def test_should_raise_authentication_error_on_401(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response, operation
    ) -> None:
        """Verify 401 is classified the same way for every method and resource."""
        mock_http_client.request.return_value = make_response(
            {"error": {"code": 401, "message": "Invalid Credentials"}}, status_code=401
        )

        with pytest.raises(AuthenticationError) as exc_info:
            await operation(drive_client)

        assert exc_info.value.message == "Authentication failed. Check your OAuth access token."

    @pytest.mark.asyncio
    async def test_should_use_error_message_for_403(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify 403 surfaces Google's error.message."""
        mock_http_client.request.return_value = make_response(
            {"error": {"code": 403, "message": "The user does not have sufficient permissions"}},
            status_code=403,
        )

        with pytest.raises(ForbiddenError) as exc_info:
            await drive_client.delete_file("abc")

        assert exc_info.value.message == "The user does not have sufficient permissions"
        assert exc_info.value.code == "FORBIDDEN"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"text": "<html>Forbidden</html>", "headers": {"content-type": "text/html"}},
            {"json_data": {"error": "forbidden"}},
            {"json_data": {"error": {"code": 403}}},
        ],
    )
    async def test_should_default_403_message_for_malformed_body(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response, body
    ) -> None:
        """Verify unparseable 403 bodies degrade to 'Access denied'."""
        mock_http_client.request.return_value = make_response(status_code=403, **body)

        with pytest.raises(ForbiddenError) as exc_info:
            await drive_client.get_file("abc")

        assert exc_info.value.message == "Access denied"

    @pytest.mark.asyncio
    async def test_should_raise_not_found_with_path(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify 404 names the request path."""
        mock_http_client.request.return_value = make_response(
            {"error": {"code": 404, "message": "File not found: abc."}}, status_code=404
        )

        with pytest.raises(NotFoundError) as exc_info:
            await drive_client.get_file("abc")

        assert exc_info.value.message == "Resource not found: /files/abc"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_should_prefer_nested_error_message(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify other statuses use error.message before a top-level message."""
        mock_http_client.request.return_value = make_response(
            {"error": {"message": "Backend Error"}, "message": "ignored"}, status_code=500
        )

        with pytest.raises(ApiError) as exc_info:
            await drive_client.list_drives()

        assert exc_info.value.message == "Backend Error"
        assert exc_info.value.status_code == 500
        assert exc_info.value.code == "API_ERROR"
        assert exc_info.value.retryable is False

    @pytest.mark.asyncio
    async def test_should_fall_back_to_top_level_message(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify a top-level message is used when error.message is absent."""
        mock_http_client.request.return_value = make_response({"message": "Bad range"}, status_code=400)

        with pytest.raises(ApiError) as exc_info:
            await drive_client.list_files(q="bad query")

        assert exc_info.value.message == "Bad range"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_should_fall_back_to_status_message(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify a non-JSON error body yields 'API error: <status>'."""
        mock_http_client.request.return_value = make_response(
            status_code=502, text="Bad Gateway", headers={"content-type": "text/plain"}
        )

        with pytest.raises(ApiError) as exc_info:
            await drive_client.get_about()

        assert exc_info.value.message == "API error: 502"

    @pytest.mark.asyncio
    async def test_should_return_empty_result_for_204(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify 204 is a success without payload."""
        mock_http_client.request.return_value = make_response(status_code=204)

        result = await drive_client.request("DELETE", "/files/abc")

        assert isinstance(result, EmptyResult)
        assert await drive_client.delete_file("abc") is None

    @pytest.mark.asyncio
    async def test_should_return_json_result(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify JSON bodies become JsonResult."""
        mock_http_client.request.return_value = make_response({"id": "abc"})

        result = await drive_client.request("GET", "/files/abc")

        assert isinstance(result, JsonResult)
        assert result.data == {"id": "abc"}

    @pytest.mark.asyncio
    async def test_should_return_text_result_for_non_json(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify non-JSON bodies become TextResult."""
        mock_http_client.request.return_value = make_response(
            text="a,b\n1,2\n", headers={"content-type": "text/csv"}
        )

        result = await drive_client.request("GET", "/files/abc/export")

        assert isinstance(result, TextResult)
        assert result.text == "a,b\n1,2\n"
        assert result.content_type == "text/csv"

    @pytest.mark.asyncio
    async def test_should_raise_api_error_for_malformed_json(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify a JSON content type with an unparseable body stays in the error taxonomy."""
        mock_http_client.request.return_value = make_response(
            text="not json", headers={"content-type": "application/json; charset=UTF-8"}
        )

        with pytest.raises(ApiError) as exc_info:
            await drive_client.get_file("abc")

        assert exc_info.value.message == "Invalid JSON response from /files/abc"
        assert exc_info.value.status_code == 200
        assert exc_info.value.code == "API_ERROR"

    @pytest.mark.asyncio
    async def test_should_make_exactly_one_call(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify failures are not retried locally."""
        mock_http_client.request.return_value = make_response(status_code=503, json_data={})

        with pytest.raises(ApiError):
            await drive_client.get_file("abc")

        assert mock_http_client.request.await_count == 1


# =============================================================================
# Pagination
# =============================================================================


@pytest.mark.unit
class TestPagination:
    """Tests for Page normalization of list operations."""

    @pytest.mark.asyncio
    async def test_should_forward_next_page_token(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify a returned token sets hasMore and is forwarded verbatim."""
        mock_http_client.request.return_value = make_response(
            {"files": [{"id": "f1"}, {"id": "f2"}], "nextPageToken": "~!!~AI9FV7Q"}
        )

        page = await drive_client.list_files(page_size=2)

        assert page.has_more is True
        assert page.next_page_token == "~!!~AI9FV7Q"
        assert page.to_dict() == {
            "items": [{"id": "f1"}, {"id": "f2"}],
            "hasMore": True,
            "nextPageToken": "~!!~AI9FV7Q",
        }

    @pytest.mark.asyncio
    async def test_should_omit_token_on_last_page(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify the last page has hasMore false and no nextPageToken key."""
        mock_http_client.request.return_value = make_response({"permissions": [{"id": "p1"}]})

        page = await drive_client.list_permissions("abc")

        assert page.to_dict() == {"items": [{"id": "p1"}], "hasMore": False}

    @pytest.mark.asyncio
    async def test_should_treat_empty_token_as_absent(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify an empty-string token does not signal more pages."""
        mock_http_client.request.return_value = make_response({"comments": [], "nextPageToken": ""})

        page = await drive_client.list_comments("abc")

        assert page.has_more is False
        assert "nextPageToken" not in page.to_dict()

    @pytest.mark.asyncio
    async def test_should_request_projection_and_flags_for_files(
        self, drive_client: DriveClient, mock_http_client: AsyncMock
    ) -> None:
        """Verify list_files sends the field projection and only true flags."""
        await drive_client.list_files(q="trashed = false", page_size=50, supports_all_drives=True)

        kwargs = request_kwargs(mock_http_client)
        assert kwargs["method"] == "GET"
        assert kwargs["url"] == f"{API_BASE_URL}/files"
        assert kwargs["params"] == {
            "q": "trashed = false",
            "pageSize": "50",
            "fields": f"nextPageToken,files({DEFAULT_FILE_FIELDS})",
            "supportsAllDrives": "true",
        }

    @pytest.mark.asyncio
    async def test_should_always_send_supports_all_drives_for_permissions(
        self, drive_client: DriveClient, mock_http_client: AsyncMock
    ) -> None:
        """Verify permission listings send supportsAllDrives even when false."""
        await drive_client.list_permissions("abc", supports_all_drives=False)

        params = request_kwargs(mock_http_client)["params"]
        assert params["supportsAllDrives"] == "false"
        assert params["fields"] == "nextPageToken,permissions(*)"

    @pytest.mark.asyncio
    async def test_should_not_project_access_proposals(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify access proposals are requested without a fields projection."""
        mock_http_client.request.return_value = make_response(
            {"accessProposals": [{"proposalId": "p1"}], "nextPageToken": "next"}
        )

        page = await drive_client.list_access_proposals("abc", page_size=10)

        assert "fields" not in request_kwargs(mock_http_client)["params"]
        assert page.items == [{"proposalId": "p1"}]
        assert page.next_page_token == "next"

    @pytest.mark.asyncio
    async def test_should_return_flat_app_list(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify apps are a plain list with an items(*) projection."""
        mock_http_client.request.return_value = make_response({"items": [{"id": "app1"}]})

        apps = await drive_client.list_apps(language_code="en")

        assert apps == [{"id": "app1"}]
        assert request_kwargs(mock_http_client)["params"] == {"languageCode": "en", "fields": "items(*)"}


# =============================================================================
# Files and folders
# =============================================================================


@pytest.mark.unit
class TestFileOperations:
    """Tests for file and folder façade wire shapes."""

    @pytest.mark.asyncio
    async def test_get_file_uses_default_fields(
        self, drive_client: DriveClient, mock_http_client: AsyncMock
    ) -> None:
        """Verify get_file projects the wide default field set."""
        await drive_client.get_file("abc")

        kwargs = request_kwargs(mock_http_client)
        assert kwargs["url"] == f"{API_BASE_URL}/files/abc"
        assert kwargs["params"] == {"fields": DEFAULT_FILE_FIELDS, "supportsAllDrives": "true"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("operation", "expected_path"),
        [
            (lambda c: c.get_file("abc?x=1#frag"), "/files/abc%3Fx%3D1%23frag"),
            (lambda c: c.get_permission("f/1", "p 1"), "/files/f%2F1/permissions/p%201"),
            (lambda c: c.get_drive("../about"), "/drives/..%2Fabout"),
        ],
    )
    async def test_identifiers_are_encoded_as_one_path_segment(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, operation, expected_path
    ) -> None:
        """Verify ids cannot add query, fragment or path parts to the request URL."""
        await operation(drive_client)

        assert request_kwargs(mock_http_client)["url"] == f"{API_BASE_URL}{expected_path}"

    @pytest.mark.asyncio
    async def test_create_file_keeps_explicit_empty_parents(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, split_multipart
    ) -> None:
        """Verify an explicit empty parents list is sent, not dropped."""
        await drive_client.create_file("a.txt", parents=[], content="x")

        (_, meta), _ = split_multipart(request_kwargs(mock_http_client)["content"])
        assert json.loads(meta) == {"name": "a.txt", "parents": []}

    @pytest.mark.asyncio
    async def test_create_file_without_content_posts_metadata(
        self, drive_client: DriveClient, mock_http_client: AsyncMock
    ) -> None:
        """Verify metadata-only creation uses the JSON metadata endpoint."""
        await drive_client.create_file("Plan", mime_type="application/vnd.google-apps.document", parents=["p1"])

        kwargs = request_kwargs(mock_http_client)
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == f"{API_BASE_URL}/files"
        assert kwargs["json"] == {
            "name": "Plan",
            "mimeType": "application/vnd.google-apps.document",
            "parents": ["p1"],
        }
        assert kwargs["content"] is None

    @pytest.mark.asyncio
    async def test_create_file_with_content_uploads_multipart(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, split_multipart
    ) -> None:
        """Verify inline content switches to a multipart upload."""
        await drive_client.create_file(
            "notes.md", mime_type="text/markdown", description="Notes", content="# Héllo\nworld"
        )

        kwargs = request_kwargs(mock_http_client)
        assert kwargs["url"] == f"{UPLOAD_BASE_URL}/files"
        assert kwargs["params"]["uploadType"] == "multipart"
        assert kwargs["headers"]["Content-Type"] == f'multipart/related; boundary="{MULTIPART_BOUNDARY}"'
        assert kwargs["headers"]["Authorization"] == "Bearer test_access_token_abc123"

        (meta_type, meta), (content_type, content) = split_multipart(kwargs["content"])
        assert meta_type == "application/json; charset=UTF-8"
        assert json.loads(meta) == {"name": "notes.md", "mimeType": "text/markdown", "description": "Notes"}
        assert content_type == "text/markdown"
        assert content == "# Héllo\nworld"

    @pytest.mark.asyncio
    async def test_update_file_with_content_patches_upload_endpoint(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, split_multipart
    ) -> None:
        """Verify content updates go through the upload root with PATCH."""
        await drive_client.update_file("abc", name="renamed.txt", content="new body")

        kwargs = request_kwargs(mock_http_client)
        assert kwargs["method"] == "PATCH"
        assert kwargs["url"] == f"{UPLOAD_BASE_URL}/files/abc"
        assert kwargs["params"]["uploadType"] == "multipart"
        assert kwargs["params"]["supportsAllDrives"] == "true"

        (_, meta), (content_type, content) = split_multipart(kwargs["content"])
        assert json.loads(meta) == {"name": "renamed.txt"}
        assert content_type == "text/plain"
        assert content == "new body"

    @pytest.mark.asyncio
    async def test_update_file_sends_only_set_fields(
        self, drive_client: DriveClient, mock_http_client: AsyncMock
    ) -> None:
        """Verify unset metadata is omitted while explicit False is kept."""
        await drive_client.update_file("abc", trashed=False, add_parents="p2", remove_parents="p1")

        kwargs = request_kwargs(mock_http_client)
        assert kwargs["json"] == {"trashed": False}
        assert kwargs["params"]["addParents"] == "p2"
        assert kwargs["params"]["removeParents"] == "p1"

    @pytest.mark.asyncio
    async def test_export_and_download_return_text(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify exports and downloads return the body text unchanged."""
        mock_http_client.request.return_value = make_response(
            text="Plain text export", headers={"content-type": "text/plain"}
        )

        exported = await drive_client.export_file("doc1", "text/plain")
        assert exported == "Plain text export"
        assert request_kwargs(mock_http_client)["params"] == {"mimeType": "text/plain"}

        downloaded = await drive_client.download_file("bin1")
        assert downloaded == "Plain text export"
        assert request_kwargs(mock_http_client)["params"] == {"alt": "media", "supportsAllDrives": "true"}

    @pytest.mark.asyncio
    async def test_generate_ids_returns_list(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify generate_ids unwraps the ids array."""
        mock_http_client.request.return_value = make_response({"ids": ["id1", "id2"], "space": "drive"})

        ids = await drive_client.generate_ids(count=2)

        assert ids == ["id1", "id2"]
        assert request_kwargs(mock_http_client)["params"] == {"count": "2", "space": "drive"}

    @pytest.mark.asyncio
    async def test_create_folder_sets_folder_mime_type(
        self, drive_client: DriveClient, mock_http_client: AsyncMock
    ) -> None:
        """Verify folders are files with the folder MIME type."""
        await drive_client.create_folder("Reports", parents=["root"])

        assert request_kwargs(mock_http_client)["json"] == {
            "name": "Reports",
            "mimeType": FOLDER_MIME_TYPE,
            "parents": ["root"],
        }

    @pytest.mark.asyncio
    async def test_list_folder_contents_builds_parent_query(
        self, drive_client: DriveClient, mock_http_client: AsyncMock
    ) -> None:
        """Verify folder listing filters by parent and excludes trash."""
        await drive_client.list_folder_contents("folder1", order_by="name")

        params = request_kwargs(mock_http_client)["params"]
        assert params["q"] == "'folder1' in parents and trashed = false"
        assert params["orderBy"] == "name"

    @pytest.mark.asyncio
    async def test_request_json_rejects_unexpected_text(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify a text body where JSON is required raises ApiError."""
        mock_http_client.request.return_value = make_response(
            text="<html></html>", headers={"content-type": "text/html"}
        )

        with pytest.raises(ApiError) as exc_info:
            await drive_client.get_file("abc")

        assert "text/html" in exc_info.value.message


# =============================================================================
# Permissions, comments, drives
# =============================================================================


@pytest.mark.unit
class TestResourceOperations:
    """Tests for permission, comment, revision and drive façades."""

    @pytest.mark.asyncio
    async def test_create_permission_query_and_body(
        self, drive_client: DriveClient, mock_http_client: AsyncMock
    ) -> None:
        """Verify notification and ownership flags map onto query params."""
        await drive_client.create_permission(
            "abc",
            role="writer",
            type="user",
            email_address="alice@example.com",
            send_notification_email=False,
            email_message="Take a look",
        )

        kwargs = request_kwargs(mock_http_client)
        assert kwargs["params"] == {
            "supportsAllDrives": "true",
            "fields": "*",
            "sendNotificationEmail": "false",
            "emailMessage": "Take a look",
        }
        assert kwargs["json"] == {"role": "writer", "type": "user", "emailAddress": "alice@example.com"}

    @pytest.mark.asyncio
    async def test_create_permission_keeps_false_file_discovery(
        self, drive_client: DriveClient, mock_http_client: AsyncMock
    ) -> None:
        """Verify allowFileDiscovery=false is sent and ownership flags only when true."""
        await drive_client.create_permission(
            "abc", role="reader", type="anyone", allow_file_discovery=False, transfer_ownership=True
        )

        kwargs = request_kwargs(mock_http_client)
        assert kwargs["json"] == {"role": "reader", "type": "anyone", "allowFileDiscovery": False}
        assert kwargs["params"]["transferOwnership"] == "true"
        assert "moveToNewOwnersRoot" not in kwargs["params"]

    @pytest.mark.asyncio
    async def test_create_reply_with_action(
        self, drive_client: DriveClient, mock_http_client: AsyncMock
    ) -> None:
        """Verify reply actions are sent in the body."""
        await drive_client.create_reply("abc", "c1", "Done", action="resolve")

        kwargs = request_kwargs(mock_http_client)
        assert kwargs["url"] == f"{API_BASE_URL}/files/abc/comments/c1/replies"
        assert kwargs["json"] == {"content": "Done", "action": "resolve"}

    @pytest.mark.asyncio
    async def test_update_drive_restrictions_drop_unset(
        self, drive_client: DriveClient, mock_http_client: AsyncMock
    ) -> None:
        """Verify restriction keys left unset are not sent."""
        await drive_client.update_drive(
            "d1", restrictions={"domainUsersOnly": True, "driveMembersOnly": None}
        )

        assert request_kwargs(mock_http_client)["json"] == {"restrictions": {"domainUsersOnly": True}}

    @pytest.mark.asyncio
    async def test_create_drive_sends_request_id(
        self, drive_client: DriveClient, mock_http_client: AsyncMock
    ) -> None:
        """Verify the idempotency key is a query parameter."""
        await drive_client.create_drive("req-123", "Team Drive")

        kwargs = request_kwargs(mock_http_client)
        assert kwargs["params"] == {"requestId": "req-123", "fields": "*"}
        assert kwargs["json"] == {"name": "Team Drive"}

    @pytest.mark.asyncio
    async def test_resolve_access_proposal_params(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify resolution is a POST to the :resolve custom method."""
        mock_http_client.request.return_value = make_response(status_code=204)

        await drive_client.resolve_access_proposal("abc", "p1", "accept", role="reader", send_notification=True)

        kwargs = request_kwargs(mock_http_client)
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == f"{API_BASE_URL}/files/abc/accessproposals/p1:resolve"
        assert kwargs["params"] == {"action": "accept", "role": "reader", "sendNotification": "true"}

    @pytest.mark.asyncio
    async def test_stop_channel_body(self, drive_client: DriveClient, mock_http_client: AsyncMock) -> None:
        """Verify channel stop sends id and resourceId."""
        await drive_client.stop_channel("ch1", "res1")

        assert request_kwargs(mock_http_client)["json"] == {"id": "ch1", "resourceId": "res1"}

    def test_watch_channel_omits_unset_fields(self) -> None:
        """Verify watch channel bodies are web_hook channels."""
        assert watch_channel("ch1", "https://example.com/hook") == {
            "id": "ch1",
            "type": "web_hook",
            "address": "https://example.com/hook",
        }
        assert watch_channel("ch1", "https://example.com/hook", token="t", expiration="1700000000000")[
            "expiration"
        ] == "1700000000000"


# =============================================================================
# Changes
# =============================================================================


@pytest.mark.unit
class TestChangeCursor:
    """Tests for the change feed cursor."""

    @pytest.mark.asyncio
    async def test_should_report_more_changes(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify nextPageToken means more changes are available now."""
        mock_http_client.request.return_value = make_response(
            {"changes": [{"fileId": "f1"}], "nextPageToken": "101"}
        )

        changes = await drive_client.list_changes("100")

        assert changes.has_more is True
        assert changes.caught_up is False
        assert changes.to_dict() == {"changes": [{"fileId": "f1"}], "nextPageToken": "101"}

    @pytest.mark.asyncio
    async def test_should_report_caught_up(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify newStartPageToken means the caller is caught up."""
        mock_http_client.request.return_value = make_response({"changes": [], "newStartPageToken": "205"})

        changes = await drive_client.list_changes("200")

        assert changes.caught_up is True
        assert changes.new_start_page_token == "205"
        assert changes.next_page_token is None

    @pytest.mark.asyncio
    async def test_should_be_idempotent_for_same_token(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify the same token against the same remote gives the same result."""
        mock_http_client.request.return_value = make_response(
            {"changes": [{"fileId": "f1"}], "newStartPageToken": "9"}
        )

        first = await drive_client.list_changes("8")
        second = await drive_client.list_changes("8")

        assert first == second
        assert request_kwargs(mock_http_client, 0) == request_kwargs(mock_http_client, 1)

    @pytest.mark.asyncio
    async def test_should_send_include_removed_when_false(
        self, drive_client: DriveClient, mock_http_client: AsyncMock
    ) -> None:
        """Verify includeRemoved is sent whenever set, unlike the true-only flags."""
        await drive_client.list_changes("8", include_removed=False, restrict_to_my_drive=False)

        params = request_kwargs(mock_http_client)["params"]
        assert params["includeRemoved"] == "false"
        assert "restrictToMyDrive" not in params
        assert params["fields"] == "nextPageToken,newStartPageToken,changes(*)"

    @pytest.mark.asyncio
    async def test_should_return_start_page_token(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify the start token is unwrapped to a string."""
        mock_http_client.request.return_value = make_response({"startPageToken": "42"})

        token = await drive_client.get_start_page_token(drive_id="d1", supports_all_drives=True)

        assert token == "42"
        assert request_kwargs(mock_http_client)["params"] == {"driveId": "d1", "supportsAllDrives": "true"}


# =============================================================================
# Connection test and lifecycle
# =============================================================================


@pytest.mark.unit
class TestConnectionAndLifecycle:
    """Tests for test_connection and HTTP client ownership."""

    @pytest.mark.asyncio
    async def test_connection_success(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify a reachable API reports the user's name."""
        mock_http_client.request.return_value = make_response(
            {"user": {"displayName": "Alice", "emailAddress": "alice@example.com"}}
        )

        result = await drive_client.test_connection()

        assert result == {"connected": True, "message": "Connected to Google Drive as Alice"}
        assert request_kwargs(mock_http_client)["params"] == {"fields": "user"}

    @pytest.mark.asyncio
    async def test_connection_failure_does_not_raise(
        self, drive_client: DriveClient, mock_http_client: AsyncMock, make_response
    ) -> None:
        """Verify a rejected token is reported rather than raised."""
        mock_http_client.request.return_value = make_response(status_code=401, json_data={})

        result = await drive_client.test_connection()

        assert result["connected"] is False
        assert "Authentication failed" in result["message"]

    @pytest.mark.asyncio
    async def test_shared_client_is_not_closed(
        self, credentials: TenantCredentials, mock_http_client: AsyncMock
    ) -> None:
        """Verify a shared pool outlives the DriveClient."""
        async with DriveClient(credentials, http_client=mock_http_client):
            pass

        mock_http_client.aclose.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_private_client_is_closed(self, credentials: TenantCredentials) -> None:
        """Verify a privately created client is closed on exit."""
        async with DriveClient(credentials, timeout=5.0) as client:
            http_client = client._http_client

        assert http_client.is_closed
