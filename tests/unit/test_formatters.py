"""Unit tests for JSON/markdown rendering and error payloads."""

import json

import pytest

from gdrive_mcp.errors import NotFoundError, RateLimitError
from gdrive_mcp.formatters import (
    format_bytes,
    format_date,
    format_error,
    format_key,
    format_response,
    truncate,
)


@pytest.mark.unit
class TestFormatResponse:
    def test_json_is_indented(self) -> None:
        data = {"items": [{"id": "f1"}], "hasMore": False}

        assert format_response(data) == json.dumps(data, indent=2)

    def test_markdown_file_page(self) -> None:
        page = {
            "items": [
                {"id": "f1", "name": "Reports", "mimeType": "application/vnd.google-apps.folder"},
                {
                    "id": "f2",
                    "name": "q1.csv",
                    "mimeType": "text/csv",
                    "size": "1536",
                    "modifiedTime": "2024-01-05T10:00:00.000Z",
                },
            ],
            "hasMore": True,
            "nextPageToken": "tok2",
        }

        text = format_response(page, "markdown", "files")

        assert text.startswith("## Files")
        assert "**Showing:** 2" in text
        assert "**More available:** Yes (nextPageToken: `tok2`)" in text
        assert "| ID | Name | Type | Size | Modified |" in text
        assert "| f1 | Reports | 📁 Folder | - | - |" in text
        assert "| f2 | q1.csv | text/csv | 1.5 KB | Jan 5, 2024 |" in text

    def test_markdown_empty_page(self) -> None:
        text = format_response({"items": [], "hasMore": False}, "markdown", "comments")

        assert "**Showing:** 0" in text
        assert "_No items found._" in text
        assert "More available" not in text

    def test_markdown_comment_row_truncates_content(self) -> None:
        page = {
            "items": [
                {
                    "id": "c1",
                    "content": "x" * 60,
                    "author": {"displayName": "Alice"},
                    "createdTime": "2024-03-15T08:00:00Z",
                    "resolved": True,
                }
            ],
            "hasMore": False,
        }

        text = format_response(page, "markdown", "comments")

        assert f"| c1 | {'x' * 50}... | Alice | Mar 15, 2024 | Yes |" in text

    def test_markdown_single_object(self) -> None:
        text = format_response(
            {"id": "p1", "role": "writer", "deleted": False, "permissionDetails": [{"inherited": True}]},
            "markdown",
            "permissions",
        )

        assert text.startswith("## Permission")
        assert "**Role:** writer" in text
        assert "**Deleted:** false" in text
        assert "**Permission Details:**" in text
        assert "```json" in text

    def test_markdown_generic_table_caps_columns(self) -> None:
        items = [{"a": 1, "b": 2, "c": 3, "d": 4, "e": 5, "f": 6}]

        text = format_response({"items": items, "hasMore": False}, "markdown", "apps")

        assert "| a | b | c | d | e |" in text
        assert "| f" not in text


@pytest.mark.unit
class TestFormatError:
    def test_retryable_error_is_marked(self) -> None:
        payload = format_error(RateLimitError(retry_after_seconds=30))

        assert payload["error"] == "Error: Rate limit exceeded (retryable)"
        assert payload["details"]["retryAfterSeconds"] == 30

    def test_non_retryable_error(self) -> None:
        payload = format_error(NotFoundError("Resource", "/files/abc"))

        assert payload["error"] == "Error: Resource not found: /files/abc"
        assert payload["details"]["code"] == "NOT_FOUND"

    def test_plain_exception(self) -> None:
        payload = format_error(ValueError("Unknown tool: nope"))

        assert payload == {
            "error": "Error: Unknown tool: nope",
            "details": {"name": "ValueError", "message": "Unknown tool: nope"},
        }


@pytest.mark.unit
class TestHelpers:
    @pytest.mark.parametrize(
        ("size", "expected"),
        [(0, "0 B"), (512, "512 B"), (1536, "1.5 KB"), (1048576, "1 MB"), (1073741824, "1 GB")],
    )
    def test_format_bytes(self, size: int, expected: str) -> None:
        assert format_bytes(size) == expected

    def test_format_date(self) -> None:
        assert format_date("2024-01-05T10:00:00.000Z") == "Jan 5, 2024"
        assert format_date("not a date") == "not a date"

    def test_format_key(self) -> None:
        assert format_key("modifiedTime") == "Modified Time"
        assert format_key("id") == "Id"

    def test_truncate(self) -> None:
        assert truncate("short", 10) == "short"
        assert truncate("abcdefghij", 4) == "abcd..."
