"""multipart/related body builder for Drive uploads.

Drive's ``uploadType=multipart`` expects exactly two parts: the JSON
metadata followed by the media bytes.
"""

import json
from typing import Any

MULTIPART_BOUNDARY = "-------314159265358979323846"
DEFAULT_CONTENT_MIME_TYPE = "text/plain"


def build_multipart_body(
    metadata: dict[str, Any],
    content: str,
    content_mime_type: str | None = None,
    boundary: str = MULTIPART_BOUNDARY,
) -> tuple[bytes, str]:
    """Encode metadata and inline content as a multipart/related body.

    Args:
        metadata: File metadata serialized as the first (JSON) part.
        content: Text content serialized verbatim as the second part.
        content_mime_type: MIME type of the content part (default text/plain).
        boundary: Boundary marker separating the parts.

    Returns:
        Tuple of (encoded body, Content-Type header value).
    """
    delimiter = f"\r\n--{boundary}\r\n"
    close_delimiter = f"\r\n--{boundary}--"

    body = (
        delimiter
        + "Content-Type: application/json; charset=UTF-8\r\n\r\n"
        + json.dumps(metadata, separators=(",", ":"))
        + delimiter
        + f"Content-Type: {content_mime_type or DEFAULT_CONTENT_MIME_TYPE}\r\n\r\n"
        + content
        + close_delimiter
    )
    return body.encode("utf-8"), f'multipart/related; boundary="{boundary}"'

