"""Error taxonomy for Google Drive API calls.

Every failure raised by the request pipeline is an ``ApiError`` (or a
subclass), so the tool boundary can convert any of them into a structured
failure payload with a single ``except`` clause.

Hierarchy:
    ApiError
    ├── AuthenticationError  (401, or no token supplied)
    ├── ForbiddenError       (403)
    ├── NotFoundError        (404)
    └── RateLimitError       (429, retryable)
"""

from typing import Any

DEFAULT_RETRY_AFTER_SECONDS = 60


class ApiError(Exception):
    """Generic Google Drive API failure.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code, if the error came from a response.
        code: Stable machine-readable error code.
        retryable: Whether the caller may retry the same request later.
    """

    code = "API_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.retryable = retryable


class AuthenticationError(ApiError):
    """Missing or rejected OAuth access token."""

    code = "AUTHENTICATION_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=401)


class ForbiddenError(ApiError):
    """The token is valid but lacks permission for the resource."""

    code = "FORBIDDEN"

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message, status_code=403)


class NotFoundError(ApiError):
    """The requested resource does not exist (or is invisible to the caller)."""

    code = "NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(f"{resource_type} not found: {resource_id}", status_code=404)
        self.resource_type = resource_type
        self.resource_id = resource_id


class RateLimitError(ApiError):
    """Google throttled the request.

    Attributes:
        retry_after_seconds: Seconds the caller should wait before retrying.
    """

    code = "RATE_LIMITED"

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after_seconds: int = DEFAULT_RETRY_AFTER_SECONDS,
    ) -> None:
        super().__init__(message, status_code=429, retryable=True)
        self.retry_after_seconds = retry_after_seconds


def format_error_for_logging(error: BaseException) -> dict[str, Any]:
    """Project an exception into a JSON-safe dictionary.

    Args:
        error: Any exception raised while handling a tool call.

    Returns:
        Dictionary with name, message and, for API errors, code, status
        and retry metadata.
    """
    if isinstance(error, ApiError):
        details: dict[str, Any] = {
            "name": type(error).__name__,
            "message": error.message,
            "code": error.code,
            "retryable": error.retryable,
        }
        if error.status_code is not None:
            details["statusCode"] = error.status_code
        if isinstance(error, RateLimitError):
            details["retryAfterSeconds"] = error.retry_after_seconds
        return details

    return {"name": type(error).__name__, "message": str(error)}
