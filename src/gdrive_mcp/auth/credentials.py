"""Per-request tenant credentials.

A single server deployment serves many tenants: every inbound request
carries its own OAuth access token in a header, and a fresh
``TenantCredentials`` is built for each tool invocation. Nothing here is
cached or written to disk.

Headers:
    X-Google-Access-Token: OAuth access token for the Drive API (required)
    X-Google-Base-URL: Override for the Drive metadata API root (optional)
"""

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from gdrive_mcp.errors import AuthenticationError

ACCESS_TOKEN_HEADER = "X-Google-Access-Token"
BASE_URL_HEADER = "X-Google-Base-URL"

REQUIRED_HEADERS = [ACCESS_TOKEN_HEADER]
OPTIONAL_HEADERS = [BASE_URL_HEADER]

MISSING_TOKEN_MESSAGE = f"No credentials provided. Include {ACCESS_TOKEN_HEADER} header."


class TenantCredentials(BaseModel):
    """Immutable credentials for one tool invocation.

    Attributes:
        access_token: OAuth bearer token. May be empty until validated.
        base_url: Optional override for the Drive metadata API root.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(default="", repr=False)
    base_url: str | None = None

    @property
    def has_token(self) -> bool:
        return bool(self.access_token.strip())


def parse_tenant_credentials(headers: Mapping[str, str]) -> TenantCredentials:
    """Build credentials from request headers.

    Header lookup is delegated to the mapping, so Starlette's
    case-insensitive ``Headers`` works as-is. Plain dicts are matched
    case-insensitively as well.

    Args:
        headers: Inbound request headers.

    Returns:
        TenantCredentials (token may be empty; see ``validate_credentials``).
    """
    lowered = {key.lower(): value for key, value in headers.items()}
    access_token = lowered.get(ACCESS_TOKEN_HEADER.lower(), "").strip()
    base_url = lowered.get(BASE_URL_HEADER.lower(), "").strip() or None
    return TenantCredentials(access_token=access_token, base_url=base_url)


def validate_credentials(credentials: TenantCredentials) -> None:
    """Ensure an access token is present.

    Raises:
        AuthenticationError: If the access token is empty.
    """
    if not credentials.has_token:
        raise AuthenticationError(MISSING_TOKEN_MESSAGE)
