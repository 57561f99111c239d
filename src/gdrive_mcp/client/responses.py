"""Response models for the Drive request pipeline.

The pipeline returns one of three tagged variants depending on status code
and content type, and list operations normalize their payloads into
``Page`` / ``ChangeList`` so every listing tool has the same shape.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class JsonResult(BaseModel):
    """2xx response with a JSON body."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["json"] = "json"
    data: Any = None


class TextResult(BaseModel):
    """2xx response with a non-JSON body (exports, downloads)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str
    content_type: str | None = None


class EmptyResult(BaseModel):
    """204 No Content."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["empty"] = "empty"


ApiResult = Annotated[JsonResult | TextResult | EmptyResult, Field(discriminator="kind")]


def _token_or_none(token: Any) -> str | None:
    # Google never returns an empty cursor on purpose; treat "" as absent.
    if isinstance(token, str) and token:
        return token
    return None


class Page(BaseModel):
    """One page of a cursor-paginated listing.

    Attributes:
        items: Resources on this page, passed through unchanged.
        has_more: True iff the API returned a next-page token.
        next_page_token: Cursor for the following page, forwarded verbatim.
    """

    model_config = ConfigDict(populate_by_name=True)

    items: list[dict[str, Any]] = Field(default_factory=list)
    has_more: bool = Field(default=False, alias="hasMore")
    next_page_token: str | None = Field(default=None, alias="nextPageToken")

    @classmethod
    def from_response(cls, payload: dict[str, Any] | None, items_key: str) -> "Page":
        """Build a page from a raw ``{<items_key>: [...], nextPageToken?}`` payload."""
        payload = payload or {}
        token = _token_or_none(payload.get("nextPageToken"))
        return cls(
            items=payload.get(items_key) or [],
            has_more=token is not None,
            next_page_token=token,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize with API-style keys; ``nextPageToken`` omitted when absent."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ChangeList(BaseModel):
    """Result of polling the change feed.

    ``next_page_token`` means more changes can be read right now;
    ``new_start_page_token`` means the caller is caught up and should store
    that token for the next polling cycle.
    """

    model_config = ConfigDict(populate_by_name=True)

    changes: list[dict[str, Any]] = Field(default_factory=list)
    next_page_token: str | None = Field(default=None, alias="nextPageToken")
    new_start_page_token: str | None = Field(default=None, alias="newStartPageToken")

    @classmethod
    def from_response(cls, payload: dict[str, Any] | None) -> "ChangeList":
        payload = payload or {}
        return cls(
            changes=payload.get("changes") or [],
            next_page_token=_token_or_none(payload.get("nextPageToken")),
            new_start_page_token=_token_or_none(payload.get("newStartPageToken")),
        )

    @property
    def has_more(self) -> bool:
        return self.next_page_token is not None

    @property
    def caught_up(self) -> bool:
        return self.next_page_token is None and self.new_start_page_token is not None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
