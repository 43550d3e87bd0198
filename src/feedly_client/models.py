"""Result types for Feedly API responses.

Feedly documents these payloads loosely and adds fields over time, so every
model keeps unknown keys (``extra="allow"``) and only identifiers are
required. Field names follow Python conventions; the API's camelCase names
are accepted as aliases and restored by ``model_dump(by_alias=True)``.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FeedlyModel(BaseModel):
    """Common settings for API payload models."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class TokenResult(FeedlyModel):
    """Answer of the OAuth token endpoint (code exchange or refresh)."""

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_type: Optional[str] = None
    expires_in: Optional[int] = None
    user_id: Optional[str] = Field(default=None, alias="id")
    plan: Optional[str] = None
    state: Optional[str] = None
    scope: Optional[str] = None


class Profile(FeedlyModel):
    """The authenticated user's profile (``GET /v3/user``)."""

    id: str
    email: Optional[str] = None
    given_name: Optional[str] = Field(default=None, alias="givenName")
    family_name: Optional[str] = Field(default=None, alias="familyName")
    full_name: Optional[str] = Field(default=None, alias="fullName")
    picture: Optional[str] = None
    locale: Optional[str] = None
    client: Optional[str] = None
    wave: Optional[str] = None
    created: Optional[int] = None

    @property
    def saved_tag_id(self) -> str:
        """Stream id of the user's "saved for later" tag."""
        return f"user/{self.id}/tag/global.saved"


class Category(FeedlyModel):
    id: str
    label: Optional[str] = None


class Subscription(FeedlyModel):
    """One feed the user follows (``GET /v3/subscriptions``)."""

    id: str
    title: Optional[str] = None
    website: Optional[str] = None
    categories: List[Category] = Field(default_factory=list)
    updated: Optional[int] = None
    subscribers: Optional[int] = None
    velocity: Optional[float] = None
    topics: List[str] = Field(default_factory=list)
    icon_url: Optional[str] = Field(default=None, alias="iconUrl")
    visual_url: Optional[str] = Field(default=None, alias="visualUrl")


class Origin(FeedlyModel):
    stream_id: Optional[str] = Field(default=None, alias="streamId")
    title: Optional[str] = None
    html_url: Optional[str] = Field(default=None, alias="htmlUrl")


class Link(FeedlyModel):
    href: str
    type: Optional[str] = None


class Content(FeedlyModel):
    content: str = ""
    direction: Optional[str] = None


class Entry(FeedlyModel):
    """A single article inside a stream."""

    id: str
    title: Optional[str] = None
    author: Optional[str] = None
    origin_id: Optional[str] = Field(default=None, alias="originId")
    fingerprint: Optional[str] = None
    published: Optional[int] = None
    crawled: Optional[int] = None
    unread: Optional[bool] = None
    origin: Optional[Origin] = None
    alternate: List[Link] = Field(default_factory=list)
    canonical: List[Link] = Field(default_factory=list)
    summary: Optional[Content] = None
    content: Optional[Content] = None
    keywords: List[str] = Field(default_factory=list)
    engagement: Optional[int] = None

    @property
    def link(self) -> Optional[str]:
        """First alternate (or canonical) URL of the article."""
        for links in (self.alternate, self.canonical):
            if links:
                return links[0].href
        return None


class StreamContents(FeedlyModel):
    """A page of entries from ``GET /v3/streams/contents``."""

    id: Optional[str] = None
    title: Optional[str] = None
    updated: Optional[int] = None
    continuation: Optional[str] = None
    items: List[Entry] = Field(default_factory=list)


@dataclass
class RawResponse:
    """Undecoded answer of a write operation.

    ``json`` is the parsed body when it holds valid JSON. It is None both for
    an empty body and for one that cannot be parsed, so check ``status_code``
    and ``text`` rather than reading None as success.
    """

    status_code: int
    headers: Dict[str, str]
    text: str
    json: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
