"""Exceptions raised by the Feedly client."""

from typing import Optional


class FeedlyError(Exception):
    """Base class for all client errors."""


class ConfigError(FeedlyError):
    """Configuration file is missing or unreadable."""


class TransportError(FeedlyError):
    """The HTTP request could not be completed (connection, DNS, timeout)."""

    def __init__(self, message: str, method: str, url: str):
        super().__init__(message)
        self.method = method
        self.url = url


class DecodeError(FeedlyError):
    """The response body is not the JSON document the endpoint promises."""

    BODY_EXCERPT = 200

    def __init__(self, message: str, url: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.body = body[:self.BODY_EXCERPT]

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code is None:
            return base
        return f"{base} (HTTP {self.status_code})"
