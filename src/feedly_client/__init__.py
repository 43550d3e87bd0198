"""Client for the Feedly Cloud API."""

__version__ = "0.1.0"

from .client import FeedlyClient
from .config import AppConfig, ClientConfig
from .errors import ConfigError, DecodeError, FeedlyError, TransportError
from .models import Entry, Profile, RawResponse, StreamContents, Subscription, TokenResult

__all__ = [
    "FeedlyClient",
    "AppConfig",
    "ClientConfig",
    "FeedlyError",
    "ConfigError",
    "TransportError",
    "DecodeError",
    "Entry",
    "Profile",
    "RawResponse",
    "StreamContents",
    "Subscription",
    "TokenResult",
]
