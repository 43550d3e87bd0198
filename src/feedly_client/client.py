"""Feedly Cloud API client."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Type, TypeVar, Union
from urllib.parse import quote, urlencode

import requests
from pydantic import BaseModel, TypeAdapter, ValidationError

from . import __version__
from .config import ClientConfig
from .errors import DecodeError, TransportError
from .models import Profile, RawResponse, StreamContents, Subscription, TokenResult


logger = logging.getLogger(__name__)

OAUTH_SCOPE = "https://cloud.feedly.com/subscriptions"

ModelT = TypeVar("ModelT", bound=BaseModel)

_subscriptions_adapter = TypeAdapter(List[Subscription])


def to_timestamp_ms(value: Union[int, datetime]) -> int:
    """
    Convert a ``newerThan`` argument to integer epoch milliseconds.

    Naive datetimes are taken as UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp() * 1000)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"newer_than must be an int or datetime, not {type(value).__name__}")
    return value


class FeedlyClient:
    """Maps Feedly v3 endpoints onto method calls.

    Every call is a single independent request. Nothing is retried or
    cached, and the access token is passed explicitly to each method.
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            config: Validated client configuration
            session: Optional requests session, a new one is created if omitted
        """
        self.config = config
        self.session = session or self._create_session()

    @classmethod
    def from_options(cls, options: Mapping[str, Any], session: Optional[requests.Session] = None) -> "FeedlyClient":
        """
        Build a client from a plain options mapping.

        Raises:
            pydantic.ValidationError: If required options are missing or malformed
        """
        return cls(ClientConfig.model_validate(dict(options)), session=session)

    def _create_session(self) -> requests.Session:
        """Create HTTP session with default headers."""
        session = requests.Session()
        session.headers.update({
            'User-Agent': f'feedly-client/{__version__}'
        })
        return session

    @property
    def service_host(self) -> str:
        return self.config.service_host

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "FeedlyClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # OAuth

    def get_code_url(self, callback_url: str) -> str:
        """
        Build the URL the user is sent to for authorizing this client.

        Args:
            callback_url: Redirect URI registered for the client

        Returns:
            Authorization URL; no request is made
        """
        query = urlencode([
            ("client_id", self.config.client_id),
            ("redirect_uri", callback_url),
            ("scope", OAUTH_SCOPE),
            ("response_type", "code"),
        ])
        return f"{self._get_endpoint('v3/auth/auth')}?{query}"

    def get_access_token(self, redirect_uri: str, code: str) -> TokenResult:
        """
        Exchange an authorization code for an access token.

        Args:
            redirect_uri: The callback URL used to obtain the code
            code: Authorization code returned to the callback

        Returns:
            TokenResult with access and refresh tokens

        Raises:
            TransportError: On network failure
            DecodeError: If the response is not a JSON object
        """
        params = {
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "grant_type": "authorization_code",
            "redirect_uri": redirect_uri,
            "code": code,
        }
        response = self._request("POST", "v3/auth/token", data=params)
        return self._decode_model(response, TokenResult)

    def refresh_access_token(self, refresh_token: str) -> TokenResult:
        """
        Obtain a fresh access token from a refresh token.

        Raises:
            TransportError: On network failure
            DecodeError: If the response is not a JSON object
        """
        params = {
            "refresh_token": refresh_token,
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "grant_type": "refresh_token",
        }
        response = self._request("POST", "v3/auth/token", data=params)
        return self._decode_model(response, TokenResult)

    # Reading

    def get_user_profile(self, access_token: str) -> Profile:
        """Fetch the profile of the user owning ``access_token``."""
        response = self._request("GET", "v3/user", access_token=access_token)
        return self._decode_model(response, Profile)

    def get_user_subscriptions(self, access_token: str) -> List[Subscription]:
        """Fetch every feed the user is subscribed to."""
        response = self._request("GET", "v3/subscriptions", access_token=access_token)
        payload = self._decode_json(response)
        try:
            return _subscriptions_adapter.validate_python(payload)
        except ValidationError as e:
            raise DecodeError(
                f"Unexpected subscriptions payload: {e.error_count()} validation errors",
                url=response.url,
                status_code=response.status_code,
                body=response.text,
            ) from e

    def get_feed_content(
        self,
        access_token: str,
        stream_id: str,
        unread_only: bool,
        newer_than: Union[int, datetime],
    ) -> StreamContents:
        """
        Fetch entries of a stream (feed, category or tag).

        Args:
            access_token: OAuth access token
            stream_id: Feedly stream id, e.g. ``feed/http://example.com/rss``
            unread_only: Only return unread entries
            newer_than: Epoch milliseconds or datetime; older entries are skipped

        Returns:
            StreamContents with the matching entries
        """
        params = {
            "streamId": stream_id,
            "unreadOnly": "true" if unread_only else "false",
            "newerThan": str(to_timestamp_ms(newer_than)),
        }
        response = self._request("GET", "v3/streams/contents", access_token=access_token, params=params)
        return self._decode_model(response, StreamContents)

    # Writing

    def mark_article_read(self, access_token: str, entry_ids: Sequence[str]) -> RawResponse:
        """
        Mark one or more entries as read.

        Returns the raw response; Feedly answers these calls with an empty body.
        """
        body = {
            "action": "markAsRead",
            "type": "entries",
            "entryIds": list(entry_ids),
        }
        response = self._request("POST", "v3/markers", access_token=access_token, json=body)
        return self._raw(response)

    def save_for_later(self, access_token: str, user_id: str, entry_ids: Sequence[str]) -> RawResponse:
        """
        Tag one or more entries with the user's ``global.saved`` tag.

        Args:
            access_token: OAuth access token
            user_id: Feedly user id (``Profile.id``)
            entry_ids: Entries to save
        """
        tag_id = quote(f"user/{user_id}/tag/global.saved", safe="")
        body = {"entryIds": list(entry_ids)}
        response = self._request("PUT", f"v3/tags/{tag_id}", access_token=access_token, json=body)
        return self._raw(response)

    # Plumbing

    def _get_endpoint(self, path: str) -> str:
        return f"https://{self.service_host}/{path}"

    def _headers(self, access_token: Optional[str], json_body: bool) -> Dict[str, str]:
        # Content-Type and Authorization are owned by the call
        headers = {
            name: value
            for name, value in self.config.additional_headers.items()
            if name.lower() != "content-type" and not (access_token is not None and name.lower() == "authorization")
        }
        if access_token is not None:
            headers["Authorization"] = f"OAuth {access_token}"
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        access_token: Optional[str] = None,
        params: Optional[Dict[str, str]] = None,
        data: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        url = self._get_endpoint(path)
        headers = self._headers(access_token, json_body=json is not None)
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                params=params,
                data=data,
                json=json,
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise TransportError(f"{method} {url} failed: {e}", method=method, url=url) from e

        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    def _decode_json(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"Malformed JSON from {response.url} (HTTP {response.status_code})")
            raise DecodeError(
                f"Malformed JSON body: {e}",
                url=response.url,
                status_code=response.status_code,
                body=response.text,
            ) from e

    def _decode_model(self, response: requests.Response, model: Type[ModelT]) -> ModelT:
        payload = self._decode_json(response)
        if not isinstance(payload, dict):
            raise DecodeError(
                f"Expected a JSON object, got {type(payload).__name__}",
                url=response.url,
                status_code=response.status_code,
                body=response.text,
            )
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(
                f"Unexpected {model.__name__} payload: {e.error_count()} validation errors",
                url=response.url,
                status_code=response.status_code,
                body=response.text,
            ) from e

    def _raw(self, response: requests.Response) -> RawResponse:
        try:
            payload = response.json() if response.content else None
        except ValueError:
            payload = None

        return RawResponse(
            status_code=int(response.status_code),
            headers={k.lower(): v for k, v in response.headers.items()},
            text=response.text,
            json=payload,
        )
