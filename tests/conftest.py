import json
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest
import requests

from feedly_client.client import FeedlyClient
from feedly_client.config import ClientConfig


def make_response(
    status_code: int = 200,
    body: Any = None,
    text: Optional[str] = None,
    url: str = "https://cloud.feedly.com/v3/test",
) -> requests.Response:
    """Build a real requests.Response carrying ``body`` as JSON or ``text`` verbatim."""
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response.encoding = "utf-8"
    if text is not None:
        response._content = text.encode("utf-8")
    elif body is not None:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = b""
    return response


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(
        client_id="sandbox",
        client_secret="s3cret",
        sandbox=False,
        additional_headers={"X-Trace": "abc"},
    )


@pytest.fixture
def session() -> MagicMock:
    session = MagicMock(spec=requests.Session)
    session.request.return_value = make_response(body={"id": "c805fcbf"})
    return session


@pytest.fixture
def client(client_config: ClientConfig, session: MagicMock) -> FeedlyClient:
    return FeedlyClient(client_config, session=session)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "client:\n"
        "  client_id: sandbox\n"
        "  client_secret: s3cret\n"
        "  sandbox: true\n"
        "  token: stored-token\n"
        "log_level: WARNING\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture(name="make_response")
def make_response_fixture():
    return make_response
