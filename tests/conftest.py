"""
Pytest configuration and fixtures for the Stables tool server tests.

Every test talks to a StablesClient whose transport is an httpx.MockTransport
backed by a Recorder: responses are queued up front, and every request that
reaches the "network" is recorded so tests can count and inspect them.
"""
import json
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
import pytest

from core.client import StablesClient
from core.config import StablesConfig

BASE_URL = "https://api.test.stables.money"
API_KEY = "sk_test_123"
NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class Recorder:
    """Queue of canned responses plus a log of the requests that were sent."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[Any] = []

    def add_response(
        self,
        status_code: int = 200,
        json: Any = None,
        content: Optional[bytes] = None,
    ) -> None:
        if content is None:
            content = b"" if json is None else _dumps(json)
        self._responses.append(httpx.Response(status_code, content=content))

    def add_exception(self, exception: Exception) -> None:
        self._responses.append(exception)

    @property
    def count(self) -> int:
        return len(self.requests)

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            return httpx.Response(200, content=b"{}")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _dumps(payload: Any) -> bytes:
    return json.dumps(payload).encode("utf-8")


def body_of(request: httpx.Request) -> Any:
    """Decode a recorded request's JSON body."""
    return json.loads(request.content)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def config() -> StablesConfig:
    return StablesConfig(api_key=API_KEY, base_url=BASE_URL)


@pytest.fixture
async def client(config, recorder):
    async with StablesClient(config, transport=httpx.MockTransport(recorder)) as stables:
        yield stables
