from typing import Any, Callable

import fakeredis
import httpx
import pytest

from wpsuggest.cache import SuggestionCache
from wpsuggest.client import WordPressComClient


@pytest.fixture
def redis_client():
    r = fakeredis.FakeRedis(decode_responses=True)
    yield r
    r.flushdb()


@pytest.fixture
def cache(redis_client):
    return SuggestionCache(redis_client, key_prefix="test:cache")


class FakeWordPressCom:
    """Routes requests to handler and records every one it sees."""

    def __init__(self, handler: Callable[[httpx.Request], Any]) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response

    def client(self) -> WordPressComClient:
        return WordPressComClient("https://wpcom.test", transport=httpx.MockTransport(self))


@pytest.fixture
def fake_api():
    def make(handler: Callable[[httpx.Request], Any]) -> FakeWordPressCom:
        return FakeWordPressCom(handler)

    return make
