# tests/test_google_client.py
from datetime import timedelta
from http import HTTPStatus
from typing import Any, Dict, Optional

import pytest

from hoozin.services.google_client import (
    AuthenticationRequiredError,
    GoogleClient,
    GoogleClientError,
)
from hoozin.services.kv_store import MemoryKeyValueStore, Namespace
from hoozin.services.request_cache import RequestCache
from hoozin.services.settings_store import SettingsStore, TokenResponse


class _FakeResponse:
    def __init__(self, status_code: int, json_data: Any):
        self.status_code = status_code
        self._json_data = json_data
        # For debugging / error messages
        self.text = str(json_data)

    def json(self) -> Any:
        return self._json_data


class _FakeAsyncClient:
    """
    Minimal stand-in for httpx.AsyncClient used in tests.

    Captures the last request and answers with `next_status` / `next_json`.
    """

    last_request: Dict[str, Any] = {}
    call_count: int = 0
    next_status: int = HTTPStatus.OK
    next_json: Any = {"ok": True}

    def __init__(self, timeout: float | None = None):
        self._timeout = timeout

    async def __aenter__(self) -> "_FakeAsyncClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, Any]] = None,
        **kwargs,
    ) -> _FakeResponse:
        _FakeAsyncClient.last_request = {"method": method, "url": url, "headers": headers}
        _FakeAsyncClient.call_count += 1
        return _FakeResponse(_FakeAsyncClient.next_status, _FakeAsyncClient.next_json)


@pytest.fixture()
def fake_httpx(monkeypatch):
    import httpx

    monkeypatch.setattr(httpx, "AsyncClient", _FakeAsyncClient)
    _FakeAsyncClient.last_request = {}
    _FakeAsyncClient.call_count = 0
    _FakeAsyncClient.next_status = HTTPStatus.OK
    _FakeAsyncClient.next_json = {"ok": True}
    return _FakeAsyncClient


async def _client(with_token: bool = True):
    backing: dict = {}
    settings_store = SettingsStore(MemoryKeyValueStore(Namespace.SETTINGS, backing=backing))
    cache_store = MemoryKeyValueStore(Namespace.CACHE, backing=backing)
    if with_token:
        await settings_store.set_token(TokenResponse(access_token="tok-123", expires_in=3600))
    client = GoogleClient(RequestCache(cache_store), settings_store, ttl=timedelta(minutes=5))
    return client, settings_store, cache_store


@pytest.mark.asyncio
async def test_get_json_sends_bearer_token_and_normalized_url(fake_httpx):
    client, _, _ = await _client()

    data = await client.get_json("https://WWW.googleapis.com/calendar/v3/x", params={"b": 2, "a": 1})

    assert data == {"ok": True}
    last = fake_httpx.last_request
    assert last["method"] == "GET"
    assert last["url"] == "https://www.googleapis.com/calendar/v3/x?a=1&b=2"
    assert last["headers"]["Authorization"] == "Bearer tok-123"


@pytest.mark.asyncio
async def test_equal_requests_hit_the_network_once(fake_httpx):
    client, _, _ = await _client()

    await client.get_json("https://example.com/v1/items", params={"a": 1, "b": 2})
    await client.get_json("https://EXAMPLE.com/v1/items?b=2", params={"a": "1"})

    assert fake_httpx.call_count == 1


@pytest.mark.asyncio
async def test_unauthorized_clears_token_and_is_not_cached(fake_httpx):
    client, settings_store, cache_store = await _client()
    fake_httpx.next_status = HTTPStatus.UNAUTHORIZED
    fake_httpx.next_json = {"error": {"code": 401}}

    with pytest.raises(AuthenticationRequiredError):
        await client.get_json("https://example.com/v1/items")

    assert await settings_store.get_token() is None
    assert await cache_store.items() == []


@pytest.mark.asyncio
async def test_missing_token_requires_authentication_without_network(fake_httpx):
    client, _, _ = await _client(with_token=False)

    with pytest.raises(AuthenticationRequiredError):
        await client.get_json("https://example.com/v1/items")

    assert fake_httpx.call_count == 0


@pytest.mark.asyncio
async def test_server_error_raises_client_error_and_is_not_cached(fake_httpx):
    client, settings_store, cache_store = await _client()
    fake_httpx.next_status = HTTPStatus.INTERNAL_SERVER_ERROR
    fake_httpx.next_json = {"error": "boom"}

    with pytest.raises(GoogleClientError) as excinfo:
        await client.get_json("https://example.com/v1/items")

    assert not isinstance(excinfo.value, AuthenticationRequiredError)
    assert await cache_store.items() == []
    # Only 401 clears the credential.
    assert await settings_store.get_token() is not None
