"""Immich client tests against httpx.MockTransport."""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import httpx
import pytest

from catalog.immich import ImmichClient
from processor.models import SyncStatus


def _client(handler) -> ImmichClient:
    return ImmichClient("http://immich.local:2283/", "key-123", transport=httpx.MockTransport(handler))


def test_search_sends_filename_and_api_key():
    seen = {}

    def handler(request: httpx.Request):
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"assets": {"total": 2, "items": []}})

    with _client(handler) as client:
        assert client.search_by_filename("IMG_0001.jpg") == 2

    assert seen["method"] == "POST"
    assert seen["url"] == "http://immich.local:2283/api/search/metadata"
    assert seen["key"] == "key-123"
    assert seen["body"] == {"originalFileName": "IMG_0001.jpg"}


def test_sync_status_synced_when_total_positive():
    client = _client(lambda r: httpx.Response(200, json={"assets": {"total": 1}}))
    assert client.sync_status("a.jpg") is SyncStatus.SYNCED


def test_sync_status_not_synced_when_total_zero():
    client = _client(lambda r: httpx.Response(200, json={"assets": {"total": 0}}))
    assert client.sync_status("a.jpg") is SyncStatus.NOT_SYNCED


def test_missing_total_means_not_synced():
    client = _client(lambda r: httpx.Response(200, json={"albums": {}}))
    assert client.sync_status("a.jpg") is SyncStatus.NOT_SYNCED


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"message": "boom"}),
        httpx.Response(401, json={"message": "unauthorized"}),
        httpx.Response(200, content=b""),
        httpx.Response(200, content=b"<html>proxy error</html>"),
        httpx.Response(200, json=["not", "a", "dict"]),
        httpx.Response(200, json={"assets": {"total": "many"}}),
    ],
)
def test_bad_responses_are_query_failures(response):
    client = _client(lambda r: response)
    status = client.sync_status("a.jpg")
    assert status is SyncStatus.QUERY_FAILED
    assert not status.is_synced


def test_transport_error_is_query_failure():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    assert _client(handler).sync_status("a.jpg") is SyncStatus.QUERY_FAILED


def test_ping_returns_status_code():
    assert _client(lambda r: httpx.Response(200, json={"res": "pong"})).ping() == 200
    assert _client(lambda r: httpx.Response(401)).ping() == 401


def test_ping_raises_when_unreachable():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(httpx.HTTPError):
        _client(handler).ping()


def test_server_version():
    client = _client(lambda r: httpx.Response(200, json={"major": 1, "minor": 118, "patch": 2}))
    assert client.server_version() == "1.118.2"
    assert _client(lambda r: httpx.Response(404)).server_version() == "unknown"
