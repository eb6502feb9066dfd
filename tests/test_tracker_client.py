"""Tests for the Jira HTTP client."""

from __future__ import annotations

import httpx
import pytest

from issuedeck.core.config import TrackerSettings
from issuedeck.tracker import JiraClient, TrackerError, TransientTrackerError


def _settings() -> TrackerSettings:
    return TrackerSettings(domain="jira.test", username="user", password="secret")


def _client(handler) -> JiraClient:
    return JiraClient(_settings(), transport=httpx.MockTransport(handler))


def test_get_returns_decoded_json() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"key": "ABC-1"})

    with _client(handler) as client:
        data = client.get("/rest/api/2/issue/ABC-1", params={"fields": "summary"})

    assert data == {"key": "ABC-1"}
    request = seen[0]
    assert request.url.host == "jira.test"
    assert request.url.scheme == "https"
    assert request.url.params["fields"] == "summary"
    assert request.headers["Authorization"].startswith("Basic ")


def test_client_errors_are_not_transient() -> None:
    client = _client(lambda request: httpx.Response(404, json={}))

    with pytest.raises(TrackerError) as excinfo:
        client.get("/missing")

    assert not isinstance(excinfo.value, TransientTrackerError)
    assert "404" in str(excinfo.value)


def test_server_errors_are_transient() -> None:
    client = _client(lambda request: httpx.Response(503))

    with pytest.raises(TransientTrackerError):
        client.get("/busy")


def test_transport_errors_are_transient() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(TransientTrackerError):
        _client(handler).get("/down")


def test_invalid_json_raises() -> None:
    client = _client(lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(TrackerError, match="invalid JSON"):
        client.get("/html")
