"""Unit tests for provenance source HTTP clients in vericid/sources/api_clients.py.

Covers:
  - Workers answering 204 No Content or an empty body
  - 404 responses carrying a JSON "not found" body
  - HTML error pages instead of JSON
  - Retry with linear backoff, then SourceLookupError
  - Request shape for the lookup worker and REST indexes

All tests use unittest.mock - no real HTTP calls are made.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock, call, patch

import httpx
import pytest

from tests.conftest import HELLO_CID_V0, HELLO_CID_V1
from vericid.sources.api_clients import RestSourceClient, WorkerSourceClient, _BaseClient
from vericid.utils import SourceLookupError

WORKER_URL = "https://lookup.example.workers.dev"


def _make_mock_response(
    status_code: int = 200,
    content: bytes = b"",
    json_data: dict | list | None = None,
) -> MagicMock:
    """Build a mock httpx.Response with the given status, content, and json."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = content
    resp.raise_for_status = MagicMock()
    if json_data is not None:
        resp.json.return_value = json_data
        if not content:
            resp.content = json.dumps(json_data).encode()
    else:
        # Simulate JSONDecodeError for empty or non-JSON content
        resp.json.side_effect = json.JSONDecodeError("Expecting value", "", 0)
    return resp


def _status_error(status_code: int) -> MagicMock:
    resp = _make_mock_response(status_code=status_code, content=b"error")
    resp.raise_for_status.side_effect = httpx.HTTPStatusError(
        f"{status_code} error", request=MagicMock(), response=MagicMock(status_code=status_code)
    )
    return resp


# ---------------------------------------------------------------------------
# 1. Empty responses
# ---------------------------------------------------------------------------
class TestEmptyResponses:
    def test_204_returns_empty_list(self) -> None:
        resp = _make_mock_response(status_code=204)
        with patch("vericid.sources.api_clients.httpx.request", return_value=resp):
            result = _BaseClient(base_url="https://example.com")._request("GET", "/x")
        assert result == []

    def test_200_with_empty_body_returns_empty_list(self) -> None:
        resp = _make_mock_response(status_code=200, content=b"")
        with patch("vericid.sources.api_clients.httpx.request", return_value=resp):
            result = _BaseClient(base_url="https://example.com")._request("GET")
        assert result == []

    def test_404_with_json_body_is_a_result(self) -> None:
        body = {"error": "No matches found", "cid": HELLO_CID_V1, "origins": []}
        resp = _make_mock_response(status_code=404, json_data=body)
        with patch("vericid.sources.api_clients.httpx.request", return_value=resp):
            origins = WorkerSourceClient(WORKER_URL).lookup(HELLO_CID_V1)
        assert origins == []

    def test_404_without_json_returns_empty_list(self) -> None:
        resp = _make_mock_response(status_code=404, content=b"Not Found")
        with patch("vericid.sources.api_clients.httpx.request", return_value=resp):
            result = _BaseClient(base_url="https://example.com")._request("GET")
        assert result == []


# ---------------------------------------------------------------------------
# 2. Retries and failures
# ---------------------------------------------------------------------------
class TestRetries:
    def test_html_error_page_retried_then_raises(self) -> None:
        html = b"<html><body>503 Service Unavailable</body></html>"
        resp = _make_mock_response(status_code=200, content=html)
        with patch("vericid.sources.api_clients.httpx.request", return_value=resp) as mock_req, \
                patch("vericid.sources.api_clients.time.sleep") as mock_sleep:
            client = _BaseClient(base_url="https://example.com", max_retries=3, retry_delay=0.5)
            with pytest.raises(SourceLookupError) as excinfo:
                client._request("GET")
        assert mock_req.call_count == 3
        assert excinfo.value.attempts == 3
        # linear backoff between attempts, none after the last
        assert mock_sleep.call_args_list == [call(0.5), call(1.0)]

    def test_connection_error_raises_after_retries(self) -> None:
        with patch(
            "vericid.sources.api_clients.httpx.request",
            side_effect=httpx.ConnectError("connection refused"),
        ) as mock_req, patch("vericid.sources.api_clients.time.sleep"):
            client = WorkerSourceClient(WORKER_URL, max_retries=2)
            with pytest.raises(SourceLookupError, match="after 2 attempts"):
                client.lookup(HELLO_CID_V1)
        assert mock_req.call_count == 2

    def test_server_error_recovers_on_retry(self, worker_origins) -> None:
        ok = _make_mock_response(json_data={"cid": HELLO_CID_V1, "origins": worker_origins})
        with patch(
            "vericid.sources.api_clients.httpx.request",
            side_effect=[_status_error(503), ok],
        ) as mock_req, patch("vericid.sources.api_clients.time.sleep"):
            origins = WorkerSourceClient(WORKER_URL).lookup(HELLO_CID_V1)
        assert mock_req.call_count == 2
        assert origins == worker_origins

    def test_source_lookup_error_is_connection_error(self) -> None:
        assert issubclass(SourceLookupError, ConnectionError)

    def test_at_least_one_attempt(self) -> None:
        assert _BaseClient(base_url="https://example.com", max_retries=0).max_retries == 1


# ---------------------------------------------------------------------------
# 3. Lookup worker client
# ---------------------------------------------------------------------------
class TestWorkerSourceClient:
    def test_posts_v1_field(self, worker_origins) -> None:
        resp = _make_mock_response(json_data={"cid": HELLO_CID_V1, "origins": worker_origins})
        with patch("vericid.sources.api_clients.httpx.request", return_value=resp) as mock_req:
            client = WorkerSourceClient(WORKER_URL + "/", timeout=2.5)
            origins = client.lookup(HELLO_CID_V1)
        assert origins == worker_origins
        args, kwargs = mock_req.call_args
        assert args == ("POST", WORKER_URL)
        assert kwargs["json"] == {"cidV1": HELLO_CID_V1}
        assert kwargs["timeout"] == 2.5

    def test_posts_v0_field(self) -> None:
        resp = _make_mock_response(json_data={"origins": []})
        with patch("vericid.sources.api_clients.httpx.request", return_value=resp) as mock_req:
            WorkerSourceClient(WORKER_URL).lookup(HELLO_CID_V0)
        assert mock_req.call_args.kwargs["json"] == {"cidV0": HELLO_CID_V0}

    def test_undecodable_identifier_sent_as_v1(self) -> None:
        resp = _make_mock_response(json_data={"origins": []})
        with patch("vericid.sources.api_clients.httpx.request", return_value=resp) as mock_req:
            WorkerSourceClient(WORKER_URL).lookup("opaque-id")
        assert mock_req.call_args.kwargs["json"] == {"cidV1": "opaque-id"}

    def test_name_defaults_to_host(self) -> None:
        assert WorkerSourceClient(WORKER_URL).name == "lookup.example.workers.dev"
        assert WorkerSourceClient(WORKER_URL, name="primary").name == "primary"

    def test_malformed_origins_field(self) -> None:
        resp = _make_mock_response(json_data={"origins": "nope"})
        with patch("vericid.sources.api_clients.httpx.request", return_value=resp):
            assert WorkerSourceClient(WORKER_URL).lookup(HELLO_CID_V1) == []


# ---------------------------------------------------------------------------
# 4. REST index client
# ---------------------------------------------------------------------------
class TestRestSourceClient:
    def test_get_origins_path(self, worker_origins) -> None:
        resp = _make_mock_response(json_data=worker_origins)
        with patch("vericid.sources.api_clients.httpx.request", return_value=resp) as mock_req:
            client = RestSourceClient("https://index.example.com/api", headers={"X-Key": "k"})
            origins = client.lookup(HELLO_CID_V1)
        assert origins == worker_origins
        args, kwargs = mock_req.call_args
        assert args == ("GET", f"https://index.example.com/api/origins/{HELLO_CID_V1}")
        assert kwargs["headers"] == {"X-Key": "k"}

    def test_wrapped_origins(self, worker_origins) -> None:
        resp = _make_mock_response(json_data={"origins": worker_origins})
        with patch("vericid.sources.api_clients.httpx.request", return_value=resp):
            assert RestSourceClient("https://index.example.com").lookup(HELLO_CID_V1) == worker_origins
