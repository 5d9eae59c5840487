"""Thin wrappers for external provenance lookup services.

Each client is fully mockable and uses a configurable timeout and bounded
retries with linear backoff. No real HTTP calls are made in tests.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any

import httpx

from vericid.cid.encoder import CIDEncoder
from vericid.utils import InvalidCIDError, SourceLookupError

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 10.0
_DEFAULT_MAX_RETRIES = 3
_DEFAULT_RETRY_DELAY = 0.5


class _BaseClient:
    """Shared HTTP plumbing for provenance source clients."""

    def __init__(
        self,
        base_url: str,
        name: str | None = None,
        timeout: float = _DEFAULT_TIMEOUT,
        max_retries: int = _DEFAULT_MAX_RETRIES,
        retry_delay: float = _DEFAULT_RETRY_DELAY,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.name = name or httpx.URL(self.base_url).host or self.base_url
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.headers = headers or {}

    def _request(
        self,
        method: str,
        path: str = "",
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> dict | list:
        """Issue a request with retry logic.

        Returns the decoded JSON body. Raises ``SourceLookupError`` once
        every attempt has failed.
        """
        url = f"{self.base_url}/{path.lstrip('/')}" if path else self.base_url
        last_exc: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                resp = httpx.request(
                    method,
                    url,
                    params=params,
                    json=json_body,
                    headers=self.headers,
                    timeout=self.timeout,
                )
                # No Content, or an empty body: nothing recorded for this CID.
                if resp.status_code == 204 or not resp.content:
                    return []
                # Some services answer 404 with a JSON body meaning "no results".
                if resp.status_code == 404:
                    try:
                        return resp.json()
                    except (json.JSONDecodeError, ValueError):
                        return []
                resp.raise_for_status()
                return resp.json()
            except (httpx.HTTPStatusError, httpx.RequestError, json.JSONDecodeError, ValueError) as exc:
                last_exc = exc
                logger.warning(
                    "Request to %s failed (attempt %d/%d): %s",
                    url, attempt + 1, self.max_retries, exc,
                )
                if attempt < self.max_retries - 1:
                    time.sleep(self.retry_delay * (attempt + 1))

        raise SourceLookupError(
            f"Failed to reach {url} after {self.max_retries} attempts",
            attempts=self.max_retries,
        ) from last_exc

    @staticmethod
    def _origins_from(payload: Any) -> list[Any]:
        if isinstance(payload, dict):
            origins = payload.get("origins", [])
            return origins if isinstance(origins, list) else []
        return payload if isinstance(payload, list) else []


class WorkerSourceClient(_BaseClient):
    """Client for the VERICID lookup worker.

    The worker takes ``POST {"cidV0": ...}`` or ``POST {"cidV1": ...}`` and
    answers ``{"cid": ..., "origins": [...], "metadata": {...}}``.
    """

    def __init__(self, base_url: str, **kwargs: Any) -> None:
        super().__init__(base_url=base_url, **kwargs)
        self._encoder = CIDEncoder()

    def _field_for(self, identifier: str) -> str:
        try:
            version = self._encoder.decode(identifier).version
        except InvalidCIDError:
            return "cidV1"
        return "cidV0" if version == 0 else "cidV1"

    def lookup(self, identifier: str) -> list[dict[str, Any]]:
        """Return the origin records the worker knows for *identifier*."""
        payload = self._request("POST", json_body={self._field_for(identifier): identifier})
        return self._origins_from(payload)


class RestSourceClient(_BaseClient):
    """Client for REST-style origin indexes: ``GET {base}/origins/{cid}``.

    Accepts either a bare list of records or ``{"origins": [...]}``.
    """

    def lookup(self, identifier: str) -> list[dict[str, Any]]:
        payload = self._request("GET", f"origins/{identifier}")
        return self._origins_from(payload)
