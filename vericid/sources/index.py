"""In-memory origin index - a provenance source backed by a dict."""

from __future__ import annotations

import copy
import logging
import threading
from pathlib import Path
from typing import Any

from vericid.utils import read_json

logger = logging.getLogger(__name__)


class InMemoryOriginIndex:
    """Thread-safe CID -> origin records map.

    Serves lookups like any remote source. Stored and returned records are
    deep copies so callers can never mutate the index through them.
    """

    name = "index"

    def __init__(self, entries: dict[str, list[dict[str, Any]]] | None = None) -> None:
        self._store: dict[str, list[dict[str, Any]]] = {}
        self._lock = threading.Lock()
        for identifier, origins in (entries or {}).items():
            self.add(identifier, origins)

    @classmethod
    def from_json(cls, path: str | Path) -> "InMemoryOriginIndex":
        """Load ``{cid: [records]}`` or ``{cid: {"origins": [records]}}`` from disk."""
        data = read_json(path)
        if not isinstance(data, dict):
            raise ValueError(f"Origin index {path} must be a JSON object keyed by CID")
        entries: dict[str, list[dict[str, Any]]] = {}
        for identifier, value in data.items():
            if isinstance(value, dict):
                value = value.get("origins", [])
            if isinstance(value, list):
                entries[identifier] = value
        logger.info("Loaded origin index from %s (%d identifiers)", path, len(entries))
        return cls(entries)

    # -- Writes ---------------------------------------------------------------

    def add(self, identifier: str, origins: list[dict[str, Any]]) -> None:
        """Append origin records for an identifier."""
        with self._lock:
            self._store.setdefault(identifier, []).extend(copy.deepcopy(list(origins)))

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    # -- Reads ----------------------------------------------------------------

    def lookup(self, identifier: str) -> list[dict[str, Any]]:
        """Return the records stored for *identifier* (empty if unknown)."""
        with self._lock:
            return copy.deepcopy(self._store.get(identifier, []))

    def identifiers(self) -> list[str]:
        with self._lock:
            return list(self._store)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, identifier: object) -> bool:
        with self._lock:
            return identifier in self._store
