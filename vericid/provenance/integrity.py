"""SHA-256 integrity checksums for exported provenance reports."""

from __future__ import annotations

import hashlib
import json
from typing import Any


class IntegrityVerifier:
    """Compute and verify SHA-256 checksums for JSON-ready report data.

    Keys are sorted for deterministic hashing.
    """

    @staticmethod
    def compute_checksum(data: dict[str, Any]) -> str:
        """Compute SHA-256 hex digest of a JSON-serialized dict."""
        serialized = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
        return hashlib.sha256(serialized.encode("utf-8")).hexdigest()

    @staticmethod
    def verify(data: dict[str, Any], expected_checksum: str) -> bool:
        """Verify that a dict matches the expected checksum."""
        return IntegrityVerifier.compute_checksum(data) == expected_checksum
