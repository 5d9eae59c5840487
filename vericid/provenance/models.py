"""Provenance model objects shared by the aggregator, fetch layer and API."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class TrustTier(str, Enum):
    """Coarse confidence derived from the number of distinct origins."""

    low = "low"
    medium = "medium"
    high = "high"


# Fractional seconds of any precision, ahead of an optional UTC offset
_FRACTION = re.compile(r"\.(\d+)(?=([+-]\d{2}:?\d{2})?$)")


def _six_digit_fraction(match: re.Match) -> str:
    return "." + (match.group(1) + "000000")[:6]


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp. Naive values are taken as UTC.

    Returns None for missing or unparseable values.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text[-1] in "zZ":
            text = text[:-1] + "+00:00"
        text = _FRACTION.sub(_six_digit_fraction, text, count=1)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class OriginRecord:
    """One report of where content was observed.

    ``explorer_url`` is derived from the network name and takes no part in
    equality or deduplication.
    """

    network: str
    address: str
    metadata: dict[str, str] = field(default_factory=dict)
    observed_at: datetime | None = None
    explorer_url: str | None = field(default=None, compare=False)

    @property
    def identity_key(self) -> tuple[str, str]:
        return (self.network.lower(), self.address)

    @classmethod
    def from_dict(cls, raw: Any) -> "OriginRecord | None":
        """Build a record from the provenance-source wire shape.

        Returns None when the record is unusable (no network or address).
        """
        if isinstance(raw, OriginRecord):
            if _blank(raw.network) or _blank(raw.address):
                return None
            return raw
        if not isinstance(raw, Mapping):
            return None

        network = raw.get("network")
        address = raw.get("address")
        if _blank(network) or _blank(address):
            return None

        metadata_raw = raw.get("metadata")
        metadata: dict[str, str] = {}
        if isinstance(metadata_raw, Mapping):
            metadata = {
                str(k): str(v) for k, v in metadata_raw.items() if v is not None
            }

        timestamp = raw.get("timestamp")
        if timestamp is None:
            timestamp = raw.get("observedAt", raw.get("observed_at"))

        return cls(
            network=network.strip(),
            address=address,
            metadata=metadata,
            observed_at=parse_timestamp(timestamp),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "network": self.network,
            "address": self.address,
            "metadata": dict(self.metadata),
            "timestamp": format_timestamp(self.observed_at),
            "explorer_url": self.explorer_url,
        }


@dataclass(frozen=True)
class ProvenanceReport:
    """Deduplicated, ranked origins for one content identifier.

    ``dropped_records`` counts malformed inputs and is not compared.
    """

    identifier: str
    origins: tuple[OriginRecord, ...] = ()
    total_origins: int = 0
    last_found: datetime | None = None
    trust_tier: TrustTier = TrustTier.low
    dropped_records: int = field(default=0, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "identifier": self.identifier,
            "origins": [o.to_dict() for o in self.origins],
            "total_origins": self.total_origins,
            "last_found": format_timestamp(self.last_found),
            "trust_tier": self.trust_tier.value,
            "dropped_records": self.dropped_records,
        }


@dataclass(frozen=True)
class SourceResult:
    """Outcome of one lookup of one identifier against one source."""

    source: str
    identifier: str
    origins: tuple[Any, ...] = ()
    error: str | None = None
    attempts: int | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "identifier": self.identifier,
            "origin_count": len(self.origins),
            "error": self.error,
            "attempts": self.attempts,
        }


@dataclass(frozen=True)
class AggregationResult:
    """A report plus the lookups that failed while gathering it.

    "Nothing found" and "could not ask" are kept apart here rather than
    being folded into the report's trust tier.
    """

    report: ProvenanceReport
    failures: tuple[SourceResult, ...] = ()
    sources_queried: int = 0

    @property
    def all_failed(self) -> bool:
        return self.sources_queried > 0 and len(self.failures) == self.sources_queried

    @property
    def partial(self) -> bool:
        return bool(self.failures) and not self.all_failed

    def to_dict(self) -> dict[str, Any]:
        data = self.report.to_dict()
        data["sources_queried"] = self.sources_queried
        data["failed_sources"] = [f.to_dict() for f in self.failures]
        data["all_sources_failed"] = self.all_failed
        return data
