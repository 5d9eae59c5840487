"""Merge origin lists from several provenance sources into one report.

Aggregation is synchronous, never raises on bad data, and treats its inputs
as immutable snapshots.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from vericid.provenance.models import (
    AggregationResult,
    OriginRecord,
    ProvenanceReport,
    SourceResult,
    TrustTier,
)
from vericid.provenance.networks import NetworkLinkResolver

logger = logging.getLogger(__name__)

# Trust tier bands, inclusive at the low end:
#   0-1  -> low
#   2-4  -> medium
#   5+   -> high
MEDIUM_TRUST_MIN = 2
HIGH_TRUST_MIN = 5

_NO_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)


def trust_tier_for(total_origins: int) -> TrustTier:
    if total_origins >= HIGH_TRUST_MIN:
        return TrustTier.high
    if total_origins >= MEDIUM_TRUST_MIN:
        return TrustTier.medium
    return TrustTier.low


def _is_later(candidate: datetime | None, current: datetime | None) -> bool:
    if candidate is None:
        return False
    return current is None or candidate > current


def _sort_key(entry: tuple[int, OriginRecord]) -> tuple[bool, datetime]:
    observed = entry[1].observed_at
    return (observed is not None, observed or _NO_TIMESTAMP)


class ProvenanceAggregator:
    """Merge origin records into one ranked report."""

    def __init__(self, resolver: NetworkLinkResolver | None = None) -> None:
        self._resolver = resolver or NetworkLinkResolver()

    @property
    def resolver(self) -> NetworkLinkResolver:
        return self._resolver

    def aggregate(
        self,
        identifier: str,
        source_lists: Iterable[Sequence[Any] | None],
    ) -> ProvenanceReport:
        """Build a ``ProvenanceReport`` from any number of origin lists.

        Records sharing ``(network.lower(), address)`` collapse to the one
        observed latest; on equal timestamps the earlier input wins. Output
        is ordered newest first, ties in input order.
        """
        best: dict[tuple[str, str], tuple[int, OriginRecord]] = {}
        dropped = 0
        position = 0

        for source in source_lists:
            for raw in source or ():
                record = OriginRecord.from_dict(raw)
                if record is None:
                    dropped += 1
                    continue
                key = record.identity_key
                current = best.get(key)
                if current is None or _is_later(record.observed_at, current[1].observed_at):
                    best[key] = (position, record)
                position += 1

        if dropped:
            logger.debug("Dropped %d malformed origin record(s) for %s", dropped, identifier)

        ordered = sorted(best.values(), key=lambda entry: entry[0])
        ordered = sorted(ordered, key=_sort_key, reverse=True)

        origins = tuple(self._with_link(record) for _, record in ordered)
        total = len(origins)
        return ProvenanceReport(
            identifier=identifier,
            origins=origins,
            total_origins=total,
            last_found=origins[0].observed_at if origins else None,
            trust_tier=trust_tier_for(total),
            dropped_records=dropped,
        )

    def aggregate_results(
        self,
        identifier: str,
        results: Sequence[SourceResult],
    ) -> AggregationResult:
        """Aggregate whichever lookups succeeded and keep the failures alongside."""
        failures = tuple(r for r in results if not r.ok)
        report = self.aggregate(identifier, [r.origins for r in results if r.ok])
        if failures:
            logger.info(
                "Aggregated %s with %d of %d lookups failed",
                identifier, len(failures), len(results),
            )
        return AggregationResult(
            report=report,
            failures=failures,
            sources_queried=len(results),
        )

    def _with_link(self, record: OriginRecord) -> OriginRecord:
        return replace(record, explorer_url=self._resolver.link(record.network, record.address))
