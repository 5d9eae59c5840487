"""End-to-end call path: bytes -> Digest -> {v0, v1} -> lookups -> report."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path

from vericid.cid.encoder import CIDEncoder, CIDPair
from vericid.cid.hashing import ByteSource, Digest, HashEngine
from vericid.config import VericidSettings, get_config
from vericid.provenance.aggregator import ProvenanceAggregator
from vericid.provenance.models import AggregationResult
from vericid.sources.fetcher import ProvenanceFetcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentCheck:
    """Everything learned about one piece of content."""

    digest: Digest
    cids: CIDPair
    result: AggregationResult


class ProvenanceService:
    """Compose hashing, CID encoding, fetching and aggregation."""

    def __init__(
        self,
        fetcher: ProvenanceFetcher,
        engine: HashEngine | None = None,
        encoder: CIDEncoder | None = None,
        aggregator: ProvenanceAggregator | None = None,
        deadline: float | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.engine = engine or HashEngine()
        self.encoder = encoder or CIDEncoder()
        self.aggregator = aggregator or ProvenanceAggregator()
        self.deadline = deadline

    @classmethod
    def from_config(cls, config: VericidSettings | None = None) -> "ProvenanceService":
        config = config or get_config()
        return cls(
            fetcher=ProvenanceFetcher.from_config(config),
            engine=HashEngine(config.hash_algorithm, config.hash_chunk_size),
            deadline=config.fetch_deadline,
        )

    def identify(self, content: ByteSource) -> tuple[Digest, CIDPair]:
        """Hash content and return its digest and both CID forms."""
        digest = self.engine.digest(content)
        return digest, self.encoder.encode(digest)

    def identify_file(self, path: str | Path) -> tuple[Digest, CIDPair]:
        digest = self.engine.digest_file(path)
        return digest, self.encoder.encode(digest)

    def lookup(
        self,
        cids: CIDPair,
        cancel_event: threading.Event | None = None,
    ) -> AggregationResult:
        """Query every source with both CID forms and aggregate the answers.

        The report is keyed by the v1 identifier.
        """
        results = self.fetcher.fetch(
            [cids.v0, cids.v1],
            cancel_event=cancel_event,
            deadline=self.deadline,
        )
        result = self.aggregator.aggregate_results(cids.v1, results)
        logger.info(
            "Lookup %s: %d origin(s), tier=%s, %d failed lookup(s)",
            cids.v1,
            result.report.total_origins,
            result.report.trust_tier.value,
            len(result.failures),
        )
        return result

    def check(
        self,
        content: ByteSource,
        cancel_event: threading.Event | None = None,
    ) -> ContentCheck:
        digest, cids = self.identify(content)
        return ContentCheck(digest=digest, cids=cids, result=self.lookup(cids, cancel_event))

    def check_file(
        self,
        path: str | Path,
        cancel_event: threading.Event | None = None,
    ) -> ContentCheck:
        digest, cids = self.identify_file(path)
        return ContentCheck(digest=digest, cids=cids, result=self.lookup(cids, cancel_event))
