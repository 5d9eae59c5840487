"""Shared FastAPI dependencies - lazily built from configuration."""

import logging

from vericid.cid.encoder import CIDEncoder
from vericid.cid.hashing import HashEngine
from vericid.config import get_config
from vericid.provenance.aggregator import ProvenanceAggregator
from vericid.sources.fetcher import ProvenanceFetcher
from vericid.sources.index import InMemoryOriginIndex

logger = logging.getLogger(__name__)

# Lazy singletons
_index: InMemoryOriginIndex | None = None
_fetcher: ProvenanceFetcher | None = None


def get_index() -> InMemoryOriginIndex:
    """Origin index served by this API (empty unless a JSON file is configured)."""
    global _index
    if _index is None:
        cfg = get_config()
        if cfg.origin_index_path and cfg.origin_index_path.exists():
            _index = InMemoryOriginIndex.from_json(cfg.origin_index_path)
        else:
            if cfg.origin_index_path:
                logger.warning("Origin index %s not found; starting empty", cfg.origin_index_path)
            _index = InMemoryOriginIndex()
    return _index


def get_fetcher() -> ProvenanceFetcher:
    """Fetcher over the local index plus any configured remote workers."""
    global _fetcher
    if _fetcher is None:
        cfg = get_config()
        index = get_index() if cfg.origin_index_path else None
        _fetcher = ProvenanceFetcher.from_config(cfg, index=index)
        logger.info("Lookup fetcher ready with %d source(s)", len(_fetcher.sources))
    return _fetcher


def get_engine() -> HashEngine:
    cfg = get_config()
    return HashEngine(cfg.hash_algorithm, cfg.hash_chunk_size)


def get_encoder() -> CIDEncoder:
    return CIDEncoder()


def get_aggregator() -> ProvenanceAggregator:
    return ProvenanceAggregator()


def reset() -> None:
    """Drop cached singletons (after a config reload)."""
    global _index, _fetcher
    _index = None
    _fetcher = None
