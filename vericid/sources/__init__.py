"""Provenance sources and the concurrent fetch layer.

Core components:
    WorkerSourceClient   - POSTs CIDs to a VERICID lookup worker
    RestSourceClient     - GETs origins from a REST-style index
    InMemoryOriginIndex  - Local dict-backed source (also loadable from JSON)
    ProvenanceFetcher    - Concurrent lookups with failure annotations
"""

from vericid.sources.api_clients import RestSourceClient, WorkerSourceClient
from vericid.sources.index import InMemoryOriginIndex
from vericid.sources.fetcher import ProvenanceFetcher, ProvenanceSource

__all__ = [
    "RestSourceClient",
    "WorkerSourceClient",
    "InMemoryOriginIndex",
    "ProvenanceFetcher",
    "ProvenanceSource",
]
