"""
VERICID - content identifiers and provenance aggregation
"""

__version__ = "0.1.0"

from vericid.config import VericidSettings, get_config
from vericid.cid import CIDEncoder, CIDPair, ContentIdentifier, Digest, HashEngine
from vericid.provenance import (
    NetworkLinkResolver,
    OriginRecord,
    ProvenanceAggregator,
    ProvenanceReport,
    TrustTier,
)

__all__ = [
    "VericidSettings",
    "get_config",
    "CIDEncoder",
    "CIDPair",
    "ContentIdentifier",
    "Digest",
    "HashEngine",
    "NetworkLinkResolver",
    "OriginRecord",
    "ProvenanceAggregator",
    "ProvenanceReport",
    "TrustTier",
]
