"""VERICID Provenance Module - where has this content been seen before.

Core components:
    OriginRecord         - One (network, address) sighting of a CID
    ProvenanceReport     - Deduplicated, ranked origins plus trust tier
    NetworkLinkResolver  - Network name -> explorer URL template
    ProvenanceAggregator - Merges origin lists from several sources
    IntegrityVerifier    - SHA-256 checksums over exported reports
    ReportCertificate    - JSON + Markdown provenance certificates
"""

from vericid.provenance.models import (
    AggregationResult,
    OriginRecord,
    ProvenanceReport,
    SourceResult,
    TrustTier,
)
from vericid.provenance.networks import EXPLORER_TEMPLATES, NetworkLinkResolver
from vericid.provenance.aggregator import ProvenanceAggregator, trust_tier_for
from vericid.provenance.integrity import IntegrityVerifier
from vericid.provenance.certificate import ReportCertificate

__all__ = [
    "AggregationResult",
    "OriginRecord",
    "ProvenanceReport",
    "SourceResult",
    "TrustTier",
    "EXPLORER_TEMPLATES",
    "NetworkLinkResolver",
    "ProvenanceAggregator",
    "trust_tier_for",
    "IntegrityVerifier",
    "ReportCertificate",
]
