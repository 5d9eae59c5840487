"""VERICID content identifiers.

Core components:
    HashEngine   - streaming digests with a fixed multihash function
    CIDEncoder   - digest -> CIDv0 / CIDv1 strings, and back
    multihash    - hash-function table and multihash framing
    multibase    - base32 / base58btc / base16 text encodings
    varint       - unsigned LEB128
"""

from vericid.cid.hashing import Digest, HashEngine, IncrementalDigest
from vericid.cid.encoder import CODECS, RAW, CIDEncoder, CIDPair, ContentIdentifier

__all__ = [
    "Digest",
    "HashEngine",
    "IncrementalDigest",
    "CODECS",
    "RAW",
    "CIDEncoder",
    "CIDPair",
    "ContentIdentifier",
]
