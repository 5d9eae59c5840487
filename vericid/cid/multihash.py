"""Multihash: ``varint(code) ++ varint(length) ++ digest``."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Callable

from vericid.cid import varint
from vericid.utils import UnsupportedHashCode


@dataclass(frozen=True)
class HashFunction:
    """One entry of the multihash table."""

    name: str
    code: int
    length: int
    factory: Callable[[], Any]

    def new(self) -> Any:
        return self.factory()


HASH_FUNCTIONS: dict[str, HashFunction] = {
    fn.name: fn
    for fn in (
        HashFunction("sha1", 0x11, 20, hashlib.sha1),
        HashFunction("sha2-256", 0x12, 32, hashlib.sha256),
        HashFunction("sha2-512", 0x13, 64, hashlib.sha512),
        HashFunction("sha3-512", 0x14, 64, hashlib.sha3_512),
        HashFunction("sha3-384", 0x15, 48, hashlib.sha3_384),
        HashFunction("sha3-256", 0x16, 32, hashlib.sha3_256),
        HashFunction("sha3-224", 0x17, 28, hashlib.sha3_224),
        HashFunction("blake2b-256", 0xB220, 32, lambda: hashlib.blake2b(digest_size=32)),
    )
}
_BY_CODE = {fn.code: fn for fn in HASH_FUNCTIONS.values()}

SHA2_256 = HASH_FUNCTIONS["sha2-256"].code


def get_by_name(name: str) -> HashFunction:
    """Look up a hash function by its multihash name."""
    try:
        return HASH_FUNCTIONS[name.lower()]
    except (KeyError, AttributeError):
        raise UnsupportedHashCode(f"unsupported hash function: {name!r}") from None


def get_by_code(code: int) -> HashFunction:
    """Look up a hash function by its multihash code."""
    if isinstance(code, bool) or not isinstance(code, int):
        raise UnsupportedHashCode(f"hash code must be an integer, got {code!r}")
    fn = _BY_CODE.get(code)
    if fn is None:
        raise UnsupportedHashCode(f"unsupported hash code: 0x{code:x}" if code >= 0 else f"unsupported hash code: {code}")
    return fn


def encode(digest: bytes, code: int) -> bytes:
    """Build multihash bytes for *digest* produced by hash function *code*."""
    fn = get_by_code(code)
    if len(digest) != fn.length:
        raise ValueError(
            f"{fn.name} digest must be {fn.length} bytes, got {len(digest)}"
        )
    return varint.encode(code) + varint.encode(len(digest)) + bytes(digest)


def decode(data: bytes) -> tuple[int, bytes]:
    """Parse multihash bytes. Returns ``(code, digest)``.

    The length prefix must match the remaining bytes exactly.
    """
    code, pos = varint.decode(data)
    length, pos = varint.decode(data, pos)
    digest = bytes(data[pos:])
    if len(digest) != length:
        raise ValueError(
            f"multihash declares {length} digest bytes but carries {len(digest)}"
        )
    return code, digest
