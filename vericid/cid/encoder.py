"""CID encoding and decoding.

Byte layout:

    multihash = varint(hash_code) ++ varint(digest_length) ++ digest
    CIDv1     = multibase("b", varint(1) ++ varint(codec) ++ multihash)
    CIDv0     = base58btc(multihash)

CIDv0 carries no version or codec bytes; both are implied (version 0, raw
codec). v0 and v1 are always serialized from the same multihash bytes.
"""

from __future__ import annotations

from dataclasses import dataclass

from vericid.cid import multibase, multihash, varint
from vericid.cid.hashing import Digest
from vericid.utils import InvalidCIDError, UnsupportedCodec, UnsupportedHashCode

RAW = 0x55

CODECS: dict[str, int] = {
    "raw": RAW,
    "dag-pb": 0x70,
    "dag-cbor": 0x71,
    "dag-json": 0x0129,
    "json": 0x0200,
}
_CODEC_NAMES = {code: name for name, code in CODECS.items()}

_V0_LENGTH = 46
_V0_PREFIX = "Qm"


@dataclass(frozen=True)
class ContentIdentifier:
    """A decoded CID."""

    version: int
    codec: int
    hash_code: int
    digest_length: int
    digest: bytes
    encoded: str

    @property
    def multihash(self) -> bytes:
        return varint.encode(self.hash_code) + varint.encode(self.digest_length) + self.digest

    @property
    def codec_name(self) -> str:
        return _CODEC_NAMES.get(self.codec, hex(self.codec))

    @property
    def hash_name(self) -> str:
        return multihash.get_by_code(self.hash_code).name

    def same_content(self, other: "ContentIdentifier") -> bool:
        """True when both identifiers name the same bytes, whatever their version."""
        return self.hash_code == other.hash_code and self.digest == other.digest

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "codec": self.codec_name,
            "hash_function": self.hash_name,
            "digest_length": self.digest_length,
            "digest": self.digest.hex(),
            "encoded": self.encoded,
        }


@dataclass(frozen=True)
class CIDPair:
    """Legacy (v0) and current (v1) encodings of one digest."""

    v0: str
    v1: str

    def to_dict(self) -> dict[str, str]:
        return {"v0": self.v0, "v1": self.v1}


def _check_codec(codec: int) -> int:
    if isinstance(codec, bool) or not isinstance(codec, int) or codec not in _CODEC_NAMES:
        raise UnsupportedCodec(f"unsupported codec: {codec!r}")
    return codec


class CIDEncoder:
    """Turn digests into CID strings and parse them back."""

    def __init__(self, base: str = "base32") -> None:
        if base not in {name for name, _, _ in multibase.MULTIBASE_TABLE.values()}:
            raise ValueError(f"unsupported multibase encoding: {base}")
        self.base = base

    def encode(
        self,
        digest: Digest | bytes,
        hash_code: int | None = None,
        codec: int = RAW,
    ) -> CIDPair:
        """Encode *digest* as a ``CIDPair``.

        ``hash_code`` defaults to the digest's own code when a ``Digest`` is
        given and is required for raw bytes.
        """
        v0, v1 = self.identifiers(digest, hash_code, codec)
        return CIDPair(v0=v0.encoded, v1=v1.encoded)

    def identifiers(
        self,
        digest: Digest | bytes,
        hash_code: int | None = None,
        codec: int = RAW,
    ) -> tuple[ContentIdentifier, ContentIdentifier]:
        """Build the v0 and v1 ``ContentIdentifier`` for one digest."""
        if isinstance(digest, Digest):
            value = digest.value
            if hash_code is None:
                hash_code = digest.code
        else:
            value = bytes(digest)
        if hash_code is None:
            raise UnsupportedHashCode("hash_code is required for raw digest bytes")
        _check_codec(codec)

        mh = multihash.encode(value, hash_code)
        v1_bytes = varint.encode(1) + varint.encode(codec) + mh

        common = dict(hash_code=hash_code, digest_length=len(value), digest=value)
        v0 = ContentIdentifier(version=0, codec=RAW, encoded=multibase.b58encode(mh), **common)
        v1 = ContentIdentifier(
            version=1, codec=codec, encoded=multibase.encode(v1_bytes, self.base), **common
        )
        return v0, v1

    def decode(self, text: str) -> ContentIdentifier:
        """Parse a v0 or v1 CID string."""
        if not isinstance(text, str) or not text.strip():
            raise InvalidCIDError("CID must be a non-empty string")
        text = text.strip()

        if (len(text) == _V0_LENGTH and text.startswith(_V0_PREFIX)) or not multibase.is_multibase_prefix(text[0]):
            return self._decode_v0(text)

        try:
            return self._decode_v1(text)
        except InvalidCIDError as v1_error:
            # A bare base58 multihash may begin with a multibase prefix letter
            try:
                return self._decode_v0(text)
            except InvalidCIDError:
                raise v1_error

    @staticmethod
    def _decode_v0(text: str) -> ContentIdentifier:
        try:
            mh = multibase.b58decode(text)
            code, digest = multihash.decode(mh)
            multihash.get_by_code(code)
        except (ValueError, UnsupportedHashCode) as exc:
            raise InvalidCIDError(f"not a valid CIDv0: {text!r} ({exc})") from exc
        return ContentIdentifier(
            version=0,
            codec=RAW,
            hash_code=code,
            digest_length=len(digest),
            digest=digest,
            encoded=text,
        )

    @staticmethod
    def _decode_v1(text: str) -> ContentIdentifier:
        try:
            _, payload = multibase.decode(text)
            version, pos = varint.decode(payload)
            if version != 1:
                raise ValueError(f"unexpected CID version {version}")
            codec, pos = varint.decode(payload, pos)
            _check_codec(codec)
            code, digest = multihash.decode(payload[pos:])
            multihash.get_by_code(code)
        except (ValueError, UnsupportedHashCode, UnsupportedCodec) as exc:
            raise InvalidCIDError(f"not a valid CIDv1: {text!r} ({exc})") from exc
        return ContentIdentifier(
            version=1,
            codec=codec,
            hash_code=code,
            digest_length=len(digest),
            digest=digest,
            encoded=text,
        )
