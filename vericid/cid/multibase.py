"""Multibase text encodings: base32, base58btc and base16.

A multibase string is a one-character prefix naming the encoding followed by
the encoded payload. CIDv1 strings use it; CIDv0 strings are bare base58btc.
"""

from __future__ import annotations

import base64
import binascii

BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE58_INDEX = {ch: i for i, ch in enumerate(BASE58_ALPHABET)}


# -- base58btc ----------------------------------------------------------------

def b58encode(data: bytes) -> str:
    """Encode bytes with the Bitcoin base58 alphabet."""
    zeros = len(data) - len(data.lstrip(b"\x00"))
    num = int.from_bytes(data, "big")
    chars: list[str] = []
    while num:
        num, rem = divmod(num, 58)
        chars.append(BASE58_ALPHABET[rem])
    return "1" * zeros + "".join(reversed(chars))


def b58decode(text: str) -> bytes:
    """Decode a Bitcoin-alphabet base58 string."""
    num = 0
    for ch in text:
        try:
            num = num * 58 + _BASE58_INDEX[ch]
        except KeyError:
            raise ValueError(f"invalid base58 character: {ch!r}") from None
    zeros = len(text) - len(text.lstrip("1"))
    body = num.to_bytes((num.bit_length() + 7) // 8, "big") if num else b""
    return b"\x00" * zeros + body


# -- base32 (RFC 4648, no padding) --------------------------------------------

def b32encode(data: bytes) -> str:
    return base64.b32encode(data).decode("ascii").rstrip("=").lower()


def b32decode(text: str) -> bytes:
    padded = text.upper() + "=" * (-len(text) % 8)
    try:
        return base64.b32decode(padded)
    except binascii.Error as exc:
        raise ValueError(f"invalid base32 data: {exc}") from exc


def _b16decode(text: str) -> bytes:
    try:
        return bytes.fromhex(text)
    except ValueError as exc:
        raise ValueError(f"invalid base16 data: {exc}") from exc


# Prefix -> (name, encoder, decoder)
MULTIBASE_TABLE = {
    "b": ("base32", b32encode, b32decode),
    "B": ("base32upper", lambda data: b32encode(data).upper(), b32decode),
    "z": ("base58btc", b58encode, b58decode),
    "f": ("base16", lambda data: data.hex(), _b16decode),
}
_PREFIX_BY_NAME = {name: prefix for prefix, (name, _, _) in MULTIBASE_TABLE.items()}


def encode(data: bytes, base: str = "base32") -> str:
    """Encode *data* with the named base and prepend its multibase prefix."""
    prefix = _PREFIX_BY_NAME.get(base)
    if prefix is None:
        raise ValueError(f"unsupported multibase encoding: {base}")
    return prefix + MULTIBASE_TABLE[prefix][1](data)


def decode(text: str) -> tuple[str, bytes]:
    """Decode a multibase string. Returns ``(base_name, payload)``."""
    if not text:
        raise ValueError("empty multibase string")
    entry = MULTIBASE_TABLE.get(text[0])
    if entry is None:
        raise ValueError(f"unknown multibase prefix: {text[0]!r}")
    name, _, decoder = entry
    return name, decoder(text[1:])


def is_multibase_prefix(char: str) -> bool:
    return char in MULTIBASE_TABLE
