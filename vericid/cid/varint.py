"""Unsigned LEB128 varints as used by multiformats."""

from __future__ import annotations

# multiformats caps varints at 9 bytes (63 bits of payload)
MAX_VARINT_BYTES = 9
MAX_VARINT_VALUE = (1 << 63) - 1


def encode(value: int) -> bytes:
    """Encode a non-negative integer as an unsigned varint."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"varint value must be int, got {type(value).__name__}")
    if value < 0 or value > MAX_VARINT_VALUE:
        raise ValueError(f"varint value out of range: {value}")

    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def decode(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode one varint starting at *offset*.

    Returns ``(value, next_offset)``. Raises ValueError on truncated,
    overlong, or non-minimal input.
    """
    value = 0
    shift = 0
    pos = offset
    while True:
        if pos >= len(data):
            raise ValueError("truncated varint")
        if pos - offset >= MAX_VARINT_BYTES:
            raise ValueError("varint longer than 9 bytes")
        byte = data[pos]
        pos += 1
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            if byte == 0 and pos - offset > 1:
                raise ValueError("varint is not minimally encoded")
            return value, pos
        shift += 7
