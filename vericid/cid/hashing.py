"""Content hashing for CID computation.

The digest is a function of the logical byte sequence only: in-memory bytes,
a file object read in chunks, or an iterable of chunks all hash identically.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Union

from vericid.cid import multihash
from vericid.utils import HashInputError

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "sha2-256"
DEFAULT_CHUNK_SIZE = 64 * 1024

ByteSource = Union[bytes, bytearray, memoryview, BinaryIO, Iterable[bytes]]


@dataclass(frozen=True)
class Digest:
    """Fixed-length output of a named multihash function."""

    algorithm: str
    code: int
    value: bytes

    @property
    def size(self) -> int:
        return len(self.value)

    def hex(self) -> str:
        return self.value.hex()


class IncrementalDigest:
    """Digest fed one chunk at a time, for sources that push bytes.

    Obtained from ``HashEngine.incremental()``; not shared between threads.
    """

    def __init__(self, fn: multihash.HashFunction) -> None:
        self._fn = fn
        self._hasher = fn.new()
        self.size = 0

    def update(self, chunk: bytes) -> None:
        if not isinstance(chunk, (bytes, bytearray, memoryview)):
            raise TypeError(f"chunks must be bytes, got {type(chunk).__name__}")
        self._hasher.update(chunk)
        self.size += memoryview(chunk).nbytes

    def finish(self) -> Digest:
        return Digest(algorithm=self._fn.name, code=self._fn.code, value=self._hasher.digest())


class HashEngine:
    """Compute digests of byte content with one fixed hash function.

    The engine holds no mutable state; every call creates its own hasher,
    so one instance can be shared across threads.
    """

    def __init__(
        self,
        algorithm: str = DEFAULT_ALGORITHM,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self._fn = multihash.get_by_name(algorithm)
        self.chunk_size = chunk_size

    @property
    def algorithm(self) -> str:
        return self._fn.name

    @property
    def code(self) -> int:
        return self._fn.code

    def incremental(self) -> IncrementalDigest:
        """Start a digest that is fed chunk by chunk and closed with ``finish()``."""
        return IncrementalDigest(self._fn)

    def digest(self, data: ByteSource) -> Digest:
        """Digest bytes, a binary stream, or an iterable of byte chunks."""
        builder = self.incremental()
        if isinstance(data, (bytes, bytearray, memoryview)):
            builder.update(data)
        elif hasattr(data, "read"):
            self._consume_stream(builder, data)
        elif isinstance(data, Iterable) and not isinstance(data, str):
            self._consume_chunks(builder, data)
        else:
            raise TypeError(f"cannot hash object of type {type(data).__name__}")
        return builder.finish()

    def digest_file(self, path: str | Path) -> Digest:
        """Stream a file from disk through the hasher."""
        try:
            with open(path, "rb") as f:
                return self.digest(f)
        except HashInputError:
            raise
        except OSError as exc:
            logger.warning("Cannot read %s for hashing: %s", path, exc)
            raise HashInputError(f"cannot read {path}: {exc}") from exc

    def _consume_stream(self, hasher, stream: BinaryIO) -> None:
        while True:
            try:
                chunk = stream.read(self.chunk_size)
            except OSError as exc:
                raise HashInputError(f"input stream failed mid-read: {exc}") from exc
            if not chunk:
                return
            if not isinstance(chunk, (bytes, bytearray, memoryview)):
                raise TypeError("stream must be opened in binary mode")
            hasher.update(chunk)

    @staticmethod
    def _consume_chunks(hasher, chunks: Iterable[bytes]) -> None:
        iterator = iter(chunks)
        while True:
            try:
                chunk = next(iterator)
            except StopIteration:
                return
            except OSError as exc:
                raise HashInputError(f"chunk source failed mid-read: {exc}") from exc
            if not isinstance(chunk, (bytes, bytearray, memoryview)):
                raise TypeError(f"chunks must be bytes, got {type(chunk).__name__}")
            hasher.update(chunk)
