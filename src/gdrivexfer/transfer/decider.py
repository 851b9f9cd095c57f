"""Direct vs chunked upload decision."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, NamedTuple


class Strategy(str, Enum):
    DIRECT = "DIRECT"
    CHUNKED = "CHUNKED"


class ChunkRange(NamedTuple):
    offset: int
    length: int

    @property
    def end(self) -> int:
        """Exclusive end offset."""
        return self.offset + self.length


@dataclass(frozen=True)
class TransferPlan:
    """
    How one file is uploaded.

    `chunks()` yields the byte ranges to send, in order. Each call starts a
    new iteration from offset 0.
    """

    strategy: Strategy
    chunk_size: int
    total_size: int

    def chunks(self) -> Iterator[ChunkRange]:
        if self.strategy is Strategy.DIRECT:
            if self.total_size:
                yield ChunkRange(0, self.total_size)
            return

        offset = 0
        while offset < self.total_size:
            length = min(self.chunk_size, self.total_size - offset)
            yield ChunkRange(offset, length)
            offset += length

    @property
    def chunk_count(self) -> int:
        if self.strategy is Strategy.DIRECT:
            return 1 if self.total_size else 0
        return -(-self.total_size // self.chunk_size)


def plan(size_bytes: int, limit: int, chunk_size: int) -> TransferPlan:
    """
    Choose the upload strategy for a file of `size_bytes`.

    Files up to and including `limit` bytes go in one request.
    """
    if size_bytes < 0:
        raise ValueError("size_bytes must be >= 0")
    if limit < 0:
        raise ValueError("limit must be >= 0")
    if chunk_size <= 0:
        raise ValueError("chunk_size must be > 0")

    if size_bytes <= limit:
        return TransferPlan(Strategy.DIRECT, chunk_size=size_bytes, total_size=size_bytes)
    return TransferPlan(Strategy.CHUNKED, chunk_size=chunk_size, total_size=size_bytes)
