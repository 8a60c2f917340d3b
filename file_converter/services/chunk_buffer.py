from __future__ import annotations

import asyncio
from typing import Optional


class BufferClosedError(RuntimeError):
    """Raised when a producer writes to a finished buffer."""


class OrderedChunkBuffer:
    """Collects byte chunks from one producer for one consumer.

    The producer calls :meth:`append` for each chunk in the order it
    produced them, then exactly one of :meth:`close` or :meth:`fail`.
    The consumer awaits :meth:`result`, which resolves with the chunks
    joined in append order or raises the first recorded error.
    """

    def __init__(self) -> None:
        self._chunks: list[bytes] = []
        self._size = 0
        self._finished = asyncio.Event()
        self._error: Optional[BaseException] = None

    @property
    def done(self) -> bool:
        return self._finished.is_set()

    @property
    def chunk_count(self) -> int:
        return len(self._chunks)

    @property
    def size(self) -> int:
        return self._size

    def append(self, chunk: bytes) -> None:
        if self._finished.is_set():
            raise BufferClosedError("cannot append to a finished buffer")
        if not chunk:
            return
        self._chunks.append(bytes(chunk))
        self._size += len(chunk)

    def close(self) -> None:
        self._finished.set()

    def fail(self, exc: BaseException) -> None:
        # Only the first error is kept; later signals are ignored.
        if self._finished.is_set():
            return
        self._error = exc
        self._finished.set()

    async def result(self) -> bytes:
        await self._finished.wait()
        if self._error is not None:
            raise self._error
        return b"".join(self._chunks)
