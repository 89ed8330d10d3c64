"""A pool of reusable byte buffers with a minimum capacity."""

from __future__ import annotations

import threading

__all__ = ["ByteSlice", "ByteSlicePool"]


class ByteSlice(bytearray):
    """A bytearray that remembers the capacity it was allocated with."""

    def __init__(self, data: bytes | bytearray = b"", capacity: int = 0) -> None:
        super().__init__(data)
        self._capacity = capacity

    @property
    def capacity(self) -> int:
        """The allocated capacity, never less than the current length."""
        return max(self._capacity, len(self))


class ByteSlicePool:
    """Hands out byte buffers, reusing those that were returned to it."""

    def __init__(self, min_cap: int) -> None:
        self.min_cap = min_cap
        self._free: list[ByteSlice] = []
        self._lock = threading.Lock()

    def get(self, capacity: int = 0) -> ByteSlice:
        """Return an empty buffer.

        ``capacity`` is used only when a new buffer has to be allocated; a
        reused buffer keeps whatever capacity it had.
        """
        with self._lock:
            buf = self._free.pop() if self._free else None
        if buf is None:
            return ByteSlice(capacity=max(capacity, self.min_cap))
        buf[:] = bytes(len(buf))
        del buf[:]
        return buf

    def put(self, buf: ByteSlice) -> None:
        """Return a buffer to the pool for later reuse."""
        with self._lock:
            self._free.append(buf)

    def resize(self, buf: ByteSlice, size: int) -> ByteSlice:
        """Return a buffer of length ``size`` holding the contents of ``buf``.

        Within the current capacity the buffer is resized in place; otherwise
        a new one is allocated with at least twice the old capacity.
        """
        capacity = buf.capacity
        if size < capacity:
            if size <= len(buf):
                del buf[size:]
            else:
                buf.extend(bytes(size - len(buf)))
            return buf
        data = bytes(buf) + bytes(size - len(buf))
        return ByteSlice(data, capacity=max(size, capacity * 2))