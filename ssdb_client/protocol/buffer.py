"""
Stream Buffer - Accumulates socket bytes until a full frame is parsed

Bytes are appended at the tail and only removed from the head, and only
once the parser has identified a complete frame.
"""


class StreamBuffer:
    """Unbounded byte accumulator owned by a single connection."""

    def __init__(self, initial: bytes = b""):
        self._data = bytearray(initial)

    @property
    def data(self) -> bytearray:
        """Unconsumed bytes. Callers must not mutate the returned array."""
        return self._data

    def feed(self, chunk: bytes) -> None:
        """Append bytes read from the socket."""
        self._data += chunk

    def consume(self, count: int) -> None:
        """Drop ``count`` bytes from the head."""
        if count < 0 or count > len(self._data):
            raise ValueError(
                f"Cannot consume {count} bytes from a buffer holding {len(self._data)}"
            )
        del self._data[:count]

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)

    def __bytes__(self) -> bytes:
        return bytes(self._data)

    def __repr__(self) -> str:
        return f"StreamBuffer(size={len(self._data)})"
