"""
Byte Arena
==========

Fixed-capacity byte storage shared by every waveform builder.

The arena is a preallocated ``uint8`` buffer sized to the absolute worst
case, plus a length cursor. It never grows: an append that does not fit
raises the caller's capacity error before a single byte is copied.

Capacities used by the compiler:
    - Snippet: 16 bytes (one per point)
    - Sequence: 96 bytes
    - Waveform memory: 100 bytes

Example:
    arena = ByteArena(4, overflow_error=TooManyPoints)
    arena.append(b"\\x8f\\x80")
    arena.to_bytes()   # b"\\x8f\\x80"
    arena.remaining    # 2
"""

from typing import Callable, Iterable, Union

import numpy as np

from haptic_wavemem.errors import CapacityError


BytesLike = Union[bytes, bytearray, memoryview, Iterable[int]]


class ByteArena:
    """
    Fixed-size byte buffer with an append cursor.

    Attributes:
        capacity: Maximum number of bytes the arena can hold
        overflow_error: Factory for the error raised on overflow
    """

    def __init__(
        self,
        capacity: int,
        overflow_error: Callable[[str], CapacityError],
    ) -> None:
        """
        Initialize an empty arena.

        Args:
            capacity: Number of bytes to preallocate. Must be >= 1.
            overflow_error: Capacity error class raised when an append does not fit
        """
        if capacity < 1:
            raise ValueError("capacity must be >= 1")

        self._buffer = np.zeros(capacity, dtype=np.uint8)
        self._len = 0
        self._overflow_error = overflow_error

    @property
    def capacity(self) -> int:
        """Maximum number of bytes."""
        return int(self._buffer.shape[0])

    @property
    def remaining(self) -> int:
        """Bytes still available."""
        return self.capacity - self._len

    def __len__(self) -> int:
        return self._len

    def fits(self, count: int) -> bool:
        """Whether ``count`` more bytes can be appended."""
        return count <= self.remaining

    def append(self, data: BytesLike) -> int:
        """
        Copy ``data`` to the end of the arena.

        Args:
            data: Bytes (or byte values 0-255) to append

        Returns:
            Offset at which the data was written.

        Raises:
            CapacityError: The overflow error supplied at construction,
                if the data does not fit. The arena is left untouched.
        """
        chunk = np.frombuffer(bytes(data), dtype=np.uint8)
        size = int(chunk.shape[0])

        if not self.fits(size):
            raise self._overflow_error(
                f"{size} byte(s) do not fit: {self._len}/{self.capacity} used"
            )

        offset = self._len
        self._buffer[offset:offset + size] = chunk
        self._len += size
        return offset

    def append_byte(self, value: int) -> int:
        """Append a single byte value (0-255)."""
        return self.append(bytes((value,)))

    def view(self) -> np.ndarray:
        """
        Read-only view of the used portion of the buffer.

        The view shares memory with the arena; it is flagged non-writeable.
        """
        used = self._buffer[:self._len]
        used.flags.writeable = False
        return used

    def to_bytes(self) -> bytes:
        """Copy of the used portion as immutable bytes."""
        return self._buffer[:self._len].tobytes()

    def __repr__(self) -> str:
        return f"ByteArena(len={self._len}, capacity={self.capacity})"
