"""
Byte Arena Tests
================

Tests for the fixed-capacity byte buffer.
"""

import numpy as np
import pytest

from haptic_wavemem.errors import SequenceFull, TooManyPoints
from haptic_wavemem.waveform.arena import ByteArena


class TestByteArena:
    """Tests for ByteArena."""

    def test_starts_empty(self):
        arena = ByteArena(4, overflow_error=TooManyPoints)

        assert len(arena) == 0
        assert arena.capacity == 4
        assert arena.remaining == 4
        assert arena.to_bytes() == b""

    def test_append_returns_offset(self):
        """Each append reports where its bytes start."""
        arena = ByteArena(8, overflow_error=SequenceFull)

        assert arena.append(b"\x01\x02") == 0
        assert arena.append_byte(0x03) == 2
        assert arena.to_bytes() == b"\x01\x02\x03"
        assert arena.remaining == 5

    def test_append_accepts_int_sequences(self):
        arena = ByteArena(4, overflow_error=SequenceFull)
        arena.append((1, 2, 3))

        assert arena.to_bytes() == b"\x01\x02\x03"

    def test_fill_to_exact_capacity(self):
        """Appending exactly the remaining space succeeds."""
        arena = ByteArena(3, overflow_error=SequenceFull)
        arena.append(b"\xaa\xbb\xcc")

        assert arena.remaining == 0
        assert arena.fits(0)
        assert not arena.fits(1)

    def test_overflow_raises_supplied_error(self):
        """Overflow raises the caller's capacity error."""
        arena = ByteArena(2, overflow_error=TooManyPoints)
        arena.append(b"\x01\x02")

        with pytest.raises(TooManyPoints):
            arena.append_byte(0x03)

    def test_overflow_leaves_arena_untouched(self):
        """A rejected append stores nothing, not even a prefix."""
        arena = ByteArena(4, overflow_error=SequenceFull)
        arena.append(b"\x01\x02")

        with pytest.raises(SequenceFull):
            arena.append(b"\x03\x04\x05")

        assert len(arena) == 2
        assert arena.to_bytes() == b"\x01\x02"

    def test_view_is_read_only(self):
        arena = ByteArena(4, overflow_error=SequenceFull)
        arena.append(b"\x07\x08")
        view = arena.view()

        assert view.dtype == np.uint8
        assert list(view) == [7, 8]
        with pytest.raises(ValueError):
            view[0] = 0

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            ByteArena(0, overflow_error=SequenceFull)
