"""
PWL Points and Snippets
=======================

Piecewise-linear (PWL) waveform shapes.

A snippet is an ordered list of 1-16 points. Each point is one byte:

    bit 7      RMP   1 = ramp to amplitude, 0 = step to amplitude
    bits 6:4   TIME  number of timebases minus 1 (1-8 timebases)
    bits 3:0   AMP   amplitude (0-15)

Amplitude meaning (signed displacement or unsigned percentage) depends on
the device acceleration setting and is not interpreted here.

Snippets have no header: their encoded length equals their point count.

Example:
    from haptic_wavemem.waveform import SnippetBuilder

    click = (
        SnippetBuilder()
        .ramp(1, 15)   # fast rise to max
        .ramp(2, 0)    # smooth fall
        .build()
    )
    click.to_bytes()   # b"\\x8f\\x90"
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from haptic_wavemem.errors import (
    EmptySnippet,
    InvalidAmplitude,
    InvalidTimebase,
    TooManyPoints,
)
from haptic_wavemem.waveform.arena import ByteArena


logger = logging.getLogger(__name__)


MAX_POINTS_PER_SNIPPET = 16
MIN_TIMEBASES = 1
MAX_TIMEBASES = 8
MAX_AMPLITUDE = 15

_RAMP_BIT = 0x80
_TIME_SHIFT = 4
_TIME_MASK = 0x07
_AMP_MASK = 0x0F


@dataclass(frozen=True, slots=True)
class PwlPoint:
    """
    A single piecewise-linear point, stored as its encoded byte.

    Attributes:
        byte: Encoded point byte
    """

    byte: int

    def __post_init__(self) -> None:
        if not 0 <= self.byte <= 0xFF:
            raise ValueError(f"point byte must be 0-255, got {self.byte}")

    @classmethod
    def new(cls, ramp: bool, timebases: int, amplitude: int) -> "PwlPoint":
        """
        Encode a point from its fields.

        Args:
            ramp: True to ramp to the amplitude, False to step
            timebases: Duration in timebase units (1-8)
            amplitude: Target amplitude (0-15)

        Raises:
            InvalidTimebase: If timebases is not in 1-8
            InvalidAmplitude: If amplitude is not in 0-15
        """
        if not MIN_TIMEBASES <= timebases <= MAX_TIMEBASES:
            raise InvalidTimebase(
                f"timebases must be {MIN_TIMEBASES}-{MAX_TIMEBASES}, got {timebases}"
            )
        if not 0 <= amplitude <= MAX_AMPLITUDE:
            raise InvalidAmplitude(f"amplitude must be 0-{MAX_AMPLITUDE}, got {amplitude}")

        rmp_bit = _RAMP_BIT if ramp else 0x00
        time_bits = (timebases - 1) << _TIME_SHIFT
        return cls(rmp_bit | time_bits | (amplitude & _AMP_MASK))

    @classmethod
    def ramp(cls, timebases: int, amplitude: int) -> "PwlPoint":
        """Linear ramp to ``amplitude`` over ``timebases`` units."""
        return cls.new(True, timebases, amplitude)

    @classmethod
    def step(cls, timebases: int, amplitude: int) -> "PwlPoint":
        """Immediate step to ``amplitude``, held for ``timebases`` units."""
        return cls.new(False, timebases, amplitude)

    @classmethod
    def from_byte(cls, byte: int) -> "PwlPoint":
        """Wrap an already-encoded point byte. Every byte value is a valid point."""
        return cls(byte)

    @property
    def is_ramp(self) -> bool:
        return bool(self.byte & _RAMP_BIT)

    @property
    def timebases(self) -> int:
        return ((self.byte >> _TIME_SHIFT) & _TIME_MASK) + 1

    @property
    def amplitude(self) -> int:
        return self.byte & _AMP_MASK

    def as_byte(self) -> int:
        return self.byte

    def __repr__(self) -> str:
        kind = "ramp" if self.is_ramp else "step"
        return f"PwlPoint({kind}, timebases={self.timebases}, amplitude={self.amplitude})"


@dataclass(frozen=True, slots=True)
class Snippet:
    """
    Immutable waveform shape of 1-16 points.

    Produced by SnippetBuilder.build(); cannot be edited afterwards.

    Attributes:
        data: Encoded point bytes in insertion order
    """

    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))
        if not self.data:
            raise EmptySnippet("snippet has no points")
        if len(self.data) > MAX_POINTS_PER_SNIPPET:
            raise TooManyPoints(
                f"snippet has {len(self.data)} points, limit is {MAX_POINTS_PER_SNIPPET}"
            )

    @property
    def points(self) -> Tuple[PwlPoint, ...]:
        return tuple(PwlPoint(b) for b in self.data)

    @property
    def byte_len(self) -> int:
        return len(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def to_bytes(self) -> bytes:
        return self.data

    def encode_into(self, arena: ByteArena) -> int:
        """
        Append this snippet to an arena.

        Returns:
            Number of bytes written.
        """
        arena.append(self.data)
        return len(self.data)

    def __repr__(self) -> str:
        return f"Snippet(points={len(self.data)}, data={self.data.hex()})"


class SnippetBuilder:
    """
    Add-only accumulator for snippet points.

    Every add method either appends exactly one point and returns the
    builder, or raises without changing the builder.

    Example:
        builder = SnippetBuilder()
        builder.ramp(1, 15).step(2, 15).ramp(1, 0)
        snippet = builder.build()
    """

    def __init__(self) -> None:
        self._arena = ByteArena(MAX_POINTS_PER_SNIPPET, overflow_error=TooManyPoints)

    def __len__(self) -> int:
        return len(self._arena)

    def ramp(self, timebases: int, amplitude: int) -> "SnippetBuilder":
        """
        Append a ramp point.

        Raises:
            InvalidTimebase, InvalidAmplitude: Field out of range
            TooManyPoints: Snippet already holds 16 points
        """
        return self.point(PwlPoint.ramp(timebases, amplitude))

    def step(self, timebases: int, amplitude: int) -> "SnippetBuilder":
        """
        Append a step point.

        Raises:
            InvalidTimebase, InvalidAmplitude: Field out of range
            TooManyPoints: Snippet already holds 16 points
        """
        return self.point(PwlPoint.step(timebases, amplitude))

    def point(self, point: PwlPoint) -> "SnippetBuilder":
        """
        Append a raw point.

        Raises:
            TooManyPoints: Snippet already holds 16 points
        """
        try:
            self._arena.append_byte(point.as_byte())
        except TooManyPoints:
            logger.warning(
                f"Snippet point rejected: limit of {MAX_POINTS_PER_SNIPPET} points reached"
            )
            raise
        return self

    def build(self) -> Snippet:
        """
        Finalize the snippet.

        Raises:
            EmptySnippet: If no points were added
        """
        if len(self._arena) == 0:
            raise EmptySnippet("snippet has no points")
        return Snippet(self._arena.to_bytes())
