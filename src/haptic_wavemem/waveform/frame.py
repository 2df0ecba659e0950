"""
Frames
======

A frame plays one snippet with playback modifiers. Frames are variable-width
and self-delimiting (1-3 bytes):

    byte 1     0 | GAIN[6:5] | TIMEBASE[4:3] | SNP_ID[2:0]
    byte 2     1 | LOOP[6:3] | FREQ_CMD[2] | FREQ[8] | SNP_ID[3]
    byte 3     FREQ[7:0]

Byte 2 is present iff the snippet id is >= 8, a loop count is set, or a
frequency override is set. Byte 3 is present iff a frequency override is set.
The top bit of bytes 1 and 2 marks frame boundaries, so a decoder can find the
start of every frame without a length prefix.

Gain and timebase wire bits come from a WireMapping table, never from enum
ordinals.

Example:
    from haptic_wavemem.waveform import FrameBuilder
    from haptic_wavemem.models.levels import Gain, Timebase

    frame = (
        FrameBuilder(1)
        .gain(Gain.HALF)
        .timebase(Timebase.MS_21_76)
        .loop_count(3)
        .build()
    )
    len(frame)   # 2

    pause = FrameBuilder.silence().timebase(Timebase.MS_43_52).build()
"""

from dataclasses import dataclass
from typing import Optional

from haptic_wavemem.errors import (
    InvalidFrequency,
    InvalidLoopCount,
    InvalidSnippetId,
)
from haptic_wavemem.models.levels import (
    DEFAULT_GAIN,
    DEFAULT_MAPPING,
    DEFAULT_TIMEBASE,
    Gain,
    Timebase,
    WireMapping,
)


SILENCE_SNIPPET_ID = 0
MIN_SNIPPET_ID = 1
MAX_SNIPPET_ID = 15
MAX_LOOP_COUNT = 15
MAX_FREQUENCY_HZ = 511
MAX_FRAME_BYTES = 3

CONTINUATION_BIT = 0x80
_GAIN_SHIFT = 5
_TIMEBASE_SHIFT = 3
_ID_LOW_MASK = 0x07
_LOOP_SHIFT = 3
_LOOP_MASK = 0x0F
_FREQ_CMD_BIT = 0x04
_FREQ_HIGH_BIT = 0x02
_ID_HIGH_BIT = 0x01


@dataclass(frozen=True, slots=True)
class Frame:
    """
    Immutable encoded frame.

    Field values are kept next to the encoded bytes so frames stay
    inspectable after construction.

    Attributes:
        snippet_id: Referenced snippet (0 = built-in silence)
        gain: Gain level
        timebase: Timebase level
        loop_count: Loop count, or None when not set
        frequency_hz: Frequency override, or None when not set
        data: Encoded bytes (1-3)
    """

    snippet_id: int
    gain: Gain
    timebase: Timebase
    loop_count: Optional[int]
    frequency_hz: Optional[int]
    data: bytes

    @property
    def byte_len(self) -> int:
        return len(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def to_bytes(self) -> bytes:
        return self.data

    @property
    def is_silence(self) -> bool:
        return self.snippet_id == SILENCE_SNIPPET_ID

    def __repr__(self) -> str:
        parts = [f"snippet_id={self.snippet_id}", self.gain.value, self.timebase.value]
        if self.loop_count is not None:
            parts.append(f"loop={self.loop_count}")
        if self.frequency_hz is not None:
            parts.append(f"freq={self.frequency_hz}Hz")
        return f"Frame({', '.join(parts)}, data={self.data.hex()})"


def encode_frame(
    snippet_id: int,
    gain: Gain,
    timebase: Timebase,
    loop_count: Optional[int],
    frequency_hz: Optional[int],
    mapping: WireMapping = DEFAULT_MAPPING,
) -> bytes:
    """
    Pack already-validated frame fields into 1-3 bytes.

    Args:
        snippet_id: Snippet id (0-15)
        gain: Gain level
        timebase: Timebase level
        loop_count: Loop count (0-15) or None
        frequency_hz: Frequency override (0-511) or None
        mapping: Wire value table for gain and timebase

    Returns:
        Encoded frame bytes.
    """
    byte1 = (
        (mapping.gain_bits(gain) << _GAIN_SHIFT)
        | (mapping.timebase_bits(timebase) << _TIMEBASE_SHIFT)
        | (snippet_id & _ID_LOW_MASK)
    )
    encoded = bytearray((byte1,))

    id_high = (snippet_id >> 3) & 0x01
    needs_continuation = (
        id_high != 0
        or loop_count is not None
        or frequency_hz is not None
    )

    if needs_continuation:
        byte2 = CONTINUATION_BIT | ((loop_count or 0) << _LOOP_SHIFT) | id_high
        if frequency_hz is not None:
            byte2 |= _FREQ_CMD_BIT
            if (frequency_hz >> 8) & 0x01:
                byte2 |= _FREQ_HIGH_BIT
        encoded.append(byte2)

        if frequency_hz is not None:
            encoded.append(frequency_hz & 0xFF)

    return bytes(encoded)


class FrameBuilder:
    """
    Builder for a single frame.

    Use ``FrameBuilder(snippet_id)`` for snippets 1-15 and
    ``FrameBuilder.silence()`` for the built-in silence shape (id 0).

    Defaults: gain FULL, timebase MS_5_44, no loop count, no frequency.
    """

    def __init__(self, snippet_id: int, mapping: WireMapping = DEFAULT_MAPPING) -> None:
        """
        Start a frame for a user snippet.

        Args:
            snippet_id: Snippet id (1-15)
            mapping: Wire value table for gain and timebase

        Raises:
            InvalidSnippetId: If snippet_id is 0 or above 15
        """
        if not MIN_SNIPPET_ID <= snippet_id <= MAX_SNIPPET_ID:
            raise InvalidSnippetId(
                f"snippet id must be {MIN_SNIPPET_ID}-{MAX_SNIPPET_ID}, got {snippet_id}"
            )
        self._init(snippet_id, mapping)

    @classmethod
    def silence(cls, mapping: WireMapping = DEFAULT_MAPPING) -> "FrameBuilder":
        """Start a frame referencing the reserved silence shape (id 0)."""
        builder = cls.__new__(cls)
        builder._init(SILENCE_SNIPPET_ID, mapping)
        return builder

    def _init(self, snippet_id: int, mapping: WireMapping) -> None:
        self._snippet_id = snippet_id
        self._mapping = mapping
        self._gain = DEFAULT_GAIN
        self._timebase = DEFAULT_TIMEBASE
        self._loop_count: Optional[int] = None
        self._frequency_hz: Optional[int] = None

    @property
    def snippet_id(self) -> int:
        return self._snippet_id

    def gain(self, gain: Gain) -> "FrameBuilder":
        self._gain = Gain(gain)
        return self

    def timebase(self, timebase: Timebase) -> "FrameBuilder":
        self._timebase = Timebase(timebase)
        return self

    def loop_count(self, count: int) -> "FrameBuilder":
        """
        Set how many extra times the snippet is played (0 plays once).

        Raises:
            InvalidLoopCount: If count is above 15
        """
        if not 0 <= count <= MAX_LOOP_COUNT:
            raise InvalidLoopCount(f"loop count must be 0-{MAX_LOOP_COUNT}, got {count}")
        self._loop_count = count
        return self

    def frequency_hz(self, frequency: int) -> "FrameBuilder":
        """
        Override the playback frequency.

        Raises:
            InvalidFrequency: If frequency does not fit in 9 bits
        """
        if not 0 <= frequency <= MAX_FREQUENCY_HZ:
            raise InvalidFrequency(
                f"frequency must be 0-{MAX_FREQUENCY_HZ} Hz, got {frequency}"
            )
        self._frequency_hz = frequency
        return self

    def build(self) -> Frame:
        data = encode_frame(
            self._snippet_id,
            self._gain,
            self._timebase,
            self._loop_count,
            self._frequency_hz,
            self._mapping,
        )
        return Frame(
            snippet_id=self._snippet_id,
            gain=self._gain,
            timebase=self._timebase,
            loop_count=self._loop_count,
            frequency_hz=self._frequency_hz,
            data=data,
        )
