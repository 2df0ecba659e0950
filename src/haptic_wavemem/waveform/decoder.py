"""
Waveform Memory Decoder
=======================

Disassembles compiled waveform memory back into snippets and sequences.

Frames need no length prefix: a byte with bit 7 clear starts a frame, a
following byte with bit 7 set is its continuation byte, and when that
continuation byte carries FREQ_CMD the next byte is the low frequency byte.
Chunk boundaries come from the pointer table.

Validation performed on a blob:
    - Header present, counts within 1-15 snippets and 1-16 sequences
    - Pointer table fits inside the blob
    - Pointers strictly increasing, first chunk non-empty
    - Last pointer is the final byte of the blob
    - Every sequence chunk decodes into whole frames

Example:
    from haptic_wavemem.waveform.decoder import disassemble

    layout = disassemble(blob)
    for snippet_id, snippet in layout.snippets_by_id().items():
        print(snippet_id, snippet.points)
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from haptic_wavemem.errors import MalformedWaveformMemory, WaveformError
from haptic_wavemem.models.levels import DEFAULT_MAPPING, WireMapping
from haptic_wavemem.waveform.frame import CONTINUATION_BIT, Frame
from haptic_wavemem.waveform.memory import (
    FIRST_SEQUENCE_ID,
    FIRST_SNIPPET_ID,
    HEADER_SIZE,
    MAX_MEMORY_SIZE,
    MAX_SEQUENCES,
    MAX_SNIPPETS,
    WaveformMemory,
)
from haptic_wavemem.waveform.sequence import Sequence, SequenceBuilder
from haptic_wavemem.waveform.snippet import Snippet


logger = logging.getLogger(__name__)


def decode_frame(
    data: bytes,
    offset: int = 0,
    mapping: WireMapping = DEFAULT_MAPPING,
) -> Tuple[Frame, int]:
    """
    Decode one frame starting at ``offset``.

    Returns:
        (frame, bytes consumed)

    Raises:
        MalformedWaveformMemory: If ``offset`` is not a frame start or the
            frame is truncated
    """
    if offset >= len(data):
        raise MalformedWaveformMemory(f"no frame at offset {offset}")

    byte1 = data[offset]
    if byte1 & CONTINUATION_BIT:
        raise MalformedWaveformMemory(
            f"byte 0x{byte1:02x} at offset {offset} is a continuation byte, not a frame start"
        )

    snippet_id = byte1 & 0x07
    gain = mapping.gain_from_bits(byte1 >> 5)
    timebase = mapping.timebase_from_bits(byte1 >> 3)
    loop_count: Optional[int] = None
    frequency_hz: Optional[int] = None
    consumed = 1

    nxt = offset + 1
    if nxt < len(data) and data[nxt] & CONTINUATION_BIT:
        byte2 = data[nxt]
        consumed = 2
        snippet_id |= (byte2 & 0x01) << 3
        loop_bits = (byte2 >> 3) & 0x0F
        if byte2 & 0x04:
            if nxt + 1 >= len(data):
                raise MalformedWaveformMemory(
                    f"frame at offset {offset} announces a frequency byte past the end"
                )
            frequency_hz = ((byte2 >> 1) & 0x01) << 8 | data[nxt + 1]
            consumed = 3
        # byte 2 with no id bit and no frequency exists only because a loop was set
        if loop_bits or (frequency_hz is None and snippet_id < 8):
            loop_count = loop_bits

    frame = Frame(
        snippet_id=snippet_id,
        gain=gain,
        timebase=timebase,
        loop_count=loop_count,
        frequency_hz=frequency_hz,
        data=bytes(data[offset:offset + consumed]),
    )
    return frame, consumed


def decode_frames(data: bytes, mapping: WireMapping = DEFAULT_MAPPING) -> List[Frame]:
    """
    Split a sequence chunk into frames.

    Raises:
        MalformedWaveformMemory: If the bytes are not a whole number of frames
    """
    frames: List[Frame] = []
    offset = 0
    while offset < len(data):
        frame, consumed = decode_frame(data, offset, mapping)
        frames.append(frame)
        offset += consumed
    return frames


@dataclass(frozen=True)
class MemoryLayout:
    """
    Structured view of a compiled waveform memory.

    Attributes:
        memory: The compiled memory that was decoded
        snippets: Snippets in id order (id 1 first)
        sequences: Sequences in id order (id 0 first)
    """

    memory: WaveformMemory
    snippets: Tuple[Snippet, ...]
    sequences: Tuple[Sequence, ...]

    def snippets_by_id(self) -> Dict[int, Snippet]:
        return {FIRST_SNIPPET_ID + i: s for i, s in enumerate(self.snippets)}

    def sequences_by_id(self) -> Dict[int, Sequence]:
        return {FIRST_SEQUENCE_ID + i: s for i, s in enumerate(self.sequences)}

    def describe(self) -> List[str]:
        """Human-readable listing, one line per item."""
        memory = self.memory
        lines = [
            f"size: {len(memory)}/{MAX_MEMORY_SIZE} bytes",
            f"snippets: {memory.num_snippets}  sequences: {memory.num_sequences}",
            f"pointers: {' '.join(str(p) for p in memory.pointer_table)}",
        ]
        for snippet_id, snippet in self.snippets_by_id().items():
            lines.append(f"snippet {snippet_id} [{snippet.data.hex(' ')}]")
            for point in snippet.points:
                kind = "ramp" if point.is_ramp else "step"
                lines.append(
                    f"    {kind} timebases={point.timebases} amplitude={point.amplitude}"
                )
        for sequence_id, sequence in self.sequences_by_id().items():
            lines.append(f"sequence {sequence_id} [{sequence.data.hex(' ')}]")
            for frame in sequence.frames:
                target = "silence" if frame.is_silence else f"snippet {frame.snippet_id}"
                extras = ""
                if frame.loop_count is not None:
                    extras += f" loop={frame.loop_count}"
                if frame.frequency_hz is not None:
                    extras += f" frequency={frame.frequency_hz}Hz"
                lines.append(
                    f"    {target} gain={frame.gain.value} "
                    f"timebase={frame.timebase.value}{extras}"
                )
        return lines


def disassemble(blob: bytes, mapping: WireMapping = DEFAULT_MAPPING) -> MemoryLayout:
    """
    Decode a compiled waveform memory blob.

    Args:
        blob: Bytes as produced by WaveformMemory.to_bytes() or read back
            from a device
        mapping: Wire value table used to decode gain and timebase

    Returns:
        MemoryLayout with decoded snippets and sequences.

    Raises:
        MalformedWaveformMemory: If the blob violates the layout
    """
    blob = bytes(blob)
    if len(blob) < HEADER_SIZE:
        raise MalformedWaveformMemory(f"blob of {len(blob)} byte(s) has no header")
    if len(blob) > MAX_MEMORY_SIZE:
        raise MalformedWaveformMemory(
            f"blob of {len(blob)} bytes exceeds {MAX_MEMORY_SIZE} bytes"
        )

    num_snippets, num_sequences = blob[0], blob[1]
    if not 1 <= num_snippets <= MAX_SNIPPETS:
        raise MalformedWaveformMemory(f"snippet count {num_snippets} not in 1-{MAX_SNIPPETS}")
    if not 1 <= num_sequences <= MAX_SEQUENCES:
        raise MalformedWaveformMemory(
            f"sequence count {num_sequences} not in 1-{MAX_SEQUENCES}"
        )

    data_area_start = HEADER_SIZE + num_snippets + num_sequences
    if data_area_start > len(blob):
        raise MalformedWaveformMemory("pointer table runs past the end of the blob")

    pointers = blob[HEADER_SIZE:data_area_start]
    chunks: List[bytes] = []
    start = data_area_start
    for index, end in enumerate(pointers):
        if end < start:
            raise MalformedWaveformMemory(
                f"pointer {index} ({end}) does not advance past offset {start}"
            )
        if end >= len(blob):
            raise MalformedWaveformMemory(
                f"pointer {index} ({end}) is outside the blob of {len(blob)} bytes"
            )
        chunks.append(blob[start:end + 1])
        start = end + 1

    if start != len(blob):
        raise MalformedWaveformMemory(
            f"{len(blob) - start} trailing byte(s) after the last chunk"
        )

    try:
        snippets = tuple(Snippet(chunk) for chunk in chunks[:num_snippets])
        sequences = tuple(
            _decode_sequence(chunk, mapping) for chunk in chunks[num_snippets:]
        )
    except MalformedWaveformMemory:
        raise
    except WaveformError as e:
        raise MalformedWaveformMemory(f"chunk violates a limit: {e}") from e

    memory = WaveformMemory(
        data=blob,
        num_snippets=num_snippets,
        num_sequences=num_sequences,
    )
    logger.debug(f"Disassembled {memory!r}")
    return MemoryLayout(memory=memory, snippets=snippets, sequences=sequences)


def _decode_sequence(chunk: bytes, mapping: WireMapping) -> Sequence:
    builder = SequenceBuilder()
    for frame in decode_frames(chunk, mapping):
        builder.add_frame(frame)
    return builder.build()

