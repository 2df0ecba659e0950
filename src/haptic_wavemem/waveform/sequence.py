"""
Sequences
=========

A sequence is an ordered playback program of 1-32 frames, at most 96 bytes
once encoded. Its encoding is the concatenation of its frames' bytes.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from haptic_wavemem.errors import EmptySequence, SequenceFull, TooManyFrames
from haptic_wavemem.waveform.arena import ByteArena
from haptic_wavemem.waveform.frame import Frame


logger = logging.getLogger(__name__)


MAX_FRAMES_PER_SEQUENCE = 32
MAX_SEQUENCE_BYTES = 96


@dataclass(frozen=True, slots=True)
class Sequence:
    """
    Immutable playback program.

    Attributes:
        frames: Frames in insertion order
        data: Concatenated frame bytes
    """

    frames: Tuple[Frame, ...]
    data: bytes

    @property
    def byte_len(self) -> int:
        return len(self.data)

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    def __len__(self) -> int:
        return len(self.data)

    def to_bytes(self) -> bytes:
        return self.data

    def encode_into(self, arena: ByteArena) -> int:
        arena.append(self.data)
        return len(self.data)

    def __repr__(self) -> str:
        return f"Sequence(frames={len(self.frames)}, data={self.data.hex()})"


class SequenceBuilder:
    """
    Add-only accumulator for frames.

    Both limits (96 bytes, then 32 frames) are checked before anything is
    appended, so a rejected frame leaves the builder unchanged.

    Example:
        sequence = (
            SequenceBuilder()
            .add_frame(FrameBuilder(1).build())
            .add_frame(FrameBuilder.silence().build())
            .build()
        )
    """

    def __init__(self) -> None:
        self._arena = ByteArena(MAX_SEQUENCE_BYTES, overflow_error=SequenceFull)
        self._frames: List[Frame] = []

    @property
    def current_len(self) -> int:
        """Encoded bytes accumulated so far."""
        return len(self._arena)

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    def add_frame(self, frame: Frame) -> "SequenceBuilder":
        """
        Append a frame.

        The byte budget is checked before the frame count.

        Raises:
            SequenceFull: Frame bytes would push the sequence past 96 bytes
            TooManyFrames: Sequence already holds 32 frames
        """
        if not self._arena.fits(len(frame)):
            logger.warning(
                f"Frame rejected: {len(frame)} byte(s) would exceed "
                f"{MAX_SEQUENCE_BYTES} bytes ({self.current_len} used)"
            )
            raise SequenceFull(
                f"{len(frame)} byte(s) do not fit: "
                f"{self.current_len}/{MAX_SEQUENCE_BYTES} used"
            )

        if len(self._frames) >= MAX_FRAMES_PER_SEQUENCE:
            logger.warning(
                f"Frame rejected: limit of {MAX_FRAMES_PER_SEQUENCE} frames reached"
            )
            raise TooManyFrames(
                f"sequence already holds {MAX_FRAMES_PER_SEQUENCE} frames"
            )

        self._arena.append(frame.to_bytes())
        self._frames.append(frame)
        logger.debug(f"Added {frame!r} ({self.current_len}/{MAX_SEQUENCE_BYTES} bytes)")
        return self

    def build(self) -> Sequence:
        """
        Finalize the sequence.

        Raises:
            EmptySequence: If no frames were added
        """
        if not self._frames:
            raise EmptySequence("sequence has no frames")
        return Sequence(frames=tuple(self._frames), data=self._arena.to_bytes())
