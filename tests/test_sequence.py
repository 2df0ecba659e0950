"""
Sequence Tests
==============

Tests for frame accumulation and sequence limits.
"""

import pytest

from haptic_wavemem.errors import EmptySequence, SequenceFull, TooManyFrames
from haptic_wavemem.models.levels import Gain, Timebase
from haptic_wavemem.waveform import Frame, FrameBuilder, SequenceBuilder


def _three_byte_frame():
    return FrameBuilder(1).frequency_hz(200).build()


class TestSequenceBuilder:
    """Tests for SequenceBuilder."""

    def test_concatenates_frames(self):
        sequence = (
            SequenceBuilder()
            .add_frame(FrameBuilder(1).build())
            .add_frame(FrameBuilder(8).build())
            .add_frame(FrameBuilder(1).frequency_hz(300).build())
            .build()
        )

        assert sequence.to_bytes() == bytes([0x01, 0x00, 0x81, 0x01, 0x86, 0x2C])
        assert sequence.frame_count == 3
        assert len(sequence) == 6

    def test_tracks_current_length(self):
        builder = SequenceBuilder()
        builder.add_frame(_three_byte_frame())

        assert builder.current_len == 3
        assert builder.frame_count == 1

    def test_thirty_two_frames_fill_96_bytes(self):
        """The largest possible sequence hits both limits at once."""
        builder = SequenceBuilder()
        for _ in range(32):
            builder.add_frame(_three_byte_frame())

        assert builder.build().byte_len == 96

    def test_thirty_third_frame_rejected(self):
        from haptic_wavemem.waveform.sequence import MAX_FRAMES_PER_SEQUENCE

        builder = SequenceBuilder()
        for _ in range(MAX_FRAMES_PER_SEQUENCE):
            builder.add_frame(FrameBuilder(1).build())

        with pytest.raises(TooManyFrames):
            builder.add_frame(FrameBuilder(2).build())

        sequence = builder.build()
        assert sequence.frame_count == 32
        assert sequence.to_bytes() == b"\x01" * 32

    def test_frame_bytes_past_limit_rejected(self):
        """A frame whose bytes do not fit is rejected without storing any."""
        oversized = Frame(
            snippet_id=1,
            gain=Gain.FULL,
            timebase=Timebase.MS_5_44,
            loop_count=None,
            frequency_hz=None,
            data=b"\x01" * 95,
        )
        builder = SequenceBuilder().add_frame(oversized)

        with pytest.raises(SequenceFull):
            builder.add_frame(_three_byte_frame())

        assert builder.current_len == 95
        assert builder.frame_count == 1

    def test_empty_sequence(self):
        with pytest.raises(EmptySequence):
            SequenceBuilder().build()

    def test_silence_frames_allowed(self):
        sequence = (
            SequenceBuilder()
            .add_frame(FrameBuilder.silence().build())
            .build()
        )
        assert sequence.frames[0].is_silence


class TestSequenceLimitOrder:
    """Tests for which limit a rejected frame reports."""

    def test_byte_budget_checked_before_frame_count(self):
        """A full 96-byte sequence rejects the next frame as out of space."""
        from haptic_wavemem.errors import WaveformMemoryFull

        builder = SequenceBuilder()
        for _ in range(32):
            builder.add_frame(_three_byte_frame())

        with pytest.raises(SequenceFull):
            builder.add_frame(FrameBuilder(1).build())
        with pytest.raises(WaveformMemoryFull):
            builder.add_frame(_three_byte_frame())

        assert builder.current_len == 96
        assert builder.frame_count == 32

    def test_frame_count_caught_as_too_many_sequences(self):
        """The 33rd one-byte frame is rejected by the frame count."""
        from haptic_wavemem.errors import TooManySequences

        builder = SequenceBuilder()
        for _ in range(32):
            builder.add_frame(FrameBuilder(1).build())

        with pytest.raises(TooManySequences) as excinfo:
            builder.add_frame(FrameBuilder(1).build())

        assert isinstance(excinfo.value, TooManyFrames)
        assert builder.current_len == 32
