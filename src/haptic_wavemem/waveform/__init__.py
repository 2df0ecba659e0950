"""
Waveform Module
===============

Builders and encoders for the haptic driver's waveform memory.

Components (leaf-first):
    - PwlPoint / SnippetBuilder: piecewise-linear shapes (1 byte per point)
    - FrameBuilder: snippet reference plus playback modifiers (1-3 bytes)
    - SequenceBuilder: ordered frames forming a playback program (<= 96 bytes)
    - WaveformMemoryBuilder: snippets + sequences compiled into one blob (<= 100 bytes)
    - disassemble: decode a compiled blob back into its parts

Example:
    from haptic_wavemem.waveform import (
        FrameBuilder, SequenceBuilder, SnippetBuilder, WaveformMemoryBuilder,
    )

    click = SnippetBuilder().ramp(1, 15).ramp(2, 0).build()
    single = SequenceBuilder().add_frame(FrameBuilder(1).build()).build()
    memory = WaveformMemoryBuilder().add_snippet(click).add_sequence(single).build()
"""

from haptic_wavemem.waveform.arena import ByteArena
from haptic_wavemem.waveform.snippet import PwlPoint, Snippet, SnippetBuilder
from haptic_wavemem.waveform.frame import Frame, FrameBuilder, encode_frame
from haptic_wavemem.waveform.sequence import Sequence, SequenceBuilder
from haptic_wavemem.waveform.memory import (
    LayoutPlan,
    WaveformMemory,
    WaveformMemoryBuilder,
    plan_layout,
)
from haptic_wavemem.waveform.decoder import (
    MemoryLayout,
    decode_frame,
    decode_frames,
    disassemble,
)


__all__ = [
    "ByteArena",
    "PwlPoint",
    "Snippet",
    "SnippetBuilder",
    "Frame",
    "FrameBuilder",
    "encode_frame",
    "Sequence",
    "SequenceBuilder",
    "LayoutPlan",
    "WaveformMemory",
    "WaveformMemoryBuilder",
    "plan_layout",
    "MemoryLayout",
    "decode_frame",
    "decode_frames",
    "disassemble",
]
