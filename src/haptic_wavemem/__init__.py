"""
haptic-wavemem
==============

Waveform memory compiler for haptic driver chips.

This package builds the bytes a haptic driver's waveform memory expects:
piecewise-linear snippets (amplitude envelopes) and sequences of frames
that play them, packed behind a header and pointer table into at most
100 bytes. Every capacity and field limit is checked while building, so
a compiled memory is always a valid upload payload.

Components:
    - waveform: Point, snippet, frame, sequence and memory builders plus
      the disassembler
    - models: Gain/Timebase levels, wire mappings, error codes, program schema
    - compiler: YAML/JSON program -> WaveformMemory
    - effects: Built-in effect library
    - main: ``haptic-wavemem`` command line

Example:
    from haptic_wavemem.waveform import (
        FrameBuilder, SequenceBuilder, SnippetBuilder, WaveformMemoryBuilder,
    )

    snippet = SnippetBuilder().ramp(1, 15).ramp(1, 0).build()
    sequence = SequenceBuilder().add_frame(FrameBuilder(1).build()).build()
    memory = (
        WaveformMemoryBuilder()
        .add_snippet(snippet)
        .add_sequence(sequence)
        .build()
    )
    memory.to_bytes()   # b'\\x01\\x01\\x05\\x06\\x8f\\x80\\x01'
"""

__version__ = "0.1.0"
__author__ = "haptic-wavemem contributors"

__all__ = [
    "__version__",
]
