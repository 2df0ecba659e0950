"""
Test Configuration
==================

Pytest fixtures and test configuration for haptic-wavemem.
"""

import pytest


@pytest.fixture
def click_snippet():
    """Provide the two-point click snippet: ramp up to 15, ramp down to 0."""
    from haptic_wavemem.waveform import SnippetBuilder

    return SnippetBuilder().ramp(1, 15).ramp(1, 0).build()


@pytest.fixture
def default_frame():
    """Provide a default frame referencing snippet 1."""
    from haptic_wavemem.waveform import FrameBuilder

    return FrameBuilder(1).build()


@pytest.fixture
def single_frame_sequence(default_frame):
    """Provide a sequence holding one default frame."""
    from haptic_wavemem.waveform import SequenceBuilder

    return SequenceBuilder().add_frame(default_frame).build()


@pytest.fixture
def minimal_memory(click_snippet, single_frame_sequence):
    """Provide the smallest useful compiled memory (7 bytes)."""
    from haptic_wavemem.waveform import WaveformMemoryBuilder

    return (
        WaveformMemoryBuilder()
        .add_snippet(click_snippet)
        .add_sequence(single_frame_sequence)
        .build()
    )


@pytest.fixture
def effects_blob():
    """Expected bytes of the built-in effect library (attenuation mapping)."""
    return bytes([
        3, 3,                         # header
        9, 12, 15, 16, 19, 21,        # pointer table
        0x8F, 0x90,                   # snippet 1: click
        0x9F, 0x1F, 0x90,             # snippet 2: bump
        0x8F, 0x5F, 0x80,             # snippet 3: buzz
        0x11,                         # sequence 0: single_click
        0x11, 0x18, 0x11,             # sequence 1: double_click
        0x13, 0x98,                   # sequence 2: buzz
    ])


@pytest.fixture
def sample_program():
    """Provide a sample program definition as parsed YAML/JSON data."""
    return {
        "snippets": [
            {
                "name": "tap",
                "points": [
                    {"ramp": True, "timebases": 1, "amplitude": 15},
                    {"ramp": True, "timebases": 1, "amplitude": 0},
                ],
            },
        ],
        "sequences": [
            {
                "name": "tap_once",
                "frames": [{"snippet": "tap"}],
            },
        ],
    }
