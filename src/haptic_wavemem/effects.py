"""
Built-in Effect Library
=======================

A ready-made waveform memory with common haptic effects.

Snippets:
    1  click   quick rise, smooth fall
    2  bump    gradual rise, hold, gradual fall
    3  buzz    quick rise, long sustain, quick fall

Sequences:
    0  single_click   one click
    1  double_click   click, silence, click
    2  buzz           buzz played 4 times (loop count 3)

Timing uses the 21.76 ms timebase for smoother transitions; the pause in
the double click uses the built-in silence shape at 43.52 ms.
"""

from haptic_wavemem.compiler import CompiledProgram, compile_program
from haptic_wavemem.models.levels import DEFAULT_MAPPING, Gain, Timebase, WireMapping
from haptic_wavemem.models.program import (
    SILENCE_NAME,
    FrameDefinition,
    PointDefinition,
    ProgramDefinition,
    SequenceDefinition,
    SnippetDefinition,
)


def _ramp(timebases: int, amplitude: int) -> PointDefinition:
    return PointDefinition(ramp=True, timebases=timebases, amplitude=amplitude)


def _step(timebases: int, amplitude: int) -> PointDefinition:
    return PointDefinition(ramp=False, timebases=timebases, amplitude=amplitude)


def effect_library_definition() -> ProgramDefinition:
    """Program definition of the built-in effects."""
    click = FrameDefinition(snippet="click", gain=Gain.FULL, timebase=Timebase.MS_21_76)

    return ProgramDefinition(
        snippets=[
            SnippetDefinition(name="click", points=[_ramp(1, 15), _ramp(2, 0)]),
            SnippetDefinition(
                name="bump",
                points=[_ramp(2, 15), _step(2, 15), _ramp(2, 0)],
            ),
            SnippetDefinition(
                name="buzz",
                points=[_ramp(1, 15), _step(6, 15), _ramp(1, 0)],
            ),
        ],
        sequences=[
            SequenceDefinition(name="single_click", frames=[click]),
            SequenceDefinition(
                name="double_click",
                frames=[
                    click,
                    FrameDefinition(snippet=SILENCE_NAME, timebase=Timebase.MS_43_52),
                    click,
                ],
            ),
            SequenceDefinition(
                name="buzz",
                frames=[
                    FrameDefinition(
                        snippet="buzz",
                        gain=Gain.FULL,
                        timebase=Timebase.MS_21_76,
                        loop_count=3,
                    ),
                ],
            ),
        ],
    )


def build_effect_library(mapping: WireMapping = DEFAULT_MAPPING) -> CompiledProgram:
    """Compile the built-in effects into waveform memory."""
    return compile_program(effect_library_definition(), mapping)
