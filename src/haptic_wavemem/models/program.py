"""
Program Definition Models
=========================

Declarative description of a waveform memory, loaded from YAML or JSON.

Snippets and sequences are listed in the order they are compiled, so a
snippet's position decides its id (first snippet = id 1) and a sequence's
position decides its id (first sequence = id 0). Frames refer to snippets by
name; the reserved name ``silence`` selects the built-in silence shape.

Example:
    snippets:
      - name: click
        points:
          - {ramp: true, timebases: 1, amplitude: 15}
          - {ramp: true, timebases: 2, amplitude: 0}
    sequences:
      - name: double_click
        frames:
          - {snippet: click, timebase: MS_21_76}
          - {snippet: silence, timebase: MS_43_52}
          - {snippet: click, timebase: MS_21_76}

Note:
    Field ranges are validated here for early, readable feedback; the
    waveform builders remain the authority on encodability.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from haptic_wavemem.models.levels import DEFAULT_GAIN, DEFAULT_TIMEBASE, Gain, Timebase


SILENCE_NAME = "silence"


class PointDefinition(BaseModel):
    """
    One piecewise-linear point.

    Attributes:
        ramp: Ramp (True) or step (False) to the amplitude
        timebases: Duration in timebase units
        amplitude: Target amplitude
    """

    ramp: bool = Field(default=True, description="Ramp to amplitude (False = step)")
    timebases: int = Field(..., ge=1, le=8, description="Duration in timebase units (1-8)")
    amplitude: int = Field(..., ge=0, le=15, description="Target amplitude (0-15)")


class SnippetDefinition(BaseModel):
    """Named waveform shape."""

    name: str = Field(..., min_length=1, description="Name referenced by frames")
    points: List[PointDefinition] = Field(
        ...,
        min_length=1,
        max_length=16,
        description="Ordered points (1-16)",
    )


class FrameDefinition(BaseModel):
    """
    One playback instruction.

    Attributes:
        snippet: Snippet name, or ``silence`` for the built-in silence shape
        gain: Gain level
        timebase: Timebase level
        loop_count: Extra repetitions (None = not set)
        frequency_hz: Frequency override (None = not set)
    """

    snippet: str = Field(..., min_length=1, description="Snippet name or 'silence'")
    gain: Gain = Field(default=DEFAULT_GAIN, description="Gain level")
    timebase: Timebase = Field(default=DEFAULT_TIMEBASE, description="Timebase level")
    loop_count: Optional[int] = Field(
        default=None,
        ge=0,
        le=15,
        description="Extra repetitions (0-15)",
    )
    frequency_hz: Optional[int] = Field(
        default=None,
        ge=0,
        le=511,
        description="Frequency override in Hz (0-511)",
    )


class SequenceDefinition(BaseModel):
    """Named playback program."""

    name: str = Field(..., min_length=1, description="Sequence name")
    frames: List[FrameDefinition] = Field(
        ...,
        min_length=1,
        max_length=32,
        description="Ordered frames (1-32)",
    )


class ProgramDefinition(BaseModel):
    """
    Complete waveform memory program.

    Attributes:
        snippets: Snippets in id order
        sequences: Sequences in id order
    """

    snippets: List[SnippetDefinition] = Field(
        ...,
        min_length=1,
        max_length=15,
        description="Snippets (1-15), first is id 1",
    )
    sequences: List[SequenceDefinition] = Field(
        ...,
        min_length=1,
        max_length=16,
        description="Sequences (1-16), first is id 0",
    )
