"""
Waveform Errors
===============

Exception hierarchy for the waveform memory compiler.

Every error is terminal for the construction attempt that raised it:
the builder that raised keeps all previously accepted content, and no
partially-written buffer is ever exposed.

Hierarchy:
    WaveformError
    ├── FieldValidationError
    │   ├── InvalidTimebase
    │   ├── InvalidAmplitude
    │   ├── InvalidSnippetId
    │   ├── InvalidLoopCount
    │   └── InvalidFrequency
    ├── CapacityError
    │   ├── TooManySnippets
    │   │   └── TooManyPoints
    │   ├── TooManySequences
    │   │   └── TooManyFrames
    │   └── WaveformMemoryFull
    │       └── SequenceFull
    ├── StructuralError
    │   ├── EmptySnippet
    │   └── EmptySequence
    ├── DecodeError
    │   └── MalformedWaveformMemory
    └── ProgramError
        ├── UnknownSnippetName
        ├── DuplicateName
        └── ReservedName
"""

from typing import Optional

from haptic_wavemem.models.error_codes import ErrorCode


class WaveformError(Exception):
    """
    Base class for waveform compiler errors.

    Attributes:
        code: Machine-readable error code
    """

    code: ErrorCode

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.code.value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code.value}: {self})"


# =============================================================================
# Field validation
# =============================================================================

class FieldValidationError(WaveformError):
    """A single field is outside its encodable range."""


class InvalidTimebase(FieldValidationError):
    """Raised when a point timebase count is not in 1-8."""

    code = ErrorCode.INVALID_TIMEBASE


class InvalidAmplitude(FieldValidationError):
    """Raised when a point amplitude is not in 0-15."""

    code = ErrorCode.INVALID_AMPLITUDE


class InvalidSnippetId(FieldValidationError):
    """Raised when a frame references snippet id 0 or an id above 15."""

    code = ErrorCode.INVALID_SNIPPET_ID


class InvalidLoopCount(FieldValidationError):
    """Raised when a frame loop count is above 15."""

    code = ErrorCode.INVALID_LOOP_COUNT


class InvalidFrequency(FieldValidationError):
    """Raised when a frame frequency override does not fit in 9 bits."""

    code = ErrorCode.INVALID_FREQUENCY


# =============================================================================
# Capacity
# =============================================================================

class CapacityError(WaveformError):
    """
    A fixed limit would be exceeded.

    Raised exactly when the limit would be crossed, never earlier,
    and always before any byte of the rejected addition is stored.
    """


class TooManySnippets(CapacityError):
    """Raised when adding a 16th snippet to a waveform memory."""

    code = ErrorCode.TOO_MANY_SNIPPETS


class TooManySequences(CapacityError):
    """Raised when adding a 17th sequence to a waveform memory."""

    code = ErrorCode.TOO_MANY_SEQUENCES


class WaveformMemoryFull(CapacityError):
    """Raised when the compiled memory would exceed 100 bytes."""

    code = ErrorCode.WAVEFORM_MEMORY_FULL


class TooManyPoints(TooManySnippets):
    """
    Raised when adding a 17th point to a snippet.

    Also caught as TooManySnippets.
    """

    code = ErrorCode.TOO_MANY_POINTS


class TooManyFrames(TooManySequences):
    """
    Raised when adding a 33rd frame to a sequence.

    Also caught as TooManySequences.
    """

    code = ErrorCode.TOO_MANY_FRAMES


class SequenceFull(WaveformMemoryFull):
    """
    Raised when a frame would push a sequence past 96 bytes.

    Also caught as WaveformMemoryFull.
    """

    code = ErrorCode.SEQUENCE_FULL


# =============================================================================
# Structural
# =============================================================================

class StructuralError(WaveformError):
    """Finalization was requested while required content is missing."""


class EmptySnippet(StructuralError):
    """Raised when building a snippet without points, or a memory without snippets."""

    code = ErrorCode.EMPTY_SNIPPET


class EmptySequence(StructuralError):
    """Raised when building a sequence without frames, or a memory without sequences."""

    code = ErrorCode.EMPTY_SEQUENCE


# =============================================================================
# Decode
# =============================================================================

class DecodeError(WaveformError):
    """A byte string does not follow the waveform memory layout."""


class MalformedWaveformMemory(DecodeError):
    """Raised when a blob or a frame stream cannot be decoded."""

    code = ErrorCode.MALFORMED_WAVEFORM_MEMORY


# =============================================================================
# Program
# =============================================================================

class ProgramError(WaveformError):
    """A declarative program definition cannot be resolved."""


class UnknownSnippetName(ProgramError):
    """Raised when a frame references a snippet name that was never defined."""

    code = ErrorCode.UNKNOWN_SNIPPET_NAME


class DuplicateName(ProgramError):
    """Raised when a program defines the same snippet or sequence name twice."""

    code = ErrorCode.DUPLICATE_NAME


class ReservedName(ProgramError):
    """Raised when a program names a snippet with a reserved name (``silence``)."""

    code = ErrorCode.RESERVED_NAME
