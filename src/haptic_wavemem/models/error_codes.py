"""
Error Codes
===========

Fixed set of machine-readable codes for waveform construction failures.

Every exception raised by the compiler carries exactly ONE code, so callers
(CLI, upload tooling, logs) can react to a failure without parsing messages.

Groups:
    - Field validation: a single value is out of its encodable range
    - Capacity: a fixed limit would be exceeded by the addition
    - Structural: a finalization was requested on an empty builder
    - Decode: a blob does not follow the waveform memory layout
    - Program: a declarative program definition cannot be resolved
"""

from enum import Enum


class ErrorCode(str, Enum):
    """
    Machine-readable waveform error codes.

    Attributes:
        INVALID_TIMEBASE: Point timebase count outside 1-8
        INVALID_AMPLITUDE: Point amplitude outside 0-15
        INVALID_SNIPPET_ID: Frame snippet id is 0 or above 15
        INVALID_LOOP_COUNT: Frame loop count above 15
        INVALID_FREQUENCY: Frame frequency override above 511 Hz
        TOO_MANY_POINTS: Snippet already holds 16 points
        TOO_MANY_FRAMES: Sequence already holds 32 frames
        SEQUENCE_FULL: Frame would push a sequence past 96 bytes
        TOO_MANY_SNIPPETS: Memory already holds 15 snippets
        TOO_MANY_SEQUENCES: Memory already holds 16 sequences
        WAVEFORM_MEMORY_FULL: Compiled memory would exceed 100 bytes
        EMPTY_SNIPPET: Finalization without any snippet content
        EMPTY_SEQUENCE: Finalization without any sequence content
        MALFORMED_WAVEFORM_MEMORY: Blob cannot be decoded
        UNKNOWN_SNIPPET_NAME: Program frame references an undefined snippet
        DUPLICATE_NAME: Program defines the same name twice
        RESERVED_NAME: Program uses a reserved snippet name
    """

    # Field validation
    INVALID_TIMEBASE = "INVALID_TIMEBASE"
    INVALID_AMPLITUDE = "INVALID_AMPLITUDE"
    INVALID_SNIPPET_ID = "INVALID_SNIPPET_ID"
    INVALID_LOOP_COUNT = "INVALID_LOOP_COUNT"
    INVALID_FREQUENCY = "INVALID_FREQUENCY"

    # Capacity
    TOO_MANY_POINTS = "TOO_MANY_POINTS"
    TOO_MANY_FRAMES = "TOO_MANY_FRAMES"
    SEQUENCE_FULL = "SEQUENCE_FULL"
    TOO_MANY_SNIPPETS = "TOO_MANY_SNIPPETS"
    TOO_MANY_SEQUENCES = "TOO_MANY_SEQUENCES"
    WAVEFORM_MEMORY_FULL = "WAVEFORM_MEMORY_FULL"

    # Structural
    EMPTY_SNIPPET = "EMPTY_SNIPPET"
    EMPTY_SEQUENCE = "EMPTY_SEQUENCE"

    # Decode
    MALFORMED_WAVEFORM_MEMORY = "MALFORMED_WAVEFORM_MEMORY"

    # Program
    UNKNOWN_SNIPPET_NAME = "UNKNOWN_SNIPPET_NAME"
    DUPLICATE_NAME = "DUPLICATE_NAME"
    RESERVED_NAME = "RESERVED_NAME"
