"""
Data Models
===========

Enumerations, wire tables and declarative schemas for haptic-wavemem.

Models:
    Errors:
        - ErrorCode: Machine-readable failure codes

    Levels:
        - Gain, Timebase: Closed playback level enumerations
        - WireMapping: Level -> wire bits tables (named profiles)

    Program:
        - ProgramDefinition: YAML/JSON program schema
        - SnippetDefinition, PointDefinition
        - SequenceDefinition, FrameDefinition
"""

from haptic_wavemem.models.error_codes import ErrorCode
from haptic_wavemem.models.levels import (
    ATTENUATION_MAPPING,
    DEFAULT_MAPPING,
    ORDINAL_MAPPING,
    WIRE_MAPPINGS,
    Gain,
    Timebase,
    WireMapping,
    get_wire_mapping,
)
from haptic_wavemem.models.program import (
    FrameDefinition,
    PointDefinition,
    ProgramDefinition,
    SequenceDefinition,
    SnippetDefinition,
)

__all__ = [
    # Errors
    "ErrorCode",
    # Levels
    "Gain",
    "Timebase",
    "WireMapping",
    "ATTENUATION_MAPPING",
    "ORDINAL_MAPPING",
    "DEFAULT_MAPPING",
    "WIRE_MAPPINGS",
    "get_wire_mapping",
    # Program
    "PointDefinition",
    "SnippetDefinition",
    "FrameDefinition",
    "SequenceDefinition",
    "ProgramDefinition",
]
