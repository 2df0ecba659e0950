"""
Program Compiler
================

Turns a declarative ProgramDefinition into a compiled WaveformMemory.

Compilation steps:
    1. Check snippet and sequence names are unique
    2. Assign snippet ids 1, 2, ... and sequence ids 0, 1, ... by position
    3. Build every snippet through SnippetBuilder
    4. Build every frame through FrameBuilder (``silence`` -> id 0 path)
    5. Build every sequence through SequenceBuilder
    6. Compile through WaveformMemoryBuilder

Any waveform error aborts the whole compilation; nothing is returned.

Example:
    from haptic_wavemem.compiler import compile_program, load_program

    program = load_program("./data/programs/haptic_effects.yaml")
    compiled = compile_program(program)
    compiled.memory.to_bytes()
    compiled.sequence_ids["double_click"]   # 1
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Union

import yaml

from haptic_wavemem.errors import DuplicateName, ReservedName, UnknownSnippetName
from haptic_wavemem.models.levels import DEFAULT_MAPPING, WireMapping
from haptic_wavemem.models.program import (
    SILENCE_NAME,
    FrameDefinition,
    ProgramDefinition,
    SequenceDefinition,
    SnippetDefinition,
)
from haptic_wavemem.waveform import (
    Frame,
    FrameBuilder,
    Sequence,
    SequenceBuilder,
    Snippet,
    SnippetBuilder,
    WaveformMemory,
    WaveformMemoryBuilder,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledProgram:
    """
    Result of compiling a program definition.

    Attributes:
        memory: Compiled waveform memory (upload payload)
        snippet_ids: Snippet name -> assigned id (1-15)
        sequence_ids: Sequence name -> assigned id (0-15)
    """

    memory: WaveformMemory
    snippet_ids: Dict[str, int]
    sequence_ids: Dict[str, int]


def load_program(path: Union[str, Path]) -> ProgramDefinition:
    """
    Load a program definition from a YAML or JSON file.

    Args:
        path: Path to a ``.yaml``, ``.yml`` or ``.json`` file

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the content does not match the schema
    """
    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"Program file not found: {path}")

    logger.info(f"Loading program from: {path}")

    with open(file_path, "r") as f:
        if file_path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f) or {}

    program = ProgramDefinition.model_validate(data)

    logger.info(
        f"Loaded program: snippets={len(program.snippets)}, "
        f"sequences={len(program.sequences)}"
    )
    return program


def compile_program(
    program: ProgramDefinition,
    mapping: WireMapping = DEFAULT_MAPPING,
) -> CompiledProgram:
    """
    Compile a program definition into waveform memory.

    Args:
        program: Validated program definition
        mapping: Wire value table for frame gain and timebase

    Returns:
        CompiledProgram with the memory and the name -> id tables.

    Raises:
        DuplicateName: If a snippet or sequence name is used twice
        ReservedName: If a snippet is named ``silence``
        UnknownSnippetName: If a frame references an undefined snippet
        WaveformError: Any builder error (capacity, validation, structure)
    """
    _check_unique("snippet", (s.name for s in program.snippets))
    _check_unique("sequence", (s.name for s in program.sequences))

    builder = WaveformMemoryBuilder()
    snippet_ids: Dict[str, int] = {}
    for definition in program.snippets:
        snippet_ids[definition.name] = builder.next_snippet_id
        builder.add_snippet(build_snippet(definition))

    sequence_ids: Dict[str, int] = {}
    for definition in program.sequences:
        sequence_ids[definition.name] = builder.next_sequence_id
        builder.add_sequence(build_sequence(definition, snippet_ids, mapping))

    memory = builder.build()
    logger.info(
        f"Compiled program with '{mapping.name}' mapping: "
        f"{len(memory)} bytes, sequences={list(sequence_ids)}"
    )
    return CompiledProgram(memory=memory, snippet_ids=snippet_ids, sequence_ids=sequence_ids)


def build_snippet(definition: SnippetDefinition) -> Snippet:
    builder = SnippetBuilder()
    for point in definition.points:
        if point.ramp:
            builder.ramp(point.timebases, point.amplitude)
        else:
            builder.step(point.timebases, point.amplitude)
    return builder.build()


def build_frame(
    definition: FrameDefinition,
    snippet_ids: Dict[str, int],
    mapping: WireMapping = DEFAULT_MAPPING,
) -> Frame:
    """
    Build one frame, resolving its snippet name.

    Raises:
        UnknownSnippetName: If the name is neither defined nor ``silence``
    """
    if definition.snippet == SILENCE_NAME:
        builder = FrameBuilder.silence(mapping)
    elif definition.snippet in snippet_ids:
        builder = FrameBuilder(snippet_ids[definition.snippet], mapping)
    else:
        raise UnknownSnippetName(f"frame references unknown snippet '{definition.snippet}'")

    builder.gain(definition.gain).timebase(definition.timebase)
    if definition.loop_count is not None:
        builder.loop_count(definition.loop_count)
    if definition.frequency_hz is not None:
        builder.frequency_hz(definition.frequency_hz)
    return builder.build()


def build_sequence(
    definition: SequenceDefinition,
    snippet_ids: Dict[str, int],
    mapping: WireMapping = DEFAULT_MAPPING,
) -> Sequence:
    builder = SequenceBuilder()
    for frame in definition.frames:
        builder.add_frame(build_frame(frame, snippet_ids, mapping))
    return builder.build()


def _check_unique(kind: str, names: Iterable[str]) -> None:
    seen = set()
    for name in names:
        if name in seen:
            raise DuplicateName(f"{kind} name '{name}' is defined more than once")
        seen.add(name)
    if kind == "snippet" and SILENCE_NAME in seen:
        raise ReservedName(f"'{SILENCE_NAME}' is reserved for the built-in silence shape")
