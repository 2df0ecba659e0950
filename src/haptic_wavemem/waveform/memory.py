"""
Waveform Memory
===============

Compiles snippets and sequences into the single blob uploaded to the
haptic driver's waveform memory.

Layout (at most 100 bytes):

    [0]          snippet count (1-15)
    [1]          sequence count (1-16)
    [2 .. P+1]   pointer table, P = snippet count + sequence count
                 snippet pointers first, then sequence pointers,
                 each the ABSOLUTE index of the LAST byte of its chunk
    [P+2 ..]     snippet chunks, insertion order
    [..]         sequence chunks, insertion order

Snippets are assigned ids 1, 2, 3, ... in insertion order (id 0 is the
built-in silence shape). Sequences are assigned ids 0, 1, 2, ...

State machine:
    Empty -> Accumulating -> Compiled

    Adds only move forward; build() produces an immutable WaveformMemory
    and never exposes a partially written buffer. There is no edit or
    remove: a revised program is recompiled from scratch, mirroring the
    device memory which cannot be partially patched.

Example:
    from haptic_wavemem.waveform import (
        FrameBuilder, SequenceBuilder, SnippetBuilder, WaveformMemoryBuilder,
    )

    snippet = SnippetBuilder().ramp(1, 15).ramp(1, 0).build()
    sequence = SequenceBuilder().add_frame(FrameBuilder(1).build()).build()

    memory = (
        WaveformMemoryBuilder()
        .add_snippet(snippet)      # id 1
        .add_sequence(sequence)    # id 0
        .build()
    )
    list(memory.to_bytes())   # [1, 1, 5, 6, 0x8F, 0x80, 0x01]
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Protocol, Sequence as SequenceType, Tuple

from haptic_wavemem.errors import (
    EmptySequence,
    EmptySnippet,
    TooManySequences,
    TooManySnippets,
    WaveformMemoryFull,
)
from haptic_wavemem.waveform.arena import ByteArena
from haptic_wavemem.waveform.sequence import Sequence
from haptic_wavemem.waveform.snippet import Snippet


logger = logging.getLogger(__name__)


MAX_MEMORY_SIZE = 100
MAX_SNIPPETS = 15
MAX_SEQUENCES = 16
HEADER_SIZE = 2
FIRST_SNIPPET_ID = 1
FIRST_SEQUENCE_ID = 0


class _Chunk(Protocol):
    def __len__(self) -> int:
        ...

    def to_bytes(self) -> bytes:
        ...


@dataclass(frozen=True, slots=True)
class LayoutPlan:
    """
    Size and pointer arithmetic for a set of chunks.

    Attributes:
        num_snippets: Snippet count (header byte 0)
        num_sequences: Sequence count (header byte 1)
        data_area_start: Index of the first chunk byte
        pointers: End pointers, snippets first then sequences
        total_size: Size of the complete blob
    """

    num_snippets: int
    num_sequences: int
    data_area_start: int
    pointers: Tuple[int, ...]
    total_size: int

    @property
    def pointer_table_size(self) -> int:
        return self.num_snippets + self.num_sequences

    @property
    def fits(self) -> bool:
        return self.total_size <= MAX_MEMORY_SIZE


def plan_layout(
    snippets: SequenceType[_Chunk],
    sequences: SequenceType[_Chunk],
) -> LayoutPlan:
    """
    Compute the pointer table and total size for the given chunks.

    One running offset walks the snippets and then continues into the
    sequences, so each pointer equals
    ``data_area_start + cumulative_length_through_chunk - 1``.

    Pure arithmetic: no limit is enforced here.
    """
    pointer_table_size = len(snippets) + len(sequences)
    data_area_start = HEADER_SIZE + pointer_table_size

    pointers: List[int] = []
    running_offset = 0
    for chunk in _chain(snippets, sequences):
        running_offset += len(chunk)
        pointers.append(data_area_start + running_offset - 1)

    return LayoutPlan(
        num_snippets=len(snippets),
        num_sequences=len(sequences),
        data_area_start=data_area_start,
        pointers=tuple(pointers),
        total_size=data_area_start + running_offset,
    )


def _chain(*groups: Iterable[_Chunk]) -> Iterable[_Chunk]:
    for group in groups:
        yield from group


@dataclass(frozen=True, slots=True)
class WaveformMemory:
    """
    Immutable compiled waveform memory.

    Produced by WaveformMemoryBuilder.build() or by disassembling a blob.
    The bytes are the upload payload; comparing them with a read-back of
    the device memory (see ``matches``) is the integrity check.

    Attributes:
        data: Complete blob (header, pointer table, chunks)
        num_snippets: Number of snippets
        num_sequences: Number of sequences
    """

    data: bytes
    num_snippets: int
    num_sequences: int

    def __len__(self) -> int:
        return len(self.data)

    @property
    def is_empty(self) -> bool:
        return len(self.data) == 0

    def to_bytes(self) -> bytes:
        return self.data

    def as_bytes(self) -> memoryview:
        """Read-only byte view of the blob."""
        return memoryview(self.data)

    @property
    def data_area_start(self) -> int:
        return HEADER_SIZE + self.num_snippets + self.num_sequences

    @property
    def pointer_table(self) -> Tuple[int, ...]:
        return tuple(self.data[HEADER_SIZE:self.data_area_start])

    @property
    def snippet_pointers(self) -> Tuple[int, ...]:
        return self.pointer_table[:self.num_snippets]

    @property
    def sequence_pointers(self) -> Tuple[int, ...]:
        return self.pointer_table[self.num_snippets:]

    @property
    def free_bytes(self) -> int:
        return MAX_MEMORY_SIZE - len(self.data)

    def matches(self, readback: bytes) -> bool:
        """
        Integrity contract: True iff ``readback`` equals the blob byte for byte.

        A read-back of a different length never matches.
        """
        return bytes(readback) == self.data

    def hex(self, sep: str = " ") -> str:
        return self.data.hex(sep) if sep else self.data.hex()

    def __repr__(self) -> str:
        return (
            f"WaveformMemory(snippets={self.num_snippets}, "
            f"sequences={self.num_sequences}, size={len(self.data)})"
        )


class WaveformMemoryBuilder:
    """
    Add-only accumulator for snippets and sequences.

    Adds are checked against the count limits before anything is stored,
    so a rejected snippet or sequence leaves all accepted content and
    their assigned ids unchanged. The 100-byte ceiling is enforced by
    build(), since it depends on the final counts and chunk sizes.
    """

    def __init__(self) -> None:
        self._snippets: List[Snippet] = []
        self._sequences: List[Sequence] = []

    # -------------------------------------------------------------------------
    # Accumulation
    # -------------------------------------------------------------------------

    def add_snippet(self, snippet: Snippet) -> "WaveformMemoryBuilder":
        """
        Add a snippet; it receives id ``next_snippet_id``.

        Raises:
            TooManySnippets: If 15 snippets were already added
        """
        if len(self._snippets) >= MAX_SNIPPETS:
            logger.warning(f"Snippet rejected: limit of {MAX_SNIPPETS} snippets reached")
            raise TooManySnippets(f"waveform memory already holds {MAX_SNIPPETS} snippets")

        snippet_id = self.next_snippet_id
        self._snippets.append(snippet)
        logger.debug(f"Snippet {snippet_id} added ({len(snippet)} bytes)")
        return self

    def add_sequence(self, sequence: Sequence) -> "WaveformMemoryBuilder":
        """
        Add a sequence; it receives id ``next_sequence_id``.

        Raises:
            TooManySequences: If 16 sequences were already added
        """
        if len(self._sequences) >= MAX_SEQUENCES:
            logger.warning(f"Sequence rejected: limit of {MAX_SEQUENCES} sequences reached")
            raise TooManySequences(
                f"waveform memory already holds {MAX_SEQUENCES} sequences"
            )

        sequence_id = self.next_sequence_id
        self._sequences.append(sequence)
        logger.debug(f"Sequence {sequence_id} added ({len(sequence)} bytes)")
        return self

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    @property
    def next_snippet_id(self) -> int:
        return FIRST_SNIPPET_ID + len(self._snippets)

    @property
    def next_sequence_id(self) -> int:
        return FIRST_SEQUENCE_ID + len(self._sequences)

    @property
    def num_snippets(self) -> int:
        return len(self._snippets)

    @property
    def num_sequences(self) -> int:
        return len(self._sequences)

    @property
    def snippets(self) -> Tuple[Snippet, ...]:
        return tuple(self._snippets)

    @property
    def sequences(self) -> Tuple[Sequence, ...]:
        return tuple(self._sequences)

    @property
    def projected_size(self) -> int:
        """Size build() would produce from the current content."""
        return plan_layout(self._snippets, self._sequences).total_size

    # -------------------------------------------------------------------------
    # Compilation
    # -------------------------------------------------------------------------

    def build(self) -> WaveformMemory:
        """
        Compile the accumulated content.

        Raises:
            EmptySnippet: If no snippet was added
            EmptySequence: If no sequence was added
            WaveformMemoryFull: If the blob would exceed 100 bytes
        """
        if not self._snippets:
            raise EmptySnippet("waveform memory has no snippets")
        if not self._sequences:
            raise EmptySequence("waveform memory has no sequences")

        plan = plan_layout(self._snippets, self._sequences)
        if not plan.fits:
            logger.warning(
                f"Waveform memory rejected: {plan.total_size} bytes "
                f"exceeds {MAX_MEMORY_SIZE} bytes"
            )
            raise WaveformMemoryFull(
                f"compiled size {plan.total_size} exceeds {MAX_MEMORY_SIZE} bytes"
            )

        arena = ByteArena(MAX_MEMORY_SIZE, overflow_error=WaveformMemoryFull)
        arena.append((plan.num_snippets, plan.num_sequences))
        arena.append(plan.pointers)
        for snippet in self._snippets:
            snippet.encode_into(arena)
        for sequence in self._sequences:
            sequence.encode_into(arena)

        assert len(arena) == plan.total_size

        memory = WaveformMemory(
            data=arena.to_bytes(),
            num_snippets=plan.num_snippets,
            num_sequences=plan.num_sequences,
        )
        logger.info(
            f"Compiled waveform memory: {memory.num_snippets} snippet(s), "
            f"{memory.num_sequences} sequence(s), {len(memory)}/{MAX_MEMORY_SIZE} bytes"
        )
        return memory
