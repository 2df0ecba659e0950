#!/usr/bin/env python3
"""
haptic-wavemem Command Line
===========================

Compile, inspect and verify haptic waveform memory images.

Commands:
    compile PROGRAM   Compile a YAML/JSON program into waveform memory
    effects           Compile the built-in effect library
    inspect BLOB      Disassemble a binary waveform memory image
    verify BLOB READBACK
                      Compare an image with a device read-back (byte for byte)

Exit status:
    0  success (verify: images identical)
    1  verify: images differ
    2  waveform, program or configuration error

Usage:
    haptic-wavemem compile data/programs/haptic_effects.yaml -o effects.bin
    haptic-wavemem compile program.yaml                 (hex on stdout)
    haptic-wavemem effects --mapping ordinal --format hex
    haptic-wavemem inspect effects.bin
    haptic-wavemem verify effects.bin readback.bin
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from haptic_wavemem.compiler import CompiledProgram, compile_program, load_program
from haptic_wavemem.config import Settings, load_config, setup_logging
from haptic_wavemem.effects import build_effect_library
from haptic_wavemem.errors import WaveformError
from haptic_wavemem.models.levels import WIRE_MAPPINGS, WireMapping, get_wire_mapping
from haptic_wavemem.waveform import WaveformMemory, disassemble


logger = logging.getLogger(__name__)


EXIT_OK = 0
EXIT_MISMATCH = 1
EXIT_ERROR = 2


# =============================================================================
# Output helpers
# =============================================================================

def _write_memory(memory: WaveformMemory, output: Optional[str], fmt: str) -> None:
    if fmt == "hex":
        text = memory.hex() + "\n"
        if output:
            Path(output).write_text(text)
        else:
            sys.stdout.write(text)
    else:
        if not output:
            raise ValueError("binary output requires -o/--output")
        Path(output).write_bytes(memory.to_bytes())

    if output:
        logger.info(f"Wrote {len(memory)} bytes ({fmt}) to {output}")


def _output_format(args: argparse.Namespace, settings: Settings) -> str:
    """Explicit --format wins; without -o the image goes to stdout as hex."""
    if args.format:
        return args.format
    if not args.output:
        return "hex"
    return settings.compiler.output_format


def _print_ids(compiled: CompiledProgram) -> None:
    for name, snippet_id in compiled.snippet_ids.items():
        print(f"snippet {snippet_id:>2}  {name}")
    for name, sequence_id in compiled.sequence_ids.items():
        print(f"sequence {sequence_id:>2}  {name}")
    print(f"size: {len(compiled.memory)} bytes")


def _read_blob(path: str) -> bytes:
    """Read a binary image, or a hex text image written by ``--format hex``."""
    raw = Path(path).read_bytes()
    if path.endswith((".hex", ".txt")):
        return bytes.fromhex(raw.decode("ascii"))
    return raw


# =============================================================================
# Commands
# =============================================================================

def cmd_compile(args: argparse.Namespace, settings: Settings, mapping: WireMapping) -> int:
    program = load_program(args.program)
    compiled = compile_program(program, mapping)
    fmt = _output_format(args, settings)
    _write_memory(compiled.memory, args.output, fmt)
    if args.output:
        _print_ids(compiled)
    return EXIT_OK


def cmd_effects(args: argparse.Namespace, settings: Settings, mapping: WireMapping) -> int:
    compiled = build_effect_library(mapping)
    fmt = _output_format(args, settings)
    _write_memory(compiled.memory, args.output, fmt)
    if args.output:
        _print_ids(compiled)
    return EXIT_OK


def cmd_inspect(args: argparse.Namespace, settings: Settings, mapping: WireMapping) -> int:
    layout = disassemble(_read_blob(args.blob), mapping)
    for line in layout.describe():
        print(line)
    return EXIT_OK


def cmd_verify(args: argparse.Namespace, settings: Settings, mapping: WireMapping) -> int:
    layout = disassemble(_read_blob(args.blob), mapping)
    readback = _read_blob(args.readback)

    if layout.memory.matches(readback):
        print(f"OK: {len(readback)} bytes identical")
        return EXIT_OK

    expected = layout.memory.to_bytes()
    if len(readback) != len(expected):
        print(f"MISMATCH: length {len(readback)} != {len(expected)}")
    else:
        first = next(i for i, (a, b) in enumerate(zip(expected, readback)) if a != b)
        print(
            f"MISMATCH: first difference at offset {first}: "
            f"expected 0x{expected[first]:02x}, read 0x{readback[first]:02x}"
        )
    return EXIT_MISMATCH


# =============================================================================
# Argument parsing
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="haptic-wavemem",
        description="Compile and inspect haptic driver waveform memory images",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: search common locations)",
    )

    # shared by every subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--mapping",
        choices=sorted(WIRE_MAPPINGS),
        default=None,
        help="Gain/timebase wire mapping profile (overrides config)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p_compile = sub.add_parser(
        "compile", parents=[common], help="Compile a program file"
    )
    p_compile.add_argument("program", help="YAML or JSON program definition")
    p_compile.add_argument("-o", "--output", default=None, help="Output file")
    p_compile.add_argument("--format", choices=["bin", "hex"], default=None)
    p_compile.set_defaults(handler=cmd_compile)

    p_effects = sub.add_parser(
        "effects", parents=[common], help="Compile the built-in effect library"
    )
    p_effects.add_argument("-o", "--output", default=None, help="Output file")
    p_effects.add_argument("--format", choices=["bin", "hex"], default=None)
    p_effects.set_defaults(handler=cmd_effects)

    p_inspect = sub.add_parser(
        "inspect", parents=[common], help="Disassemble a waveform memory image"
    )
    p_inspect.add_argument("blob", help="Binary image (or .hex text image)")
    p_inspect.set_defaults(handler=cmd_inspect)

    p_verify = sub.add_parser(
        "verify", parents=[common], help="Compare an image with a read-back"
    )
    p_verify.add_argument("blob", help="Compiled image")
    p_verify.add_argument("readback", help="Bytes read back from the device")
    p_verify.set_defaults(handler=cmd_verify)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_config(args.config)
    except ValidationError as e:
        print(f"error: invalid configuration: {e}", file=sys.stderr)
        return EXIT_ERROR

    setup_logging(settings)
    mapping = get_wire_mapping(args.mapping) if args.mapping else settings.compiler.mapping

    try:
        return args.handler(args, settings, mapping)
    except WaveformError as e:
        print(f"error: {e.code.value}: {e}", file=sys.stderr)
        return EXIT_ERROR
    except ValidationError as e:
        print(f"error: invalid program: {e}", file=sys.stderr)
        return EXIT_ERROR
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
