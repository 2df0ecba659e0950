"""
Compiler Tests
==============

Tests for program loading, compilation and the built-in effect library.
"""

import json
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from haptic_wavemem.compiler import compile_program, load_program
from haptic_wavemem.models.program import ProgramDefinition


REPO_ROOT = Path(__file__).parent.parent


class TestCompileProgram:
    """Tests for compile_program."""

    def test_sample_program(self, sample_program):
        program = ProgramDefinition.model_validate(sample_program)
        compiled = compile_program(program)

        assert list(compiled.memory.to_bytes()) == [1, 1, 5, 6, 0x8F, 0x80, 0x01]
        assert compiled.snippet_ids == {"tap": 1}
        assert compiled.sequence_ids == {"tap_once": 0}

    def test_silence_and_modifiers(self, sample_program):
        sample_program["sequences"][0]["frames"] = [
            {"snippet": "tap", "gain": "HALF", "timebase": "MS_21_76", "loop_count": 2},
            {"snippet": "silence", "timebase": "MS_43_52"},
            {"snippet": "tap", "frequency_hz": 300},
        ]
        compiled = compile_program(ProgramDefinition.model_validate(sample_program))

        sequence_bytes = compiled.memory.to_bytes()[6:]
        assert sequence_bytes == bytes([0x51, 0x90, 0x18, 0x01, 0x86, 0x2C])

    def test_ordinal_mapping(self, sample_program):
        from haptic_wavemem.models.levels import ORDINAL_MAPPING

        program = ProgramDefinition.model_validate(sample_program)
        compiled = compile_program(program, ORDINAL_MAPPING)

        assert compiled.memory.to_bytes()[-1] == 0x61

    def test_unknown_snippet_name(self, sample_program):
        from haptic_wavemem.errors import UnknownSnippetName

        sample_program["sequences"][0]["frames"] = [{"snippet": "missing"}]
        program = ProgramDefinition.model_validate(sample_program)

        with pytest.raises(UnknownSnippetName, match="missing"):
            compile_program(program)

    def test_duplicate_snippet_name(self, sample_program):
        from haptic_wavemem.errors import DuplicateName

        sample_program["snippets"].append(dict(sample_program["snippets"][0]))
        program = ProgramDefinition.model_validate(sample_program)

        with pytest.raises(DuplicateName):
            compile_program(program)

    def test_duplicate_sequence_name(self, sample_program):
        from haptic_wavemem.errors import DuplicateName

        sample_program["sequences"].append(dict(sample_program["sequences"][0]))
        program = ProgramDefinition.model_validate(sample_program)

        with pytest.raises(DuplicateName):
            compile_program(program)

    def test_silence_name_is_reserved(self, sample_program):
        from haptic_wavemem.errors import ReservedName

        sample_program["snippets"][0]["name"] = "silence"
        program = ProgramDefinition.model_validate(sample_program)

        with pytest.raises(ReservedName, match="reserved") as excinfo:
            compile_program(program)

        assert excinfo.value.code.value == "RESERVED_NAME"

    def test_memory_full(self):
        """Builder capacity errors surface unchanged."""
        from haptic_wavemem.errors import WaveformMemoryFull

        points = [{"timebases": 1, "amplitude": 15}] * 16
        program = ProgramDefinition.model_validate({
            "snippets": [{"name": f"s{i}", "points": points} for i in range(7)],
            "sequences": [{"name": "play", "frames": [{"snippet": "s0"}]}],
        })

        with pytest.raises(WaveformMemoryFull):
            compile_program(program)


class TestProgramValidation:
    """Tests for the program schema."""

    def test_amplitude_out_of_range(self, sample_program):
        sample_program["snippets"][0]["points"][0]["amplitude"] = 16

        with pytest.raises(ValidationError):
            ProgramDefinition.model_validate(sample_program)

    def test_unknown_gain(self, sample_program):
        sample_program["sequences"][0]["frames"][0]["gain"] = "LOUD"

        with pytest.raises(ValidationError):
            ProgramDefinition.model_validate(sample_program)

    def test_empty_sequence_list(self, sample_program):
        sample_program["sequences"] = []

        with pytest.raises(ValidationError):
            ProgramDefinition.model_validate(sample_program)


class TestLoadProgram:
    """Tests for load_program."""

    def test_load_yaml(self, tmp_path, sample_program):
        path = tmp_path / "program.yaml"
        path.write_text(yaml.safe_dump(sample_program))

        program = load_program(path)
        assert program.snippets[0].name == "tap"

    def test_load_json(self, tmp_path, sample_program):
        path = tmp_path / "program.json"
        path.write_text(json.dumps(sample_program))

        program = load_program(str(path))
        assert program.sequences[0].name == "tap_once"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_program(tmp_path / "nope.yaml")

    def test_shipped_effects_program(self, effects_blob):
        """The example program file compiles to the built-in library."""
        program = load_program(REPO_ROOT / "data" / "programs" / "haptic_effects.yaml")

        assert compile_program(program).memory.to_bytes() == effects_blob


class TestEffectLibrary:
    """Tests for the built-in effects."""

    def test_effects_blob(self, effects_blob):
        from haptic_wavemem.effects import build_effect_library

        compiled = build_effect_library()

        assert compiled.memory.to_bytes() == effects_blob
        assert compiled.snippet_ids == {"click": 1, "bump": 2, "buzz": 3}
        assert compiled.sequence_ids == {"single_click": 0, "double_click": 1, "buzz": 2}

    def test_effects_fit_with_room_to_spare(self):
        from haptic_wavemem.effects import build_effect_library

        assert build_effect_library().memory.free_bytes == 78
