"""
Command Line Tests
==================

Tests for the haptic-wavemem CLI, driven through main(argv).
"""

import pytest
import yaml

from haptic_wavemem.main import EXIT_ERROR, EXIT_MISMATCH, EXIT_OK, main


@pytest.fixture
def no_config(tmp_path):
    """Point the CLI at a config file that does not exist."""
    return ["--config", str(tmp_path / "none.yaml")]


class TestEffectsCommand:
    """Tests for `effects`."""

    def test_hex_to_stdout(self, no_config, capsys, effects_blob):
        code = main(no_config + ["effects", "--format", "hex"])

        assert code == EXIT_OK
        assert capsys.readouterr().out.strip() == effects_blob.hex(" ")

    def test_binary_to_file(self, no_config, tmp_path, capsys, effects_blob):
        out = tmp_path / "effects.bin"

        assert main(no_config + ["effects", "-o", str(out)]) == EXIT_OK
        assert out.read_bytes() == effects_blob
        assert "sequence  1  double_click" in capsys.readouterr().out

    def test_defaults_to_hex_on_stdout(self, no_config, capsys, effects_blob):
        """Without -o the image is printed as hex instead of failing."""
        assert main(no_config + ["effects"]) == EXIT_OK
        assert capsys.readouterr().out.strip() == effects_blob.hex(" ")

    def test_explicit_binary_requires_output(self, no_config, capsys):
        assert main(no_config + ["effects", "--format", "bin"]) == EXIT_ERROR
        assert "-o/--output" in capsys.readouterr().err

    def test_mapping_override(self, no_config, capsys):
        code = main(no_config + ["effects", "--mapping", "ordinal", "--format", "hex"])

        assert code == EXIT_OK
        # single_click frame: gain FULL = 3 under the ordinal profile
        assert capsys.readouterr().out.split()[16] == "71"


class TestCompileCommand:
    """Tests for `compile`."""

    def test_compile_yaml(self, no_config, tmp_path, sample_program):
        program = tmp_path / "program.yaml"
        program.write_text(yaml.safe_dump(sample_program))
        out = tmp_path / "program.bin"

        assert main(no_config + ["compile", str(program), "-o", str(out)]) == EXIT_OK
        assert list(out.read_bytes()) == [1, 1, 5, 6, 0x8F, 0x80, 0x01]

    def test_compile_to_stdout_by_default(self, no_config, tmp_path, sample_program, capsys):
        program = tmp_path / "program.yaml"
        program.write_text(yaml.safe_dump(sample_program))

        assert main(no_config + ["compile", str(program)]) == EXIT_OK
        assert capsys.readouterr().out.strip() == "01 01 05 06 8f 80 01"

    def test_waveform_error_reported(self, no_config, tmp_path, sample_program, capsys):
        sample_program["sequences"][0]["frames"] = [{"snippet": "ghost"}]
        program = tmp_path / "program.yaml"
        program.write_text(yaml.safe_dump(sample_program))

        code = main(no_config + ["compile", str(program), "--format", "hex"])

        assert code == EXIT_ERROR
        assert "error: UNKNOWN_SNIPPET_NAME:" in capsys.readouterr().err

    def test_invalid_program_reported(self, no_config, tmp_path, capsys):
        program = tmp_path / "program.yaml"
        program.write_text("snippets: []\nsequences: []\n")

        assert main(no_config + ["compile", str(program), "--format", "hex"]) == EXIT_ERROR
        assert "invalid program" in capsys.readouterr().err

    def test_missing_program(self, no_config, tmp_path, capsys):
        code = main(no_config + ["compile", str(tmp_path / "nope.yaml"), "--format", "hex"])
        assert code == EXIT_ERROR


class TestInspectAndVerify:
    """Tests for `inspect` and `verify`."""

    @pytest.fixture
    def blob_file(self, tmp_path, effects_blob):
        path = tmp_path / "effects.bin"
        path.write_bytes(effects_blob)
        return path

    def test_inspect(self, no_config, blob_file, capsys):
        assert main(no_config + ["inspect", str(blob_file)]) == EXIT_OK

        out = capsys.readouterr().out
        assert "snippet 1 [8f 90]" in out
        assert "sequence 1 [11 18 11]" in out
        assert "silence" in out

    def test_inspect_hex_file(self, no_config, tmp_path, effects_blob, capsys):
        path = tmp_path / "effects.hex"
        path.write_text(effects_blob.hex(" ") + "\n")

        assert main(no_config + ["inspect", str(path)]) == EXIT_OK

    def test_inspect_malformed(self, no_config, tmp_path, capsys):
        path = tmp_path / "bad.bin"
        path.write_bytes(bytes([1, 1, 5]))

        assert main(no_config + ["inspect", str(path)]) == EXIT_ERROR
        assert "MALFORMED_WAVEFORM_MEMORY" in capsys.readouterr().err

    def test_verify_match(self, no_config, tmp_path, blob_file, effects_blob, capsys):
        readback = tmp_path / "readback.bin"
        readback.write_bytes(effects_blob)

        assert main(no_config + ["verify", str(blob_file), str(readback)]) == EXIT_OK
        assert capsys.readouterr().out.startswith("OK")

    def test_verify_mismatch(self, no_config, tmp_path, blob_file, effects_blob, capsys):
        corrupted = bytearray(effects_blob)
        corrupted[10] ^= 0x01
        readback = tmp_path / "readback.bin"
        readback.write_bytes(bytes(corrupted))

        assert main(no_config + ["verify", str(blob_file), str(readback)]) == EXIT_MISMATCH
        assert "offset 10" in capsys.readouterr().out

    def test_verify_short_readback(self, no_config, tmp_path, blob_file, effects_blob, capsys):
        readback = tmp_path / "readback.bin"
        readback.write_bytes(effects_blob[:-2])

        assert main(no_config + ["verify", str(blob_file), str(readback)]) == EXIT_MISMATCH
        assert "length" in capsys.readouterr().out
