# =============================================================================
# test_cli.py - marieasm Command-Line Tests
# =============================================================================
# Runs the click command in-process with CliRunner.
# =============================================================================

from pathlib import Path

from click.testing import CliRunner

from marie_asm.cli.errors import ExitCode
from marie_asm.cli.marieasm import main


LOOP_SOURCE = "LOOP, LOAD 3\nADD 4\nSTORE LOOP\nHALT\n"


class TestBasics:
    """Test help, version and simple invocations."""

    def test_help(self):
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Assemble MARIE source code" in result.output
        assert "--allow-overlap" in result.output

    def test_version(self):
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output

    def test_assemble_file_to_stdout(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("loop.mas").write_text(LOOP_SOURCE)
            result = runner.invoke(main, ["loop.mas"])

            assert result.exit_code == 0, f"Assembly failed: {result.output}"
            assert "000  1003  LOOP, LOAD 003" in result.output
            assert "003  7000  HALT" in result.output

    def test_stdin(self):
        result = CliRunner().invoke(main, [], input=b"ORG 100\nHALT\n")
        assert result.exit_code == 0, result.output
        assert "064  7000  HALT" in result.output

    def test_explicit_dash_is_stdin(self):
        result = CliRunner().invoke(main, ["-", "-f", "hex"], input=b"ORG 100\nHALT\n")
        assert result.exit_code == 0
        assert "064 7000" in result.output

    def test_format_case_insensitive(self):
        result = CliRunner().invoke(main, ["-f", "SYMBOLS"], input=LOOP_SOURCE.encode())
        assert result.exit_code == 0
        assert "LOOP            000" in result.output

    def test_format_from_environment(self, monkeypatch):
        monkeypatch.setenv("MARIEASM_OUTPUT_FORMAT", "hex")
        result = CliRunner().invoke(main, [], input=b"HALT\n")
        assert result.exit_code == 0
        assert "000 7000" in result.output


class TestOutputFiles:
    """Test -o, -s and -b."""

    def test_output_file(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("loop.mas").write_text(LOOP_SOURCE)
            result = runner.invoke(main, ["loop.mas", "-f", "hex", "-o", "loop.hex"])

            assert result.exit_code == 0, result.output
            assert Path("loop.hex").read_text() == "000 1003\n001 3004\n002 2000\n003 7000\n"
            assert "1003" not in result.output

    def test_symbol_and_binary_files(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("loop.mas").write_text(LOOP_SOURCE)
            result = runner.invoke(main, ["loop.mas", "-s", "loop.sym", "-b", "loop.bin"])

            assert result.exit_code == 0, result.output
            assert Path("loop.sym").read_text() == "LOOP            000\n"
            assert Path("loop.bin").read_bytes() == b"\x10\x03\x30\x04\x20\x00\x70\x00"

    def test_verbose(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("loop.mas").write_text(LOOP_SOURCE)
            result = runner.invoke(main, ["-v", "loop.mas", "-b", "loop.bin"])

            assert result.exit_code == 0, result.output
            assert "Assembling loop.mas" in result.output
            assert "Wrote binary image to loop.bin" in result.output
            assert "Assembly complete: 4 words at $000, 1 labels" in result.output


class TestErrors:
    """Test error reporting and exit codes."""

    def test_assembly_error(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("bad.mas").write_text("HALT\nJUMP NOWHERE\n")
            result = runner.invoke(main, ["bad.mas"])

            assert result.exit_code == ExitCode.BUILD_ERROR
            assert "Assembly failed" in result.output
            assert "bad.mas:2:6: error: undefined label 'NOWHERE'" in result.output

    def test_overlap_rejected(self):
        result = CliRunner().invoke(main, [], input=b"HALT\nORG 0\nCLEAR\n")
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "written twice" in result.output

    def test_allow_overlap(self):
        result = CliRunner().invoke(
            main, ["--allow-overlap", "-f", "hex"], input=b"HALT\nORG 0\nCLEAR\n"
        )
        assert result.exit_code == 0, result.output
        assert "000 7000\n000 A000" in result.output

    def test_no_allow_overlap_overrides_environment(self, monkeypatch):
        monkeypatch.setenv("MARIEASM_ALLOW_OVERLAP", "1")
        result = CliRunner().invoke(main, ["--no-allow-overlap"], input=b"HALT\nORG 0\nCLEAR\n")
        assert result.exit_code == ExitCode.BUILD_ERROR

    def test_missing_input_file(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["missing.mas"])
            assert result.exit_code == ExitCode.INVALID_ARGS

    def test_bad_format(self):
        result = CliRunner().invoke(main, ["-f", "srec"], input=b"HALT\n")
        assert result.exit_code == ExitCode.INVALID_ARGS
