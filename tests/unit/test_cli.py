"""
Tests for the jet command line.

Uses typer's CliRunner so commands run in-process; ``result.output``
carries both stdout and stderr.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from jet._version import get_version
from jet.cli import app

runner = CliRunner()


@pytest.fixture
def program_file(tmp_path: Path):
    def _write(source: str, name: str = "program.jet") -> Path:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write


class TestVersion:
    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"Jet version {get_version()}" in result.output
        assert "Python:" in result.output


class TestLexCommand:
    def test_prints_one_token_per_line(self) -> None:
        result = runner.invoke(app, ["lex", "let x = 5;"])
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines[0] == "Token(LET, 'let', 1:1)"
        assert lines[-1] == "Token(EOF, '', 1:11)"
        assert len(lines) == 6

    def test_arguments_join_as_lines(self) -> None:
        result = runner.invoke(app, ["lex", "a", "b"])
        assert result.exit_code == 0
        assert "Token(IDENT, 'b', 2:1)" in result.output

    def test_illegal_tokens_are_listed(self) -> None:
        result = runner.invoke(app, ["lex", "@"])
        assert result.exit_code == 0
        assert "Token(ILLEGAL, '@', 1:1)" in result.output


class TestParseCommand:
    def test_prints_canonical_form(self) -> None:
        result = runner.invoke(app, ["parse", "let x = 1 + 2 * 3"])
        assert result.exit_code == 0
        assert "let x = (1 + (2 * 3));" in result.output

    def test_parse_errors_exit_nonzero(self) -> None:
        result = runner.invoke(app, ["parse", "let = 1"])
        assert result.exit_code == 1
        assert "parser errors:" in result.output
        assert "expected next token to be IDENT" in result.output


class TestRunCommand:
    def test_prints_final_value(self, program_file) -> None:
        path = program_file("let double = fn(x) { x * 2 };\ndouble(21)\n")
        result = runner.invoke(app, ["run", str(path)])
        assert result.exit_code == 0
        assert result.output.strip() == "42"

    def test_null_result_prints_nothing(self, program_file) -> None:
        result = runner.invoke(app, ["run", str(program_file("let a = 1;"))])
        assert result.exit_code == 0
        assert result.output.strip() == ""

    def test_runtime_error_exits_nonzero(self, program_file) -> None:
        result = runner.invoke(app, ["run", str(program_file("1 + true"))])
        assert result.exit_code == 1
        assert "ERROR: type mismatch: INTEGER + BOOLEAN" in result.output

    def test_parse_error_exits_nonzero(self, program_file) -> None:
        result = runner.invoke(app, ["run", str(program_file("let 5;"))])
        assert result.exit_code == 1
        assert "parser errors:" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["run", str(tmp_path / "nope.jet")])
        assert result.exit_code == 1
        assert "file not found" in result.output

    def test_oversized_result_exits_nonzero(self, program_file) -> None:
        path = program_file(f"let x = {'9' * 3000};\nx * x\n")
        result = runner.invoke(app, ["run", str(path)])
        assert result.exit_code == 1
        assert "ERROR: integer too large" in result.output


class TestRepl:
    def test_reads_until_end_of_input(self) -> None:
        result = runner.invoke(app, ["repl"], input="let a = 2\na * 3\n")
        assert result.exit_code == 0
        assert "6" in result.output

    def test_exit_command(self) -> None:
        result = runner.invoke(app, ["repl"], input="exit\n99\n")
        assert result.exit_code == 0
        assert "99" not in result.output

    def test_echo_ast_flag(self) -> None:
        result = runner.invoke(app, ["repl", "--echo-ast"], input="1 + 2\n")
        assert result.exit_code == 0
        assert "(1 + 2)" in result.output


class TestConfigOption:
    def test_prompt_from_config(self, tmp_path: Path) -> None:
        config = tmp_path / "jet.toml"
        config.write_text('[repl]\nprompt = "jet> "\n', encoding="utf-8")
        result = runner.invoke(app, ["--config", str(config), "repl"], input="1\n")
        assert result.exit_code == 0
        assert "jet> " in result.output

    def test_bad_config_exits_nonzero(self, tmp_path: Path) -> None:
        config = tmp_path / "jet.toml"
        config.write_text("[repl]\necho_ast = 'yes'\n", encoding="utf-8")
        result = runner.invoke(app, ["-c", str(config), "lex", "x"])
        assert result.exit_code == 1
        assert "'echo_ast' must be a bool" in result.output
