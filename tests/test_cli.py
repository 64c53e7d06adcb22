"""Tests for the grammar-converters command line interface."""
from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from grammarconv.cli.main import cli

CATALOGS_YAML = """\
names:
  - {name: Alex, gender: male}
rooms:
  - name: kitchen
    locations:
      - {name: fridge, is_placement: true}
categories:
  - name: drinks
    default_location: {name: fridge, is_placement: true}
    room_string: kitchen
    objects:
      - {name: soda, type: known}
"""

GRAMMAR_YAML = """\
kind: Grammar
name: yaml grammar
tier: HIGH
rules:
  $Main:
    - go to the {room}
"""


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def grammar_file(tmp_path: Path, sample_grammar_text: str) -> Path:
    path = tmp_path / "cat1.txt"
    path.write_text(sample_grammar_text, encoding="utf-8")
    return path


@pytest.fixture()
def catalogs_file(tmp_path: Path) -> Path:
    path = tmp_path / "catalogs.yaml"
    path.write_text(CATALOGS_YAML, encoding="utf-8")
    return path


def _export(runner: CliRunner, *args: str, input: str | None = None):
    return runner.invoke(cli, ["export", *args], input=input)


def _flat(output: str) -> str:
    """Collapse whitespace so console line wrapping does not split phrases."""
    return " ".join(output.split())


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


def test_version_command(runner: CliRunner, expected_version: str) -> None:
    result = runner.invoke(cli, ["version"])
    assert result.exit_code == 0
    assert "grammar-converters" in _flat(result.output)
    assert expected_version in _flat(result.output)


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------


class TestExport:
    def test_bnf_export(
        self, runner: CliRunner, tmp_path: Path, grammar_file: Path, catalogs_file: Path
    ) -> None:
        result = _export(runner, str(tmp_path / "gpsr.bnf"), str(grammar_file), "-c", str(catalogs_file))
        assert result.exit_code == 0, result.output
        written = tmp_path / "gpsr_Category_I.bnf"
        text = written.read_text(encoding="utf-8")
        assert text.startswith("#BNF+EMV1.1;")
        assert "<_males>:\nAlex;" in text

    def test_srgs_export(
        self, runner: CliRunner, tmp_path: Path, grammar_file: Path, catalogs_file: Path
    ) -> None:
        result = _export(
            runner, str(tmp_path / "gpsr"), str(grammar_file), "-c", str(catalogs_file), "--format", "srgs"
        )
        assert result.exit_code == 0, result.output
        assert (tmp_path / "gpsr_Category_I.xml").read_text(encoding="utf-8").startswith("<?xml")

    def test_yaml_grammar(self, runner: CliRunner, tmp_path: Path) -> None:
        source = tmp_path / "g.yaml"
        source.write_text(GRAMMAR_YAML, encoding="utf-8")
        result = _export(runner, str(tmp_path / "out"), str(source))
        assert result.exit_code == 0, result.output
        assert (tmp_path / "out_yaml_grammar.bnf").exists()

    def test_without_catalogs_warns(self, runner: CliRunner, tmp_path: Path, grammar_file: Path) -> None:
        result = _export(runner, str(tmp_path / "out"), str(grammar_file))
        assert result.exit_code == 0
        assert "No --catalogs" in _flat(result.output)

    def test_answers_and_comments(self, runner: CliRunner, tmp_path: Path, grammar_file: Path) -> None:
        result = _export(runner, str(tmp_path / "out"), str(grammar_file), "--answers", "--no-comments")
        assert result.exit_code == 0
        text = (tmp_path / "out_Category_I.bnf").read_text(encoding="utf-8")
        assert "<__answers>" in text
        assert "/*" not in text

    def test_existing_file_declined(self, runner: CliRunner, tmp_path: Path, grammar_file: Path) -> None:
        existing = tmp_path / "out_Category_I.bnf"
        existing.write_text("keep me", encoding="utf-8")
        result = _export(runner, str(tmp_path / "out"), str(grammar_file), input="n\n")
        assert result.exit_code == 0
        assert "already exists" in _flat(result.output)
        assert existing.read_text(encoding="utf-8") == "keep me"

    def test_existing_file_confirmed(self, runner: CliRunner, tmp_path: Path, grammar_file: Path) -> None:
        existing = tmp_path / "out_Category_I.bnf"
        existing.write_text("replace me", encoding="utf-8")
        result = _export(runner, str(tmp_path / "out"), str(grammar_file), input="y\n")
        assert result.exit_code == 0
        assert existing.read_text(encoding="utf-8").startswith("#BNF")

    def test_overwrite_flag_skips_prompt(self, runner: CliRunner, tmp_path: Path, grammar_file: Path) -> None:
        existing = tmp_path / "out_Category_I.bnf"
        existing.write_text("replace me", encoding="utf-8")
        result = _export(runner, str(tmp_path / "out"), str(grammar_file), "-w")
        assert result.exit_code == 0
        assert "already exists" not in _flat(result.output)
        assert existing.read_text(encoding="utf-8").startswith("#BNF")

    def test_abnf_fails_without_file(self, runner: CliRunner, tmp_path: Path, grammar_file: Path) -> None:
        result = _export(runner, str(tmp_path / "out"), str(grammar_file), "-f", "abnf")
        assert result.exit_code == 1
        assert "not implemented" in _flat(result.output)
        assert not (tmp_path / "out_Category_I.abnf").exists()

    def test_batch_continues_after_failure(self, runner: CliRunner, tmp_path: Path, grammar_file: Path) -> None:
        broken = tmp_path / "broken.txt"
        broken.write_text("not a rule\n", encoding="utf-8")
        no_root = tmp_path / "no_root.txt"
        no_root.write_text("$deliver = go\n", encoding="utf-8")
        result = _export(runner, str(tmp_path / "out"), str(broken), str(no_root), str(grammar_file))
        assert result.exit_code == 1
        assert "Parse errors" in _flat(result.output)
        assert (tmp_path / "out_Category_I.bnf").exists()
        assert not (tmp_path / "out_no_root.bnf").exists()

    def test_missing_grammar_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = _export(runner, str(tmp_path / "out"), str(tmp_path / "absent.txt"))
        assert result.exit_code == 1
        assert "File not found" in _flat(result.output)

    def test_bad_catalogs_exit(self, runner: CliRunner, tmp_path: Path, grammar_file: Path) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text("names: [unclosed", encoding="utf-8")
        result = _export(runner, str(tmp_path / "out"), str(grammar_file), "-c", str(bad))
        assert result.exit_code == 1
        assert "Cannot load catalogs" in _flat(result.output)

    def test_requires_grammar_files(self, runner: CliRunner, tmp_path: Path) -> None:
        result = _export(runner, str(tmp_path / "out"))
        assert result.exit_code != 0


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


class TestCheck:
    def test_clean_grammar(self, runner: CliRunner, grammar_file: Path) -> None:
        result = runner.invoke(cli, ["check", str(grammar_file)])
        assert result.exit_code == 0
        assert "OK" in _flat(result.output)
        assert "1 unreachable" in _flat(result.output)

    def test_missing_non_terminal(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "g.txt"
        path.write_text("$Main = go $nowhere\n", encoding="utf-8")
        result = runner.invoke(cli, ["check", str(path)])
        assert result.exit_code == 1
        assert "GC001" in _flat(result.output)

    def test_hints_do_not_fail(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "g.txt"
        path.write_text("$Main = wave the {flag}\n", encoding="utf-8")
        result = runner.invoke(cli, ["check", str(path)])
        assert result.exit_code == 0
        assert "GC004" in _flat(result.output)

    def test_unreachable_rules_are_checked(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "g.txt"
        path.write_text("$Main = go\n$orphan = bring the {object\n", encoding="utf-8")
        result = runner.invoke(cli, ["check", str(path)])
        assert result.exit_code == 1
        assert "GC003" in _flat(result.output)

    def test_missing_root(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "g.txt"
        path.write_text("$deliver = go\n", encoding="utf-8")
        result = runner.invoke(cli, ["check", str(path)])
        assert result.exit_code == 1
        assert "$Main" in _flat(result.output)

    def test_rule_id_collision(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "g.txt"
        path.write_text("$Main = $Foo\n$Foo = x\n$foo = y\n", encoding="utf-8")
        result = runner.invoke(cli, ["check", str(path)])
        assert result.exit_code == 1
        assert "GC005" in _flat(result.output)

    def test_catalogs_option_only_validates(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["check", "--help"])
        assert result.exit_code == 0
        assert "the closure does not use it" in _flat(result.output)

    def test_bad_catalogs_fail_check(self, runner: CliRunner, tmp_path: Path, grammar_file: Path) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text("names: [unclosed", encoding="utf-8")
        result = runner.invoke(cli, ["check", str(grammar_file), "-c", str(bad)])
        assert result.exit_code == 1
        assert "Cannot load catalogs" in _flat(result.output)
