"""Tests for the tally summarize CLI command."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from tally import __version__
from tally.cli.main import app

runner = CliRunner()

STREAM = "\n".join(
    [
        "running 3 tests",
        '{"type": "suite", "event": "started", "test_count": 3}',
        '{"type": "test", "name": "a", "event": "ok", "exec_time": "1ms"}',
        '{"type": "test", "name": "b", "event": "failed", "exec_time": "2ms"}',
        '{"type": "test", "name": "c", "event": "ok", "exec_time": "3ms"}',
    ]
)


class TestSummarizeCommand:
    """Tests for tally summarize."""

    def test_summarize_file_as_json(self, tmp_path: Path) -> None:
        source = tmp_path / "stream.jsonl"
        source.write_text(STREAM)
        result = runner.invoke(app, ["summarize", str(source), "--max-score", "30", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["status"] == "fail"
        assert data["max_score"] == 30
        assert [t["execution_time"] for t in data["tests"]] == ["1ms", "2ms", "3ms"]

    def test_summarize_stdin(self) -> None:
        result = runner.invoke(app, ["summarize", "-", "--json"], input=STREAM)
        assert result.exit_code == 0, result.output
        assert len(json.loads(result.stdout)["tests"]) == 3

    def test_writes_results_to_output_dir(self, tmp_path: Path) -> None:
        source = tmp_path / "stream.jsonl"
        source.write_text(STREAM)
        out = tmp_path / "out"
        out.mkdir()
        result = runner.invoke(app, ["summarize", str(source), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert json.loads((out / "results.json").read_text())["version"] == 1

    def test_table_lists_failures(self, tmp_path: Path) -> None:
        source = tmp_path / "stream.jsonl"
        source.write_text(STREAM)
        result = runner.invoke(app, ["summarize", str(source), "--max-score", "3"])
        assert result.exit_code == 0
        assert "2/3 passed" in result.output
        assert "2/3" in result.output

    def test_document_format(self, tmp_path: Path) -> None:
        source = tmp_path / "stream.json"
        source.write_text('[{"type": "test", "name": "a", "event": "ok"}]')
        result = runner.invoke(app, ["summarize", str(source), "--json", "--strict"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["status"] == "pass"

    def test_empty_suite_conventions(self, tmp_path: Path) -> None:
        source = tmp_path / "empty.jsonl"
        source.write_text("")
        failing = runner.invoke(app, ["summarize", str(source), "--json"])
        passing = runner.invoke(app, ["summarize", str(source), "--json", "--empty-suite-passes"])
        assert json.loads(failing.stdout)["status"] == "fail"
        assert json.loads(passing.stdout)["status"] == "pass"

    def test_declared_count_mode(self, tmp_path: Path) -> None:
        source = tmp_path / "stream.jsonl"
        source.write_text(
            '{"type": "suite", "event": "started", "test_count": 2}\n'
            '{"type": "test", "name": "a", "event": "ok"}\n'
        )
        observed = runner.invoke(app, ["summarize", str(source), "--json"])
        declared = runner.invoke(app, ["summarize", str(source), "--json", "--count-mode", "declared"])
        assert json.loads(observed.stdout)["status"] == "pass"
        assert json.loads(declared.stdout)["status"] == "fail"

    def test_strict_failure_exit_code(self, tmp_path: Path) -> None:
        source = tmp_path / "stream.jsonl"
        source.write_text(STREAM)
        result = runner.invoke(app, ["summarize", str(source), "--strict"])
        assert result.exit_code == 1

    def test_malformed_document_exit_code(self, tmp_path: Path) -> None:
        source = tmp_path / "bad.json"
        source.write_text("[{]")
        result = runner.invoke(app, ["summarize", str(source), "--format", "document"])
        assert result.exit_code == 2
        assert "not a valid JSON event document" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["summarize", str(tmp_path / "absent.jsonl")])
        assert result.exit_code == 2
        assert "File not found" in result.output


class TestMainApp:
    """Tests for the top-level app callback."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"tally {__version__}" in result.output

    def test_no_args_shows_help(self) -> None:
        result = runner.invoke(app, [])
        assert "run" in result.output
        assert "summarize" in result.output

    def test_invalid_log_level(self, tmp_path: Path) -> None:
        source = tmp_path / "stream.jsonl"
        source.write_text(STREAM)
        result = runner.invoke(app, ["--log-level", "chatty", "summarize", str(source)])
        assert result.exit_code != 0

    def test_debug_log_level_accepted(self, tmp_path: Path) -> None:
        source = tmp_path / "stream.jsonl"
        source.write_text(STREAM)
        result = runner.invoke(app, ["--log-level", "DEBUG", "summarize", str(source)])
        assert result.exit_code == 0
        assert "2/3 passed" in result.output
