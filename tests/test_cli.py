"""Tests for the command-line interface."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator

import pytest
from click.testing import CliRunner
from rich.logging import RichHandler

from conftest import NEGATED_SHARING
from privacy_guard.cli import main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    yield
    package_logger = logging.getLogger("privacy_guard")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


class TestScanCommand:
    def test_json_from_option(self, runner: CliRunner, sample_policy_text: str) -> None:
        result = runner.invoke(main, ["scan", "--text", sample_policy_text, "--output", "json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["status"] == "ok"
        assert data["risk_level"] == "Critical"
        assert "data_monetization" in data["legal_patterns"]

    def test_json_from_stdin(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["scan", "-o", "json"], input=NEGATED_SHARING)
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["red_flags"]["data_sharing"]["matched"] is False

    def test_short_text(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["scan", "--text", "Too short.", "-o", "json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["status"] == "insufficient_input"

    def test_rich_output(self, runner: CliRunner, sample_policy_text: str) -> None:
        result = runner.invoke(main, ["scan", "--text", sample_policy_text])
        assert result.exit_code == 0, result.output
        assert "CRITICAL RISK" in result.output
        assert "Contradictions" in result.output

    def test_verbose(self, runner: CliRunner, sample_policy_text: str) -> None:
        result = runner.invoke(main, ["-v", "scan", "--text", sample_policy_text, "-o", "json"])
        assert result.exit_code == 0

    def test_verbose_applies_on_later_runs(self, runner: CliRunner) -> None:
        package_logger = logging.getLogger("privacy_guard")
        runner.invoke(main, ["scan", "--text", "Too short.", "-o", "json"])
        assert package_logger.level == logging.WARNING
        runner.invoke(main, ["-v", "scan", "--text", "Too short.", "-o", "json"])
        assert package_logger.level == logging.DEBUG
        handlers = [h for h in package_logger.handlers if isinstance(h, RichHandler)]
        assert len(handlers) == 1


class TestAnalyzeCommand:
    def test_rich_output_and_save(
        self, runner: CliRunner, sample_policy_path: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "report.json"
        result = runner.invoke(main, ["analyze", str(sample_policy_path), "--save", str(out)])
        assert result.exit_code == 0, result.output
        assert "CRITICAL RISK" in result.output
        saved = json.loads(out.read_text(encoding="utf-8"))
        assert saved["risk_level"] == "Critical"
        assert saved["document_types"] == ["privacy"]

    def test_unsupported_file(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "policy.xyz"
        path.write_text("content", encoding="utf-8")
        result = runner.invoke(main, ["analyze", str(path)])
        assert result.exit_code == 1
        assert "Error" in result.output

    @pytest.mark.parametrize("value", ["0", "-10"])
    def test_max_chars_must_be_positive(
        self, runner: CliRunner, sample_policy_path: Path, value: str
    ) -> None:
        result = runner.invoke(main, ["analyze", str(sample_policy_path), "--max-chars", value])
        assert result.exit_code == 2
        assert "--max-chars" in result.output

    def test_max_chars_truncates(
        self, runner: CliRunner, sample_policy_path: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "report.json"
        result = runner.invoke(main, [
            "analyze", str(sample_policy_path), "--max-chars", "50", "-s", str(out),
        ])
        assert result.exit_code == 0, result.output
        saved = json.loads(out.read_text(encoding="utf-8"))
        assert saved["status"] == "insufficient_input"

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(main, ["analyze", str(tmp_path / "missing.txt")])
        assert result.exit_code != 0

    def test_custom_taxonomy(self, runner: CliRunner, sample_policy_path: Path,
                             tmp_path: Path) -> None:
        taxonomy = tmp_path / "taxonomy.json"
        taxonomy.write_text(json.dumps({
            "legal_patterns": {
                "tiny": {"matchers": ["binding arbitration"], "severity": "low",
                         "description": "Tiny"},
            },
        }), encoding="utf-8")
        out = tmp_path / "report.json"
        result = runner.invoke(main, [
            "analyze", str(sample_policy_path), "-t", str(taxonomy), "-s", str(out),
        ])
        assert result.exit_code == 0, result.output
        saved = json.loads(out.read_text(encoding="utf-8"))
        assert list(saved["legal_patterns"]) == ["tiny"]
        assert saved["red_flags"] == {}

    def test_invalid_taxonomy(self, runner: CliRunner, sample_policy_path: Path,
                              tmp_path: Path) -> None:
        taxonomy = tmp_path / "bad.json"
        taxonomy.write_text("{broken", encoding="utf-8")
        result = runner.invoke(main, ["analyze", str(sample_policy_path), "-t", str(taxonomy)])
        assert result.exit_code == 1
        assert "Invalid taxonomy JSON" in result.output


class TestPatternsCommand:
    def test_builtin(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["patterns"])
        assert result.exit_code == 0
        assert "Legal Patterns" in result.output
        assert "Red Flags" in result.output

    def test_custom(self, runner: CliRunner, tmp_path: Path) -> None:
        taxonomy = tmp_path / "taxonomy.json"
        taxonomy.write_text(json.dumps({
            "legal_patterns": {"tiny": {"matchers": ["x"], "severity": "high"}},
            "red_flags": {"flag": {"keywords": ["y"]}},
        }), encoding="utf-8")
        result = runner.invoke(main, ["patterns", "-t", str(taxonomy)])
        assert result.exit_code == 0
        assert "tiny" in result.output
        assert "flag" in result.output
