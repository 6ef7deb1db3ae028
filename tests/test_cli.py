"""
Smoke tests for the dxgraph command line.
"""

import json
import logging

import pytest

from dxgraph.cli import main
from dxgraph.config import get_config
from dxgraph.domains.echo import MAYO2025


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging after each command."""
    yield
    logging.getLogger("dxgraph").handlers.clear()


class TestListAndShow:
    """Test read-only commands."""

    def test_list(self, capsys):
        """Test that bundled algorithms are listed."""
        assert main(["list"]) == 0
        out = capsys.readouterr().out
        assert "ase2016" in out
        assert "mayo2025" in out

    def test_show(self, capsys):
        """Test the outline of one mode."""
        assert main(["show", "ase2016", "--mode", "reduced"]) == 0
        out = capsys.readouterr().out

        assert "Mode reduced" in out
        assert "reducedPath_MitralInflow: What is the Mitral Inflow Pattern (E/A ratio)?" in out
        assert "https://pubmed.ncbi.nlm.nih.gov/27037982/" in out
        assert "normalPath_EeRatio" not in out

    def test_show_unknown_mode(self, capsys):
        """Test that an unknown mode is reported as an error."""
        assert main(["show", "mayo2025", "--mode", "express"]) == 1
        assert "Unknown mode" in capsys.readouterr().err


class TestRun:
    """Test scripted assessments."""

    def test_run_mayo(self, capsys):
        """Test a complete Mayo assessment from scripted answers."""
        assert main(["run", "mayo2025", "--answers", "normal,normal,normal,normal,greater"]) == 0
        out = capsys.readouterr().out

        assert "Outcome: Normal diastolic function (normal)" in out
        assert "criteriaEvaluate" in out

    def test_run_ase_reduced_with_burr(self, capsys):
        """Test the reduced entry on the Burr engine."""
        assert main(["run", "ase2016", "--mode", "reduced", "--engine", "burr", "--answers", "gte2"]) == 0
        assert "(grade-3)" in capsys.readouterr().out

    def test_answers_exhausted(self, capsys):
        """Test that running out of answers reports the next question."""
        assert main(["run", "mayo2025", "--answers", "normal"]) == 2
        out = capsys.readouterr().out
        assert "eToERatio" in out

    def test_invalid_answer(self, capsys):
        """Test that an invalid scripted answer is an error."""
        assert main(["run", "mayo2025", "--answers", "borderline"]) == 1
        assert "Invalid answer" in capsys.readouterr().err

    def test_interactive(self, capsys, monkeypatch):
        """Test interactive answering by option number and by value."""
        replies = iter(["1", "oops", "normal", "2", "2", "2"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(replies))

        assert main(["run", "mayo2025"]) == 0
        out = capsys.readouterr().out
        assert "Please choose" in out
        assert "(grade-1)" in out

    def test_unknown_algorithm(self, capsys):
        """Test that an unknown algorithm id is an error."""
        assert main(["run", "nope"]) == 1
        assert "Unknown algorithm" in capsys.readouterr().err


class TestValidate:
    """Test the validate command."""

    def test_validate_bundled(self, capsys):
        """Test validating a bundled algorithm."""
        assert main(["validate", "ase2016"]) == 0
        assert "ase2016" in capsys.readouterr().out

    def test_validate_exhaustive(self, capsys):
        """Test exhaustive validation reports answer paths per mode."""
        assert main(["validate", "mayo2025", "--exhaustive"]) == 0
        out = capsys.readouterr().out
        assert "standard: 123 answer paths" in out

    def test_validate_file(self, capsys, tmp_path):
        """Test validating a JSON definition file."""
        path = tmp_path / "mayo.json"
        path.write_text(json.dumps(MAYO2025), encoding="utf-8")

        assert main(["validate", str(path)]) == 0

    def test_validate_broken_file(self, capsys, tmp_path):
        """Test that a broken definition fails validation."""
        broken = json.loads(json.dumps(MAYO2025))
        broken["nodes"]["laVolume"]["edges"] = {"*": "ghost"}
        path = tmp_path / "broken.json"
        path.write_text(json.dumps(broken), encoding="utf-8")

        assert main(["validate", str(path)]) == 1
        assert "ghost" in capsys.readouterr().err


class TestConfiguration:
    """Test that bad settings are reported instead of crashing the command."""

    def test_invalid_log_level_option(self, capsys):
        """Test that an unknown --log-level is an error."""
        assert main(["--log-level", "LOUD", "list"]) == 1
        assert "Invalid log level: LOUD" in capsys.readouterr().err

    def test_invalid_configured_log_level(self, capsys, monkeypatch):
        """Test that an unknown configured log level is an error."""
        monkeypatch.setattr(get_config(), "log_level", "LOUD")

        assert main(["list"]) == 1
        assert "Invalid log level: LOUD" in capsys.readouterr().err

    def test_invalid_logic_chain_limit(self, capsys, monkeypatch):
        """Test that a configured logic chain limit below one is rejected before running."""
        monkeypatch.setattr(get_config(), "max_logic_chain", 0)

        assert main(["run", "mayo2025", "--answers", "normal,normal,normal,normal,greater"]) == 1
        captured = capsys.readouterr()
        assert "max_logic_chain must be >= 1" in captured.err
        assert "Outcome" not in captured.out
