"""
Tests for the cubecover command-line interface.
"""

import json
import os

import pytest

from cubecover.cli import create_parser, main
from conftest import REPO_ROOT


class TestParser:
    """Test argument parsing."""

    def test_solve_arguments(self):
        args = create_parser().parse_args(["solve", "--pieces", "1", "2", "--size", "3", "--no-save"])
        assert args.command == "solve"
        assert args.pieces == ["1", "2"]
        assert args.size == 3
        assert args.no_save

    def test_no_arguments_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()


class TestSolveCommand:
    """Test `cubecover solve`."""

    def test_default_selection(self, capsys):
        assert main(["solve", "--no-save"]) == 0
        out = capsys.readouterr().out
        assert "Solution found" in out
        assert "Layer z=2" in out

    def test_json_output(self, capsys):
        assert main(["solve", "--no-save", "--json"]) == 0
        out = capsys.readouterr().out
        report = json.loads(out[out.index("{\n"):])
        assert report["status"] == "solved"

    def test_no_solution_exits_zero(self, capsys):
        assert main(["solve", "--pieces", "L", "--no-save"]) == 0
        assert "No solution" in capsys.readouterr().out

    def test_unknown_piece(self, capsys):
        assert main(["solve", "--pieces", "Q", "--no-save"]) == 1

    def test_interrupted_exits_one(self):
        assert main(["solve", "--max-nodes", "1", "--no-save"]) == 1

    def test_writes_logs(self, tmp_path):
        assert main(["solve", "--output-dir", str(tmp_path)]) == 0
        run_dirs = list(tmp_path.iterdir())
        assert len(run_dirs) == 1
        assert (run_dirs[0] / "solution.json").exists()

    def test_config_with_catalog(self, capsys):
        config_path = os.path.join(REPO_ROOT, "configs", "squares_2x2x2.yaml")
        assert main(["solve", "--config", config_path, "--no-save"]) == 0
        assert "Layer z=1" in capsys.readouterr().out

    def test_missing_config(self, tmp_path):
        assert main(["solve", "--config", str(tmp_path / "missing.yaml")]) == 1


class TestCatalogCommands:
    """Test `list-pieces` and `show-piece`."""

    def test_list_pieces_json(self, capsys):
        assert main(["list-pieces", "--format", "json"]) == 0
        pieces = json.loads(capsys.readouterr().out)
        assert pieces["A"]["volume"] == 3

    def test_list_pieces_table(self, capsys):
        assert main(["list-pieces"]) == 0
        out = capsys.readouterr().out
        assert "selector 1" in out
        assert "Purple" in out

    def test_show_piece_by_selector(self, capsys):
        assert main(["show-piece", "2"]) == 0
        out = capsys.readouterr().out
        assert "Piece: Z" in out
        assert "Unique rotations: 12" in out

    def test_show_unknown_piece(self):
        assert main(["show-piece", "Q"]) == 1


class TestConfigCommands:
    """Test `create-config` and `validate-config`."""

    def test_create_then_validate(self, tmp_path):
        path = str(tmp_path / "config.yaml")
        assert main(["create-config", "--output", path]) == 0
        assert os.path.exists(path)
        assert main(["validate-config", path]) == 0

    def test_strict_fails_on_warning(self, tmp_path):
        path = str(tmp_path / "config.yaml")
        assert main(["create-config", "--output", path, "--pieces", "L"]) == 0
        assert main(["validate-config", path]) == 0
        assert main(["validate-config", path, "--strict"]) == 1

    def test_existing_file_needs_force(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("solver:\n  cube_size: 2\n")
        monkeypatch.setattr("builtins.input", lambda prompt: "n")
        assert main(["create-config", "--output", str(path)]) == 0
        assert "cube_size: 2" in path.read_text()
        assert main(["create-config", "--output", str(path), "--force"]) == 0
        assert "cube_size: 3" in path.read_text()

    def test_validate_missing(self, tmp_path):
        assert main(["validate-config", str(tmp_path / "missing.yaml")]) == 1


class TestSurveyCommand:
    """Test `cubecover survey`."""

    def test_small_survey(self, tmp_path, capsys):
        config_path = os.path.join(REPO_ROOT, "configs", "squares_2x2x2.yaml")
        assert main(["survey", "--config", config_path, "--limit", "3", "--output-dir", str(tmp_path)]) == 0
        assert "Survey Summary" in capsys.readouterr().out
