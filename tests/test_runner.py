"""
Tests for the solve runner and the selection survey.
"""

import json
import os

import pandas as pd
import pytest

from cubecover.core.base import Piece, SolveStatus
from cubecover.core.catalog import select_pieces
from cubecover.core.config import Config, RunnerConfig, SolverConfig, SelectionConfig, SurveyConfig
from cubecover.runner import SolveRunner
from cubecover.survey_runner import run_survey, solvable_selections
from conftest import TETRACUBE_CATALOG


class TestSolveRunner:
    """Test single solves through the runner."""

    def test_run_requires_setup(self, tmp_config):
        runner = SolveRunner(tmp_config)
        with pytest.raises(RuntimeError):
            runner.run()

    def test_setup_resolves_selection(self, tmp_config):
        runner = SolveRunner(tmp_config)
        runner.setup()
        assert [p.name for p in runner.pieces] == ["A", "L", "T", "Z", "S", "B", "P"]

    def test_run_solves_soma(self, tmp_config, capsys):
        runner = SolveRunner(tmp_config)
        runner.setup()
        report = runner.run()

        assert report.status == SolveStatus.SOLVED
        assert report.success
        assert len(report.placements) == 7
        assert report.metadata["rows"] > 0
        assert "Layer z=0" in capsys.readouterr().out

    def test_run_writes_artefacts(self, tmp_config):
        runner = SolveRunner(tmp_config)
        runner.setup()
        report = runner.run()

        run_dir = runner.logger.run_dir
        for name in ("solve_log.json", "summary.txt", "solution.json"):
            assert os.path.exists(os.path.join(run_dir, name))
        with open(os.path.join(run_dir, "solution.json")) as f:
            saved = json.load(f)
        assert saved["status"] == "solved"
        assert len(saved["placements"]) == len(report.placements)

    def test_no_save(self, tmp_config):
        tmp_config.runner.save_logs = False
        runner = SolveRunner(tmp_config)
        runner.setup()
        runner.run()
        assert not os.path.exists(tmp_config.runner.log_dir)

    def test_no_solution_report(self, tmp_config):
        runner = SolveRunner(tmp_config)
        report = runner.solve_selection(select_pieces(["L"]))
        assert report.status == SolveStatus.NO_SOLUTION
        assert report.placements is None
        assert report.error_message is None

    def test_invalid_report(self, tmp_config):
        runner = SolveRunner(tmp_config)
        report = runner.solve_selection([Piece("X", 2, ((0, 0, 0),))])
        assert report.status == SolveStatus.INVALID
        assert "volume" in report.error_message

    def test_interrupted_report(self, tmp_config):
        tmp_config.solver = SolverConfig(cube_size=3, max_nodes=1)
        runner = SolveRunner(tmp_config)
        report = runner.solve_selection(select_pieces(["L", "T", "Z", "S", "B", "P"]))
        assert report.status == SolveStatus.INTERRUPTED
        assert not report.success

    def test_run_in_background(self, tmp_config):
        tmp_config.runner.save_logs = False
        runner = SolveRunner(tmp_config)
        runner.setup()
        report = runner.run_in_background().result(timeout=120)
        assert report.status == SolveStatus.SOLVED

    def test_report_row(self, tmp_config):
        runner = SolveRunner(tmp_config)
        report = runner.solve_selection(select_pieces(["L", "T", "Z", "S", "B", "P"]), run_id="r1")
        row = report.to_row()
        assert row["run_id"] == "r1"
        assert row["pieces"] == "A L T Z S B P"
        assert row["status"] == "solved"


def _small_survey_config(tmp_path, **survey):
    return Config(
        runner=RunnerConfig(experiment_name="survey", log_dir=str(tmp_path / "logs"), verbose=False),
        solver=SolverConfig(cube_size=2),
        selection=SelectionConfig(base_piece=None, pieces=["O", "O"], catalog_path=TETRACUBE_CATALOG),
        survey=SurveyConfig(max_workers=2, **survey),
    )


class TestSurvey:
    """Test the parallel survey over selections."""

    SELECTIONS = [("O", "O"), ("I", "I"), ("D", "D", "D", "D"), ("O", "L")]

    def test_reports_sorted_and_classified(self, tmp_path):
        config = _small_survey_config(tmp_path)
        reports = run_survey(config, selections=self.SELECTIONS, show_progress=False)

        assert [r.run_id for r in reports] == ["sel_0", "sel_1", "sel_2", "sel_3"]
        statuses = [r.status for r in reports]
        assert statuses == [
            SolveStatus.SOLVED, SolveStatus.NO_SOLUTION, SolveStatus.SOLVED, SolveStatus.NO_SOLUTION,
        ]

    def test_solvable_selections(self, tmp_path):
        config = _small_survey_config(tmp_path)
        reports = run_survey(config, selections=self.SELECTIONS, show_progress=False)
        assert [s["selection"] for s in solvable_selections(reports)] == [["O", "O"], ["D", "D", "D", "D"]]

    def test_results_table(self, tmp_path):
        config = _small_survey_config(tmp_path)
        reports = run_survey(config, selections=self.SELECTIONS, show_progress=False)

        log_root = tmp_path / "logs"
        run_dirs = list(log_root.iterdir())
        assert len(run_dirs) == 1
        table = pd.read_csv(run_dirs[0] / "survey_results.csv")
        assert len(table) == len(reports)
        assert list(table["status"]) == [r.status.value for r in reports]
        assert (run_dirs[0] / "survey_summary.json").exists()

    def test_limit(self, tmp_path):
        config = _small_survey_config(tmp_path, limit=1)
        config.runner.save_logs = False
        reports = run_survey(config, selections=self.SELECTIONS, show_progress=False)
        assert len(reports) == 1
