"""
Tests for configuration loading and validation.
"""

import os

import pytest
import yaml

from cubecover.core.config import (
    Config,
    RunnerConfig,
    SolverConfig,
    SelectionConfig,
    SurveyConfig,
    load_config,
    save_config,
    create_default_config,
    validate_config,
)
from conftest import REPO_ROOT, TETRACUBE_CATALOG


class TestConfigDefaults:
    """Test dataclass defaults and checks."""

    def test_defaults(self):
        config = Config()
        assert config.solver.cube_size == 3
        assert config.solver.max_nodes is None
        assert config.selection.base_piece == "A"
        assert config.selection.pieces == ["L", "T", "Z", "S", "B", "P"]
        assert config.survey.max_workers == 4

    def test_invalid_cube_size(self):
        with pytest.raises(ValueError):
            SolverConfig(cube_size=0)

    def test_invalid_limits(self):
        with pytest.raises(ValueError):
            SolverConfig(max_nodes=-5)
        with pytest.raises(ValueError):
            SolverConfig(time_limit=0)

    def test_large_cube_warns(self):
        with pytest.warns(UserWarning):
            SolverConfig(cube_size=6)

    def test_results_path_extension(self):
        with pytest.raises(ValueError):
            RunnerConfig(results_path="results.txt")

    def test_selector_numbers_become_strings(self):
        assert SelectionConfig(pieces=[1, 2]).pieces == ["1", "2"]

    def test_invalid_survey(self):
        with pytest.raises(ValueError):
            SurveyConfig(max_workers=0)


class TestConfigFiles:
    """Test YAML round trips."""

    def test_round_trip(self, tmp_path):
        path = tmp_path / "config.yaml"
        config = Config(solver=SolverConfig(cube_size=2, max_nodes=1000))
        save_config(config, str(path))
        loaded = load_config(str(path))
        assert loaded.to_dict() == config.to_dict()

    def test_create_default_config(self, tmp_path):
        path = tmp_path / "default.yaml"
        config = create_default_config(str(path))
        assert path.exists()
        assert config.runner.experiment_name == "soma_default"
        assert load_config(str(path)).to_dict() == config.to_dict()

    def test_partial_file(self, tmp_path):
        path = tmp_path / "partial.yaml"
        path.write_text("solver:\n  cube_size: 2\n")
        config = load_config(str(path))
        assert config.solver.cube_size == 2
        assert config.selection.base_piece == "A"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        with pytest.raises(ValueError):
            load_config(str(path))

    def test_unknown_field(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump({"solver": {"cube_sise": 3}}))
        with pytest.raises(ValueError):
            load_config(str(path))

    def test_catalog_path_relative_to_file(self):
        config = load_config(os.path.join(REPO_ROOT, "configs", "squares_2x2x2.yaml"))
        assert os.path.samefile(config.selection.catalog_path, TETRACUBE_CATALOG)

    def test_shipped_configs_load(self):
        for name in ("soma.yaml", "survey.yaml"):
            config = load_config(os.path.join(REPO_ROOT, "configs", name))
            assert config.solver.cube_size == 3


class TestValidateConfig:
    """Test validation messages."""

    def test_default_is_clean(self):
        assert validate_config(Config()) == []

    def test_volume_mismatch_warning(self):
        config = Config(selection=SelectionConfig(pieces=["L"]))
        issues = validate_config(config)
        assert any(i.startswith("WARNING") and "volume" in i for i in issues)
        assert not any(i.startswith("ERROR") for i in issues)

    def test_unknown_piece_error(self):
        config = Config(selection=SelectionConfig(pieces=["L", "Q"]))
        assert any(i.startswith("ERROR") and "'Q'" in i for i in validate_config(config))

    def test_unknown_base_error(self):
        config = Config(selection=SelectionConfig(base_piece="Q"))
        assert any(i.startswith("ERROR") for i in validate_config(config))

    def test_too_many_slots_warning(self):
        config = Config(selection=SelectionConfig(pieces=["L"] * 7))
        assert any("selector colors" in i for i in validate_config(config))

    def test_missing_catalog_error(self, tmp_path):
        config = Config(selection=SelectionConfig(catalog_path=str(tmp_path / "none.yaml")))
        assert any("Could not load catalog" in i for i in validate_config(config))

    def test_custom_catalog_volume(self):
        config = Config(
            solver=SolverConfig(cube_size=2),
            selection=SelectionConfig(base_piece=None, pieces=["O", "O"], catalog_path=TETRACUBE_CATALOG),
        )
        assert validate_config(config) == []

    def test_oversized_piece_warning(self):
        config = Config(
            solver=SolverConfig(cube_size=2),
            selection=SelectionConfig(base_piece=None, pieces=["I", "O"], catalog_path=TETRACUBE_CATALOG),
        )
        issues = validate_config(config)
        assert any("'I' does not fit" in i for i in issues)
        assert not any("'O'" in i for i in issues)
