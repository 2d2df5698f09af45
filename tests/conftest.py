"""Shared fixtures for cubecover tests."""

import os

import pytest

from cubecover.core.base import Piece
from cubecover.core.catalog import select_pieces
from cubecover.core.config import Config, RunnerConfig


REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
TETRACUBE_CATALOG = os.path.join(REPO_ROOT, "assets", "catalogs", "tetracubes.yaml")


def make_piece(name, shape):
    shape = tuple(tuple(v) for v in shape)
    return Piece(name=name, volume=len(shape), shape=shape)


@pytest.fixture
def soma_pieces():
    """Tricube A plus the six selector tetracubes."""
    return select_pieces(["L", "T", "Z", "S", "B", "P"])


@pytest.fixture
def monocube():
    return make_piece("M", [(0, 0, 0)])


@pytest.fixture
def bar4():
    return make_piece("I", [(0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 0, 0)])


@pytest.fixture
def tmp_config(tmp_path):
    """Default config writing its artefacts under tmp_path."""
    return Config(runner=RunnerConfig(
        experiment_name="test_run",
        log_dir=str(tmp_path / "logs"),
        verbose=False,
    ))
