"""
Core modules for cubecover.

This package contains the fundamental components:
- Data model shared by the solver and the runners
- Piece catalog and selection helpers
- Configuration management
"""

from cubecover.core.base import (
    Piece,
    Row,
    ExactCoverMatrix,
    Placement,
    SearchStats,
    SolveOutcome,
    SolveReport,
    SolveStatus,
    InvalidInputError,
    SearchInterrupted,
)

from cubecover.core.catalog import (
    SOMA_PIECES,
    COLOR_SELECTORS,
    PIECE_MAPPING,
    DEFAULT_BASE_PIECE,
    DEFAULT_SELECTION,
    get_piece,
    resolve_piece_key,
    select_pieces,
    selection_space,
    total_volume,
    load_catalog,
)

from cubecover.core.config import Config, RunnerConfig, SolverConfig, SelectionConfig, SurveyConfig, load_config, save_config, create_default_config, validate_config

__all__ = [
    "Piece",
    "Row",
    "ExactCoverMatrix",
    "Placement",
    "SearchStats",
    "SolveOutcome",
    "SolveReport",
    "SolveStatus",
    "InvalidInputError",
    "SearchInterrupted",
    "SOMA_PIECES",
    "COLOR_SELECTORS",
    "PIECE_MAPPING",
    "DEFAULT_BASE_PIECE",
    "DEFAULT_SELECTION",
    "get_piece",
    "resolve_piece_key",
    "select_pieces",
    "selection_space",
    "total_volume",
    "load_catalog",
    "Config",
    "RunnerConfig",
    "SolverConfig",
    "SelectionConfig",
    "SurveyConfig",
    "load_config",
    "save_config",
    "create_default_config",
    "validate_config",
]
