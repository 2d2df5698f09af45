"""
Configuration management for cubecover.

This module handles loading and validation of YAML configuration files and
provides typed configuration objects.
"""

import os
import warnings
import yaml
from typing import Any, Dict, Optional, List
from dataclasses import dataclass, field, asdict
from pathlib import Path

from cubecover.core.catalog import (
    DEFAULT_BASE_PIECE, DEFAULT_SELECTION, SOMA_PIECES, COLOR_SELECTORS,
    load_catalog, resolve_piece_key,
)
from cubecover.solver.rotation import minimal_extent


@dataclass
class RunnerConfig:
    """Configuration for the solve runner and its log output."""
    experiment_name: str = "cubecover"
    log_dir: str = "logs"
    results_path: str = "survey_results.csv"
    save_logs: bool = True
    verbose: bool = True

    def __post_init__(self):
        if not isinstance(self.experiment_name, str) or not self.experiment_name:
            raise ValueError("experiment_name must be a non-empty string")
        if not self.results_path.endswith((".csv", ".xlsx")):
            raise ValueError("results_path must end with .csv or .xlsx")


@dataclass
class SolverConfig:
    """Configuration for the exact-cover search."""
    cube_size: int = 3
    # Cooperative stop limits; None means unbounded
    max_nodes: Optional[int] = None
    time_limit: Optional[float] = None

    def __post_init__(self):
        if isinstance(self.cube_size, bool) or not isinstance(self.cube_size, int) or self.cube_size <= 0:
            raise ValueError("cube_size must be a positive integer")
        if self.max_nodes is not None and (not isinstance(self.max_nodes, int) or self.max_nodes <= 0):
            raise ValueError("max_nodes must be a positive integer or null")
        if self.time_limit is not None and (not isinstance(self.time_limit, (int, float)) or self.time_limit <= 0):
            raise ValueError("time_limit must be a positive number or null")
        if self.cube_size > 5:
            warnings.warn(
                f"cube_size={self.cube_size} produces a very large search space. "
                f"Consider setting max_nodes or time_limit."
            )


@dataclass
class SelectionConfig:
    """Which pieces to pack, in selection order."""
    base_piece: Optional[str] = DEFAULT_BASE_PIECE
    pieces: List[str] = field(default_factory=lambda: list(DEFAULT_SELECTION))
    catalog_path: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.pieces, (list, tuple)):
            raise ValueError("pieces must be a list of piece names or selector numbers")
        self.pieces = [str(p) for p in self.pieces]
        if self.catalog_path is not None and not os.path.isabs(self.catalog_path):
            self.catalog_path = os.path.abspath(self.catalog_path)


@dataclass
class SurveyConfig:
    """Configuration for surveying every selector combination."""
    max_workers: int = 4
    limit: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.max_workers, int) or self.max_workers <= 0:
            raise ValueError("max_workers must be a positive integer")
        if self.limit is not None and (not isinstance(self.limit, int) or self.limit <= 0):
            raise ValueError("limit must be a positive integer or null")


@dataclass
class Config:
    """Main configuration object."""
    runner: RunnerConfig = field(default_factory=RunnerConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    selection: SelectionConfig = field(default_factory=SelectionConfig)
    survey: SurveyConfig = field(default_factory=SurveyConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        return cls(
            runner=RunnerConfig(**(data.get("runner") or {})),
            solver=SolverConfig(**(data.get("solver") or {})),
            selection=SelectionConfig(**(data.get("selection") or {})),
            survey=SurveyConfig(**(data.get("survey") or {})),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert Config to dictionary."""
        return {
            "runner": asdict(self.runner),
            "solver": asdict(self.solver),
            "selection": asdict(self.selection),
            "survey": asdict(self.survey),
        }


def load_config(config_path: str) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Config object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If the file is empty, malformed or has invalid fields
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing YAML config: {e}") from e

    if not data:
        raise ValueError("Configuration file is empty")
    if not isinstance(data, dict):
        raise ValueError("Configuration file must contain a mapping")

    # catalog paths in a config file are relative to that file
    selection = data.get("selection") or {}
    catalog_path = selection.get("catalog_path") if isinstance(selection, dict) else None
    if catalog_path and not os.path.isabs(catalog_path):
        data["selection"] = {**selection, "catalog_path": str(config_path.parent / catalog_path)}

    try:
        return Config.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Error creating config from data: {e}") from e


def save_config(config: Config, output_path: str) -> None:
    with open(output_path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, indent=2, sort_keys=False)


def create_default_config(output_path: str = "config.yaml") -> Config:
    """
    Create a default configuration file (the Soma selection on a 3x3x3 cube).

    Args:
        output_path: Path where to save the default config

    Returns:
        Default Config object
    """
    config = Config(runner=RunnerConfig(experiment_name="soma_default"))
    save_config(config, output_path)
    return config


def validate_config(config: Config) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration to validate

    Returns:
        List of validation messages prefixed with "ERROR:" or "WARNING:"
    """
    issues = []

    catalog = SOMA_PIECES
    if config.selection.catalog_path:
        try:
            catalog = load_catalog(config.selection.catalog_path)
        except (FileNotFoundError, ValueError) as e:
            issues.append(f"ERROR: Could not load catalog: {e}")
            return issues

    names = []
    if config.selection.base_piece:
        if config.selection.base_piece in catalog:
            names.append(config.selection.base_piece)
        else:
            issues.append(f"ERROR: Unknown base piece '{config.selection.base_piece}'")
    for key in config.selection.pieces:
        try:
            names.append(resolve_piece_key(key, catalog))
        except KeyError:
            issues.append(f"ERROR: Unknown piece '{key}'")

    if not names:
        issues.append("ERROR: Selection contains no pieces")

    if len(config.selection.pieces) > len(COLOR_SELECTORS):
        issues.append(
            f"WARNING: {len(config.selection.pieces)} pieces selected but only "
            f"{len(COLOR_SELECTORS)} selector colors exist; extra pieces keep catalog colors"
        )

    if names and not any(i.startswith("ERROR") for i in issues):
        volume = sum(catalog[n].volume for n in names)
        cube_volume = config.solver.cube_size ** 3
        if volume != cube_volume:
            issues.append(
                f"WARNING: Total piece volume {volume} differs from cube volume {cube_volume}; "
                f"the search will report no solution"
            )

    if not any(i.startswith("ERROR") for i in issues):
        for name in sorted(set(names)):
            shape = catalog[name].shape
            if shape and minimal_extent(shape)[-1] > config.solver.cube_size:
                issues.append(
                    f"WARNING: Piece '{name}' does not fit in a {config.solver.cube_size}-cube in any orientation"
                )

    if config.solver.max_nodes is None and config.solver.time_limit is None and config.solver.cube_size > 4:
        issues.append("WARNING: No max_nodes or time_limit set for a large cube")

    if config.survey.max_workers > (os.cpu_count() or 1) * 4:
        issues.append("WARNING: survey.max_workers is much larger than the CPU count")

    return issues
