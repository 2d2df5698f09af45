"""
Base types for the cubecover solver.

This module defines the data model shared by the catalog, the rotation
generator, the matrix builder and the exact-cover search.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum


Voxel = Tuple[int, int, int]
Shape = Tuple[Voxel, ...]


class InvalidInputError(ValueError):
    """Raised when a solve request is malformed (not merely unsolvable)."""


class SearchInterrupted(RuntimeError):
    """Raised when a cooperative stop check ends the search early."""


class SolveStatus(Enum):
    """Outcome of one solve request."""
    SOLVED: str = "solved"
    NO_SOLUTION: str = "no_solution"
    INTERRUPTED: str = "interrupted"
    INVALID: str = "invalid"
    ERROR: str = "error"


@dataclass(frozen=True)
class Piece:
    """A polycube piece. Shape coordinates are relative; color is opaque metadata."""
    name: str
    volume: int
    shape: Shape
    color: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "volume": self.volume,
            "shape": [list(v) for v in self.shape],
            "color": self.color,
        }

    def with_color(self, color: Optional[int]) -> "Piece":
        return Piece(name=self.name, volume=self.volume, shape=self.shape, color=color)


@dataclass(frozen=True)
class Row:
    """One candidate (piece, rotation, translation) placement of the exact-cover matrix."""
    piece_index: int
    rotation_index: int
    translation: Voxel
    columns: Tuple[int, ...]
    coords: Shape


@dataclass
class ExactCoverMatrix:
    """Columns and rows for one solve. Voxel columns come first, then piece columns."""
    cube_size: int
    num_pieces: int
    rows: List[Row] = field(default_factory=list)

    @property
    def num_voxels(self) -> int:
        return self.cube_size ** 3

    @property
    def num_columns(self) -> int:
        return self.num_voxels + self.num_pieces

    @property
    def columns(self) -> List[int]:
        return list(range(self.num_columns))

    def rows_for_piece(self, piece_index: int) -> List[Row]:
        return [r for r in self.rows if r.piece_index == piece_index]


@dataclass(frozen=True)
class Placement:
    """One piece of a solution, in absolute cube coordinates."""
    piece_index: int
    piece_name: str
    coords: Shape
    rotation_index: int = 0
    translation: Voxel = (0, 0, 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "piece_index": self.piece_index,
            "piece_name": self.piece_name,
            "coords": [list(c) for c in self.coords],
            "rotation_index": self.rotation_index,
            "translation": list(self.translation),
        }


@dataclass
class SearchStats:
    """Counters gathered by a single dancing-links search."""
    nodes: int = 0
    backtracks: int = 0
    elapsed: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": self.nodes,
            "backtracks": self.backtracks,
            "elapsed": self.elapsed,
        }


@dataclass
class SolveOutcome:
    """Placements (or None) together with the matrix size and search counters."""
    placements: Optional[List[Placement]]
    num_rows: int
    num_columns: int
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def solved(self) -> bool:
        return self.placements is not None


@dataclass
class SolveReport:
    """Result of one runner invocation."""
    run_id: str
    pieces: List[str]
    cube_size: int
    status: SolveStatus
    execution_time: float
    placements: Optional[List[Placement]] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == SolveStatus.SOLVED

    def to_dict(self) -> Dict[str, Any]:
        """Convert the report to a JSON-friendly dictionary."""
        return {
            "run_id": self.run_id,
            "pieces": list(self.pieces),
            "cube_size": self.cube_size,
            "status": self.status.value,
            "success": self.success,
            "execution_time": self.execution_time,
            "placements": [p.to_dict() for p in self.placements] if self.placements else None,
            "metadata": self.metadata,
            "error_message": self.error_message,
        }

    def to_row(self) -> Dict[str, Any]:
        """Flatten the report into one row of a results table."""
        return {
            "run_id": self.run_id,
            "pieces": " ".join(self.pieces),
            "cube_size": self.cube_size,
            "status": self.status.value,
            "execution_time": round(self.execution_time, 4),
            "nodes": self.metadata.get("nodes", 0),
            "rows": self.metadata.get("rows", 0),
            "error": self.error_message or "",
        }
