"""
cubecover: polycube packing by exact cover

Decides whether an ordered set of polycube pieces can exactly fill an
N x N x N cube, each piece used once in any of its rotations, and returns
one placement per piece. The search is Knuth's Algorithm X over a
dancing-links matrix.

Built-in pieces:
- The seven Soma pieces (tricube A plus tetracubes L, T, Z, S, B, P)

Example Usage:
```python
from cubecover import select_pieces, solve_cube

pieces = select_pieces(["L", "T", "Z", "S", "B", "P"])
placements = solve_cube(pieces, 3)
```

Command-line Usage:
```bash
cubecover solve --pieces L T Z S B P --size 3
cubecover survey --config configs/survey.yaml
cubecover list-pieces
```
"""

from cubecover.core.base import Piece, Placement, SolveReport, SolveStatus, InvalidInputError, SearchInterrupted
from cubecover.core.catalog import SOMA_PIECES, get_piece, select_pieces, selection_space, load_catalog
from cubecover.core.config import Config, load_config, validate_config
from cubecover.solver.pipeline import solve_cube, verify_solution
from cubecover.runner import SolveRunner

__version__ = "0.1.0"

__all__ = [
    "Piece",
    "Placement",
    "SolveReport",
    "SolveStatus",
    "InvalidInputError",
    "SearchInterrupted",
    "SOMA_PIECES",
    "get_piece",
    "select_pieces",
    "selection_space",
    "load_catalog",
    "Config",
    "load_config",
    "validate_config",
    "solve_cube",
    "verify_solution",
    "SolveRunner",
]
