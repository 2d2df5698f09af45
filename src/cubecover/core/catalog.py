"""
Piece catalog: built-in polycube definitions and selection helpers.

The built-in set is the seven Soma pieces: one tricube (A) and six
tetracubes. A selection is the fixed base piece followed by one piece per
colored selector slot, so the default selection fills a 3x3x3 cube.
"""

import json
from itertools import combinations_with_replacement
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import yaml

from cubecover.core.base import Piece


def _piece(name: str, color: int, shape: List[List[int]]) -> Piece:
    return Piece(name=name, volume=len(shape), shape=tuple(tuple(v) for v in shape), color=color)


SOMA_PIECES: Dict[str, Piece] = {
    "L": _piece("L", 0x00A0B0, [[0, 0, 0], [1, 0, 0], [2, 0, 0], [0, 1, 0]]),
    "T": _piece("T", 0x6A4A3C, [[0, 0, 0], [1, 0, 0], [2, 0, 0], [1, 1, 0]]),
    "Z": _piece("Z", 0xCC333F, [[0, 0, 0], [1, 0, 0], [1, 1, 0], [2, 1, 0]]),
    "S": _piece("S", 0xEB6841, [[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 0, 1]]),
    "A": _piece("A", 0xFFFFFF, [[0, 0, 0], [1, 0, 0], [0, 1, 0]]),
    "B": _piece("B", 0x8BC34A, [[0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1]]),
    "P": _piece("P", 0x955251, [[0, 0, 0], [0, 1, 0], [1, 1, 0], [0, 0, 1]]),
}

# Selector slots in display order; each slot paints its piece in this color.
COLOR_SELECTORS: Dict[str, int] = {
    "Red": 0xFF0000,
    "Orange": 0xFFA500,
    "Yellow": 0xFFFF00,
    "Green": 0x008000,
    "Blue": 0x0000FF,
    "Purple": 0x800080,
}

# Selector number -> catalog piece name
PIECE_MAPPING: Dict[str, str] = {
    "1": "L", "3": "T", "4": "S", "2": "Z", "5": "P", "6": "B",
}

DEFAULT_BASE_PIECE = "A"
DEFAULT_SELECTION: Tuple[str, ...] = ("L", "T", "Z", "S", "B", "P")

Catalog = Mapping[str, Piece]


def get_piece(name: str, catalog: Optional[Catalog] = None) -> Piece:
    """Look up a piece by name."""
    catalog = SOMA_PIECES if catalog is None else catalog
    if name not in catalog:
        raise KeyError(f"Unknown piece '{name}'. Known pieces: {', '.join(sorted(catalog))}")
    return catalog[name]


def resolve_piece_key(key: Union[str, int], catalog: Optional[Catalog] = None) -> str:
    """Accept a catalog name or a selector number ("1".."6") and return the piece name."""
    catalog = SOMA_PIECES if catalog is None else catalog
    key = str(key).strip()
    if key in catalog:
        return key
    if key in PIECE_MAPPING and PIECE_MAPPING[key] in catalog:
        return PIECE_MAPPING[key]
    raise KeyError(
        f"Unknown piece '{key}'. Use a name ({', '.join(sorted(catalog))}) "
        f"or a selector number ({', '.join(sorted(PIECE_MAPPING))})"
    )


def select_pieces(keys: Sequence[Union[str, int]],
                  base_piece: Optional[str] = DEFAULT_BASE_PIECE,
                  catalog: Optional[Catalog] = None) -> List[Piece]:
    """
    Build an ordered piece list: the base piece first, then one piece per key.

    Keys beyond the six selector slots keep their catalog color.

    Args:
        keys: Piece names or selector numbers, one per slot
        base_piece: Piece always placed first, or None to skip it
        catalog: Catalog to draw from (defaults to SOMA_PIECES)

    Returns:
        List of Piece objects in selection order
    """
    catalog = SOMA_PIECES if catalog is None else catalog
    pieces = []
    if base_piece:
        pieces.append(get_piece(base_piece, catalog))

    slot_colors = list(COLOR_SELECTORS.values())
    for slot, key in enumerate(keys):
        piece = get_piece(resolve_piece_key(key, catalog), catalog)
        if slot < len(slot_colors):
            piece = piece.with_color(slot_colors[slot])
        pieces.append(piece)
    return pieces


def selection_space(slots: int = len(COLOR_SELECTORS)) -> List[Tuple[str, ...]]:
    """
    Every distinct multiset of selector pieces for `slots` slots.

    Slot order does not change solvability, so permutations are skipped.
    """
    names = [PIECE_MAPPING[k] for k in sorted(PIECE_MAPPING)]
    return list(combinations_with_replacement(names, slots))


def total_volume(pieces: Sequence[Piece]) -> int:
    return sum(p.volume for p in pieces)


def _parse_color(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip().lstrip("#")
    if text.lower().startswith("0x"):
        text = text[2:]
    return int(text, 16)


def piece_from_dict(name: str, data: Mapping[str, Any]) -> Piece:
    """Create a Piece from a catalog entry ({"shape": [...], "volume": n, "color": ...})."""
    if "shape" not in data:
        raise ValueError(f"Piece '{name}' is missing 'shape'")
    shape = []
    for coord in data["shape"]:
        if not isinstance(coord, (list, tuple)) or len(coord) != 3:
            raise ValueError(f"Piece '{name}' has a malformed coordinate: {coord!r}")
        shape.append(tuple(int(c) for c in coord))
    volume = int(data.get("volume", len(shape)))
    return Piece(name=name, volume=volume, shape=tuple(shape), color=_parse_color(data.get("color")))


def load_catalog(path: Union[str, Path]) -> Dict[str, Piece]:
    """
    Load a catalog file (JSON or YAML).

    Format:
        {"pieces": {"L": {"shape": [[0,0,0], ...], "volume": 4, "color": "#00a0b0"}}}

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the content is malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if not isinstance(data, dict) or not isinstance(data.get("pieces"), dict):
        raise ValueError(f"Catalog {path} must contain a 'pieces' mapping")

    catalog = {}
    for name, entry in data["pieces"].items():
        catalog[str(name)] = piece_from_dict(str(name), entry)
    if not catalog:
        raise ValueError(f"Catalog {path} defines no pieces")
    return catalog
