"""
Console display utilities for cubecover.
"""

import time
from typing import Any, Dict, Optional, Sequence
from datetime import datetime

from cubecover.core.base import Placement


class ProgressDisplay:
    """Single-line progress bar for batches of solves."""

    def __init__(self, total: int = 100, enabled: bool = True):
        self.total = max(total, 1)
        self.enabled = enabled
        self.start_time = time.time()

    def update(self, done: int, description: str = ""):
        """Redraw the bar after `done` items."""
        if not self.enabled:
            return
        progress = min(done / self.total, 1.0)
        elapsed = time.time() - self.start_time
        eta = (elapsed / done) * (self.total - done) if done > 0 else 0

        bar_length = 30
        filled = int(bar_length * progress)
        bar = "█" * filled + "░" * (bar_length - filled)

        line = (f"\r⏳ Progress: [{bar}] {progress:.1%} ({done}/{self.total}) "
                f"| Elapsed: {format_seconds(elapsed)} | ETA: {format_seconds(eta)}")
        if description:
            line += f" | {description}"
        print(line, end="", flush=True)

    def finish(self, success: bool = True):
        if not self.enabled:
            return
        total_time = format_seconds(time.time() - self.start_time)
        if success:
            print(f"\n✅ Complete! Total time: {total_time}")
        else:
            print(f"\n❌ Failed! Total time: {total_time}")


def format_seconds(seconds: float) -> str:
    """Format a duration as 1.2s, 3m 4s or 1h 2m."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        return f"{int(seconds // 60)}m {int(seconds % 60)}s"
    return f"{int(seconds // 3600)}h {int((seconds % 3600) // 60)}m"


class StatusDisplay:
    """Formatted console output for solver runs."""

    @staticmethod
    def print_header(title: str, width: int = 80):
        print("\n" + "=" * width)
        print(f"{title:^{width}}")
        print("=" * width)

    @staticmethod
    def print_section(title: str, width: int = 60):
        print(f"\n📋 {title}")
        print("-" * width)

    @staticmethod
    def print_config(config_dict: Dict[str, Any], title: str = "Configuration"):
        StatusDisplay.print_section(title)
        for key, value in config_dict.items():
            print(f"  {key:<20} : {value}")

    @staticmethod
    def print_status(message: str, status: str = "info"):
        """Print a timestamped status line with an icon for its level."""
        icons = {
            "info": "ℹ️",
            "success": "✅",
            "warning": "⚠️",
            "error": "❌",
            "loading": "⏳",
            "processing": "🔄"
        }
        icon = icons.get(status, "ℹ️")
        timestamp = datetime.now().strftime("%H:%M:%S")
        print(f"{icon} [{timestamp}] {message}")

    @staticmethod
    def print_results(results: Dict[str, Any], title: str = "Results"):
        StatusDisplay.print_section(title)
        for key, value in results.items():
            if isinstance(value, bool):
                icon = "✅" if value else "❌"
                print(f"  {key:<20} : {icon} {value}")
            elif isinstance(value, float):
                print(f"  {key:<20} : {value:.3f}")
            else:
                print(f"  {key:<20} : {value}")

    @staticmethod
    def print_piece(name: str, shape: Sequence[Sequence[int]], num_rotations: Optional[int] = None):
        """Print one piece's voxels layer by layer (z ascending)."""
        StatusDisplay.print_section(f"Piece {name}")
        print(f"  Voxels: {len(shape)}")
        if num_rotations is not None:
            print(f"  Unique rotations: {num_rotations}")
        max_x = max(v[0] for v in shape)
        max_y = max(v[1] for v in shape)
        max_z = max(v[2] for v in shape)
        cells = {tuple(v) for v in shape}
        for z in range(max_z + 1):
            print(f"  z={z}:")
            for y in range(max_y, -1, -1):
                row = "".join(" # " if (x, y, z) in cells else " . " for x in range(max_x + 1))
                print(f"    {row}")

    @staticmethod
    def print_layers(placements: Sequence[Placement], cube_size: int):
        """Top-down view of a solved cube: one grid per z layer, highest first."""
        by_cell = {}
        for placement in placements:
            for coord in placement.coords:
                by_cell[tuple(coord)] = placement.piece_name

        width = max([len(n) for n in by_cell.values()] + [1])
        print("\n=== Layers (top view) ===")
        for z in range(cube_size - 1, -1, -1):
            print(f"\nLayer z={z}:")
            for y in range(cube_size - 1, -1, -1):
                row = ""
                for x in range(cube_size):
                    label = by_cell.get((x, y, z), ".")
                    row += f"[{label:^{width}}]"
                print(f"  {row}")


class LiveLogger:
    """Status-line logger that can be silenced with verbose=False."""

    def __init__(self, verbose: bool = True):
        self.verbose = verbose

    def log_action(self, action_name: str, details: str = ""):
        if self.verbose:
            message = f"Executing: {action_name}"
            if details:
                message += f" - {details}"
            StatusDisplay.print_status(message, "processing")

    def log_result(self, message: str, success: bool = True):
        if self.verbose:
            StatusDisplay.print_status(message, "success" if success else "error")

    def log_info(self, message: str):
        if self.verbose:
            StatusDisplay.print_status(message, "info")

    def log_warning(self, message: str):
        if self.verbose:
            StatusDisplay.print_status(message, "warning")

    def log_error(self, message: str):
        # errors are always shown
        StatusDisplay.print_status(message, "error")
