"""Utility modules for cubecover."""

from cubecover.utils.logger import ExperimentLogger
from cubecover.utils.display import ProgressDisplay, StatusDisplay, LiveLogger, format_seconds

__all__ = [
    "ExperimentLogger",
    "ProgressDisplay",
    "StatusDisplay",
    "LiveLogger",
    "format_seconds",
]
