"""
External tool detection for crosskit.
"""

from .probe import (
    ALL_PLATFORMS,
    ToolProbe,
    ToolProbeResult,
    ToolRegistry,
    command_probe,
)

__all__ = [
    "ALL_PLATFORMS",
    "ToolProbe",
    "ToolProbeResult",
    "ToolRegistry",
    "command_probe",
]
