"""
Artifact runners for crosskit.

Configurations name a runner; after a build the host looks that name up in
RunnerDispatch and hands it the built target.
"""

from .base import EXECUTABLE, Target, RunOptions, Runner, RunnerFn, RunnerDispatch
from .process import RuntimeRunner, WasmtimeRunner, LauncherRunner, NativeRunner
from .browser import BrowserRunner

__all__ = [
    "EXECUTABLE",
    "Target",
    "RunOptions",
    "Runner",
    "RunnerFn",
    "RunnerDispatch",
    "RuntimeRunner",
    "WasmtimeRunner",
    "LauncherRunner",
    "NativeRunner",
    "BrowserRunner",
]
