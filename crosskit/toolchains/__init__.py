"""
Built-in toolchain plugins.
"""

from typing import List

from crosskit.plugins.base import Plugin

from .emscripten import EmscriptenPlugin
from .ios import IosPlugin
from .wasi import WasiPlugin


def builtin_plugins() -> List[Plugin]:
    """Create the plugins loaded when no explicit plugin list is given."""
    return [WasiPlugin(), EmscriptenPlugin(), IosPlugin()]


__all__ = ["WasiPlugin", "EmscriptenPlugin", "IosPlugin", "builtin_plugins"]
