"""
crosskit plugin system.

Platform support is provided by plugins that register commands, tool
probes, runners and configurations through a Registrar, and contribute
build flags through a BuildContext.
"""

from .base import Plugin, Registrar, BuildContext
from .host import Host

__all__ = ["Plugin", "Registrar", "BuildContext", "Host"]
