"""
External tool probes.

A tool probe answers "is executable X usable on this host?" by running it
with a harmless version argument. Probes gate operations that need a
host-provided binary: tar to unpack SDK archives, wasmtime to run WASI
executables, git to clone SDK repositories.

Example:
    >>> registry = ToolRegistry()
    >>> registry.register(command_probe("tar", "required for unpacking SDK archives"))
    >>> registry.exists("tar")
    True
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from crosskit.core.exceptions import MissingToolError
from crosskit.core.platform import HostOS, HostPlatform, detect_host
from crosskit.core.process import probe_process

logger = logging.getLogger(__name__)

ALL_PLATFORMS: Tuple[HostOS, ...] = (HostOS.WINDOWS, HostOS.MACOS, HostOS.LINUX)


@dataclass(frozen=True)
class ToolProbe:
    """
    Description of an external tool and how to detect it.

    Attributes:
        name: Executable name
        exists: Zero-argument detection function
        platforms: Host operating systems the tool is relevant on
        optional: Whether crosskit works (with reduced features) without it
        not_found_message: What the tool is needed for
    """

    name: str
    exists: Callable[[], bool]
    platforms: Tuple[HostOS, ...] = ALL_PLATFORMS
    optional: bool = True
    not_found_message: str = ""

    def check(self) -> bool:
        """Run the detection function; any failure counts as not found."""
        try:
            return bool(self.exists())
        except Exception as e:
            logger.debug(f"Probe for {self.name} raised: {e}")
            return False


@dataclass(frozen=True)
class ToolProbeResult:
    """Outcome of probing a tool."""

    name: str
    available: bool


def command_probe(
    name: str,
    not_found_message: str = "",
    args: Sequence[str] = ("--version",),
    platforms: Sequence[HostOS] = ALL_PLATFORMS,
    optional: bool = True,
) -> ToolProbe:
    """
    Create a probe that runs '<name> <args>' and checks for exit code 0.

    Args:
        name: Executable name looked up on PATH
        not_found_message: What the tool is needed for
        args: Probe arguments
        platforms: Host operating systems the tool is relevant on
        optional: Whether the tool is optional

    Returns:
        ToolProbe instance
    """
    probe_args = tuple(args)
    return ToolProbe(
        name=name,
        exists=lambda: probe_process(name, probe_args),
        platforms=tuple(platforms),
        optional=optional,
        not_found_message=not_found_message,
    )


@dataclass
class ToolRegistry:
    """
    Registered tool probes with per-process result caching.

    Re-registering a tool name replaces the previous probe and forgets its
    cached result.
    """

    _probes: Dict[str, ToolProbe] = field(default_factory=dict)
    _results: Dict[str, bool] = field(default_factory=dict)

    def register(self, probe: ToolProbe) -> None:
        self._probes[probe.name] = probe
        self._results.pop(probe.name, None)

    def has(self, name: str) -> bool:
        return name in self._probes

    def get(self, name: str) -> ToolProbe:
        """
        Get a registered probe.

        Raises:
            KeyError: If no probe is registered under name
        """
        if name not in self._probes:
            raise KeyError(f"Tool '{name}' not found in registry")
        return self._probes[name]

    def exists(self, name: str) -> bool:
        """
        Check whether a registered tool is available, probing at most once.

        Raises:
            KeyError: If no probe is registered under name
        """
        probe = self.get(name)
        if name not in self._results:
            self._results[name] = probe.check()
            logger.debug(f"Tool {name}: {'found' if self._results[name] else 'not found'}")
        return self._results[name]

    def require(self, name: str) -> None:
        """
        Ensure a registered tool is available.

        Raises:
            MissingToolError: If the tool is not available
        """
        if not self.exists(name):
            probe = self.get(name)
            raise MissingToolError(
                name, probe.not_found_message, hint="run 'crosskit tools'"
            )

    def probe_all(self, host: Optional[HostPlatform] = None) -> List[ToolProbeResult]:
        """
        Probe every tool relevant on the host.

        Args:
            host: Host platform (detected if None)

        Returns:
            Results sorted by tool name
        """
        host = host or detect_host()
        return [
            ToolProbeResult(name, self.exists(name))
            for name, probe in sorted(self._probes.items())
            if host.os in probe.platforms
        ]

    def clear_cache(self) -> None:
        self._results.clear()


__all__ = [
    "ALL_PLATFORMS",
    "ToolProbe",
    "ToolProbeResult",
    "ToolRegistry",
    "command_probe",
]
