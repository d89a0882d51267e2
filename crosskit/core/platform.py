"""
Host platform detection for crosskit.

The host is modelled as a closed enumeration of operating systems and CPU
architectures. Everything that depends on the host (SDK archive names,
executable suffixes, runner command lines) goes through HostPlatform instead
of branching on platform.system() in place.

Usage:
    from crosskit.core.platform import detect_host

    host = detect_host()
    print(host.os.value, host.arch.value)
    print(host.qualified_name("wasi-sdk-29.0"))  # wasi-sdk-29.0-x86_64-linux
"""

import functools
import platform
from dataclasses import dataclass
from enum import Enum


class HostOS(str, Enum):
    """Supported host operating systems."""

    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"


class HostArch(str, Enum):
    """Supported host CPU architectures."""

    X86_64 = "x86_64"
    ARM64 = "arm64"


@dataclass(frozen=True)
class HostPlatform:
    """
    Operating system and architecture of the machine running crosskit.

    Attributes:
        os: Host operating system
        arch: Host CPU architecture
    """

    os: HostOS
    arch: HostArch

    @property
    def is_windows(self) -> bool:
        return self.os is HostOS.WINDOWS

    def qualified_name(self, prefix: str) -> str:
        """
        Build a host-qualified artifact name.

        SDK release archives are published per host as
        ``<prefix>-<arch>-<os>`` (e.g. ``wasi-sdk-29.0-arm64-macos``).

        Args:
            prefix: Version-qualified artifact prefix

        Returns:
            Host-qualified name
        """
        return f"{prefix}-{self.arch.value}-{self.os.value}"

    def executable_name(self, name: str, windows_suffix: str = ".exe") -> str:
        """
        Get the file name of an executable on this host.

        Args:
            name: Executable base name (e.g. 'wasmtime', 'emsdk')
            windows_suffix: Suffix appended on Windows ('.exe', '.bat')

        Returns:
            Executable file name
        """
        return f"{name}{windows_suffix}" if self.is_windows else name

    def __str__(self) -> str:
        return f"{self.os.value}-{self.arch.value}"


@functools.lru_cache(maxsize=1)
def detect_host() -> HostPlatform:
    """
    Detect the current host platform.

    This function is cached - it only runs detection once per process.

    Returns:
        HostPlatform of the running machine

    Raises:
        RuntimeError: If the OS or architecture is not supported
    """
    return HostPlatform(os=_detect_os(), arch=_detect_arch())


def _detect_os() -> HostOS:
    system = platform.system().lower()
    if system == "windows":
        return HostOS.WINDOWS
    elif system == "darwin":
        return HostOS.MACOS
    elif system == "linux":
        return HostOS.LINUX
    raise RuntimeError(f"Unsupported operating system: {system}")


def _detect_arch() -> HostArch:
    machine = platform.machine().lower()
    if machine in ("x86_64", "amd64", "x64"):
        return HostArch.X86_64
    elif machine in ("aarch64", "arm64"):
        return HostArch.ARM64
    raise RuntimeError(f"Unsupported architecture: {machine}")


def clear_host_cache():
    """
    Clear the host detection cache.

    Useful for testing when platform functions are patched.
    """
    detect_host.cache_clear()


__all__ = [
    "HostOS",
    "HostArch",
    "HostPlatform",
    "detect_host",
    "clear_host_cache",
]
