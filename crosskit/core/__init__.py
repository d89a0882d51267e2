"""
Core functionality for crosskit.

This package contains the foundational modules that other components depend on:
the error hierarchy, host platform detection, the project environment and the
process, download and version-control primitives.
"""

from .exceptions import (
    CrossKitError,
    UsageError,
    SdkError,
    AlreadyInstalledError,
    NotInstalledError,
    MissingToolError,
    NetworkError,
    ExtractionError,
    SubprocessExitError,
    RunnerExecutionError,
    RegistrationError,
    UnknownConfigError,
    UnknownBaseError,
    UnknownRunnerError,
    UnknownCommandError,
    OptionsValidationError,
    BuildConfigurationError,
    InvalidConfigError,
)

from .platform import (
    HostOS,
    HostArch,
    HostPlatform,
    detect_host,
    clear_host_cache,
)

from .project import Project, load_yaml_config

__all__ = [
    "CrossKitError",
    "UsageError",
    "SdkError",
    "AlreadyInstalledError",
    "NotInstalledError",
    "MissingToolError",
    "NetworkError",
    "ExtractionError",
    "SubprocessExitError",
    "RunnerExecutionError",
    "RegistrationError",
    "UnknownConfigError",
    "UnknownBaseError",
    "UnknownRunnerError",
    "UnknownCommandError",
    "OptionsValidationError",
    "BuildConfigurationError",
    "InvalidConfigError",
    "HostOS",
    "HostArch",
    "HostPlatform",
    "detect_host",
    "clear_host_cache",
    "Project",
    "load_yaml_config",
]
