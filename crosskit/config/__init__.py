"""
Build configuration composition for crosskit.

Plugins and projects register named, inheritable configuration descriptors;
the registry resolves them into immutable records and answers whether a
configuration is currently usable.

Example:
    >>> from crosskit.config import ConfigRegistry, ConfigDescriptor, Platform, BuildMode
    >>> registry = ConfigRegistry()
    >>> registry.register(ConfigDescriptor(name="wasi", platform=Platform.WASI))
    >>> registry.register(ConfigDescriptor(name="wasi-release", inherits="wasi",
    ...                                    build_mode=BuildMode.RELEASE))
    >>> registry.resolve("wasi-release").platform
    <Platform.WASI: 'wasi'>
"""

from .record import (
    Platform,
    Generator,
    BuildMode,
    Opener,
    ValidationResult,
    ValidateFn,
    ConfigDescriptor,
    ConfigurationRecord,
)
from .options import OptionsSchema
from .registry import ConfigRegistry

__all__ = [
    "Platform",
    "Generator",
    "BuildMode",
    "Opener",
    "ValidationResult",
    "ValidateFn",
    "ConfigDescriptor",
    "ConfigurationRecord",
    "OptionsSchema",
    "ConfigRegistry",
]
