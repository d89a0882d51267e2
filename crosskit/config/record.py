"""
Build configuration records.

A ConfigDescriptor is what plugins and projects register: a name, an
optional base to inherit from, and the fields it sets. The registry resolves
descriptors into ConfigurationRecords, which are immutable and fully
resolved (every field of the base applied before the overrides).
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from crosskit.core.exceptions import RegistrationError
from crosskit.core.project import Project


class Platform(str, Enum):
    """Target platform of a configuration."""

    NATIVE = "native"
    WASI = "wasi"
    EMSCRIPTEN = "emscripten"
    IOS = "ios"
    ANDROID = "android"


class Generator(str, Enum):
    """Build file generator."""

    MAKE = "make"
    NINJA = "ninja"
    XCODE = "xcode"
    VSTUDIO = "vstudio"

    @property
    def cmake_name(self) -> str:
        """CMake generator name (the value of 'cmake -G')."""
        return _CMAKE_GENERATORS[self]


_CMAKE_GENERATORS = {
    Generator.MAKE: "Unix Makefiles",
    Generator.NINJA: "Ninja",
    Generator.XCODE: "Xcode",
    Generator.VSTUDIO: "Visual Studio 17 2022",
}


class BuildMode(str, Enum):
    """Build mode of a configuration."""

    DEBUG = "debug"
    RELEASE = "release"

    @property
    def cmake_build_type(self) -> str:
        return self.value.capitalize()


class Opener(str, Enum):
    """IDE used to open a configured project."""

    VSCODE = "vscode"
    XCODE = "xcode"


@dataclass(frozen=True)
class ValidationResult:
    """
    Whether a configuration is usable right now.

    Invalid configurations are an expected, user-fixable state, so they are
    reported as data with hints instead of raised.
    """

    valid: bool
    hints: Tuple[str, ...] = ()

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(True, ())

    @classmethod
    def invalid(cls, *hints: str) -> "ValidationResult":
        return cls(False, tuple(hints))


ValidateFn = Callable[[Project], ValidationResult]


@dataclass(frozen=True)
class ConfigDescriptor:
    """
    Registration input for a configuration.

    Every field except name is optional; None means "not set here" and is
    filled from the base named by inherits.

    Attributes:
        name: Unique configuration name
        inherits: Name of an already registered configuration to start from
        ignore: Abstract configuration used only as a base (never inherited)
        platform: Target platform
        runner: Name of the runner executing built artifacts
        generator: Build file generator
        build_mode: Debug or release
        opener: IDE opener
        toolchain_file: Toolchain file path, may start with a placeholder
            (@sdks:, @self:, @root:)
        compilers: Compilers the configuration supports
        cmake_includes: Build-file fragments included by the build
        cmake_variables: Variables passed to the build (merged key-wise)
        cmake_cache_variables: Cache variables passed to the build (merged key-wise)
        options: Platform options, checked against the platform's option
            schema (merged key-wise)
        validate: Predicate telling whether the configuration is usable
        self_dir: Directory substituted for @self: placeholders
    """

    name: str
    inherits: Optional[str] = None
    ignore: Optional[bool] = None
    platform: Optional[Platform] = None
    runner: Optional[str] = None
    generator: Optional[Generator] = None
    build_mode: Optional[BuildMode] = None
    opener: Optional[Opener] = None
    toolchain_file: Optional[str] = None
    compilers: Optional[Tuple[str, ...]] = None
    cmake_includes: Optional[Tuple[str, ...]] = None
    cmake_variables: Optional[Mapping[str, Any]] = None
    cmake_cache_variables: Optional[Mapping[str, Any]] = None
    options: Optional[Mapping[str, Any]] = None
    validate: Optional[ValidateFn] = None
    self_dir: Optional[Path] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ConfigDescriptor":
        """
        Build a descriptor from a plain mapping (e.g. parsed YAML).

        Args:
            data: Mapping with descriptor field names as keys

        Returns:
            ConfigDescriptor

        Raises:
            RegistrationError: On a missing name, unknown key, invalid enum value or
                a field of the wrong shape
        """
        allowed = {f.name for f in fields(cls)} - {"validate", "self_dir"}
        unknown = set(data) - allowed
        if unknown:
            raise RegistrationError(
                f"unknown config field(s): {', '.join(sorted(unknown))}"
            )
        if not data.get("name"):
            raise RegistrationError("config entry without a name")

        values: Dict[str, Any] = dict(data)
        name = values["name"]
        for key, enum_type in ENUM_FIELDS.items():
            if values.get(key) is not None:
                try:
                    values[key] = enum_type(values[key])
                except ValueError:
                    choices = ", ".join(e.value for e in enum_type)
                    raise RegistrationError(
                        f"config '{name}': invalid {key} '{values[key]}' "
                        f"(expected one of: {choices})"
                    ) from None
        for key in SEQUENCE_FIELDS:
            if values.get(key) is not None:
                if not isinstance(values[key], (list, tuple)):
                    raise RegistrationError(f"config '{name}': {key} must be a list")
                values[key] = tuple(values[key])
        for key in MAPPING_FIELDS:
            if values.get(key) is not None and not isinstance(values[key], Mapping):
                raise RegistrationError(f"config '{name}': {key} must be a mapping")
        return cls(**values)


ENUM_FIELDS = {
    "platform": Platform,
    "generator": Generator,
    "build_mode": BuildMode,
    "opener": Opener,
}

SEQUENCE_FIELDS = ("compilers", "cmake_includes")

MAPPING_FIELDS = ("cmake_variables", "cmake_cache_variables", "options")


def frozen_mapping(data: Optional[Mapping[str, Any]] = None) -> Mapping[str, Any]:
    return MappingProxyType(dict(data or {}))


@dataclass(frozen=True)
class ConfigurationRecord:
    """
    A fully resolved, immutable build configuration.

    Produced by ConfigRegistry.register(); never mutated afterwards.
    """

    name: str
    platform: Platform = Platform.NATIVE
    runner: Optional[str] = None
    generator: Optional[Generator] = None
    build_mode: BuildMode = BuildMode.DEBUG
    opener: Optional[Opener] = None
    toolchain_file: Optional[str] = None
    compilers: Tuple[str, ...] = ()
    cmake_includes: Tuple[str, ...] = ()
    cmake_variables: Mapping[str, Any] = field(default_factory=frozen_mapping)
    cmake_cache_variables: Mapping[str, Any] = field(default_factory=frozen_mapping)
    options: Any = field(default_factory=frozen_mapping)
    validate: Optional[ValidateFn] = None
    ignore: bool = False
    self_dir: Optional[Path] = None

    def toolchain_path(self, project: Project) -> Optional[Path]:
        """Concrete toolchain file path, computed from the project's SDK root."""
        if self.toolchain_file is None:
            return None
        return project.expand(self.toolchain_file, self.self_dir)

    def include_paths(self, project: Project) -> Tuple[Path, ...]:
        """Concrete paths of the included build-file fragments."""
        return tuple(project.expand(p, self.self_dir) for p in self.cmake_includes)

    def expanded_variables(self, project: Project) -> Dict[str, Any]:
        """Build variables with placeholder string values expanded."""
        return {
            key: str(project.expand(value, self.self_dir)) if _is_placeholder(value) else value
            for key, value in self.cmake_variables.items()
        }


def _is_placeholder(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(("@sdks:", "@self:", "@root:"))


__all__ = [
    "Platform",
    "Generator",
    "BuildMode",
    "Opener",
    "ValidationResult",
    "ValidateFn",
    "ConfigDescriptor",
    "ConfigurationRecord",
]
