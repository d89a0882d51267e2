"""
Project environment for crosskit.

A Project knows where the project lives, where SDKs are installed and where
builds of each configuration go. It is the environment passed to
configuration validation predicates and runners.

Directory Structure:
    <project-root>/
        crosskit.yaml          : Optional project configuration
        .crosskit/
            sdks/              : Default SDK root, one directory per SDK
            build/<config>/    : Build tree of a configuration
            dist/<config>/     : Built artifacts of a configuration

Project configuration (crosskit.yaml):
    sdk_dir: ../sdks           # relative to the project root
    configs:                   # registered after plugin configs, so they win
      - name: wasi-ninja-release
        inherits: wasi
        generator: ninja
        build_mode: release
        options:
          stack_size: 131072
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from crosskit.core.exceptions import UsageError
from crosskit.core.filesystem import ensure_directory

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "crosskit.yaml"
LOCAL_DIR_NAME = ".crosskit"
SDK_DIR_ENV = "CROSSKIT_SDK_DIR"

SDKS_PLACEHOLDER = "@sdks:"
SELF_PLACEHOLDER = "@self:"
ROOT_PLACEHOLDER = "@root:"


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        UsageError: If required=True and the file doesn't exist, or the YAML
            is invalid or not a mapping
    """
    if not config_file.exists():
        if required:
            raise UsageError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise UsageError(f"Invalid YAML in {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise UsageError(f"{config_file} must contain a mapping at top level")
    return config


class Project:
    """
    Paths and settings of the project crosskit operates on.

    Attributes:
        root: Project root directory
        sdk_dir: Shared SDK root directory
        settings: Parsed project configuration (empty if there is none)

    Example:
        >>> project = Project(Path("/work/demo"))
        >>> project.sdk_dir
        PosixPath('/work/demo/.crosskit/sdks')
        >>> project.expand("@sdks:wasisdk/share/cmake/wasi-sdk.cmake")
        PosixPath('/work/demo/.crosskit/sdks/wasisdk/share/cmake/wasi-sdk.cmake')
    """

    def __init__(
        self,
        root: Union[str, Path],
        sdk_dir: Optional[Union[str, Path]] = None,
        settings: Optional[Dict[str, Any]] = None,
    ):
        self.root = Path(root).resolve()
        self.settings = settings or {}
        self.sdk_dir = self._resolve_sdk_dir(sdk_dir)

    @classmethod
    def load(cls, root: Union[str, Path], config_file: Optional[Path] = None) -> "Project":
        """
        Create a Project from its root, reading crosskit.yaml if present.

        Args:
            root: Project root directory
            config_file: Explicit configuration file (must exist if given)

        Returns:
            Project instance
        """
        root = Path(root)
        if config_file is not None:
            settings = load_yaml_config(Path(config_file), required=True)
        else:
            settings = load_yaml_config(root / CONFIG_FILE_NAME)
        return cls(root, settings=settings)

    def _resolve_sdk_dir(self, sdk_dir: Optional[Union[str, Path]]) -> Path:
        if sdk_dir is None:
            sdk_dir = os.environ.get(SDK_DIR_ENV) or self.settings.get("sdk_dir")
        if not sdk_dir:
            return self.local_dir / "sdks"
        path = Path(sdk_dir).expanduser()
        if not path.is_absolute():
            path = self.root / path
        return path.resolve()

    @property
    def local_dir(self) -> Path:
        """Project-local crosskit directory."""
        return self.root / LOCAL_DIR_NAME

    def ensure_sdk_dir(self) -> Path:
        """Create the SDK root if absent and return it."""
        return ensure_directory(self.sdk_dir)

    def build_dir(self, config_name: str) -> Path:
        """Build tree of a configuration."""
        return self.local_dir / "build" / config_name

    def dist_dir(self, config_name: str) -> Path:
        """Output directory of built artifacts of a configuration."""
        return self.local_dir / "dist" / config_name

    def config_descriptors(self) -> List[Dict[str, Any]]:
        """
        Get configuration descriptors declared by the project.

        Returns:
            List of descriptor mappings (empty if none declared)

        Raises:
            UsageError: If 'configs' is not a list of mappings
        """
        configs = self.settings.get("configs") or []
        if not isinstance(configs, list) or not all(isinstance(c, dict) for c in configs):
            raise UsageError("'configs' in project configuration must be a list of mappings")
        return configs

    def expand(self, path: str, self_dir: Optional[Path] = None) -> Path:
        """
        Expand a placeholder path.

        Placeholders:
            @sdks:  the SDK root
            @self:  self_dir (the directory of the plugin that declared the path)
            @root:  the project root

        Args:
            path: Path, optionally starting with a placeholder
            self_dir: Directory substituted for @self:

        Returns:
            Concrete path

        Raises:
            ValueError: If @self: is used without self_dir
        """
        if path.startswith(SDKS_PLACEHOLDER):
            return self.sdk_dir / path[len(SDKS_PLACEHOLDER):]
        if path.startswith(SELF_PLACEHOLDER):
            if self_dir is None:
                raise ValueError(f"Cannot expand '{path}' without a plugin directory")
            return Path(self_dir) / path[len(SELF_PLACEHOLDER):]
        if path.startswith(ROOT_PLACEHOLDER):
            return self.root / path[len(ROOT_PLACEHOLDER):]
        return Path(path)

    def __repr__(self) -> str:
        return f"Project(root={self.root!s}, sdk_dir={self.sdk_dir!s})"


__all__ = [
    "CONFIG_FILE_NAME",
    "SDK_DIR_ENV",
    "Project",
    "load_yaml_config",
]
