"""
Plugin interface.

A plugin adds support for one target platform. At startup the host calls
configure() with a Registrar, a capability handle through which the plugin
registers its commands, tool probes, runners, option schema and
configurations. Plugins never reach into the host's registries directly.

When a configuration is built, the host calls build() on every plugin that
handles the configuration's platform with a BuildContext collecting compiler
and linker flags, build-file fragments and build variables.

Example:
    class MyPlugin(Plugin):
        name = "my"
        platforms = (Platform.WASI,)

        def configure(self, registrar):
            registrar.add_config(ConfigDescriptor(name="my-debug", platform=Platform.WASI))

        def build(self, context):
            context.add_compile_options("-fno-exceptions")
"""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Tuple, Type, Union

from crosskit.config.options import OptionsSchema
from crosskit.config.record import ConfigDescriptor, ConfigurationRecord, Platform
from crosskit.core.exceptions import BuildConfigurationError
from crosskit.core.platform import HostPlatform
from crosskit.core.project import Project
from crosskit.core.prompt import ConfirmFn
from crosskit.runners.base import Runner, RunnerFn
from crosskit.sdk.command import Command
from crosskit.tools import ToolProbe, ToolRegistry

if TYPE_CHECKING:
    from crosskit.plugins.host import Host

logger = logging.getLogger(__name__)


class Plugin(ABC):
    """
    Base class of platform plugins.

    Attributes:
        name: Plugin name
        platforms: Platforms whose builds the plugin contributes to
            (empty means none)
    """

    name: str = ""
    platforms: Tuple[Platform, ...] = ()

    @property
    def plugin_dir(self) -> Path:
        """Directory of the module defining the plugin, used for @self: paths."""
        return Path(inspect.getfile(type(self))).resolve().parent

    def handles(self, config: ConfigurationRecord) -> bool:
        return config.platform in self.platforms

    @abstractmethod
    def configure(self, registrar: Registrar) -> None:
        """
        Register the plugin's commands, tools, runners and configurations.

        Called once at startup.
        """
        pass

    def build(self, context: BuildContext) -> None:
        """
        Contribute to the build of a configuration of a handled platform.

        Raises:
            BuildConfigurationError: If a required plugin file is missing
        """
        pass


class Registrar:
    """
    Capability handle passed to Plugin.configure().

    Args:
        host: Host owning the registries
        plugin: Plugin being configured
    """

    def __init__(self, host: "Host", plugin: Plugin):
        self._host = host
        self._plugin = plugin

    @property
    def tools(self) -> ToolRegistry:
        """Tool registry, for commands and runners that probe tools lazily."""
        return self._host.tools

    @property
    def confirm(self) -> ConfirmFn:
        return self._host.confirm

    @property
    def host_platform(self) -> HostPlatform:
        return self._host.host_platform

    def add_command(self, command: Command) -> None:
        self._host.add_command(command)

    def add_tool(self, probe: ToolProbe) -> None:
        self._host.tools.register(probe)

    def add_runner(self, name: str, runner: Union[Runner, RunnerFn]) -> None:
        self._host.runners.register(name, runner)

    def add_options_schema(self, platform: Platform, schema: Type[OptionsSchema]) -> None:
        self._host.configs.register_options_schema(platform, schema)

    def add_config(self, descriptor: ConfigDescriptor) -> ConfigurationRecord:
        """
        Register a configuration.

        @self: paths of the descriptor resolve against the plugin's directory
        unless the descriptor names another one.
        """
        if descriptor.self_dir is None:
            descriptor = replace(descriptor, self_dir=self._plugin.plugin_dir)
        return self._host.configs.register(descriptor)


@dataclass
class BuildContext:
    """
    Build contributions for one configuration.

    Attributes:
        project: Project being built
        config: Active configuration
        compile_options: Compiler flags
        link_options: Linker flags
        includes: Build-file fragments to include, in order
        cmake_variables: Build variables
    """

    project: Project
    config: ConfigurationRecord
    compile_options: List[str] = field(default_factory=list)
    link_options: List[str] = field(default_factory=list)
    includes: List[Path] = field(default_factory=list)
    cmake_variables: Dict[str, Any] = field(default_factory=dict)

    @property
    def options(self) -> Any:
        """Typed options of the active configuration."""
        return self.config.options

    def add_compile_options(self, *options: str) -> None:
        self.compile_options.extend(options)

    def add_link_options(self, *options: str) -> None:
        self.link_options.extend(options)

    def add_include(self, path: Union[str, Path]) -> Path:
        """
        Add a build-file fragment.

        Args:
            path: Fragment path, may start with a placeholder

        Returns:
            Concrete path of the fragment

        Raises:
            BuildConfigurationError: If the fragment does not exist
        """
        concrete = self.project.expand(str(path), self.config.self_dir)
        if not concrete.is_file():
            raise BuildConfigurationError(f"build file fragment not found: {concrete}")
        if concrete not in self.includes:
            self.includes.append(concrete)
        return concrete

    def set_variable(self, name: str, value: Any) -> None:
        self.cmake_variables[name] = value


__all__ = ["Plugin", "Registrar", "BuildContext"]
