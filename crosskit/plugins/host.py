"""
Plugin host.

The host owns the registries of one crosskit run: tool probes, runners,
configurations and commands. It configures the plugins, then registers the
project's own configurations so that they override plugin defaults.

Typical flow:
    host = Host(project)
    host.setup()                                  # plugins, then project configs
    result = host.validate("wasi-ninja-debug")   # data, never raises
    context = host.build("wasi-ninja-debug")     # refuses invalid configs
    host.run("wasi-ninja-debug", Target("hello"))
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from crosskit.config.record import ConfigDescriptor, ConfigurationRecord, ValidationResult
from crosskit.config.registry import ConfigRegistry
from crosskit.core.exceptions import InvalidConfigError, UnknownCommandError, UsageError
from crosskit.core.platform import HostPlatform, detect_host
from crosskit.core.project import Project
from crosskit.core.prompt import ConfirmFn, ask
from crosskit.plugins.base import BuildContext, Plugin, Registrar
from crosskit.runners import NativeRunner, RunnerDispatch, RunOptions, Target
from crosskit.sdk.command import Command
from crosskit.tools import ToolRegistry

logger = logging.getLogger(__name__)


class Host:
    """
    Registries and plugins of one crosskit run.

    Args:
        project: Project crosskit operates on
        confirm: Yes/no prompt passed to commands (default: interactive)
        host_platform: Host platform (detected if None)
    """

    def __init__(
        self,
        project: Project,
        confirm: Optional[ConfirmFn] = None,
        host_platform: Optional[HostPlatform] = None,
    ):
        self.project = project
        self.confirm = confirm or ask
        self.host_platform = host_platform or detect_host()
        self.tools = ToolRegistry()
        self.runners = RunnerDispatch()
        self.configs = ConfigRegistry()
        self.commands: Dict[str, Command] = {}
        self.plugins: List[Plugin] = []

        self.runners.register("native", NativeRunner(self.host_platform))

    # ========================================================================
    # Setup
    # ========================================================================

    def setup(self, plugins: Optional[Iterable[Plugin]] = None) -> "Host":
        """
        Configure plugins, then register the project's configurations.

        Args:
            plugins: Plugins to load (default: the built-in toolchain plugins)

        Returns:
            self
        """
        if plugins is None:
            from crosskit.toolchains import builtin_plugins

            plugins = builtin_plugins()
        self.load_plugins(plugins)
        self.load_project_configs()
        return self

    def load_plugins(self, plugins: Iterable[Plugin]) -> None:
        for plugin in plugins:
            logger.debug(f"Configuring plugin '{plugin.name}'")
            plugin.configure(Registrar(self, plugin))
            self.plugins.append(plugin)

    def load_project_configs(self) -> None:
        """
        Register configurations declared in the project file.

        Raises:
            RegistrationError: On invalid descriptors or unknown bases
        """
        for data in self.project.config_descriptors():
            descriptor = ConfigDescriptor.from_mapping(data)
            if descriptor.self_dir is None and descriptor.inherits is None:
                descriptor = replace(descriptor, self_dir=self.project.root)
            logger.debug(f"Registering project config '{descriptor.name}'")
            self.configs.register(descriptor)

    def add_command(self, command: Command) -> None:
        if command.name in self.commands:
            logger.debug(f"Replacing command '{command.name}'")
        self.commands[command.name] = command

    def command(self, name: str) -> Command:
        """
        Get a plugin command.

        Raises:
            UnknownCommandError: If no plugin registered the command
        """
        if name not in self.commands:
            raise UnknownCommandError(name)
        return self.commands[name]

    # ========================================================================
    # Configurations
    # ========================================================================

    def validate(self, name: str) -> ValidationResult:
        """Check whether a configuration is usable; never raises for invalid configs."""
        return self.configs.validate(name, self.project)

    def require_valid(self, name: str) -> ConfigurationRecord:
        """
        Resolve a configuration that must be usable.

        Raises:
            UnknownConfigError: If the configuration is not registered
            InvalidConfigError: If validation fails (hints attached)
        """
        record = self.configs.resolve(name)
        result = self.configs.validate(name, self.project)
        if not result.valid:
            raise InvalidConfigError(name, result.hints)
        return record

    def build(self, name: str) -> BuildContext:
        """
        Collect the plugins' build contributions for a configuration.

        Returns:
            BuildContext with flags, fragments and variables

        Raises:
            InvalidConfigError: If the configuration is not usable
            BuildConfigurationError: If a plugin's build files are missing
        """
        record = self.require_valid(name)
        context = BuildContext(self.project, record)
        context.cmake_variables.update(record.expanded_variables(self.project))
        for path in record.include_paths(self.project):
            context.add_include(path)
        for plugin in self.plugins:
            if plugin.handles(record):
                plugin.build(context)
        return context

    def run(self, name: str, target: Target, options: Optional[RunOptions] = None) -> None:
        """
        Run a built target with the configuration's runner.

        Raises:
            InvalidConfigError: If the configuration is not usable
            UsageError: If the configuration has no runner
            UnknownRunnerError: If the runner was never registered
            RunnerExecutionError: If the runner's process fails
        """
        record = self.require_valid(name)
        if not record.runner:
            raise UsageError(f"config '{name}' has no runner")
        self.runners.run(record.runner, self.project, record, target, options)


__all__ = ["Host"]
