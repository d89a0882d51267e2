"""
Runners that execute an artifact as a child process.
"""

import logging
from pathlib import Path
from typing import Optional

from crosskit.config.record import ConfigurationRecord
from crosskit.core.exceptions import NotInstalledError
from crosskit.core.platform import HostPlatform, detect_host
from crosskit.core.project import Project
from crosskit.runners.base import RunOptions, Runner, Target
from crosskit.tools import ToolRegistry

logger = logging.getLogger(__name__)


class RuntimeRunner(Runner):
    """
    Run an artifact inside a runtime found on PATH.

    The command line is '<runtime> <artifact> <args...>'.

    Args:
        name: Runner name configurations refer to
        runtime: Runtime executable (e.g. 'wasmtime')
        suffix: Artifact file suffix (e.g. '.wasm')
        tools: Registry used to check that the runtime exists before spawning
    """

    def __init__(
        self,
        name: str,
        runtime: str,
        suffix: str = "",
        tools: Optional[ToolRegistry] = None,
    ):
        self.name = name
        self.runtime = runtime
        self.suffix = suffix
        self.tools = tools

    def run(
        self,
        project: Project,
        config: ConfigurationRecord,
        target: Target,
        options: RunOptions,
    ) -> None:
        if self.tools is not None and self.tools.has(self.runtime):
            self.tools.require(self.runtime)
        artifact = target.artifact_path(project, config, self.suffix)
        self.execute(self.runtime, [str(artifact), *options.args], options)


class WasmtimeRunner(RuntimeRunner):
    """Run WASI executables with wasmtime."""

    def __init__(self, tools: Optional[ToolRegistry] = None):
        super().__init__("wasi", "wasmtime", ".wasm", tools)


class LauncherRunner(Runner):
    """
    Run an artifact through a launcher shipped inside an SDK.

    The launcher is started in the artifact's directory with the artifact's
    file name followed by the caller's arguments (emrun expects exactly that).

    Args:
        name: Runner name configurations refer to
        sdk_name: SDK directory name under the SDK root
        launcher: Launcher path relative to the SDK directory
        suffix: Artifact file suffix
        sdk_title: SDK name used in messages
        install_hint: Command that installs the SDK
        host: Host platform (detected if None)
    """

    def __init__(
        self,
        name: str,
        sdk_name: str,
        launcher: str,
        suffix: str = "",
        sdk_title: Optional[str] = None,
        install_hint: Optional[str] = None,
        host: Optional[HostPlatform] = None,
    ):
        self.name = name
        self.sdk_name = sdk_name
        self.launcher = launcher
        self.suffix = suffix
        self.sdk_title = sdk_title or sdk_name
        self.install_hint = install_hint
        self.host = host or detect_host()

    def launcher_path(self, project: Project) -> Path:
        return project.sdk_dir / self.sdk_name / self.host.executable_name(self.launcher, ".bat")

    def run(
        self,
        project: Project,
        config: ConfigurationRecord,
        target: Target,
        options: RunOptions,
    ) -> None:
        launcher = self.launcher_path(project)
        if not launcher.is_file():
            raise NotInstalledError(self.sdk_title, hint=self.install_hint)
        artifact = target.artifact_path(project, config, self.suffix)
        self.execute(launcher, [artifact.name, *options.args], options, cwd=artifact.parent)


class NativeRunner(Runner):
    """Run host executables directly."""

    name = "native"

    def __init__(self, host: Optional[HostPlatform] = None):
        self.host = host or detect_host()

    def run(
        self,
        project: Project,
        config: ConfigurationRecord,
        target: Target,
        options: RunOptions,
    ) -> None:
        if target.artifact is not None:
            artifact = Path(target.artifact)
        else:
            artifact = project.dist_dir(config.name) / self.host.executable_name(target.name)
        self.execute(artifact, list(options.args), options, cwd=artifact.parent)


__all__ = ["RuntimeRunner", "WasmtimeRunner", "LauncherRunner", "NativeRunner"]
