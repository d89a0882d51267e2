"""
Runner interface and dispatch.

A runner executes a built artifact with the backend its platform needs: a
sandboxed runtime, a browser, an SDK bundled launcher or the host itself.
Configurations name their runner; the dispatch table maps that name to the
implementation registered by a plugin.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from crosskit.config.record import ConfigurationRecord
from crosskit.core.exceptions import (
    RunnerExecutionError,
    SubprocessExitError,
    UnknownRunnerError,
    UsageError,
)
from crosskit.core.process import run_process
from crosskit.core.project import Project

logger = logging.getLogger(__name__)

EXECUTABLE = "executable"


@dataclass(frozen=True)
class Target:
    """
    A build target as seen by runners.

    Attributes:
        name: Target name; artifacts are named after it
        kind: Target kind; only 'executable' targets can be run
        artifact: Explicit artifact path, overriding the name-based lookup
    """

    name: str
    kind: str = EXECUTABLE
    artifact: Optional[Path] = None

    def artifact_path(self, project: Project, config: ConfigurationRecord, suffix: str = "") -> Path:
        """Path of the built artifact in the configuration's output directory."""
        if self.artifact is not None:
            return Path(self.artifact)
        return project.dist_dir(config.name) / f"{self.name}{suffix}"


@dataclass(frozen=True)
class RunOptions:
    """
    Invocation options passed from the host to a runner.

    Attributes:
        args: Arguments for the artifact, in order
        cwd: Working directory of the backend process
        env: Environment overrides
        browser: Browser to force for browser-hosted artifacts
        port: Port of the local static file server
    """

    args: Tuple[str, ...] = ()
    cwd: Optional[Path] = None
    env: Mapping[str, str] = field(default_factory=dict)
    browser: Optional[str] = None
    port: Optional[int] = None


class Runner(ABC):
    """Base class of runners."""

    name: str = ""

    @abstractmethod
    def run(
        self,
        project: Project,
        config: ConfigurationRecord,
        target: Target,
        options: RunOptions,
    ) -> None:
        """
        Execute a built artifact.

        Raises:
            RunnerExecutionError: If the backend process exits nonzero
        """
        pass

    def execute(
        self,
        cmd: Union[str, Path],
        args: Sequence[str],
        options: RunOptions,
        cwd: Optional[Path] = None,
    ) -> None:
        """Run a backend process, reporting a nonzero exit as RunnerExecutionError."""
        try:
            run_process(
                cmd,
                args,
                cwd=options.cwd or cwd,
                env=options.env or None,
                use_shell_on_windows=str(cmd).endswith(".bat"),
            )
        except SubprocessExitError as e:
            raise RunnerExecutionError(self.name, e.exit_code) from e


RunnerFn = Callable[[Project, ConfigurationRecord, Target, RunOptions], None]


class RunnerDispatch:
    """
    Name-keyed table of runners.

    Registering a name again replaces the previous runner.
    """

    def __init__(self):
        self._runners: Dict[str, Union[Runner, RunnerFn]] = {}

    def register(self, name: str, runner: Union[Runner, RunnerFn]) -> None:
        self._runners[name] = runner

    def has(self, name: str) -> bool:
        return name in self._runners

    def names(self) -> List[str]:
        return sorted(self._runners)

    def get(self, name: str) -> Union[Runner, RunnerFn]:
        """
        Get a runner by name.

        Raises:
            UnknownRunnerError: If name was never registered
        """
        if name not in self._runners:
            raise UnknownRunnerError(name)
        return self._runners[name]

    def run(
        self,
        name: str,
        project: Project,
        config: ConfigurationRecord,
        target: Target,
        options: Optional[RunOptions] = None,
    ) -> None:
        """
        Run a target with the named runner.

        Raises:
            UnknownRunnerError: If name was never registered (nothing is spawned)
            UsageError: If the target is not an executable
            RunnerExecutionError: If the backend process exits nonzero
        """
        runner = self.get(name)
        if target.kind != EXECUTABLE:
            raise UsageError(f"target '{target.name}' is not an executable")
        logger.debug(f"Running {target.name} ({config.name}) with runner '{name}'")
        fn = runner.run if isinstance(runner, Runner) else runner
        fn(project, config, target, options or RunOptions())


__all__ = [
    "EXECUTABLE",
    "Target",
    "RunOptions",
    "Runner",
    "RunnerFn",
    "RunnerDispatch",
]
