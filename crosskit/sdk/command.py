"""
SDK management subcommand.

Each SDK plugin exposes one top-level command (e.g. 'crosskit wasisdk')
whose first argument selects a lifecycle operation:

    crosskit wasisdk install [version]
    crosskit wasisdk update
    crosskit wasisdk uninstall
    crosskit wasisdk list
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence, Type

from crosskit.core.exceptions import UsageError
from crosskit.core.platform import HostPlatform
from crosskit.core.project import Project
from crosskit.core.prompt import ConfirmFn
from crosskit.sdk.base import SdkDescriptor, SdkLifecycleManager
from crosskit.tools import ToolRegistry

logger = logging.getLogger(__name__)


class Command(ABC):
    """
    Base class of plugin-provided top-level commands.

    Attributes:
        name: Command token on the command line
        summary: One-line description shown by 'crosskit help'
    """

    name: str = ""
    summary: str = ""

    def help(self) -> List[str]:
        """Usage lines shown by 'crosskit help <name>'."""
        return [f"crosskit {self.name}"]

    @abstractmethod
    def run(self, project: Project, args: Sequence[str]) -> None:
        pass


class SdkCommand(Command):
    """
    Route 'install | update | uninstall | list' to an SDK lifecycle manager.

    Args:
        descriptor: SDK description
        manager_class: Lifecycle manager implementation (ArchiveSdk, RepositorySdk)
        tools: Tool registry shared with the host
        confirm: Yes/no prompt used by update and uninstall
        host: Host platform (detected if None)
    """

    def __init__(
        self,
        descriptor: SdkDescriptor,
        manager_class: Type[SdkLifecycleManager],
        tools: Optional[ToolRegistry] = None,
        confirm: Optional[ConfirmFn] = None,
        host: Optional[HostPlatform] = None,
    ):
        self.descriptor = descriptor
        self.manager_class = manager_class
        self.tools = tools
        self.confirm = confirm
        self.host = host
        self.name = descriptor.command
        self.summary = f"Install and manage the {descriptor.title}"

    def manager(self, project: Project) -> SdkLifecycleManager:
        return self.manager_class(
            self.descriptor,
            project,
            tools=self.tools,
            confirm=self.confirm,
            host=self.host,
        )

    def help(self) -> List[str]:
        version = self.descriptor.version or "latest"
        return [
            f"crosskit {self.name} install [version]",
            f"    install {self.descriptor.title} (default version: {version})",
            f"crosskit {self.name} update",
            f"    sync {self.descriptor.title} with upstream (discards local changes)",
            f"crosskit {self.name} uninstall",
            f"    uninstall {self.descriptor.title}",
            f"crosskit {self.name} list",
            f"    show {self.descriptor.title} versions and install state",
        ]

    def run(self, project: Project, args: Sequence[str]) -> None:
        """
        Run a lifecycle subcommand.

        Args:
            project: Project whose SDK root is managed
            args: Subcommand followed by its arguments

        Raises:
            UsageError: If the subcommand is missing or unknown, or has
                unexpected arguments
        """
        usage_hint = f"run 'crosskit help {self.name}'"
        if not args:
            raise UsageError(f"'{self.name}' expects a subcommand", usage_hint)

        subcommand, rest = args[0], list(args[1:])
        handlers = {
            "install": self._install,
            "update": self._no_args(lambda m: m.update()),
            "uninstall": self._no_args(lambda m: m.uninstall()),
            "list": self._no_args(lambda m: m.list_versions()),
        }
        handler = handlers.get(subcommand)
        if handler is None:
            raise UsageError(f"unknown subcommand '{self.name} {subcommand}'", usage_hint)
        handler(self.manager(project), rest)

    def _install(self, manager: SdkLifecycleManager, rest: List[str]) -> None:
        if len(rest) > 1:
            raise UsageError(
                f"'{self.name} install' takes at most one version argument",
                f"run 'crosskit help {self.name}'",
            )
        path = manager.install(rest[0] if rest else None)
        logger.info(f"{self.descriptor.title} installed to {path}")

    def _no_args(self, operation: Callable[[SdkLifecycleManager], object]):
        def handler(manager: SdkLifecycleManager, rest: List[str]) -> None:
            if rest:
                raise UsageError(
                    f"unexpected argument(s): {' '.join(rest)}",
                    f"run 'crosskit help {self.name}'",
                )
            operation(manager)

        return handler


__all__ = ["Command", "SdkCommand"]
