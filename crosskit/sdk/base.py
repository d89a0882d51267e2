"""
SDK lifecycle management.

An SDK lives in exactly one directory under the project's SDK root, named the
same regardless of version. The presence of that directory is the only
record of the SDK being installed: there is no registry file to get out of
sync with the disk.

Lifecycle:
    Absent -> Installing -> Installed -> Uninstalling -> Absent
    Installed -> Updating -> Installed     (repository-based SDKs only)

Installing and updating are not resumable. An interrupted install leaves a
partial directory behind which is cleared with 'uninstall'.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from crosskit.core.exceptions import UsageError
from crosskit.core.filesystem import dir_exists, safe_rmtree
from crosskit.core.locking import sdk_lock
from crosskit.core.platform import HostPlatform, detect_host
from crosskit.core.project import Project
from crosskit.core.prompt import ConfirmFn, ask
from crosskit.tools import ToolRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SdkDescriptor:
    """
    Static description of an installable SDK.

    Attributes:
        name: Normalized directory name under the SDK root (e.g. 'wasisdk')
        title: Human readable name used in messages (e.g. 'WASI SDK')
        command: CLI command that manages the SDK (e.g. 'wasisdk')
        version: Pinned version for archive-based SDKs, default version otherwise
        archive_prefix: Template of the archive's top-level directory name,
            before the host qualifier (e.g. 'wasi-sdk-{version}.0')
        url_template: Download URL template for archive-based SDKs, with
            {version} and {archive} fields
        repository_url: Git URL for repository-based SDKs
    """

    name: str
    title: str
    command: str
    version: str = ""
    archive_prefix: Optional[str] = None
    url_template: Optional[str] = None
    repository_url: Optional[str] = None

    def install_dir(self, project: Project) -> Path:
        """Normalized installation directory under the project's SDK root."""
        return project.sdk_dir / self.name

    def is_installed(self, project: Project) -> bool:
        return dir_exists(self.install_dir(project))


class SdkLifecycleManager(ABC):
    """
    Install, update and uninstall one SDK under a project's SDK root.

    Subclasses implement install(); update() is only supported by SDKs that
    are kept as a version-control clone.

    Args:
        descriptor: SDK description
        project: Project providing the SDK root
        tools: Tool registry used to check for host executables
        confirm: Yes/no prompt used before destructive operations
        host: Host platform (detected if None)
    """

    def __init__(
        self,
        descriptor: SdkDescriptor,
        project: Project,
        tools: Optional[ToolRegistry] = None,
        confirm: Optional[ConfirmFn] = None,
        host: Optional[HostPlatform] = None,
    ):
        self.descriptor = descriptor
        self.project = project
        self.tools = tools or ToolRegistry()
        self.confirm = confirm or ask
        self.host = host or detect_host()

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def sdk_root(self) -> Path:
        """Shared SDK root directory."""
        return self.project.sdk_dir

    @property
    def sdk_dir(self) -> Path:
        """Normalized installation directory of this SDK."""
        return self.descriptor.install_dir(self.project)

    def hint(self, subcommand: str) -> str:
        """Format the command that fixes a precondition."""
        return f"run 'crosskit {self.descriptor.command} {subcommand}'"

    def is_installed(self) -> bool:
        """Return True if the SDK directory exists."""
        return dir_exists(self.sdk_dir)

    @abstractmethod
    def install(self, version: Optional[str] = None) -> Path:
        """
        Install the SDK.

        Args:
            version: Version to install (SDK specific default if None)

        Returns:
            Path to the installed SDK directory

        Raises:
            AlreadyInstalledError: If the SDK is already installed
        """
        pass

    def update(self, assume_yes: bool = False) -> bool:
        """
        Sync an installed SDK with its upstream.

        Raises:
            UsageError: If the SDK does not support updating in place
        """
        raise UsageError(
            f"{self.descriptor.title} cannot be updated in place",
            hint=f"{self.hint('uninstall')} and then '{self.descriptor.command} install'",
        )

    def uninstall(self, assume_yes: bool = False) -> bool:
        """
        Delete the SDK directory after confirmation.

        Not being installed is not an error: a warning is logged and nothing
        happens, so running uninstall twice is harmless.

        Args:
            assume_yes: Skip the confirmation prompt

        Returns:
            True if the directory was deleted
        """
        if not self.is_installed():
            logger.warning(f"{self.descriptor.title} not installed, nothing to do.")
            return False

        if not (assume_yes or self.confirm(f"Delete directory {self.sdk_dir}?", False)):
            logger.info("nothing to do.")
            return False

        with sdk_lock(self.sdk_root, self.name):
            logger.info(f"deleting {self.sdk_dir}...")
            safe_rmtree(self.sdk_dir, require_prefix=self.sdk_root)
        logger.info("done.")
        return True

    def list_versions(self) -> None:
        """Report the SDK's version and installation state."""
        state = f"installed in {self.sdk_dir}" if self.is_installed() else "not installed"
        version = f" {self.descriptor.version}" if self.descriptor.version else ""
        logger.info(f"{self.descriptor.title}{version}: {state}")


__all__ = ["SdkDescriptor", "SdkLifecycleManager"]
