"""
Repository-based SDK installation.

The SDK is a git repository carrying its own installer (emsdk is the
canonical example). Installing clones the repository into the SDK root and
runs the embedded installer twice: once to install the requested version and
once to activate it inside the SDK directory. Updating forces the clone to
match the remote.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence

from crosskit.core.exceptions import AlreadyInstalledError, NotInstalledError
from crosskit.core.locking import sdk_lock
from crosskit.core.process import run_process
from crosskit.core.vcs import git_clone, git_update
from crosskit.sdk.base import SdkLifecycleManager
from crosskit.tools import command_probe

logger = logging.getLogger(__name__)

GIT_PROBE = command_probe("git", "required for cloning SDK repositories")

DEFAULT_VERSION = "latest"


class RepositorySdk(SdkLifecycleManager):
    """
    SDK kept as a git clone with an embedded install/activate launcher.

    Class attributes describe the embedded launcher and may be overridden by
    subclasses for SDKs with a different command line.
    """

    vcs_tool = "git"
    launcher = "emsdk"
    launcher_windows_suffix = ".bat"
    install_args: Sequence[str] = ("install", "--shallow", "--disable-assertions")
    activate_args: Sequence[str] = ("activate", "--embedded")
    list_args: Sequence[str] = ("list",)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if not self.tools.has(self.vcs_tool):
            self.tools.register(GIT_PROBE)
        if not self.descriptor.repository_url:
            raise ValueError(f"{self.descriptor.title} has no repository URL")

    @property
    def repository_url(self) -> str:
        return self.descriptor.repository_url

    def launcher_path(self) -> Path:
        """Path of the SDK's embedded launcher."""
        return self.sdk_dir / self.host.executable_name(
            self.launcher, self.launcher_windows_suffix
        )

    def install(self, version: Optional[str] = None) -> Path:
        """
        Clone the SDK and install plus activate a version.

        Args:
            version: Free-form version token understood by the launcher
                (default: 'latest')

        Returns:
            Path to the SDK directory

        Raises:
            AlreadyInstalledError: If the SDK directory exists
            MissingToolError: If git is not available
            SubprocessExitError: If git or the launcher fails
        """
        version = version or self.descriptor.version or DEFAULT_VERSION
        if self.is_installed():
            raise AlreadyInstalledError(
                self.descriptor.title, hint=f"{self.hint('uninstall')} first"
            )
        self.tools.require(self.vcs_tool)

        with sdk_lock(self.sdk_root, self.name):
            self.project.ensure_sdk_dir()
            logger.info(f"cloning {self.launcher} to {self.sdk_dir}")
            git_clone(self.repository_url, self.sdk_root, name=self.name)
            logger.info(f"installing {self.descriptor.title} version '{version}'")
            self._run_launcher([*self.install_args, version])
            logger.info(f"activating {self.descriptor.title} version '{version}'")
            self._run_launcher([*self.activate_args, version])

        return self.sdk_dir

    def update(self, assume_yes: bool = False) -> bool:
        """
        Force the local clone to match the remote.

        Local modifications to the clone are discarded, so the user is asked
        first unless assume_yes is set.

        Args:
            assume_yes: Skip the confirmation prompt

        Returns:
            True if the clone was synced

        Raises:
            NotInstalledError: If the SDK is not installed
            SubprocessExitError: If git fails
        """
        if not self.is_installed():
            raise NotInstalledError(self.descriptor.title, hint=self.hint("install"))

        question = (
            f"Discard local changes in {self.sdk_dir} and sync with {self.repository_url}?"
        )
        if not (assume_yes or self.confirm(question, False)):
            logger.info("nothing to do.")
            return False

        with sdk_lock(self.sdk_root, self.name):
            logger.info(f"updating {self.descriptor.title} in {self.sdk_dir}")
            git_update(self.sdk_dir, self.repository_url, force=True)
        logger.info("done.")
        return True

    def list_versions(self) -> None:
        """
        Show the versions known to the SDK's launcher.

        Raises:
            NotInstalledError: If the SDK is not installed
        """
        if not self.is_installed():
            raise NotInstalledError(self.descriptor.title, hint=self.hint("install"))
        self._run_launcher(self.list_args)

    def _run_launcher(self, args: Sequence[str]) -> int:
        cmd = self.launcher_path()
        if not cmd.is_file():
            raise NotInstalledError(
                f"{self.launcher} tool at {cmd}", hint=self.hint("install")
            )
        return run_process(cmd, args, cwd=self.sdk_dir, use_shell_on_windows=True)


__all__ = ["RepositorySdk", "GIT_PROBE", "DEFAULT_VERSION"]
