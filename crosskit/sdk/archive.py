"""
Archive-based SDK installation.

The SDK is published as one prebuilt archive per host. Installing downloads
the archive into the SDK root, unpacks it with the host's tar (which keeps
file permissions and symlinks intact), renames the version-qualified top
level directory to the SDK's stable name and deletes the archive.

Example:
    descriptor = SdkDescriptor(
        name="wasisdk",
        title="WASI SDK",
        command="wasisdk",
        version="29",
        archive_prefix="wasi-sdk-{version}.0",
        url_template=".../download/wasi-sdk-{version}/{archive}.tar.gz",
    )
    ArchiveSdk(descriptor, project).install()
"""

import logging
from pathlib import Path
from typing import Optional

from crosskit.core.download import download_file, log_progress
from crosskit.core.exceptions import (
    AlreadyInstalledError,
    ExtractionError,
    SubprocessExitError,
)
from crosskit.core.locking import sdk_lock
from crosskit.core.process import run_process
from crosskit.sdk.base import SdkLifecycleManager
from crosskit.tools import command_probe

logger = logging.getLogger(__name__)

TAR_PROBE = command_probe("tar", "required for unpacking downloaded SDK archives")


class ArchiveSdk(SdkLifecycleManager):
    """SDK installed from a prebuilt, host-specific release archive."""

    archive_tool = "tar"
    archive_suffix = ".tgz"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if not self.tools.has(self.archive_tool):
            self.tools.register(TAR_PROBE)

    def archive_name(self, version: str) -> str:
        """
        Name of the top-level directory inside the archive.

        Example:
            'wasi-sdk-29.0-x86_64-linux'
        """
        prefix = (self.descriptor.archive_prefix or self.descriptor.name).format(
            version=version
        )
        return self.host.qualified_name(prefix)

    def download_url(self, version: str) -> str:
        """Resolve the download URL of a version for this host."""
        if not self.descriptor.url_template:
            raise ValueError(f"{self.descriptor.title} has no download URL template")
        return self.descriptor.url_template.format(
            version=version, archive=self.archive_name(version)
        )

    def install(self, version: Optional[str] = None) -> Path:
        """
        Download and unpack the SDK.

        Args:
            version: Version to install (default: the descriptor's pinned version)

        Returns:
            Path to the installed SDK directory

        Raises:
            AlreadyInstalledError: If the SDK directory exists
            MissingToolError: If tar is not available
            NetworkError: If the download fails
            ExtractionError: If unpacking fails or yields an unexpected layout
        """
        version = version or self.descriptor.version
        if self.is_installed():
            raise AlreadyInstalledError(
                self.descriptor.title, hint=f"{self.hint('uninstall')} first"
            )
        self.tools.require(self.archive_tool)

        with sdk_lock(self.sdk_root, self.name):
            extracted_name = self.archive_name(version)
            filename = extracted_name + self.archive_suffix

            logger.info(f"downloading {self.descriptor.title} {version}")
            archive = download_file(
                self.download_url(version),
                self.sdk_root,
                filename,
                progress_callback=log_progress,
            )
            logger.info("ok")

            logger.info(f"uncompressing {self.descriptor.title}")
            self._extract(filename)
            extracted = self.sdk_root / extracted_name
            if not extracted.is_dir():
                raise ExtractionError(
                    f"{filename} did not contain the expected directory '{extracted_name}'"
                )
            extracted.rename(self.sdk_dir)
            archive.unlink()
            logger.info("ok")

        return self.sdk_dir

    def _extract(self, filename: str) -> None:
        try:
            run_process(self.archive_tool, ["xf", filename], cwd=self.sdk_root)
        except SubprocessExitError as e:
            raise ExtractionError(
                f"Failed to extract {filename}", exit_code=e.exit_code
            ) from e


__all__ = ["ArchiveSdk", "TAR_PROBE"]
