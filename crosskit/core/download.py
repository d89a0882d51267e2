"""
Network download for crosskit.

SDK archives are fetched with a single streaming HTTP GET. There is no retry
and no resume: a failed download aborts the install, and the partially
written file stays where it is until the user uninstalls and retries.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from crosskit.core.exceptions import NetworkError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int  # 0 if the server sent no content-length
    speed_bps: float

    @property
    def percentage(self) -> float:
        if self.total_bytes <= 0:
            return 0.0
        return self.bytes_downloaded / self.total_bytes * 100

    def __str__(self) -> str:
        return format_progress(self)


def download_file(
    url: str,
    dest_dir: Path,
    filename: str,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = 30,
) -> Path:
    """
    Download a URL into dest_dir/filename.

    Args:
        url: URL to download from
        dest_dir: Directory to place the file in (created if absent)
        filename: Name of the downloaded file
        progress_callback: Optional callback for progress updates
        timeout: Connect/read timeout in seconds

    Returns:
        Path to the downloaded file

    Raises:
        NetworkError: If the request fails or returns an error status
        ValueError: If url or filename is empty

    Example:
        >>> download_file(
        ...     "https://example.com/sdk.tar.gz", Path("sdks"), "sdk.tgz"
        ... )
        PosixPath('sdks/sdk.tgz')
    """
    if not url:
        raise ValueError("URL cannot be empty")
    if not filename:
        raise ValueError("Filename cannot be empty")

    dest_dir = Path(dest_dir)
    dest_dir.mkdir(parents=True, exist_ok=True)
    destination = dest_dir / filename

    logger.info(f"Downloading {url}")
    try:
        with requests.get(
            url, stream=True, timeout=timeout, allow_redirects=True
        ) as response:
            response.raise_for_status()
            _stream_to_file(response, destination, progress_callback)
    except RequestException as e:
        raise NetworkError(f"Download of {url} failed: {e}") from e

    logger.debug(f"Download complete: {destination}")
    return destination


def _stream_to_file(
    response: requests.Response,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]],
) -> None:
    total = int(response.headers.get("content-length") or 0)
    downloaded = 0
    start_time = time.time()
    last_report = start_time

    with open(destination, "wb") as f:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if not chunk:
                continue
            f.write(chunk)
            downloaded += len(chunk)

            # Report at most twice per second
            now = time.time()
            if progress_callback and (now - last_report >= 0.5 or downloaded == total):
                elapsed = now - start_time
                speed = downloaded / elapsed if elapsed > 0 else 0.0
                progress_callback(DownloadProgress(downloaded, total, speed))
                last_report = now


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> format_progress(DownloadProgress(52428800, 104857600, 1048576))
        '50.0/100.0 MB (50.0%) at 1.0 MB/s'
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024
    if progress.total_bytes > 0:
        mb_total = progress.total_bytes / 1024 / 1024
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s"
        )
    return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"


def log_progress(progress: DownloadProgress) -> None:
    """Progress callback that reports through the module logger."""
    logger.debug(format_progress(progress))


__all__ = [
    "DownloadProgress",
    "download_file",
    "format_progress",
    "log_progress",
]
