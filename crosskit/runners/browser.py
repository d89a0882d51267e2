"""
Browser-hosted runner.

Serves a configuration's output directory over HTTP on localhost and opens
the artifact's page in a web browser. Serving is a foreground, blocking
call: it ends when the process is interrupted (Ctrl+C).
"""

import functools
import http.server
import logging
import webbrowser
from pathlib import Path
from typing import Optional

from crosskit.config.record import ConfigurationRecord
from crosskit.core.exceptions import MissingToolError
from crosskit.core.project import Project
from crosskit.runners.base import RunOptions, Runner, Target

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8080


class _StaticFileHandler(http.server.SimpleHTTPRequestHandler):
    """Static file handler that disables caching and allows cross-origin requests."""

    def end_headers(self):
        self.send_header("Cache-Control", "no-cache, no-store, must-revalidate")
        self.send_header("Access-Control-Allow-Origin", "*")
        super().end_headers()

    def log_message(self, format, *args):
        logger.debug(f"{self.address_string()} {format % args}")


def make_server(root: Path, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> http.server.ThreadingHTTPServer:
    """
    Create (bind) a static file server rooted at a directory.

    Args:
        root: Directory to serve
        host: Interface to bind
        port: Port to bind

    Returns:
        Bound server, not yet serving
    """
    handler = functools.partial(_StaticFileHandler, directory=str(root))
    return http.server.ThreadingHTTPServer((host, port), handler)


def open_browser(url: str, browser: Optional[str] = None) -> None:
    """
    Open a URL in the default browser, or in a specific one.

    Raises:
        MissingToolError: If the requested browser is not available
    """
    try:
        controller = webbrowser.get(browser) if browser else webbrowser.get()
    except webbrowser.Error as e:
        raise MissingToolError(browser or "web browser", "required to open the page") from e
    logger.info(f"opening {url}")
    controller.open(url)


class BrowserRunner(Runner):
    """
    Serve the output directory and open '<target><suffix>' in a browser.

    Args:
        name: Runner name configurations refer to
        suffix: Page suffix appended to the target name
        host: Interface the server binds and the URL names
        port: Default port, overridden by RunOptions.port
    """

    def __init__(
        self,
        name: str = "emscripten",
        suffix: str = ".html",
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
    ):
        self.name = name
        self.suffix = suffix
        self.host = host
        self.port = port

    def url(self, target: Target, port: int) -> str:
        return f"http://{self.host}:{port}/{target.name}{self.suffix}"

    def run(
        self,
        project: Project,
        config: ConfigurationRecord,
        target: Target,
        options: RunOptions,
    ) -> None:
        if target.artifact is not None:
            root = Path(target.artifact).parent
        else:
            root = project.dist_dir(config.name)
        port = options.port or self.port

        server = make_server(root, self.host, port)
        try:
            open_browser(self.url(target, port), options.browser)
            logger.info(f"serving {root} on http://{self.host}:{port} (Ctrl+C to stop)")
            server.serve_forever()
        finally:
            server.server_close()


__all__ = ["BrowserRunner", "make_server", "open_browser", "DEFAULT_PORT"]
