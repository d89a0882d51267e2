"""
Run command implementation.

Runs a built target with the runner of its configuration:

    crosskit run wasi-ninja-debug hello -- --flag value
"""

import logging

from crosskit.plugins import Host
from crosskit.runners import RunOptions, Target

logger = logging.getLogger(__name__)


def run(args, host: Host) -> int:
    """
    Run the run command.

    Args:
        args: Parsed command-line arguments
        host: Configured plugin host

    Returns:
        Exit code (0 for success; runner failures raise)
    """
    target = Target(args.target, artifact=args.artifact)
    options = RunOptions(
        args=tuple(args.target_args or ()),
        browser=args.browser,
        port=args.port,
    )
    host.run(args.config_name, target, options)
    return 0
