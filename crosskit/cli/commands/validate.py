"""
Validate command implementation.
"""

import logging

from crosskit.cli.utils import FAIL_MARK, OK_MARK, safe_print
from crosskit.plugins import Host

logger = logging.getLogger(__name__)


def run(args, host: Host) -> int:
    """
    Check whether a configuration is usable and print the hints if not.

    Returns:
        0 if the configuration is valid, 1 otherwise
    """
    result = host.validate(args.config_name)
    if result.valid:
        safe_print(f"{OK_MARK} {args.config_name}: valid")
        return 0

    safe_print(f"{FAIL_MARK} {args.config_name}: not usable")
    for hint in result.hints:
        safe_print(f"   💡 {hint}")
    return 1
