"""
Configs command implementation.

Lists the registered build configurations and whether each is usable.
"""

import logging

from crosskit.cli.utils import FAIL_MARK, OK_MARK, format_table, safe_print
from crosskit.plugins import Host

logger = logging.getLogger(__name__)


def run(args, host: Host) -> int:
    """
    Run the configs command.

    Args:
        args: Parsed command-line arguments
        host: Configured plugin host

    Returns:
        Exit code (0 for success)
    """
    rows = []
    for record in host.configs.records(include_ignored=args.all):
        result = host.validate(record.name)
        rows.append(
            [
                OK_MARK if result.valid else FAIL_MARK,
                record.name,
                record.platform.value,
                record.generator.value if record.generator else "-",
                record.build_mode.value,
                record.runner or "-",
                "(abstract)" if record.ignore else "",
            ]
        )

    if not rows:
        print("No configs registered")
        return 0

    for line in format_table(rows):
        safe_print(line)
    return 0
