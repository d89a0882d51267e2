"""
Interactive yes/no confirmation.
"""

import logging
from typing import Callable

logger = logging.getLogger(__name__)

# (question, default) -> answer
ConfirmFn = Callable[[str, bool], bool]


def ask(question: str, default: bool = False) -> bool:
    """
    Ask a yes/no question on the terminal.

    An empty answer selects the default. A closed stdin (EOF) counts as the
    default as well, so non-interactive runs never hang.

    Args:
        question: Question text
        default: Answer used for empty input

    Returns:
        True for yes, False for no
    """
    suffix = "[Y/n]" if default else "[y/N]"
    try:
        response = input(f"{question} {suffix} ").strip().lower()
    except EOFError:
        logger.debug("No input available, using default answer")
        return default
    if not response:
        return default
    return response in ("y", "yes")


def always_yes(question: str, default: bool = False) -> bool:
    """Confirmation function used for --yes."""
    logger.debug(f"{question} yes (--yes)")
    return True


__all__ = ["ConfirmFn", "ask", "always_yes"]
