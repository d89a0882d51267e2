"""
Shared utilities for CLI commands.

Console output helpers used by the built-in commands so that they render
consistently, including on Windows consoles that cannot encode the status
symbols.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

OK_MARK = "✅"
FAIL_MARK = "❌"
WARN_MARK = "⚠️"

_ASCII_FALLBACKS = {
    OK_MARK: "[OK]",
    FAIL_MARK: "[ERROR]",
    WARN_MARK: "WARNING:",
    "💡": "Hint:",
}


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def safe_print(message: str, file=None):
    """
    Print message with safe encoding handling for Windows console.

    Falls back to ASCII markers if the status symbols can't be encoded.

    Args:
        message: Message to print
        file: Output file (default: stdout)
    """
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        for symbol, fallback in _ASCII_FALLBACKS.items():
            message = message.replace(symbol, fallback)
        print(message, file=file)


def format_table(rows: Sequence[Sequence[str]], indent: int = 2) -> List[str]:
    """
    Align rows of cells into columns.

    Args:
        rows: Rows of cell strings; all rows should have the same length
        indent: Leading spaces of every line

    Returns:
        Formatted lines (empty list for no rows)

    Example:
        >>> format_table([["wasi-make-debug", "wasi"], ["ios-xcode-debug", "ios"]])
        ['  wasi-make-debug  wasi', '  ios-xcode-debug  ios']
    """
    if not rows:
        return []
    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    lines = []
    for row in rows:
        cells = [cell.ljust(width) for cell, width in zip(row, widths)]
        lines.append((" " * indent + "  ".join(cells)).rstrip())
    return lines


# ============================================================================
# Project Location
# ============================================================================


def resolve_project_root(path: Optional[Path] = None) -> Path:
    """
    Resolve the project root directory.

    Args:
        path: Explicit project root (default: current directory)

    Returns:
        Absolute project root
    """
    return Path(path).resolve() if path else Path.cwd().resolve()


__all__ = [
    "OK_MARK",
    "FAIL_MARK",
    "WARN_MARK",
    "safe_print",
    "format_table",
    "resolve_project_root",
]
