# topmark:header:start
#
#   project      : DwtGuard
#   file         : diff.py
#   file_relpath : src/dwtguard/utils/diff.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Unified diff generation and colorized rendering for dry-run previews."""

from __future__ import annotations

import difflib
from typing import TYPE_CHECKING

from yachalk import chalk

from dwtguard.config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dwtguard.config.logging import DwtGuardLogger

logger: DwtGuardLogger = get_logger(__name__)


def make_patch(current: str, updated: str, label: str) -> str:
    """Return a unified diff between ``current`` and ``updated``.

    Args:
        current (str): Text on disk.
        updated (str): Text that would be written.
        label (str): File label used in the ``---``/``+++`` header lines.

    Returns:
        str: The diff joined exactly as produced by difflib; empty if identical.
    """
    patch_lines: list[str] = list(
        difflib.unified_diff(
            current.splitlines(keepends=True),
            updated.splitlines(keepends=True),
            fromfile=f"{label} (current)",
            tofile=f"{label} (updated)",
            n=3,
        )
    )
    logger.trace("Patch for %s: %d line(s)", label, len(patch_lines))
    return "".join(patch_lines)


def render_patch(patch: Sequence[str] | str, show_line_numbers: bool = False) -> str:
    """Render a colorized preview of a unified diff.

    Args:
        patch (Sequence[str] | str): A unified diff as lines or as one string.
        show_line_numbers (bool): Whether to prefix output with line numbers.

    Returns:
        str: The formatted, colorized diff preview.
    """
    if isinstance(patch, str):
        lines: list[str] = patch.splitlines(keepends=False)
    else:
        lines = [line.rstrip("\n") for line in patch]

    def process_line(line: str) -> str:
        content: str = line.replace("\r", "\\r")
        if not line:
            return content
        match line[0]:
            case "-":
                return chalk.bold.red(content)
            case "+":
                return chalk.bold.green(content)
            case "@":
                return chalk.cyan(content)
            case _:
                return chalk.bold.white(content)

    if show_line_numbers:
        return "".join(f"{i:04d}|{process_line(line)}\n" for i, line in enumerate(lines, 1))
    return "".join(f"{process_line(line)}\n" for line in lines)
