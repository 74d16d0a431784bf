# topmark:header:start
#
#   project      : DwtGuard
#   file         : text.py
#   file_relpath : src/dwtguard/utils/text.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Plain-text helpers."""

from __future__ import annotations


def measure_indent(line: str, tab_size: int) -> int:
    """Return the leading whitespace of ``line`` in space equivalents."""
    indent: int = 0
    for ch in line:
        if ch == " ":
            indent += 1
        elif ch == "\t":
            indent += tab_size
        else:
            break
    return indent


def _strip_leading(line: str, amount: int, tab_size: int) -> str:
    removed: int = 0
    i: int = 0
    while i < len(line) and removed < amount:
        ch: str = line[i]
        if ch == " ":
            removed += 1
        elif ch == "\t":
            if removed + tab_size > amount:
                # Tab straddles the cut: keep the overshoot as spaces
                return " " * (removed + tab_size - amount) + line[i + 1 :]
            removed += tab_size
        else:
            break
        i += 1
    return line[i:]


def dedent_block(text: str, tab_size: int = 4) -> str:
    """Remove the common leading indentation of all non-blank lines.

    Unlike `textwrap.dedent`, mixed tabs and spaces are compared by width (a tab
    counts as ``tab_size`` spaces) rather than by exact prefix.

    Args:
        text (str): Block of text, lines separated by ``\\n``.
        tab_size (int): Width of a tab in spaces.

    Returns:
        str: The dedented text. Blank lines are left as they are.
    """
    lines: list[str] = text.split("\n")
    indents: list[int] = [measure_indent(line, tab_size) for line in lines if line.strip()]
    if not indents or min(indents) == 0:
        return text
    common: int = min(indents)
    return "\n".join(
        line if not line.strip() else _strip_leading(line, common, tab_size) for line in lines
    )
