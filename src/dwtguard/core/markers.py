# topmark:header:start
#
#   project      : DwtGuard
#   file         : markers.py
#   file_relpath : src/dwtguard/core/markers.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Marker grammar and the generic begin/end pairing primitive.

This module is the single source of truth for the comment-tag vocabulary used by
Dreamweaver templates (``.dwt``), instance pages and library items. Both the
analytical side (`dwtguard.parser`) and the generative side (`dwtguard.template`)
import their regular expressions from here.

Scanning is stateless: every call to `scan_markers` produces a fresh, ordered
list of matches from ``Pattern.finditer``; no compiled pattern carries match state
between calls, so the helpers are safe to use from several threads at once.

Pairing rules (shared by every marker family):
    - Begins and ends are each ordered by start offset.
    - Walking the begins in order, any end whose start lies before the current
      begin's end is skipped (an end cannot close a begin that follows it).
    - The next unconsumed end closes the begin.
    - Once the ends run out, pairing stops; trailing begins are dropped silently.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from dwtguard.core.ranges import TextRange

if TYPE_CHECKING:
    from collections.abc import Sequence

# --- Editable regions ------------------------------------------------------

TEMPLATE_BEGIN_EDITABLE: Final[re.Pattern[str]] = re.compile(
    r'<!--\s*TemplateBeginEditable\s+name="([^"]+)"\s*-->'
)
TEMPLATE_END_EDITABLE: Final[re.Pattern[str]] = re.compile(r"<!--\s*TemplateEndEditable\s*-->")

INSTANCE_BEGIN_EDITABLE: Final[re.Pattern[str]] = re.compile(
    r'<!--\s*InstanceBeginEditable\s+name="([^"]+)"\s*-->'
)
INSTANCE_END_EDITABLE: Final[re.Pattern[str]] = re.compile(r"<!--\s*InstanceEndEditable\s*-->")

# --- Instance declaration and parameters -----------------------------------

INSTANCE_BEGIN: Final[re.Pattern[str]] = re.compile(
    r'<!--\s*InstanceBegin\s+template="([^"]+)"(?:\s+codeOutsideHTMLIsLocked="([^"]+)")?\s*-->'
)
# Prefix form, used for nested-template detection and head-of-file sniffing
INSTANCE_BEGIN_PREFIX: Final[re.Pattern[str]] = re.compile(
    r'<!--\s*InstanceBegin\s+template="([^"]+)"'
)
INSTANCE_END: Final[re.Pattern[str]] = re.compile(r"<!--\s*InstanceEnd\s*-->")

INSTANCE_PARAM: Final[re.Pattern[str]] = re.compile(
    r'<!--\s*InstanceParam\s+name="([^"]+)"\s+type="([^"]+)"\s+value="([^"]*?)"\s*-->'
)
TEMPLATE_PARAM: Final[re.Pattern[str]] = re.compile(
    r'<!--\s*TemplateParam\s+name="([^"]+)"\s+type="([^"]+)"\s+value="([^"]*?)"\s*-->'
)
# Whole declaration line: leading indentation plus one trailing newline
TEMPLATE_PARAM_LINE: Final[re.Pattern[str]] = re.compile(
    r'[ \t]*<!--\s*TemplateParam\s+name="[^"]+"\s+type="[^"]+"\s+value="[^"]*?"\s*-->(?:\r?\n)?'
)
VALUE_ATTRIBUTE: Final[re.Pattern[str]] = re.compile(r'value="([^"]*?)"')

# --- Variables ---------------------------------------------------------------

TEMPLATE_VARIABLE: Final[re.Pattern[str]] = re.compile(r"@@\(([^)]+)\)@@")
DOCUMENT_ACCESSOR: Final[re.Pattern[str]] = re.compile(r"^_document\['([^']+)'\]$")

# --- Conditionals ------------------------------------------------------------

TEMPLATE_BEGIN_IF: Final[re.Pattern[str]] = re.compile(
    r'<!--\s*TemplateBeginIf\s+cond="([^"]+)"\s*-->'
)
TEMPLATE_END_IF: Final[re.Pattern[str]] = re.compile(r"<!--\s*TemplateEndIf\s*-->")

# --- Optional regions --------------------------------------------------------

TEMPLATE_BEGIN_OPTIONAL: Final[re.Pattern[str]] = re.compile(
    r'<!--\s*TemplateBeginOptional\s+name="([^"]+)"\s*-->'
)
TEMPLATE_END_OPTIONAL: Final[re.Pattern[str]] = re.compile(r"<!--\s*TemplateEndOptional\s*-->")

INSTANCE_BEGIN_OPTIONAL: Final[re.Pattern[str]] = re.compile(
    r'<!--\s*InstanceBeginOptional\s+name="([^"]+)"\s*-->'
)
INSTANCE_END_OPTIONAL: Final[re.Pattern[str]] = re.compile(r"<!--\s*InstanceEndOptional\s*-->")

# --- Repeat regions ----------------------------------------------------------

TEMPLATE_BEGIN_REPEAT: Final[re.Pattern[str]] = re.compile(
    r'<!--\s*TemplateBeginRepeat\s+name="([^"]+)"\s*-->'
)
TEMPLATE_END_REPEAT: Final[re.Pattern[str]] = re.compile(r"<!--\s*TemplateEndRepeat\s*-->")

INSTANCE_BEGIN_REPEAT: Final[re.Pattern[str]] = re.compile(
    r'<!--\s*InstanceBeginRepeat\s+name="([^"]+)"\s*-->'
)
INSTANCE_END_REPEAT: Final[re.Pattern[str]] = re.compile(r"<!--\s*InstanceEndRepeat\s*-->")

INSTANCE_BEGIN_REPEAT_ENTRY: Final[re.Pattern[str]] = re.compile(
    r"<!--\s*InstanceBeginRepeatEntry\s*-->"
)
INSTANCE_END_REPEAT_ENTRY: Final[re.Pattern[str]] = re.compile(
    r"<!--\s*InstanceEndRepeatEntry\s*-->"
)

# --- Library items -----------------------------------------------------------

BEGIN_LIBRARY_ITEM: Final[re.Pattern[str]] = re.compile(
    r'<!--\s*#BeginLibraryItem\s+"([^"]+)"\s*-->'
)
END_LIBRARY_ITEM: Final[re.Pattern[str]] = re.compile(r"<!--\s*#EndLibraryItem\s*-->")

# --- File type sniffing ------------------------------------------------------

INSTANCE_SNIFF: Final[re.Pattern[str]] = re.compile(r"<!--\s*InstanceBegin\s")
INSTANCE_EDITABLE_SNIFF: Final[re.Pattern[str]] = re.compile(r"<!--\s*InstanceBeginEditable\s")
TEMPLATE_EDITABLE_SNIFF: Final[re.Pattern[str]] = re.compile(r"<!--\s*TemplateBeginEditable\s")


@dataclass(frozen=True, slots=True)
class MarkerMatch:
    """A single marker occurrence with its captured attribute values.

    Attributes:
        start (int): Absolute offset of the ``<!--`` that opens the marker.
        end (int): Absolute offset just past the closing ``-->``.
        groups (tuple[str | None, ...]): Captured groups (name, path, condition, ...).
    """

    start: int
    end: int
    groups: tuple[str | None, ...] = ()

    @property
    def range(self) -> TextRange:
        """Range of the whole marker comment."""
        return TextRange(self.start, self.end)

    @property
    def value(self) -> str:
        """First captured group, or ``""`` for attribute-less markers."""
        if not self.groups or self.groups[0] is None:
            return ""
        return self.groups[0]


@dataclass(frozen=True, slots=True)
class MarkerPair:
    """A begin marker matched with the end marker that closes it."""

    begin: MarkerMatch
    end: MarkerMatch

    @property
    def begin_range(self) -> TextRange:
        """Range of the begin marker comment."""
        return self.begin.range

    @property
    def end_range(self) -> TextRange:
        """Range of the end marker comment."""
        return self.end.range

    @property
    def content_range(self) -> TextRange:
        """Text strictly between the two markers (exclusive of both)."""
        return TextRange(self.begin.end, self.end.start)

    @property
    def full_range(self) -> TextRange:
        """From the start of the begin marker to the end of the end marker."""
        return TextRange(self.begin.start, self.end.end)


@dataclass(frozen=True, slots=True)
class MarkerFamily:
    """Begin/end pattern couple describing one kind of paired marker."""

    name: str
    begin: re.Pattern[str]
    end: re.Pattern[str]


TEMPLATE_EDITABLE: Final[MarkerFamily] = MarkerFamily(
    "template-editable", TEMPLATE_BEGIN_EDITABLE, TEMPLATE_END_EDITABLE
)
INSTANCE_EDITABLE: Final[MarkerFamily] = MarkerFamily(
    "instance-editable", INSTANCE_BEGIN_EDITABLE, INSTANCE_END_EDITABLE
)
CONDITIONAL: Final[MarkerFamily] = MarkerFamily("conditional", TEMPLATE_BEGIN_IF, TEMPLATE_END_IF)
TEMPLATE_OPTIONAL: Final[MarkerFamily] = MarkerFamily(
    "template-optional", TEMPLATE_BEGIN_OPTIONAL, TEMPLATE_END_OPTIONAL
)
INSTANCE_OPTIONAL: Final[MarkerFamily] = MarkerFamily(
    "instance-optional", INSTANCE_BEGIN_OPTIONAL, INSTANCE_END_OPTIONAL
)
TEMPLATE_REPEAT: Final[MarkerFamily] = MarkerFamily(
    "template-repeat", TEMPLATE_BEGIN_REPEAT, TEMPLATE_END_REPEAT
)
INSTANCE_REPEAT: Final[MarkerFamily] = MarkerFamily(
    "instance-repeat", INSTANCE_BEGIN_REPEAT, INSTANCE_END_REPEAT
)
REPEAT_ENTRY: Final[MarkerFamily] = MarkerFamily(
    "repeat-entry", INSTANCE_BEGIN_REPEAT_ENTRY, INSTANCE_END_REPEAT_ENTRY
)
LIBRARY_ITEM: Final[MarkerFamily] = MarkerFamily(
    "library-item", BEGIN_LIBRARY_ITEM, END_LIBRARY_ITEM
)

ALL_FAMILIES: Final[tuple[MarkerFamily, ...]] = (
    TEMPLATE_EDITABLE,
    INSTANCE_EDITABLE,
    CONDITIONAL,
    TEMPLATE_OPTIONAL,
    INSTANCE_OPTIONAL,
    TEMPLATE_REPEAT,
    INSTANCE_REPEAT,
    REPEAT_ENTRY,
    LIBRARY_ITEM,
)


_CAPTURE_OPEN: Final[re.Pattern[str]] = re.compile(r"(?<!\\)\((?!\?)")


def block_pattern(family: MarkerFamily) -> re.Pattern[str]:
    """Return a pattern matching a whole ``begin … end`` block of ``family``.

    The begin marker's own groups come first; the block content is the last
    group. Content is matched lazily, so the first end marker closes the block.

    Args:
        family (MarkerFamily): The marker family.

    Returns:
        re.Pattern[str]: Compiled block pattern.
    """
    return re.compile(f"{family.begin.pattern}([\\s\\S]*?){family.end.pattern}")


def innermost_block_pattern(family: MarkerFamily) -> re.Pattern[str]:
    """Return a block pattern whose content may not contain another begin marker.

    Only blocks without a nested begin of the same family match, so repeated
    substitution resolves nesting from the inside out.

    Args:
        family (MarkerFamily): The marker family.

    Returns:
        re.Pattern[str]: Compiled block pattern.
    """
    begin_src: str = family.begin.pattern
    # Same begin pattern without capturing groups, for the lookahead
    guard: str = _CAPTURE_OPEN.sub("(?:", begin_src)
    return re.compile(f"{begin_src}((?:(?!{guard})[\\s\\S])*?){family.end.pattern}")


def scan_markers(
    pattern: re.Pattern[str],
    text: str,
    *,
    start: int = 0,
    end: int | None = None,
) -> list[MarkerMatch]:
    """Return all occurrences of ``pattern`` in ``text[start:end]`` in document order.

    Offsets in the returned matches are absolute offsets into ``text``.

    Args:
        pattern (re.Pattern[str]): Marker pattern to scan for.
        text (str): The full text buffer.
        start (int): First offset to consider.
        end (int | None): Offset one past the last character to consider
            (defaults to the end of ``text``).

    Returns:
        list[MarkerMatch]: Fresh list of matches ordered by start offset.
    """
    stop: int = len(text) if end is None else end
    return [
        MarkerMatch(m.start(), m.end(), m.groups()) for m in pattern.finditer(text, start, stop)
    ]


def pair_markers(begins: Sequence[MarkerMatch], ends: Sequence[MarkerMatch]) -> list[MarkerPair]:
    """Pair begin markers with end markers in document order.

    Args:
        begins (Sequence[MarkerMatch]): Begin markers ordered by start offset.
        ends (Sequence[MarkerMatch]): End markers ordered by start offset.

    Returns:
        list[MarkerPair]: One pair per begin that found a closing end marker.
    """
    pairs: list[MarkerPair] = []
    end_idx: int = 0
    for begin in begins:
        while end_idx < len(ends) and ends[end_idx].start < begin.end:
            end_idx += 1
        if end_idx >= len(ends):
            break
        pairs.append(MarkerPair(begin=begin, end=ends[end_idx]))
        end_idx += 1
    return pairs


def find_pairs(
    family: MarkerFamily,
    text: str,
    *,
    start: int = 0,
    end: int | None = None,
) -> list[MarkerPair]:
    """Scan ``text[start:end]`` for ``family`` markers and pair them.

    Args:
        family (MarkerFamily): The marker family to pair.
        text (str): The full text buffer.
        start (int): First offset to consider.
        end (int | None): Offset one past the last character to consider.

    Returns:
        list[MarkerPair]: Paired markers with absolute offsets.
    """
    begins: list[MarkerMatch] = scan_markers(family.begin, text, start=start, end=end)
    ends: list[MarkerMatch] = scan_markers(family.end, text, start=start, end=end)
    return pair_markers(begins, ends)
