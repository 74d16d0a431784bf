# topmark:header:start
#
#   project      : DwtGuard
#   file         : protection.py
#   file_relpath : src/dwtguard/protection.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Edit-permission checks for template instances.

An instance page is locked outside its editable regions: an edit is permitted
only when some editable content range contains it entirely (bounds inclusive,
so inserting right at either edge of a region is allowed). Library item bodies
stay locked even inside an editable region, unless the edit takes the whole
inclusion with it. Templates and plain documents are never locked.

`edit_ranges` reduces two snapshots of a document to the spans of the
earlier snapshot that were replaced, which lets callers check a whole-file
rewrite against the previous parse.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dwtguard.config.logging import get_logger
from dwtguard.core.ranges import TextRange
from dwtguard.parser.types import FileType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from dwtguard.config.logging import DwtGuardLogger
    from dwtguard.parser.types import ParseResult

logger: DwtGuardLogger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class EditCheck:
    """Outcome of checking a batch of edits.

    Attributes:
        allowed (bool): True when every edit is permitted.
        violations (tuple[TextRange, ...]): Edits that touch protected text, in input order.
    """

    allowed: bool
    violations: tuple[TextRange, ...] = ()


def is_locked(parse_result: ParseResult) -> bool:
    """Return True if the document is an instance with a template declaration."""
    return (
        parse_result.file_type is FileType.INSTANCE
        and parse_result.template_declaration is not None
    )


def is_edit_permitted(parse_result: ParseResult, edit_range: TextRange) -> bool:
    """Return True if replacing ``edit_range`` keeps protected text intact.

    Args:
        parse_result (ParseResult): Parse of the document before the edit.
        edit_range (TextRange): Span of the pre-edit text being replaced.

    Returns:
        bool: Whether the edit is allowed.
    """
    if not is_locked(parse_result):
        return True
    if not any(r.content_range.contains(edit_range) for r in parse_result.editable_regions):
        return False
    return not any(
        item.content_range.overlaps(edit_range) and not edit_range.contains(item.full_range)
        for item in parse_result.library_items
    )


def check_edits(parse_result: ParseResult, ranges: Iterable[TextRange]) -> EditCheck:
    """Check several edits at once and report those that are not permitted."""
    violations: tuple[TextRange, ...] = tuple(
        rng for rng in ranges if not is_edit_permitted(parse_result, rng)
    )
    if violations:
        logger.debug("%d edit(s) touch protected text", len(violations))
    return EditCheck(allowed=not violations, violations=violations)


def changed_range(before: str, after: str) -> TextRange | None:
    """Return the span of ``before`` replaced to obtain ``after``, or None if equal.

    The span is the minimal one left after trimming the common prefix and suffix.
    A pure insertion yields an empty range at the insertion point.
    """
    if before == after:
        return None
    limit: int = min(len(before), len(after))
    prefix: int = 0
    while prefix < limit and before[prefix] == after[prefix]:
        prefix += 1
    suffix: int = 0
    while (
        suffix < limit - prefix
        and before[len(before) - 1 - suffix] == after[len(after) - 1 - suffix]
    ):
        suffix += 1
    return TextRange(prefix, len(before) - suffix)


def edit_ranges(before: str, after: str) -> list[TextRange]:
    """Return the spans of ``before`` that were replaced to produce ``after``.

    Lines are aligned with `difflib.SequenceMatcher`; each differing block is
    then narrowed with `changed_range`, so separate edits in separate regions
    are reported separately.
    """
    lines_a: list[str] = before.splitlines(keepends=True)
    lines_b: list[str] = after.splitlines(keepends=True)
    starts_a: list[int] = [0]
    for line in lines_a:
        starts_a.append(starts_a[-1] + len(line))

    ranges: list[TextRange] = []
    matcher = difflib.SequenceMatcher(None, lines_a, lines_b, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        inner: TextRange | None = changed_range("".join(lines_a[i1:i2]), "".join(lines_b[j1:j2]))
        if inner is not None:
            ranges.append(inner.shift(starts_a[i1]))
    return ranges
