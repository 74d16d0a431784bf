# topmark:header:start
#
#   project      : DwtGuard
#   file         : test_protection.py
#   file_relpath : tests/test_protection.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for edit-permission checks on template instances."""

from __future__ import annotations

from dwtguard.core.ranges import TextRange
from dwtguard.parser.parser import parse_document
from dwtguard.parser.types import EditableRegion, ParseResult
from dwtguard.protection import (
    EditCheck,
    changed_range,
    check_edits,
    edit_ranges,
    is_edit_permitted,
    is_locked,
)
from tests.conftest import parametrize
from tests.samples import INSTANCE_TEXT, TEMPLATE_TEXT


def _content(result: ParseResult) -> EditableRegion:
    region: EditableRegion | None = result.find_editable("content")
    assert region is not None
    return region


def test_only_instances_are_locked() -> None:
    assert is_locked(parse_document(INSTANCE_TEXT))
    assert not is_locked(parse_document(TEMPLATE_TEXT))
    assert not is_locked(parse_document("<p>plain</p>"))


def test_edits_inside_editable_regions_are_permitted() -> None:
    """Edits contained in a region, including at its edges, are allowed."""
    result: ParseResult = parse_document(INSTANCE_TEXT)
    rng: TextRange = _content(result).content_range
    assert is_edit_permitted(result, rng)
    assert is_edit_permitted(result, TextRange(rng.start, rng.start))
    assert is_edit_permitted(result, TextRange(rng.end, rng.end))
    start: int = INSTANCE_TEXT.index("About us")
    assert is_edit_permitted(result, TextRange(start, start + len("About us")))


def test_edits_touching_protected_text_are_rejected() -> None:
    result: ParseResult = parse_document(INSTANCE_TEXT)
    rng: TextRange = _content(result).content_range
    assert not is_edit_permitted(result, TextRange(rng.start - 1, rng.start))
    assert not is_edit_permitted(result, TextRange(rng.end, rng.end + 1))
    assert not is_edit_permitted(result, TextRange(0, 1))


def test_templates_accept_any_edit() -> None:
    result: ParseResult = parse_document(TEMPLATE_TEXT)
    assert is_edit_permitted(result, TextRange(0, len(TEMPLATE_TEXT)))


def test_check_edits_reports_violations_in_order() -> None:
    result: ParseResult = parse_document(INSTANCE_TEXT)
    inside: TextRange = _content(result).content_range
    bad1 = TextRange(0, 2)
    bad2 = TextRange(len(INSTANCE_TEXT) - 2, len(INSTANCE_TEXT))
    check: EditCheck = check_edits(result, [bad2, inside, bad1])
    assert not check.allowed
    assert check.violations == (bad2, bad1)
    assert check_edits(result, [inside]) == EditCheck(allowed=True)


@parametrize(
    "before, after, expected",
    [
        ("abc", "abc", None),
        ("abc", "abXc", TextRange(2, 2)),
        ("abc", "ac", TextRange(1, 2)),
        ("abc", "aXc", TextRange(1, 2)),
        ("aaa", "aa", TextRange(2, 3)),
        ("", "new", TextRange(0, 0)),
    ],
)
def test_changed_range(before: str, after: str, expected: TextRange | None) -> None:
    assert changed_range(before, after) == expected


def test_edit_ranges_separates_distant_edits() -> None:
    before: str = "one\ntwo\nthree\nfour\nfive\nsix\nseven\n"
    after: str = before.replace("two", "TWO").replace("six", "SIX")
    assert edit_ranges(before, after) == [TextRange(4, 7), TextRange(24, 27)]
    assert edit_ranges(before, before) == []


def test_whole_file_rewrite_against_instance() -> None:
    """Changing editable content passes; changing locked markup does not."""
    result: ParseResult = parse_document(INSTANCE_TEXT)

    ok: str = INSTANCE_TEXT.replace("About us", "Who we are")
    assert check_edits(result, edit_ranges(INSTANCE_TEXT, ok)).allowed

    bad: str = INSTANCE_TEXT.replace("<aside>Sidebar</aside>", "<aside>Hacked</aside>")
    check: EditCheck = check_edits(result, edit_ranges(INSTANCE_TEXT, bad))
    assert not check.allowed
    assert len(check.violations) == 1


def test_library_item_bodies_stay_locked() -> None:
    """Library content inside an editable region cannot be edited in place."""
    result: ParseResult = parse_document(INSTANCE_TEXT)
    assert len(result.library_items) == 1
    item = result.library_items[0]
    assert not is_edit_permitted(result, item.content_range)
    inner: int = item.content_range.start + 1
    assert not is_edit_permitted(result, TextRange(inner, inner))
    # Inserting right before the block, or removing the whole inclusion, is fine
    assert is_edit_permitted(result, TextRange(item.full_range.start, item.full_range.start))
    assert is_edit_permitted(result, item.full_range)
