# topmark:header:start
#
#   project      : DwtGuard
#   file         : test_markers.py
#   file_relpath : tests/core/test_markers.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for marker scanning and the shared begin/end pairing primitive."""

from __future__ import annotations

from dwtguard.core import markers as mk
from dwtguard.core.markers import MarkerMatch, pair_markers

BEGIN_A = '<!-- TemplateBeginEditable name="a" -->'
BEGIN_B = '<!-- TemplateBeginEditable name="b" -->'
END = "<!-- TemplateEndEditable -->"


def _m(start: int, end: int) -> MarkerMatch:
    return MarkerMatch(start, end)


def test_scan_markers_returns_absolute_offsets_and_groups() -> None:
    """Matches carry absolute offsets and captured attribute values."""
    text = "xx" + BEGIN_A + "body" + END
    matches = mk.scan_markers(mk.TEMPLATE_BEGIN_EDITABLE, text)
    assert len(matches) == 1
    assert matches[0].start == 2
    assert matches[0].end == 2 + len(BEGIN_A)
    assert matches[0].value == "a"


def test_scan_markers_is_stateless() -> None:
    """Two scans over the same text yield equal, independent lists."""
    text = BEGIN_A + END + BEGIN_B + END
    first = mk.scan_markers(mk.TEMPLATE_END_EDITABLE, text)
    second = mk.scan_markers(mk.TEMPLATE_END_EDITABLE, text)
    assert first == second
    assert first is not second


def test_scan_markers_window() -> None:
    """start/end restrict the scan but offsets stay absolute."""
    text = BEGIN_A + END + BEGIN_B + END
    window_start = len(BEGIN_A + END)
    matches = mk.scan_markers(mk.TEMPLATE_BEGIN_EDITABLE, text, start=window_start)
    assert [m.value for m in matches] == ["b"]
    assert matches[0].start == window_start


def test_pairing_skips_ends_before_begin() -> None:
    """An end that precedes the begin cannot close it."""
    begins = [_m(10, 15)]
    ends = [_m(0, 5), _m(20, 25)]
    pairs = pair_markers(begins, ends)
    assert len(pairs) == 1
    assert pairs[0].end.start == 20


def test_pairing_drops_trailing_begins() -> None:
    """Begins left without ends are dropped silently."""
    begins = [_m(0, 5), _m(10, 15), _m(30, 35)]
    ends = [_m(6, 9), _m(20, 25)]
    pairs = pair_markers(begins, ends)
    assert [(p.begin.start, p.end.start) for p in pairs] == [(0, 6), (10, 20)]


def test_pairing_is_sequential_not_nested() -> None:
    """Nested begins pair with the next unconsumed end, in order."""
    begins = [_m(0, 5), _m(10, 15)]
    ends = [_m(20, 25), _m(30, 35)]
    pairs = pair_markers(begins, ends)
    assert [(p.begin.start, p.end.start) for p in pairs] == [(0, 20), (10, 30)]


def test_pair_ranges() -> None:
    """content_range excludes both markers; full_range includes them."""
    text = BEGIN_A + "hello" + END
    (pair,) = mk.find_pairs(mk.TEMPLATE_EDITABLE, text)
    assert pair.content_range.slice(text) == "hello"
    assert pair.full_range.slice(text) == text
    assert pair.begin_range.slice(text) == BEGIN_A
    assert pair.end_range.slice(text) == END


def test_marker_whitespace_is_flexible() -> None:
    """Markers allow arbitrary whitespace inside the comment."""
    text = '<!--TemplateBeginEditable   name="x"-->y<!--   TemplateEndEditable-->'
    (pair,) = mk.find_pairs(mk.TEMPLATE_EDITABLE, text)
    assert pair.begin.value == "x"
    assert pair.content_range.slice(text) == "y"


def test_innermost_block_pattern_matches_inner_block_only() -> None:
    """The innermost pattern never matches a block holding another begin."""
    inner = '<!-- TemplateBeginIf cond="b" -->B<!-- TemplateEndIf -->'
    text = f'<!-- TemplateBeginIf cond="a" -->A{inner}<!-- TemplateEndIf -->'
    pattern = mk.innermost_block_pattern(mk.CONDITIONAL)
    m = pattern.search(text)
    assert m is not None
    assert m.group(0) == inner
    assert m.group(1) == "b"
    assert m.group(2) == "B"


def test_block_pattern_groups() -> None:
    """Begin groups come first and the content is the last group."""
    text = '<!-- TemplateBeginOptional name="opt" -->stuff<!-- TemplateEndOptional -->'
    m = mk.block_pattern(mk.TEMPLATE_OPTIONAL).search(text)
    assert m is not None
    assert m.groups() == ("opt", "stuff")
