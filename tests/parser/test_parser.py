# topmark:header:start
#
#   project      : DwtGuard
#   file         : test_parser.py
#   file_relpath : tests/parser/test_parser.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for `parse_document` and file type detection."""

from __future__ import annotations

from dwtguard.core.ranges import TextRange
from dwtguard.parser.parser import compute_protected_regions, detect_file_type, parse_document
from dwtguard.parser.types import FileType, ParamType
from tests.samples import INSTANCE_TEXT, REPEAT_TEMPLATE_TEXT, TEMPLATE_TEXT, repeat_instance


def test_detect_file_type() -> None:
    """Instance markers win over template markers; no markers means NONE."""
    assert detect_file_type(TEMPLATE_TEXT) is FileType.TEMPLATE
    assert detect_file_type(INSTANCE_TEXT) is FileType.INSTANCE
    assert detect_file_type('<!-- InstanceBeginEditable name="x" -->') is FileType.INSTANCE
    assert detect_file_type("<html></html>") is FileType.NONE


def test_plain_document_has_nothing_to_protect() -> None:
    """A document without markers yields an empty model."""
    result = parse_document("<html><body>hi</body></html>")
    assert result.file_type is FileType.NONE
    assert result.editable_regions == ()
    assert result.protected_regions == ()
    assert not result.is_instance


def test_template_model() -> None:
    """Templates expose editable regions, variables and conditionals."""
    result = parse_document(TEMPLATE_TEXT)
    assert result.file_type is FileType.TEMPLATE
    assert [r.name for r in result.editable_regions] == ["doctitle", "content"]
    assert result.editable_regions[1].content_range.slice(TEMPLATE_TEXT) == "<p>Default</p>"
    assert [v.name for v in result.template_variables] == ["pageTitle"]
    assert [c.condition for c in result.conditional_regions] == ["showSidebar"]
    # Instance-only fields stay empty for templates
    assert result.instance_params == ()
    assert result.template_declaration is None


def test_instance_model() -> None:
    """Instances expose the declaration, typed params and library items."""
    result = parse_document(INSTANCE_TEXT)
    assert result.file_type is FileType.INSTANCE
    decl = result.template_declaration
    assert decl is not None
    assert decl.template_path == "/Templates/main.dwt"
    assert decl.code_outside_html_is_locked is True

    assert [(p.name, p.type, p.value) for p in result.instance_params] == [
        ("pageTitle", ParamType.TEXT, "About"),
        ("showSidebar", ParamType.BOOLEAN, "true"),
    ]
    title = result.find_param("pageTitle")
    assert title is not None
    assert title.value_range.slice(INSTANCE_TEXT) == "About"

    assert [li.path for li in result.library_items] == ["/Library/footer.lbi"]
    item = result.library_items[0]
    assert item.content_range.slice(INSTANCE_TEXT) == "<footer>Old</footer>"
    # Library item content is always protected, even inside an editable region
    assert result.protected_regions[-1].range == item.content_range


def test_unlocked_declaration() -> None:
    """codeOutsideHTMLIsLocked="false" is reported as unlocked."""
    text = '<!-- InstanceBegin template="/T.dwt" codeOutsideHTMLIsLocked="false" -->'
    decl = parse_document(text).template_declaration
    assert decl is not None
    assert decl.code_outside_html_is_locked is False


def test_unknown_param_type_is_text_with_raw_type_kept() -> None:
    """Unknown types map to TEXT while the raw spelling is preserved."""
    text = (
        '<!-- InstanceBegin template="/T.dwt" -->'
        '<!-- InstanceParam name="x" type="fancy" value="1" -->'
    )
    (param,) = parse_document(text).instance_params
    assert param.type is ParamType.TEXT
    assert param.raw_type == "fancy"


def test_param_type_parse_is_case_insensitive() -> None:
    """`ParamType.parse` ignores case; unknown strings return None."""
    assert ParamType.parse("url") is ParamType.URL
    assert ParamType.parse("Boolean") is ParamType.BOOLEAN
    assert ParamType.parse("widget") is None


def test_document_accessor_variable_is_normalized() -> None:
    """``@@(_document['X'])@@`` refers to parameter X."""
    text = (
        '<!-- TemplateBeginEditable name="a" -->'
        "@@(_document['Title'])@@<!-- TemplateEndEditable -->"
    )
    (var,) = parse_document(text).template_variables
    assert var.name == "Title"
    assert var.expression == "_document['Title']"


def test_unbalanced_markers_do_not_raise() -> None:
    """Malformed markup yields fewer regions, never an exception."""
    text = (
        '<!-- InstanceEndEditable --><!-- InstanceBeginEditable name="a" -->A'
        '<!-- InstanceEndEditable --><!-- InstanceBeginEditable name="b" -->B'
    )
    result = parse_document(text)
    assert [r.name for r in result.editable_regions] == ["a"]


def test_zero_regions_protects_whole_document() -> None:
    """An instance with no editable regions is protected end to end."""
    text = '<html><!-- InstanceBegin template="/T.dwt" --><body>x</body></html>'
    result = parse_document(text)
    assert result.editable_regions == ()
    assert [p.range for p in result.protected_regions] == [TextRange(0, len(text))]


def test_compute_protected_regions_skips_empty_gaps() -> None:
    """Adjacent editable regions leave no empty protected gap between them."""
    result = parse_document(
        '<!-- InstanceBeginEditable name="a" -->A<!-- InstanceEndEditable -->'
        '<!-- InstanceBeginEditable name="b" -->B<!-- InstanceEndEditable -->'
    )
    gaps = compute_protected_regions(200, result.editable_regions)
    assert all(not g.range.is_empty for g in gaps)
    assert gaps[-1].range.end == 200


def test_template_repeat_has_no_entries() -> None:
    """Template-side repeat regions are reported without entries."""
    (repeat,) = parse_document(REPEAT_TEMPLATE_TEXT).repeat_regions
    assert repeat.name == "items"
    assert repeat.entries == ()


def test_instance_repeat_entries_and_nested_editables() -> None:
    """Instance repeats expose their entries and each entry's editable regions."""
    text = repeat_instance("A", "B")
    result = parse_document(text)
    repeat = result.find_repeat("items")
    assert repeat is not None
    assert len(repeat.entries) == 2
    contents = [
        [r.content_range.slice(text) for r in e.editable_regions] for e in repeat.entries
    ]
    assert contents == [["A"], ["B"]]
    # Entry offsets are absolute
    assert repeat.entries[1].full_range.slice(text).startswith("<!-- InstanceBeginRepeatEntry")
    assert repeat.content_range.start == repeat.begin_marker_range.end


def test_optional_regions_both_forms() -> None:
    """Template and instance optional markers are both collected, in order."""
    text = (
        '<!-- InstanceBeginEditable name="e" --><!-- InstanceEndEditable -->'
        '<!-- InstanceBeginOptional name="b" -->x<!-- InstanceEndOptional -->'
        '<!-- TemplateBeginOptional name="a" -->y<!-- TemplateEndOptional -->'
    )
    result = parse_document(text)
    assert [o.name for o in result.optional_regions] == ["b", "a"]


def test_to_dict_includes_content_on_request() -> None:
    """`to_dict(text)` adds region contents; without text only ranges are emitted."""
    result = parse_document(INSTANCE_TEXT)
    bare = result.to_dict()
    full = result.to_dict(INSTANCE_TEXT)
    assert "content" not in bare["editable_regions"][0]
    assert full["editable_regions"][0]["content"] == "<title>About</title>"
    assert full["template"]["path"] == "/Templates/main.dwt"
    assert full["file_type"] == "instance"
