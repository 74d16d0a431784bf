# topmark:header:start
#
#   project      : DwtGuard
#   file         : test_updater.py
#   file_relpath : tests/template/test_updater.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for instance creation, re-application and in-place instance edits."""

from __future__ import annotations

import pytest

from dwtguard.core.errors import NotAnInstanceError, UnknownParameterError
from dwtguard.template.updater import (
    InstanceState,
    MoveDirection,
    add_repeat_entry,
    apply_template,
    escape_attribute_value,
    extract_instance_state,
    move_repeat_entry,
    new_instance,
    remove_repeat_entry,
    retarget_template_reference,
    strip_template_markers,
    update_instance_param,
)
from tests.conftest import parametrize
from tests.samples import (
    INSTANCE_TEXT,
    NEW_INSTANCE_TEXT,
    REPEAT_TEMPLATE_TEXT,
    TEMPLATE_PATH,
    TEMPLATE_TEXT,
    repeat_instance,
)


def test_new_instance() -> None:
    """A new instance uses template defaults only."""
    out: str = new_instance(TEMPLATE_TEXT, template_path=TEMPLATE_PATH, instance_path="/about.html")
    assert out == NEW_INSTANCE_TEXT


def test_new_instance_unlocked() -> None:
    """The lock flag is carried into the declaration."""
    out: str = new_instance(
        TEMPLATE_TEXT, template_path=TEMPLATE_PATH, lock_code_outside_html=False
    )
    assert 'codeOutsideHTMLIsLocked="false"' in out


def test_apply_template_is_idempotent() -> None:
    """Re-applying an unchanged template to an in-sync instance is a no-op."""
    out: str = apply_template(INSTANCE_TEXT, TEMPLATE_TEXT, instance_path="/about.html")
    assert out == INSTANCE_TEXT
    assert (
        apply_template(NEW_INSTANCE_TEXT, TEMPLATE_TEXT, instance_path="/about.html")
        == NEW_INSTANCE_TEXT
    )


def test_apply_template_keeps_instance_newlines() -> None:
    """Lines end with the instance's newline whatever the template uses."""
    crlf_instance: str = INSTANCE_TEXT.replace("\n", "\r\n")
    crlf_template: str = TEMPLATE_TEXT.replace("\n", "\r\n")
    assert (
        apply_template(crlf_instance, crlf_template, instance_path="/about.html") == crlf_instance
    )
    assert apply_template(crlf_instance, TEMPLATE_TEXT, instance_path="/about.html") == (
        crlf_instance
    )
    assert apply_template(INSTANCE_TEXT, crlf_template, instance_path="/about.html") == (
        INSTANCE_TEXT
    )


def test_new_instance_uses_template_newline() -> None:
    out: str = new_instance(
        TEMPLATE_TEXT.replace("\n", "\r\n"),
        template_path=TEMPLATE_PATH,
        instance_path="/about.html",
    )
    assert out == NEW_INSTANCE_TEXT.replace("\n", "\r\n")


def test_apply_template_picks_up_template_changes() -> None:
    """Locked markup follows the template while instance state is preserved."""
    changed: str = TEMPLATE_TEXT.replace("<aside>Sidebar</aside>", "<aside>Menu</aside>")
    out: str = apply_template(INSTANCE_TEXT, changed, instance_path="/about.html")
    assert out == INSTANCE_TEXT.replace("<aside>Sidebar</aside>", "<aside>Menu</aside>")


def test_apply_template_new_parameter_gets_default() -> None:
    """A parameter added to the template appears with its default value."""
    changed: str = TEMPLATE_TEXT.replace(
        "</head>",
        '<!-- TemplateParam name="year" type="number" value="2025" -->\n</head>',
    )
    out: str = apply_template(INSTANCE_TEXT, changed, instance_path="/about.html")
    assert '<!-- InstanceParam name="year" type="number" value="2025" -->' in out
    assert '<!-- InstanceParam name="pageTitle" type="text" value="About" -->' in out


def test_apply_template_preserves_repeat_entries() -> None:
    """Repeat entries and their contents survive re-application."""
    text: str = repeat_instance("One", "Two")
    assert apply_template(text, REPEAT_TEMPLATE_TEXT) == text


def test_apply_template_rejects_non_instances() -> None:
    """Only documents with an instance declaration can be re-applied."""
    with pytest.raises(NotAnInstanceError):
        apply_template(TEMPLATE_TEXT, TEMPLATE_TEXT)


def test_extract_instance_state() -> None:
    """Declaration, params and top-level editable contents are collected."""
    state: InstanceState = extract_instance_state(INSTANCE_TEXT)
    assert state.template_path == TEMPLATE_PATH
    assert state.code_outside_html_is_locked is True
    assert state.params == {"pageTitle": "About", "showSidebar": "true"}
    assert state.param_types == {"pageTitle": "text", "showSidebar": "boolean"}
    assert state.editable_contents["doctitle"] == "<title>About</title>"
    assert state.editable_contents["content"].startswith("<p>About us</p>\n")
    assert state.repeat_entries == {}


def test_extract_instance_state_repeat_entries() -> None:
    """Editable regions inside repeat entries are reported per entry."""
    state: InstanceState = extract_instance_state(repeat_instance("A", "B"))
    assert state.editable_contents == {}
    assert state.repeat_entries == {"items": [{"item": "A"}, {"item": "B"}]}


def test_escape_attribute_value() -> None:
    assert escape_attribute_value('a "b" c') == "a &quot;b&quot; c"


def test_update_param_in_place() -> None:
    """Without a template only the marker value changes."""
    out: str = update_instance_param(INSTANCE_TEXT, "pageTitle", 'Say "hi"')
    assert '<!-- InstanceParam name="pageTitle" type="text" value="Say &quot;hi&quot;" -->' in out
    assert "<h1>About</h1>" in out


def test_update_param_with_template() -> None:
    """With a template the whole page is re-resolved with the new value."""
    out: str = update_instance_param(
        INSTANCE_TEXT,
        "showSidebar",
        "false",
        template_text=TEMPLATE_TEXT,
        instance_path="/about.html",
    )
    assert "<aside>" not in out
    assert '<!-- InstanceParam name="showSidebar" type="boolean" value="false" -->' in out
    assert "<p>About us</p>" in out

    out = update_instance_param(
        INSTANCE_TEXT, "pageTitle", "Team", template_text=TEMPLATE_TEXT, instance_path="/about.html"
    )
    assert "<h1>Team</h1>" in out


def test_update_param_errors() -> None:
    """Unknown parameters and non-instances are rejected."""
    with pytest.raises(UnknownParameterError):
        update_instance_param(INSTANCE_TEXT, "missing", "x")
    with pytest.raises(NotAnInstanceError):
        update_instance_param(TEMPLATE_TEXT, "pageTitle", "x")


def test_add_repeat_entry() -> None:
    """The last entry is duplicated after a newline."""
    text: str = repeat_instance("A", "B", separator="\n")
    assert add_repeat_entry(text, "items") == repeat_instance("A", "B", "B", separator="\n")


def test_remove_repeat_entry() -> None:
    """An entry is removed together with its preceding newline."""
    text: str = repeat_instance("A", "B", separator="\n")
    assert remove_repeat_entry(text, "items", 1) == repeat_instance("A")


@parametrize("index", [-1, 2, 5])
def test_remove_repeat_entry_out_of_range(index: int) -> None:
    text: str = repeat_instance("A", "B")
    assert remove_repeat_entry(text, "items", index) == text


def test_remove_last_remaining_entry_is_refused() -> None:
    """A repeat region always keeps at least one entry."""
    text: str = repeat_instance("A")
    assert remove_repeat_entry(text, "items", 0) == text


@parametrize(
    "index, direction, expected",
    [
        (0, MoveDirection.DOWN, ("B", "A", "C")),
        (2, MoveDirection.UP, ("A", "C", "B")),
        (1, MoveDirection.UP, ("B", "A", "C")),
        (0, MoveDirection.UP, ("A", "B", "C")),
        (2, MoveDirection.DOWN, ("A", "B", "C")),
    ],
)
def test_move_repeat_entry(index: int, direction: MoveDirection, expected: tuple[str, ...]) -> None:
    """Entries swap with their neighbour; moves past either end are ignored."""
    text: str = repeat_instance("A", "B", "C", separator="\n")
    assert move_repeat_entry(text, "items", index, direction) == repeat_instance(
        *expected, separator="\n"
    )


def test_repeat_edits_on_unknown_region_are_noops() -> None:
    text: str = repeat_instance("A", "B")
    assert add_repeat_entry(text, "nope") == text
    assert remove_repeat_entry(text, "nope", 0) == text
    assert move_repeat_entry(text, "nope", 0, MoveDirection.DOWN) == text


def test_retarget_template_reference() -> None:
    """The declaration is matched ignoring case and rewritten."""
    out: str = retarget_template_reference(
        INSTANCE_TEXT, "/templates/MAIN.dwt", "/Templates/site.dwt"
    )
    assert 'template="/Templates/site.dwt"' in out
    assert out.replace("/Templates/site.dwt", TEMPLATE_PATH) == INSTANCE_TEXT


def test_retarget_other_template_is_noop() -> None:
    assert retarget_template_reference(INSTANCE_TEXT, "/Templates/x.dwt", "/y.dwt") == INSTANCE_TEXT
    assert retarget_template_reference(TEMPLATE_TEXT, TEMPLATE_PATH, "/y.dwt") == TEMPLATE_TEXT


def test_strip_template_markers() -> None:
    """Detaching leaves plain HTML without instance markers or parameter lines."""
    assert strip_template_markers(NEW_INSTANCE_TEXT) == (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        "<title>Untitled</title>\n"
        '<link href="css/site.css" rel="stylesheet">\n'
        "</head>\n"
        "<body>\n"
        "<h1>Home</h1>\n"
        "<aside>Sidebar</aside>\n"
        "<p>Default</p>\n"
        "</body>\n"
        "</html>\n"
    )


def test_strip_template_markers_collapses_blank_lines() -> None:
    text: str = "<p>a</p>\n\n\n\n\n<p>b</p>\n"
    assert strip_template_markers(text) == "<p>a</p>\n\n<p>b</p>\n"


def test_strip_template_markers_drops_whitespace_of_collapsed_lines() -> None:
    text: str = "<p>a</p>\n  \n\t\n<p>b</p>\n"
    assert strip_template_markers(text) == "<p>a</p>\n\n<p>b</p>\n"
