# topmark:header:start
#
#   project      : DwtGuard
#   file         : test_guard.py
#   file_relpath : tests/cli/test_guard.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for ``dwtguard guard``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tests.cli.conftest import assert_FAILURE, assert_SUCCESS, run_cli
from tests.conftest import mark_cli
from tests.samples import INSTANCE_TEXT

if TYPE_CHECKING:
    from pathlib import Path

    from click.testing import Result


def _edited(site: Path, text: str) -> Path:
    after: Path = site / "after.html"
    after.write_text(text, encoding="utf-8")
    return after


@mark_cli
def test_guard_allows_editable_changes(site: Path) -> None:
    after: Path = _edited(site, INSTANCE_TEXT.replace("About us", "Who we are"))
    result: Result = run_cli(["guard", str(site / "about.html"), str(after)])
    assert_SUCCESS(result)
    assert f"ok  {after}" in result.output


@mark_cli
def test_guard_rejects_locked_changes(site: Path) -> None:
    after: Path = _edited(site, INSTANCE_TEXT.replace("<aside>Sidebar", "<aside>Hacked"))
    result: Result = run_cli(["guard", str(site / "about.html"), str(after)])
    assert_FAILURE(result)
    assert f"{after}: protected text changed at 11:8-11:" in result.output


@mark_cli
def test_guard_rejects_library_item_edits(site: Path) -> None:
    after: Path = _edited(site, INSTANCE_TEXT.replace("<footer>Old", "<footer>Mine"))
    result: Result = run_cli(["guard", str(site / "about.html"), str(after)])
    assert_FAILURE(result)


@mark_cli
def test_guard_identical_files(site: Path) -> None:
    after: Path = _edited(site, INSTANCE_TEXT)
    assert_SUCCESS(run_cli(["guard", str(site / "about.html"), str(after)]))


@mark_cli
def test_guard_on_unlocked_document(site: Path) -> None:
    after: Path = _edited(site, "anything")
    result: Result = run_cli(["guard", str(site / "plain.html"), str(after)])
    assert_SUCCESS(result)
    assert "nothing is protected" in result.output
