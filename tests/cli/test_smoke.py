# topmark:header:start
#
#   project      : DwtGuard
#   file         : test_smoke.py
#   file_relpath : tests/cli/test_smoke.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Smoke tests for the DwtGuard CLI group, ``version`` and ``show``."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from dwtguard.constants import DWTGUARD_VERSION
from tests.cli.conftest import assert_SUCCESS, run_cli
from tests.conftest import mark_cli, parametrize

if TYPE_CHECKING:
    from pathlib import Path

    from click.testing import Result


@mark_cli
def test_group_without_command_prints_help() -> None:
    result: Result = run_cli([])
    assert_SUCCESS(result)
    assert "Hint:" in result.output
    assert "Usage:" in result.output


@mark_cli
@parametrize(
    "command",
    [
        "version",
        "show",
        "new",
        "apply",
        "set-param",
        "repeat",
        "detach",
        "rename-template",
        "library",
        "check",
        "guard",
        "deps",
    ],
)
def test_every_command_has_help(command: str) -> None:
    result: Result = run_cli([command, "--help"])
    assert_SUCCESS(result)
    assert "Usage:" in result.output


@mark_cli
def test_version() -> None:
    result: Result = run_cli(["version"])
    assert_SUCCESS(result)
    assert result.output.strip() == DWTGUARD_VERSION


@mark_cli
def test_version_json() -> None:
    result: Result = run_cli(["version", "--format", "json"])
    assert_SUCCESS(result)
    assert json.loads(result.output) == {"version": DWTGUARD_VERSION}


@mark_cli
def test_show_instance(site: Path) -> None:
    result: Result = run_cli(["show", str(site / "about.html")])
    assert_SUCCESS(result)
    out: str = result.output
    assert "type: instance" in out
    assert "template: /Templates/main.dwt (code outside html locked)" in out
    assert 'pageTitle [text] = "About"' in out
    assert "library item: /Library/footer.lbi" in out
    assert "About us" not in out


@mark_cli
def test_show_template_with_content(site: Path) -> None:
    result: Result = run_cli(["show", "--content", str(site / "Templates" / "main.dwt")])
    assert_SUCCESS(result)
    assert "type: template" in result.output
    assert "if: showSidebar" in result.output
    assert "<p>Default</p>" in result.output


@mark_cli
def test_show_markdown(site: Path) -> None:
    result: Result = run_cli(["show", "--markdown", str(site / "about.html")])
    assert_SUCCESS(result)
    assert "About us" in result.output
    assert "<p>" not in result.output


@mark_cli
def test_show_json(site: Path) -> None:
    result: Result = run_cli(["show", "--format", "json", "--content", str(site / "about.html")])
    assert_SUCCESS(result)
    payload: dict[str, Any] = json.loads(result.output)
    assert payload["file_type"] == "instance"
    assert payload["path"] == str(site / "about.html")
    assert payload["template"]["path"] == "/Templates/main.dwt"
    assert [r["name"] for r in payload["editable_regions"]] == ["doctitle", "content"]
    assert payload["editable_regions"][0]["content"] == "<title>About</title>"


@mark_cli
def test_show_plain_file(site: Path) -> None:
    result: Result = run_cli(["show", str(site / "plain.html")])
    assert_SUCCESS(result)
    assert "type: none" in result.output
    assert "protected ranges: 0" in result.output


@mark_cli
def test_unknown_format_is_rejected(site: Path) -> None:
    result: Result = run_cli(["show", "--format", "xml", str(site / "plain.html")])
    assert result.exit_code != 0
    assert "Invalid value" in result.output
