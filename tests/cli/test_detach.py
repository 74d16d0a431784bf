# topmark:header:start
#
#   project      : DwtGuard
#   file         : test_detach.py
#   file_relpath : tests/cli/test_detach.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for ``dwtguard detach``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dwtguard.cli.exit_codes import ExitCode
from tests.cli.conftest import assert_exit, assert_SUCCESS, assert_USAGE_ERROR, run_cli
from tests.conftest import mark_cli

if TYPE_CHECKING:
    from pathlib import Path

    from click.testing import Result


@mark_cli
def test_detach_prints_plain_html(site: Path) -> None:
    about: Path = site / "about.html"
    before: str = about.read_text(encoding="utf-8")
    result: Result = run_cli(["detach", str(about)])
    assert_SUCCESS(result)
    assert "Instance" not in result.output
    assert "<h1>About</h1>" in result.output
    assert "#BeginLibraryItem" in result.output
    assert about.read_text(encoding="utf-8") == before


@mark_cli
def test_detach_apply(site: Path) -> None:
    about: Path = site / "about.html"
    result: Result = run_cli(["detach", "--apply", str(about)])
    assert_SUCCESS(result)
    assert "detached" in result.output
    assert "Instance" not in about.read_text(encoding="utf-8")


@mark_cli
def test_detach_markdown(site: Path) -> None:
    result: Result = run_cli(["detach", "--markdown", str(site / "about.html")])
    assert_SUCCESS(result)
    assert "# About" in result.output
    assert "<" not in result.output


@mark_cli
def test_detach_markdown_with_apply_is_rejected(site: Path) -> None:
    result: Result = run_cli(["detach", "--apply", "--markdown", str(site / "about.html")])
    assert_USAGE_ERROR(result)


@mark_cli
def test_detach_requires_instance(site: Path) -> None:
    result: Result = run_cli(["detach", str(site / "plain.html")])
    assert_exit(result, ExitCode.UNSUPPORTED_FILE_TYPE)
