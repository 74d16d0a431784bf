# topmark:header:start
#
#   project      : DwtGuard
#   file         : test_repeat.py
#   file_relpath : tests/cli/test_repeat.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for ``dwtguard repeat``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dwtguard.cli.exit_codes import ExitCode
from tests.cli.conftest import (
    assert_exit,
    assert_SUCCESS,
    assert_USAGE_ERROR,
    assert_WOULD_CHANGE,
    run_cli,
)
from tests.conftest import mark_cli, parametrize
from tests.samples import repeat_instance

if TYPE_CHECKING:
    from pathlib import Path

    from click.testing import Result


def _page(root: Path) -> Path:
    page: Path = root / "list.html"
    page.write_text(repeat_instance("A", "B", separator="\n"), encoding="utf-8")
    return page


@mark_cli
def test_repeat_add(isolation: Path) -> None:
    page: Path = _page(isolation)
    result: Result = run_cli(["repeat", "--apply", str(page), "items", "add"])
    assert_SUCCESS(result)
    assert page.read_text(encoding="utf-8") == repeat_instance("A", "B", "B", separator="\n")


@mark_cli
def test_repeat_remove_dry_run(isolation: Path) -> None:
    page: Path = _page(isolation)
    result: Result = run_cli(["repeat", str(page), "items", "remove", "--index", "1"])
    assert_WOULD_CHANGE(result)
    assert page.read_text(encoding="utf-8") == repeat_instance("A", "B", separator="\n")


@mark_cli
def test_repeat_move(isolation: Path) -> None:
    page: Path = _page(isolation)
    result: Result = run_cli(["repeat", "--apply", str(page), "items", "down", "--index", "0"])
    assert_SUCCESS(result)
    assert page.read_text(encoding="utf-8") == repeat_instance("B", "A", separator="\n")


@mark_cli
def test_repeat_noop_warns(isolation: Path) -> None:
    page: Path = _page(isolation)
    result: Result = run_cli(["repeat", str(page), "items", "up", "--index", "0"])
    assert_SUCCESS(result)
    assert "Nothing to do" in result.output


@mark_cli
@parametrize(
    "argv_tail",
    [
        ["items", "remove"],
        ["missing", "add"],
    ],
)
def test_repeat_usage_errors(isolation: Path, argv_tail: list[str]) -> None:
    page: Path = _page(isolation)
    result: Result = run_cli(["repeat", str(page), *argv_tail])
    assert_USAGE_ERROR(result)


@mark_cli
def test_repeat_on_plain_page(site: Path) -> None:
    result: Result = run_cli(["repeat", str(site / "plain.html"), "items", "add"])
    assert_exit(result, ExitCode.UNSUPPORTED_FILE_TYPE)
