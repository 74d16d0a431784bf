# topmark:header:start
#
#   project      : DwtGuard
#   file         : options.py
#   file_relpath : src/dwtguard/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Reusable Click options and their resolution logic.

Commands stay thin by sharing the decorators defined here: verbosity and color
on the group, ``--apply``/``--diff`` on the rewriting commands, and
``--site-root`` wherever a site path must be located on disk.
"""

from __future__ import annotations

import logging
import os
import sys
from enum import Enum
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar

import click

from dwtguard.cli.errors import DwtGuardUsageError
from dwtguard.config.logging import TRACE_LEVEL

if TYPE_CHECKING:
    from collections.abc import Callable

P = ParamSpec("P")
R = TypeVar("R")

LOG_LEVELS: dict[str, int] = {
    "TRACE": TRACE_LEVEL,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

CONTEXT_SETTINGS: dict[str, Any] = {
    "help_option_names": ["-h", "--help"],
}


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Resolve the logging level requested by ``-v``/``-q`` flags.

    Args:
        verbose_count (int): Number of ``-v`` flags.
        quiet_count (int): Number of ``-q`` flags.

    Returns:
        int: The logging level (``-vvv`` TRACE, ``-vv`` DEBUG, ``-v`` INFO,
        ``-q`` ERROR, otherwise WARNING).

    Raises:
        DwtGuardUsageError: If both flags are given.
    """
    if verbose_count > 0 and quiet_count > 0:
        raise DwtGuardUsageError("The '--verbose' and '--quiet' options are mutually exclusive.")

    if verbose_count >= 3:
        return LOG_LEVELS["TRACE"]
    if verbose_count == 2:
        return LOG_LEVELS["DEBUG"]
    if verbose_count == 1:
        return LOG_LEVELS["INFO"]
    if quiet_count >= 1:
        return LOG_LEVELS["ERROR"]
    return LOG_LEVELS["WARNING"]


class ColorMode(str, Enum):
    """User intent for colorized terminal output."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def resolve_color_mode(
    *,
    cli_mode: ColorMode | None,
    output_format: str | None,
    stdout_isatty: bool | None = None,
) -> bool:
    """Determine whether color output should be enabled.

    Decision precedence:
        1. Machine formats (``json``) never use color.
        2. ``--color=always|never``.
        3. ``FORCE_COLOR`` (set and not ``"0"``) enables, ``NO_COLOR`` disables.
        4. Otherwise color follows ``stdout.isatty()``.

    Args:
        cli_mode (ColorMode | None): Explicit mode from the CLI.
        output_format (str | None): Output format, if the command has one.
        stdout_isatty (bool | None): TTY override; auto-detected when None.

    Returns:
        bool: True if ANSI color should be enabled.
    """
    if output_format and output_format.lower() == "json":
        return False
    if cli_mode == ColorMode.ALWAYS:
        return True
    if cli_mode == ColorMode.NEVER:
        return False
    force_color: str | None = os.getenv("FORCE_COLOR")
    if force_color and force_color != "0":
        return True
    if os.getenv("NO_COLOR") is not None:
        return False
    if stdout_isatty is None:
        try:
            stdout_isatty = sys.stdout.isatty()
        except (AttributeError, OSError, ValueError):
            stdout_isatty = False
    return bool(stdout_isatty)


def common_verbose_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``-v/--verbose`` and ``-q/--quiet`` counting options."""
    f = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity. Repeat for more detail.",
    )(f)
    f = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Suppress non-essential output.",
    )(f)
    return f


def common_color_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``--color`` and ``--no-color`` options."""
    f = click.option(
        "--color",
        "color_mode",
        type=click.Choice([m.value for m in ColorMode]),
        default=None,
        help="Color output: auto (default), always, or never.",
    )(f)
    f = click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable color output (equivalent to --color=never).",
    )(f)
    return f


def common_config_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``--no-config`` and repeatable ``--config FILE`` options."""
    f = click.option(
        "--no-config",
        "no_config",
        is_flag=True,
        help="Ignore discovered dwtguard.toml/pyproject.toml files (only use defaults).",
    )(f)
    f = click.option(
        "--config",
        "config_paths",
        multiple=True,
        metavar="FILE",
        type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True),
        help="Additional config file(s) to load and merge.",
    )(f)
    return f


def site_root_option(f: Callable[P, R]) -> Callable[P, R]:
    """Add a repeatable ``--site-root DIR`` option overriding ``[site] roots``."""
    return click.option(
        "--site-root",
        "site_roots",
        multiple=True,
        metavar="DIR",
        type=click.Path(exists=True, file_okay=False, dir_okay=True),
        help="Site root used to resolve paths such as /Templates/main.dwt (repeatable).",
    )(f)


def apply_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``--apply`` and ``--diff`` options to rewriting commands."""
    f = click.option(
        "--apply",
        "apply_changes",
        is_flag=True,
        help="Write changes to disk (default is a dry run).",
    )(f)
    f = click.option(
        "--diff",
        "show_diff",
        is_flag=True,
        help="Show a unified diff of the changes.",
    )(f)
    return f
