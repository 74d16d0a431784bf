# topmark:header:start
#
#   project      : DwtGuard
#   file         : version.py
#   file_relpath : src/dwtguard/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DwtGuard `version` command.

Prints the current DwtGuard version as installed in the active Python environment.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from dwtguard.cli.cmd_common import get_console, get_effective_verbosity
from dwtguard.constants import DWTGUARD_VERSION

if TYPE_CHECKING:
    from dwtguard.cli.console import ConsoleLike


@click.command(
    name="version",
    help="Show the current version of DwtGuard.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["default", "json"]),
    default="default",
    help="Output format.",
)
def version_command(*, output_format: str = "default") -> None:
    """Show the current version of DwtGuard.

    Args:
        output_format (str): ``default`` (plain text) or ``json``.
    """
    ctx: click.Context = click.get_current_context()
    console: ConsoleLike = get_console(ctx)

    if output_format == "json":
        console.print(json.dumps({"version": DWTGUARD_VERSION}))
    elif get_effective_verbosity(ctx) > 0:
        console.print(console.styled("DwtGuard version:\n", bold=True, underline=True))
        console.print(f"    {console.styled(DWTGUARD_VERSION, bold=True)}")
    else:
        console.print(console.styled(DWTGUARD_VERSION, bold=True))
