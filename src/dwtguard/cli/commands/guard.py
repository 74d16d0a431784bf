# topmark:header:start
#
#   project      : DwtGuard
#   file         : guard.py
#   file_relpath : src/dwtguard/cli/commands/guard.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DwtGuard `guard` command.

Verifies that a modified instance page only changed text inside its editable
regions. BEFORE is the trusted version (for example the committed one), AFTER
the edited one. Every edit that touches locked text is reported with its
``line:col`` range in BEFORE.

Exit codes:
  * 0 when every edit is permitted (or BEFORE is not a locked instance);
  * 1 when at least one edit touches protected text.

Example:
    $ git show HEAD:about.html > /tmp/about.html
    $ dwtguard guard /tmp/about.html about.html
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from dwtguard.cli.cmd_common import get_console, translate_errors
from dwtguard.cli.exit_codes import ExitCode
from dwtguard.cli.options import CONTEXT_SETTINGS
from dwtguard.core.ranges import LineIndex
from dwtguard.parser.parser import parse_document
from dwtguard.protection import check_edits, edit_ranges, is_locked
from dwtguard.utils.fileio import read_text

if TYPE_CHECKING:
    from dwtguard.cli.console import ConsoleLike
    from dwtguard.parser.types import ParseResult
    from dwtguard.protection import EditCheck


@click.command(
    name="guard",
    help="Fail if AFTER changes protected text of instance BEFORE.",
    context_settings=CONTEXT_SETTINGS,
)
@click.argument("before", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("after", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@translate_errors
def guard_command(*, before: Path, after: Path) -> None:
    """Check the edits from BEFORE to AFTER.

    Args:
        before (Path): Trusted version of the page.
        after (Path): Edited version of the page.
    """
    ctx: click.Context = click.get_current_context()
    console: ConsoleLike = get_console(ctx)

    old_text: str = read_text(before)
    new_text: str = read_text(after)
    result: ParseResult = parse_document(old_text)
    if not is_locked(result):
        console.print(f"{before} is not a template instance; nothing is protected.")
        return

    outcome: EditCheck = check_edits(result, edit_ranges(old_text, new_text))
    if outcome.allowed:
        console.print(f"{console.styled('ok', fg='green')}  {after}")
        return

    index = LineIndex(old_text)
    for rng in outcome.violations:
        console.error(f"{after}: protected text changed at {index.describe(rng)}")
    ctx.exit(ExitCode.FAILURE)
