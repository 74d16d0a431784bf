# topmark:header:start
#
#   project      : DwtGuard
#   file         : repeat.py
#   file_relpath : src/dwtguard/cli/commands/repeat.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DwtGuard `repeat` command.

Edits the entries of a repeating region in an instance page:

  * ``add`` duplicates the last entry after it;
  * ``remove`` deletes entry ``--index`` (the last entry is never removed);
  * ``up``/``down`` swap entry ``--index`` with its neighbour.

Requests that cannot be honoured (unknown region, index out of range) leave
the page unchanged and are reported as warnings.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from dwtguard.cli.cmd_common import (
    build_config,
    emit_change,
    exit_for_changes,
    get_console,
    translate_errors,
)
from dwtguard.cli.errors import DwtGuardUsageError
from dwtguard.cli.options import CONTEXT_SETTINGS, apply_options
from dwtguard.core.errors import NotAnInstanceError
from dwtguard.parser.parser import parse_document
from dwtguard.template.updater import (
    MoveDirection,
    add_repeat_entry,
    move_repeat_entry,
    remove_repeat_entry,
)
from dwtguard.utils.fileio import read_text

if TYPE_CHECKING:
    from dwtguard.cli.console import ConsoleLike
    from dwtguard.config.model import Config
    from dwtguard.parser.types import ParseResult

ACTIONS: tuple[str, ...] = ("add", "remove", "up", "down")


@click.command(
    name="repeat",
    help="Add, remove or reorder entries of a repeating region.",
    context_settings=CONTEXT_SETTINGS,
)
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("region")
@click.argument("action", type=click.Choice(ACTIONS))
@click.option(
    "--index",
    type=int,
    default=None,
    help="Zero-based entry index (required for remove/up/down).",
)
@apply_options
@translate_errors
def repeat_command(
    *,
    file: Path,
    region: str,
    action: str,
    index: int | None,
    apply_changes: bool,
    show_diff: bool,
) -> None:
    """Apply ACTION to repeat REGION of instance FILE.

    Args:
        file (Path): Instance page.
        region (str): Repeat region name.
        action (str): One of add, remove, up, down.
        index (int | None): Entry index for remove/up/down.
        apply_changes (bool): Write the result.
        show_diff (bool): Print a unified diff.
    """
    ctx: click.Context = click.get_current_context()
    console: ConsoleLike = get_console(ctx)
    config: Config = build_config(ctx, anchor=file.parent)

    current: str = read_text(file)
    result: ParseResult = parse_document(current)
    if result.template_declaration is None:
        raise NotAnInstanceError(file)
    if result.find_repeat(region) is None:
        raise DwtGuardUsageError(f'No repeating region "{region}" in {file}')
    if action != "add" and index is None:
        raise DwtGuardUsageError(f"'{action}' requires --index")

    if action == "add":
        updated: str = add_repeat_entry(current, region)
    elif action == "remove":
        assert index is not None
        updated = remove_repeat_entry(current, region, index)
    else:
        assert index is not None
        direction = MoveDirection.UP if action == "up" else MoveDirection.DOWN
        updated = move_repeat_entry(current, region, index, direction)

    if updated == current:
        console.warn(f"Nothing to do: cannot {action} entry {index} of \"{region}\"")
        return
    changed: bool = emit_change(
        console,
        file,
        current,
        updated,
        apply_changes=apply_changes,
        show_diff=show_diff,
        config=config,
    )
    exit_for_changes(ctx, changed=int(changed), apply_changes=apply_changes)
