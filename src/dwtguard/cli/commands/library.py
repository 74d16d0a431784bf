# topmark:header:start
#
#   project      : DwtGuard
#   file         : library.py
#   file_relpath : src/dwtguard/cli/commands/library.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DwtGuard `library` command.

Copies the current content of a library item (``.lbi``) into every
``#BeginLibraryItem`` block that refers to it. Dry run by default.

Examples:
    $ dwtguard library Library/footer.lbi
    $ dwtguard library --apply --diff Library/footer.lbi
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
from dwtguard.cli.options import CONTEXT_SETTINGS, apply_options, site_root_option
from dwtguard.library.updater import find_library_item_usages, update_library_item_references
from dwtguard.utils.fileio import read_text

if TYPE_CHECKING:
    from dwtguard.cli.console import ConsoleLike
    from dwtguard.config.model import Config


@click.command(
    name="library",
    help="Propagate a library item to the pages that embed it.",
    context_settings=CONTEXT_SETTINGS,
)
@click.argument("item", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Site root to scan (default: first site root, else cwd).",
)
@site_root_option
@apply_options
@translate_errors
def library_command(
    *,
    item: Path,
    root: Path | None,
    site_roots: tuple[str, ...],
    apply_changes: bool,
    show_diff: bool,
) -> None:
    """Propagate library ITEM.

    Args:
        item (Path): The ``.lbi`` file.
        root (Path | None): Site root to scan.
        site_roots (tuple[str, ...]): Site root overrides.
        apply_changes (bool): Write changes.
        show_diff (bool): Print unified diffs.
    """
    ctx: click.Context = click.get_current_context()
    console: ConsoleLike = get_console(ctx)
    config: Config = build_config(ctx, site_roots=site_roots, anchor=item.parent)
    scan_root: Path = root or (config.site_roots[0] if config.site_roots else Path.cwd())

    item_text: str = read_text(item)
    usages: list[Path] = find_library_item_usages(item, scan_root, config)
    if not usages:
        console.print(console.styled(f"No pages embed {item}.", fg="blue"))
        return

    changed: int = 0
    for path in usages:
        current: str = read_text(path)
        updated: str = update_library_item_references(
            current, path, item, item_text, roots=config.site_roots
        )
        if emit_change(
            console,
            path,
            current,
            updated,
            apply_changes=apply_changes,
            show_diff=show_diff,
            config=config,
        ):
            changed += 1
    exit_for_changes(ctx, changed=changed, apply_changes=apply_changes)
