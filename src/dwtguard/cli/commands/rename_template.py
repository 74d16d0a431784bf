# topmark:header:start
#
#   project      : DwtGuard
#   file         : rename_template.py
#   file_relpath : src/dwtguard/cli/commands/rename_template.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DwtGuard `rename-template` command.

After a template has been moved or renamed, rewrites the
``InstanceBegin template="..."`` declaration of every page that still points at
the old location. OLD and NEW are file paths; their site paths are computed
against the scan root. Declarations are matched case-insensitively.

Examples:
    $ git mv Templates/main.dwt Templates/site.dwt
    $ dwtguard rename-template --apply Templates/main.dwt Templates/site.dwt
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
from dwtguard.cli.options import CONTEXT_SETTINGS, apply_options, site_root_option
from dwtguard.config.logging import get_logger
from dwtguard.discovery import declared_template, iter_site_files
from dwtguard.template.paths import site_relative_path
from dwtguard.template.updater import retarget_template_reference
from dwtguard.utils.fileio import read_text

if TYPE_CHECKING:
    from dwtguard.cli.console import ConsoleLike
    from dwtguard.config.logging import DwtGuardLogger
    from dwtguard.config.model import Config

logger: DwtGuardLogger = get_logger(__name__)


def _site_path(file: Path, root: Path) -> str:
    try:
        return site_relative_path(file, root)
    except ValueError as e:
        raise DwtGuardUsageError(f"{file} is not located under the site root {root}") from e


@click.command(
    name="rename-template",
    help="Retarget instance pages after a template was moved or renamed.",
    context_settings=CONTEXT_SETTINGS,
)
@click.argument("old", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("new", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Site root to scan (default: first site root, else cwd).",
)
@site_root_option
@apply_options
@translate_errors
def rename_template_command(
    *,
    old: Path,
    new: Path,
    root: Path | None,
    site_roots: tuple[str, ...],
    apply_changes: bool,
    show_diff: bool,
) -> None:
    """Point pages declaring OLD at NEW.

    Args:
        old (Path): Former template location.
        new (Path): New template location.
        root (Path | None): Site root.
        site_roots (tuple[str, ...]): Site root overrides.
        apply_changes (bool): Write changes.
        show_diff (bool): Print unified diffs.
    """
    ctx: click.Context = click.get_current_context()
    console: ConsoleLike = get_console(ctx)
    config: Config = build_config(ctx, site_roots=site_roots)
    site_root: Path = root or (config.site_roots[0] if config.site_roots else Path.cwd())

    old_path: str = _site_path(old, site_root)
    new_path: str = _site_path(new, site_root)
    logger.info("Retargeting %s -> %s under %s", old_path, new_path, site_root)

    changed: int = 0
    for path in iter_site_files(site_root, config, extensions=config.instance_extensions):
        declared: str | None = declared_template(path, config)
        if declared is None or declared.lower() != old_path.lower():
            continue
        current: str = read_text(path)
        updated: str = retarget_template_reference(current, old_path, new_path)
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

    if not changed:
        console.print(console.styled(f"No pages declare {old_path}.", fg="blue"))
    exit_for_changes(ctx, changed=changed, apply_changes=apply_changes)
