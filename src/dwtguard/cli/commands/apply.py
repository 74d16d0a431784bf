# topmark:header:start
#
#   project      : DwtGuard
#   file         : apply.py
#   file_relpath : src/dwtguard/cli/commands/apply.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DwtGuard `apply` command.

Propagates a template to its instances: every instance is re-resolved against
the current template text while keeping its own parameter values, editable
contents and repeat entries. Performs a dry run by default and writes files
when ``--apply`` is given.

Exit codes:
  * 0 when every instance is up to date (or was written with ``--apply``);
  * 2 (WOULD_CHANGE) after a dry run that found pending changes;
  * 1 when at least one instance could not be processed, including listed
    PATHS that are not instances of TEMPLATE.

Examples:
  Preview which pages would change:

    $ dwtguard apply Templates/main.dwt

  Show diffs and write:

    $ dwtguard apply --diff --apply Templates/main.dwt

  Only regenerate specific pages:

    $ dwtguard apply Templates/main.dwt about.html contact.html
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
from dwtguard.cli.exit_codes import ExitCode
from dwtguard.cli.options import CONTEXT_SETTINGS, apply_options, site_root_option
from dwtguard.config.logging import get_logger
from dwtguard.core.errors import DwtGuardError
from dwtguard.discovery import (
    InstanceRef,
    declared_template,
    find_instance_files,
    resolves_to_template,
)
from dwtguard.template.paths import derive_instance_path
from dwtguard.template.updater import apply_template
from dwtguard.utils.fileio import read_text

if TYPE_CHECKING:
    from dwtguard.cli.console import ConsoleLike
    from dwtguard.config.logging import DwtGuardLogger
    from dwtguard.config.model import Config

logger: DwtGuardLogger = get_logger(__name__)


def _explicit_refs(paths: tuple[Path, ...], config: Config) -> list[InstanceRef]:
    refs: list[InstanceRef] = []
    for path in paths:
        declared: str | None = declared_template(path, config)
        # Undeclared files are kept so that apply_template reports them
        refs.append(InstanceRef(path=path, template_path=declared or ""))
    return refs


@click.command(
    name="apply",
    help="Propagate a template to its instance pages (dry run unless --apply).",
    context_settings=CONTEXT_SETTINGS,
)
@click.argument("template", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument(
    "paths",
    nargs=-1,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory scanned for instances (default: first site root, else cwd).",
)
@site_root_option
@apply_options
@translate_errors
def apply_command(
    *,
    template: Path,
    paths: tuple[Path, ...],
    root: Path | None,
    site_roots: tuple[str, ...],
    apply_changes: bool,
    show_diff: bool,
) -> None:
    """Regenerate the instances of TEMPLATE.

    Args:
        template (Path): The ``.dwt`` template.
        paths (tuple[Path, ...]): Explicit instances; scanned for when empty.
        root (Path | None): Scan root.
        site_roots (tuple[str, ...]): Site root overrides.
        apply_changes (bool): Write changes.
        show_diff (bool): Print unified diffs.
    """
    ctx: click.Context = click.get_current_context()
    console: ConsoleLike = get_console(ctx)
    config: Config = build_config(ctx, site_roots=site_roots, anchor=template.parent)
    template_text: str = read_text(template)

    refs: list[InstanceRef] = (
        _explicit_refs(paths, config)
        if paths
        else find_instance_files(template, config, root=root)
    )
    if not refs:
        console.print(console.styled(f"No instances of {template} found.", fg="blue"))
        return

    changed: int = 0
    failed: int = 0
    for ref in refs:
        if ref.template_path and not resolves_to_template(
            ref.path, ref.template_path, template, config
        ):
            failed += 1
            logger.error("%s declares %s, not %s", ref.path, ref.template_path, template)
            console.error(f"failed       {ref.path}: declares {ref.template_path}, not {template}")
            continue
        try:
            current: str = read_text(ref.path)
            instance_path: str | None = (
                derive_instance_path(ref.path.resolve(), template.resolve(), ref.template_path)
                if ref.template_path
                else None
            )
            updated: str = apply_template(
                current,
                template_text,
                instance_path=instance_path,
                max_conditional_passes=config.max_conditional_passes,
            )
            if emit_change(
                console,
                ref.path,
                current,
                updated,
                apply_changes=apply_changes,
                show_diff=show_diff,
                config=config,
            ):
                changed += 1
        except DwtGuardError as e:
            failed += 1
            logger.error("Cannot apply %s to %s: %s", template, ref.path, e)
            console.error(f"failed       {ref.path}: {e}")

    if failed:
        ctx.exit(ExitCode.FAILURE)
    exit_for_changes(ctx, changed=changed, apply_changes=apply_changes)
