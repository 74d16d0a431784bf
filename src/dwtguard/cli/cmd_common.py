# topmark:header:start
#
#   project      : DwtGuard
#   file         : cmd_common.py
#   file_relpath : src/dwtguard/cli/cmd_common.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Helpers shared by DwtGuard CLI commands.

Covers config materialization from the group options, translation of library
errors into CLI errors, template lookup, and the dry-run/apply/diff reporting
used by every command that rewrites files.
"""

from __future__ import annotations

import functools
from pathlib import Path
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar

import click

from dwtguard.cli.errors import to_cli_error
from dwtguard.cli.exit_codes import ExitCode
from dwtguard.config.logging import get_logger
from dwtguard.config.model import MutableConfig
from dwtguard.core.errors import DwtGuardError, UnresolvedTemplateError
from dwtguard.template.paths import resolve_site_path, site_relative_path
from dwtguard.utils.diff import make_patch, render_patch
from dwtguard.utils.fileio import write_text

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from dwtguard.cli.console import ConsoleLike
    from dwtguard.config.logging import DwtGuardLogger
    from dwtguard.config.model import Config

P = ParamSpec("P")
R = TypeVar("R")

logger: DwtGuardLogger = get_logger(__name__)


def get_console(ctx: click.Context | None = None) -> ConsoleLike:
    """Return the console stored on the (current) Click context."""
    context: click.Context = ctx or click.get_current_context()
    context.ensure_object(dict)
    return context.obj["console"]


def get_effective_verbosity(ctx: click.Context) -> int:
    """Return the program-output verbosity (``-v`` count minus ``-q`` count)."""
    return int(ctx.obj.get("verbosity_level", 0))


def translate_errors(f: Callable[P, R]) -> Callable[P, R]:
    """Re-raise `DwtGuardError` from a command body as the matching CLI error."""

    @functools.wraps(f)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return f(*args, **kwargs)
        except DwtGuardError as e:
            logger.debug("Command failed: %r", e)
            raise to_cli_error(e) from e

    return wrapper


def build_config(
    ctx: click.Context,
    *,
    site_roots: Iterable[str] = (),
    anchor: Path | None = None,
) -> Config:
    """Materialize the effective `Config` for a command.

    Layers: defaults, discovered config files (unless ``--no-config``), the
    group's ``--config`` files, then command-level overrides.

    Raises:
        DwtGuardConfigError: If any config layer is malformed.
    """
    obj: dict[str, Any] = ctx.obj or {}
    config_paths: tuple[str, ...] = tuple(obj.get("config_paths") or ())
    try:
        draft: MutableConfig = MutableConfig.load_merged(
            anchor=anchor,
            extra_config_files=[Path(p) for p in config_paths],
            no_config=bool(obj.get("no_config", False)),
        )
    except DwtGuardError as e:
        raise to_cli_error(e) from e
    draft.apply_overrides({"site_roots": [Path(r) for r in site_roots]})
    config: Config = draft.freeze()
    logger.debug("Effective config: %s", config)
    return config


def locate_template(referencing_file: Path, template_path: str, config: Config) -> Path:
    """Resolve a declared template site path to a file.

    Raises:
        UnresolvedTemplateError: If no candidate exists.
    """
    found: Path | None = resolve_site_path(
        referencing_file, template_path, roots=config.site_roots
    )
    if found is None:
        raise UnresolvedTemplateError(template_path, referencing_file)
    return found


def emit_change(
    console: ConsoleLike,
    path: Path,
    current: str,
    updated: str,
    *,
    apply_changes: bool,
    show_diff: bool,
    config: Config,
) -> bool:
    """Report (and optionally write) one rewritten file.

    Args:
        console (ConsoleLike): Output console.
        path (Path): The file being rewritten.
        current (str): Text on disk.
        updated (str): New text.
        apply_changes (bool): Write ``updated`` to ``path``.
        show_diff (bool): Print a unified diff.
        config (Config): Supplies the newline policy.

    Returns:
        bool: True if the file differs from ``updated``.
    """
    if updated == current:
        console.print(f"{console.styled('unchanged', fg='green')}  {path}")
        return False

    if show_diff:
        patch: str = make_patch(current, updated, str(path))
        color_enabled: bool = bool(click.get_current_context().obj.get("color_enabled", False))
        console.print(render_patch(patch) if color_enabled else patch, nl=False)

    if apply_changes:
        write_text(path, updated, newline=config.newline, original=current)
        console.print(f"{console.styled('updated', fg='yellow', bold=True)}    {path}")
    else:
        console.print(f"{console.styled('would update', fg='yellow')} {path}")
    return True


def exit_for_changes(ctx: click.Context, *, changed: int, apply_changes: bool) -> None:
    """Exit with `ExitCode.WOULD_CHANGE` after a dry run that found changes."""
    if changed and not apply_changes:
        console: ConsoleLike = get_console(ctx)
        console.print()
        console.print(
            console.styled(f"{changed} file(s) would change; re-run with --apply.", fg="blue")
        )
        ctx.exit(ExitCode.WOULD_CHANGE)


def template_site_path(template_file: Path, config: Config) -> str:
    """Return the site path to declare for ``template_file``.

    The first configured site root containing the template wins, then the
    current directory; otherwise the bare file name is used.
    """
    for root in (*config.site_roots, Path.cwd()):
        try:
            return site_relative_path(template_file, root)
        except ValueError:
            continue
    logger.debug("Template %s is outside every site root", template_file)
    return "/" + template_file.name
