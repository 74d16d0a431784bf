# topmark:header:start
#
#   project      : DwtGuard
#   file         : new.py
#   file_relpath : src/dwtguard/cli/commands/new.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DwtGuard `new` command.

Creates a new instance page from a template, using the template's parameter
defaults and default region contents. Relative URLs are rebased from the
template's directory to the new page's directory.

Examples:
  Create a page under a site root:

    $ dwtguard new --site-root site site/Templates/main.dwt site/news/index.html

  Print the page instead of writing it:

    $ dwtguard new Templates/main.dwt news/index.html --stdout
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from dwtguard.cli.cmd_common import (
    build_config,
    get_console,
    template_site_path,
    translate_errors,
)
from dwtguard.cli.errors import DwtGuardUsageError
from dwtguard.cli.options import CONTEXT_SETTINGS, site_root_option
from dwtguard.config.logging import get_logger
from dwtguard.core.errors import DocumentIOError
from dwtguard.template.paths import derive_instance_path
from dwtguard.template.updater import new_instance
from dwtguard.utils.fileio import read_text, write_text

if TYPE_CHECKING:
    from dwtguard.cli.console import ConsoleLike
    from dwtguard.config.logging import DwtGuardLogger
    from dwtguard.config.model import Config

logger: DwtGuardLogger = get_logger(__name__)


@click.command(
    name="new",
    help="Create a new instance page from a template.",
    context_settings=CONTEXT_SETTINGS,
)
@click.argument("template", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@site_root_option
@click.option("--force", is_flag=True, help="Overwrite OUTPUT if it exists.")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the page instead of writing it.")
@click.option(
    "--unlocked",
    "unlocked",
    is_flag=True,
    default=None,
    help='Declare codeOutsideHTMLIsLocked="false" (default from config).',
)
@translate_errors
def new_command(
    *,
    template: Path,
    output: Path,
    site_roots: tuple[str, ...],
    force: bool,
    to_stdout: bool,
    unlocked: bool | None,
) -> None:
    """Create OUTPUT as an instance of TEMPLATE.

    Args:
        template (Path): The ``.dwt`` template.
        output (Path): Instance file to create.
        site_roots (tuple[str, ...]): Site root overrides.
        force (bool): Overwrite an existing OUTPUT.
        to_stdout (bool): Print instead of writing.
        unlocked (bool | None): Unlock code outside ``<html>``.
    """
    ctx: click.Context = click.get_current_context()
    console: ConsoleLike = get_console(ctx)
    config: Config = build_config(ctx, site_roots=site_roots, anchor=template.parent)

    if output.exists() and not (force or to_stdout):
        raise DwtGuardUsageError(f"{output} already exists (use --force to overwrite)")

    template_text: str = read_text(template)
    template_path: str = template_site_path(template, config)
    instance_path: str = derive_instance_path(output.resolve(), template.resolve(), template_path)
    lock: bool = not unlocked if unlocked is not None else config.lock_code_outside_html
    logger.info("New instance %s of %s (site path %s)", output, template_path, instance_path)

    page: str = new_instance(
        template_text,
        template_path=template_path,
        instance_path=instance_path,
        lock_code_outside_html=lock,
        max_conditional_passes=config.max_conditional_passes,
    )

    if to_stdout:
        console.print(page, nl=False)
        return
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DocumentIOError(output.parent, e) from e
    write_text(output, page, newline=config.newline, original=template_text)
    console.print(f"{console.styled('created', fg='green', bold=True)} {output}")
