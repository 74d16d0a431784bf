# topmark:header:start
#
#   project      : DwtGuard
#   file         : detach.py
#   file_relpath : src/dwtguard/cli/commands/detach.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DwtGuard `detach` command.

Detaches an instance page from its template by removing every instance
marker, leaving plain HTML. Without ``--apply`` the result is printed;
``--markdown`` prints a Markdown rendition instead.

Examples:
    $ dwtguard detach about.html > about.static.html
    $ dwtguard detach --apply about.html
    $ dwtguard detach --markdown about.html
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from dwtguard.cli.cmd_common import build_config, get_console, translate_errors
from dwtguard.cli.errors import DwtGuardUsageError
from dwtguard.cli.options import CONTEXT_SETTINGS
from dwtguard.core.errors import NotAnInstanceError
from dwtguard.parser.parser import parse_document
from dwtguard.template.updater import strip_template_markers
from dwtguard.utils.fileio import read_text, write_text
from dwtguard.utils.markdown import html_to_markdown

if TYPE_CHECKING:
    from dwtguard.cli.console import ConsoleLike
    from dwtguard.config.model import Config


@click.command(
    name="detach",
    help="Strip template markers from an instance page.",
    context_settings=CONTEXT_SETTINGS,
)
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--apply", "apply_changes", is_flag=True, help="Rewrite FILE in place.")
@click.option("--markdown", is_flag=True, help="Print the page as Markdown.")
@translate_errors
def detach_command(*, file: Path, apply_changes: bool, markdown: bool) -> None:
    """Remove the instance markers of FILE.

    Args:
        file (Path): Instance page.
        apply_changes (bool): Rewrite the file instead of printing.
        markdown (bool): Convert the detached page to Markdown.
    """
    ctx: click.Context = click.get_current_context()
    console: ConsoleLike = get_console(ctx)
    if apply_changes and markdown:
        raise DwtGuardUsageError("--markdown cannot be combined with --apply")

    current: str = read_text(file)
    if parse_document(current).template_declaration is None:
        raise NotAnInstanceError(file)
    detached: str = strip_template_markers(current)

    if markdown:
        console.print(html_to_markdown(detached))
    elif apply_changes:
        config: Config = build_config(ctx, anchor=file.parent)
        write_text(file, detached, newline=config.newline, original=current)
        console.print(f"{console.styled('detached', fg='yellow', bold=True)} {file}")
    else:
        console.print(detached, nl=False)
