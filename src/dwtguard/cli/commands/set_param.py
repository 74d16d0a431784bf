# topmark:header:start
#
#   project      : DwtGuard
#   file         : set_param.py
#   file_relpath : src/dwtguard/cli/commands/set_param.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DwtGuard `set-param` command.

Changes one ``InstanceParam`` value of an instance page. By default the page is
re-resolved against its template so conditionals, optional regions and
``@@(...)@@`` variables follow the new value; ``--no-template`` only rewrites
the quoted value of the marker.

Examples:
    $ dwtguard set-param --diff about.html showSidebar false
    $ dwtguard set-param --apply --no-template about.html pageTitle "About us"
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
    locate_template,
    translate_errors,
)
from dwtguard.cli.options import CONTEXT_SETTINGS, apply_options, site_root_option
from dwtguard.config.logging import get_logger
from dwtguard.core.errors import NotAnInstanceError, UnknownParameterError
from dwtguard.parser.parser import parse_document
from dwtguard.template.paths import derive_instance_path
from dwtguard.template.updater import update_instance_param
from dwtguard.utils.fileio import read_text

if TYPE_CHECKING:
    from dwtguard.cli.console import ConsoleLike
    from dwtguard.config.logging import DwtGuardLogger
    from dwtguard.config.model import Config
    from dwtguard.parser.types import ParseResult

logger: DwtGuardLogger = get_logger(__name__)


@click.command(
    name="set-param",
    help="Change an instance parameter value.",
    context_settings=CONTEXT_SETTINGS,
)
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("name")
@click.argument("value")
@click.option(
    "--no-template",
    is_flag=True,
    help="Only rewrite the parameter marker; do not re-apply the template.",
)
@site_root_option
@apply_options
@translate_errors
def set_param_command(
    *,
    file: Path,
    name: str,
    value: str,
    no_template: bool,
    site_roots: tuple[str, ...],
    apply_changes: bool,
    show_diff: bool,
) -> None:
    """Set parameter NAME of instance FILE to VALUE.

    Args:
        file (Path): Instance page.
        name (str): Parameter name.
        value (str): New value.
        no_template (bool): Skip template re-application.
        site_roots (tuple[str, ...]): Site root overrides.
        apply_changes (bool): Write the result.
        show_diff (bool): Print a unified diff.
    """
    ctx: click.Context = click.get_current_context()
    console: ConsoleLike = get_console(ctx)
    config: Config = build_config(ctx, site_roots=site_roots, anchor=file.parent)

    current: str = read_text(file)
    result: ParseResult = parse_document(current)
    decl = result.template_declaration
    if decl is None:
        raise NotAnInstanceError(file)
    if result.find_param(name) is None:
        raise UnknownParameterError(name, file)

    template_text: str | None = None
    instance_path: str | None = None
    if not no_template:
        template_file: Path = locate_template(file, decl.template_path, config)
        template_text = read_text(template_file)
        instance_path = derive_instance_path(
            file.resolve(), template_file.resolve(), decl.template_path
        )

    updated: str = update_instance_param(
        current,
        name,
        value,
        template_text=template_text,
        instance_path=instance_path,
        max_conditional_passes=config.max_conditional_passes,
    )
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
