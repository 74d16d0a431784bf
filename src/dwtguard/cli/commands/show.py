# topmark:header:start
#
#   project      : DwtGuard
#   file         : show.py
#   file_relpath : src/dwtguard/cli/commands/show.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DwtGuard `show` command.

Prints the structural model of one document: its kind, template declaration,
parameters, editable/optional/repeat regions and library items, with 1-based
``line:column`` ranges.

Examples:
  Summarize an instance page:

    $ dwtguard show pages/about.html

  Include region contents (dedented, or converted to Markdown):

    $ dwtguard show --content pages/about.html
    $ dwtguard show --content --markdown pages/about.html

  Machine-readable output:

    $ dwtguard show --format json pages/about.html
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import click

from dwtguard.cli.cmd_common import get_console, translate_errors
from dwtguard.cli.options import CONTEXT_SETTINGS
from dwtguard.config.logging import get_logger
from dwtguard.core.ranges import LineIndex
from dwtguard.parser.parser import parse_document
from dwtguard.parser.types import ParamType
from dwtguard.utils.fileio import read_text
from dwtguard.utils.markdown import html_to_markdown
from dwtguard.utils.text import dedent_block

if TYPE_CHECKING:
    from dwtguard.cli.console import ConsoleLike
    from dwtguard.config.logging import DwtGuardLogger
    from dwtguard.parser.types import ParseResult

logger: DwtGuardLogger = get_logger(__name__)


def _render_content(content: str, *, markdown: bool) -> str:
    body: str = html_to_markdown(content) if markdown else dedent_block(content).strip("\n")
    return "\n".join(f"      {line}" for line in body.splitlines()) if body else "      (empty)"


def render_model(
    console: ConsoleLike,
    text: str,
    result: ParseResult,
    *,
    with_content: bool,
    markdown: bool,
    color_enabled: bool = False,
) -> None:
    """Print a human-readable summary of ``result``."""
    index = LineIndex(text)
    file_type: str = result.file_type.styled() if color_enabled else result.file_type.value
    console.print(f"{console.styled('type:', bold=True)} {file_type}")

    decl = result.template_declaration
    if decl is not None:
        lock: str = "locked" if decl.code_outside_html_is_locked else "unlocked"
        console.print(
            f"{console.styled('template:', bold=True)} {decl.template_path} "
            f"(code outside html {lock})"
        )

    if result.instance_params:
        console.print(console.styled("parameters:", bold=True))
        for p in result.instance_params:
            known: bool = ParamType.parse(p.raw_type) is not None
            type_label: str = p.raw_type if known else console.styled(p.raw_type, fg="yellow")
            console.print(f'  {p.name} [{type_label}] = "{p.value}"')

    if result.editable_regions:
        console.print(console.styled("editable regions:", bold=True))
        for r in result.editable_regions:
            console.print(f"  {r.name}  {index.describe(r.content_range)}")
            if with_content:
                console.print(_render_content(r.content_range.slice(text), markdown=markdown))

    for opt in result.optional_regions:
        label: str = console.styled("optional:", bold=True)
        console.print(f"{label} {opt.name}  {index.describe(opt.full_range)}")

    for rep in result.repeat_regions:
        console.print(
            f"{console.styled('repeat:', bold=True)} {rep.name}  "
            f"{len(rep.entries)} entr{'y' if len(rep.entries) == 1 else 'ies'}"
        )

    for cond in result.conditional_regions:
        label = console.styled("if:", bold=True)
        console.print(f"{label} {cond.condition}  {index.describe(cond.full_range)}")

    for item in result.library_items:
        label = console.styled("library item:", bold=True)
        console.print(f"{label} {item.path}  {index.describe(item.full_range)}")

    console.print(
        f"{console.styled('protected ranges:', bold=True)} {len(result.protected_regions)}"
    )


@click.command(
    name="show",
    help="Show the parsed template model of a file.",
    context_settings=CONTEXT_SETTINGS,
)
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["default", "json"]),
    default="default",
    help="Output format.",
)
@click.option("--content", "with_content", is_flag=True, help="Include region contents.")
@click.option(
    "--markdown",
    is_flag=True,
    help="Render region contents as Markdown (implies --content).",
)
@translate_errors
def show_command(
    *,
    file: Path,
    output_format: str,
    with_content: bool,
    markdown: bool,
) -> None:
    """Print the parse model of FILE.

    Args:
        file (Path): Document to inspect.
        output_format (str): ``default`` or ``json``.
        with_content (bool): Include region contents.
        markdown (bool): Convert region contents to Markdown.
    """
    console: ConsoleLike = get_console()
    text: str = read_text(file)
    result: ParseResult = parse_document(text)
    logger.debug("show %s: %s", file, result.file_type.value)

    if output_format == "json":
        payload = result.to_dict(text if (with_content or markdown) else None)
        payload["path"] = str(file)
        console.print(json.dumps(payload, indent=2))
        return

    color_enabled: bool = bool(click.get_current_context().obj.get("color_enabled", False))
    console.print(console.styled(str(file), bold=True, underline=True))
    render_model(
        console,
        text,
        result,
        with_content=with_content or markdown,
        markdown=markdown,
        color_enabled=color_enabled,
    )
