# topmark:header:start
#
#   project      : DwtGuard
#   file         : deps.py
#   file_relpath : src/dwtguard/cli/commands/deps.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DwtGuard `deps` command.

Prints every template found under ROOT with the instance pages that use it.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import TYPE_CHECKING

import click

from dwtguard.cli.cmd_common import build_config, get_console, translate_errors
from dwtguard.cli.options import CONTEXT_SETTINGS, site_root_option
from dwtguard.discovery import build_dependency_tree

if TYPE_CHECKING:
    from dwtguard.cli.console import ConsoleLike
    from dwtguard.config.model import Config
    from dwtguard.discovery import InstanceRef


def _display(path: Path, root: Path) -> str:
    return os.path.relpath(path, root)


@click.command(
    name="deps",
    help="Show templates and the pages that depend on them.",
    context_settings=CONTEXT_SETTINGS,
)
@click.argument(
    "root",
    required=False,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["default", "json"]),
    default="default",
    help="Output format.",
)
@site_root_option
@translate_errors
def deps_command(*, root: Path | None, output_format: str, site_roots: tuple[str, ...]) -> None:
    """Print the template dependency tree of ROOT (default: cwd).

    Args:
        root (Path | None): Directory to scan.
        output_format (str): ``default`` or ``json``.
        site_roots (tuple[str, ...]): Site root overrides.
    """
    ctx: click.Context = click.get_current_context()
    console: ConsoleLike = get_console(ctx)
    config: Config = build_config(ctx, site_roots=site_roots)
    scan_root: Path = (root or Path.cwd()).resolve()

    tree: dict[Path, list[InstanceRef]] = build_dependency_tree(scan_root, config)

    if output_format == "json":
        console.print(
            json.dumps(
                {
                    _display(template, scan_root): sorted(
                        _display(ref.path, scan_root) for ref in refs
                    )
                    for template, refs in sorted(tree.items())
                },
                indent=2,
            )
        )
        return

    if not tree:
        console.print(console.styled("No templates found.", fg="blue"))
        return
    for template, refs in sorted(tree.items()):
        console.print(console.styled(_display(template, scan_root), bold=True))
        ordered: list[InstanceRef] = sorted(refs, key=lambda r: r.path)
        for i, ref in enumerate(ordered):
            branch: str = "└─" if i == len(ordered) - 1 else "├─"
            console.print(f"  {branch} {_display(ref.path, scan_root)}")
        if not ordered:
            console.print(console.styled("  (no instances)", dim=True))
