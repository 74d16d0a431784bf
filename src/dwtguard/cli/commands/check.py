# topmark:header:start
#
#   project      : DwtGuard
#   file         : check.py
#   file_relpath : src/dwtguard/cli/commands/check.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DwtGuard `check` command.

Runs the static diagnostics over templates and instance pages and prints one
line per finding (``path:line:col: level: message``), followed by a summary.
Directories are scanned with the configured extensions and excludes.

Exit codes:
  * 0 when there are no warnings or errors (info findings are allowed);
  * 1 otherwise.

Examples:
    $ dwtguard check
    $ dwtguard check site/ --format json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from dwtguard.cli.cmd_common import build_config, get_console, translate_errors
from dwtguard.cli.exit_codes import ExitCode
from dwtguard.cli.options import CONTEXT_SETTINGS, site_root_option
from dwtguard.config.logging import get_logger
from dwtguard.core.ranges import LineIndex
from dwtguard.diagnostics import (
    Diagnostic,
    DiagnosticStats,
    compute_diagnostic_stats,
    diagnose_document,
)
from dwtguard.discovery import iter_site_files
from dwtguard.utils.fileio import read_text

if TYPE_CHECKING:
    from collections.abc import Iterator

    from dwtguard.cli.console import ConsoleLike
    from dwtguard.config.logging import DwtGuardLogger
    from dwtguard.config.model import Config

logger: DwtGuardLogger = get_logger(__name__)


def _expand(paths: tuple[Path, ...], config: Config) -> Iterator[Path]:
    for path in paths:
        if path.is_dir():
            yield from iter_site_files(path, config)
        else:
            yield path


def _location(index: LineIndex, diagnostic: Diagnostic) -> str:
    if diagnostic.range is None:
        return ""
    pos = index.position_at(diagnostic.range.start)
    return f"{pos.line + 1}:{pos.character + 1}:"


@click.command(
    name="check",
    help="Report template problems in files or directories.",
    context_settings=CONTEXT_SETTINGS,
)
@click.argument(
    "paths",
    nargs=-1,
    type=click.Path(exists=True, path_type=Path),
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
def check_command(
    *,
    paths: tuple[Path, ...],
    output_format: str,
    site_roots: tuple[str, ...],
) -> None:
    """Diagnose PATHS (default: the current directory).

    Args:
        paths (tuple[Path, ...]): Files and directories.
        output_format (str): ``default`` or ``json``.
        site_roots (tuple[str, ...]): Site root overrides.
    """
    ctx: click.Context = click.get_current_context()
    console: ConsoleLike = get_console(ctx)
    config: Config = build_config(ctx, site_roots=site_roots)
    color_enabled: bool = bool(ctx.obj.get("color_enabled", False))

    all_findings: list[Diagnostic] = []
    report: list[dict[str, Any]] = []
    n_files: int = 0
    for path in _expand(paths or (Path.cwd(),), config):
        n_files += 1
        text: str = read_text(path)
        findings: list[Diagnostic] = diagnose_document(text, path, config=config)
        all_findings.extend(findings)
        if not findings:
            continue
        index = LineIndex(text)
        if output_format == "json":
            report.append(
                {
                    "path": str(path),
                    "diagnostics": [
                        {
                            "level": d.level.value,
                            "message": d.message,
                            "range": d.range.to_dict() if d.range is not None else None,
                        }
                        for d in findings
                    ],
                }
            )
            continue
        for d in findings:
            level: str = d.level.styled() if color_enabled else d.level.value
            console.print(f"{path}:{_location(index, d)} {level}: {d.message}")

    stats: DiagnosticStats = compute_diagnostic_stats(all_findings)
    logger.debug("Checked %d file(s): %s", n_files, stats)
    if output_format == "json":
        console.print(
            json.dumps(
                {
                    "files": report,
                    "summary": {
                        "files": n_files,
                        "info": stats.n_info,
                        "warning": stats.n_warning,
                        "error": stats.n_error,
                    },
                },
                indent=2,
            )
        )
    else:
        console.print(
            console.styled(
                f"{n_files} file(s) checked: {stats.n_error} error(s), "
                f"{stats.n_warning} warning(s), {stats.n_info} info",
                bold=True,
            )
        )

    if stats.n_error or stats.n_warning:
        ctx.exit(ExitCode.FAILURE)

