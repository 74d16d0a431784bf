# topmark:header:start
#
#   project      : DwtGuard
#   file         : main.py
#   file_relpath : src/dwtguard/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DwtGuard command-line interface.

Group-level options (verbosity, color, config files) are resolved once and
placed into ``ctx.obj``; subcommands read the console and build their `Config`
from there.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from dwtguard.cli.commands.apply import apply_command
from dwtguard.cli.commands.check import check_command
from dwtguard.cli.commands.deps import deps_command
from dwtguard.cli.commands.detach import detach_command
from dwtguard.cli.commands.guard import guard_command
from dwtguard.cli.commands.library import library_command
from dwtguard.cli.commands.new import new_command
from dwtguard.cli.commands.rename_template import rename_template_command
from dwtguard.cli.commands.repeat import repeat_command
from dwtguard.cli.commands.set_param import set_param_command
from dwtguard.cli.commands.show import show_command
from dwtguard.cli.commands.version import version_command
from dwtguard.cli.console import ClickConsole
from dwtguard.cli.options import (
    CONTEXT_SETTINGS,
    ColorMode,
    common_color_options,
    common_config_options,
    common_verbose_options,
    resolve_color_mode,
    resolve_verbosity,
)
from dwtguard.config.logging import get_logger, resolve_env_log_level, setup_logging

if TYPE_CHECKING:
    from dwtguard.cli.console import ConsoleLike
    from dwtguard.config.logging import DwtGuardLogger

logger: DwtGuardLogger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
    config_paths: tuple[str, ...],
    no_config: bool,
) -> None:
    """Initialize shared state (verbosity, logging, color, config sources) on ``ctx.obj``.

    ``DWTGUARD_LOG_LEVEL`` takes precedence over ``-v`` for internal logging;
    without either, logging stays at CRITICAL.
    """
    ctx.obj = ctx.obj or {}

    level_cli: int = resolve_verbosity(verbose, quiet)
    ctx.obj["verbosity_level"] = verbose - quiet

    level_env: int | None = resolve_env_log_level()
    if level_env is not None:
        setup_logging(level=level_env)
    else:
        setup_logging(level=level_cli if verbose else None)

    effective_mode: ColorMode = (
        ColorMode.NEVER if no_color else ColorMode(color_mode) if color_mode else ColorMode.AUTO
    )
    enable_color: bool = resolve_color_mode(cli_mode=effective_mode, output_format=None)
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color
    ctx.obj["console"] = ClickConsole(enable_color=enable_color)

    ctx.obj["config_paths"] = config_paths
    ctx.obj["no_config"] = no_config


@click.group(
    cls=click.Group,
    context_settings=CONTEXT_SETTINGS,
    invoke_without_command=True,
    help="DwtGuard: parse, protect and regenerate Dreamweaver template pages.",
)
@common_verbose_options
@common_color_options
@common_config_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
    config_paths: tuple[str, ...],
    no_config: bool,
) -> None:
    """Entry point for the DwtGuard CLI."""
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        color_mode=color_mode,
        no_color=no_color,
        config_paths=config_paths,
        no_config=no_config,
    )
    console: ConsoleLike = ctx.obj["console"]

    if ctx.invoked_subcommand is None:
        console.print("Hint: use 'dwtguard show FILE' to inspect a template or instance.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(version_command)
cli.add_command(show_command)
cli.add_command(new_command)
cli.add_command(apply_command)
cli.add_command(set_param_command)
cli.add_command(repeat_command)
cli.add_command(detach_command)
cli.add_command(rename_template_command)
cli.add_command(library_command)
cli.add_command(check_command)
cli.add_command(guard_command)
cli.add_command(deps_command)

if __name__ == "__main__":
    cli()
