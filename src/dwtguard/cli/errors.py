# topmark:header:start
#
#   project      : DwtGuard
#   file         : errors.py
#   file_relpath : src/dwtguard/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the DwtGuard CLI.

Usage:
    Raise these exceptions in CLI commands to signal errors with standardized
    messages and exit codes. Library errors from `dwtguard.core.errors` are
    translated with `to_cli_error`.

Styling:
    Exceptions prefer the project console if available (see `show()`); if no
    console is present in the Click context, they fall back to Click's default
    styling.
"""

from __future__ import annotations

from typing import IO, Any

import click

from dwtguard.cli.exit_codes import ExitCode
from dwtguard.core.errors import (
    ConfigError,
    DocumentIOError,
    DwtGuardError,
    NotAnInstanceError,
    UnknownParameterError,
    UnresolvedTemplateError,
)


class DwtGuardCliError(click.ClickException):
    """Base class for all DwtGuard CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:  # pragma: no cover - trivial
        """Return the plain error message text (colorization happens in `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:  # pragma: no cover - Click prints errors
        """Display the error using the project console if available."""
        ctx: click.Context | None = click.get_current_context(silent=True)
        if ctx is not None and isinstance(ctx.obj, dict):
            console = ctx.obj.get("console")
            if console is not None:
                console.error(console.styled(f"Error: {self.format_message()}", fg="bright_red"))
                return
        super().show(file)


class DwtGuardUsageError(DwtGuardCliError):
    """Error for command-line invocation errors (invalid flags/args)."""

    exit_code = ExitCode.USAGE_ERROR


class DwtGuardConfigError(DwtGuardCliError):
    """Error for configuration errors (missing/invalid/malformed config)."""

    exit_code = ExitCode.CONFIG_ERROR


class DwtGuardFileNotFoundError(DwtGuardCliError):
    """Error when an input path or declared template does not exist."""

    exit_code = ExitCode.FILE_NOT_FOUND


class DwtGuardPermissionDeniedError(DwtGuardCliError):
    """Error for insufficient permissions (read/write)."""

    exit_code = ExitCode.PERMISSION_DENIED


class DwtGuardIOError(DwtGuardCliError):
    """Error for I/O errors reading/writing files."""

    exit_code = ExitCode.IO_ERROR


class DwtGuardEncodingError(DwtGuardCliError):
    """Error for text decoding/encoding errors."""

    exit_code = ExitCode.ENCODING_ERROR


class DwtGuardUnsupportedFileTypeError(DwtGuardCliError):
    """Error when a document is not of the kind a command operates on."""

    exit_code = ExitCode.UNSUPPORTED_FILE_TYPE


class DwtGuardPipelineError(DwtGuardCliError):
    """Error for internal failures."""

    exit_code = ExitCode.PIPELINE_ERROR


class DwtGuardUnexpectedError(DwtGuardCliError):
    """Error for unhandled/unknown errors (last resort)."""

    exit_code = ExitCode.UNEXPECTED_ERROR


def to_cli_error(exc: DwtGuardError) -> DwtGuardCliError:
    """Translate a library error into the matching CLI error.

    Exit code mapping:
        FILE_NOT_FOUND → UnresolvedTemplateError, missing files
        UNSUPPORTED_FILE_TYPE → NotAnInstanceError
        USAGE_ERROR → UnknownParameterError
        CONFIG_ERROR → ConfigError
        PERMISSION_DENIED / ENCODING_ERROR / IO_ERROR → DocumentIOError by cause
        PIPELINE_ERROR → any other DwtGuardError
    """
    message: str = str(exc)
    if isinstance(exc, UnresolvedTemplateError):
        return DwtGuardFileNotFoundError(message)
    if isinstance(exc, NotAnInstanceError):
        return DwtGuardUnsupportedFileTypeError(message)
    if isinstance(exc, UnknownParameterError):
        return DwtGuardUsageError(message)
    if isinstance(exc, ConfigError):
        return DwtGuardConfigError(message)
    if isinstance(exc, DocumentIOError):
        cause: OSError | UnicodeError = exc.cause
        if isinstance(cause, (FileNotFoundError, IsADirectoryError)):
            return DwtGuardFileNotFoundError(message)
        if isinstance(cause, PermissionError):
            return DwtGuardPermissionDeniedError(message)
        if isinstance(cause, UnicodeError):
            return DwtGuardEncodingError(message)
        return DwtGuardIOError(message)
    return DwtGuardPipelineError(message)
