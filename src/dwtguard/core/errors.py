# topmark:header:start
#
#   project      : DwtGuard
#   file         : errors.py
#   file_relpath : src/dwtguard/core/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Typed exceptions raised at the file boundary.

The parser, resolver and path rewriter are total over malformed markup and never
raise. These exceptions cover the failures that happen around them: a declared
template that cannot be located on disk, a document that is not an instance,
an unknown parameter name, and I/O or decoding errors.

The CLI maps each of them onto a `DwtGuardCliError` subclass with a
sysexits-aligned exit code (see `dwtguard.cli.errors`).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class DwtGuardError(RuntimeError):
    """Base class for all non-CLI DwtGuard errors."""


class UnresolvedTemplateError(DwtGuardError):
    """The template declared by a document could not be found on disk.

    Callers must not produce partial output when this is raised.

    Attributes:
        template_path (str): The site-relative template path as declared.
        referencing_file (Path | None): The document that declares it, if known.
    """

    def __init__(self, template_path: str, referencing_file: Path | None = None) -> None:
        self.template_path: str = template_path
        self.referencing_file: Path | None = referencing_file
        where: str = f" (referenced from {referencing_file})" if referencing_file else ""
        super().__init__(f"Cannot resolve template: {template_path}{where}")


class NotAnInstanceError(DwtGuardError):
    """The document carries no ``InstanceBegin`` declaration."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path: Path | str | None = path
        label: str = str(path) if path is not None else "<document>"
        super().__init__(f"{label} is not a template instance (no InstanceBegin declaration)")


class UnknownParameterError(DwtGuardError):
    """The parameter is not declared by the instance document."""

    def __init__(self, name: str, path: Path | str | None = None) -> None:
        self.name: str = name
        self.path: Path | str | None = path
        where: str = f" in {path}" if path is not None else ""
        super().__init__(f"Unknown instance parameter '{name}'{where}")


class DocumentIOError(DwtGuardError):
    """Reading or writing a document failed.

    Attributes:
        path (Path): The affected file.
        cause (OSError | UnicodeError): The underlying error.
    """

    def __init__(self, path: Path, cause: OSError | UnicodeError) -> None:
        self.path: Path = path
        self.cause: OSError | UnicodeError = cause
        super().__init__(f"Cannot access {path}: {cause}")


class ConfigError(DwtGuardError):
    """Configuration file is malformed or holds values of the wrong type."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path: Path | None = path
        prefix: str = f"{path}: " if path is not None else ""
        super().__init__(f"{prefix}{message}")
