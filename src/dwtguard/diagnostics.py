# topmark:header:start
#
#   project      : DwtGuard
#   file         : diagnostics.py
#   file_relpath : src/dwtguard/diagnostics.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Static checks over template and instance documents.

Sections:
    * DiagnosticLevel: severity levels with associated terminal colors.
    * Diagnostic: immutable finding (level, message, optional range).
    * DiagnosticStats: aggregated per-level counts.
    * diagnose_document: run every check against one document.

Checks performed:
    * the declared template cannot be found on disk (warning);
    * begin markers left without a matching end marker, per family (warning);
    * editable region names used more than once (info);
    * parameter types outside text/color/boolean/number/URL (warning).
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, cast

from yachalk import chalk

from dwtguard.config.logging import get_logger
from dwtguard.core.markers import ALL_FAMILIES, pair_markers, scan_markers
from dwtguard.parser.parser import parse_document
from dwtguard.parser.types import FileType, ParamType
from dwtguard.template.paths import resolve_site_path
from dwtguard.template.resolver import parse_template_params

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

    from dwtguard.config.logging import DwtGuardLogger
    from dwtguard.config.model import Config
    from dwtguard.core.markers import MarkerFamily, MarkerMatch
    from dwtguard.core.ranges import TextRange
    from dwtguard.parser.types import ParseResult

logger: DwtGuardLogger = get_logger(__name__)


class DiagnosticLevel(Enum):
    """Severity levels, ordered by importance: ERROR > WARNING > INFO."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def color(self) -> Callable[[str], str]:
        """Return the `yachalk` color function associated with this severity level."""
        return cast(
            "Callable[[str], str]",
            {
                DiagnosticLevel.INFO: chalk.blue,
                DiagnosticLevel.WARNING: chalk.yellow,
                DiagnosticLevel.ERROR: chalk.red_bright,
            }[self],
        )


@dataclass(frozen=True)
class Diagnostic:
    """A single finding.

    Attributes:
        level (DiagnosticLevel): Severity.
        message (str): Human-readable message.
        range (TextRange | None): Offending span, when the finding has one.
    """

    level: DiagnosticLevel
    message: str
    range: TextRange | None = None


@dataclass(frozen=True)
class DiagnosticStats:
    """Aggregated counts for diagnostics by severity level."""

    n_info: int
    n_warning: int
    n_error: int

    @property
    def total(self) -> int:
        """Return the total count of diagnostics."""
        return self.n_info + self.n_warning + self.n_error


def compute_diagnostic_stats(diagnostics: Iterable[Diagnostic]) -> DiagnosticStats:
    """Count diagnostics per level."""
    counts: Counter[DiagnosticLevel] = Counter(d.level for d in diagnostics)
    return DiagnosticStats(
        n_info=counts[DiagnosticLevel.INFO],
        n_warning=counts[DiagnosticLevel.WARNING],
        n_error=counts[DiagnosticLevel.ERROR],
    )


def _unpaired_begins(family: MarkerFamily, text: str) -> list[MarkerMatch]:
    begins: list[MarkerMatch] = scan_markers(family.begin, text)
    ends: list[MarkerMatch] = scan_markers(family.end, text)
    paired: set[int] = {p.begin.start for p in pair_markers(begins, ends)}
    return [b for b in begins if b.start not in paired]


def diagnose_document(
    text: str,
    path: Path | None = None,
    *,
    config: Config | None = None,
    parse_result: ParseResult | None = None,
) -> list[Diagnostic]:
    """Run every static check against one document.

    Args:
        text (str): Document text.
        path (Path | None): Location on disk; the template check needs it.
        config (Config | None): Supplies site roots for template resolution.
        parse_result (ParseResult | None): Reuse an existing parse of ``text``.

    Returns:
        list[Diagnostic]: Findings in check order.
    """
    result: ParseResult = parse_result if parse_result is not None else parse_document(text)
    findings: list[Diagnostic] = []

    decl = result.template_declaration
    if decl is not None and path is not None:
        roots: tuple[Path, ...] = config.site_roots if config is not None else ()
        if resolve_site_path(path, decl.template_path, roots=roots) is None:
            findings.append(
                Diagnostic(
                    DiagnosticLevel.WARNING,
                    f'Cannot resolve template: "{decl.template_path}"',
                    decl.range,
                )
            )

    for family in ALL_FAMILIES:
        for begin in _unpaired_begins(family, text):
            findings.append(
                Diagnostic(
                    DiagnosticLevel.WARNING,
                    f"Unpaired {family.name} begin marker"
                    + (f' "{begin.value}"' if begin.value else ""),
                    begin.range,
                )
            )

    if result.file_type is not FileType.NONE:
        # Repeat entries legitimately reuse the same region names
        repeats: list[TextRange] = [r.full_range for r in result.repeat_regions]
        seen: set[str] = set()
        for region in result.editable_regions:
            if any(span.contains(region.full_range) for span in repeats):
                continue
            if region.name not in seen:
                seen.add(region.name)
                continue
            findings.append(
                Diagnostic(
                    DiagnosticLevel.INFO,
                    f'Duplicate editable region "{region.name}"; the first one is used',
                    region.full_range,
                )
            )

    for param in result.instance_params:
        if ParamType.parse(param.raw_type) is None:
            findings.append(
                Diagnostic(
                    DiagnosticLevel.WARNING,
                    f'Parameter "{param.name}" has unknown type "{param.raw_type}"',
                    param.range,
                )
            )
    for definition in parse_template_params(text):
        if ParamType.parse(definition.type) is None:
            findings.append(
                Diagnostic(
                    DiagnosticLevel.WARNING,
                    f'Template parameter "{definition.name}" has unknown type "{definition.type}"',
                )
            )

    logger.debug("%s: %d diagnostic(s)", path or "<text>", len(findings))
    return findings
