# topmark:header:start
#
#   project      : DwtGuard
#   file         : parser.py
#   file_relpath : src/dwtguard/parser/parser.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Document parser: raw text in, `ParseResult` out.

`parse_document` is a total function. Unbalanced or malformed markers yield fewer
regions for the affected family, never an exception. Every paired family goes
through `dwtguard.core.markers.find_pairs`, so pairing semantics are identical
for editable, conditional, optional, repeat and library-item markers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dwtguard.config.logging import get_logger
from dwtguard.core import markers as mk
from dwtguard.core.ranges import TextRange
from dwtguard.parser.types import (
    ConditionalRegion,
    EditableRegion,
    FileType,
    InstanceParam,
    LibraryItem,
    OptionalRegion,
    ParamType,
    ParseResult,
    ProtectedRegion,
    RepeatEntry,
    RepeatRegion,
    TemplateDeclaration,
    TemplateVariable,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dwtguard.config.logging import DwtGuardLogger
    from dwtguard.core.markers import MarkerFamily, MarkerPair

logger: DwtGuardLogger = get_logger(__name__)


def detect_file_type(text: str) -> FileType:
    """Classify ``text`` by marker presence.

    Args:
        text (str): Document text.

    Returns:
        FileType: INSTANCE if an ``InstanceBegin`` or instance editable marker is
        present, else TEMPLATE if a template editable marker is present, else NONE.
    """
    if mk.INSTANCE_SNIFF.search(text) or mk.INSTANCE_EDITABLE_SNIFF.search(text):
        return FileType.INSTANCE
    if mk.TEMPLATE_EDITABLE_SNIFF.search(text):
        return FileType.TEMPLATE
    return FileType.NONE


def _editable_regions(
    family: MarkerFamily,
    text: str,
    *,
    start: int = 0,
    end: int | None = None,
) -> tuple[EditableRegion, ...]:
    pairs: list[MarkerPair] = mk.find_pairs(family, text, start=start, end=end)
    return tuple(
        EditableRegion(
            name=p.begin.value,
            begin_marker_range=p.begin_range,
            end_marker_range=p.end_range,
            content_range=p.content_range,
            full_range=p.full_range,
        )
        for p in pairs
    )


def compute_protected_regions(
    length: int,
    editable_regions: Sequence[EditableRegion],
    library_items: Sequence[LibraryItem] = (),
) -> tuple[ProtectedRegion, ...]:
    """Return the complement of the editable content ranges, plus library item bodies.

    Args:
        length (int): Length of the document text.
        editable_regions (Sequence[EditableRegion]): Editable regions in any order.
        library_items (Sequence[LibraryItem]): Library items whose content is always locked.

    Returns:
        tuple[ProtectedRegion, ...]: Non-empty gaps in document order, followed by the
        library item content ranges.
    """
    protected: list[ProtectedRegion] = []
    if not editable_regions:
        protected.append(ProtectedRegion(TextRange(0, length)))
    else:
        ordered: list[TextRange] = sorted(r.content_range for r in editable_regions)
        cursor: int = 0
        for rng in ordered:
            if rng.start > cursor:
                protected.append(ProtectedRegion(TextRange(cursor, rng.start)))
            cursor = max(cursor, rng.end)
        if length > cursor:
            protected.append(ProtectedRegion(TextRange(cursor, length)))

    protected.extend(ProtectedRegion(item.content_range) for item in library_items)
    return tuple(protected)


def _instance_params(text: str) -> tuple[InstanceParam, ...]:
    params: list[InstanceParam] = []
    for m in mk.INSTANCE_PARAM.finditer(text):
        full: TextRange = TextRange(m.start(), m.end())
        value_match = mk.VALUE_ATTRIBUTE.search(m.group(0))
        if value_match is not None:
            value_start: int = m.start() + value_match.start(1)
            value_range: TextRange = TextRange(value_start, value_start + len(value_match.group(1)))
        else:
            value_range = full
        raw_type: str = m.group(2)
        params.append(
            InstanceParam(
                name=m.group(1),
                type=ParamType.coerce(raw_type),
                raw_type=raw_type,
                value=m.group(3),
                range=full,
                value_range=value_range,
            )
        )
    return tuple(params)


def _template_declaration(text: str) -> TemplateDeclaration | None:
    m = mk.INSTANCE_BEGIN.search(text)
    if m is None:
        return None
    return TemplateDeclaration(
        template_path=m.group(1),
        code_outside_html_is_locked=m.group(2) != "false",
        range=TextRange(m.start(), m.end()),
    )


def variable_name(expression: str) -> str:
    """Return the parameter name referenced by a ``@@(...)@@`` expression.

    ``_document['Name']`` is normalized to ``Name``; any other expression is
    returned stripped of surrounding whitespace.
    """
    stripped: str = expression.strip()
    accessor = mk.DOCUMENT_ACCESSOR.match(stripped)
    if accessor is not None:
        return accessor.group(1)
    return stripped


def _template_variables(text: str) -> tuple[TemplateVariable, ...]:
    return tuple(
        TemplateVariable(
            name=variable_name(m.group(1)),
            expression=m.group(1),
            range=TextRange(m.start(), m.end()),
        )
        for m in mk.TEMPLATE_VARIABLE.finditer(text)
    )


def _conditional_regions(text: str) -> tuple[ConditionalRegion, ...]:
    return tuple(
        ConditionalRegion(
            condition=p.begin.value, content_range=p.content_range, full_range=p.full_range
        )
        for p in mk.find_pairs(mk.CONDITIONAL, text)
    )


def _optional_regions(text: str) -> tuple[OptionalRegion, ...]:
    regions: list[OptionalRegion] = []
    for family in (mk.TEMPLATE_OPTIONAL, mk.INSTANCE_OPTIONAL):
        regions.extend(
            OptionalRegion(
                name=p.begin.value, content_range=p.content_range, full_range=p.full_range
            )
            for p in mk.find_pairs(family, text)
        )
    regions.sort(key=lambda r: r.full_range.start)
    return tuple(regions)


def _repeat_entries(text: str, outer: MarkerPair) -> tuple[RepeatEntry, ...]:
    span: TextRange = outer.content_range
    entries: list[RepeatEntry] = []
    for pair in mk.find_pairs(mk.REPEAT_ENTRY, text, start=span.start, end=span.end):
        inner: TextRange = pair.content_range
        entries.append(
            RepeatEntry(
                editable_regions=_editable_regions(
                    mk.INSTANCE_EDITABLE, text, start=inner.start, end=inner.end
                ),
                content_range=inner,
                full_range=pair.full_range,
            )
        )
    return tuple(entries)


def _repeat_regions(text: str, file_type: FileType) -> tuple[RepeatRegion, ...]:
    if file_type is FileType.INSTANCE:
        return tuple(
            RepeatRegion(
                name=p.begin.value,
                entries=_repeat_entries(text, p),
                begin_marker_range=p.begin_range,
                end_marker_range=p.end_range,
                full_range=p.full_range,
            )
            for p in mk.find_pairs(mk.INSTANCE_REPEAT, text)
        )
    return tuple(
        RepeatRegion(
            name=p.begin.value,
            entries=(),
            begin_marker_range=p.begin_range,
            end_marker_range=p.end_range,
            full_range=p.full_range,
        )
        for p in mk.find_pairs(mk.TEMPLATE_REPEAT, text)
    )


def _library_items(text: str) -> tuple[LibraryItem, ...]:
    return tuple(
        LibraryItem(
            path=p.begin.value,
            begin_marker_range=p.begin_range,
            end_marker_range=p.end_range,
            content_range=p.content_range,
            full_range=p.full_range,
        )
        for p in mk.find_pairs(mk.LIBRARY_ITEM, text)
    )


def parse_document(text: str) -> ParseResult:
    """Parse ``text`` into a complete structural model.

    Args:
        text (str): Document text snapshot.

    Returns:
        ParseResult: The parsed model. Never raises on malformed markup.
    """
    file_type: FileType = detect_file_type(text)
    if file_type is FileType.NONE:
        logger.trace("No DWT markers found (%d chars)", len(text))
        return ParseResult(file_type=FileType.NONE)

    is_instance: bool = file_type is FileType.INSTANCE
    editable: tuple[EditableRegion, ...] = _editable_regions(
        mk.INSTANCE_EDITABLE if is_instance else mk.TEMPLATE_EDITABLE, text
    )
    library_items: tuple[LibraryItem, ...] = _library_items(text)

    result = ParseResult(
        file_type=file_type,
        editable_regions=editable,
        protected_regions=compute_protected_regions(len(text), editable, library_items),
        instance_params=_instance_params(text) if is_instance else (),
        template_declaration=_template_declaration(text) if is_instance else None,
        template_variables=_template_variables(text),
        conditional_regions=_conditional_regions(text),
        optional_regions=_optional_regions(text),
        repeat_regions=_repeat_regions(text, file_type),
        library_items=library_items,
    )
    logger.debug(
        "Parsed %s document: %d editable, %d protected, %d params, %d repeats",
        file_type.value,
        len(result.editable_regions),
        len(result.protected_regions),
        len(result.instance_params),
        len(result.repeat_regions),
    )
    return result
