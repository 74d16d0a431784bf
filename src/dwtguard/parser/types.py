# topmark:header:start
#
#   project      : DwtGuard
#   file         : types.py
#   file_relpath : src/dwtguard/parser/types.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Structural model produced by `dwtguard.parser.parser.parse_document`.

All types are frozen dataclasses; collections are tuples. A `ParseResult` is
derived from one text snapshot and must be recomputed when the text changes.

Sections:
    FileType, ParamType:
        Enumerations for the document kind and instance parameter types.
    Region types:
        EditableRegion, ProtectedRegion, InstanceParam, TemplateDeclaration,
        TemplateVariable, ConditionalRegion, OptionalRegion, RepeatEntry,
        RepeatRegion, LibraryItem.
    ParseResult:
        Aggregate of all of the above.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from yachalk import chalk

from dwtguard.core.ranges import TextRange
from dwtguard.utils.colored_enum import ColoredStrEnum


class FileType(ColoredStrEnum):
    """Document kind, derived purely from marker presence."""

    TEMPLATE = ("template", chalk.cyan)
    INSTANCE = ("instance", chalk.green)
    NONE = ("none", chalk.gray)


class ParamType(ColoredStrEnum):
    """Declared type of a template or instance parameter."""

    TEXT = ("text", chalk.white)
    COLOR = ("color", chalk.magenta)
    BOOLEAN = ("boolean", chalk.yellow)
    NUMBER = ("number", chalk.blue)
    URL = ("URL", chalk.cyan)

    @classmethod
    def parse(cls, raw: str) -> ParamType | None:
        """Return the member matching ``raw`` (case-insensitive), or None if unknown."""
        lowered: str = raw.lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return None

    @classmethod
    def coerce(cls, raw: str) -> ParamType:
        """Return the member matching ``raw``, falling back to `ParamType.TEXT`."""
        return cls.parse(raw) or cls.TEXT


@dataclass(frozen=True, slots=True)
class EditableRegion:
    """A named span an instance page may customize.

    Attributes:
        name (str): Region name (not necessarily unique).
        begin_marker_range (TextRange): The begin marker comment.
        end_marker_range (TextRange): The end marker comment.
        content_range (TextRange): Text strictly between the markers.
        full_range (TextRange): From the begin marker start to the end marker end.
    """

    name: str
    begin_marker_range: TextRange
    end_marker_range: TextRange
    content_range: TextRange
    full_range: TextRange


@dataclass(frozen=True, slots=True)
class ProtectedRegion:
    """A span not covered by any editable content range."""

    range: TextRange


@dataclass(frozen=True, slots=True)
class InstanceParam:
    """An ``InstanceParam`` marker.

    Attributes:
        name (str): Parameter name.
        type (ParamType): Typed parameter kind (unknown strings map to TEXT).
        raw_type (str): Type string exactly as written in the document.
        value (str): Raw value string.
        range (TextRange): The whole marker comment.
        value_range (TextRange): The characters between the quotes of ``value="..."``.
    """

    name: str
    type: ParamType
    raw_type: str
    value: str
    range: TextRange
    value_range: TextRange


@dataclass(frozen=True, slots=True)
class TemplateDeclaration:
    """The ``InstanceBegin`` marker declaring the page's template."""

    template_path: str
    code_outside_html_is_locked: bool
    range: TextRange


@dataclass(frozen=True, slots=True)
class TemplateVariable:
    """A ``@@(name)@@`` or ``@@(_document['name'])@@`` reference.

    Attributes:
        name (str): Normalized parameter name.
        expression (str): Raw text between the parentheses.
        range (TextRange): The whole reference including the ``@@`` delimiters.
    """

    name: str
    expression: str
    range: TextRange


@dataclass(frozen=True, slots=True)
class ConditionalRegion:
    """A ``TemplateBeginIf`` block; ``condition`` is kept unparsed."""

    condition: str
    content_range: TextRange
    full_range: TextRange


@dataclass(frozen=True, slots=True)
class OptionalRegion:
    """An optional block (template or instance form)."""

    name: str
    content_range: TextRange
    full_range: TextRange


@dataclass(frozen=True, slots=True)
class RepeatEntry:
    """One entry of an instance-side repeat region."""

    editable_regions: tuple[EditableRegion, ...]
    content_range: TextRange
    full_range: TextRange


@dataclass(frozen=True, slots=True)
class RepeatRegion:
    """A repeat block; template-side repeats have no entries."""

    name: str
    entries: tuple[RepeatEntry, ...]
    begin_marker_range: TextRange
    end_marker_range: TextRange
    full_range: TextRange

    @property
    def content_range(self) -> TextRange:
        """Text strictly between the outer repeat markers."""
        return TextRange(self.begin_marker_range.end, self.end_marker_range.start)


@dataclass(frozen=True, slots=True)
class LibraryItem:
    """A ``#BeginLibraryItem`` inclusion; its content is always protected."""

    path: str
    begin_marker_range: TextRange
    end_marker_range: TextRange
    content_range: TextRange
    full_range: TextRange


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Complete structural model of one text snapshot.

    A `FileType.NONE` result carries empty collections everywhere, including
    ``protected_regions``: a document without markers has nothing to protect.
    """

    file_type: FileType
    editable_regions: tuple[EditableRegion, ...] = ()
    protected_regions: tuple[ProtectedRegion, ...] = ()
    instance_params: tuple[InstanceParam, ...] = ()
    template_declaration: TemplateDeclaration | None = None
    template_variables: tuple[TemplateVariable, ...] = ()
    conditional_regions: tuple[ConditionalRegion, ...] = ()
    optional_regions: tuple[OptionalRegion, ...] = ()
    repeat_regions: tuple[RepeatRegion, ...] = ()
    library_items: tuple[LibraryItem, ...] = ()

    @property
    def is_instance(self) -> bool:
        """Return True if the document declares a template (``InstanceBegin``)."""
        return self.template_declaration is not None

    def find_editable(self, name: str) -> EditableRegion | None:
        """Return the first editable region named ``name`` in document order."""
        return next((r for r in self.editable_regions if r.name == name), None)

    def find_param(self, name: str) -> InstanceParam | None:
        """Return the first instance parameter named ``name``."""
        return next((p for p in self.instance_params if p.name == name), None)

    def find_repeat(self, name: str) -> RepeatRegion | None:
        """Return the first repeat region named ``name``."""
        return next((r for r in self.repeat_regions if r.name == name), None)

    def to_dict(self, text: str | None = None) -> dict[str, Any]:
        """Return a JSON-friendly representation of the model.

        Args:
            text (str | None): The parsed text; when given, editable contents are
                included alongside their ranges.

        Returns:
            dict[str, Any]: Plain dict/list/str/int structure.
        """

        def editable(r: EditableRegion) -> dict[str, Any]:
            out: dict[str, Any] = {
                "name": r.name,
                "content_range": r.content_range.to_dict(),
                "full_range": r.full_range.to_dict(),
            }
            if text is not None:
                out["content"] = r.content_range.slice(text)
            return out

        decl: TemplateDeclaration | None = self.template_declaration
        return {
            "file_type": self.file_type.value,
            "template": None
            if decl is None
            else {
                "path": decl.template_path,
                "code_outside_html_is_locked": decl.code_outside_html_is_locked,
                "range": decl.range.to_dict(),
            },
            "editable_regions": [editable(r) for r in self.editable_regions],
            "protected_regions": [p.range.to_dict() for p in self.protected_regions],
            "params": [
                {
                    "name": p.name,
                    "type": p.raw_type,
                    "value": p.value,
                    "range": p.range.to_dict(),
                }
                for p in self.instance_params
            ],
            "variables": [
                {"name": v.name, "range": v.range.to_dict()} for v in self.template_variables
            ],
            "conditionals": [
                {"condition": c.condition, "full_range": c.full_range.to_dict()}
                for c in self.conditional_regions
            ],
            "optionals": [
                {"name": o.name, "full_range": o.full_range.to_dict()}
                for o in self.optional_regions
            ],
            "repeats": [
                {
                    "name": r.name,
                    "full_range": r.full_range.to_dict(),
                    "entries": [
                        {
                            "full_range": e.full_range.to_dict(),
                            "editable_regions": [editable(x) for x in e.editable_regions],
                        }
                        for e in r.entries
                    ],
                }
                for r in self.repeat_regions
            ],
            "library_items": [
                {"path": li.path, "content_range": li.content_range.to_dict()}
                for li in self.library_items
            ],
        }
