# topmark:header:start
#
#   project      : DwtGuard
#   file         : updater.py
#   file_relpath : src/dwtguard/template/updater.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Instance-level operations built on the parser and the resolver.

Every function here takes text and returns text; reading and writing files is
left to the caller (see `dwtguard.cli`). The typical regeneration round trip is:

    1. `extract_instance_state` pulls parameters, editable contents and repeat
       entries out of the current instance text;
    2. the state is fed back into `resolve_template` together with the template.

Besides re-application, this module offers the smaller edits an editor would
offer on an instance: updating one parameter, adding, removing or moving repeat
entries, retargeting the template reference and exporting plain HTML.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Final

from dwtguard.config.logging import get_logger
from dwtguard.constants import DEFAULT_MAX_CONDITIONAL_PASSES
from dwtguard.core.errors import NotAnInstanceError, UnknownParameterError
from dwtguard.parser.parser import parse_document
from dwtguard.template.resolver import ResolveOptions, resolve_template
from dwtguard.utils.fileio import detect_newline, normalize_newlines

if TYPE_CHECKING:
    from dwtguard.config.logging import DwtGuardLogger
    from dwtguard.core.ranges import TextRange
    from dwtguard.parser.types import (
        InstanceParam,
        ParseResult,
        RepeatEntry,
        RepeatRegion,
        TemplateDeclaration,
    )

logger: DwtGuardLogger = get_logger(__name__)


@dataclass(frozen=True)
class InstanceState:
    """Everything an instance contributes to a template re-resolution.

    Attributes:
        template_path (str): Declared site path of the template.
        code_outside_html_is_locked (bool): Lock flag of the declaration.
        params (dict[str, str]): Parameter values in document order.
        param_types (dict[str, str]): Parameter types as written.
        editable_contents (dict[str, str]): Contents of top-level editable regions.
        repeat_entries (dict[str, list[dict[str, str]]]): Per repeat region, the
            editable contents of each entry in order.
    """

    template_path: str
    code_outside_html_is_locked: bool = True
    params: dict[str, str] = field(default_factory=dict)
    param_types: dict[str, str] = field(default_factory=dict)
    editable_contents: dict[str, str] = field(default_factory=dict)
    repeat_entries: dict[str, list[dict[str, str]]] = field(default_factory=dict)


def _entry_contents(text: str, entry: RepeatEntry) -> dict[str, str]:
    contents: dict[str, str] = {}
    for region in entry.editable_regions:
        contents.setdefault(region.name, region.content_range.slice(text))
    return contents


def extract_instance_state(text: str, parse_result: ParseResult | None = None) -> InstanceState:
    """Collect the state of an instance document.

    Editable regions that live inside a repeat region belong to that repeat's
    entries and are not reported as top-level contents. When a name occurs more
    than once, the first occurrence wins.

    Args:
        text (str): Instance text.
        parse_result (ParseResult | None): Parse of ``text``, if already available.

    Returns:
        InstanceState: The extracted state.

    Raises:
        NotAnInstanceError: If ``text`` has no ``InstanceBegin`` declaration.
    """
    result: ParseResult = parse_result if parse_result is not None else parse_document(text)
    decl: TemplateDeclaration | None = result.template_declaration
    if decl is None:
        raise NotAnInstanceError()

    params: dict[str, str] = {}
    param_types: dict[str, str] = {}
    for p in result.instance_params:
        params[p.name] = p.value
        param_types[p.name] = p.raw_type

    repeat_spans: list[TextRange] = [r.full_range for r in result.repeat_regions]
    editable_contents: dict[str, str] = {}
    for region in result.editable_regions:
        if any(span.contains(region.full_range) for span in repeat_spans):
            continue
        editable_contents.setdefault(region.name, region.content_range.slice(text))

    repeat_entries: dict[str, list[dict[str, str]]] = {}
    for repeat in result.repeat_regions:
        repeat_entries.setdefault(repeat.name, [_entry_contents(text, e) for e in repeat.entries])

    return InstanceState(
        template_path=decl.template_path,
        code_outside_html_is_locked=decl.code_outside_html_is_locked,
        params=params,
        param_types=param_types,
        editable_contents=editable_contents,
        repeat_entries=repeat_entries,
    )


def _resolve(options: ResolveOptions, newline: str) -> str:
    """Resolve on LF-normalized template text, then end every line with ``newline``."""
    lf_options: ResolveOptions = replace(
        options, template_text=normalize_newlines(options.template_text, "\n")
    )
    return normalize_newlines(resolve_template(lf_options), newline)


def apply_template(
    instance_text: str,
    template_text: str,
    *,
    template_path: str | None = None,
    instance_path: str | None = None,
    max_conditional_passes: int = DEFAULT_MAX_CONDITIONAL_PASSES,
) -> str:
    """Re-resolve an instance against (a possibly changed) template.

    Args:
        instance_text (str): Current instance text.
        template_text (str): Current template text.
        template_path (str | None): Site path to declare; defaults to the declared one.
        instance_path (str | None): Site path of the instance, for URL rebasing.
        max_conditional_passes (int): Cap on conditional resolution passes.

    Returns:
        str: The regenerated instance text.

    Raises:
        NotAnInstanceError: If ``instance_text`` is not a template instance.
    """
    state: InstanceState = extract_instance_state(instance_text)
    return _resolve(
        ResolveOptions(
            template_text=template_text,
            template_path=template_path or state.template_path,
            params=state.params,
            param_types=state.param_types,
            editable_contents=state.editable_contents,
            code_outside_html_is_locked=state.code_outside_html_is_locked,
            instance_path=instance_path,
            repeat_entries=state.repeat_entries,
            max_conditional_passes=max_conditional_passes,
        ),
        detect_newline(instance_text),
    )


def new_instance(
    template_text: str,
    *,
    template_path: str,
    instance_path: str | None = None,
    lock_code_outside_html: bool = True,
    max_conditional_passes: int = DEFAULT_MAX_CONDITIONAL_PASSES,
) -> str:
    """Create a fresh instance using template defaults only, in the template's newline."""
    return _resolve(
        ResolveOptions(
            template_text=template_text,
            template_path=template_path,
            code_outside_html_is_locked=lock_code_outside_html,
            instance_path=instance_path,
            max_conditional_passes=max_conditional_passes,
        ),
        detect_newline(template_text),
    )


def escape_attribute_value(value: str) -> str:
    """Escape double quotes, which would terminate a marker attribute."""
    return value.replace('"', "&quot;")


def update_instance_param(
    instance_text: str,
    name: str,
    value: str,
    *,
    template_text: str | None = None,
    instance_path: str | None = None,
    max_conditional_passes: int = DEFAULT_MAX_CONDITIONAL_PASSES,
) -> str:
    """Change the value of one instance parameter.

    With ``template_text`` the whole instance is re-resolved, so conditionals,
    optional regions and variables reflect the new value. Without it, only the
    quoted value of the ``InstanceParam`` marker is replaced.

    Args:
        instance_text (str): Current instance text.
        name (str): Parameter name.
        value (str): New raw value (double quotes are escaped).
        template_text (str | None): Template to re-apply, if available.
        instance_path (str | None): Site path of the instance, for URL rebasing.
        max_conditional_passes (int): Cap on conditional resolution passes.

    Returns:
        str: The updated instance text.

    Raises:
        NotAnInstanceError: If ``instance_text`` is not a template instance.
        UnknownParameterError: If the instance does not declare ``name``.
    """
    result: ParseResult = parse_document(instance_text)
    if result.template_declaration is None:
        raise NotAnInstanceError()
    param: InstanceParam | None = result.find_param(name)
    if param is None:
        raise UnknownParameterError(name)

    escaped: str = escape_attribute_value(value)
    if template_text is None:
        logger.debug("No template available; replacing value of '%s' in place", name)
        rng: TextRange = param.value_range
        return instance_text[: rng.start] + escaped + instance_text[rng.end :]

    state: InstanceState = extract_instance_state(instance_text, result)
    params: dict[str, str] = dict(state.params)
    params[name] = escaped
    return _resolve(
        ResolveOptions(
            template_text=template_text,
            template_path=state.template_path,
            params=params,
            param_types=state.param_types,
            editable_contents=state.editable_contents,
            code_outside_html_is_locked=state.code_outside_html_is_locked,
            instance_path=instance_path,
            repeat_entries=state.repeat_entries,
            max_conditional_passes=max_conditional_passes,
        ),
        detect_newline(instance_text),
    )


class MoveDirection(Enum):
    """Direction for `move_repeat_entry`."""

    UP = "up"
    DOWN = "down"


def _find_repeat(text: str, region: str) -> RepeatRegion | None:
    return parse_document(text).find_repeat(region)


def add_repeat_entry(text: str, region: str) -> str:
    """Duplicate the last entry of repeat ``region`` right after it.

    Returns ``text`` unchanged if the region does not exist or has no entries.
    """
    repeat: RepeatRegion | None = _find_repeat(text, region)
    if repeat is None or not repeat.entries:
        return text
    last: TextRange = repeat.entries[-1].full_range
    return text[: last.end] + "\n" + last.slice(text) + text[last.end :]


def remove_repeat_entry(text: str, region: str, index: int) -> str:
    """Remove entry ``index`` of repeat ``region`` with its preceding newline.

    At least one entry is always kept; out-of-range requests are ignored.
    """
    repeat: RepeatRegion | None = _find_repeat(text, region)
    if repeat is None or len(repeat.entries) <= 1:
        return text
    if not 0 <= index < len(repeat.entries):
        return text
    rng: TextRange = repeat.entries[index].full_range
    start: int = rng.start - 1 if rng.start > 0 and text[rng.start - 1] == "\n" else rng.start
    return text[:start] + text[rng.end :]


def move_repeat_entry(text: str, region: str, index: int, direction: MoveDirection) -> str:
    """Swap entry ``index`` of repeat ``region`` with its neighbour.

    Moves past either end are ignored.
    """
    repeat: RepeatRegion | None = _find_repeat(text, region)
    if repeat is None or not 0 <= index < len(repeat.entries):
        return text
    other: int = index - 1 if direction is MoveDirection.UP else index + 1
    if not 0 <= other < len(repeat.entries):
        return text
    first: TextRange = repeat.entries[min(index, other)].full_range
    second: TextRange = repeat.entries[max(index, other)].full_range
    return (
        text[: first.start]
        + second.slice(text)
        + text[first.end : second.start]
        + first.slice(text)
        + text[second.end :]
    )


def retarget_template_reference(text: str, old_path: str, new_path: str) -> str:
    """Point an instance declaring ``old_path`` at ``new_path``.

    The comparison of the declared path with ``old_path`` ignores case; the
    declared spelling is what gets replaced. Text declaring another template is
    returned unchanged.
    """
    result: ParseResult = parse_document(text)
    decl: TemplateDeclaration | None = result.template_declaration
    if decl is None or decl.template_path.lower() != old_path.lower():
        return text
    pattern: re.Pattern[str] = re.compile(
        r'(<!--\s*InstanceBegin\s+template=")' + re.escape(decl.template_path) + '"'
    )
    return pattern.sub(lambda m: f'{m.group(1)}{new_path}"', text, count=1)


_STRIP_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"<!--\s*InstanceBegin\s[\s\S]*?-->"),
    re.compile(r"^[ \t]*<!--\s*InstanceParam[\s\S]*?-->[ \t]*\r?\n", re.MULTILINE),
    re.compile(r"<!--\s*InstanceParam[\s\S]*?-->"),
    re.compile(r"<!--\s*InstanceBeginEditable[\s\S]*?-->"),
    re.compile(r"<!--\s*InstanceEndEditable\s*-->"),
    re.compile(r"<!--\s*InstanceBeginOptional[\s\S]*?-->"),
    re.compile(r"<!--\s*InstanceEndOptional\s*-->"),
    re.compile(r"<!--\s*InstanceBeginRepeat[\s\S]*?-->"),
    re.compile(r"<!--\s*InstanceEndRepeat\s*-->"),
    re.compile(r"<!--\s*InstanceBeginRepeatEntry\s*-->"),
    re.compile(r"<!--\s*InstanceEndRepeatEntry\s*-->"),
    re.compile(r"<!--\s*InstanceEnd\s*-->"),
)
_EXCESS_BLANK_LINES: Final[re.Pattern[str]] = re.compile(r"\n(?:[ \t]*\n){2,}")


def strip_template_markers(text: str) -> str:
    """Remove all instance-family markers, leaving plain HTML.

    ``InstanceParam`` lines standing alone are removed whole. Any run of two or
    more blank lines, including whitespace-only ones, becomes exactly one empty
    line; the whitespace on the collapsed lines is dropped with them.
    """
    for pattern in _STRIP_PATTERNS:
        text = pattern.sub("", text)
    return _EXCESS_BLANK_LINES.sub("\n\n", text)
