# topmark:header:start
#
#   project      : DwtGuard
#   file         : resolver.py
#   file_relpath : src/dwtguard/template/resolver.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Template resolver: template text plus instance state in, instance text out.

`resolve_template` is pure and deterministic. The pipeline runs in a fixed order,
each stage consuming the previous stage's output:

    1. merge ``TemplateParam`` defaults with caller values; drop the declarations
    2. resolve ``TemplateBeginIf`` blocks until stable (innermost first)
    3. keep or delete ``TemplateBeginOptional`` blocks
    4. substitute ``@@(...)@@`` variables
    5. rebase relative URLs (only when an instance path is given)
    6. expand ``TemplateBeginRepeat`` blocks into entries
    7. fill ``TemplateBeginEditable`` blocks
    8. insert ``InstanceBegin`` / ``InstanceParam`` / ``InstanceEnd`` markers

A template that is itself an instance of another template (a nested template)
skips the pipeline: only URL rebasing, editable substitution and parameter
marker refresh are applied.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from dwtguard.config.logging import get_logger
from dwtguard.constants import DEFAULT_MAX_CONDITIONAL_PASSES, DEFAULT_PARAM_TYPE
from dwtguard.core import markers as mk
from dwtguard.parser.parser import variable_name
from dwtguard.template.conditions import evaluate_condition
from dwtguard.template.paths import rewrite_relative_paths

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from dwtguard.config.logging import DwtGuardLogger

logger: DwtGuardLogger = get_logger(__name__)

_CONDITIONAL_BLOCK: Final[re.Pattern[str]] = mk.innermost_block_pattern(mk.CONDITIONAL)
_TEMPLATE_OPTIONAL_BLOCK: Final[re.Pattern[str]] = mk.block_pattern(mk.TEMPLATE_OPTIONAL)
_TEMPLATE_REPEAT_BLOCK: Final[re.Pattern[str]] = mk.block_pattern(mk.TEMPLATE_REPEAT)
_TEMPLATE_EDITABLE_BLOCK: Final[re.Pattern[str]] = mk.block_pattern(mk.TEMPLATE_EDITABLE)
_INSTANCE_EDITABLE_BLOCK: Final[re.Pattern[str]] = mk.block_pattern(mk.INSTANCE_EDITABLE)

_HTML_OPEN: Final[re.Pattern[str]] = re.compile(r"(<html[^>]*>)", re.IGNORECASE)
_HEAD_CLOSE: Final[re.Pattern[str]] = re.compile(r"</head>", re.IGNORECASE)
_HTML_CLOSE_AT_END: Final[re.Pattern[str]] = re.compile(r"</html>\s*\Z")


@dataclass(frozen=True, kw_only=True)
class ResolveOptions:
    """Inputs of `resolve_template`.

    Attributes:
        template_text (str): Raw template (``.dwt``) text.
        template_path (str): Site path of the template, written into ``InstanceBegin``.
        params (Mapping[str, str]): Instance parameter values; override template defaults.
        param_types (Mapping[str, str]): Instance parameter types; override template types.
        editable_contents (Mapping[str, str]): Editable region contents by name.
        code_outside_html_is_locked (bool): Flag written into ``InstanceBegin``.
        instance_path (str | None): Site path of the instance; enables URL rebasing.
        repeat_entries (Mapping[str, Sequence[Mapping[str, str]]] | None): Per repeat
            region, the ordered entries with their editable contents.
        max_conditional_passes (int): Cap on conditional resolution passes.
    """

    template_text: str
    template_path: str
    params: Mapping[str, str] = field(default_factory=dict)
    param_types: Mapping[str, str] = field(default_factory=dict)
    editable_contents: Mapping[str, str] = field(default_factory=dict)
    code_outside_html_is_locked: bool = True
    instance_path: str | None = None
    repeat_entries: Mapping[str, Sequence[Mapping[str, str]]] | None = None
    max_conditional_passes: int = DEFAULT_MAX_CONDITIONAL_PASSES


@dataclass(frozen=True, slots=True)
class TemplateParamDef:
    """A ``TemplateParam`` default declaration."""

    name: str
    type: str
    value: str


def parse_template_params(text: str) -> list[TemplateParamDef]:
    """Return the ``TemplateParam`` declarations of ``text`` in document order."""
    return [
        TemplateParamDef(name=m.group(1), type=m.group(2), value=m.group(3))
        for m in mk.TEMPLATE_PARAM.finditer(text)
    ]


def merge_params(
    defaults: Sequence[TemplateParamDef],
    params: Mapping[str, str],
    param_types: Mapping[str, str],
) -> tuple[dict[str, str], dict[str, str]]:
    """Overlay caller values and types on template defaults.

    Order is defaults first (declaration order), then caller-only names in the
    caller's order. Caller values win on collision.

    Returns:
        tuple[dict[str, str], dict[str, str]]: Merged values and merged types.
    """
    values: dict[str, str] = {d.name: d.value for d in defaults}
    types: dict[str, str] = {d.name: d.type for d in defaults}
    values.update(params)
    types.update(param_types)
    return values, types


def is_nested_template(text: str) -> bool:
    """Return True if the template text is itself an instance of another template."""
    return mk.INSTANCE_BEGIN_PREFIX.search(text) is not None


def resolve_conditionals(text: str, params: Mapping[str, str], *, max_passes: int) -> str:
    """Resolve ``TemplateBeginIf`` blocks from the inside out until stable.

    Args:
        text (str): Text holding conditional blocks.
        params (Mapping[str, str]): Merged parameter values.
        max_passes (int): Upper bound on the number of passes.

    Returns:
        str: Text without resolvable conditional blocks. When the cap is hit, the
        text as of the last pass is returned and a warning is logged.
    """

    def _replace(m: re.Match[str]) -> str:
        return m.group(2) if evaluate_condition(m.group(1), params) else ""

    for n in range(max_passes):
        updated: str = _CONDITIONAL_BLOCK.sub(_replace, text)
        if updated == text:
            logger.trace("Conditionals stable after %d pass(es)", n)
            return text
        text = updated
    if _CONDITIONAL_BLOCK.search(text) is not None:
        logger.warning(
            "Conditional resolution stopped after %d passes: "
            "template contains cyclic or pathologically deep nesting",
            max_passes,
        )
    return text


def resolve_optional_regions(text: str, params: Mapping[str, str]) -> str:
    """Keep (re-wrapped as instance markers) or delete optional blocks."""

    def _replace(m: re.Match[str]) -> str:
        name, content = m.group(1), m.group(2)
        value: str | None = params.get(name)
        if value is not None and value != "true":
            return ""
        return f'<!-- InstanceBeginOptional name="{name}" -->{content}<!-- InstanceEndOptional -->'

    return _TEMPLATE_OPTIONAL_BLOCK.sub(_replace, text)


def resolve_variables(text: str, params: Mapping[str, str]) -> str:
    """Substitute ``@@(Name)@@`` and ``@@(_document['Name'])@@`` references."""
    return mk.TEMPLATE_VARIABLE.sub(lambda m: params.get(variable_name(m.group(1)), ""), text)


def resolve_editable_regions(text: str, editable_contents: Mapping[str, str]) -> str:
    """Replace template editable blocks with instance editable blocks.

    Supplied contents win; otherwise the template's own default content is kept.
    """

    def _replace(m: re.Match[str]) -> str:
        name: str = m.group(1)
        content: str = editable_contents.get(name, m.group(2))
        return f'<!-- InstanceBeginEditable name="{name}" -->{content}<!-- InstanceEndEditable -->'

    return _TEMPLATE_EDITABLE_BLOCK.sub(_replace, text)


def resolve_repeat_regions(
    text: str,
    repeat_entries: Mapping[str, Sequence[Mapping[str, str]]],
) -> str:
    """Expand template repeat blocks into instance repeat entries.

    A region without supplied entries (or with an empty list) gets one entry
    holding the template's default editable contents.
    """

    def _replace(m: re.Match[str]) -> str:
        name, block = m.group(1), m.group(2)
        entries: Sequence[Mapping[str, str]] = repeat_entries.get(name) or ({},)
        body: str = "".join(
            "<!-- InstanceBeginRepeatEntry -->"
            + resolve_editable_regions(block, entry)
            + "<!-- InstanceEndRepeatEntry -->"
            for entry in entries
        )
        logger.trace("Repeat region '%s': %d entr(y/ies)", name, len(entries))
        return f'<!-- InstanceBeginRepeat name="{name}" -->{body}<!-- InstanceEndRepeat -->'

    return _TEMPLATE_REPEAT_BLOCK.sub(_replace, text)


def format_instance_param(name: str, type_: str, value: str) -> str:
    """Return the ``InstanceParam`` marker text for one parameter."""
    return f'<!-- InstanceParam name="{name}" type="{type_}" value="{value}" -->'


def insert_instance_markers(
    text: str,
    *,
    template_path: str,
    code_outside_html_is_locked: bool,
    params: Mapping[str, str],
    param_types: Mapping[str, str],
) -> str:
    """Insert the instance declaration, parameter markers and ``InstanceEnd``.

    - ``InstanceBegin`` goes right after the first ``<html ...>`` opening tag.
    - One tab-indented ``InstanceParam`` line per parameter goes before the
      first ``</head>``, in mapping order.
    - ``InstanceEnd`` goes before a final ``</html>``, followed by one newline.
    """
    locked: str = "true" if code_outside_html_is_locked else "false"
    begin: str = (
        f'<!-- InstanceBegin template="{template_path}" codeOutsideHTMLIsLocked="{locked}" -->'
    )
    text = _HTML_OPEN.sub(lambda m: m.group(1) + begin, text, count=1)

    if params:
        lines: str = "\n".join(
            "\t" + format_instance_param(name, param_types.get(name) or DEFAULT_PARAM_TYPE, value)
            for name, value in params.items()
        )
        text = _HEAD_CLOSE.sub(lambda m: f"{lines}\n{m.group(0)}", text, count=1)

    return _HTML_CLOSE_AT_END.sub("<!-- InstanceEnd --></html>\n", text, count=1)


def resolve_nested_editable_regions(text: str, editable_contents: Mapping[str, str]) -> str:
    """Substitute contents into a nested template's instance editable blocks."""

    def _replace(m: re.Match[str]) -> str:
        name: str = m.group(1)
        content: str = editable_contents.get(name, m.group(2))
        return f'<!-- InstanceBeginEditable name="{name}" -->{content}<!-- InstanceEndEditable -->'

    return _INSTANCE_EDITABLE_BLOCK.sub(_replace, text)


def sync_instance_params(
    text: str,
    params: Mapping[str, str],
    param_types: Mapping[str, str],
) -> str:
    """Refresh existing ``InstanceParam`` markers from the caller's maps.

    The value comes from ``params`` (empty when absent); the type comes from
    ``param_types``, falling back to the marker's own type.
    """

    def _replace(m: re.Match[str]) -> str:
        name: str = m.group(1)
        type_: str = param_types.get(name) or m.group(2)
        return format_instance_param(name, type_, params.get(name, ""))

    return mk.INSTANCE_PARAM.sub(_replace, text)


def _resolve_nested(options: ResolveOptions) -> str:
    text: str = options.template_text
    if options.instance_path:
        text = rewrite_relative_paths(text, options.template_path, options.instance_path)
    text = resolve_nested_editable_regions(text, options.editable_contents)
    return sync_instance_params(text, options.params, options.param_types)


def resolve_template(options: ResolveOptions) -> str:
    """Resolve a template into instance text.

    Args:
        options (ResolveOptions): Template text, identity and instance state.

    Returns:
        str: The fully resolved instance document.
    """
    if is_nested_template(options.template_text):
        logger.debug("Nested template detected for %s; passthrough mode", options.template_path)
        return _resolve_nested(options)

    text: str = options.template_text

    defaults: list[TemplateParamDef] = parse_template_params(text)
    params, param_types = merge_params(defaults, options.params, options.param_types)
    text = mk.TEMPLATE_PARAM_LINE.sub("", text)
    logger.debug("Merged %d parameter(s) (%d template default(s))", len(params), len(defaults))

    text = resolve_conditionals(text, params, max_passes=options.max_conditional_passes)
    text = resolve_optional_regions(text, params)
    text = resolve_variables(text, params)

    if options.instance_path:
        text = rewrite_relative_paths(text, options.template_path, options.instance_path)

    text = resolve_repeat_regions(text, options.repeat_entries or {})
    text = resolve_editable_regions(text, options.editable_contents)

    text = insert_instance_markers(
        text,
        template_path=options.template_path,
        code_outside_html_is_locked=options.code_outside_html_is_locked,
        params=params,
        param_types=param_types,
    )
    logger.trace("Resolved %s (%d chars)", options.template_path, len(text))
    return text
