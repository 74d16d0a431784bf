# topmark:header:start
#
#   project      : DwtGuard
#   file         : conditions.py
#   file_relpath : src/dwtguard/template/conditions.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Evaluator for the ``TemplateBeginIf cond="..."`` expression grammar.

Supported forms (whitespace around the operator is allowed):

    Name=='value'                   string equality
    Name!='value'                   string inequality
    Name=="value" / Name!="value"   same, double-quoted
    _document['Name']=='value'      bracket accessor, both operators and quote styles
    _document['Name']               truthy iff the value is exactly "true"
    Name                            truthy iff the value is exactly "true"

Anything else is an unknown expression and evaluates to True, so unrecognized
conditions keep their content instead of deleting it. Missing parameters compare
as the empty string. Nothing is ever executed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Mapping

_COMPARE_SINGLE: Final[re.Pattern[str]] = re.compile(
    r"^(?:_document\['([^']+)'\]|(\w+))\s*(==|!=)\s*'([^']*)'", re.ASCII
)
_COMPARE_DOUBLE: Final[re.Pattern[str]] = re.compile(
    r'^(?:_document\[\'([^\']+)\'\]|(\w+))\s*(==|!=)\s*"([^"]*)"', re.ASCII
)
_ACCESSOR: Final[re.Pattern[str]] = re.compile(r"^_document\['([^']+)'\]$")
_BARE: Final[re.Pattern[str]] = re.compile(r"^(\w+)$", re.ASCII)


class ConditionKind(Enum):
    """Shape of a parsed condition."""

    EQUALS = "=="
    NOT_EQUALS = "!="
    TRUTHY = "truthy"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class Condition:
    """A condition expression reduced to one of the supported shapes.

    Attributes:
        kind (ConditionKind): The recognized shape.
        name (str): Parameter name (empty for UNKNOWN).
        operand (str): Comparison literal (empty unless EQUALS/NOT_EQUALS).
        source (str): The raw expression text.
    """

    kind: ConditionKind
    name: str = ""
    operand: str = ""
    source: str = ""

    def evaluate(self, params: Mapping[str, str]) -> bool:
        """Evaluate against ``params``; unknown expressions are True."""
        if self.kind is ConditionKind.UNKNOWN:
            return True
        actual: str = params.get(self.name, "")
        if self.kind is ConditionKind.EQUALS:
            return actual == self.operand
        if self.kind is ConditionKind.NOT_EQUALS:
            return actual != self.operand
        return actual == "true"


def parse_condition(condition: str) -> Condition:
    """Reduce ``condition`` to a `Condition`.

    The single-quoted comparison is tried first, then the double-quoted one,
    then the accessor and bare-identifier truthiness forms.

    Args:
        condition (str): Raw text of the ``cond`` attribute.

    Returns:
        Condition: The parsed condition; `ConditionKind.UNKNOWN` if unrecognized.
    """
    trimmed: str = condition.strip()
    for pattern in (_COMPARE_SINGLE, _COMPARE_DOUBLE):
        m = pattern.match(trimmed)
        if m is not None:
            name: str = m.group(1) if m.group(1) is not None else m.group(2)
            kind = ConditionKind.EQUALS if m.group(3) == "==" else ConditionKind.NOT_EQUALS
            return Condition(kind, name, m.group(4), condition)

    m = _ACCESSOR.match(trimmed) or _BARE.match(trimmed)
    if m is not None:
        return Condition(ConditionKind.TRUTHY, m.group(1), "", condition)
    return Condition(ConditionKind.UNKNOWN, source=condition)


def evaluate_condition(condition: str, params: Mapping[str, str]) -> bool:
    """Evaluate a template condition against a parameter map.

    Args:
        condition (str): Raw condition expression.
        params (Mapping[str, str]): Merged parameter values.

    Returns:
        bool: The condition's truth value (True for unrecognized expressions).
    """
    return parse_condition(condition).evaluate(params)
