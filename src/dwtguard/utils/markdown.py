# topmark:header:start
#
#   project      : DwtGuard
#   file         : markdown.py
#   file_relpath : src/dwtguard/utils/markdown.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Lightweight HTML to Markdown conversion for editable region content.

It is regex-based and only knows the handful of elements that
show up in typical template regions. It is meant for previews and exports,
not for round-tripping arbitrary HTML.
"""

from __future__ import annotations

import re
from typing import Final

_I: Final[int] = re.IGNORECASE

_INLINE_RULES: Final[tuple[tuple[re.Pattern[str], str], ...]] = (
    (re.compile(r"<strong\b[^>]*>([\s\S]*?)</strong>", _I), r"**\1**"),
    (re.compile(r"<b\b[^>]*>([\s\S]*?)</b>", _I), r"**\1**"),
    (re.compile(r"<em\b[^>]*>([\s\S]*?)</em>", _I), r"*\1*"),
    (re.compile(r"<i\b[^>]*>([\s\S]*?)</i>", _I), r"*\1*"),
    (re.compile(r'<a\s[^>]*href="([^"]*)"[^>]*>([\s\S]*?)</a>', _I), r"[\2](\1)"),
    (re.compile(r'<img\s[^>]*src="([^"]*)"[^>]*alt="([^"]*)"[^>]*/?>', _I), r"![\2](\1)"),
    (re.compile(r'<img\s[^>]*alt="([^"]*)"[^>]*src="([^"]*)"[^>]*/?>', _I), r"![\1](\2)"),
    (re.compile(r'<img\s[^>]*src="([^"]*)"[^>]*/?>', _I), r"![](\1)"),
)
_PRE_CODE: Final[re.Pattern[str]] = re.compile(
    r"<pre\b[^>]*><code\b[^>]*>([\s\S]*?)</code></pre>", _I
)
_PRE: Final[re.Pattern[str]] = re.compile(r"<pre\b[^>]*>([\s\S]*?)</pre>", _I)
_CODE: Final[re.Pattern[str]] = re.compile(r"<code\b[^>]*>([\s\S]*?)</code>", _I)
_BR: Final[re.Pattern[str]] = re.compile(r"<br\s*/?>", _I)
_UL: Final[re.Pattern[str]] = re.compile(r"<ul\b[^>]*>([\s\S]*?)</ul>", _I)
_OL: Final[re.Pattern[str]] = re.compile(r"<ol\b[^>]*>([\s\S]*?)</ol>", _I)
_LI: Final[re.Pattern[str]] = re.compile(r"<li\b[^>]*>([\s\S]*?)</li>", _I)
_BLOCKQUOTE: Final[re.Pattern[str]] = re.compile(r"<blockquote\b[^>]*>([\s\S]*?)</blockquote>", _I)
_P: Final[re.Pattern[str]] = re.compile(r"<p\b[^>]*>([\s\S]*?)</p>", _I)
_DIV: Final[re.Pattern[str]] = re.compile(r"<div\b[^>]*>([\s\S]*?)</div>", _I)
_HR: Final[re.Pattern[str]] = re.compile(r"<hr\s*/?>", _I)
_TAG: Final[re.Pattern[str]] = re.compile(r"<[^>]+>")
_BLANK_RUN: Final[re.Pattern[str]] = re.compile(r"\n{3,}")

_ENTITIES: Final[tuple[tuple[str, str], ...]] = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&nbsp;", " "),
    # last, so that "&amp;lt;" decodes to "&lt;"
    ("&amp;", "&"),
)


def strip_tags(html: str) -> str:
    """Remove every ``<...>`` tag from ``html``."""
    return _TAG.sub("", html)


def decode_entities(text: str) -> str:
    """Decode the handful of named entities common in template content."""
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def _heading_pattern(level: int) -> re.Pattern[str]:
    return re.compile(rf"<h{level}\b[^>]*>([\s\S]*?)</h{level}>", _I)


def _unordered(m: re.Match[str]) -> str:
    items: str = _LI.sub(lambda li: f"- {strip_tags(li.group(1)).strip()}\n", m.group(1))
    return "\n" + strip_tags(items) + "\n"


def _ordered(m: re.Match[str]) -> str:
    counter: list[int] = [0]

    def item(li: re.Match[str]) -> str:
        counter[0] += 1
        return f"{counter[0]}. {strip_tags(li.group(1)).strip()}\n"

    return "\n" + strip_tags(_LI.sub(item, m.group(1))) + "\n"


def _blockquote(m: re.Match[str]) -> str:
    lines: list[str] = strip_tags(m.group(1)).strip().split("\n")
    return "\n".join(f"> {line}" for line in lines) + "\n"


def html_to_markdown(html: str) -> str:
    """Convert an HTML fragment to Markdown.

    Args:
        html (str): HTML fragment, typically the content of an editable region.

    Returns:
        str: Markdown text, trimmed, with at most one blank line in a row.
    """
    text: str = html.replace("\r\n", "\n")

    for pattern, replacement in _INLINE_RULES:
        text = pattern.sub(replacement, text)

    # Code blocks first, so inline `code` does not eat their content
    text = _PRE_CODE.sub(lambda m: f"\n```\n{m.group(1)}\n```\n", text)
    text = _PRE.sub(lambda m: f"\n```\n{m.group(1)}\n```\n", text)
    text = _CODE.sub(lambda m: f"`{m.group(1)}`", text)
    text = _BR.sub("\n", text)

    for level in range(6, 0, -1):
        hashes: str = "#" * level
        text = _heading_pattern(level).sub(
            lambda m, h=hashes: f"\n{h} {strip_tags(m.group(1)).strip()}\n", text
        )

    text = _UL.sub(_unordered, text)
    text = _OL.sub(_ordered, text)
    text = _BLOCKQUOTE.sub(_blockquote, text)
    text = _P.sub(lambda m: f"\n{m.group(1)}\n", text)
    text = _DIV.sub(lambda m: f"\n{m.group(1)}\n", text)
    text = _HR.sub("\n---\n", text)

    text = decode_entities(strip_tags(text))
    return _BLANK_RUN.sub("\n\n", text).strip()
