# topmark:header:start
#
#   project      : DwtGuard
#   file         : __init__.py
#   file_relpath : src/dwtguard/parser/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Analytical side: turn raw document text into a structural `ParseResult`.

Public surface:
    - `parse_document`: total parser over a text snapshot.
    - `ParseCache`: caller-owned memoization keyed by document identity and version.
"""

from __future__ import annotations

from dwtguard.parser.cache import ParseCache
from dwtguard.parser.parser import parse_document
from dwtguard.parser.types import FileType, ParamType, ParseResult

__all__ = ["FileType", "ParamType", "ParseCache", "ParseResult", "parse_document"]
