# topmark:header:start
#
#   project      : DwtGuard
#   file         : cache.py
#   file_relpath : src/dwtguard/parser/cache.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Caller-owned memoization of parse results.

`parse_document` itself keeps no state. Callers that re-parse the same document
repeatedly (watch loops, bulk propagation) create a `ParseCache` and are
responsible for bumping the version whenever the text changes.

Contract:
    - One entry per document key; the last write wins.
    - A lookup whose version differs from the stored one re-parses, so a stale
      result is never returned.
    - All access goes through a single `threading.Lock`; concurrent callers
      never observe a half-written entry.
"""

from __future__ import annotations

import threading
from collections.abc import Hashable
from typing import TYPE_CHECKING

from dwtguard.config.logging import get_logger
from dwtguard.parser.parser import parse_document

if TYPE_CHECKING:
    from dwtguard.config.logging import DwtGuardLogger
    from dwtguard.parser.types import ParseResult

logger: DwtGuardLogger = get_logger(__name__)


class ParseCache:
    """Thread-safe ``(key, version) -> ParseResult`` cache."""

    def __init__(self) -> None:
        self._lock: threading.Lock = threading.Lock()
        self._entries: dict[Hashable, tuple[int, ParseResult]] = {}

    def get_or_parse(self, key: Hashable, version: int, text: str) -> ParseResult:
        """Return the cached result for ``key`` at ``version``, parsing if needed.

        Args:
            key (Hashable): Document identity (typically a path string).
            version (int): Monotonic document version; any change forces a re-parse.
            text (str): Current document text (parsed only on a miss).

        Returns:
            ParseResult: A result computed from ``text`` at ``version``.
        """
        with self._lock:
            cached: tuple[int, ParseResult] | None = self._entries.get(key)
            if cached is not None and cached[0] == version:
                logger.trace("Parse cache hit: %r@%d", key, version)
                return cached[1]

        # Parse outside the lock; parsing is pure.
        result: ParseResult = parse_document(text)
        with self._lock:
            self._entries[key] = (version, result)
        logger.trace("Parse cache store: %r@%d", key, version)
        return result

    def invalidate(self, key: Hashable) -> None:
        """Drop the entry for ``key`` if present."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop all entries."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
