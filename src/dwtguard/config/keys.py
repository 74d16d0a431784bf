# topmark:header:start
#
#   project      : DwtGuard
#   file         : keys.py
#   file_relpath : src/dwtguard/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Canonical TOML section and key names for DwtGuard configuration.

These strings are the external configuration schema as it appears in
``dwtguard.toml`` and in ``[tool.dwtguard]`` inside ``pyproject.toml``.
Renaming or removing a key is a breaking change.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML section names and keys used by DwtGuard configuration."""

    # Root / discovery: stop walking up after this file
    KEY_ROOT: Final[str] = "root"

    # [site]
    SECTION_SITE: Final[str] = "site"

    KEY_ROOTS: Final[str] = "roots"

    # [files]
    SECTION_FILES: Final[str] = "files"

    KEY_EXTENSIONS: Final[str] = "extensions"
    KEY_EXCLUDE: Final[str] = "exclude"
    KEY_MAX_FILES: Final[str] = "max_files"
    KEY_HEAD_BYTES: Final[str] = "head_bytes"

    # [resolver]
    SECTION_RESOLVER: Final[str] = "resolver"

    KEY_MAX_CONDITIONAL_PASSES: Final[str] = "max_conditional_passes"
    KEY_LOCK_CODE_OUTSIDE_HTML: Final[str] = "lock_code_outside_html"

    # [writer]
    SECTION_WRITER: Final[str] = "writer"

    KEY_NEWLINE: Final[str] = "newline"

    # ---------------------------- Schema helpers ----------------------------

    ALLOWED_TOP_LEVEL_KEYS: Final[frozenset[str]] = frozenset(
        {
            KEY_ROOT,
            SECTION_SITE,
            SECTION_FILES,
            SECTION_RESOLVER,
            SECTION_WRITER,
        }
    )

    ALLOWED_SECTION_KEYS: Final[dict[str, frozenset[str]]] = {
        SECTION_SITE: frozenset({KEY_ROOTS}),
        SECTION_FILES: frozenset({KEY_EXTENSIONS, KEY_EXCLUDE, KEY_MAX_FILES, KEY_HEAD_BYTES}),
        SECTION_RESOLVER: frozenset({KEY_MAX_CONDITIONAL_PASSES, KEY_LOCK_CODE_OUTSIDE_HTML}),
        SECTION_WRITER: frozenset({KEY_NEWLINE}),
    }
