# topmark:header:start
#
#   project      : DwtGuard
#   file         : loaders.py
#   file_relpath : src/dwtguard/config/loaders.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Load TOML configuration sources.

Runtime defaults are defined in code (`load_defaults_dict`); on-disk files
(``dwtguard.toml`` / ``pyproject.toml``) are parsed with `tomlkit` and returned
as plain `dict` structures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from dwtguard.config.keys import Toml
from dwtguard.config.logging import get_logger
from dwtguard.constants import (
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_FILE_EXTENSIONS,
    DEFAULT_HEAD_BYTES,
    DEFAULT_MAX_CONDITIONAL_PASSES,
    DEFAULT_MAX_FILES,
    PYPROJECT_TOML_NAME,
    PYPROJECT_TOOL_SECTION,
)
from dwtguard.core.errors import ConfigError

if TYPE_CHECKING:
    from pathlib import Path

    from dwtguard.config.logging import DwtGuardLogger

TomlTable = dict[str, Any]

logger: DwtGuardLogger = get_logger(__name__)


def load_defaults_dict() -> TomlTable:
    """Return DwtGuard's runtime defaults as a fresh dict.

    This function performs no I/O; the returned dict may be mutated by callers.
    """
    return {
        Toml.SECTION_SITE: {
            Toml.KEY_ROOTS: [],
        },
        Toml.SECTION_FILES: {
            Toml.KEY_EXTENSIONS: list(DEFAULT_FILE_EXTENSIONS),
            Toml.KEY_EXCLUDE: list(DEFAULT_EXCLUDE_PATTERNS),
            Toml.KEY_MAX_FILES: DEFAULT_MAX_FILES,
            Toml.KEY_HEAD_BYTES: DEFAULT_HEAD_BYTES,
        },
        Toml.SECTION_RESOLVER: {
            Toml.KEY_MAX_CONDITIONAL_PASSES: DEFAULT_MAX_CONDITIONAL_PASSES,
            Toml.KEY_LOCK_CODE_OUTSIDE_HTML: True,
        },
        Toml.SECTION_WRITER: {
            Toml.KEY_NEWLINE: "preserve",
        },
    }


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file.

    Args:
        path (Path): Path to a TOML document.

    Returns:
        TomlTable: The parsed TOML content.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
    except (OSError, UnicodeError) as e:
        raise ConfigError(f"cannot read config file: {e}", path) from e
    try:
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
    except TomlkitParseError as e:
        raise ConfigError(f"invalid TOML: {e}", path) from e
    data_any: Any = doc.unwrap()
    return cast("TomlTable", data_any) if isinstance(data_any, dict) else {}


def extract_tool_section(path: Path, data: TomlTable) -> TomlTable | None:
    """Return the DwtGuard table of a parsed config file.

    For ``pyproject.toml`` this is ``[tool.dwtguard]`` (None when absent); for
    any other file it is the whole document.
    """
    if path.name != PYPROJECT_TOML_NAME:
        return data
    tool: Any = data.get("tool", {})
    section: Any = tool.get(PYPROJECT_TOOL_SECTION) if isinstance(tool, dict) else None
    if not isinstance(section, dict):
        logger.debug("No [tool.%s] table in %s", PYPROJECT_TOOL_SECTION, path)
        return None
    return cast("TomlTable", section)


def validate_keys(data: TomlTable, path: Path | None) -> list[str]:
    """Return human-readable warnings for unknown sections and keys."""
    warnings: list[str] = []
    where: str = f" in {path}" if path is not None else ""
    for key, value in data.items():
        if key not in Toml.ALLOWED_TOP_LEVEL_KEYS:
            warnings.append(f"Unknown config key '{key}'{where}")
            continue
        allowed: frozenset[str] | None = Toml.ALLOWED_SECTION_KEYS.get(key)
        if allowed is None or not isinstance(value, dict):
            continue
        for sub in value:
            if sub not in allowed:
                warnings.append(f"Unknown config key '{key}.{sub}'{where}")
    return warnings
