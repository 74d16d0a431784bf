# topmark:header:start
#
#   project      : DwtGuard
#   file         : constants.py
#   file_relpath : src/dwtguard/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DwtGuard Constants."""

from __future__ import annotations

from importlib.metadata import version as get_version

DWTGUARD_VERSION: str = get_version("dwtguard")

# Config file discovery
DWTGUARD_TOML_NAME: str = "dwtguard.toml"
PYPROJECT_TOML_NAME: str = "pyproject.toml"
PYPROJECT_TOOL_SECTION: str = "dwtguard"

# Environment variable used to force the internal log level
LOG_LEVEL_ENV_VAR: str = "DWTGUARD_LOG_LEVEL"

# File extensions scanned for templates, instances and library items
DEFAULT_FILE_EXTENSIONS: tuple[str, ...] = (
    "html",
    "htm",
    "php",
    "asp",
    "aspx",
    "cfm",
    "shtml",
    "dwt",
    "lbi",
)
TEMPLATE_EXTENSION: str = "dwt"
LIBRARY_ITEM_EXTENSION: str = "lbi"

DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = ("node_modules/", ".git/")

# Workspace scan limits
DEFAULT_MAX_FILES: int = 5000
# InstanceBegin always sits near the top of an instance page
DEFAULT_HEAD_BYTES: int = 2048
# Upward directory walk when resolving a site-relative path
MAX_SITE_WALK_DEPTH: int = 20

# Fixed-point cap for nested TemplateBeginIf resolution
DEFAULT_MAX_CONDITIONAL_PASSES: int = 64

DEFAULT_PARAM_TYPE: str = "text"

VALUE_NOT_SET: str = "<not set>"
