# topmark:header:start
#
#   project      : DwtGuard
#   file         : __init__.py
#   file_relpath : src/dwtguard/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click subcommands registered on the `dwtguard` group."""

from __future__ import annotations
