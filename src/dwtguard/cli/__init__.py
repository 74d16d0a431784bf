# topmark:header:start
#
#   project      : DwtGuard
#   file         : __init__.py
#   file_relpath : src/dwtguard/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Command-line interface for DwtGuard."""

from __future__ import annotations
