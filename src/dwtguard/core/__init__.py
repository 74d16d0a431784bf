# topmark:header:start
#
#   project      : DwtGuard
#   file         : __init__.py
#   file_relpath : src/dwtguard/core/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Core primitives shared by the parser and the resolver: ranges, markers and errors."""

from __future__ import annotations
