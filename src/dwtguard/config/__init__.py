# topmark:header:start
#
#   project      : DwtGuard
#   file         : __init__.py
#   file_relpath : src/dwtguard/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration for DwtGuard: TOML loading, layered merging and logging setup."""

from __future__ import annotations
