# topmark:header:start
#
#   project      : DwtGuard
#   file         : __init__.py
#   file_relpath : src/dwtguard/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DwtGuard package.

DwtGuard parses documents written in the Dreamweaver comment-tag template dialect
(``TemplateBeginEditable`` / ``InstanceBeginEditable`` and friends), computes which
parts of an instance page are protected, and regenerates instance pages from their
templates. It exposes both a CLI and a small typed API for automation.
"""

from __future__ import annotations
