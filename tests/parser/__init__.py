# topmark:header:start
#
#   project      : DwtGuard
#   file         : __init__.py
#   file_relpath : tests/parser/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end
