# topmark:header:start
#
#   project      : DwtGuard
#   file         : __main__.py
#   file_relpath : src/dwtguard/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running DwtGuard via ``python -m dwtguard``.

This module allows invoking the DwtGuard CLI using the Python module execution
mechanism, equivalent to running the ``dwtguard`` console script.

Examples:
    Propagate a template to its instances (dry run)::

        python -m dwtguard apply Templates/main.dwt
"""

from __future__ import annotations

from dwtguard.cli.main import cli

if __name__ == "__main__":
    # We call the Click group directly
    cli()
