# topmark:header:start
#
#   project      : DwtGuard
#   file         : updater.py
#   file_relpath : src/dwtguard/library/updater.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Propagate library item (``.lbi``) content into the pages that embed it.

A page embeds a library item between ``<!-- #BeginLibraryItem "/Library/x.lbi" -->``
and ``<!-- #EndLibraryItem -->``. Updating an item replaces the content of every
block whose declared path resolves to that item on disk. Blocks are paired with
the same primitive the parser uses and replaced back to front so earlier
offsets stay valid.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dwtguard.config.logging import get_logger
from dwtguard.core.errors import DocumentIOError
from dwtguard.core.markers import BEGIN_LIBRARY_ITEM, LIBRARY_ITEM, find_pairs
from dwtguard.discovery import iter_site_files
from dwtguard.template.paths import resolve_site_path
from dwtguard.utils.fileio import read_text

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

    from dwtguard.config.logging import DwtGuardLogger
    from dwtguard.config.model import Config
    from dwtguard.core.markers import MarkerPair

logger: DwtGuardLogger = get_logger(__name__)


def replace_library_item_blocks(
    text: str,
    predicate: Callable[[str], bool],
    new_content: str,
) -> str:
    """Replace the content of every library item block whose path matches.

    Args:
        text (str): Page text.
        predicate (Callable[[str], bool]): Called with each declared item path.
        new_content (str): Replacement for the block content (markers are kept).

    Returns:
        str: The updated text, or ``text`` itself when nothing matched.
    """
    targets: list[MarkerPair] = [
        pair for pair in find_pairs(LIBRARY_ITEM, text) if predicate(pair.begin.value)
    ]
    if not targets:
        return text
    result: str = text
    for pair in reversed(targets):
        content = pair.content_range
        result = result[: content.start] + new_content + result[content.end :]
    logger.debug("Replaced %d library item block(s)", len(targets))
    return result


def _resolves_to(
    referencing_file: Path, item_file: Path, roots: Iterable[Path]
) -> Callable[[str], bool]:
    target: Path = item_file.resolve()
    site_roots: tuple[Path, ...] = tuple(roots)

    def _check(declared: str) -> bool:
        resolved: Path | None = resolve_site_path(referencing_file, declared, roots=site_roots)
        return resolved is not None and resolved.resolve() == target

    return _check


def update_library_item_references(
    text: str,
    referencing_file: Path,
    item_file: Path,
    item_text: str,
    *,
    roots: Iterable[Path] = (),
) -> str:
    """Replace every block in ``text`` that refers to ``item_file`` with ``item_text``."""
    return replace_library_item_blocks(
        text, _resolves_to(referencing_file, item_file, roots), item_text
    )


def find_library_item_usages(item_file: Path, root: Path, config: Config) -> list[Path]:
    """Return the site files under ``root`` that embed ``item_file``.

    Unreadable files are logged and skipped.
    """
    usages: list[Path] = []
    for path in iter_site_files(root, config, extensions=config.instance_extensions):
        try:
            text: str = read_text(path)
        except DocumentIOError as e:
            logger.warning("Skipping unreadable file: %s", e)
            continue
        check: Callable[[str], bool] = _resolves_to(path, item_file, config.site_roots)
        if any(check(m.group(1)) for m in BEGIN_LIBRARY_ITEM.finditer(text)):
            usages.append(path)
    logger.debug("Found %d usage(s) of %s", len(usages), item_file)
    return usages
