# topmark:header:start
#
#   project      : DwtGuard
#   file         : discovery.py
#   file_relpath : src/dwtguard/discovery.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Locate templates, instances and their dependencies inside a site tree.

Files are selected by extension, filtered through gitignore-style exclude
patterns (`pathspec`), and capped at ``Config.max_files``. Results are sorted so
that scans are deterministic.

Instances are recognized cheaply by reading only the first ``head_bytes`` of a
file and looking for the ``InstanceBegin`` declaration; the declared site path
is then resolved with `resolve_site_path` and compared to the template.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from pathspec import PathSpec
from pathspec.patterns.gitwildmatch import GitWildMatchPattern

from dwtguard.config.logging import get_logger
from dwtguard.constants import TEMPLATE_EXTENSION
from dwtguard.core.errors import DocumentIOError
from dwtguard.core.markers import INSTANCE_BEGIN_PREFIX
from dwtguard.template.paths import resolve_site_path
from dwtguard.utils.fileio import read_head

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from dwtguard.config.logging import DwtGuardLogger
    from dwtguard.config.model import Config

logger: DwtGuardLogger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class InstanceRef:
    """An instance file and the template site path it declares."""

    path: Path
    template_path: str


def _rel_for_match(path: Path, base: Path) -> str:
    """Return a POSIX relative path for PathSpec matching (absolute as fallback)."""
    try:
        return path.relative_to(base).as_posix()
    except ValueError:
        return path.as_posix()


def build_exclude_spec(patterns: Iterable[str]) -> PathSpec:
    """Compile gitignore-style exclude patterns."""
    return PathSpec.from_lines(GitWildMatchPattern, list(patterns))


def iter_site_files(
    root: Path,
    config: Config,
    *,
    extensions: Iterable[str] | None = None,
) -> Iterator[Path]:
    """Yield files under ``root`` in sorted walk order.

    Excluded directories are pruned before descending. At most
    ``config.max_files`` files are yielded; hitting the cap is logged.

    Args:
        root (Path): Directory to scan.
        config (Config): Scan settings (extensions, excludes, cap).
        extensions (Iterable[str] | None): Override of ``config.file_extensions``.

    Yields:
        Path: Matching files.
    """
    exts: frozenset[str] = frozenset(
        e.lstrip(".").lower()
        for e in (extensions if extensions is not None else config.file_extensions)
    )
    spec: PathSpec = build_exclude_spec(config.exclude_patterns)
    base: Path = root.resolve()
    count: int = 0

    for dirpath, dirnames, filenames in os.walk(base):
        current = Path(dirpath)
        dirnames[:] = sorted(
            d for d in dirnames if not spec.match_file(_rel_for_match(current / d, base) + "/")
        )
        for name in sorted(filenames):
            path: Path = current / name
            if path.suffix.lstrip(".").lower() not in exts:
                continue
            if spec.match_file(_rel_for_match(path, base)):
                logger.trace("Excluded: %s", path)
                continue
            if count >= config.max_files:
                logger.warning("File limit reached (%d); stopping scan of %s", count, root)
                return
            count += 1
            yield path


def find_templates(root: Path, config: Config) -> list[Path]:
    """Return all ``.dwt`` templates under ``root``."""
    return list(iter_site_files(root, config, extensions=(TEMPLATE_EXTENSION,)))


def declared_template(path: Path, config: Config) -> str | None:
    """Return the template site path declared near the top of ``path``, if any.

    Unreadable files are logged and treated as undeclared.
    """
    try:
        head: str = read_head(path, config.head_bytes)
    except DocumentIOError as e:
        logger.warning("Skipping unreadable file: %s", e)
        return None
    m = INSTANCE_BEGIN_PREFIX.search(head)
    return m.group(1) if m else None


def resolves_to_template(path: Path, declared: str, template_file: Path, config: Config) -> bool:
    """Return True if ``declared``, as written in ``path``, locates ``template_file``."""
    resolved: Path | None = resolve_site_path(path, declared, roots=config.site_roots)
    return resolved is not None and resolved.resolve() == template_file.resolve()


def find_instance_files(
    template_file: Path,
    config: Config,
    *,
    root: Path | None = None,
) -> list[InstanceRef]:
    """Find the instances whose declared template resolves to ``template_file``.

    Args:
        template_file (Path): The template on disk.
        config (Config): Scan settings and site roots.
        root (Path | None): Directory to scan. Defaults to the first configured
            site root, then the current directory.

    Returns:
        list[InstanceRef]: Matching instances in sorted order.
    """
    scan_root: Path = root or (config.site_roots[0] if config.site_roots else Path.cwd())
    matches: list[InstanceRef] = []
    for path in iter_site_files(scan_root, config, extensions=config.instance_extensions):
        declared: str | None = declared_template(path, config)
        if declared is None:
            continue
        if resolves_to_template(path, declared, template_file, config):
            matches.append(InstanceRef(path=path, template_path=declared))
    logger.debug("Found %d instance(s) of %s", len(matches), template_file)
    return matches


def build_dependency_tree(root: Path, config: Config) -> dict[Path, list[InstanceRef]]:
    """Map every template under ``root`` to its instances.

    Each site file is sniffed once; templates with no instances map to an
    empty list.
    """
    tree: dict[Path, list[InstanceRef]] = {t.resolve(): [] for t in find_templates(root, config)}
    for path in iter_site_files(root, config, extensions=config.instance_extensions):
        declared: str | None = declared_template(path, config)
        if declared is None:
            continue
        resolved: Path | None = resolve_site_path(path, declared, roots=config.site_roots)
        if resolved is None:
            logger.debug("Unresolved template %s declared by %s", declared, path)
            continue
        tree.setdefault(resolved.resolve(), []).append(InstanceRef(path, declared))
    return tree
