# topmark:header:start
#
#   project      : DwtGuard
#   file         : paths.py
#   file_relpath : src/dwtguard/template/paths.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Site-relative path helpers.

Two kinds of paths meet here:

- *Site paths* are POSIX strings rooted at the site root, such as
  ``/Templates/main.dwt`` or ``/pages/sub/page.html``. Templates declare each
  other and instances declare their template using site paths.
- *File paths* are `pathlib.Path` objects on the local filesystem.

`rewrite_relative_paths` works purely on site paths. The other helpers convert
between site paths and files on disk.
"""

from __future__ import annotations

import posixpath
import re
from pathlib import Path
from typing import TYPE_CHECKING, Final

from dwtguard.config.logging import get_logger
from dwtguard.constants import MAX_SITE_WALK_DEPTH

if TYPE_CHECKING:
    from collections.abc import Iterable

    from dwtguard.config.logging import DwtGuardLogger

logger: DwtGuardLogger = get_logger(__name__)

# attr + "=", quote char, value
ATTR_URL_RE: Final[re.Pattern[str]] = re.compile(
    r"((?:href|src|action|poster|data|background)\s*=\s*)([\"'])([^\"']*?)\2",
    re.IGNORECASE,
)
_SCHEME_RE: Final[re.Pattern[str]] = re.compile(r"^[a-z][a-z0-9+.-]*:", re.IGNORECASE)
_PATH_SUFFIX_RE: Final[re.Pattern[str]] = re.compile(r"^([^?#]*)(.*)", re.DOTALL)


def _site_dirname(site_path: str) -> str:
    """Return the rooted POSIX directory of ``site_path``."""
    return posixpath.normpath(posixpath.join("/", posixpath.dirname(site_path)))


def is_rewritable_url(url: str) -> bool:
    """Return True if ``url`` is a document-relative URL that must be rewritten.

    Empty values, fragment or query only values, root-relative paths, URLs with a
    scheme (``https:``, ``mailto:``, ``tel:``...) and values holding a template
    variable placeholder are left alone.
    """
    if not url or url[0] in "#?/":
        return False
    if _SCHEME_RE.match(url):
        return False
    return "@@(" not in url


def rebase_url(url: str, template_dir: str, instance_dir: str) -> str:
    """Re-express a template-relative URL relative to the instance directory.

    Args:
        url (str): A URL accepted by `is_rewritable_url`.
        template_dir (str): Rooted site directory of the template.
        instance_dir (str): Rooted site directory of the instance.

    Returns:
        str: The rebased URL with its query/fragment suffix reattached.
    """
    m = _PATH_SUFFIX_RE.match(url)
    if m is None or not m.group(1):
        return url
    path_part, suffix = m.group(1), m.group(2)
    absolute: str = posixpath.normpath(posixpath.join(template_dir, path_part))
    return posixpath.relpath(absolute, instance_dir) + suffix


def rewrite_relative_paths(text: str, template_path: str, instance_path: str) -> str:
    """Rewrite relative URLs so they resolve from the instance's location.

    Args:
        text (str): Markup copied from the template.
        template_path (str): Site path of the template (e.g. ``/Templates/T.dwt``).
        instance_path (str): Site path of the instance (e.g. ``/pages/a.html``).

    Returns:
        str: ``text`` with ``href``/``src``/``action``/``poster``/``data``/``background``
        values rebased. Unchanged when both paths share a directory.
    """
    template_dir: str = _site_dirname(template_path)
    instance_dir: str = _site_dirname(instance_path)
    if template_dir == instance_dir:
        return text

    def _replace(m: re.Match[str]) -> str:
        attr, quote, url = m.group(1), m.group(2), m.group(3)
        if not is_rewritable_url(url):
            return m.group(0)
        return f"{attr}{quote}{rebase_url(url, template_dir, instance_dir)}{quote}"

    logger.trace("Rewriting relative URLs: %s -> %s", template_dir, instance_dir)
    return ATTR_URL_RE.sub(_replace, text)


def site_relative_path(file: Path, root: Path) -> str:
    """Return the ``/``-prefixed POSIX site path of ``file`` under ``root``.

    Raises:
        ValueError: If ``file`` is not located under ``root``.
    """
    rel: Path = file.resolve().relative_to(root.resolve())
    return "/" + rel.as_posix()


def derive_instance_path(instance_file: Path, template_file: Path, template_path: str) -> str:
    """Compute the site path of an instance from where its template lives.

    The site root is the template file path with the declared site path removed
    from its end; the instance path is whatever follows that root.

    Args:
        instance_file (Path): Instance file on disk.
        template_file (Path): Template file on disk.
        template_path (str): Template site path as declared (backslashes allowed).

    Returns:
        str: Site path of the instance, starting with ``/``.
    """
    declared: str = "/" + template_path.replace("\\", "/").lstrip("/")
    template_fs: str = template_file.as_posix()
    instance_fs: str = instance_file.as_posix()
    if not template_fs.endswith(declared):
        logger.debug(
            "Template file %s does not end with declared path %s; using instance name",
            template_fs,
            declared,
        )
        return "/" + instance_file.name
    site_root: str = template_fs[: len(template_fs) - len(declared)]
    if not instance_fs.startswith(site_root + "/"):
        return "/" + instance_file.name
    return instance_fs[len(site_root) :]


def resolve_site_path(
    referencing_file: Path,
    site_path: str,
    *,
    roots: Iterable[Path] = (),
    max_depth: int = MAX_SITE_WALK_DEPTH,
) -> Path | None:
    """Locate a site path on disk.

    Each configured site root is tried first, then the directories above the
    referencing file, at most ``max_depth`` levels up.

    Args:
        referencing_file (Path): The document that declares ``site_path``.
        site_path (str): Site path such as ``/Templates/main.dwt``.
        roots (Iterable[Path]): Configured site roots.
        max_depth (int): Upper bound on the upward walk.

    Returns:
        Path | None: The first existing candidate, or None.
    """
    relative: str = site_path.replace("\\", "/").lstrip("/")
    for root in roots:
        candidate: Path = root / relative
        if candidate.is_file():
            logger.trace("Resolved %s via site root %s", site_path, root)
            return candidate

    directory: Path = referencing_file.parent
    for _ in range(max_depth):
        candidate = directory / relative
        if candidate.is_file():
            logger.trace("Resolved %s via ancestor %s", site_path, directory)
            return candidate
        if directory.parent == directory:
            break
        directory = directory.parent

    logger.debug("Cannot resolve %s from %s", site_path, referencing_file)
    return None
