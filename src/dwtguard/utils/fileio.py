# topmark:header:start
#
#   project      : DwtGuard
#   file         : fileio.py
#   file_relpath : src/dwtguard/utils/fileio.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

r"""Read and write documents while keeping their newline convention.

Documents are read as UTF-8 with native newlines preserved (``newline=""``), so
every offset computed by the parser refers to the exact on-disk text. When a
document is rewritten, the configured `NewlineMode` decides whether the
dominant newline of the original file (LF, CRLF or CR) is kept or replaced.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dwtguard.config.logging import get_logger
from dwtguard.config.model import NewlineMode
from dwtguard.core.errors import DocumentIOError

if TYPE_CHECKING:
    from pathlib import Path

    from dwtguard.config.logging import DwtGuardLogger

logger: DwtGuardLogger = get_logger(__name__)


def newline_histogram(text: str) -> dict[str, int]:
    """Count LF, CRLF and lone CR line endings in ``text``."""
    crlf: int = text.count("\r\n")
    return {
        "\n": text.count("\n") - crlf,
        "\r\n": crlf,
        "\r": text.count("\r") - crlf,
    }


def detect_newline(text: str) -> str:
    """Return the dominant newline of ``text`` (CRLF wins ties; ``\\n`` if none)."""
    hist: dict[str, int] = newline_histogram(text)
    best: str = max(("\r\n", "\n", "\r"), key=lambda nl: hist[nl])
    return best if hist[best] else "\n"


def normalize_newlines(text: str, newline: str) -> str:
    """Convert every line ending in ``text`` to ``newline``."""
    unified: str = text.replace("\r\n", "\n").replace("\r", "\n")
    return unified if newline == "\n" else unified.replace("\n", newline)


def read_text(path: Path) -> str:
    """Read a UTF-8 document, preserving its newlines.

    Raises:
        DocumentIOError: If the file cannot be read or decoded.
    """
    try:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeError) as e:
        raise DocumentIOError(path, e) from e


def read_head(path: Path, size: int) -> str:
    """Return up to ``size`` bytes from the top of ``path``, decoded leniently.

    Used to sniff for ``InstanceBegin`` without loading whole files. Invalid
    UTF-8 (including a sequence cut at the boundary) is replaced.

    Raises:
        DocumentIOError: If the file cannot be opened.
    """
    try:
        with open(path, "rb") as f:
            head: bytes = f.read(size)
    except OSError as e:
        raise DocumentIOError(path, e) from e
    return head.decode("utf-8", errors="replace")


def write_text(
    path: Path,
    text: str,
    *,
    newline: NewlineMode = NewlineMode.PRESERVE,
    original: str | None = None,
) -> None:
    """Write ``text`` to ``path`` as UTF-8 with the requested newline policy.

    Args:
        path (Path): Destination file.
        text (str): New document text.
        newline (NewlineMode): Newline policy.
        original (str | None): Previous content, used by `NewlineMode.PRESERVE`
            to pick the newline. When None, ``text`` itself is inspected.

    Raises:
        DocumentIOError: If the file cannot be written.
    """
    if newline is NewlineMode.LF:
        nl: str = "\n"
    elif newline is NewlineMode.CRLF:
        nl = "\r\n"
    else:
        nl = detect_newline(original if original is not None else text)
    out: str = normalize_newlines(text, nl)
    logger.debug("Writing %s (%d chars, newline=%r)", path, len(out), nl)
    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(out)
    except (OSError, UnicodeError) as e:
        raise DocumentIOError(path, e) from e
