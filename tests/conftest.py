# topmark:header:start
#
#   project      : DwtGuard
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the DwtGuard test suite.

This file sets up global fixtures and customizes the logging configuration for test runs,
ensuring consistent and verbose logging output during testing.

Notes:
    Tests should respect the immutable/mutable configuration split:

    - Build configs using `dwtguard.config.model.MutableConfig` (mutable), then
      `freeze()` into a `dwtguard.config.model.Config` for API calls.
    - Do **not** mutate a frozen `Config`. If you need to tweak one,
      call `Config.thaw()`, edit the returned `MutableConfig`,
      then `freeze()` again.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from dwtguard.config import logging
from dwtguard.config.model import MutableConfig
from tests.samples import INSTANCE_TEXT, LIBRARY_ITEM_TEXT, TEMPLATE_TEXT

if TYPE_CHECKING:
    from dwtguard.config.model import Config

F = TypeVar("F", bound=Callable[..., object])

# This defines the type for the decorator function itself:
# It takes a Callable (F) and returns the same Callable (F).
DecoratorType = Callable[[F], F]


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.cli`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_cli: DecoratorType[Any] = as_typed_mark(pytest.mark.cli)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.mark.parametrize`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.mark.parametrize`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`."""
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


@pytest.fixture(autouse=True)
def silence_dwtguard_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure DwtGuard's runtime log level is not forced via env during tests.

    Args:
        monkeypatch (pytest.MonkeyPatch): Pytest monkeypatch fixture used to manipulate
            environment variables.
    """
    monkeypatch.delenv("DWTGUARD_LOG_LEVEL", raising=False)


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Set the logging level to TRACE for all tests.

    Args:
        config (pytest.Config): The pytest configuration object.
    """
    logging.setup_logging(level=logging.TRACE_LEVEL)


@pytest.fixture
def isolation(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run a test in an isolated working directory holding an empty ``dwtguard.toml``.

    The marker file declares ``root = true`` so config discovery never walks
    into the developer's own directories.

    Args:
        tmp_path (Path): The pytest-provided temporary directory for the test.
        monkeypatch (pytest.MonkeyPatch): Fixture to change the working directory.

    Returns:
        Path: The isolated working directory.
    """
    cwd: Path = tmp_path / "proj"
    cwd.mkdir()
    (cwd / "dwtguard.toml").write_text("root = true\n", encoding="utf-8")
    monkeypatch.chdir(cwd)
    return cwd


def write_site(root: Path) -> Path:
    """Create a small site under ``root`` and return the site directory.

    Layout::

        site/
          Templates/main.dwt
          Library/footer.lbi
          about.html          (instance of /Templates/main.dwt)
          news/item.html      (instance, one level down)
          plain.html          (no markers)

    Args:
        root (Path): Parent directory.

    Returns:
        Path: The ``site`` directory.
    """
    site: Path = root / "site"
    (site / "Templates").mkdir(parents=True)
    (site / "Library").mkdir()
    (site / "news").mkdir()
    (site / "Templates" / "main.dwt").write_text(TEMPLATE_TEXT, encoding="utf-8")
    (site / "Library" / "footer.lbi").write_text(LIBRARY_ITEM_TEXT, encoding="utf-8")
    (site / "about.html").write_text(INSTANCE_TEXT, encoding="utf-8")
    (site / "news" / "item.html").write_text(
        INSTANCE_TEXT.replace('href="css/site.css"', 'href="../css/site.css"'),
        encoding="utf-8",
    )
    (site / "plain.html").write_text("<html><body>plain</body></html>\n", encoding="utf-8")
    return site


@pytest.fixture
def site(isolation: Path) -> Path:
    """Return a freshly written sample site inside the isolated working directory."""
    return write_site(isolation)


def make_config(**overrides: Any) -> Config:
    """Return a frozen `Config` built from defaults and overrides.

    Args:
        **overrides (Any): Attributes set on the mutable builder before freezing.

    Returns:
        Config: An immutable configuration snapshot for use in tests.
    """
    m: MutableConfig = MutableConfig.from_defaults()
    for k, v in overrides.items():
        setattr(m, k, v)
    return m.freeze()
