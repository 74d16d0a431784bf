# topmark:header:start
#
#   project      : DwtGuard
#   file         : model.py
#   file_relpath : src/dwtguard/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration model: immutable `Config` and mutable `MutableConfig` builder.

Layering (lowest to highest precedence):
    1. Built-in defaults (`load_defaults_dict`)
    2. Project configs discovered upward from the anchor directory, root-most
       first; within a directory ``pyproject.toml`` is merged before
       ``dwtguard.toml``
    3. Extra config files given with ``--config``, in order
    4. CLI overrides (`MutableConfig.apply_overrides`)

Scalar fields on the builder are ``None`` when a layer does not set them, so a
later layer only overrides what it actually declares.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dwtguard.config.keys import Toml
from dwtguard.config.loaders import (
    extract_tool_section,
    load_defaults_dict,
    load_toml_dict,
    validate_keys,
)
from dwtguard.config.logging import get_logger
from dwtguard.constants import (
    DEFAULT_HEAD_BYTES,
    DEFAULT_MAX_CONDITIONAL_PASSES,
    DEFAULT_MAX_FILES,
    DWTGUARD_TOML_NAME,
    LIBRARY_ITEM_EXTENSION,
    PYPROJECT_TOML_NAME,
    PYPROJECT_TOOL_SECTION,
    TEMPLATE_EXTENSION,
)
from dwtguard.core.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from dwtguard.config.loaders import TomlTable
    from dwtguard.config.logging import DwtGuardLogger

logger: DwtGuardLogger = get_logger(__name__)


class NewlineMode(str, Enum):
    """Line ending policy for written files.

    Attributes:
        PRESERVE: Keep the dominant line ending of the file being replaced.
        LF: Always write ``\\n``.
        CRLF: Always write ``\\r\\n``.
    """

    PRESERVE = "preserve"
    LF = "lf"
    CRLF = "crlf"


# ------------------ Immutable runtime config ------------------


@dataclass(frozen=True, slots=True)
class Config:
    """Immutable runtime configuration.

    Attributes:
        site_roots (tuple[Path, ...]): Absolute site roots tried first when resolving
            site paths such as ``/Templates/main.dwt``.
        file_extensions (tuple[str, ...]): Extensions (without dot) scanned in a site.
        exclude_patterns (tuple[str, ...]): Gitignore-style patterns excluded from scans.
        max_files (int): Upper bound on the number of files a scan yields.
        head_bytes (int): Bytes read from the top of a file to sniff ``InstanceBegin``.
        max_conditional_passes (int): Cap on conditional resolution passes.
        lock_code_outside_html (bool): ``codeOutsideHTMLIsLocked`` for new instances.
        newline (NewlineMode): Line ending policy for written files.
        config_files (tuple[Path, ...]): Config files that contributed, in merge order.
        warnings (tuple[str, ...]): Non-fatal problems found while loading.
    """

    site_roots: tuple[Path, ...] = ()
    file_extensions: tuple[str, ...] = ()
    exclude_patterns: tuple[str, ...] = ()
    max_files: int = DEFAULT_MAX_FILES
    head_bytes: int = DEFAULT_HEAD_BYTES
    max_conditional_passes: int = DEFAULT_MAX_CONDITIONAL_PASSES
    lock_code_outside_html: bool = True
    newline: NewlineMode = NewlineMode.PRESERVE
    config_files: tuple[Path, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def instance_extensions(self) -> tuple[str, ...]:
        """Scanned extensions minus templates and library items."""
        skipped: tuple[str, ...] = (TEMPLATE_EXTENSION, LIBRARY_ITEM_EXTENSION)
        return tuple(ext for ext in self.file_extensions if ext not in skipped)

    def to_toml_dict(self) -> TomlTable:
        """Return this config as a TOML-serializable dict."""
        return {
            Toml.SECTION_SITE: {Toml.KEY_ROOTS: [str(p) for p in self.site_roots]},
            Toml.SECTION_FILES: {
                Toml.KEY_EXTENSIONS: list(self.file_extensions),
                Toml.KEY_EXCLUDE: list(self.exclude_patterns),
                Toml.KEY_MAX_FILES: self.max_files,
                Toml.KEY_HEAD_BYTES: self.head_bytes,
            },
            Toml.SECTION_RESOLVER: {
                Toml.KEY_MAX_CONDITIONAL_PASSES: self.max_conditional_passes,
                Toml.KEY_LOCK_CODE_OUTSIDE_HTML: self.lock_code_outside_html,
            },
            Toml.SECTION_WRITER: {Toml.KEY_NEWLINE: self.newline.value},
        }

    def thaw(self) -> MutableConfig:
        """Return a mutable copy of this frozen config."""
        return MutableConfig(
            site_roots=list(self.site_roots),
            file_extensions=list(self.file_extensions),
            exclude_patterns=list(self.exclude_patterns),
            max_files=self.max_files,
            head_bytes=self.head_bytes,
            max_conditional_passes=self.max_conditional_passes,
            lock_code_outside_html=self.lock_code_outside_html,
            newline=self.newline,
            config_files=list(self.config_files),
            warnings=list(self.warnings),
        )


# -------------------------- Mutable builder --------------------------


def _expect(value: Any, kind: type | tuple[type, ...], key: str, path: Path | None) -> Any:
    # bool is an int subclass; reject it where an int is expected
    if isinstance(value, bool) and kind is int:
        raise ConfigError(f"'{key}' must be an integer, got {value!r}", path)
    if not isinstance(value, kind):
        raise ConfigError(f"'{key}' has invalid type {type(value).__name__}", path)
    return value


def _expect_str_list(value: Any, key: str, path: Path | None) -> list[str]:
    items: list[Any] = _expect(value, list, key, path)
    for item in items:
        _expect(item, str, key, path)
    return [str(item) for item in items]


def _positive(value: int, key: str, path: Path | None) -> int:
    if value <= 0:
        raise ConfigError(f"'{key}' must be positive, got {value}", path)
    return value


@dataclass
class MutableConfig:
    """Mutable configuration used during discovery and merging.

    Unset scalars are ``None``; empty lists mean "not declared by this layer".
    """

    site_roots: list[Path] = field(default_factory=lambda: [])
    file_extensions: list[str] = field(default_factory=lambda: [])
    exclude_patterns: list[str] = field(default_factory=lambda: [])
    max_files: int | None = None
    head_bytes: int | None = None
    max_conditional_passes: int | None = None
    lock_code_outside_html: bool | None = None
    newline: NewlineMode | None = None
    config_files: list[Path] = field(default_factory=lambda: [])
    warnings: list[str] = field(default_factory=lambda: [])

    # ---------------------------- Build/freeze ----------------------------
    def freeze(self) -> Config:
        """Freeze this builder into an immutable `Config`, filling unset fields."""
        return Config(
            site_roots=tuple(self.site_roots),
            file_extensions=tuple(ext.lstrip(".").lower() for ext in self.file_extensions),
            exclude_patterns=tuple(self.exclude_patterns),
            max_files=self.max_files if self.max_files is not None else DEFAULT_MAX_FILES,
            head_bytes=self.head_bytes if self.head_bytes is not None else DEFAULT_HEAD_BYTES,
            max_conditional_passes=self.max_conditional_passes
            if self.max_conditional_passes is not None
            else DEFAULT_MAX_CONDITIONAL_PASSES,
            lock_code_outside_html=self.lock_code_outside_html
            if self.lock_code_outside_html is not None
            else True,
            newline=self.newline if self.newline is not None else NewlineMode.PRESERVE,
            config_files=tuple(self.config_files),
            warnings=tuple(self.warnings),
        )

    # --------------------------- Loaders/parsers --------------------------
    @classmethod
    def from_defaults(cls) -> MutableConfig:
        """Return a builder populated with the built-in defaults."""
        return cls.from_toml_dict(load_defaults_dict(), config_file=None)

    @classmethod
    def from_toml_dict(cls, data: TomlTable, *, config_file: Path | None) -> MutableConfig:
        """Build a layer from a parsed DwtGuard table.

        Relative site roots are resolved against the directory of ``config_file``
        (or the current directory for in-code dicts).

        Args:
            data (TomlTable): The ``dwtguard.toml`` document or ``[tool.dwtguard]`` table.
            config_file (Path | None): The file the table was read from.

        Returns:
            MutableConfig: The layer.

        Raises:
            ConfigError: If a value has the wrong type or range.
        """
        draft = cls()
        draft.warnings.extend(validate_keys(data, config_file))
        base: Path = config_file.parent if config_file is not None else Path.cwd()

        site: TomlTable = _expect(
            data.get(Toml.SECTION_SITE, {}), dict, Toml.SECTION_SITE, config_file
        )
        if Toml.KEY_ROOTS in site:
            for raw in _expect_str_list(site[Toml.KEY_ROOTS], Toml.KEY_ROOTS, config_file):
                p = Path(raw)
                draft.site_roots.append((p if p.is_absolute() else base / p).resolve())

        files: TomlTable = _expect(
            data.get(Toml.SECTION_FILES, {}), dict, Toml.SECTION_FILES, config_file
        )
        if Toml.KEY_EXTENSIONS in files:
            draft.file_extensions = _expect_str_list(
                files[Toml.KEY_EXTENSIONS], Toml.KEY_EXTENSIONS, config_file
            )
        if Toml.KEY_EXCLUDE in files:
            draft.exclude_patterns = _expect_str_list(
                files[Toml.KEY_EXCLUDE], Toml.KEY_EXCLUDE, config_file
            )
        if Toml.KEY_MAX_FILES in files:
            draft.max_files = _positive(
                _expect(files[Toml.KEY_MAX_FILES], int, Toml.KEY_MAX_FILES, config_file),
                Toml.KEY_MAX_FILES,
                config_file,
            )
        if Toml.KEY_HEAD_BYTES in files:
            draft.head_bytes = _positive(
                _expect(files[Toml.KEY_HEAD_BYTES], int, Toml.KEY_HEAD_BYTES, config_file),
                Toml.KEY_HEAD_BYTES,
                config_file,
            )

        resolver: TomlTable = _expect(
            data.get(Toml.SECTION_RESOLVER, {}), dict, Toml.SECTION_RESOLVER, config_file
        )
        if Toml.KEY_MAX_CONDITIONAL_PASSES in resolver:
            draft.max_conditional_passes = _positive(
                _expect(
                    resolver[Toml.KEY_MAX_CONDITIONAL_PASSES],
                    int,
                    Toml.KEY_MAX_CONDITIONAL_PASSES,
                    config_file,
                ),
                Toml.KEY_MAX_CONDITIONAL_PASSES,
                config_file,
            )
        if Toml.KEY_LOCK_CODE_OUTSIDE_HTML in resolver:
            draft.lock_code_outside_html = _expect(
                resolver[Toml.KEY_LOCK_CODE_OUTSIDE_HTML],
                bool,
                Toml.KEY_LOCK_CODE_OUTSIDE_HTML,
                config_file,
            )

        writer: TomlTable = _expect(
            data.get(Toml.SECTION_WRITER, {}), dict, Toml.SECTION_WRITER, config_file
        )
        if Toml.KEY_NEWLINE in writer:
            raw_nl: str = _expect(writer[Toml.KEY_NEWLINE], str, Toml.KEY_NEWLINE, config_file)
            try:
                draft.newline = NewlineMode(raw_nl.lower())
            except ValueError as e:
                raise ConfigError(
                    f"'{Toml.KEY_NEWLINE}' must be one of "
                    f"{', '.join(m.value for m in NewlineMode)}; got {raw_nl!r}",
                    config_file,
                ) from e

        for warning in draft.warnings:
            logger.warning("%s", warning)
        return draft

    @classmethod
    def from_toml_file(cls, path: Path) -> MutableConfig | None:
        """Load one layer from ``dwtguard.toml`` or ``pyproject.toml``.

        Returns:
            MutableConfig | None: The layer, or None for a ``pyproject.toml``
            without a ``[tool.dwtguard]`` table.

        Raises:
            ConfigError: If the file is unreadable, malformed, or holds bad values.
        """
        logger.debug("Loading config layer: %s", path)
        section: TomlTable | None = extract_tool_section(path, load_toml_dict(path))
        if section is None:
            return None
        draft: MutableConfig = cls.from_toml_dict(section, config_file=path)
        draft.config_files = [path]
        return draft

    @classmethod
    def discover_local_config_files(cls, start: Path) -> list[Path]:
        """Return config files found walking up from ``start``, root-most first.

        Within a directory ``pyproject.toml`` precedes ``dwtguard.toml`` so the
        latter wins on merge. A file declaring ``root = true`` stops the walk
        after its directory.

        Args:
            start (Path): Anchor file or directory.

        Returns:
            list[Path]: Config files in merge order.
        """
        per_dir: list[list[Path]] = []
        cur: Path = start.resolve()
        if cur.is_file():
            cur = cur.parent

        while True:
            stop_here: bool = False
            entries: list[Path] = []
            for name in (PYPROJECT_TOML_NAME, DWTGUARD_TOML_NAME):
                p: Path = cur / name
                if not p.is_file():
                    continue
                try:
                    section: TomlTable | None = extract_tool_section(p, load_toml_dict(p))
                except ConfigError as e:
                    # Reported again, as an error, when the layer is loaded
                    logger.debug("Ignoring parse error during discovery: %s", e)
                    entries.append(p)
                    continue
                if section is None:
                    continue
                entries.append(p)
                logger.debug("Discovered config file: %s", p)
                if section.get(Toml.KEY_ROOT) is True:
                    stop_here = True
            if entries:
                per_dir.append(entries)

            parent: Path = cur.parent
            if parent == cur or stop_here:
                break
            cur = parent

        ordered: list[Path] = []
        for entries in reversed(per_dir):
            ordered.extend(entries)
        return ordered

    @classmethod
    def load_merged(
        cls,
        *,
        anchor: Path | None = None,
        extra_config_files: Iterable[Path] = (),
        no_config: bool = False,
    ) -> MutableConfig:
        """Discover and merge configuration layers into a draft.

        Args:
            anchor (Path | None): Discovery start (defaults to the working directory).
            extra_config_files (Iterable[Path]): Files merged after discovery, in order.
            no_config (bool): Skip upward discovery.

        Returns:
            MutableConfig: The merged draft, ready for overrides and `freeze`.

        Raises:
            ConfigError: If any layer is malformed.
        """
        draft: MutableConfig = cls.from_defaults()
        if not no_config:
            for path in cls.discover_local_config_files(anchor or Path.cwd()):
                layer: MutableConfig | None = cls.from_toml_file(path)
                if layer is not None:
                    draft = draft.merge_with(layer)
        for extra in extra_config_files:
            layer = cls.from_toml_file(Path(extra))
            if layer is None:
                raise ConfigError(f"no [tool.{PYPROJECT_TOOL_SECTION}] table", Path(extra))
            draft = draft.merge_with(layer)
        return draft

    # ------------------------------- Merging -------------------------------
    def merge_with(self, other: MutableConfig) -> MutableConfig:
        """Return a new draft where values declared by ``other`` override this one."""
        return MutableConfig(
            site_roots=other.site_roots or self.site_roots,
            file_extensions=other.file_extensions or self.file_extensions,
            exclude_patterns=other.exclude_patterns or self.exclude_patterns,
            max_files=other.max_files if other.max_files is not None else self.max_files,
            head_bytes=other.head_bytes if other.head_bytes is not None else self.head_bytes,
            max_conditional_passes=other.max_conditional_passes
            if other.max_conditional_passes is not None
            else self.max_conditional_passes,
            lock_code_outside_html=other.lock_code_outside_html
            if other.lock_code_outside_html is not None
            else self.lock_code_outside_html,
            newline=other.newline if other.newline is not None else self.newline,
            config_files=self.config_files + other.config_files,
            warnings=self.warnings + other.warnings,
        )

    def apply_overrides(self, overrides: Mapping[str, Any]) -> MutableConfig:
        """Apply CLI/API overrides in place; ``None`` values are ignored.

        Recognized keys: ``site_roots`` (paths, resolved against the working
        directory), ``max_conditional_passes``, ``lock_code_outside_html`` and
        ``newline``.

        Returns:
            MutableConfig: ``self``, for chaining.
        """
        roots: Iterable[Path] | None = overrides.get("site_roots")
        if roots:
            self.site_roots = [Path(r).resolve() for r in roots]
        passes: int | None = overrides.get("max_conditional_passes")
        if passes is not None:
            self.max_conditional_passes = passes
        lock: bool | None = overrides.get("lock_code_outside_html")
        if lock is not None:
            self.lock_code_outside_html = lock
        newline: str | NewlineMode | None = overrides.get("newline")
        if newline is not None:
            self.newline = NewlineMode(newline)
        return self
