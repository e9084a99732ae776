"""Typed configuration for the descriptor builder and the uploader.

Options come from three layers, lowest precedence first: the defaults declared
on the dataclasses below, a YAML config file (``-c/--config``), and flags given
explicitly on the command line. The merged mapping is validated once and
turned into a frozen dataclass before any work starts.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, TypeVar, get_args

import yaml

from .result import Err, Ok, Result
from .structured import (
    FieldTypeError,
    StrDict,
    as_str_dict,
    get_bool,
    get_float,
    get_scalar_str,
    get_str,
)

__all__ = [
    "ArchiveFormat",
    "BuilderCommand",
    "BuilderConfig",
    "ChecksumAlgorithm",
    "ConfigError",
    "DEFAULT_BASE_URL",
    "UploaderConfig",
    "load_config_file",
    "merge_options",
    "read_recipe",
    "resolve_builder_config",
    "resolve_uploader_config",
]

DEFAULT_BASE_URL = "https://www.vim.org"
DEFAULT_TIMEOUT_SECONDS = 30.0

ArchiveFormat = Literal["zip", "vba"]
ChecksumAlgorithm = Literal["md5", "sha1", "sha256"]
BuilderCommand = Literal["default", "print_version", "print_saved_version"]


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when options cannot be loaded or validated."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class BuilderConfig:
    """Options of the descriptor builder.

    Relative paths are kept as given and resolved against ``dir`` on use, so
    that the ``file`` field of a descriptor records the archive path exactly
    as the user wrote it.
    """

    name: str
    files: tuple[Path, ...]
    archive: Path
    dir: Path = Path(".")
    format: ArchiveFormat = "vba"
    outfile: Path | None = None  # None writes to stdout
    history_fmt: str | None = None
    ignore_git_messages_rx: str | None = None
    checksum: ChecksumAlgorithm = "md5"
    command: BuilderCommand = "default"

    def resolve(self, path: Path) -> Path:
        if path.is_absolute():
            return path
        return self.dir / path

    @property
    def archive_path(self) -> Path:
        return self.resolve(self.archive)

    @property
    def outfile_path(self) -> Path | None:
        if self.outfile is None:
            return None
        return self.resolve(self.outfile)

    @property
    def source_paths(self) -> tuple[Path, ...]:
        return tuple(self.resolve(f) for f in self.files)


@dataclass(frozen=True, slots=True)
class UploaderConfig:
    """Options of the uploader.

    ``id``, ``file``, ``message`` and ``version`` are defaults for every
    descriptor; values read from a descriptor file take precedence.
    """

    username: str | None = None
    password: str | None = None
    id: str | None = None
    file: str | None = None
    message: str | None = None
    version: str | None = None
    dry: bool = False
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    @property
    def has_credentials(self) -> bool:
        return bool(self.username) and bool(self.password)

    def descriptor_defaults(self) -> dict[str, str | None]:
        return {
            "id": self.id,
            "version": self.version,
            "message": self.message,
            "file": self.file,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> UploaderConfig:
        """Create an UploaderConfig from a merged option mapping.

        Raises:
            FieldTypeError: A value has the wrong type.
        """
        return cls(
            username=get_scalar_str(data, "username"),
            password=get_scalar_str(data, "password"),
            id=get_scalar_str(data, "id"),
            file=get_str(data, "file"),
            message=get_str(data, "message"),
            version=get_scalar_str(data, "version"),
            dry=get_bool(data, "dry") or False,
            base_url=(get_str(data, "base_url") or DEFAULT_BASE_URL).rstrip("/"),
            timeout=get_float(data, "timeout") or DEFAULT_TIMEOUT_SECONDS,
        )


def load_config_file(path: Path) -> Result[StrDict, ConfigError]:
    """Load a YAML config file.

    An empty file yields an empty mapping.

    Args:
        path: Path to the YAML file

    Returns:
        Ok(mapping) on success, Err(ConfigError) on failure
    """
    if not path.is_file():
        return Err(ConfigError(f"Configuration file not found: {path}", path=path))
    try:
        data_obj: object = yaml.safe_load(path.read_text(encoding="utf-8"))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except yaml.YAMLError as e:
        return Err(ConfigError(f"Invalid YAML syntax: {e}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    if data_obj is None:
        return Ok({})
    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a YAML mapping", path=path))
    return Ok(data)


def merge_options(base: Mapping[str, object], overrides: Mapping[str, object]) -> StrDict:
    """Overlay explicitly given options (not None) on top of ``base``."""
    merged: StrDict = dict(base)
    for key, value in overrides.items():
        if value is not None:
            merged[key] = value
    return merged


def read_recipe(path: Path) -> Result[tuple[Path, ...], ConfigError]:
    """Read the source file list of a vimball recipe (one path per line)."""
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Cannot read recipe: {e}", path=path))
    return Ok(tuple(Path(line.strip()) for line in lines if line.strip()))


def _as_path(data: Mapping[str, object], key: str) -> Path | None:
    value = data.get(key)
    if value is None or isinstance(value, Path):
        return value
    if isinstance(value, str):
        return Path(value) if value else None
    raise FieldTypeError(key, "a path", value)


def _as_paths(data: Mapping[str, object], key: str) -> tuple[Path, ...] | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, (str, Path)):
        return (Path(value),)
    if isinstance(value, (list, tuple)):
        items: list[Path] = []
        for item in value:
            if not isinstance(item, (str, Path)):
                raise FieldTypeError(key, "a list of paths", item)
            items.append(Path(item))
        return tuple(items)
    raise FieldTypeError(key, "a list of paths", value)


C = TypeVar("C")


def _choice(data: Mapping[str, object], key: str, choices: object, default: C) -> C:
    value = data.get(key)
    if value is None:
        return default
    allowed = get_args(choices)
    if value not in allowed:
        raise ValueError(f"'{key}' must be one of {', '.join(allowed)}, got {value!r}")
    return value  # type: ignore[return-value]


def resolve_builder_config(data: Mapping[str, object]) -> Result[BuilderConfig, ConfigError]:
    """Validate merged builder options.

    A ``recipe`` implies the source files and the plugin name, and provides
    defaults for ``archive`` and ``outfile`` next to the recipe file.
    """
    try:
        work_dir = _as_path(data, "dir") or Path(".")
        fmt: ArchiveFormat = _choice(data, "format", ArchiveFormat, "vba")
        checksum: ChecksumAlgorithm = _choice(data, "checksum", ChecksumAlgorithm, "md5")
        command: BuilderCommand = _choice(data, "command", BuilderCommand, "default")
        name = get_str(data, "name")
        archive = _as_path(data, "archive")
        outfile = _as_path(data, "outfile")
        files = _as_paths(data, "files")
        recipe = _as_path(data, "recipe")
        history_fmt = get_str(data, "history_fmt")
        ignore_rx = get_str(data, "ignore_git_messages_rx")
    except ValueError as e:
        return Err(ConfigError(f"Invalid option: {e}"))

    if ignore_rx is not None:
        try:
            re.compile(ignore_rx)
        except re.error as e:
            return Err(ConfigError(f"Invalid ignore_git_messages_rx: {e}"))

    if not work_dir.is_dir():
        return Err(ConfigError(f"Directory not found: {work_dir}", path=work_dir))

    if recipe is not None:
        recipe_path = recipe if recipe.is_absolute() else work_dir / recipe
        recipe_files = read_recipe(recipe_path)
        if isinstance(recipe_files, Err):
            return recipe_files
        files = recipe_files.value
        name = recipe.stem
        archive = archive or recipe.parent / f"{name}.{fmt}"
        outfile = outfile or recipe.parent / f"{name}.yml"

    if str(outfile) == "-":
        outfile = None

    for param, value in (("name", name), ("files", files), ("archive", archive)):
        if not value:
            return Err(ConfigError(f"No {param} given"))
    assert name is not None and files is not None and archive is not None

    config = BuilderConfig(
        name=name,
        files=files,
        archive=archive,
        dir=work_dir,
        format=fmt,
        outfile=outfile,
        history_fmt=history_fmt,
        ignore_git_messages_rx=ignore_rx,
        checksum=checksum,
        command=command,
    )
    if not config.archive_path.is_file():
        return Err(
            ConfigError(
                f"Distribution archive does not exist: {config.archive}",
                path=config.archive_path,
            )
        )
    return Ok(config)


def resolve_uploader_config(data: Mapping[str, object]) -> Result[UploaderConfig, ConfigError]:
    """Validate merged uploader options."""
    try:
        return Ok(UploaderConfig.from_dict(data))
    except FieldTypeError as e:
        return Err(ConfigError(f"Invalid option: {e}"))
