"""Release descriptor: the YAML record passed from the builder to the uploader.

A descriptor file looks like::

    id: '3166'
    version: '1.05'
    message: |-
      - Fix completion in insert mode
      MD5 checksum: 0c5a0c8f2c3b...
    file: vimballs/tlib.vba
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import IO

import yaml

from .result import Err, Ok, Result
from .structured import FieldTypeError, as_str_dict, get_scalar_str, get_str

__all__ = [
    "DESCRIPTOR_FIELDS",
    "DescriptorError",
    "ReleaseDescriptor",
    "dump_descriptor",
    "load_descriptor",
    "write_descriptor",
]

DESCRIPTOR_FIELDS = ("id", "version", "message", "file")


@dataclass(frozen=True, slots=True)
class DescriptorError:
    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseDescriptor:
    """Identifier, version, changelog and archive path of one release.

    Attributes:
        id: Script id assigned by www.vim.org (digits)
        version: Version string, "MAJOR.MINOR"
        message: Version comment, ending with the checksum line
        file: Path of the archive to upload
    """

    id: str | None = None
    version: str | None = None
    message: str | None = None
    file: str | None = None

    @property
    def missing_fields(self) -> tuple[str, ...]:
        return tuple(name for name in DESCRIPTOR_FIELDS if not getattr(self, name))

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields

    def with_defaults(self, defaults: Mapping[str, str | None]) -> ReleaseDescriptor:
        """Fill empty fields from ``defaults``; own values win."""
        filled = {
            name: defaults.get(name)
            for name in DESCRIPTOR_FIELDS
            if not getattr(self, name) and defaults.get(name)
        }
        return replace(self, **filled)

    def as_dict(self) -> dict[str, str | None]:
        return {name: getattr(self, name) for name in DESCRIPTOR_FIELDS}

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> ReleaseDescriptor:
        """Build a descriptor from parsed YAML.

        Raises:
            FieldTypeError: A field has the wrong type.
        """
        return cls(
            id=get_scalar_str(data, "id"),
            version=get_scalar_str(data, "version"),
            message=get_str(data, "message"),
            file=get_str(data, "file"),
        )


def load_descriptor(path: Path) -> Result[ReleaseDescriptor, DescriptorError]:
    """Read a descriptor file. Missing keys are left empty."""
    try:
        data_obj: object = yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(DescriptorError(f"YAML script definition not found: {path}", path=path))
    except yaml.YAMLError as e:
        return Err(DescriptorError(f"Invalid YAML in {path}: {e}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(DescriptorError(f"Cannot read {path}: {e}", path=path))

    if data_obj is None:
        return Ok(ReleaseDescriptor())
    data = as_str_dict(data_obj)
    if data is None:
        return Err(DescriptorError(f"Script definition must be a YAML mapping: {path}", path=path))
    try:
        return Ok(ReleaseDescriptor.from_mapping(data))
    except FieldTypeError as e:
        return Err(DescriptorError(f"Invalid script definition {path}: {e}", path=path))


def dump_descriptor(descriptor: ReleaseDescriptor, stream: IO[str] | None = None) -> str | None:
    """Serialise a descriptor as YAML, keys in field order.

    Returns the YAML text when ``stream`` is None.
    """
    return yaml.safe_dump(
        descriptor.as_dict(),
        stream,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


def write_descriptor(descriptor: ReleaseDescriptor, path: Path) -> Result[Path, DescriptorError]:
    """Write a complete descriptor to ``path``.

    Incomplete descriptors are refused so that a partial record never reaches
    the uploader.
    """
    if not descriptor.is_complete:
        missing = ", ".join(descriptor.missing_fields)
        return Err(DescriptorError(f"Incomplete script definition (missing: {missing})", path=path))
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            dump_descriptor(descriptor, f)
    except OSError as e:
        return Err(DescriptorError(f"Cannot write {path}: {e}", path=path))
    return Ok(path)
