"""Descriptor builder: sources + git history + archive -> release descriptor.

The builder never writes a partial descriptor. A descriptor already stored in
the output file is read first; its script id must agree with the one found in
the sources, which guards against overwriting the record of another plugin.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import IO, Literal

from vimrel.core.config import BuilderConfig
from vimrel.core.descriptor import (
    ReleaseDescriptor,
    dump_descriptor,
    load_descriptor,
    write_descriptor,
)
from vimrel.core.result import Err, Ok, Result
from vimrel.git.repository import Repository
from vimrel.output.console import ConsoleProtocol
from vimrel.services.changelog import build_changelog
from vimrel.services.checksum import checksum_line
from vimrel.services.markers import find_script_id, find_version

__all__ = ["BuildError", "DescriptorBuilder"]


@dataclass(frozen=True, slots=True)
class BuildError:
    kind: Literal[
        "source_unreadable",
        "saved_unreadable",
        "version_not_found",
        "id_mismatch",
        "archive_unreadable",
        "incomplete",
        "output_failed",
    ]
    message: str
    hint: str | None = None


def _history_message(fmt: str, name: str) -> str:
    try:
        return fmt % name
    except (TypeError, ValueError):
        # No (or unusable) placeholder: take the template verbatim.
        return fmt


class DescriptorBuilder:
    """Builds and stores the release descriptor of one plugin."""

    def __init__(
        self,
        config: BuilderConfig,
        *,
        console: ConsoleProtocol,
        repo: Repository | None = None,
    ) -> None:
        self._config = config
        self._console = console
        self._repo = repo or Repository(config.dir)

    @property
    def config(self) -> BuilderConfig:
        return self._config

    def current_version(self) -> Result[str, BuildError]:
        """Version number declared in the plugin sources."""
        found = find_version(self._config.source_paths, self._config.name, console=self._console)
        if isinstance(found, Err):
            return Err(BuildError("source_unreadable", found.error.message, str(found.error.path)))
        if found.value is None:
            return Err(
                BuildError(
                    "version_not_found",
                    f"Cannot find version number for {self._config.name}",
                    hint=f"expected a line 'let loaded_{self._config.name} = <number>'",
                )
            )
        return Ok(found.value)

    def saved_descriptor(self) -> Result[ReleaseDescriptor | None, BuildError]:
        """Descriptor stored in the output file, None if there is none yet."""
        path = self._config.outfile_path
        if path is None or not path.exists():
            return Ok(None)
        loaded = load_descriptor(path)
        if isinstance(loaded, Err):
            return Err(BuildError("saved_unreadable", loaded.error.message, str(path)))
        return Ok(loaded.value)

    def saved_version(self) -> Result[str | None, BuildError]:
        saved = self.saved_descriptor()
        if isinstance(saved, Err):
            return saved
        return Ok(saved.value.version if saved.value else None)

    def _script_id(self, previous: ReleaseDescriptor) -> Result[str | None, BuildError]:
        found = find_script_id(self._config.source_paths, self._config.name, console=self._console)
        if isinstance(found, Err):
            return Err(BuildError("source_unreadable", found.error.message, str(found.error.path)))

        script_id = found.value
        if script_id is None:
            self._console.error("No Script ID found")
            return Ok(previous.id)
        if previous.id and previous.id != script_id:
            return Err(
                BuildError(
                    "id_mismatch",
                    f"Script ID mismatch: Expected {previous.id} but got {script_id}",
                    hint=f"{self._config.outfile} belongs to another script",
                )
            )
        return Ok(script_id)

    def _message(self) -> Result[str, BuildError]:
        message = build_changelog(
            self._repo,
            console=self._console,
            ignore_rx=self._config.ignore_git_messages_rx,
        )
        if not message and self._config.history_fmt is not None:
            message = _history_message(self._config.history_fmt, self._config.name) + "\n"

        archive = self._config.archive_path
        try:
            checksum = checksum_line(archive, self._config.checksum)
        except OSError as e:
            return Err(BuildError("archive_unreadable", f"Cannot read archive: {e}", str(archive)))
        return Ok(message + checksum)

    def build(self) -> Result[ReleaseDescriptor, BuildError]:
        """Assemble a complete descriptor, merged with the stored one."""
        saved = self.saved_descriptor()
        if isinstance(saved, Err):
            return saved
        previous = saved.value or ReleaseDescriptor()

        script_id = self._script_id(previous)
        if isinstance(script_id, Err):
            return script_id

        version = self.current_version()
        if isinstance(version, Err):
            return version

        message = self._message()
        if isinstance(message, Err):
            return message

        descriptor = ReleaseDescriptor(
            id=script_id.value,
            version=version.value,
            message=message.value,
            file=str(self._config.archive),
        )
        if not descriptor.is_complete:
            return Err(
                BuildError(
                    "incomplete",
                    "Incomplete script definition",
                    hint=f"missing: {', '.join(descriptor.missing_fields)}",
                )
            )
        return Ok(descriptor)

    def write(self, descriptor: ReleaseDescriptor, stdout: IO[str]) -> Result[Path | None, BuildError]:
        """Store ``descriptor`` in the output file, or dump it to ``stdout``.

        Returns the written path, or None when the descriptor went to stdout.
        """
        path = self._config.outfile_path
        if path is None:
            if not descriptor.is_complete:
                return Err(BuildError("incomplete", "Incomplete script definition"))
            dump_descriptor(descriptor, stdout)
            return Ok(None)

        written = write_descriptor(descriptor, path)
        if isinstance(written, Err):
            kind = "incomplete" if not descriptor.is_complete else "output_failed"
            return Err(BuildError(kind, written.error.message, str(path)))
        self._console.info(f"Wrote {path}")
        return Ok(path)
