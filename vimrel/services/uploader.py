"""Uploader: publish release descriptors as new script versions.

One login per run, one form submission per descriptor, and a logout that runs
on every exit path of the descriptor loop, including a SiteError raised in
the middle of it. A descriptor that cannot be uploaded (unreadable, invalid
id, missing fields, missing archive) is reported and skipped; the rest of the
batch still runs.

The login response is not inspected: a rejected password only shows up as
failing uploads afterwards.
"""

from __future__ import annotations

import re
import sys
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Literal

from vimrel.core.config import UploaderConfig
from vimrel.core.descriptor import ReleaseDescriptor, dump_descriptor, load_descriptor
from vimrel.core.result import Err, Ok, Result
from vimrel.output.console import ConsoleProtocol
from vimrel.site.client import SiteClient, add_version_url

__all__ = ["UploadError", "UploadReport", "Uploader", "is_valid_script_id"]

_SCRIPT_ID = re.compile(r"^\d+$")


@dataclass(frozen=True, slots=True)
class UploadError:
    kind: Literal["credentials_missing"]
    message: str
    hint: str | None = None


def _empty_paths() -> list[Path]:
    return []


@dataclass
class UploadReport:
    uploaded: list[Path] = field(default_factory=_empty_paths)
    failed: list[Path] = field(default_factory=_empty_paths)

    @property
    def all_ok(self) -> bool:
        return not self.failed


def is_valid_script_id(script_id: str | None) -> bool:
    """True for a string of digits with a non-zero value."""
    if not script_id or not _SCRIPT_ID.match(script_id):
        return False
    return int(script_id) != 0


class Uploader:
    """Publishes descriptors on the site through a SiteClient."""

    def __init__(
        self,
        config: UploaderConfig,
        *,
        client: SiteClient,
        console: ConsoleProtocol,
        stdout: IO[str] | None = None,
    ) -> None:
        self._config = config
        self._client = client
        self._console = console
        self._stdout = stdout or sys.stdout
        self._logged_in = False

    @property
    def logged_in(self) -> bool:
        return self._logged_in

    def login(self) -> Result[None, UploadError]:
        """Log in once; later calls are no-ops while the session is open."""
        if self._logged_in:
            return Ok(None)
        if not self._config.has_credentials:
            return Err(
                UploadError(
                    "credentials_missing",
                    "Username or password is missing!",
                    hint="use --username/--password, the config file or VIMSCRIPT_USERNAME/VIMSCRIPT_PASSWORD",
                )
            )
        user = self._config.username or ""
        if self._config.dry:
            self._console.warning(f"Login: {user}:*********")
        else:
            body = self._client.login(user, self._config.password or "")
            self._console.debug(f"Login result: {body}")
        self._logged_in = True
        return Ok(None)

    def logout(self) -> None:
        if self._config.dry:
            self._console.warning("Log out")
        else:
            body = self._client.logout()
            self._console.debug(f"Logout result: {body}")
        self._logged_in = False

    @contextmanager
    def session(self) -> Iterator[Uploader]:
        """Scope of a site session: logs out however the block exits."""
        try:
            yield self
        finally:
            self.logout()

    def upload(self, descriptor: ReleaseDescriptor) -> bool:
        """Publish one descriptor. Returns False if it was skipped."""
        if not is_valid_script_id(descriptor.id):
            self._console.error(f"No valid script ID: {descriptor.id!r}")
            return False
        if not descriptor.is_complete:
            missing = ", ".join(descriptor.missing_fields)
            self._console.error(f"Incomplete script definition (missing: {missing})")
            return False
        assert descriptor.id and descriptor.version and descriptor.message and descriptor.file

        url = add_version_url(self._config.base_url, descriptor.id)
        self._console.info(f"Upload URL: {url}")

        archive = Path(descriptor.file)
        if not archive.is_file():
            self._console.error(f"Plugin file does not exist: {archive}")
            return False

        if self._config.dry:
            self._stdout.write(f"# {url}\n")
            dump_descriptor(descriptor, self._stdout)
            return True

        body = self._client.add_script_version(
            descriptor.id,
            version=descriptor.version,
            message=descriptor.message,
            file=archive,
        )
        self._console.debug(f"Upload result: {body}")
        self._console.success(f"{archive.name} {descriptor.version} uploaded to script #{descriptor.id}")
        return True

    def upload_file(self, path: Path) -> bool:
        """Load a descriptor file, fill gaps from the options, and publish it."""
        loaded = load_descriptor(path)
        if isinstance(loaded, Err):
            self._console.error(loaded.error.message)
            return False
        descriptor = loaded.value.with_defaults(self._config.descriptor_defaults())
        self._console.debug(f"{path}: {descriptor.as_dict()}")
        return self.upload(descriptor)

    def run(self, paths: Iterable[Path]) -> Result[UploadReport, UploadError]:
        """Log in, publish every descriptor file, log out.

        A SiteError from the client propagates after the logout.
        """
        login = self.login()
        if isinstance(login, Err):
            return login

        report = UploadReport()
        with self.session():
            for path in paths:
                if self.upload_file(path):
                    report.uploaded.append(path)
                else:
                    report.failed.append(path)
        return Ok(report)
