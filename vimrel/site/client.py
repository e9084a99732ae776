"""www.vim.org client driven through the site's HTML forms.

This module provides:
- SiteClient: Protocol for the site actions (injectable for tests)
- RequestsSiteClient: Real implementation on top of a requests.Session
- MockSiteClient: Records calls instead of talking to the site
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

import requests
from requests import Response, Session
from requests.exceptions import RequestException

from vimrel import __version__
from vimrel.core.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from vimrel.site.forms import HtmlForm, find_form, parse_forms

__all__ = [
    "MockSiteClient",
    "RequestsSiteClient",
    "SiteClient",
    "SiteError",
    "USER_AGENT",
    "add_version_url",
]

USER_AGENT = f"vimscriptuploader/{__version__}"


class SiteError(RuntimeError):
    """Raised when the site cannot be reached or does not serve the expected form."""


def add_version_url(base_url: str, script_id: str) -> str:
    return f"{base_url.rstrip('/')}/scripts/add_script_version.php?script_id={int(script_id)}"


@runtime_checkable
class SiteClient(Protocol):
    """Protocol for the site actions used by the uploader.

    Each method returns the body of the final response.
    """

    def login(self, username: str, password: str) -> str: ...

    def logout(self) -> str: ...

    def add_script_version(self, script_id: str, *, version: str, message: str, file: Path) -> str:
        """Publish ``file`` as a new version of script ``script_id``."""
        ...

    def close(self) -> None: ...


class RequestsSiteClient:
    """Site client using a requests session (cookies carry the login)."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = USER_AGENT,
        session: Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers["User-Agent"] = user_agent

    def _get(self, url: str) -> Response:
        try:
            response = self._session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except RequestException as exc:
            raise SiteError(f"GET {url} failed: {exc}") from exc
        return response

    def _form(self, page: Response, name: str, method: str | None = None) -> HtmlForm:
        form = find_form(parse_forms(page.text, page.url), name, method)
        if form is None:
            raise SiteError(f"Form '{name}' not found on {page.url}")
        return form

    def _submit(
        self,
        form: HtmlForm,
        files: dict[str, tuple[str, bytes]] | None = None,
    ) -> Response:
        data = form.submission()
        try:
            if form.method == "POST":
                response = self._session.post(
                    form.action, data=data, files=files or None, timeout=self.timeout
                )
            else:
                response = self._session.get(form.action, params=data, timeout=self.timeout)
            response.raise_for_status()
        except RequestException as exc:
            raise SiteError(f"{form.method} {form.action} failed: {exc}") from exc
        return response

    def login(self, username: str, password: str) -> str:
        page = self._get(f"{self.base_url}/login.php")
        form = self._form(page, "login")
        form.set("userName", username)
        form.set("password", password)
        return self._submit(form).text

    def logout(self) -> str:
        return self._get(f"{self.base_url}/logout.php").text

    def add_script_version(self, script_id: str, *, version: str, message: str, file: Path) -> str:
        page = self._get(add_version_url(self.base_url, script_id))
        form = self._form(page, "script", method="POST")
        form.set("script_version", version)
        form.set("version_comment", message)
        if not form.file_fields:
            raise SiteError(f"Form 'script' on {page.url} has no file upload field")
        try:
            content = file.read_bytes()
        except OSError as exc:
            raise SiteError(f"Cannot read {file}: {exc}") from exc
        return self._submit(form, files={form.file_fields[0]: (file.name, content)}).text

    def close(self) -> None:
        self._session.close()


@dataclass(frozen=True, slots=True)
class SiteCall:
    action: str
    args: tuple[str, ...]


class MockSiteClient:
    """Mock site client for testing.

    Usage:
        client = MockSiteClient()
        client.fail_on("add_script_version", SiteError("boom"))
        uploader = Uploader(config, client=client, console=MockConsole())
    """

    def __init__(self) -> None:
        self.calls: list[SiteCall] = []
        self._failures: dict[str, Exception] = {}
        self.closed = False

    def fail_on(self, action: str, error: Exception) -> None:
        self._failures[action] = error

    def _record(self, action: str, *args: str) -> str:
        self.calls.append(SiteCall(action, args))
        if action in self._failures:
            raise self._failures[action]
        return f"<html>{action} ok</html>"

    @property
    def actions(self) -> list[str]:
        return [c.action for c in self.calls]

    def login(self, username: str, password: str) -> str:
        return self._record("login", username, password)

    def logout(self) -> str:
        return self._record("logout")

    def add_script_version(self, script_id: str, *, version: str, message: str, file: Path) -> str:
        return self._record("add_script_version", script_id, version, message, str(file))

    def close(self) -> None:
        self.closed = True
