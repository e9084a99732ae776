"""Minimal HTML form scraper.

Finds the ``<form>`` elements of a page and collects the values a browser
would submit by default: text and hidden inputs, textareas, the selected (or
first) option of each ``<select>``, checked checkboxes and radio buttons.
File inputs and submit buttons are listed separately so the caller can fill
in the upload and pick the button.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html.parser import HTMLParser
from urllib.parse import urljoin

__all__ = ["HtmlForm", "find_form", "parse_forms"]

_TEXT_LIKE = {"text", "password", "hidden", "email", "number", "search", "tel", "url"}
_BUTTONS = {"submit", "image"}
_CHECKABLE = {"checkbox", "radio"}


@dataclass
class HtmlForm:
    """A form and its default submission values.

    Attributes:
        name: ``name`` (or ``id``) attribute, None if absent
        action: Absolute URL the form submits to
        method: "GET" or "POST"
        fields: Submitted (name, value) pairs in document order
        file_fields: Names of ``<input type="file">`` controls
        buttons: (name, value) of named submit buttons
    """

    name: str | None
    action: str
    method: str
    fields: list[tuple[str, str]] = field(default_factory=list)
    file_fields: list[str] = field(default_factory=list)
    buttons: list[tuple[str, str]] = field(default_factory=list)

    def get(self, name: str) -> str | None:
        for key, value in self.fields:
            if key == name:
                return value
        return None

    def set(self, name: str, value: str) -> None:
        """Set the first control called ``name``, adding one if missing."""
        for i, (key, _) in enumerate(self.fields):
            if key == name:
                self.fields[i] = (name, value)
                return
        self.fields.append((name, value))

    def submission(self, button: int | None = 0) -> list[tuple[str, str]]:
        """Values to send, including the chosen submit button if it is named."""
        data = list(self.fields)
        if button is not None and button < len(self.buttons):
            data.append(self.buttons[button])
        return data


@dataclass
class _Select:
    name: str
    options: list[tuple[str, bool]] = field(default_factory=list)
    pending: tuple[str | None, bool] | None = None
    pending_text: list[str] = field(default_factory=list)


class _FormParser(HTMLParser):
    def __init__(self, page_url: str) -> None:
        super().__init__(convert_charrefs=True)
        self.page_url = page_url
        self.forms: list[HtmlForm] = []
        self._form: HtmlForm | None = None
        self._textarea: tuple[str, list[str]] | None = None
        self._select: _Select | None = None

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        a = {k: (v if v is not None else "") for k, v in attrs}
        if tag == "form":
            self._form = HtmlForm(
                name=a.get("name") or a.get("id"),
                action=urljoin(self.page_url, a.get("action") or self.page_url),
                method=(a.get("method") or "GET").upper(),
            )
            self.forms.append(self._form)
            return
        if self._form is None:
            return

        name = a.get("name")
        if tag == "input":
            kind = (a.get("type") or "text").lower()
            if kind == "file" and name:
                self._form.file_fields.append(name)
            elif kind in _BUTTONS:
                if name:
                    self._form.buttons.append((name, a.get("value", "")))
            elif kind in _CHECKABLE:
                if name and "checked" in a:
                    self._form.fields.append((name, a.get("value") or "on"))
            elif kind in _TEXT_LIKE and name:
                self._form.fields.append((name, a.get("value", "")))
        elif tag == "button":
            if (a.get("type") or "submit").lower() == "submit" and name:
                self._form.buttons.append((name, a.get("value", "")))
        elif tag == "textarea" and name:
            self._textarea = (name, [])
        elif tag == "select" and name:
            self._select = _Select(name)
        elif tag == "option" and self._select is not None:
            self._close_option()
            self._select.pending = (a.get("value"), "selected" in a)

    def handle_data(self, data: str) -> None:
        if self._textarea is not None:
            self._textarea[1].append(data)
        elif self._select is not None and self._select.pending is not None:
            self._select.pending_text.append(data)

    def handle_endtag(self, tag: str) -> None:
        if tag == "form":
            self._form = None
        elif tag == "textarea" and self._textarea is not None:
            name, parts = self._textarea
            if self._form is not None:
                self._form.fields.append((name, "".join(parts)))
            self._textarea = None
        elif tag == "option" and self._select is not None:
            self._close_option()
        elif tag == "select" and self._select is not None:
            self._close_option()
            options = self._select.options
            if self._form is not None and options:
                chosen = next((value for value, selected in options if selected), options[0][0])
                self._form.fields.append((self._select.name, chosen))
            self._select = None

    def _close_option(self) -> None:
        select = self._select
        if select is None or select.pending is None:
            return
        value, selected = select.pending
        if value is None:
            value = "".join(select.pending_text).strip()
        select.options.append((value, selected))
        select.pending = None
        select.pending_text = []


def parse_forms(html: str, page_url: str) -> list[HtmlForm]:
    """All forms of ``html``; relative actions resolve against ``page_url``."""
    parser = _FormParser(page_url)
    parser.feed(html)
    parser.close()
    return parser.forms


def find_form(forms: list[HtmlForm], name: str, method: str | None = None) -> HtmlForm | None:
    for form in forms:
        if form.name == name and (method is None or form.method == method.upper()):
            return form
    return None
