"""Access to the www.vim.org script pages."""

from vimrel.site.client import (
    MockSiteClient,
    RequestsSiteClient,
    SiteClient,
    SiteError,
    add_version_url,
)
from vimrel.site.forms import HtmlForm, find_form, parse_forms

__all__ = [
    "HtmlForm",
    "MockSiteClient",
    "RequestsSiteClient",
    "SiteClient",
    "SiteError",
    "add_version_url",
    "find_form",
    "parse_forms",
]
