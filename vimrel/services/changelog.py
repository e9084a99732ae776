"""Changelog text built from git tags and commit subjects.

The latest release is found by sorting all tags with a permissive comparator:
tags that look like ``v105`` or ``105`` are read as ``105 / 100``, everything
else as the leading float of the tag name (``0.0`` when there is none), and
two tags that both come out as zero are compared as strings. Tags such as
``v1.05`` therefore count as zero; existing release histories rely on this
order, so it is kept as is.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from functools import cmp_to_key

from vimrel.core.result import Err
from vimrel.git.repository import Repository
from vimrel.output.console import ConsoleProtocol

__all__ = [
    "build_changelog",
    "changelog_from_log",
    "compare_tags",
    "latest_tag",
    "leading_float",
    "sort_tags",
]

_NUMERIC_TAG = re.compile(r"^v?(\d+)$")
_LEADING_FLOAT = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d+)?|\.\d+)(?:[eE][+-]?\d+)?")
_LEADING_HASH = re.compile(r"^\S+")


def leading_float(text: str) -> float:
    """Parse the longest float prefix of ``text``; 0.0 if there is none."""
    m = _LEADING_FLOAT.match(text)
    if m is None:
        return 0.0
    return float(m.group(0))


def _tag_key(tag: str) -> tuple[float, str]:
    m = _NUMERIC_TAG.match(tag)
    if m is not None:
        digits = m.group(1)
        return int(digits) / 100, digits
    return leading_float(tag), tag


def compare_tags(a: str, b: str) -> int:
    """Three-way comparison of two tag names."""
    a_value, a_text = _tag_key(a)
    b_value, b_text = _tag_key(b)
    if a_value == 0 and b_value == 0:
        return (a_text > b_text) - (a_text < b_text)
    return (a_value > b_value) - (a_value < b_value)


def sort_tags(tags: Iterable[str]) -> list[str]:
    return sorted(tags, key=cmp_to_key(compare_tags))


def latest_tag(tags: Iterable[str]) -> str | None:
    ordered = sort_tags(tags)
    return ordered[-1] if ordered else None


def changelog_from_log(lines: Sequence[str], ignore_rx: str | None = None) -> str:
    """Turn ``git log --oneline`` output into a bullet list, oldest first.

    Lines matching ``ignore_rx`` (searched, after the hash was replaced) are
    dropped. Returns an empty string when nothing is left.
    """
    entries = [_LEADING_HASH.sub("-", line, count=1) for line in reversed(lines)]
    if ignore_rx:
        pattern = re.compile(ignore_rx)
        entries = [line for line in entries if not pattern.search(line)]
    if not entries:
        return ""
    return "\n".join(entries) + "\n"


def build_changelog(
    repo: Repository,
    *,
    console: ConsoleProtocol,
    ignore_rx: str | None = None,
) -> str:
    """Changelog of the commits since the latest tag of ``repo``.

    Returns an empty string without a repository, without tags, or without
    new commits. Failing git commands are reported as warnings.
    """
    if not repo.exists():
        console.debug(f"No git repository in {repo.path}")
        return ""

    tags = repo.tags()
    if isinstance(tags, Err):
        console.warning(f"git tag failed: {tags.error.message}")
        return ""

    tag = latest_tag(tags.value)
    if tag is None:
        console.info("No git tags found")
        return ""

    console.debug(f"git log --oneline {tag}..")
    log = repo.log_oneline_since(tag)
    if isinstance(log, Err):
        console.warning(f"git log failed: {log.error.message}")
        return ""
    return changelog_from_log(log.value, ignore_rx)
