from __future__ import annotations

import hashlib
from pathlib import Path

from vimrel.core.config import ChecksumAlgorithm

__all__ = ["checksum_line", "file_digest"]


def file_digest(path: Path, algorithm: ChecksumAlgorithm = "md5") -> str:
    h = hashlib.new(algorithm)
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def checksum_line(path: Path, algorithm: ChecksumAlgorithm = "md5") -> str:
    """The closing line of a version comment, e.g. ``MD5 checksum: 5d41...``."""
    return f"{algorithm.upper()} checksum: {file_digest(path, algorithm)}"
