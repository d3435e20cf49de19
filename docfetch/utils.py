"""Utility helpers for path, URL and file handling."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import Union
from urllib.parse import urlparse

_URL_SCHEMES = ("file:", "private:", "vnd.sun.star.")


def to_file_url(target: Union[str, Path]) -> str:
    """Return an office-loadable URL for a local path, leaving URLs untouched."""
    value = str(target)
    if "://" in value or value.startswith(_URL_SCHEMES):
        return value
    return Path(os.path.abspath(os.path.expanduser(value))).as_uri()


def url_filename(url: str) -> str:
    """Last segment of the URL path, ignoring a trailing slash."""
    return PurePosixPath(urlparse(url).path).name


def atomic_write_bytes(destination: Path, data: bytes) -> Path:
    """Write data next to destination and move it into place in one step."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=destination.parent, prefix=f".{destination.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        os.replace(tmp_name, destination)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    return destination


def atomic_write_text(destination: Path, text: str, encoding: str = "utf-8") -> Path:
    return atomic_write_bytes(destination, text.encode(encoding))
