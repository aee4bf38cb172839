"""Marker files that record where enumeration results were written."""

from __future__ import annotations

import enum
import posixpath
from urllib.parse import unquote

from critscore.cloudstorage import _split_url, new_writer


class UnknownMarkerTypeError(ValueError):
    """The text does not name a marker type."""


def _go_dir(path: str) -> str:
    head = path[: path.rfind("/") + 1]
    directory = posixpath.normpath(head) if head else "."
    if directory.startswith("//"):
        directory = "/" + directory.lstrip("/")
    return directory


class MarkerType(enum.Enum):
    """How the output location is written into the marker file."""

    FULL = "full"
    FILE = "file"
    DIR = "dir"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str | bytes) -> MarkerType:
        """Return the marker type named by text."""
        if isinstance(text, bytes):
            text = text.decode("utf-8", errors="replace")
        try:
            return cls(text)
        except ValueError:
            raise UnknownMarkerTypeError(f"unknown marker type: {text!r}") from None

    def transform(self, path: str) -> str:
        """Return the form of path that this marker type records.

        FULL keeps path as is; FILE reduces a bucket URL to the key path;
        DIR is the directory part of what FILE gives.
        """
        if self is MarkerType.FULL:
            return path
        try:
            u = _split_url(path)
        except ValueError:
            u = None
        if u is not None and u.scheme:
            key = unquote(u.path)
            if u.scheme == "file" and not u.netloc:
                path = key
            else:
                path = key[1:] if key.startswith("/") else key
        if self is MarkerType.DIR:
            return _go_dir(path)
        return path


def write(marker_type: MarkerType, marker_file: str, out_file: str) -> None:
    """Write out_file, transformed by marker_type, as a line to marker_file."""
    with new_writer(marker_file) as marker:
        marker.write(marker_type.transform(out_file) + "\n")