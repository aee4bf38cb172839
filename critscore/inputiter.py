"""Iterating over the repositories given on the command line or in a file."""

from __future__ import annotations

import sys
from typing import Callable, Iterable, Iterator, Sequence, TextIO

from critscore.cloudstorage import _split_url

_STDIN_NAME = "-"
_ERROR_INVALID_NAME = 123


class InvalidInputError(Exception):
    """The single input argument is neither a readable file nor a repo URL."""


class InputIterator:
    """Iterates over input items and releases the underlying resource on close."""

    def __init__(self, items: Iterable[str], closer: Callable[[], object] | None = None) -> None:
        self._items = iter(items)
        self._closer = closer
        self._closed = False

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        return next(self._items)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._closer is not None:
            self._closer()

    def __enter__(self) -> InputIterator:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def lines(stream: Iterable[str]) -> Iterator[str]:
    """Yield each line of stream without its line ending."""
    for line in stream:
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        yield line


def _is_filename_error(err: OSError) -> bool:
    if isinstance(err, FileNotFoundError):
        return True
    return getattr(err, "winerror", None) == _ERROR_INVALID_NAME


def _open(name: str) -> tuple[TextIO, Callable[[], object] | None]:
    if name == _STDIN_NAME:
        return sys.stdin, None
    stream = open(name, encoding="utf-8", errors="replace", newline="\n")
    return stream, stream.close


def open_inputs(args: Sequence[str]) -> InputIterator:
    """Return an iterator over the repositories named by args.

    A single argument is opened as a file ("-" for stdin) and read line by
    line. If no such file exists and the argument parses as a URL it is
    treated as a repo. Two or more arguments are all repos.
    """
    args = list(args)
    if len(args) == 1:
        candidate = args[0]
        try:
            _split_url(candidate)
            is_url = True
        except ValueError:
            is_url = False
        try:
            stream, closer = _open(candidate)
        except OSError as err:
            if not is_url or not _is_filename_error(err):
                raise InvalidInputError(f"opening {candidate}: {err}") from err
        else:
            return InputIterator(lines(stream), closer)
    return InputIterator(args)