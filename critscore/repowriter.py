"""Writers that output lists of repository URLs in different formats."""

from __future__ import annotations

import csv
import enum
from typing import TextIO, Union

_SCORECARD_HEADER = ("repo", "metadata")


class UnknownWriterTypeError(ValueError):
    """The text does not name a repo writer type."""


class TextWriter:
    """Writes one repository URL per line."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def write(self, repo: str) -> None:
        self._stream.write(repo + "\n")


class ScorecardWriter:
    """Writes a CSV of repositories with "repo" and blank "metadata" columns."""

    def __init__(self, stream: TextIO) -> None:
        self._csv = csv.writer(stream, lineterminator="\n")
        self._csv.writerow(_SCORECARD_HEADER)

    def write(self, repo: str) -> None:
        self._csv.writerow((repo, ""))


Writer = Union[TextWriter, ScorecardWriter]


def text(stream: TextIO) -> TextWriter:
    """Return a writer producing one repository URL per line."""
    return TextWriter(stream)


def scorecard(stream: TextIO) -> ScorecardWriter:
    """Return a writer producing a scorecard-compatible CSV."""
    return ScorecardWriter(stream)


class WriterType(enum.Enum):
    """The available output formats for repository lists."""

    TEXT = "text"
    SCORECARD = "scorecard"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str | bytes) -> WriterType:
        """Return the writer type named by text."""
        if isinstance(text, bytes):
            text = text.decode("utf-8", errors="replace")
        try:
            return cls(text)
        except ValueError:
            raise UnknownWriterTypeError(f"unknown repo writer type: {text!r}") from None

    def new(self, stream: TextIO) -> Writer:
        """Return a writer of this type writing to stream."""
        if self is WriterType.SCORECARD:
            return scorecard(stream)
        return text(stream)