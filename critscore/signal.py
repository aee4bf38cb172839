"""Signal fields, the sets that group them, and the sources that fill them."""

from __future__ import annotations

import dataclasses
import re
import typing
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Iterator, TypeVar

if TYPE_CHECKING:
    from critscore.projectrepo import Repo

NAMESPACE_LEGACY = "legacy"
NAMESPACE_REPO = "repo"
NAMESPACE_ISSUES = "issues"

_NAME_SEPARATOR = "."
_VALID_NAME = re.compile(r"[a-z0-9_]+")
_METADATA_KEY = "signal"
_FIELD_ANNOTATION = re.compile(r"\s*(?:\w+\.)*Field\[\s*(?:\w+\.)*(\w+)\s*\]\s*")

_ZERO_DATETIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_ZERO_VALUES: dict[type, Any] = {
    int: 0,
    float: 0.0,
    str: "",
    datetime: _ZERO_DATETIME,
}

_ZERO_BY_NAME: dict[str, Any] = {
    "int": 0,
    "float": 0.0,
    "str": "",
    "datetime": _ZERO_DATETIME,
}

T = TypeVar("T")


def _zero_for(kind: type) -> Any:
    for base, zero in _ZERO_VALUES.items():
        if issubclass(kind, base):
            return zero
    return None


def _zero_for_annotation(annotation: Any) -> Any:
    if isinstance(annotation, str):
        match = _FIELD_ANNOTATION.fullmatch(annotation)
        return _ZERO_BY_NAME.get(match.group(1)) if match else None
    args = typing.get_args(annotation)
    if args and isinstance(args[0], type):
        return _zero_for(args[0])
    return None


class Field(Generic[T]):
    """A single signal value that may or may not have been set."""

    def __init__(self, zero: T | None = None) -> None:
        self.zero = zero
        self._value: T | None = zero
        self._is_set = False

    def set(self, value: T) -> None:
        self._value = value
        self._is_set = True

    def get(self) -> T | None:
        """Return the value, or the zero value when the field is unset."""
        return self._value if self._is_set else self.zero

    def unset(self) -> None:
        self._is_set = False

    @property
    def is_set(self) -> bool:
        return self._is_set

    @property
    def value(self) -> T | None:
        """Return the value, or None when the field is unset."""
        return self._value if self._is_set else None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Field):
            return NotImplemented
        return self.is_set == other.is_set and self.value == other.value

    def __repr__(self) -> str:
        if not self._is_set:
            return "Field(<unset>)"
        return f"Field({self._value!r})"


def val(value: T) -> Field[T]:
    """Create a Field that is already set to value."""
    field: Field[T] = Field(zero=_zero_for(type(value)))
    field.set(value)
    return field


@dataclasses.dataclass(frozen=True)
class _FieldTag:
    name: str | None = None
    legacy: bool = False
    ignore: bool = False


def signal_field(name: str | None = None, legacy: bool = False, ignore: bool = False) -> Any:
    """Declare a Field attribute on a Set dataclass.

    name overrides the output name, legacy places the field in the legacy
    namespace, and ignore leaves the field out of all output.
    """
    return dataclasses.field(
        default_factory=Field,
        metadata={_METADATA_KEY: _FieldTag(name, legacy, ignore)},
    )


@dataclasses.dataclass
class Set:
    """Base class for a group of signals sharing a namespace.

    Subclasses are dataclasses whose Field attributes are the signals.
    """

    namespace: ClassVar[str] = ""

    def __post_init__(self) -> None:
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, Field) or value.zero is not None:
                continue
            zero = _zero_for_annotation(f.type)
            if zero is not None:
                value.zero = zero


def _iter_fields(s: Set) -> Iterator[tuple[str, bool, Any]]:
    for f in dataclasses.fields(s):
        value = getattr(s, f.name)
        if not isinstance(value, Field):
            continue
        tag = f.metadata.get(_METADATA_KEY, _FieldTag())
        if tag.ignore:
            continue
        yield tag.name or f.name, tag.legacy, value.value


def validate_set(s: Set) -> None:
    """Raise ValueError if the namespace or any field name is invalid."""
    if not _VALID_NAME.fullmatch(s.namespace):
        raise ValueError(f"namespace '{s.namespace}' contains invalid characters")
    for name, _, _ in _iter_fields(s):
        if not _VALID_NAME.fullmatch(name):
            raise ValueError(f"field name '{name}' contains invalid character")


def set_fields(s: Set, namespace: bool = False) -> list[str]:
    """Return the names of the fields of s, optionally namespace-prefixed."""
    prefix = f"{s.namespace}{_NAME_SEPARATOR}" if namespace else ""
    legacy_prefix = f"{NAMESPACE_LEGACY}{_NAME_SEPARATOR}" if namespace else ""
    return [
        (legacy_prefix if legacy else prefix) + name
        for name, legacy, _ in _iter_fields(s)
    ]


def set_values(s: Set) -> list[Any]:
    """Return the value of each field of s, None for unset fields."""
    return [value for _, _, value in _iter_fields(s)]


def set_as_map(s: Set, namespace: bool = False) -> dict[str, Any]:
    """Map each field name, as given by set_fields, to its value."""
    return dict(zip(set_fields(s, namespace), set_values(s)))


def set_as_map_with_namespace(s: Set) -> dict[str, dict[str, Any]]:
    """Map each namespace to a mapping of its field names to values."""
    result: dict[str, dict[str, Any]] = {}
    for name, legacy, value in _iter_fields(s):
        ns = NAMESPACE_LEGACY if legacy else s.namespace
        result.setdefault(ns, {})[name] = value
    return result


@dataclasses.dataclass
class RepoSet(Set):
    """Signals describing a source repository."""

    namespace = NAMESPACE_REPO

    url: Field[str] = signal_field()
    language: Field[str] = signal_field()
    license: Field[str] = signal_field()

    star_count: Field[int] = signal_field()
    created_at: Field[datetime] = signal_field()
    updated_at: Field[datetime] = signal_field()

    created_since: Field[int] = signal_field(legacy=True)
    updated_since: Field[int] = signal_field(legacy=True)

    contributor_count: Field[int] = signal_field(legacy=True)
    org_count: Field[int] = signal_field(legacy=True)

    commit_frequency: Field[float] = signal_field(legacy=True)
    recent_release_count: Field[int] = signal_field(legacy=True)


@dataclasses.dataclass
class IssuesSet(Set):
    """Signals describing a repository's issue activity."""

    namespace = NAMESPACE_ISSUES

    updated_count: Field[int] = signal_field(name="updated_issues_count", legacy=True)
    closed_count: Field[int] = signal_field(name="closed_issues_count", legacy=True)
    comment_frequency: Field[float] = signal_field(name="issue_comment_frequency", legacy=True)


class Source(ABC):
    """Gathers a Set of signals for a project repository."""

    @abstractmethod
    def empty_set(self) -> Set:
        """Return an empty Set describing the namespace and signals provided."""

    @abstractmethod
    def is_supported(self, repo: Repo) -> bool:
        """Return True if this source can gather signals for repo."""

    @abstractmethod
    def get(self, repo: Repo, job_id: str) -> Set:
        """Gather the signals for repo; job_id may be used to manage caches."""