"""Registry of signal sources used for collection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from critscore.signal import Set, Source, validate_set

if TYPE_CHECKING:
    from critscore.projectrepo import Repo


class SourceAlreadyRegisteredError(ValueError):
    """The same source instance was registered twice."""


class DuplicateNamespaceError(RuntimeError):
    """Two sources supporting the same repo share a namespace."""


class Registry:
    """Holds sources in registration order and collects signals from them."""

    def __init__(self) -> None:
        self._sources: list[Source] = []

    def _contains(self, source: Source) -> bool:
        return any(registered is source for registered in self._sources)

    def register(self, source: Source) -> None:
        """Add source to the registry.

        Raises SourceAlreadyRegisteredError if source was already added, and
        ValueError if its signal Set is not valid.
        """
        if self._contains(source):
            raise SourceAlreadyRegisteredError(
                f"source {source.empty_set().namespace} has already been registered"
            )
        validate_set(source.empty_set())
        self._sources.append(source)

    def _sources_for_repository(self, repo: Repo) -> list[Source]:
        seen: set[str] = set()
        result = []
        for source in self._sources:
            if not source.is_supported(repo):
                continue
            namespace = source.empty_set().namespace
            if namespace in seen:
                raise DuplicateNamespaceError(
                    f"more than one source supports namespace {namespace}"
                )
            seen.add(namespace)
            result.append(source)
        return result

    def empty_sets(self) -> list[Set]:
        """Return an empty Set per namespace, first registered source winning."""
        seen: set[str] = set()
        result = []
        for source in self._sources:
            empty = source.empty_set()
            if empty.namespace in seen:
                continue
            seen.add(empty.namespace)
            result.append(empty)
        return result

    def collect(self, repo: Repo, job_id: str = "") -> list[Set]:
        """Gather the signals from every source that supports repo."""
        return [source.get(repo, job_id) for source in self._sources_for_repository(repo)]