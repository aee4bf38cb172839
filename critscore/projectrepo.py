"""Project repositories and resolving their URLs through factories."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Union
from urllib.parse import ParseResult, SplitResult

URL = Union[ParseResult, SplitResult]


class NoFactoryFoundError(LookupError):
    """No registered factory can handle the URL."""


class NoRepoFoundError(LookupError):
    """A factory could not find a repository for the URL."""


class Repo(ABC):
    """A project's source repository."""

    @property
    @abstractmethod
    def url(self) -> URL:
        """The canonical URL of the repository."""


class Factory(ABC):
    """Creates Repo instances for URLs it matches."""

    @abstractmethod
    def create(self, url: URL) -> Repo:
        """Return a Repo for url; raise NoRepoFoundError if it does not exist."""

    @abstractmethod
    def match(self, url: URL) -> bool:
        """Return True if this factory can create a Repo for url."""


class Resolver:
    """Resolves repository URLs against a list of registered factories."""

    def __init__(self) -> None:
        self._factories: list[Factory] = []

    def register(self, factory: Factory) -> None:
        self._factories.append(factory)

    def resolve(self, url: URL) -> Repo:
        """Return a Repo from the first matching factory.

        Raises NoFactoryFoundError when no factory matches; errors raised by
        the factory itself propagate.
        """
        factory = next((f for f in self._factories if f.match(url)), None)
        if factory is None:
            raise NoFactoryFoundError(f"factory not found: {url.geturl()}")
        return factory.create(url)