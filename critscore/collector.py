"""Collects signals for a project repository from the configured sources."""

from __future__ import annotations

from typing import Iterable, Mapping, Union
from urllib.parse import urlsplit

from critscore.collector_config import Config, SourceType, make_config
from critscore.projectrepo import URL, Factory, NoFactoryFoundError, NoRepoFoundError, Resolver
from critscore.registry import DuplicateNamespaceError, Registry
from critscore.signal import Set, Source


class UncollectableRepoError(Exception):
    """The repo URL cannot be collected: bad host, missing or inaccessible repo."""


class RepoNotFoundError(UncollectableRepoError):
    """The repo could not be found."""


class UnsupportedURLError(UncollectableRepoError):
    """The repo URL does not match any supported host."""


class CollectionError(Exception):
    """Resolving or collecting a repo failed for another reason."""


_UNCOLLECTABLE = "repo failed"


class Collector:
    """Gathers signal Sets for project repository URLs.

    factories resolve URLs to repos; sources maps each SourceType to the
    Source that provides it. Only sources enabled in config are used, in the
    order of SourceType.
    """

    def __init__(
        self,
        factories: Iterable[Factory] = (),
        sources: Mapping[SourceType, Source] | None = None,
        config: Config | None = None,
    ) -> None:
        self.config = config if config is not None else make_config()
        self._resolver = Resolver()
        self._registry = Registry()
        logger = self.config.logger

        for factory in factories:
            self._resolver.register(factory)

        sources = dict(sources or {})
        for source_type in SourceType:
            enabled = self.config.is_enabled(source_type)
            if source_type is SourceType.DEPS_DEV and not enabled:
                logger.warning("deps.dev signal source is disabled.")
            source = sources.get(source_type)
            if source is None or not enabled:
                continue
            self._registry.register(source)
            if source_type is SourceType.DEPS_DEV:
                logger.info("deps.dev signal source enabled")

    def empty_sets(self) -> list[Set]:
        """Return the empty Sets describing every namespace and signal collected."""
        return self._registry.empty_sets()

    def collect(self, url: Union[str, URL], job_id: str = "") -> list[Set]:
        """Gather all the signals for the project repo at url.

        job_id may be used by sources to manage caching.
        """
        parsed = urlsplit(url) if isinstance(url, str) else url
        text = parsed.geturl()
        try:
            repo = self._resolver.resolve(parsed)
        except NoFactoryFoundError as err:
            raise UnsupportedURLError(f"{_UNCOLLECTABLE}: unsupported url: {text}") from err
        except NoRepoFoundError as err:
            raise RepoNotFoundError(f"{_UNCOLLECTABLE}: not found: {text}") from err
        except Exception as err:
            raise CollectionError(f"resolving project: {err}") from err

        self.config.logger.info("Collecting %s (canonical %s)", text, repo.url.geturl())
        try:
            return self._registry.collect(repo, job_id)
        except DuplicateNamespaceError:
            raise
        except Exception as err:
            raise CollectionError(f"collecting project: {err}") from err