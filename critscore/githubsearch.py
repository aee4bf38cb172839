"""Enumerating GitHub repositories by stars, beyond the search result limit."""

from __future__ import annotations

import dataclasses
import logging
from typing import Callable, Iterator, Optional

DEFAULT_PER_PAGE = 100


class UnableToListAllResultsError(Exception):
    """The star range cannot be narrowed further without skipping repositories."""

    def __init__(self, message: str = "unable to list all results") -> None:
        super().__init__(message)


@dataclasses.dataclass(frozen=True)
class RepoResult:
    """A repository returned by a search."""

    url: str
    stargazer_count: int


@dataclasses.dataclass(frozen=True)
class SearchResult:
    """One page of repository search results."""

    repositories: list[RepoResult]
    end_cursor: str = ""
    has_next_page: bool = False
    repository_count: int = 0


# Runs a repository search: (query, per_page, after_cursor) -> one page.
SearchFunction = Callable[[str, int, Optional[str]], SearchResult]


def build_query(query: str, min_stars: int, max_stars: int) -> str:
    """Return query sorted by stars and limited to the given star range.

    A max_stars of zero or less leaves the range open above min_stars.
    """
    query = query + " sort:stars "
    if max_stars > 0:
        return query + f"stars:{min_stars}..{max_stars}"
    return query + f"stars:>={min_stars}"


class Searcher:
    """Runs repository searches through a search function, page by page."""

    def __init__(
        self,
        search: SearchFunction,
        logger: logging.Logger | None = None,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> None:
        self._search = search
        self._logger = logger or logging.getLogger(__name__)
        self.per_page = per_page

    def _run_query(self, query: str) -> tuple[int, Iterator[RepoResult]]:
        self._logger.debug("Searching GitHub: %s", query)
        first = self._search(query, self.per_page, None)

        def pages() -> Iterator[RepoResult]:
            page = first
            while True:
                yield from page.repositories
                if not page.has_next_page:
                    return
                page = self._search(query, self.per_page, page.end_cursor or None)

        return first.repository_count, pages()

    def repos_by_stars(self, base_query: str, min_stars: int, overlap: int) -> Iterator[str]:
        """Yield the URL of each repository matching base_query with at least min_stars.

        Repositories come from the most stars to the least, each only once.
        Every query is ordered by stars; the star count of the last result,
        plus overlap, becomes the upper limit of the next query. Raises
        UnableToListAllResultsError when that limit stops decreasing.
        """
        seen_urls: set[str] = set()
        max_stars = -1

        while True:
            query = build_query(base_query, min_stars, max_stars)
            total, results = self._run_query(query)
            returned = 0
            stars = 0
            for repo in results:
                returned += 1
                stars = repo.stargazer_count
                if repo.url not in seen_urls:
                    seen_urls.add(repo.url)
                    yield repo.url
            remaining = total - returned
            self._logger.debug(
                "Finished iterating through results: available=%d returned=%d "
                "remaining=%d unique=%d last_stars=%d query=%s",
                total, returned, remaining, len(seen_urls), stars, query,
            )
            new_max_stars = stars + overlap
            if remaining <= 0:
                return
            if max_stars == -1 or new_max_stars < max_stars:
                max_stars = new_max_stars
                continue
            self._logger.error(
                "Too many repositories for current range: min_stars=%d stars=%d "
                "max_stars=%d overlap=%d",
                min_stars, stars, max_stars, overlap,
            )
            raise UnableToListAllResultsError()