import re

import pytest

from critscore.githubsearch import (
    RepoResult,
    SearchResult,
    Searcher,
    UnableToListAllResultsError,
    build_query,
)


class FakeGitHub:
    """Answers star-range searches over a fixed list, capping results like GitHub."""

    def __init__(self, repos, cap):
        self.repos = repos
        self.cap = cap
        self.queries = []
        self.page_sizes = []

    def __call__(self, query, per_page, after):
        self.queries.append(query)
        self.page_sizes.append(per_page)
        ranged = re.search(r"stars:(\d+)\.\.(\d+)", query)
        if ranged:
            low, high = int(ranged.group(1)), int(ranged.group(2))
        else:
            low, high = int(re.search(r"stars:>=(\d+)", query).group(1)), None
        matching = sorted(
            (r for r in self.repos if r[1] >= low and (high is None or r[1] <= high)),
            key=lambda r: (-r[1], r[0]),
        )
        visible = matching[: self.cap]
        start = int(after) if after else 0
        page = visible[start:start + per_page]
        end = start + len(page)
        return SearchResult(
            repositories=[RepoResult(url, stars) for url, stars in page],
            end_cursor=str(end),
            has_next_page=end < len(visible),
            repository_count=len(matching),
        )


def _urls(n):
    return [f"https://github.com/example/repo{i}" for i in range(n)]


def test_build_query_open_range():
    assert build_query("is:public", 10, -1) == "is:public sort:stars stars:>=10"


def test_build_query_closed_range():
    assert build_query("is:public", 10, 20) == "is:public sort:stars stars:10..20"


def test_build_query_zero_max_is_open():
    assert build_query("q", 5, 0) == build_query("q", 5, -1)


def test_enumerates_all_repos_past_cap():
    repos = list(zip(_urls(100), range(100, 0, -1)))
    fake = FakeGitHub(repos, cap=10)
    searcher = Searcher(fake, per_page=4)
    found = list(searcher.repos_by_stars("is:public", 1, 2))
    assert len(found) == len(set(found))
    assert set(found) == {url for url, _ in repos}
    assert len(set(fake.queries)) > 1
    assert set(fake.page_sizes) == {4}


def test_results_follow_star_order():
    repos = list(zip(_urls(30), range(30, 0, -1)))
    fake = FakeGitHub(repos, cap=8)
    found = list(Searcher(fake, per_page=3).repos_by_stars("q", 1, 1))
    assert found == [url for url, _ in repos]


def test_min_stars_excludes_lower_repos():
    repos = list(zip(_urls(20), range(20, 0, -1)))
    fake = FakeGitHub(repos, cap=100)
    found = list(Searcher(fake).repos_by_stars("q", 15, 5))
    assert set(found) == {url for url, stars in repos if stars >= 15}
    assert len(fake.queries) == 1


def test_no_results_issues_single_query():
    fake = FakeGitHub([], cap=10)
    assert list(Searcher(fake).repos_by_stars("q", 1, 5)) == []
    assert fake.queries == [build_query("q", 1, -1)]


def test_too_many_with_same_stars_raises():
    repos = [(url, 50) for url in _urls(20)]
    fake = FakeGitHub(repos, cap=10)
    found = []
    results = Searcher(fake, per_page=5).repos_by_stars("q", 1, 1)
    with pytest.raises(UnableToListAllResultsError):
        for url in results:
            found.append(url)
    assert len(found) == 10
    assert len(set(found)) == 10
    assert fake.queries[-1] == build_query("q", 1, 51)