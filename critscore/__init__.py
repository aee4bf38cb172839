"""Signal sets, collection plumbing and supporting tools for judging open source project criticality."""

__version__ = "0.1.0"

__all__ = [
    "cloudstorage",
    "collector",
    "collector_config",
    "depsdev",
    "githubsearch",
    "inputiter",
    "legacy",
    "marker",
    "pq",
    "projectrepo",
    "registry",
    "repowriter",
    "signal",
]