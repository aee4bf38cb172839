"""Configuration for the signal collector and the options that change it."""

from __future__ import annotations

import dataclasses
import enum
import logging
from datetime import timedelta
from typing import Callable

DEFAULT_GCP_DATASET_NAME = "criticality_score_data"


class SourceType(enum.Enum):
    """Identifies the sources that signals can be collected from."""

    GITHUB_REPO = 0
    GITHUB_ISSUES = 1
    GITHUB_MENTIONS = 2
    DEPS_DEV = 3

    def __str__(self) -> str:
        return _SOURCE_TYPE_LABELS[self]


_SOURCE_TYPE_LABELS = {
    SourceType.GITHUB_REPO: "SourceTypeGithubRepo",
    SourceType.GITHUB_ISSUES: "SourceTypeGithubIssues",
    SourceType.GITHUB_MENTIONS: "SourceTypeGitHubMentions",
    SourceType.DEPS_DEV: "SourceTypeDepsDev",
}


class SourceStatus(enum.Enum):
    """Whether a source is used for collection."""

    DISABLED = 0
    ENABLED = 1


@dataclasses.dataclass
class Config:
    """Settings used when building a Collector."""

    logger: logging.Logger = dataclasses.field(
        default_factory=lambda: logging.getLogger("critscore.collector")
    )
    gcp_project: str = ""
    gcp_dataset_name: str = DEFAULT_GCP_DATASET_NAME
    gcp_dataset_ttl: timedelta = timedelta(0)
    source_statuses: dict[SourceType, SourceStatus] = dataclasses.field(default_factory=dict)
    default_source_status: SourceStatus = SourceStatus.ENABLED

    def is_enabled(self, source_type: SourceType) -> bool:
        """Return True if source_type is enabled for collection."""
        status = self.source_statuses.get(source_type, self.default_source_status)
        return status is SourceStatus.ENABLED


Option = Callable[[Config], None]


def make_config(*args: Option) -> Config:
    """Build a Config with the defaults, then apply each option in order."""
    config = Config()
    for option in args:
        option(config)
    return config


def enable_all_sources() -> Option:
    """Use every source unless it is explicitly disabled."""

    def apply(config: Config) -> None:
        config.default_source_status = SourceStatus.ENABLED

    return apply


def disable_all_sources() -> Option:
    """Use no source unless it is explicitly enabled."""

    def apply(config: Config) -> None:
        config.default_source_status = SourceStatus.DISABLED

    return apply


def enable_source(source_type: SourceType) -> Option:
    """Enable a single source type."""

    def apply(config: Config) -> None:
        config.source_statuses[source_type] = SourceStatus.ENABLED

    return apply


def disable_source(source_type: SourceType) -> Option:
    """Disable a single source type."""

    def apply(config: Config) -> None:
        config.source_statuses[source_type] = SourceStatus.DISABLED

    return apply


def gcp_project(name: str) -> Option:
    """Set the GCP project used by sources that depend on GCP."""

    def apply(config: Config) -> None:
        config.gcp_project = name

    return apply


def gcp_dataset_name(name: str) -> Option:
    """Override the default BigQuery dataset name."""

    def apply(config: Config) -> None:
        config.gcp_dataset_name = name

    return apply


def gcp_dataset_ttl(ttl: timedelta) -> Option:
    """Set the time-to-live for tables created in BigQuery datasets."""

    def apply(config: Config) -> None:
        config.gcp_dataset_ttl = ttl

    return apply