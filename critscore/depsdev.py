"""Dependent counts from the deps.dev BigQuery dataset, as a signal source."""

from __future__ import annotations

import dataclasses
import logging
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Mapping, Union
from urllib.parse import unquote, urlsplit

from critscore.collector_config import DEFAULT_GCP_DATASET_NAME
from critscore.projectrepo import URL, Repo
from critscore.signal import Field, Set, Source, signal_field

DEPENDENT_COUNTS_TABLE_NAME = "dependent_counts"
NAMESPACE_DEPSDEV = "depsdev"
DEFAULT_LOCATION = "US"

SNAPSHOT_QUERY = (
    "SELECT MAX(Time) AS SnapshotTime FROM `bigquery-public-data.deps_dev_v1.Snapshots`"
)

DATA_QUERY = """
CREATE TEMP TABLE rawDependentCounts(Name STRING, Version STRING, System STRING, DependentCount INT)
AS
  SELECT d.Dependency.Name as Name, d.Dependency.Version as Version, d.Dependency.System as System, COUNT(1) AS DependentCount
  FROM `bigquery-public-data.deps_dev_v1.Dependencies` AS d
  JOIN (SELECT System, Name, Version, ROW_NUMBER() OVER (PARTITION BY Name ORDER BY VersionInfo.Ordinal Desc) AS RowNumber
   FROM `bigquery-public-data.deps_dev_v1.PackageVersions`
   WHERE SnapshotAt = @part) AS lv ON (lv.RowNumber = 1 AND lv.Name = d.Name AND lv.Version = d.Version AND lv.System = d.System)
  WHERE d.SnapshotAt = @part
  GROUP BY Name, Version, System;

CREATE TABLE IF NOT EXISTS `{project_id}.{dataset_name}.{table_name}`
AS
WITH pvp AS (
    SELECT System, Name, Version, ProjectName, ProjectType
    FROM `bigquery-public-data.deps_dev_v1.PackageVersionToProject`
    WHERE SnapshotAt = @part
)
SELECT pvp.ProjectName AS ProjectName, pvp.ProjectType AS ProjectType, SUM(d.DependentCount) AS DependentCount
 FROM pvp
 JOIN rawDependentCounts AS d
      ON (pvp.System = d.System AND pvp.Name = d.Name AND pvp.Version = d.Version)
GROUP BY ProjectName, ProjectType;
"""

COUNT_QUERY = """
SELECT DependentCount
FROM `{project_id}.{dataset_name}.{table_name}`
WHERE ProjectName = @projectname AND ProjectType = @projecttype;
"""


class NoResultsError(LookupError):
    """A query expected to return a row returned none."""


@dataclasses.dataclass
class Dataset:
    """A BigQuery dataset."""

    dataset_id: str
    default_table_expiration: timedelta = timedelta(0)


@dataclasses.dataclass
class Table:
    """A BigQuery table."""

    table_id: str


class BigQueryAPI(ABC):
    """The BigQuery operations needed to maintain and query dependent counts."""

    @abstractmethod
    def project(self) -> str:
        """Return the ID of the project queries run in."""

    @abstractmethod
    def one_result_query(
        self, query: str, params: Mapping[str, Any] | None
    ) -> Mapping[str, Any]:
        """Run query and return its first row; raise NoResultsError if empty."""

    @abstractmethod
    def no_result_query(self, query: str, params: Mapping[str, Any] | None) -> None:
        """Run query to completion, ignoring any rows."""

    @abstractmethod
    def get_dataset(self, dataset_id: str) -> Dataset | None:
        """Return the dataset, or None if it does not exist."""

    @abstractmethod
    def create_dataset(self, dataset_id: str, ttl: timedelta) -> Dataset:
        """Create a dataset whose tables expire after ttl (0 for never)."""

    @abstractmethod
    def update_dataset(self, dataset: Dataset, ttl: timedelta) -> None:
        """Make the dataset's default table expiration equal to ttl."""

    @abstractmethod
    def get_table(self, dataset: Dataset, table_id: str) -> Table | None:
        """Return the table, or None if it does not exist."""


def generate_query(template: str, project_id: str, dataset_name: str, table_name: str) -> str:
    """Fill the table reference placeholders in a query template."""
    return template.format_map(
        {"project_id": project_id, "dataset_name": dataset_name, "table_name": table_name}
    )


def get_table_name(table_key: str) -> str:
    """Return the dependent count table name for table_key."""
    if not table_key:
        return DEPENDENT_COUNTS_TABLE_NAME
    return f"{DEPENDENT_COUNTS_TABLE_NAME}_{table_key}"


@dataclasses.dataclass(frozen=True)
class _CachedQuery:
    table_key: str
    count_query: str


class Dependents:
    """Looks up dependent counts, creating the backing tables when needed.

    The dataset is created, and its table expiration brought in line with
    dataset_ttl, when the instance is built.
    """

    def __init__(
        self,
        api: BigQueryAPI,
        dataset_name: str = DEFAULT_GCP_DATASET_NAME,
        dataset_ttl: timedelta = timedelta(0),
        logger: logging.Logger | None = None,
    ) -> None:
        self._api = api
        self.dataset_name = dataset_name
        self.dataset_ttl = dataset_ttl
        self._logger = logger or logging.getLogger(__name__)
        self._last_use: _CachedQuery | None = None
        self.dataset = self._get_or_create_dataset()

    def _get_or_create_dataset(self) -> Dataset:
        dataset = self._api.get_dataset(self.dataset_name)
        if dataset is None:
            self._logger.debug("creating dependent count dataset %s", self.dataset_name)
            dataset = self._api.create_dataset(self.dataset_name, self.dataset_ttl)
        else:
            self._logger.debug("dependent count dataset %s exists", self.dataset_name)
        self._api.update_dataset(dataset, self.dataset_ttl)
        return dataset

    def _query(self, template: str, table_name: str) -> str:
        return generate_query(template, self._api.project(), self.dataset_name, table_name)

    def _latest_snapshot_time(self) -> Any:
        return self._api.one_result_query(SNAPSHOT_QUERY, None)["SnapshotTime"]

    def _prepare_count_query(self, table_key: str) -> str:
        if self._last_use is not None and self._last_use.table_key == table_key:
            self._logger.debug("Using cached dependent count query")
            return self._last_use.count_query

        table_name = get_table_name(table_key)
        if self._api.get_table(self.dataset, table_name) is not None:
            self._logger.info("Dependent count table %s exists", table_name)
        else:
            self._logger.info("Creating dependent count table %s", table_name)
            snapshot_time = self._latest_snapshot_time()
            # The query uses IF NOT EXISTS so concurrent workers do not fail.
            self._api.no_result_query(
                self._query(DATA_QUERY, table_name), {"part": snapshot_time}
            )

        self._last_use = _CachedQuery(table_key, self._query(COUNT_QUERY, table_name))
        return self._last_use.count_query

    def count(self, project_name: str, project_type: str, table_key: str = "") -> int | None:
        """Return the dependent count for the project, or None if it has none."""
        query = self._prepare_count_query(table_key)
        params = {"projectname": project_name, "projecttype": project_type}
        try:
            row = self._api.one_result_query(query, params)
        except NoResultsError:
            return None
        return int(row["DependentCount"])


@dataclasses.dataclass
class DepsDevSet(Set):
    """Signals gathered from deps.dev."""

    namespace = NAMESPACE_DEPSDEV

    dependent_count: Field[int] = signal_field(name="dependent_count")


def _go_hostname(netloc: str) -> str:
    host = netloc.rpartition("@")[2]
    if host.startswith("["):
        end = host.find("]")
        return host[1:end] if end != -1 else host[1:]
    return host.partition(":")[0]


def parse_repo_url(url: Union[str, URL]) -> tuple[str, str]:
    """Return the deps.dev project name and type for url, or ("", "")."""
    parsed = urlsplit(url) if isinstance(url, str) else url
    if _go_hostname(parsed.netloc) == "github.com":
        return unquote(parsed.path).strip("/"), "GITHUB"
    return "", ""


class DepsDevSource(Source):
    """A Source providing the number of dependents recorded by deps.dev."""

    def __init__(self, dependents: Dependents, logger: logging.Logger | None = None) -> None:
        self._dependents = dependents
        self._logger = logger or logging.getLogger(__name__)

    def empty_set(self) -> DepsDevSet:
        return DepsDevSet()

    def is_supported(self, repo: Repo) -> bool:
        _, project_type = parse_repo_url(repo.url)
        return project_type != ""

    def get(self, repo: Repo, job_id: str = "") -> DepsDevSet:
        result = DepsDevSet()
        name, project_type = parse_repo_url(repo.url)
        if not project_type:
            return result
        self._logger.debug("Fetching deps.dev dependent count for %s", repo.url.geturl())
        count = self._dependents.count(name, project_type, job_id)
        if count is not None:
            result.dependent_count.set(count)
        return result