# critscore

Building blocks for measuring how critical an open source project is.
`critscore` models *signals* about a project repository (stars, contributors,
issue activity, dependents and so on), groups them into namespaced sets, and
provides the pieces around collecting them: resolving repository URLs,
choosing which sources run, enumerating repositories by stars, writing
repository lists, reading input lists, writing marker files and ranking
scored rows.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Signals (`critscore.signal`)

A signal set is a dataclass of `Field` values under a namespace. A field that
was never set reports `None` as its value; `Field.get()` returns the type's
zero value instead (`0`, `0.0`, `""` or the zero datetime).

```python
from critscore.signal import RepoSet, val, set_fields, set_as_map

s = RepoSet()
s.star_count.set(1200)
s.url = val("https://github.com/example/project")

set_fields(s, True)                    # ["repo.url", ..., "legacy.created_since", ...]
set_as_map(s, True)["repo.star_count"] # 1200
set_as_map(s, True)["repo.language"]   # None
```

`RepoSet` (namespace `repo`) and `IssuesSet` (namespace `issues`) are
provided. New sets subclass `Set`, set a `namespace` class attribute and
declare fields with `signal_field(name=..., legacy=..., ignore=...)`. Fields
marked `legacy` are reported under the `legacy` namespace; ignored fields are
left out of all output. `set_values`, `set_as_map_with_namespace` and
`validate_set` (raises `ValueError` unless names are lower-case letters,
digits and underscores) complete the helpers.

A `Source` implements `empty_set()`, `is_supported(repo)` and
`get(repo, job_id)`.

## Repositories and collection

`critscore.projectrepo` defines `Repo` (with a `url` property), `Factory`
(`create(url)` and `match(url)`) and `Resolver`, which hands a URL to the
first registered factory that matches it, raising `NoFactoryFoundError` when
none does.

`critscore.collector_config` holds the collection settings:

```python
from critscore.collector_config import (
    make_config, enable_all_sources, disable_source, SourceType,
)

config = make_config(enable_all_sources(), disable_source(SourceType.DEPS_DEV))
config.is_enabled(SourceType.DEPS_DEV)   # False
```

Other options are `disable_all_sources`, `enable_source`, `gcp_project`,
`gcp_dataset_name` and `gcp_dataset_ttl`.

`critscore.collector.Collector(factories, sources, config)` takes the
factories used to resolve URLs and a mapping from `SourceType` to the
`Source` that provides it; only enabled sources are registered, in
`SourceType` order. `collect(url, job_id="")` returns one signal set per
supporting source, and `empty_sets()` describes every namespace collected.
Unsupported hosts raise `UnsupportedURLError` and missing repositories raise
`RepoNotFoundError`, both subclasses of `UncollectableRepoError`; other
failures raise `CollectionError`.

`critscore.registry.Registry` is the underlying source list. Registering the
same source twice raises `SourceAlreadyRegisteredError`; two supporting
sources with one namespace raise `DuplicateNamespaceError` on collection.

## deps.dev dependents (`critscore.depsdev`)

`Dependents(api, dataset_name, dataset_ttl)` creates the dataset if needed,
builds a dependent-count table per job key on first use and returns counts
with `count(project_name, project_type, table_key)` (`None` when the project
has no row). `DepsDevSource(dependents)` wraps it as a `Source` producing a
`DepsDevSet` for `github.com` repositories. The BigQuery work goes through an
implementation of the abstract `BigQueryAPI` that you supply.
`parse_repo_url`, `get_table_name` and `generate_query` are available on
their own.

## Enumerating repositories (`critscore.githubsearch`)

`Searcher(search, per_page=100)` takes a function
`(query, per_page, after_cursor) -> SearchResult`. `repos_by_stars(base_query,
min_stars, overlap)` yields each repository URL once, from most stars to
least, narrowing the star range (`build_query`) after each query so that
per-query result limits are passed. It raises `UnableToListAllResultsError`
when the range can no longer shrink.

## Repository lists (`critscore.repowriter`)

```python
import io
from critscore.repowriter import WriterType

out = io.StringIO()
writer = WriterType.parse("scorecard").new(out)
writer.write("https://github.com/example/example")
out.getvalue()   # "repo,metadata\nhttps://github.com/example/example,\n"
```

`text` writes one URL per line; `scorecard` writes a CSV with a
`repo,metadata` header. Unknown names raise `UnknownWriterTypeError`.

## Input lists (`critscore.inputiter`)

`open_inputs(args)` treats a single argument as a file to read line by line
(`-` for standard input); if no such file exists and the argument parses as a
URL, it is taken as a repository. Two or more arguments are all repositories.
The returned `InputIterator` is an iterator and a context manager.
`InvalidInputError` is raised when a single argument can be used neither way.

## Storage and marker files

`critscore.cloudstorage.new_writer(raw_url)` opens a writer for a plain local
path, a `file://` URL or a `mem://bucket/key` URL; the blob is stored
atomically when the writer is closed (or the `with` block ends without an
error). The target directory must exist unless `create_dir` is given in the
URL query. In-memory contents can be read back through the writer's `bucket`
(`MemoryBucket.read(key)`). `parse_bucket_and_prefix` splits a URL into bucket
and key. Failures raise `CloudStorageError`.

`critscore.marker.write(marker_type, marker_file, out_file)` writes a line
recording where output went: the full location (`MarkerType.FULL`), the key
path of a bucket URL (`FILE`) or its directory (`DIR`). `MarkerType.parse`
accepts `full`, `file` and `dir`.

## Other pieces

* `critscore.pq.PriorityQueue` returns rows pushed with `push_row(row,
  score)` from highest to lowest score via `pop_row()`.
* `critscore.legacy` holds collection limits and the helpers `time_delta`
  (whole units between two datetimes) and `round_to` (rounding halves away
  from zero), plus `TooManyResultsError`.

## What this package does not do

* It has no command-line programs; everything is used as a library.
* It ships no GitHub API client and no sources that fetch repository, issue
  or mention signals from GitHub; factories, sources and the search function
  are supplied by the caller.
* It ships no BigQuery client; `BigQueryAPI` must be implemented by the caller.
* It does not compute criticality scores; it only ranks rows by a score you
  provide.
* Storage is limited to local files and in-memory buckets; cloud bucket
  schemes are rejected.