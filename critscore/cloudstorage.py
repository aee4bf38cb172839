"""Writing blobs to local directories or in-memory buckets addressed by URL."""

from __future__ import annotations

import contextlib
import io
import os
import string
import tempfile
from typing import Callable
from urllib.parse import SplitResult, parse_qsl, unquote, urlencode, urlsplit

_FILE_SCHEME = "file"
_MEM_SCHEME = "mem"
_SCHEME_TAIL_CHARS = frozenset(string.digits + "+-.")
_FILE_BUCKET_HOSTS = frozenset({"", ".", "localhost"})
_FILE_BUCKET_PARAMS = frozenset({"metadata", "create_dir"})


class CloudStorageError(Exception):
    """A blob URL could not be parsed, opened or written."""


def _split_url(raw: str) -> SplitResult:
    """Split raw as a URL, rejecting the forms a strict URL parser refuses.

    Raises ValueError for control characters, a missing scheme before ':'
    and a colon in the first segment of a scheme-less relative path.
    """
    if any(ord(c) < 0x20 or c == "\x7f" for c in raw):
        raise ValueError("invalid control character in URL")
    has_scheme = False
    for i, c in enumerate(raw):
        if c.isascii() and c.isalpha():
            continue
        if c in _SCHEME_TAIL_CHARS:
            if i == 0:
                break
            continue
        if c == ":":
            if i == 0:
                raise ValueError("missing protocol scheme")
            has_scheme = True
        break
    if not has_scheme:
        rest = raw.split("#", 1)[0].split("?", 1)[0]
        if rest and not rest.startswith("/") and ":" in rest.split("/", 1)[0]:
            raise ValueError("first path segment in URL cannot contain colon")
    return urlsplit(raw)


class MemoryBucket:
    """A bucket that keeps its blobs in memory."""

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}

    def read(self, key: str) -> bytes:
        """Return the contents of the blob at key; raise KeyError if absent."""
        return self._blobs[key]

    def _store(self, key: str, data: bytes) -> None:
        self._blobs[key] = data


_MEMORY_BUCKETS: dict[str, MemoryBucket] = {}


class _BlobWriter:
    """Buffers written data and stores it as a blob when closed.

    Used as a context manager, the blob is only stored when the block
    finishes without an exception.
    """

    def __init__(
        self,
        key: str,
        commit: Callable[[bytes], None],
        bucket: MemoryBucket | None = None,
    ) -> None:
        self.key = key
        self.bucket = bucket
        self._commit = commit
        self._buffer = io.BytesIO()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, data: str | bytes) -> int:
        if self._closed:
            raise ValueError("write to a closed blob writer")
        raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        self._buffer.write(raw)
        return len(data)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._commit(self._buffer.getvalue())
        except OSError as err:
            raise CloudStorageError(f"failed writing {self.key}: {err}") from err

    def __enter__(self) -> _BlobWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        else:
            self._closed = True


def parse_bucket_and_prefix(raw_url: str) -> tuple[str, str]:
    """Split raw_url into a bucket URL and the key inside that bucket.

    A URL without a scheme is a local file: its directory becomes a file://
    bucket (host "." for relative paths) with metadata files turned off.
    """
    try:
        u = _split_url(raw_url)
    except ValueError as err:
        raise CloudStorageError(f"url parse: {err}") from err
    scheme, netloc, path, query, fragment = u

    if not scheme:
        if netloc:
            raise CloudStorageError(f"undefined blob scheme: {raw_url}")
        scheme = _FILE_SCHEME
        if not path.startswith("/"):
            netloc = "."
        pairs = [
            (k, v)
            for k, v in parse_qsl(query, keep_blank_values=True)
            if k != "metadata"
        ]
        pairs.append(("metadata", "skip"))
        query = urlencode(sorted(pairs, key=lambda kv: kv[0]))

    if scheme == _FILE_SCHEME:
        cut = path.rfind("/") + 1
        path, prefix = path[:cut], path[cut:]
    else:
        prefix = path[1:] if path.startswith("/") else path
        path = ""

    if netloc and path and not path.startswith("/"):
        path = "/" + path
    bucket = f"{scheme}://{netloc}{path}"
    if query:
        bucket += "?" + query
    if fragment:
        bucket += "#" + fragment
    return bucket, unquote(prefix)


def _open_file_bucket(bucket: SplitResult) -> str:
    if bucket.netloc not in _FILE_BUCKET_HOSTS:
        raise CloudStorageError(
            f"failed opening {bucket.geturl()}: file URL host must be empty, '.' or 'localhost'"
        )
    params = dict(parse_qsl(bucket.query, keep_blank_values=True))
    unknown = sorted(set(params) - _FILE_BUCKET_PARAMS)
    if unknown:
        raise CloudStorageError(
            f"failed opening {bucket.geturl()}: unknown query parameter {unknown[0]!r}"
        )
    directory = unquote(bucket.path) or "/"
    if bucket.netloc == ".":
        directory = os.path.join(".", directory.lstrip("/"))
    if not os.path.isdir(directory):
        if "create_dir" not in params:
            raise CloudStorageError(
                f"failed opening {bucket.geturl()}: {directory} is not a directory"
            )
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as err:
            raise CloudStorageError(f"failed opening {bucket.geturl()}: {err}") from err
    return directory


def _file_committer(directory: str, key: str) -> Callable[[bytes], None]:
    target = os.path.join(directory, *key.split("/"))

    def commit(data: bytes) -> None:
        parent = os.path.dirname(target) or "."
        os.makedirs(parent, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=parent, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp, target)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.remove(tmp)
            raise

    return commit


def new_writer(raw_url: str) -> _BlobWriter:
    """Open a writer for the blob at raw_url.

    Supports local files (plain paths or file:// URLs) and mem:// buckets.
    The blob appears atomically when the writer is closed.
    """
    bucket_url, key = parse_bucket_and_prefix(raw_url)
    bucket = urlsplit(bucket_url)
    if bucket.scheme == _FILE_SCHEME:
        directory = _open_file_bucket(bucket)
        if not key:
            raise CloudStorageError(f"failed creating writer for {raw_url}: empty key")
        return _BlobWriter(key, _file_committer(directory, key))
    if bucket.scheme == _MEM_SCHEME:
        memory = _MEMORY_BUCKETS.setdefault(bucket.netloc, MemoryBucket())
        if not key:
            raise CloudStorageError(f"failed creating writer for {raw_url}: empty key")
        return _BlobWriter(key, lambda data: memory._store(key, data), memory)
    raise CloudStorageError(
        f"failed opening {bucket_url}: unsupported scheme {bucket.scheme!r}"
    )