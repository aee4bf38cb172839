import pytest

from critscore.cloudstorage import CloudStorageError
from critscore.marker import MarkerType, UnknownMarkerTypeError, write

TRANSFORM_CASES = [
    (MarkerType.FULL, "gs://bucket/path/to/file.txt?arg", "gs://bucket/path/to/file.txt?arg"),
    (MarkerType.FILE, "gs://bucket/path/to/file.txt?arg", "path/to/file.txt"),
    (MarkerType.DIR, "gs://bucket/path/to/file.txt?arg", "path/to"),
    (MarkerType.FILE, "file:///path/to/file.txt?arg", "/path/to/file.txt"),
    (MarkerType.FILE, "file://./path/to/file.txt?arg", "path/to/file.txt"),
    (MarkerType.FULL, "/path/to/file.txt", "/path/to/file.txt"),
    (MarkerType.FILE, "/path/to/file.txt", "/path/to/file.txt"),
    (MarkerType.DIR, "/path/to/file.txt", "/path/to"),
    (MarkerType.FULL, "../path/to/file.txt", "../path/to/file.txt"),
    (MarkerType.FILE, "../path/to/file.txt", "../path/to/file.txt"),
    (MarkerType.DIR, "../path/to/file.txt", "../path/to"),
    (MarkerType.FULL, "::/path/to/file.txt", "::/path/to/file.txt"),
    (MarkerType.FILE, "::/path/to/file.txt", "::/path/to/file.txt"),
    (MarkerType.DIR, "::/path/to/file.txt", "::/path/to"),
]


@pytest.mark.parametrize("marker_type,path,want", TRANSFORM_CASES)
def test_transform_written_to_marker(tmp_path, marker_type, path, want):
    marker_file = tmp_path / "marker.out"
    write(marker_type, str(marker_file), path)
    assert marker_file.read_text().strip() == want


@pytest.mark.parametrize("marker_type,path,want", TRANSFORM_CASES)
def test_transform(marker_type, path, want):
    parsed = MarkerType.parse(str(marker_type))
    assert parsed.transform(path) == want


def test_dir_of_bare_filename():
    assert MarkerType.parse("dir").transform("file.txt") == "."


@pytest.mark.parametrize(
    "text,want",
    [("full", MarkerType.FULL), ("file", MarkerType.FILE), ("dir", MarkerType.DIR)],
)
def test_parse(text, want):
    assert MarkerType.parse(text) is want
    assert MarkerType.parse(text.encode()) is want


@pytest.mark.parametrize("text", ["notamarker", ""])
def test_parse_unknown(text):
    with pytest.raises(UnknownMarkerTypeError):
        MarkerType.parse(text)


@pytest.mark.parametrize(
    "marker_type,want",
    [(MarkerType.FULL, "full"), (MarkerType.FILE, "file"), (MarkerType.DIR, "dir")],
)
def test_text(marker_type, want):
    assert str(marker_type) == want


def test_write(tmp_path):
    want = "this/is/a/path"
    marker_file = tmp_path / "marker.test"
    write(MarkerType.FULL, str(marker_file), want)
    assert marker_file.read_text() == want + "\n"


def test_write_to_missing_directory(tmp_path):
    with pytest.raises(CloudStorageError):
        write(MarkerType.FULL, str(tmp_path / "nope" / "marker"), "x")