import io

import pytest

from critscore.inputiter import InputIterator, InvalidInputError, lines, open_inputs


def test_list_iterator_empty():
    it = InputIterator([])
    assert list(it) == []


def test_list_iterator_single_entry():
    it = InputIterator(["42"])
    assert next(it) == "42"
    with pytest.raises(StopIteration):
        next(it)


def test_list_iterator_multi_entry():
    want = ["1", "2", "3", "42", "1337"]
    assert list(InputIterator(want)) == want


def test_lines_empty():
    assert list(lines(io.StringIO(""))) == []


def test_lines_single_line():
    it = lines(io.StringIO("test line"))
    assert next(it) == "test line"
    with pytest.raises(StopIteration):
        next(it)


def test_lines_multi_line():
    want = ["line one", "line two", "line three"]
    assert list(lines(io.StringIO("\n".join(want)))) == want


def test_lines_strips_carriage_return():
    assert list(lines(io.StringIO("a\r\nb\r"))) == ["a", "b"]


class _FailingStream:
    def __iter__(self):
        raise OSError("boom")


def test_lines_error():
    with pytest.raises(OSError, match="boom"):
        list(lines(_FailingStream()))


def test_close_called_once():
    calls = []
    it = InputIterator(lines(io.StringIO("")), lambda: calls.append(1))
    it.close()
    it.close()
    assert calls == [1]


def test_context_manager_closes():
    calls = []
    with InputIterator(["x"], lambda: calls.append(1)) as it:
        assert list(it) == ["x"]
    assert calls == [1]


def test_open_inputs_single_url():
    want = "https://github.com/ossf/criticality_score"
    with open_inputs([want]) as it:
        assert next(it) == want
        with pytest.raises(StopIteration):
            next(it)


def test_open_inputs_multiple_urls():
    want = [
        "https://github.com/ossf/criticality_score",
        "https://github.com/ossf/scorecard",
    ]
    with open_inputs(want) as it:
        assert list(it) == want


def test_open_inputs_missing_file_is_url():
    want = "this/is/a/file/that/doesnt/exists"
    with open_inputs([want]) as it:
        assert list(it) == [want]


def test_open_inputs_url_file(tmp_path):
    path = tmp_path / "urls.txt"
    want = [
        "https://github.com/ossf/criticality_score",
        "https://github.com/ossf/scorecard",
    ]
    path.write_text("".join(url + "\n" for url in want))
    with open_inputs([str(path)]) as it:
        assert list(it) == want


def test_open_inputs_invalid_url():
    with pytest.raises(InvalidInputError):
        open_inputs([":this.is/not/a/url"])


def test_open_inputs_directory_is_error(tmp_path):
    with pytest.raises(InvalidInputError):
        open_inputs([str(tmp_path)])


def test_open_inputs_no_args():
    assert list(open_inputs([])) == []