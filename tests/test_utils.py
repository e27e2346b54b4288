import io

from autorig.utils import iter_word_lines, read_words


def test_read_words_splits_on_whitespace():
    assert read_words(io.StringIO("v 1 2\t3\n")) == ["v", "1", "2", "3"]


def test_read_words_empty_line():
    assert read_words(io.StringIO("\nnext\n")) == []


def test_read_words_consecutive_and_eof():
    s = io.StringIO("a b\nc\n")
    assert read_words(s) == ["a", "b"]
    assert read_words(s) == ["c"]
    assert read_words(s) == []


def test_read_words_continuation():
    s = io.StringIO("a b\\\nc d\nrest\n")
    assert read_words(s) == ["a", "b", "c", "d"]
    assert read_words(s) == ["rest"]


def test_read_words_carriage_return_is_whitespace():
    assert read_words(io.StringIO("f 1 2 3\r\n")) == ["f", "1", "2", "3"]


def test_read_words_last_line_without_newline():
    assert read_words(io.StringIO("  x   y")) == ["x", "y"]


def test_iter_word_lines_includes_empty_lines():
    assert list(iter_word_lines(io.StringIO("a\n\nb c\n"))) == [["a"], [], ["b", "c"]]


def test_iter_word_lines_continuation():
    lines = list(iter_word_lines(io.StringIO("one \\\ntwo\nthree\n")))
    assert lines == [["one", "two"], ["three"]]


def test_iter_word_lines_empty_input():
    assert list(iter_word_lines(io.StringIO(""))) == []