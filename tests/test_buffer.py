"""Tests for line-level buffer operations."""

from caretedit.buffer import Buffer
from caretedit.line import Line


def texts(buffer):
    return [line.text for line in buffer.lines]


def test_new_line_splits_at_grapheme():
    buffer = Buffer.from_strings(["abc", "def"])
    buffer.new_line(0, 1)
    assert texts(buffer) == ["a", "bc", "def"]
    assert buffer.num_lines == 3
    assert buffer.modified


def test_new_line_at_end_of_line_inserts_empty_line():
    buffer = Buffer.from_strings(["abc", "def"])
    buffer.new_line(0, 3)
    assert texts(buffer) == ["abc", "", "def"]


def test_new_line_past_last_line_appends():
    buffer = Buffer.from_strings(["abc"])
    buffer.new_line(5, 0)
    assert texts(buffer) == ["abc", ""]


def test_new_line_on_empty_buffer():
    buffer = Buffer.empty()
    buffer.new_line(0, 0)
    assert texts(buffer) == [""]


def test_insert_char_delegates_to_line():
    buffer = Buffer.from_strings(["ac"])
    buffer.insert_char(0, 1, "b")
    assert texts(buffer) == ["abc"]
    assert buffer.lines[0].grapheme_count == 3
    assert buffer.modified


def test_delete_char_on_empty_line_removes_line():
    buffer = Buffer.from_strings(["abc", "", "def"])
    buffer.delete_char(1, 0)
    assert texts(buffer) == ["abc", "def"]
    assert buffer.num_lines == 2


def test_delete_char_removes_grapheme():
    buffer = Buffer.from_strings(["a€c"])
    buffer.delete_char(0, 1)
    assert texts(buffer) == ["ac"]
    assert buffer.num_lines == 1


def test_join_lines():
    buffer = Buffer.from_strings(["ab", "cd", "ef"])
    buffer.join_lines(0)
    assert texts(buffer) == ["abcd", "ef"]
    assert buffer.lines[0] == Line("abcd")


def test_join_last_line_is_noop():
    buffer = Buffer.from_strings(["ab"])
    buffer.join_lines(0)
    assert texts(buffer) == ["ab"]
    assert not buffer.modified


def test_normalize_newlines_splits_embedded_terminators():
    buffer = Buffer([Line("a\nb\nc"), Line("d")])
    buffer.normalize_newlines()
    assert texts(buffer) == ["a", "b", "c", "d"]


def test_normalize_newlines_handles_trailing_terminator():
    buffer = Buffer([Line("ab\n")])
    buffer.normalize_newlines()
    assert texts(buffer) == ["ab", ""]


def test_print_line_inclusive_slice():
    buffer = Buffer.from_strings(["hello world"])
    assert buffer.print_line(0, 0, 4) == "hello"
    assert buffer.print_line(0, 6, 100) == "world"


def test_print_line_past_end_is_empty():
    buffer = Buffer.from_strings(["abc", ""])
    assert buffer.print_line(0, 3, 10) == ""
    assert buffer.print_line(1, 0, 10) == ""
    assert buffer.print_line(7, 0, 10) == ""


def test_print_line_highlight_does_not_change_output():
    buffer = Buffer.from_strings(["abc"])
    assert buffer.print_line(0, 0, 2, highlighted=True) == "abc"


def test_to_string_terminates_every_line():
    assert Buffer.from_strings(["a", "b"]).to_string() == "a\nb\n"
    assert Buffer.empty().to_string() == "\n"
