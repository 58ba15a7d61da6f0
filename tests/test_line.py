"""Tests for Line and its grapheme boundary index."""

import pytest
import regex

from caretedit.line import GraphemeIndexError, Line, grapheme_boundaries


def assert_index_valid(line):
    """Every boundary pair covers exactly one cluster and the pairs tile the text."""
    data = line.text.encode("utf-8")
    assert len(line.grapheme_starts) == len(line.grapheme_ends) == line.grapheme_count
    if not data:
        assert line.grapheme_count == 0
        return
    assert line.grapheme_starts[0] == 0
    assert line.grapheme_ends[-1] == len(data) - 1
    for i in range(line.grapheme_count):
        start, end = line.grapheme_starts[i], line.grapheme_ends[i]
        assert start <= end
        if i + 1 < line.grapheme_count:
            assert end + 1 == line.grapheme_starts[i + 1]
        cluster = data[start:end + 1].decode("utf-8")
        assert regex.fullmatch(r"\X", cluster), cluster


def test_from_string_ascii():
    line = Line.from_string("abc")
    assert line.grapheme_count == 3
    assert line.grapheme_starts == [0, 1, 2]
    assert line.grapheme_ends == [0, 1, 2]


def test_from_string_multibyte():
    line = Line("€£\u1ebf")
    assert line.grapheme_starts == [0, 3, 5]
    assert line.grapheme_ends == [2, 4, 7]
    assert line.byte_length == 8


def test_empty_line():
    line = Line("")
    assert line.is_empty()
    assert line.grapheme_count == 0
    assert line.grapheme_starts == []
    assert line.grapheme_ends == []


def test_flag_emoji_are_single_graphemes():
    line = Line("🇺🇸🇬🇧")
    assert line.grapheme_count == 2
    assert line.grapheme_starts == [0, 8]
    assert line.grapheme_ends == [7, 15]


def test_insert_char_append():
    """Appending to a plain line only extends the index."""
    line = Line("abcdef")
    line.insert_char(6, "g")
    assert line.text == "abcdefg"
    assert line.grapheme_count == 7
    assert line.grapheme_starts[6] == 6
    assert line.grapheme_ends[6] == 6


def test_insert_char_four_byte_at_end():
    line = Line("€£\u1ebf")
    line.insert_char(3, "𐍈")
    assert line.text == "€£\u1ebf𐍈"
    assert line.grapheme_starts == [0, 3, 5, 8]
    assert line.grapheme_ends == [2, 4, 7, 11]


def test_insert_char_shifts_following_graphemes():
    line = Line("€£\u1ebf")
    line.insert_char(1, "𐍈")
    assert line.text == "€𐍈£\u1ebf"
    assert line.grapheme_starts == [0, 3, 7, 9]
    assert line.grapheme_ends == [2, 6, 8, 11]
    assert_index_valid(line)


def test_insert_char_into_empty_line():
    line = Line()
    line.insert_char(0, "x")
    assert line.text == "x"
    assert line.grapheme_starts == [0]
    assert line.grapheme_ends == [0]


def test_insert_combining_mark_joins_previous_grapheme():
    line = Line("e")
    line.insert_char(1, "\u0301")
    assert line.grapheme_count == 1
    assert line.grapheme_ends == [2]
    assert_index_valid(line)


def test_insert_regional_indicator_completes_flag():
    line = Line("a🇺")
    line.insert_char(2, "🇸")
    assert line.grapheme_count == 2
    assert line.grapheme(1) == "🇺🇸"
    assert_index_valid(line)


@pytest.mark.parametrize("index", [-1, 4])
def test_insert_char_out_of_range_raises(index):
    line = Line("abc")
    with pytest.raises(GraphemeIndexError):
        line.insert_char(index, "x")
    assert line.text == "abc"


def test_grapheme_index_error_is_index_error():
    assert issubclass(GraphemeIndexError, IndexError)


def test_insert_char_rejects_multiple_characters():
    with pytest.raises(ValueError):
        Line("abc").insert_char(0, "xy")


def test_insert_str_in_middle():
    line = Line("ad")
    line.insert_str(1, "bc")
    assert line.text == "abcd"
    assert line.grapheme_count == 4
    assert_index_valid(line)


def test_insert_str_into_empty_line():
    line = Line()
    line.insert_str(0, "x€")
    assert line.text == "x€"
    assert line.grapheme_starts == [0, 1]
    assert line.grapheme_ends == [0, 3]


def test_insert_str_at_end():
    line = Line("ab")
    line.insert_str(2, "🇬🇧c")
    assert line.text == "ab🇬🇧c"
    assert line.grapheme_count == 4
    assert_index_valid(line)


def test_delete_grapheme():
    line = Line("h€llo")
    line.delete_grapheme(1)
    assert line.text == "hllo"
    assert line.grapheme_starts == [0, 1, 2, 3]
    assert_index_valid(line)


def test_delete_whole_cluster():
    line = Line("ae\u0301b")
    line.delete_grapheme(1)
    assert line.text == "ab"
    assert line.grapheme_count == 2


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_delete_out_of_range_is_noop(index):
    line = Line("abc")
    line.delete_grapheme(index)
    assert line.text == "abc"
    assert line.grapheme_count == 3


def test_split_line_at_byte():
    line = Line("€ab")
    rest = line.split_line(3)
    assert line.text == "€"
    assert line.grapheme_starts == [0]
    assert line.grapheme_ends == [2]
    assert rest.text == "ab"
    assert rest.grapheme_starts == [0, 1]


def test_split_line_at_end_gives_empty_suffix():
    line = Line("abc")
    rest = line.split_line(3)
    assert line.text == "abc"
    assert rest.is_empty()


def test_split_line_inside_grapheme_raises():
    line = Line("€ab")
    with pytest.raises(GraphemeIndexError):
        line.split_line(1)
    assert line.text == "€ab"


def test_split_line_grapheme():
    line = Line("a€b")
    rest = line.split_line_grapheme(2)
    assert line.text == "a€"
    assert rest.text == "b"


def test_append_lines():
    line = Line("ab")
    line.append(Line("€d"))
    assert line.text == "ab€d"
    assert line.grapheme_starts == [0, 1, 2, 5]
    assert_index_valid(line)


def test_append_fuses_across_seam():
    line = Line("e")
    line.append(Line("\u0301x"))
    assert line.grapheme_count == 2
    assert_index_valid(line)


def test_queries_on_empty_line_yield_zero():
    line = Line()
    assert line.grapheme_start(5) == 0
    assert line.grapheme_end(0) == 0
    assert line.text_index_to_grapheme(3) == 0
    assert line.text_index_to_grapheme_range(0) == range(0, 0)


def test_queries_clamp_out_of_range():
    line = Line("a€b")
    assert line.grapheme_start(10) == 4
    assert line.grapheme_end(10) == 4
    assert line.prev_grapheme_start(0) == 0
    assert line.next_grapheme_start(0) == 1
    assert line.next_grapheme_end(1) == 4
    assert line.prev_grapheme_end(2) == 3


def test_text_index_to_grapheme():
    line = Line("€b")
    assert line.text_index_to_grapheme(0) == 0
    assert line.text_index_to_grapheme(1) == 0
    assert line.text_index_to_grapheme(3) == 1
    assert line.text_index_to_grapheme_range(2) == range(0, 3)


def test_text_index_to_grapheme_is_inverse_of_start():
    line = Line("x€🇺🇸e\u0301")
    for g in range(line.grapheme_count):
        assert line.text_index_to_grapheme(line.grapheme_start(g)) == g


@pytest.mark.parametrize("character", ["z", "€"])
@pytest.mark.parametrize("index", range(5))
def test_insert_then_delete_restores_line(index, character):
    original = "x€🇺🇸e\u0301"
    line = Line(original)
    assert line.grapheme_count == 4
    line.insert_char(index, character)
    assert line.grapheme(index) == character
    line.delete_grapheme(index)
    assert line == Line(original)


def test_graphemes_slice_is_inclusive():
    line = Line("hello")
    assert line.graphemes(1, 3) == "ell"
    assert line.graphemes(3, 99) == "lo"
    assert line.graphemes(5, 9) == ""


def test_grapheme_out_of_range_raises():
    with pytest.raises(GraphemeIndexError):
        Line("ab").grapheme(2)


def test_index_stays_valid_through_mixed_edits():
    line = Line("ab")
    line.insert_char(1, "€")
    line.insert_str(0, "🇺🇸")
    line.insert_char(4, "e")
    line.insert_char(5, "\u0301")
    line.delete_grapheme(1)
    assert line.text == "🇺🇸€be\u0301"
    assert_index_valid(line)


def test_grapheme_boundaries_helper():
    assert grapheme_boundaries("a€") == ([0, 1], [0, 3])
    assert grapheme_boundaries("") == ([], [])


def test_equality_compares_text_and_index():
    assert Line("abc") == Line("abc")
    assert Line("abc") != Line("abd")
