"""Test cursor movement and byte/screen resynchronisation on a screen."""

from caretedit.buffer import Buffer
from caretedit.modes import Mode
from caretedit.position import Boundary, ScreenLocation, Size
from caretedit.screen import Screen


def make_screen(lines, size=Size(80, 24), boundary=None):
    return Screen(Buffer.from_strings(lines), size=size, boundary=boundary)


def test_move_down_on_last_line_stays():
    screen = make_screen(["one", "two", "three"])
    screen.move_down(10)
    assert screen.text_position.row == 2
    screen.move_down()
    assert screen.text_position.row == 2


def test_move_up_saturates_at_zero():
    screen = make_screen(["one", "two"])
    screen.move_up(5)
    assert screen.text_position.row == 0


def test_move_left_saturates_at_zero():
    screen = make_screen(["abc"])
    screen.move_left(3)
    assert screen.text_position.grapheme == 0


def test_move_right_clamps_to_last_grapheme():
    screen = make_screen(["abc"])
    screen.move_right(10)
    assert screen.text_position.grapheme == 2
    assert screen.text_position.byte == 2


def test_vertical_movement_is_ragged():
    screen = make_screen(["hello", "hi", "world"])
    screen.move_end_line()
    assert screen.text_position.grapheme == 4
    screen.move_down()
    assert screen.text_position.grapheme == 1
    # No remembered column
    screen.move_down()
    assert screen.text_position.grapheme == 1


def test_move_onto_empty_line():
    screen = make_screen(["hello", "", "x"])
    screen.move_end_line()
    screen.move_down()
    assert screen.text_position.grapheme == 0
    assert screen.text_position.byte == 0


def test_byte_is_resynced_for_multibyte_text():
    screen = make_screen(["€£\u1ebfx"])
    screen.move_right(2)
    assert screen.text_position.grapheme == 2
    assert screen.text_position.byte == 5
    screen.move_left()
    assert screen.text_position.byte == 3


def test_start_and_end_of_line():
    screen = make_screen(["a🇺🇸b"])
    screen.move_end_line()
    assert screen.text_position.grapheme == 2
    assert screen.text_position.byte == 9
    screen.move_start_line()
    assert (screen.text_position.grapheme, screen.text_position.byte) == (0, 0)


def test_first_and_last_line():
    screen = make_screen(["a", "b", "c", "d"])
    screen.move_last_line()
    assert screen.text_position.row == 3
    screen.move_first_line()
    assert screen.text_position.row == 0


def test_move_to_line_clamps():
    screen = make_screen(["a", "b", "c"])
    screen.move_to_line(99)
    assert screen.text_position.row == 2
    screen.move_to_line(-4)
    assert screen.text_position.row == 0


def test_insert_mode_can_reach_append_position():
    screen = make_screen(["abc"])
    screen.set_mode(Mode.INSERT)
    screen.move_end_line()
    assert screen.text_position.grapheme == 3
    assert screen.text_position.byte == 3


def test_leaving_insert_mode_clamps_cursor():
    screen = make_screen(["abc"])
    screen.set_mode(Mode.INSERT)
    screen.move_end_line()
    screen.set_mode(Mode.NORMAL)
    assert screen.text_position.grapheme == 2
    assert screen.text_position.byte == 2


def test_screen_location_includes_inset():
    screen = make_screen(["hello", "world"])
    screen.move_down()
    screen.move_right(2)
    assert screen.screen_location == ScreenLocation(1, 6)


def test_custom_boundary():
    screen = make_screen(["hello", "world"], boundary=Boundary(top=1, right=0, left=0, bottom=1))
    screen.move_down()
    assert screen.screen_location == ScreenLocation(2, 0)


def test_movement_on_empty_buffer_does_not_raise():
    screen = Screen(size=Size(80, 24))
    screen.move_down(3)
    screen.move_right(3)
    screen.move_end_line()
    screen.move_last_line()
    assert (screen.text_position.row, screen.text_position.grapheme) == (0, 0)
    assert screen.screen_location == ScreenLocation(0, 4)


def test_restore_position_clamps():
    screen = make_screen(["abc", "de"])
    screen.restore_position(5, 9)
    assert (screen.text_position.row, screen.text_position.grapheme) == (1, 1)
    assert screen.text_position.byte == 1


def test_screen_location_saturates():
    assert ScreenLocation(1, 2) - ScreenLocation(3, 1) == ScreenLocation(0, 1)
    assert ScreenLocation(1, 2) + ScreenLocation(3, 1) == ScreenLocation(4, 3)
