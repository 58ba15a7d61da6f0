"""Test system clipboard integration."""

from unittest.mock import patch

import pyperclip

from caretedit.clipboard import ClipboardManager


def test_copy_text():
    with patch("pyperclip.copy") as mock_copy:
        assert ClipboardManager.copy_text("hello") is True
    mock_copy.assert_called_once_with("hello")


def test_copy_without_clipboard_mechanism():
    with patch("pyperclip.copy", side_effect=pyperclip.PyperclipException("no clipboard")):
        assert ClipboardManager.copy_text("hello") is False


def test_paste_text():
    with patch("pyperclip.paste", return_value="from elsewhere"):
        assert ClipboardManager.paste_text() == "from elsewhere"


def test_paste_without_clipboard_mechanism():
    with patch("pyperclip.paste", side_effect=pyperclip.PyperclipException("no clipboard")):
        assert ClipboardManager.paste_text() is None
