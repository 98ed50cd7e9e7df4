"""Tests for the terminal wrapper, escape vocabulary and frame buffer."""

import io
from unittest.mock import MagicMock, Mock, patch

import blessed
import pytest
from curtsies.events import PasteEvent, SigIntEvent

from riko.terminal import EscapeSequences, Frame, TerminalInterface


def plain_terminal():
    return blessed.Terminal(force_styling=None)


def test_cursor_to_is_one_indexed():
    term = Mock()
    term.move.return_value = "MOVE"
    seq = EscapeSequences(term)
    assert seq.cursor_to(1, 1) == "MOVE"
    term.move.assert_called_with(0, 0)
    seq.cursor_to(5, 12)
    term.move.assert_called_with(4, 11)


def test_background_color_uses_256_color_capability():
    term = Mock()
    term.on_color.return_value = "BG"
    seq = EscapeSequences(term)
    assert seq.background_color(236) == "BG"
    term.on_color.assert_called_once_with(236)


def test_vocabulary_maps_to_capabilities():
    term = Mock(hide_cursor="H", normal_cursor="S", home="T", clear_eol="C", normal="N")
    seq = EscapeSequences(term)
    assert seq.hide_cursor() == "H"
    assert seq.show_cursor() == "S"
    assert seq.cursor_to_top_left() == "T"
    assert seq.clear_line() == "C"
    assert seq.reset_style() == "N"


def test_unstyled_terminal_yields_empty_sequences():
    seq = EscapeSequences(plain_terminal())
    assert seq.hide_cursor() == ""
    assert seq.cursor_to(3, 4) == ""
    assert seq.background_color(245) == ""


def test_frame_collects_text_and_bytes():
    frame = Frame()
    frame.append("ab")
    frame.append(b"cd")
    frame.append(bytearray(b"ef"))
    terminal = Mock()
    frame.flush_to(terminal)
    terminal.write.assert_called_once_with(b"abcdef")


def test_frame_flush_is_single_write_and_clears():
    terminal = Mock()
    frame = Frame()
    frame.append("hello")
    assert frame.flush_to(terminal) == 5
    terminal.write.assert_called_once_with(b"hello")
    assert frame.flush_to(terminal) == 0
    terminal.write.assert_called_with(b"")


def test_write_goes_to_stream():
    stream = io.BytesIO()
    ti = TerminalInterface(plain_terminal(), stream=stream)
    ti.write(b"frame")
    assert stream.getvalue() == b"frame"


def test_size_reports_columns_and_rows():
    ti = TerminalInterface(Mock(width=100, height=30), stream=io.BytesIO())
    assert ti.size() == (100, 30)


@patch('riko.terminal.termios.tcsetattr')
@patch('riko.terminal.termios.tcgetattr', return_value=[0x0600, 0, 0, 0, 0, 0, []])
@patch('riko.terminal.Input')
def test_context_manager_restores_on_error(mock_input, mock_get, mock_set):
    ti = TerminalInterface(plain_terminal(), stream=io.BytesIO())
    with pytest.raises(ValueError):
        with ti:
            assert ti.is_fullscreen
            raise ValueError("boom")
    mock_input.return_value.__enter__.assert_called_once()
    mock_input.return_value.__exit__.assert_called_once()
    assert not ti.is_fullscreen
    # Flow control disabled on entry, original settings restored on exit
    assert mock_set.call_count == 2
    assert mock_set.call_args_list[-1][0][2] == [0x0600, 0, 0, 0, 0, 0, []]


@patch('riko.terminal.termios.tcgetattr', side_effect=OSError("not a tty"))
@patch('riko.terminal.Input')
def test_setup_survives_missing_tty_settings(mock_input, mock_get):
    ti = TerminalInterface(plain_terminal(), stream=io.BytesIO())
    with ti:
        pass
    mock_input.return_value.__exit__.assert_called_once()


def test_get_key_without_input_returns_none():
    ti = TerminalInterface(plain_terminal(), stream=io.BytesIO())
    assert ti.get_key() is None


def test_get_key_splits_paste_events():
    ti = TerminalInterface(plain_terminal(), stream=io.BytesIO())
    paste = PasteEvent()
    paste.events = ['a', '<SPACE>', 'b']
    empty = PasteEvent()
    ti._input = iter([None, empty, paste, '<LEFT>'])
    assert [ti.get_key() for _ in range(4)] == ['a', '<SPACE>', 'b', '<LEFT>']


def test_get_key_reports_sigint_as_ctrl_c():
    ti = TerminalInterface(plain_terminal(), stream=io.BytesIO())
    ti._input = iter([SigIntEvent(), 'a'])
    assert ti.get_key() == '<Ctrl-c>'
    assert ti.get_key() == 'a'


@patch('riko.terminal.termios.tcgetattr', side_effect=OSError("not a tty"))
@patch('riko.terminal.Input')
def test_input_intercepts_sigint(mock_input, mock_get):
    with TerminalInterface(plain_terminal(), stream=io.BytesIO()):
        pass
    mock_input.assert_called_once_with(keynames='curtsies', sigint_event=True)
