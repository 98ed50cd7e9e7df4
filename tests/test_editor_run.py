"""Tests for the main loop."""

from unittest.mock import patch

import pytest


def test_run_types_and_quits(make_editor, terminal):
    editor = make_editor()
    terminal.feed('h', 'i', '<Ctrl-q>', '<Ctrl-q>')
    editor.run()
    assert [bytes(r.chars) for r in editor.rows] == [b"hi"]
    assert terminal.entered == 1
    assert terminal.exited == 1
    # Initial frame, one per handled key, none after the quit is accepted
    assert len(terminal.writes) == 4


def test_run_stops_when_input_ends(make_editor, terminal):
    editor = make_editor(lines=[b"abc"])
    terminal.feed('<RIGHT>')
    editor.run()
    assert editor.cursor_position.x == 1
    assert terminal.exited == 1


def test_interrupt_does_not_discard_unsaved_changes(make_editor, terminal, key):
    editor = make_editor(lines=[b"abc"])
    editor.is_dirty = True
    events = [KeyboardInterrupt(), key('<Ctrl-q>'), None]
    with patch.object(editor.keyboard, 'get_key_event', side_effect=events):
        editor.run()
    # The interrupt was ignored, so the single Ctrl-Q only warned
    assert editor.status_message.startswith("WARNING!!")
    assert editor.is_dirty
    assert terminal.exited == 1


def test_interrupt_disarms_quit_confirmation(make_editor, terminal):
    editor = make_editor(lines=[b"abc"])
    editor.is_dirty = True
    terminal.feed('<Ctrl-q>', '<Ctrl-c>', '<Ctrl-q>')
    editor.run()
    assert editor.quit_armed
    # Initial frame plus one per key; no exit before input ran out
    assert len(terminal.writes) == 4


def test_run_restores_terminal_on_error(make_editor, terminal):
    editor = make_editor()
    with patch.object(editor, 'process_keypress', side_effect=RuntimeError("boom")):
        terminal.feed('a')
        with pytest.raises(RuntimeError):
            editor.run()
    assert terminal.exited == 1
