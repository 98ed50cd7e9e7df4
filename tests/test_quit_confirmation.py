"""Tests for quitting with and without unsaved changes."""

from riko.keyboard import NULL_EVENT


def test_quit_clean_buffer_exits_immediately(make_editor, key):
    editor = make_editor(lines=[b"abc"])
    assert editor.process_keypress(key('<Ctrl-q>')) is True


def test_quit_dirty_buffer_needs_confirmation(make_editor, key):
    editor = make_editor(lines=[b"abc"])
    editor.process_keypress(key('x'))
    assert editor.process_keypress(key('<Ctrl-q>')) is False
    assert editor.status_message == "WARNING!! File has unsaved changes. Press Ctrl-Q again to quit."
    assert editor.process_keypress(key('<Ctrl-q>')) is True


def test_other_command_resets_confirmation(make_editor, key):
    editor = make_editor(lines=[b"abc"])
    editor.is_dirty = True
    assert editor.process_keypress(key('<Ctrl-q>')) is False
    editor.process_keypress(key('<LEFT>'))
    assert editor.process_keypress(key('<Ctrl-q>')) is False
    assert editor.process_keypress(key('<Ctrl-q>')) is True


def test_unbound_key_resets_confirmation(make_editor, key):
    editor = make_editor(lines=[b"abc"])
    editor.is_dirty = True
    editor.process_keypress(key('<Ctrl-q>'))
    assert editor.process_keypress(key('<Ctrl-x>')) is False
    assert not editor.quit_armed
    assert editor.process_keypress(key('<Ctrl-q>')) is False


def test_null_event_is_ignored(make_editor, key):
    editor = make_editor(lines=[b"abc"], cursor=(1, 0))
    editor.is_dirty = True
    editor.process_keypress(key('<Ctrl-q>'))
    assert editor.process_keypress(NULL_EVENT) is False
    assert editor.process_keypress(key('<Esc+b>')) is False
    assert editor.quit_armed
    assert editor.process_keypress(key('<Ctrl-q>')) is True


def test_null_event_changes_nothing(make_editor, key):
    editor = make_editor(lines=[b"abc"], cursor=(1, 0))
    editor.process_keypress(key('é'))
    assert [bytes(r.chars) for r in editor.rows] == [b"abc"]
    assert editor.cursor_position.x == 1
    assert not editor.is_dirty


def test_refresh_and_ctrl_h_are_noops(make_editor, key):
    editor = make_editor(lines=[b"abc"], cursor=(2, 0))
    assert editor.process_keypress(key('<Ctrl-l>')) is False
    assert editor.process_keypress(key('<Ctrl-h>')) is False
    assert [bytes(r.chars) for r in editor.rows] == [b"abc"]
    assert editor.cursor_position.x == 2


def test_saving_clears_need_for_confirmation(make_editor, key, tmp_path):
    editor = make_editor(lines=[b"abc"])
    editor.current_file_name = str(tmp_path / "f.txt")
    editor.process_keypress(key('x'))
    editor.process_keypress(key('<Ctrl-s>'))
    assert editor.process_keypress(key('<Ctrl-q>')) is True
