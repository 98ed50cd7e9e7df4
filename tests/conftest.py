"""Shared fixtures: a scripted terminal and editor factory."""

import blessed
import pytest

from riko.config import EditorConfig
from riko.editor import Editor
from riko.keyboard import KeyboardHandler
from riko.position import Position
from riko.row import Row
from riko.terminal import EscapeSequences


class FakeTerminal:
    """Stands in for TerminalInterface.

    Styling is disabled so every escape sequence is empty and written frames
    contain only text. Keys are curtsies-style tokens fed in advance.
    """

    def __init__(self, width=80, height=24):
        self.term = blessed.Terminal(force_styling=None)
        self.sequences = EscapeSequences(self.term)
        self.width = width
        self.height = height
        self.writes = []
        self.keys = []
        self.entered = 0
        self.exited = 0

    def __enter__(self):
        self.entered += 1
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exited += 1
        return False

    def feed(self, *tokens):
        self.keys.extend(tokens)

    def get_key(self):
        if self.keys:
            return self.keys.pop(0)
        return None

    def size(self):
        return (self.width, self.height)

    def write(self, data):
        self.writes.append(data)

    @property
    def last_frame(self):
        return self.writes[-1]


@pytest.fixture
def terminal():
    return FakeTerminal()


@pytest.fixture
def make_editor(terminal):
    """Build an editor over ``terminal`` holding ``lines`` (bytes) at ``cursor``."""
    def _make(lines=None, cursor=(0, 0), config=None):
        config = config or EditorConfig()
        editor = Editor(terminal=terminal, keyboard=KeyboardHandler(terminal), config=config)
        if lines is None:
            editor.open_empty()
        else:
            editor.rows = [Row(line, tab_stop=config.tab_stop) for line in lines]
        editor.cursor_position = Position(*cursor)
        return editor
    return _make


@pytest.fixture
def key():
    """Parse a curtsies token into a KeyEvent."""
    return KeyboardHandler(None).parse_key
