"""Terminal interface using Blessed for output and Curtsies for input."""

import logging
import sys
import termios
from typing import Optional

import blessed
from curtsies import Input
from curtsies.events import PasteEvent, SigIntEvent

logger = logging.getLogger(__name__)

CTRL_C_KEY = "<Ctrl-c>"


class EscapeSequences:
    """The escape-sequence vocabulary the renderer draws with.

    Sequences come from the terminal's capabilities via Blessed, so a
    terminal without styling yields empty strings and frames degrade to
    plain text.
    """

    def __init__(self, term):
        self.term = term

    def hide_cursor(self) -> str:
        return str(self.term.hide_cursor)

    def show_cursor(self) -> str:
        return str(self.term.normal_cursor)

    def cursor_to(self, row: int, column: int) -> str:
        """Move to an absolute position; ``row`` and ``column`` are 1-indexed."""
        return str(self.term.move(max(row, 1) - 1, max(column, 1) - 1))

    def cursor_to_top_left(self) -> str:
        return str(self.term.home)

    def clear_line(self) -> str:
        return str(self.term.clear_eol)

    def background_color(self, color: int) -> str:
        return str(self.term.on_color(color))

    def reset_style(self) -> str:
        return str(self.term.normal)


class Frame:
    """Append buffer for one screen refresh.

    Everything drawn during a refresh is collected here and written with a
    single call, then the buffer is emptied.
    """

    def __init__(self):
        self._buffer = bytearray()

    def append(self, data):
        if isinstance(data, str):
            data = data.encode('utf-8')
        self._buffer.extend(data)

    def flush_to(self, terminal) -> int:
        """Write the frame through ``terminal`` and clear it."""
        data = bytes(self._buffer)
        terminal.write(data)
        self._buffer.clear()
        return len(data)


class TerminalInterface:
    """Handles terminal I/O using Blessed and Curtsies.

    Use as a context manager: entering switches to the alternate screen and
    raw input, leaving restores the terminal on every exit path.
    """

    def __init__(self, terminal: Optional[blessed.Terminal] = None, stream=None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.sequences = EscapeSequences(self.term)
        self._stream = stream
        self.is_fullscreen = False
        self._input: Optional[Input] = None
        self._pending_keys: list[str] = []
        self._old_settings = None

    def __enter__(self):
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.cleanup()
        return False

    def setup(self):
        """Enter fullscreen mode and raw input."""
        self.write((self.term.enter_fullscreen + self.term.clear).encode('utf-8'))
        self.is_fullscreen = True
        # SIGINT comes back as an event so Ctrl-C is a key, not an exit
        self._input = Input(keynames='curtsies', sigint_event=True)
        self._input.__enter__()
        self._disable_flow_control()

    def cleanup(self):
        """Leave raw input and fullscreen mode."""
        if self._input is not None:
            try:
                self._restore_flow_control()
            finally:
                self._input.__exit__(None, None, None)
                self._input = None
        if self.is_fullscreen:
            self.write((self.term.exit_fullscreen + self.term.normal_cursor).encode('utf-8'))
            self.is_fullscreen = False

    def _disable_flow_control(self):
        """Let Ctrl-S and Ctrl-Q through instead of pausing the terminal."""
        try:
            self._old_settings = termios.tcgetattr(sys.stdin)
            new_settings = list(self._old_settings)
            new_settings[0] &= ~(termios.IXON | termios.IXOFF)
            termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
        except (termios.error, OSError) as e:
            logger.warning(f"Could not disable flow control: {e}")
            self._old_settings = None

    def _restore_flow_control(self):
        if self._old_settings is None:
            return
        try:
            termios.tcsetattr(sys.stdin, termios.TCSANOW, self._old_settings)
        except (termios.error, OSError) as e:
            logger.warning(f"Could not restore terminal settings: {e}")
        finally:
            self._old_settings = None

    def get_key(self) -> Optional[str]:
        """Block until the next keypress and return its curtsies token.

        Paste events are split into their individual keys and SIGINT is
        reported as Ctrl-C.
        """
        if self._pending_keys:
            return self._pending_keys.pop(0)
        if self._input is None:
            return None
        while True:
            event = next(self._input)
            if event is None:
                continue
            if isinstance(event, SigIntEvent):
                return CTRL_C_KEY
            if isinstance(event, PasteEvent):
                keys = [str(e) for e in event.events]
                if not keys:
                    continue
                self._pending_keys.extend(keys[1:])
                return keys[0]
            return str(event)

    def write(self, data: bytes):
        """Write raw bytes to the terminal and flush."""
        stream = self._stream
        if stream is None:
            stream = getattr(sys.stdout, 'buffer', sys.stdout)
        stream.write(data)
        stream.flush()

    def size(self) -> tuple[int, int]:
        """Terminal size as (columns, rows)."""
        return (self.term.width, self.term.height)
