"""Main editor controller: text buffer, viewport and screen rendering."""

import errno
import logging
import os
import shutil
import tempfile
from typing import Optional

from .commands import CommandRegistry
from .config import EditorConfig
from .constants import EditorConstants
from .keyboard import KeyboardHandler, KeyEvent, KeyType
from .position import Position
from .row import Row
from .terminal import CTRL_C_KEY, Frame, TerminalInterface
from .version import __version__

logger = logging.getLogger(__name__)


def _current_umask() -> int:
    # The umask can only be read by setting it
    mask = os.umask(0)
    os.umask(mask)
    return mask


class SaveCanceled(Exception):
    """Raised when the user backs out of the filename prompt."""


class Editor:
    """The single-file editor.

    Owns the rows of the document, the cursor in character space, the
    derived render-space cursor, the scroll offset and the window size.
    ``cursor_position.y`` may equal ``len(rows)``: that virtual row past the
    last line is the end-of-buffer sentinel, where ``x`` is always 0.
    """

    def __init__(self, terminal=None, keyboard=None, config: Optional[EditorConfig] = None):
        """Initialize the editor components."""
        self.terminal = terminal or TerminalInterface()
        self.keyboard = keyboard or KeyboardHandler(self.terminal)
        self.config = config or EditorConfig()
        self.command_registry = CommandRegistry()
        self.frame = Frame()
        self.rows: list[Row] = []
        self.cursor_position = Position()
        self.render_cursor_position = Position()
        self.offset = Position()
        self.window_size = Position(1, 1)
        self.update_window_size()
        self.status_message = ""
        self.current_file_name: Optional[str] = None
        self.is_dirty = False
        # Set by the first Ctrl-Q on a dirty buffer, cleared by any other command
        self.quit_armed = False
        # True while the filename prompt owns the message line
        self.prompting = False

    # --- Loading and saving ---

    def _new_row(self, chars: bytes = b"") -> Row:
        return Row(chars, tab_stop=self.config.tab_stop)

    def open_file(self, filename: str):
        """Load ``filename``, one row per line.

        Raises:
            OSError: if the file cannot be read.
        """
        with open(filename, 'rb') as f:
            content = f.read()
        lines = content.split(b'\n')
        if lines[-1] == b'':
            # A final newline terminates the last line; it does not start a new one
            lines.pop()
        self.rows = [self._new_row(line[:-1] if line.endswith(b'\r') else line) for line in lines]
        self.current_file_name = filename
        self.cursor_position = Position()
        self.offset = Position()
        self.is_dirty = False
        logger.info(f"Opened {filename} ({len(self.rows)} lines)")

    def open_empty(self):
        """Start an unnamed buffer holding one empty row."""
        self.rows = [self._new_row()]
        self.current_file_name = None
        self.cursor_position = Position()
        self.offset = Position()
        self.is_dirty = False

    def save(self) -> int:
        """Write the buffer to its file, asking for a name if it has none.

        Returns:
            Number of bytes written.

        Raises:
            SaveCanceled: the filename prompt was dismissed.
            OSError: the file could not be written.
        """
        if self.current_file_name is None:
            name = self.prompt(EditorConstants.SAVE_PROMPT)
            if not name:
                raise SaveCanceled("user canceled")
            self.current_file_name = name.decode('ascii')

        written = self._write_file(self.current_file_name)
        self.is_dirty = False
        logger.info(f"Wrote {written} bytes to {self.current_file_name}")
        return written

    def _write_file(self, filename: str) -> int:
        """Replace ``filename`` atomically with every row plus a newline.

        A symlink is followed so the file it points at is the one replaced.
        An existing file keeps its permission bits; a new one gets the
        ``0o666`` minus the umask.
        """
        data = b''.join(bytes(row.chars) + b'\n' for row in self.rows)

        target = os.path.realpath(filename)
        # Temp file in the target directory so the rename stays on one filesystem
        dir_name = os.path.dirname(target) or '.'
        prefix = EditorConstants.ATOMIC_SAVE_PREFIX + os.path.basename(target)
        temp_filename = None
        try:
            with tempfile.NamedTemporaryFile(mode='wb', dir=dir_name, prefix=prefix,
                                             suffix=EditorConstants.ATOMIC_SAVE_SUFFIX,
                                             delete=False) as temp_file:
                temp_filename = temp_file.name
                temp_file.write(data)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            if os.path.exists(target):
                shutil.copymode(target, temp_filename)
            else:
                os.chmod(temp_filename, EditorConstants.NEW_FILE_MODE & ~_current_umask())
            os.replace(temp_filename, target)
        except OSError:
            if temp_filename and os.path.exists(temp_filename):
                try:
                    os.remove(temp_filename)
                except OSError as cleanup_error:
                    logger.warning(f"Could not remove {temp_filename}: {cleanup_error}")
            raise
        return len(data)

    def handle_save(self):
        """Save and report the outcome on the status line."""
        try:
            self.save()
        except SaveCanceled:
            logger.info("Save canceled at the filename prompt")
            self.set_status_message(EditorConstants.SAVE_CANCELED_MESSAGE)
        except PermissionError as e:
            logger.warning(f"Save failed: {e}")
            self.set_status_message(
                EditorConstants.PERMISSION_DENIED_MESSAGE.format(self.current_file_name))
        except OSError as e:
            logger.warning(f"Save failed: {e}")
            if e.errno == errno.ENOSPC:
                self.set_status_message(EditorConstants.NO_SPACE_MESSAGE)
            else:
                self.set_status_message(
                    EditorConstants.CANNOT_SAVE_MESSAGE.format(self.current_file_name))
        else:
            self.set_status_message(EditorConstants.SAVED_MESSAGE)

    def prompt(self, template: str) -> Optional[bytes]:
        """Collect a line of input on the status line.

        Reads raw bytes until Enter (returns what was typed) or Escape
        (returns None). Backspace removes the last byte and only printable
        ASCII is kept. The screen is redrawn after every byte.
        """
        collected = bytearray()
        self.prompting = True
        try:
            self.set_status_message(template.format(''))
            self.refresh_screen()
            while True:
                byte = self.keyboard.read_byte()
                if byte is None or byte == EditorConstants.KEY_ESCAPE:
                    return None
                if byte in (EditorConstants.KEY_ENTER, EditorConstants.KEY_NEWLINE):
                    return bytes(collected)
                if byte in (EditorConstants.KEY_BACKSPACE, EditorConstants.KEY_DELETE):
                    del collected[-1:]
                elif EditorConstants.PRINTABLE_MIN <= byte <= EditorConstants.PRINTABLE_MAX:
                    collected.append(byte)
                self.set_status_message(template.format(collected.decode('ascii')))
                self.refresh_screen()
        finally:
            self.prompting = False

    def set_status_message(self, message: str):
        self.status_message = message

    # --- Command dispatch ---

    def process_keypress(self, key_event: KeyEvent) -> bool:
        """Apply one key event.

        Returns:
            True if the editor should exit.
        """
        if key_event.key_type == KeyType.NULL:
            return False
        command = self.command_registry.lookup(key_event)
        if command is None or not command.confirms_quit:
            self.quit_armed = False
        if command is None:
            return False
        return command.execute(self, key_event)

    def request_quit(self) -> bool:
        """Return True if quitting is allowed now.

        With unsaved changes the first request only warns; a second
        consecutive request is honored.
        """
        if not self.is_dirty or self.quit_armed:
            return True
        self.set_status_message(EditorConstants.UNSAVED_QUIT_WARNING)
        self.quit_armed = True
        return False

    def run(self):
        """Run the read-dispatch-render loop until quit.

        Ctrl-C is an ordinary unbound key here, so unsaved changes still
        need the Ctrl-Q confirmation.
        """
        with self.terminal:
            self.refresh_screen()
            while True:
                try:
                    key_event = self.keyboard.get_key_event()
                except KeyboardInterrupt:
                    # SIGINT delivered outside the input layer
                    logger.info("Interrupt received; treating it as Ctrl-C")
                    key_event = self.keyboard.parse_key(CTRL_C_KEY)
                if key_event is None:
                    logger.info("Input closed")
                    break
                if self.process_keypress(key_event):
                    break
                self.refresh_screen()

    # --- Cursor movement ---

    def _row_length(self, y: int) -> int:
        if 0 <= y < len(self.rows):
            return len(self.rows[y])
        return 0

    def _clamp_cursor_x(self):
        cursor = self.cursor_position
        cursor.x = min(cursor.x, self._row_length(cursor.y))

    def move_cursor(self, key_event: KeyEvent):
        """Move the cursor one step for an arrow key."""
        if not self.rows:
            return
        cursor = self.cursor_position
        last_row = len(self.rows) - 1
        direction = key_event.value

        if direction == 'left':
            if cursor.x > 0:
                cursor.x -= 1
            elif cursor.y > 0:
                cursor.y -= 1
                cursor.x = self._row_length(cursor.y)
        elif direction == 'right':
            if cursor.y > last_row:
                return
            if cursor.x < self._row_length(cursor.y):
                cursor.x += 1
            elif cursor.y < last_row:
                cursor.y += 1
                cursor.x = 0
        elif direction == 'up':
            if cursor.y > 0:
                cursor.y -= 1
                self._clamp_cursor_x()
        elif direction == 'down':
            if cursor.y < last_row:
                cursor.y += 1
                self._clamp_cursor_x()

    def page_up(self):
        self.cursor_position.y = self.offset.y
        self._clamp_cursor_x()

    def page_down(self):
        bottom = self.offset.y + self.window_size.y - 1
        self.cursor_position.y = min(bottom, len(self.rows))
        self._clamp_cursor_x()

    def move_beginning_of_line(self):
        self.cursor_position.x = 0

    def move_end_of_line(self):
        self.cursor_position.x = self._row_length(self.cursor_position.y)

    # --- Editing ---

    def insert_row(self, at: int, row: Row):
        self.rows.insert(at, row)
        self.is_dirty = True

    def insert_char(self, byte: int):
        cursor = self.cursor_position
        if cursor.y == len(self.rows):
            self.insert_row(len(self.rows), self._new_row())
        row = self.rows[cursor.y]
        row.insert_char(byte, cursor.x)
        cursor.x += 1
        self.render_cursor_position = Position(row.render_position(cursor.x), cursor.y)
        self.is_dirty = True

    def insert_newline(self):
        cursor = self.cursor_position
        if cursor.y == len(self.rows):
            self.insert_row(len(self.rows), self._new_row())
        else:
            row = self.rows[cursor.y]
            if len(row) == 0 or cursor.x >= len(row):
                self.insert_row(cursor.y + 1, self._new_row())
            else:
                remainder = row.split(cursor.x)
                if remainder.chars:
                    self.insert_row(cursor.y + 1, remainder)
        cursor.x = 0
        cursor.y += 1
        self.render_cursor_position = Position(0, cursor.y)
        self.is_dirty = True

    def backspace(self):
        """Delete left of the cursor, joining lines at column 0."""
        cursor = self.cursor_position
        if cursor.y >= len(self.rows):
            return
        if cursor.x > 0:
            row = self.rows[cursor.y]
            row.delete_char(cursor.x - 1)
            cursor.x -= 1
            self.render_cursor_position = Position(row.render_position(cursor.x), cursor.y)
        else:
            if cursor.y == 0:
                return
            removed = self.rows.pop(cursor.y)
            cursor.y -= 1
            previous = self.rows[cursor.y]
            cursor.x = len(previous)
            previous.append(removed)
            self.render_cursor_position = Position(previous.render_position(cursor.x), cursor.y)
        self.is_dirty = True

    # --- Rendering ---

    def update_window_size(self):
        """Take the content area from the terminal, minus the status rows."""
        columns, rows = self.terminal.size()
        self.window_size = Position(
            max(columns, 1),
            max(rows - EditorConstants.RESERVED_ROWS, 1),
        )

    def scroll(self):
        """Move the offset so the render cursor is inside the window."""
        cursor = self.cursor_position
        render_x = 0
        if cursor.y < len(self.rows):
            render_x = self.rows[cursor.y].render_position(cursor.x)
        self.render_cursor_position = Position(render_x, cursor.y)

        height = max(self.window_size.y, 1)
        width = max(self.window_size.x, 1)
        if cursor.y < self.offset.y:
            self.offset.y = cursor.y
        if cursor.y >= self.offset.y + height:
            self.offset.y = cursor.y - height + 1
        if render_x < self.offset.x:
            self.offset.x = render_x
        if render_x >= self.offset.x + width:
            self.offset.x = render_x - width + 1

    def refresh_screen(self):
        """Draw one complete frame and write it with a single call."""
        self.update_window_size()
        self.scroll()
        seq = self.terminal.sequences
        self.frame.append(seq.hide_cursor())
        self.frame.append(seq.cursor_to_top_left())
        self.draw_rows()
        self.draw_status_bar()
        if self.prompting:
            # End of the typed text on the message line
            self.frame.append(seq.cursor_to(
                self.window_size.y + EditorConstants.RESERVED_ROWS,
                min(len(self.status_message), self.window_size.x - 1) + 1,
            ))
        else:
            self.frame.append(seq.cursor_to(
                self.cursor_position.y - self.offset.y + 1,
                self.render_cursor_position.x - self.offset.x + 1,
            ))
        self.frame.append(seq.show_cursor())
        self.frame.flush_to(self.terminal)

    def _shows_welcome(self) -> bool:
        return len(self.rows) == 1 and len(self.rows[0]) == 0

    def draw_rows(self):
        seq = self.terminal.sequences
        width = self.window_size.x
        for i in range(self.window_size.y):
            self.frame.append(seq.clear_line())
            file_row = i + self.offset.y
            if file_row >= len(self.rows):
                self.frame.append(seq.background_color(self.config.placeholder_color))
                self.frame.append(EditorConstants.PLACEHOLDER)
                self.frame.append(seq.reset_style())
                if self._shows_welcome() and i == self.window_size.y // 3:
                    self._draw_welcome(width)
            else:
                render = self.rows[file_row].render
                self.frame.append(render[self.offset.x:self.offset.x + width])
            self.frame.append(b"\r\n")

    def _draw_welcome(self, width: int):
        room = max(width - len(EditorConstants.PLACEHOLDER), 0)
        message = EditorConstants.WELCOME_MESSAGE.format(__version__)[:room]
        padding = (room - len(message)) // 2
        self.frame.append(b" " * padding + message.encode('ascii'))

    def status_text(self) -> str:
        """The status bar contents before padding."""
        name = self.current_file_name or EditorConstants.NO_NAME
        marker = EditorConstants.MODIFIED_MARKER if self.is_dirty else ""
        return (
            f"{name}{marker}: "
            f"(cx{self.cursor_position.x}, cy{self.cursor_position.y}): "
            f"(rcx{self.render_cursor_position.x}, rcy{self.render_cursor_position.y}): "
            f"lc:{len(self.rows)}"
        )

    def draw_status_bar(self):
        seq = self.terminal.sequences
        width = self.window_size.x
        self.frame.append(seq.background_color(self.config.status_bar_color))
        self.frame.append(self.status_text()[:width].ljust(width))
        self.frame.append(seq.reset_style())
        self.frame.append(b"\r\n")
        self.frame.append(seq.clear_line())
        self.frame.append(self.status_message[:width])
