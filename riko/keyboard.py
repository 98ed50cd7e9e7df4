"""Keyboard input handling using curtsies-style tokens."""

from typing import Optional
from dataclasses import dataclass
from enum import Enum

from .constants import EditorConstants


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    CTRL = "ctrl"
    SPECIAL = "special"
    NULL = "null"  # Malformed or unsupported input; dispatch ignores it


@dataclass
class KeyEvent:
    """Represents a parsed keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'backspace')
    raw: str  # The raw token from curtsies
    is_ctrl: bool = False
    is_sequence: bool = False


NULL_EVENT = KeyEvent(key_type=KeyType.NULL, value='', raw='')

SPECIALS = {
    'left', 'right', 'up', 'down', 'home', 'end', 'enter', 'backspace',
    'delete', 'page_up', 'page_down', 'insert',
}

# Bytes reported to the filename prompt for special keys
_SPECIAL_BYTES = {
    'enter': EditorConstants.KEY_ENTER,
    'backspace': EditorConstants.KEY_BACKSPACE,
    'escape': EditorConstants.KEY_ESCAPE,
}


class KeyboardHandler:
    """Turns terminal key tokens into KeyEvents."""

    def __init__(self, terminal_interface):
        """Initialize with a terminal interface."""
        self.terminal = terminal_interface

    def get_key_event(self) -> Optional[KeyEvent]:
        """Block for the next key and return it parsed."""
        key = self.terminal.get_key()
        if not key:
            return None
        return self.parse_key(key)

    def read_byte(self) -> Optional[int]:
        """Block for the next key and return it as a single input byte.

        Used by modal prompts that collect raw bytes instead of commands.
        Enter is CR, Backspace is BS, Escape is ESC; keys with no single-byte
        form come back as 0.
        """
        event = self.get_key_event()
        if event is None:
            return None
        return self.event_to_byte(event)

    @staticmethod
    def event_to_byte(event: KeyEvent) -> int:
        if event.key_type == KeyType.SPECIAL:
            return _SPECIAL_BYTES.get(event.value, 0)
        if event.key_type == KeyType.REGULAR:
            return ord(event.value)
        if event.key_type == KeyType.CTRL:
            return ord(event.value) - ord('a') + 1
        return 0

    def parse_key(self, key) -> KeyEvent:
        """Parse a curtsies key token into a KeyEvent.

        Args:
            key: Token such as 'a', '<LEFT>', '<Ctrl-q>' or '<Esc+b>'

        Returns:
            Parsed KeyEvent; NULL for anything the editor does not handle
        """
        key_str = str(key)

        # Curtsies-style key names like '<LEFT>', '<Ctrl-x>', '<Esc+u>'
        if key_str.startswith('<') and key_str.endswith('>') and len(key_str) > 2:
            name = key_str[1:-1]
            lower = name.lower().replace('+', '-')
            parts = lower.split('-') if '-' in lower else [lower]
            mods = set(parts[:-1])
            base = parts[-1]
            if base in ('pageup', 'page_up'):
                base = 'page_up'
            elif base in ('pagedown', 'page_down'):
                base = 'page_down'

            if base in ('space', 'spacebar', 'spc') and not mods:
                return KeyEvent(key_type=KeyType.REGULAR, value=' ', raw=key_str)
            if base == 'tab' and not mods:
                return KeyEvent(key_type=KeyType.REGULAR, value='\t', raw=key_str)
            if base in ('esc', 'escape') and not mods:
                return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw=key_str)
            # Alt/meta/esc combinations have no binding
            if mods & {'alt', 'meta', 'esc', 'shift'}:
                return KeyEvent(key_type=KeyType.NULL, value=base, raw=key_str)
            if 'ctrl' in mods and len(base) == 1:
                # Ctrl-J / Ctrl-M are Enter on a terminal
                if base in ('j', 'm'):
                    return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str, is_sequence=True)
                return KeyEvent(key_type=KeyType.CTRL, value=base, raw=key_str, is_ctrl=True)
            if base in SPECIALS and not mods:
                return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str, is_sequence=True)
            return KeyEvent(key_type=KeyType.NULL, value=base, raw=key_str, is_sequence=True)

        if len(key_str) != 1:
            return KeyEvent(key_type=KeyType.NULL, value=key_str, raw=key_str)

        o = ord(key_str)
        if o in (EditorConstants.KEY_ENTER, EditorConstants.KEY_NEWLINE):
            return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str)
        if o in (EditorConstants.KEY_BACKSPACE, EditorConstants.KEY_DELETE):
            return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=key_str)
        if o == EditorConstants.KEY_ESCAPE:
            return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw=key_str)
        if o == ord('\t'):
            return KeyEvent(key_type=KeyType.REGULAR, value='\t', raw=key_str)
        if 1 <= o <= 26:  # Ctrl-A .. Ctrl-Z
            ch = chr(ord('a') + o - 1)
            return KeyEvent(key_type=KeyType.CTRL, value=ch, raw=key_str, is_ctrl=True)
        if EditorConstants.PRINTABLE_MIN <= o <= EditorConstants.PRINTABLE_MAX:
            return KeyEvent(key_type=KeyType.REGULAR, value=key_str, raw=key_str)

        # Other control bytes and non-ASCII text
        return KeyEvent(key_type=KeyType.NULL, value=key_str, raw=key_str)
