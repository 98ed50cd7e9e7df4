"""Constants and configuration defaults for the riko editor."""


class EditorConstants:
    """Central configuration constants for the editor."""

    # Text layout
    TAB_STOP = 8  # Columns per tab stop in the rendered line
    MIN_TAB_STOP = 1
    MAX_TAB_STOP = 16

    # Screen layout
    RESERVED_ROWS = 2  # Status bar + message line at the bottom
    PLACEHOLDER = b"~"  # Drawn in column 0 of rows past the end of the buffer
    PLACEHOLDER_COLOR = 236  # 256-color background for the placeholder
    STATUS_BAR_COLOR = 245  # 256-color background for the status bar

    # File identity
    NO_NAME = "[NO NAME]"  # Shown in the status bar for an unsaved buffer
    MODIFIED_MARKER = "(modified)"

    # Raw bytes seen by the filename prompt
    KEY_ENTER = 13
    KEY_NEWLINE = 10
    KEY_BACKSPACE = 8
    KEY_DELETE = 127
    KEY_ESCAPE = 27
    PRINTABLE_MIN = 32
    PRINTABLE_MAX = 126

    # File operations
    ATOMIC_SAVE_PREFIX = "."  # Prefix for temporary save files
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files
    NEW_FILE_MODE = 0o666  # Permissions for a newly created file, before the umask

    # Status messages
    WELCOME_MESSAGE = "riko editor -- version {}"
    SAVE_PROMPT = "Save as: {}"
    SAVED_MESSAGE = "Written to disk"
    SAVE_CANCELED_MESSAGE = "Save canceled"
    UNSAVED_QUIT_WARNING = "WARNING!! File has unsaved changes. Press Ctrl-Q again to quit."
    PERMISSION_DENIED_MESSAGE = "Error: Permission denied saving {}"
    NO_SPACE_MESSAGE = "Error: No space left on device"
    CANNOT_SAVE_MESSAGE = "Error: Cannot save to {}"
