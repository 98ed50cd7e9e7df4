"""A single line of text and its rendered form."""

from typing import Optional

from .constants import EditorConstants

TAB = ord('\t')
SPACE = ord(' ')


class Row:
    """One line of the buffer.

    ``chars`` holds the literal bytes of the line. ``render`` is what gets
    drawn: the same bytes with tabs expanded to spaces up to the next tab
    stop. Every mutator rebuilds ``render`` before returning, so it is never
    stale.
    """

    def __init__(self, chars: bytes = b"", tab_stop: Optional[int] = None):
        self.chars = bytearray(chars)
        self.render = bytearray()
        self.tab_stop = tab_stop or EditorConstants.TAB_STOP
        self.update()

    def __repr__(self):
        return f"Row({bytes(self.chars)!r})"

    def __len__(self):
        return len(self.chars)

    def update(self):
        """Rebuild ``render`` from ``chars``."""
        render = bytearray()
        for c in self.chars:
            if c == TAB:
                render.append(SPACE)
                while len(render) % self.tab_stop:
                    render.append(SPACE)
            else:
                render.append(c)
        self.render = render

    def render_position(self, char_x: int) -> int:
        """Return the render column that corresponds to character column ``char_x``."""
        render_x = 0
        for c in self.chars[:char_x]:
            if c == TAB:
                render_x += (self.tab_stop - 1) - (render_x % self.tab_stop)
            render_x += 1
        return render_x

    def insert_char(self, byte: int, at: int):
        at = max(0, min(at, len(self.chars)))
        self.chars.insert(at, byte)
        self.update()

    def delete_char(self, at: int):
        if 0 <= at < len(self.chars):
            del self.chars[at]
            self.update()

    def split(self, at: int) -> "Row":
        """Cut the line at ``at``, keeping the left part and returning the right."""
        at = max(0, min(at, len(self.chars)))
        right = Row(self.chars[at:], tab_stop=self.tab_stop)
        del self.chars[at:]
        self.update()
        return right

    def append(self, other: "Row"):
        self.chars.extend(other.chars)
        self.update()
