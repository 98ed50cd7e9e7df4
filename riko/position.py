"""Two-dimensional unsigned coordinates."""

from dataclasses import dataclass


@dataclass
class Position:
    """An (x, y) pair of non-negative integers.

    The same type is used for the character cursor, the render cursor, the
    scroll offset and the window extent; keep those uses apart at the call
    site. Subtraction saturates at zero on each axis.
    """
    x: int = 0
    y: int = 0

    def __add__(self, other: "Position") -> "Position":
        return Position(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Position") -> "Position":
        return Position(max(0, self.x - other.x), max(0, self.y - other.y))

    def __iter__(self):
        yield self.x
        yield self.y
