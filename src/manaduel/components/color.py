from enum import Enum


class Color(str, Enum):
    """Tile colors. ``EMPTY`` marks a destroyed cell waiting for a refill."""

    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    YELLOW = "yellow"
    BLACK = "black"
    EMPTY = "empty"


SPAWNABLE_COLORS: tuple[Color, ...] = (
    Color.RED,
    Color.GREEN,
    Color.BLUE,
    Color.YELLOW,
    Color.BLACK,
)
