from dataclasses import dataclass

from manaduel.components.color import Color

@dataclass(slots=True)
class Tile:
    """Per-cell tile state.

    The cell entity never moves; gravity and swaps copy tile state between
    cells addressed by BoardPosition.
    """
    color: Color
    matched: bool = False
    new: bool = False
    animating: bool = False
    frozen: bool = False
    ignited: bool = False

    def is_empty(self) -> bool:
        return self.color is Color.EMPTY

    def clear_flags(self) -> None:
        self.matched = False
        self.new = False
        self.animating = False
