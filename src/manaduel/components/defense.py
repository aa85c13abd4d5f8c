from dataclasses import dataclass


@dataclass(slots=True)
class Defense:
    """Flat damage reduction subtracted from every incoming hit."""

    value: int = 0
