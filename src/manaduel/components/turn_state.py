from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class TurnState:
    """Tracks current turn-level state shared across systems."""

    action_source: Optional[str] = None
    combo: int = 0
    cascade_depth: int = 0
    extra_turn_granted: bool = False
    turn_number: int = 1
