"""Game state resource describing whose turn it is."""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple


class GamePhase(Enum):
    """High-level phases of a match."""
    HUMAN_TURN = auto()
    AI_TURN = auto()
    GAME_OVER = auto()


@dataclass
class GameState:
    """Singleton component storing the active phase and selection."""
    phase: GamePhase = GamePhase.HUMAN_TURN
    winner_entity: Optional[int] = None
    selected_tile: Optional[Tuple[int, int]] = None

    @property
    def is_game_over(self) -> bool:
        return self.phase is GamePhase.GAME_OVER
