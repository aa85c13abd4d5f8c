from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Combatants:
    """Stores the human and AI player entities for the current match."""

    human_entity: int
    ai_entity: int

    def opponent_of(self, entity: int) -> int:
        return self.ai_entity if entity == self.human_entity else self.human_entity
