from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from manaduel.components.color import Color


@dataclass(slots=True)
class Affinity:
    """Color stats of a combatant.

    Attributes:
        base: Static per-color stat granted by the character class. Match
            damage for a color scales linearly with this value.
    """

    base: Dict[Color, int] = field(default_factory=dict)

    def stat(self, color: Color) -> int:
        return self.base.get(color, 0)
