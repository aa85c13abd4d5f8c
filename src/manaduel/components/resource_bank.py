from dataclasses import dataclass, field
from typing import Dict, Mapping

from manaduel.components.color import Color, SPAWNABLE_COLORS


def empty_counts() -> Dict[Color, int]:
    return {color: 0 for color in SPAWNABLE_COLORS}


@dataclass(slots=True)
class ResourceBank:
    """Stores colored resources accumulated from matches for an owner entity.

    owner_entity: the player whose matches contribute.
    counts: mapping of color -> amount available for spending on skills.
    """
    owner_entity: int
    counts: Dict[Color, int] = field(default_factory=empty_counts)

    def add(self, color: Color, amount: int = 1):
        if amount <= 0 or color is Color.EMPTY:
            return
        self.counts[color] = self.counts.get(color, 0) + amount

    def get(self, color: Color) -> int:
        return self.counts.get(color, 0)

    def can_spend(self, cost: Mapping[Color, int]) -> bool:
        return all(self.counts.get(c, 0) >= n for c, n in cost.items())

    def spend(self, cost: Mapping[Color, int]) -> Dict[Color, int]:
        """Attempt to spend cost; returns missing dict if insufficient else empty dict."""
        missing = {c: n - self.counts.get(c, 0) for c, n in cost.items() if self.counts.get(c, 0) < n}
        if missing:
            return missing
        for c, n in cost.items():
            self.counts[c] = self.counts.get(c, 0) - n
        return {}
