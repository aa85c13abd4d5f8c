from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(slots=True)
class SkillLoadout:
    """Skills a combatant can cast and the one currently awaiting a target."""

    equipped: List[str] = field(default_factory=list)
    active_skill_id: Optional[str] = None
    cast_counts: Dict[str, int] = field(default_factory=dict)

    def cast_count(self, skill_id: str) -> int:
        return self.cast_counts.get(skill_id, 0)

    def record_cast(self, skill_id: str) -> None:
        self.cast_counts[skill_id] = self.cast_counts.get(skill_id, 0) + 1
