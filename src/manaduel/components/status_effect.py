from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from manaduel.components.color import Color


@dataclass(frozen=True, slots=True)
class ManaConversion:
    """Turns every ``ratio`` units of ``source`` gained into one unit of ``target``."""

    source: Color
    target: Color
    ratio: int


@dataclass(frozen=True, slots=True)
class ConvertTiles:
    color: Color
    count: int


@dataclass(frozen=True, slots=True)
class ResourceBonus:
    match_color: Color
    bonus_color: Color
    amount: int


@dataclass(slots=True)
class StatusEffect:
    """Timed modifier attached to a combatant.

    The effect entity also carries an EffectDuration; the owner keeps the
    entity id in its EffectList. Multiplicative fields fold as a product
    across all active effects, additive fields as a sum.
    """

    label: str = "effect"
    damage_multiplier: float = 1.0
    resource_multiplier: float = 1.0
    skill_damage_multiplier: float = 1.0
    skill_damage_reduction: int = 0
    mana_conversion: Optional[ManaConversion] = None
    convert_tiles: Optional[ConvertTiles] = None
    resource_bonus: Optional[ResourceBonus] = None
    color_stat_bonus: Dict[Color, int] = field(default_factory=dict)
    extra_turn: bool = False
    on_expire: Optional[Callable[[], None]] = None

    def is_positive(self) -> bool:
        return self.damage_multiplier > 1 or self.resource_multiplier > 1
