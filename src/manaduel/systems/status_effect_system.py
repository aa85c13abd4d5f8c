from __future__ import annotations

import logging
import random
from typing import Any, Dict, Iterator, List, Optional, Tuple

from esper import World

from manaduel.components.color import Color
from manaduel.components.effect_duration import EffectDuration
from manaduel.components.effect_list import EffectList
from manaduel.components.status_effect import StatusEffect
from manaduel.events.bus import (
    EVENT_EFFECT_EXPIRED,
    EVENT_STATUS_EFFECT_APPLIED,
    EventBus,
)
from manaduel.systems.board_ops import tile_index

logger = logging.getLogger(__name__)

Position = Tuple[int, int]

MULTIPLICATIVE_FIELDS = ("damage_multiplier", "resource_multiplier", "skill_damage_multiplier")
ADDITIVE_FIELDS = ("skill_damage_reduction",)
FIRST_FOUND_FIELDS = ("mana_conversion", "convert_tiles", "resource_bonus")


class StatusEffectSystem:
    """Per-owner ledger of timed status effects.

    Effects live on their own entities (StatusEffect + EffectDuration); the
    owner's EffectList keeps them in application order. Durations count
    completed turns of the owner and are only decremented by ``tick``.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus

    # ------------------------------------------------------------------
    # Ledger operations

    def add(self, owner_entity: int, effect: StatusEffect, turns: int) -> int:
        effect_list = self._effect_list(owner_entity)
        effect_entity = self.world.create_entity(effect, EffectDuration(remaining_turns=turns))
        effect_list.effect_entities.append(effect_entity)
        self.event_bus.emit(
            EVENT_STATUS_EFFECT_APPLIED,
            owner_entity=owner_entity,
            effect_entity=effect_entity,
            label=effect.label,
            turns=turns,
        )
        return effect_entity

    def tick(self, owner_entity: int) -> List[int]:
        """Decrement every effect of ``owner_entity``; expire those reaching zero."""
        effect_list = self._effect_list(owner_entity)
        expired: List[int] = []
        for effect_entity in list(effect_list.effect_entities):
            try:
                duration = self.world.component_for_entity(effect_entity, EffectDuration)
            except KeyError:
                effect_list.effect_entities.remove(effect_entity)
                continue
            duration.remaining_turns -= 1
            if duration.remaining_turns <= 0:
                expired.append(effect_entity)
        for effect_entity in expired:
            self._expire(owner_entity, effect_entity)
        return expired

    def remaining_turns(self, effect_entity: int) -> int:
        return self.world.component_for_entity(effect_entity, EffectDuration).remaining_turns

    def extend_positive(self, owner_entity: int, turns: int = 1) -> int:
        extended = 0
        for effect_entity, effect in self._iter_effects(owner_entity):
            if effect.is_positive():
                self.world.component_for_entity(effect_entity, EffectDuration).remaining_turns += turns
                extended += 1
        return extended

    def effects(self, owner_entity: int) -> List[StatusEffect]:
        return [effect for _, effect in self._iter_effects(owner_entity)]

    # ------------------------------------------------------------------
    # Aggregation

    def product(self, owner_entity: int, field_name: str) -> float:
        if field_name not in MULTIPLICATIVE_FIELDS:
            raise ValueError(f"'{field_name}' is not a multiplicative effect field")
        value = 1.0
        for _, effect in self._iter_effects(owner_entity):
            value *= getattr(effect, field_name)
        return value

    def total(self, owner_entity: int, field_name: str) -> int:
        if field_name not in ADDITIVE_FIELDS:
            raise ValueError(f"'{field_name}' is not an additive effect field")
        return sum(getattr(effect, field_name) for _, effect in self._iter_effects(owner_entity))

    def color_stat_bonus(self, owner_entity: int) -> Dict[Color, int]:
        bonus: Dict[Color, int] = {}
        for _, effect in self._iter_effects(owner_entity):
            for color, amount in effect.color_stat_bonus.items():
                bonus[color] = bonus.get(color, 0) + amount
        return bonus

    def has_extra_turn(self, owner_entity: int) -> bool:
        return any(effect.extra_turn for _, effect in self._iter_effects(owner_entity))

    def first(self, owner_entity: int, field_name: str, **match: Any) -> Optional[Any]:
        """Return the first non-empty ``field_name`` value, optionally filtered by attributes."""
        if field_name not in FIRST_FOUND_FIELDS:
            raise ValueError(f"'{field_name}' is not a first-found effect field")
        for _, effect in self._iter_effects(owner_entity):
            value = getattr(effect, field_name)
            if value is None:
                continue
            if all(getattr(value, key) == expected for key, expected in match.items()):
                return value
        return None

    # ------------------------------------------------------------------
    # Board-facing effects

    def apply_tile_conversions(self, owner_entity: int, rng: random.Random | None = None) -> List[Position]:
        """Convert random tiles for the first ``convert_tiles`` effect of the owner."""
        conversion = self.first(owner_entity, "convert_tiles")
        if conversion is None:
            return []
        rng = rng or random.Random()
        candidates = sorted(
            pos
            for pos, tile in tile_index(self.world).items()
            if not tile.is_empty() and tile.color is not conversion.color and not tile.frozen
        )
        chosen = rng.sample(candidates, min(conversion.count, len(candidates)))
        tiles = tile_index(self.world)
        for pos in chosen:
            tiles[pos].color = conversion.color
            tiles[pos].animating = True
        return sorted(chosen)

    # ------------------------------------------------------------------

    def _effect_list(self, owner_entity: int) -> EffectList:
        try:
            return self.world.component_for_entity(owner_entity, EffectList)
        except KeyError:
            effect_list = EffectList()
            self.world.add_component(owner_entity, effect_list)
            return effect_list

    def _iter_effects(self, owner_entity: int) -> Iterator[Tuple[int, StatusEffect]]:
        try:
            effect_list = self.world.component_for_entity(owner_entity, EffectList)
        except KeyError:
            return
        for effect_entity in effect_list.effect_entities:
            try:
                yield effect_entity, self.world.component_for_entity(effect_entity, StatusEffect)
            except KeyError:
                continue

    def _expire(self, owner_entity: int, effect_entity: int) -> None:
        effect_list = self._effect_list(owner_entity)
        if effect_entity in effect_list.effect_entities:
            effect_list.effect_entities.remove(effect_entity)
        effect = self.world.component_for_entity(effect_entity, StatusEffect)
        self.world.delete_entity(effect_entity, immediate=True)
        if effect.on_expire is not None:
            effect.on_expire()
        logger.debug("Effect '%s' expired on entity %s", effect.label, owner_entity)
        self.event_bus.emit(
            EVENT_EFFECT_EXPIRED,
            owner_entity=owner_entity,
            effect_entity=effect_entity,
            label=effect.label,
        )
