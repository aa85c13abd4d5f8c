from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable

from esper import World

from manaduel.components.affinity import Affinity
from manaduel.components.color import Color
from manaduel.components.defense import Defense
from manaduel.components.health import Health
from manaduel.components.resource_bank import ResourceBank
from manaduel.components.game_state import GamePhase
from manaduel.events.bus import (
    EVENT_DAMAGE_DEALT,
    EVENT_DAMAGE_TAKEN,
    EVENT_GAME_OVER,
    EVENT_HEALTH_CHANGED,
    EVENT_RESOURCE_GAINED,
    EventBus,
)
from manaduel.constants import SPECIAL_SHAPE_MULTIPLIER
from manaduel.systems.match_finder import Match
from manaduel.systems.status_effect_system import StatusEffectSystem
from manaduel.utils.combat_math import (
    combo_multiplier,
    length_multiplier,
    round_half_up,
    split_conversion,
)
from manaduel.utils.game_state import find_opponent, get_game_state

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PassOutcome:
    """Resources and damage produced by one cascade pass."""

    resources: Dict[Color, int] = field(default_factory=dict)
    raw_damage: int = 0
    damage_dealt: int = 0


class CombatPipeline:
    """Turns matches into resources and damage, and applies all health changes.

    Every damage source (matches, skills, self-inflicted costs) goes through
    ``apply_damage`` so that multipliers, reductions and defense are folded
    in the same order.
    """

    def __init__(self, world: World, event_bus: EventBus, effects: StatusEffectSystem):
        self.world = world
        self.event_bus = event_bus
        self.effects = effects

    # ------------------------------------------------------------------
    # Matches

    def score_pass(self, owner_entity: int, matches: Iterable[Match], combo: int) -> PassOutcome:
        matches = list(matches)
        outcome = PassOutcome()
        for match in matches:
            for color, amount in self.distribute_resources(owner_entity, match.color, match.length).items():
                outcome.resources[color] = outcome.resources.get(color, 0) + amount
        outcome.raw_damage = self.pass_damage(owner_entity, matches, combo)
        if outcome.raw_damage > 0:
            outcome.damage_dealt = self.apply_damage(
                owner_entity,
                find_opponent(self.world, owner_entity),
                outcome.raw_damage,
                direct=True,
                skill=False,
            )
        return outcome

    def color_stat(self, owner_entity: int, color: Color) -> int:
        try:
            affinity = self.world.component_for_entity(owner_entity, Affinity)
        except KeyError:
            base = 0
        else:
            base = affinity.stat(color)
        return base + self.effects.color_stat_bonus(owner_entity).get(color, 0)

    def match_damage(self, owner_entity: int, match: Match, combo: int) -> float:
        """Unrounded damage for a single match."""
        base = self.color_stat(owner_entity, match.color) * math.ceil(match.length / 3)
        damage = base * length_multiplier(match.length)
        if match.special_shape is not None:
            damage *= SPECIAL_SHAPE_MULTIPLIER
        return damage * combo_multiplier(combo)

    def pass_damage(self, owner_entity: int, matches: Iterable[Match], combo: int) -> int:
        return round_half_up(sum(self.match_damage(owner_entity, match, combo) for match in matches))

    def distribute_resources(self, owner_entity: int, color: Color, count: int) -> Dict[Color, int]:
        """Credit ``count`` tiles of ``color`` to the owner's bank; returns what was added."""
        bank = self.world.component_for_entity(owner_entity, ResourceBank)
        gained: Dict[Color, int] = {}
        amount = round_half_up(count * self.effects.product(owner_entity, "resource_multiplier"))
        conversion = self.effects.first(owner_entity, "mana_conversion", source=color)
        if conversion is not None:
            converted, remainder = split_conversion(amount, conversion.ratio)
            gained[conversion.target] = gained.get(conversion.target, 0) + converted
            amount = remainder
        if amount:
            gained[color] = gained.get(color, 0) + amount
        bonus = self.effects.first(owner_entity, "resource_bonus", match_color=color)
        if bonus is not None:
            gained[bonus.bonus_color] = gained.get(bonus.bonus_color, 0) + bonus.amount
        for gained_color, gained_amount in gained.items():
            if gained_amount <= 0:
                continue
            bank.add(gained_color, gained_amount)
            self.event_bus.emit(
                EVENT_RESOURCE_GAINED,
                owner_entity=owner_entity,
                color=gained_color,
                amount=gained_amount,
            )
        return gained

    # ------------------------------------------------------------------
    # Health

    def apply_damage(
        self,
        attacker_entity: int,
        defender_entity: int,
        amount: int,
        *,
        direct: bool = True,
        skill: bool = False,
    ) -> int:
        """Fold modifiers into ``amount`` and subtract it from the defender's health.

        Returns the damage actually removed from health.
        """
        total = amount
        if direct:
            total = round_half_up(total * self.effects.product(attacker_entity, "damage_multiplier"))
            if skill:
                total = round_half_up(total * self.effects.product(attacker_entity, "skill_damage_multiplier"))
        if skill:
            total = max(0, total - self.effects.total(defender_entity, "skill_damage_reduction"))
        total = round_half_up(total * self.effects.product(defender_entity, "damage_multiplier"))
        total = max(0, total - self._defense(defender_entity))

        health = self.world.component_for_entity(defender_entity, Health)
        before = health.current
        health.current = max(0, health.current - total)
        dealt = before - health.current
        self.event_bus.emit(
            EVENT_DAMAGE_DEALT,
            attacker_entity=attacker_entity,
            defender_entity=defender_entity,
            amount=dealt,
            skill=skill,
        )
        self.event_bus.emit(
            EVENT_DAMAGE_TAKEN,
            defender_entity=defender_entity,
            attacker_entity=attacker_entity,
            amount=dealt,
            health=health.current,
        )
        self._emit_health_changed(defender_entity, health, -dealt)
        if not health.is_alive():
            self._end_game(defender_entity)
        return dealt

    def heal(self, entity: int, amount: int) -> int:
        if amount <= 0:
            return 0
        health = self.world.component_for_entity(entity, Health)
        before = health.current
        health.current += amount
        health.clamp()
        delta = health.current - before
        self._emit_health_changed(entity, health, delta)
        return delta

    def lose_health(self, entity: int, amount: int, *, floor: int = 1) -> int:
        """Pay health as a cost; never drops below ``floor``."""
        health = self.world.component_for_entity(entity, Health)
        before = health.current
        health.current = max(min(floor, before), health.current - amount)
        delta = health.current - before
        self._emit_health_changed(entity, health, delta)
        return -delta

    def _defense(self, entity: int) -> int:
        try:
            return self.world.component_for_entity(entity, Defense).value
        except KeyError:
            return 0

    def _emit_health_changed(self, entity: int, health: Health, delta: int) -> None:
        self.event_bus.emit(
            EVENT_HEALTH_CHANGED,
            entity=entity,
            current=health.current,
            max_hp=health.max_hp,
            delta=delta,
        )

    def _end_game(self, loser_entity: int) -> None:
        state = get_game_state(self.world)
        if state.phase is GamePhase.GAME_OVER:
            return
        winner_entity = find_opponent(self.world, loser_entity)
        state.phase = GamePhase.GAME_OVER
        state.winner_entity = winner_entity
        logger.info("Game over: entity %s defeated entity %s", winner_entity, loser_entity)
        self.event_bus.emit(EVENT_GAME_OVER, winner_entity=winner_entity, loser_entity=loser_entity)
