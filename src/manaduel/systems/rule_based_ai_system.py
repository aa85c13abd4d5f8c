from __future__ import annotations

import logging
import random
from typing import Optional, Tuple

from esper import World

from manaduel.ai.move_evaluation import find_top_moves, select_move_by_difficulty
from manaduel.components.character_class import CharacterClass
from manaduel.components.rule_based_agent import RuleBasedAgent
from manaduel.components.skill import ClassSkill
from manaduel.events.bus import EventBus
from manaduel.systems.board_ops import board_dimensions, color_grid, frozen_positions, tile_index
from manaduel.systems.skill_system import SkillSystem
from manaduel.systems.turn_system import TurnSystem

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class RuleBasedAISystem:
    """Plays turns for RuleBasedAgent owners.

    Priorities: cast the first affordable equipped skill, otherwise make a
    difficulty-selected swap from the top scored moves, otherwise forfeit.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        turn_system: TurnSystem,
        skills: SkillSystem,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.turn_system = turn_system
        self.skills = skills
        self.random = rng or getattr(world, "random", None) or random.Random()
        for ent, _ in world.get_component(RuleBasedAgent):
            turn_system.register_controller(ent, self)

    def take_turn(self, owner_entity: int) -> None:
        if self._try_skill(owner_entity):
            return
        if self._try_swap(owner_entity):
            return
        logger.info("AI entity %s found no move and forfeits", owner_entity)
        self.turn_system.forfeit(owner_entity)

    # --- Decisions -------------------------------------------------------
    def _try_skill(self, owner_entity: int) -> bool:
        affordable = self.skills.affordable_skills(owner_entity)
        if not affordable:
            return False
        skill = affordable[0]
        if not skill.requires_target:
            return self.turn_system.cast_skill(skill.id, owner_entity=owner_entity)
        target = self._choose_target(skill)
        if target is None:
            return False
        row, col = target
        return self.turn_system.cast_skill(skill.id, row, col, owner_entity=owner_entity)

    def _try_swap(self, owner_entity: int) -> bool:
        moves = find_top_moves(
            color_grid(self.world),
            self._primary_color(owner_entity),
            frozen_positions(self.world),
        )
        move = select_move_by_difficulty(moves, self._difficulty(owner_entity), self.random)
        if move is None:
            return False
        return self.turn_system.swap(move.src, move.dst, owner_entity=owner_entity)

    def _choose_target(self, skill: ClassSkill) -> Optional[Position]:
        """First tile of the skill's target color in row-major order, else the board center."""
        if skill.target_color is None:
            rows, cols = board_dimensions(self.world)
            return (rows // 2, cols // 2)
        tiles = tile_index(self.world)
        for pos in sorted(tiles):
            if tiles[pos].color is skill.target_color:
                return pos
        return None

    # --- Helpers ---------------------------------------------------------
    def _primary_color(self, owner_entity: int):
        try:
            return self.world.component_for_entity(owner_entity, CharacterClass).primary_color
        except KeyError:
            return None

    def _difficulty(self, owner_entity: int) -> int:
        try:
            return self.world.component_for_entity(owner_entity, RuleBasedAgent).difficulty
        except KeyError:
            return 1
