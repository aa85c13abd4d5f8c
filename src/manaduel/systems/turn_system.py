from __future__ import annotations

import logging
import random
from typing import Dict, Optional, Protocol, Tuple

from esper import World

from manaduel.components.game_state import GamePhase
from manaduel.components.skill_loadout import SkillLoadout
from manaduel.constants import COMBO_EXTRA_TURN_THRESHOLD
from manaduel.events.bus import (
    EVENT_ACTION_REJECTED,
    EVENT_END_OF_TURN,
    EVENT_EXTRA_TURN_GRANTED,
    EVENT_SKILL_ACTIVATE_REQUEST,
    EVENT_SKILL_TARGET_REQUEST,
    EVENT_START_OF_TURN,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAPPED,
    EVENT_TURN_FORFEITED,
    EventBus,
)
from manaduel.systems.board_ops import board_dimensions, color_grid, frozen_positions, swap_tiles
from manaduel.systems.cascade import CascadeResolver
from manaduel.systems.match_finder import creates_match, is_adjacent
from manaduel.systems.skill_system import RejectReason, SkillSystem
from manaduel.systems.status_effect_system import StatusEffectSystem
from manaduel.utils.game_state import get_combatants, get_game_state, get_or_create_turn_state

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class TurnController(Protocol):
    """Anything able to take a full turn for an owner (the AI)."""

    def take_turn(self, owner_entity: int) -> None:
        ...


class TurnSystem:
    """Orchestrates whose turn it is and runs each action to completion.

    Flow:
      - A swap or skill cast resets the combo, resolves fully (including every
        cascade pass) and then completes the turn.
      - Completing a turn ticks only the acting player's status effects and
        either keeps the same player (extra turn) or hands over.
      - Registered controllers (the AI) are driven in a loop while they hold
        the turn, so long AI streaks never recurse.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        effects: StatusEffectSystem,
        cascade: CascadeResolver,
        skills: SkillSystem,
        rng: random.Random | None = None,
        turn_limit: Optional[int] = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.effects = effects
        self.cascade = cascade
        self.skills = skills
        self.rng = rng or getattr(world, "random", None) or random.Random()
        self.controllers: Dict[int, TurnController] = {}
        self.turn_limit = turn_limit
        self._driving = False
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)
        self.event_bus.subscribe(EVENT_SKILL_ACTIVATE_REQUEST, self.on_skill_activate_request)
        self.event_bus.subscribe(EVENT_SKILL_TARGET_REQUEST, self.on_skill_target_request)

    # ------------------------------------------------------------------
    # Queries

    def current_owner(self) -> Optional[int]:
        state = get_game_state(self.world)
        combatants = get_combatants(self.world)
        if state.phase is GamePhase.HUMAN_TURN:
            return combatants.human_entity
        if state.phase is GamePhase.AI_TURN:
            return combatants.ai_entity
        return None

    def register_controller(self, owner_entity: int, controller: TurnController) -> None:
        self.controllers[owner_entity] = controller

    def start(self) -> None:
        """Announce the opening turn and let a controller act if it holds it."""
        owner = self.current_owner()
        if owner is None:
            return
        self._start_turn(owner)
        self._drive_controllers()

    # ------------------------------------------------------------------
    # Event handlers

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get("src")
        dst = kwargs.get("dst")
        if src is None or dst is None:
            return
        self.swap(tuple(src), tuple(dst), owner_entity=kwargs.get("owner_entity"))

    def on_skill_activate_request(self, sender, **kwargs):
        skill_id = kwargs.get("skill_id")
        if skill_id is None:
            return
        self.activate_skill(skill_id, owner_entity=kwargs.get("owner_entity"))

    def on_skill_target_request(self, sender, **kwargs):
        row = kwargs.get("row")
        col = kwargs.get("col")
        if row is None or col is None:
            return
        self.select_target(row, col, owner_entity=kwargs.get("owner_entity"))

    # ------------------------------------------------------------------
    # Player actions

    def swap(self, src: Position, dst: Position, owner_entity: Optional[int] = None) -> bool:
        owner = self._acting_owner(owner_entity, "swap")
        if owner is None:
            return False
        rows, cols = board_dimensions(self.world)
        in_board = all(0 <= r < rows and 0 <= c < cols for r, c in (src, dst))
        frozen = frozen_positions(self.world)
        if (
            not in_board
            or not is_adjacent(src, dst)
            or src in frozen
            or dst in frozen
            or not creates_match(color_grid(self.world), src, dst)
        ):
            self._reject(owner, RejectReason.INVALID_MOVE, "swap")
            return False
        self._begin_action(owner, "swap")
        swap_tiles(self.world, src, dst)
        self.event_bus.emit(EVENT_TILE_SWAPPED, src=src, dst=dst, owner_entity=owner)
        self.cascade.resolve(owner, reason="swap")
        self._complete_turn(owner)
        return True

    def activate_skill(self, skill_id: str, owner_entity: Optional[int] = None) -> bool:
        """Toggle a skill for targeting; untargeted skills are cast right away."""
        owner = self._acting_owner(owner_entity, "skill")
        if owner is None:
            return False
        if not self._is_equipped(owner, skill_id):
            self._reject(owner, RejectReason.NOT_EQUIPPED, "skill")
            return False
        skill = self.skills.get_skill(skill_id)
        if not skill.requires_target:
            return self.cast_skill(skill_id, owner_entity=owner)
        return self.skills.toggle_active(owner, skill_id)

    def select_target(self, row: int, col: int, owner_entity: Optional[int] = None) -> bool:
        """Cast the owner's active skill at ``(row, col)``."""
        owner = self._acting_owner(owner_entity, "skill")
        if owner is None:
            return False
        loadout = self.world.component_for_entity(owner, SkillLoadout)
        if loadout.active_skill_id is None:
            self._reject(owner, RejectReason.MISSING_TARGET, "skill")
            return False
        return self.cast_skill(loadout.active_skill_id, row, col, owner_entity=owner)

    def cast_skill(
        self,
        skill_id: str,
        row: int | None = None,
        col: int | None = None,
        owner_entity: Optional[int] = None,
    ) -> bool:
        owner = self._acting_owner(owner_entity, "skill")
        if owner is None:
            return False
        if not self._is_equipped(owner, skill_id):
            self._reject(owner, RejectReason.NOT_EQUIPPED, "skill")
            return False
        skill = self.skills.get_skill(skill_id)
        reason = self.skills.validate_cast(owner, skill, row, col)
        if reason is not None:
            self.skills.reject(owner, reason, skill_id)
            return False
        self._begin_action(owner, "skill")
        self.skills.cast(owner, skill_id, row, col)
        self._complete_turn(owner)
        return True

    def select_tile(self, row: int, col: int) -> bool:
        """Click-style input for the human: select, deselect, swap or target."""
        state = get_game_state(self.world)
        owner = self.current_owner()
        if owner is None:
            return False
        loadout = self.world.component_for_entity(owner, SkillLoadout)
        if loadout.active_skill_id is not None:
            return self.select_target(row, col, owner_entity=owner)
        selected = state.selected_tile
        if selected is None:
            state.selected_tile = (row, col)
            return False
        if selected == (row, col):
            state.selected_tile = None
            return False
        if not is_adjacent(selected, (row, col)):
            state.selected_tile = (row, col)
            return False
        state.selected_tile = None
        return self.swap(selected, (row, col), owner_entity=owner)

    def forfeit(self, owner_entity: Optional[int] = None) -> bool:
        owner = self._acting_owner(owner_entity, "forfeit")
        if owner is None:
            return False
        logger.debug("Entity %s forfeits the turn", owner)
        self.event_bus.emit(EVENT_TURN_FORFEITED, owner_entity=owner)
        self._begin_action(owner, "forfeit")
        self._complete_turn(owner, allow_extra_turn=False)
        return True

    # ------------------------------------------------------------------
    # Turn flow

    def has_extra_turn(self, owner_entity: int) -> bool:
        state = get_or_create_turn_state(self.world)
        return (
            self.effects.has_extra_turn(owner_entity)
            or state.combo >= COMBO_EXTRA_TURN_THRESHOLD
            or state.extra_turn_granted
        )

    def _begin_action(self, owner_entity: int, source: str) -> None:
        state = get_or_create_turn_state(self.world)
        state.action_source = source
        state.combo = 0
        state.cascade_depth = 0
        state.extra_turn_granted = False

    def _complete_turn(self, owner_entity: int, *, allow_extra_turn: bool = True) -> None:
        turn_state = get_or_create_turn_state(self.world)
        turn_state.action_source = None
        game_state = get_game_state(self.world)
        self.event_bus.emit(EVENT_END_OF_TURN, owner_entity=owner_entity, turn_number=turn_state.turn_number)
        if game_state.is_game_over:
            return
        extra_turn = allow_extra_turn and self.has_extra_turn(owner_entity)
        reason = self._extra_turn_reason(owner_entity) if extra_turn else None
        self.effects.tick(owner_entity)
        game_state.selected_tile = None
        if extra_turn:
            turn_state.extra_turn_granted = False
            next_owner = owner_entity
            self.event_bus.emit(EVENT_EXTRA_TURN_GRANTED, owner_entity=owner_entity, reason=reason)
        else:
            combatants = get_combatants(self.world)
            next_owner = combatants.opponent_of(owner_entity)
            game_state.phase = (
                GamePhase.HUMAN_TURN if next_owner == combatants.human_entity else GamePhase.AI_TURN
            )
        turn_state.turn_number += 1
        self._start_turn(next_owner)
        self._drive_controllers()

    def _start_turn(self, owner_entity: int) -> None:
        turn_state = get_or_create_turn_state(self.world)
        self.event_bus.emit(EVENT_START_OF_TURN, owner_entity=owner_entity, turn_number=turn_state.turn_number)
        converted = self.effects.apply_tile_conversions(owner_entity, self.rng)
        if converted:
            self.cascade.resolve(owner_entity, reason="convert_tiles")

    def _drive_controllers(self) -> None:
        if self._driving:
            return
        self._driving = True
        try:
            while True:
                owner = self.current_owner()
                controller = self.controllers.get(owner) if owner is not None else None
                if controller is None:
                    break
                before = get_or_create_turn_state(self.world).turn_number
                if self.turn_limit is not None and before > self.turn_limit:
                    logger.info("Turn limit %d reached", self.turn_limit)
                    break
                controller.take_turn(owner)
                if get_or_create_turn_state(self.world).turn_number == before:
                    logger.warning("Controller for entity %s did not end its turn", owner)
                    break
        finally:
            self._driving = False

    def _extra_turn_reason(self, owner_entity: int) -> str:
        state = get_or_create_turn_state(self.world)
        if self.effects.has_extra_turn(owner_entity):
            return "status_effect"
        if state.combo >= COMBO_EXTRA_TURN_THRESHOLD:
            return "combo"
        return "match"

    # ------------------------------------------------------------------

    def _acting_owner(self, owner_entity: Optional[int], action: str) -> Optional[int]:
        current = self.current_owner()
        if current is None:
            self.event_bus.emit(
                EVENT_ACTION_REJECTED, owner_entity=owner_entity, reason=RejectReason.GAME_OVER, action=action
            )
            return None
        if owner_entity is not None and owner_entity != current:
            self._reject(owner_entity, RejectReason.NOT_YOUR_TURN, action)
            return None
        return current

    def _is_equipped(self, owner_entity: int, skill_id: str) -> bool:
        loadout = self.world.component_for_entity(owner_entity, SkillLoadout)
        return skill_id in loadout.equipped

    def _reject(self, owner_entity: int, reason: str, action: str) -> None:
        logger.debug("Rejected %s for entity %s: %s", action, owner_entity, reason)
        self.event_bus.emit(EVENT_ACTION_REJECTED, owner_entity=owner_entity, reason=reason, action=action)
