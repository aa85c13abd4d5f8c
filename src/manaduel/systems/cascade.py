from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Set, Tuple

from esper import World

from manaduel.constants import EXTRA_TURN_MATCH_LENGTHS, IGNITE_RADIUS, MAX_CASCADE_PASSES
from manaduel.events.bus import (
    EVENT_BOARD_CHANGED,
    EVENT_BOARD_RESET,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH,
    EVENT_REFILL_COMPLETED,
    EVENT_TILES_DESTROYED,
    EventBus,
)
from manaduel.systems.board_ops import (
    GravityMove,
    area_positions,
    board_has_valid_move,
    color_grid,
    compute_gravity_moves,
    destroy_tiles,
    mark_matched,
    refill_empty_tiles,
    respawn_full_board,
    tile_index,
)
from manaduel.systems.combat_pipeline import CombatPipeline, PassOutcome
from manaduel.systems.match_finder import Match, find_matches, matched_positions
from manaduel.utils.game_state import get_game_state, get_or_create_turn_state

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


def no_animation() -> None:
    """Animation gate for hosts without animation playback."""


@dataclass(slots=True)
class ClearResult:
    destroyed: List[Tuple[int, int, object]] = field(default_factory=list)
    exploded: List[Position] = field(default_factory=list)
    gravity_moves: List[GravityMove] = field(default_factory=list)
    new_tiles: List[Position] = field(default_factory=list)


@dataclass(slots=True)
class CascadeResult:
    passes: int = 0
    combo: int = 0
    overrun: bool = False
    board_reset: bool = False
    matches: List[List[Match]] = field(default_factory=list)
    outcomes: List[PassOutcome] = field(default_factory=list)

    @property
    def damage_dealt(self) -> int:
        return sum(outcome.damage_dealt for outcome in self.outcomes)


class CascadeResolver:
    """Drives the board to a stable state after a swap or a skill.

    Each pass scores the current matches, destroys them (plus any ignited
    explosions), drops tiles, refills the gaps and rescans. Passes share the
    acting player's combo counter, which only the turn flow resets.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        pipeline: Optional[CombatPipeline] = None,
        *,
        rng: random.Random | None = None,
        wait_for_animation: Callable[[], None] | None = None,
        max_passes: int = MAX_CASCADE_PASSES,
    ):
        self.world = world
        self.event_bus = event_bus
        self.pipeline = pipeline
        self.rng = rng or getattr(world, "random", None) or random.Random()
        self.wait_for_animation = wait_for_animation or no_animation
        self.max_passes = max_passes

    def resolve(self, owner_entity: Optional[int] = None, *, reason: str = "cascade") -> CascadeResult:
        state = get_or_create_turn_state(self.world)
        result = CascadeResult(combo=state.combo)
        if self._has_gaps():
            self._drop_and_refill(reason)
        matches = find_matches(color_grid(self.world))
        while matches:
            if result.passes >= self.max_passes:
                result.overrun = True
                logger.warning("Cascade stopped after %d passes with %d matches left", result.passes, len(matches))
                break
            result.passes += 1
            state.combo += 1
            state.cascade_depth = result.passes
            result.matches.append(matches)
            self._flag_extra_turn(matches)
            self.event_bus.emit(EVENT_MATCH, owner_entity=owner_entity, matches=matches, combo=state.combo)
            if owner_entity is not None and self.pipeline is not None:
                result.outcomes.append(self.pipeline.score_pass(owner_entity, matches, state.combo))
            positions = matched_positions(matches)
            mark_matched(self.world, positions)
            self.event_bus.emit(EVENT_CASCADE_STEP, depth=result.passes, positions=sorted(positions))
            self.clear_tiles(positions, reason=reason)
            logger.debug("Cascade pass %d cleared %d tiles (combo %d)", result.passes, len(positions), state.combo)
            if get_game_state(self.world).is_game_over:
                break
            matches = find_matches(color_grid(self.world))
        result.combo = state.combo
        if not board_has_valid_move(self.world):
            self.reset_board(reason="no_legal_moves")
            result.board_reset = True
        self.event_bus.emit(
            EVENT_CASCADE_COMPLETE,
            depth=result.passes,
            combo=state.combo,
            overrun=result.overrun,
        )
        return result

    def clear_tiles(self, positions: Iterable[Position], *, reason: str = "cascade") -> ClearResult:
        """Destroy ``positions`` (with ignite chains), then drop and refill."""
        targets = set(positions)
        exploded = self._ignite_explosions(targets)
        targets.update(exploded)
        result = ClearResult(exploded=sorted(exploded))
        result.destroyed = destroy_tiles(self.world, sorted(targets))
        self.wait_for_animation()
        if result.destroyed:
            self.event_bus.emit(
                EVENT_TILES_DESTROYED,
                positions=[(r, c) for r, c, _ in result.destroyed],
                exploded=result.exploded,
                reason=reason,
            )
        result.gravity_moves, result.new_tiles = self._drop_and_refill(reason)
        return result

    def reset_board(self, *, reason: str) -> None:
        logger.info("Reinitializing board (%s)", reason)
        positions = respawn_full_board(self.world, self.rng)
        self.wait_for_animation()
        self.event_bus.emit(EVENT_BOARD_RESET, reason=reason)
        self.event_bus.emit(EVENT_BOARD_CHANGED, reason=reason, positions=positions)

    def _drop_and_refill(self, reason: str) -> Tuple[List[GravityMove], List[Position]]:
        moves = compute_gravity_moves(self.world)
        if moves:
            self.wait_for_animation()
            self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=moves)
        new_tiles = refill_empty_tiles(self.world, self.rng)
        if new_tiles:
            self.wait_for_animation()
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=new_tiles)
        for tile in tile_index(self.world).values():
            tile.clear_flags()
        changed = sorted({move.target for move in moves} | set(new_tiles))
        if changed:
            self.event_bus.emit(EVENT_BOARD_CHANGED, reason=reason, positions=changed)
        return moves, new_tiles

    def _ignite_explosions(self, positions: Set[Position]) -> Set[Position]:
        """Positions added by ignited tiles inside ``positions`` blowing up, chained."""
        tiles = tile_index(self.world)
        queue = sorted(pos for pos in positions if tiles[pos].ignited)
        seen = set(queue)
        added: Set[Position] = set()
        while queue:
            origin = queue.pop(0)
            for pos in area_positions(self.world, origin, "square", IGNITE_RADIUS):
                tile = tiles[pos]
                if tile.is_empty():
                    continue
                if pos not in positions:
                    added.add(pos)
                if tile.ignited and pos not in seen:
                    seen.add(pos)
                    queue.append(pos)
        return added

    def _has_gaps(self) -> bool:
        return any(tile.is_empty() and not tile.frozen for tile in tile_index(self.world).values())

    def _flag_extra_turn(self, matches: List[Match]) -> None:
        state = get_or_create_turn_state(self.world)
        if any(m.length in EXTRA_TURN_MATCH_LENGTHS or m.special_shape for m in matches):
            state.extra_turn_granted = True
