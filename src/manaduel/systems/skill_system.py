from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional, Tuple

from esper import World

from manaduel.components.color import Color, SPAWNABLE_COLORS
from manaduel.components.defense import Defense
from manaduel.components.resource_bank import ResourceBank
from manaduel.components.skill import ClassSkill, SkillEffectSpec
from manaduel.components.skill_loadout import SkillLoadout
from manaduel.components.status_effect import (
    ConvertTiles,
    ManaConversion,
    ResourceBonus,
    StatusEffect,
)
from manaduel.events.bus import (
    EVENT_ACTION_REJECTED,
    EVENT_BOARD_CHANGED,
    EVENT_RESOURCES_SPENT,
    EVENT_SKILL_ACTIVATED,
    EVENT_SKILL_CAST,
    EventBus,
)
from manaduel.factories.skills import SkillRegistry, default_skill_registry
from manaduel.systems.board_ops import (
    area_positions,
    board_dimensions,
    board_has_valid_move,
    in_bounds,
    tile_index,
)
from manaduel.systems.cascade import CascadeResolver
from manaduel.systems.combat_pipeline import CombatPipeline
from manaduel.systems.status_effect_system import StatusEffectSystem
from manaduel.utils.game_state import find_opponent

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class RejectReason:
    INVALID_MOVE = "invalid_move"
    INSUFFICIENT_RESOURCES = "insufficient_resources"
    WRONG_TARGET = "wrong_target"
    MISSING_TARGET = "missing_target"
    NOT_EQUIPPED = "not_equipped"
    NOT_YOUR_TURN = "not_your_turn"
    GAME_OVER = "game_over"


@dataclass(slots=True)
class SkillContext:
    """Execution context shared by effect handlers while one skill resolves."""

    skill: ClassSkill
    owner_entity: int
    opponent_entity: int
    row: Optional[int]
    col: Optional[int]
    cast_count: int
    board_changed: bool = False
    last_damage: int = 0
    affected: List[Position] = field(default_factory=list)

    @property
    def target(self) -> Optional[Position]:
        if self.row is None or self.col is None:
            return None
        return (self.row, self.col)


class SkillSystem:
    """Validates, resolves and charges skill casts.

    Skill effects are declarative ``SkillEffectSpec`` entries; each slug maps
    to one handler below. Board mutations are settled through the cascade
    resolver once all effects of a cast have run.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        pipeline: CombatPipeline,
        effects: StatusEffectSystem,
        cascade: CascadeResolver,
        *,
        registry: SkillRegistry | None = None,
        rng: random.Random | None = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.pipeline = pipeline
        self.effects = effects
        self.cascade = cascade
        self.registry = registry or default_skill_registry
        self.rng = rng or getattr(world, "random", None) or random.Random()
        self._handlers: dict[str, Callable[[SkillContext, SkillEffectSpec], None]] = {
            "status": self._apply_status,
            "damage": self._apply_damage,
            "heal": self._apply_heal,
            "health_cost": self._apply_health_cost,
            "defense": self._apply_defense,
            "freeze": self._apply_freeze,
            "ignite": self._apply_ignite,
            "convert_area": self._apply_convert_area,
            "convert_random": self._apply_convert_random,
            "convert_color": self._apply_convert_color,
            "pattern_area": self._apply_pattern_area,
            "copy_block": self._apply_copy_block,
            "destroy_area": self._apply_destroy_area,
            "extend_effects": self._apply_extend_effects,
        }

    # ------------------------------------------------------------------
    # Contract

    def get_skill(self, skill_id: str) -> ClassSkill:
        return self.registry.get(skill_id)

    def can_cast(self, owner_entity: int, skill: ClassSkill) -> bool:
        bank = self.world.component_for_entity(owner_entity, ResourceBank)
        return bank.can_spend(skill.cost)

    def affordable_skills(self, owner_entity: int) -> List[ClassSkill]:
        loadout = self.world.component_for_entity(owner_entity, SkillLoadout)
        skills = [self.get_skill(skill_id) for skill_id in loadout.equipped]
        return [skill for skill in skills if self.can_cast(owner_entity, skill)]

    def toggle_active(self, owner_entity: int, skill_id: str) -> bool:
        """Select ``skill_id`` for targeting, or deselect it if already active.

        Returns False when the player cannot pay for the skill.
        """
        skill = self.get_skill(skill_id)
        if not self.can_cast(owner_entity, skill):
            self.reject(owner_entity, RejectReason.INSUFFICIENT_RESOURCES, skill_id)
            return False
        loadout = self.world.component_for_entity(owner_entity, SkillLoadout)
        loadout.active_skill_id = None if loadout.active_skill_id == skill_id else skill_id
        self.event_bus.emit(
            EVENT_SKILL_ACTIVATED,
            owner_entity=owner_entity,
            skill_id=skill_id,
            active=loadout.active_skill_id == skill_id,
        )
        return True

    def validate_cast(
        self,
        owner_entity: int,
        skill: ClassSkill,
        row: int | None = None,
        col: int | None = None,
    ) -> Optional[str]:
        """Return the rejection reason for a cast, or None if it may proceed."""
        if not self.can_cast(owner_entity, skill):
            return RejectReason.INSUFFICIENT_RESOURCES
        has_target = row is not None and col is not None
        if has_target and not in_bounds(self.world, row, col):
            return RejectReason.WRONG_TARGET
        if skill.requires_target and not has_target:
            return RejectReason.MISSING_TARGET
        if skill.target_color is not None:
            target_tile = tile_index(self.world).get((row, col)) if has_target else None
            if target_tile is None or target_tile.color is not skill.target_color:
                return RejectReason.WRONG_TARGET
        return None

    def cast(self, owner_entity: int, skill_id: str, row: int | None = None, col: int | None = None) -> bool:
        """Resolve ``skill_id`` for ``owner_entity``; False leaves every state untouched."""
        skill = self.get_skill(skill_id)
        reason = self.validate_cast(owner_entity, skill, row, col)
        if reason is not None:
            self.reject(owner_entity, reason, skill_id)
            return False

        loadout = self.world.component_for_entity(owner_entity, SkillLoadout)
        ctx = SkillContext(
            skill=skill,
            owner_entity=owner_entity,
            opponent_entity=find_opponent(self.world, owner_entity),
            row=row,
            col=col,
            cast_count=loadout.cast_count(skill_id),
        )
        for spec in skill.effects:
            try:
                handler = self._handlers[spec.slug]
            except KeyError as exc:
                raise ValueError(f"Unknown skill effect '{spec.slug}' in skill '{skill.id}'") from exc
            handler(ctx, spec)
        if ctx.board_changed:
            self.event_bus.emit(EVENT_BOARD_CHANGED, reason=skill.id, positions=sorted(set(ctx.affected)))
            self.cascade.resolve(owner_entity, reason=skill.id)
        elif not board_has_valid_move(self.world):
            # Freezing can lock every swap without moving a tile.
            self.cascade.reset_board(reason="no_legal_moves")

        bank = self.world.component_for_entity(owner_entity, ResourceBank)
        bank.spend(skill.cost)
        self.event_bus.emit(EVENT_RESOURCES_SPENT, owner_entity=owner_entity, cost=dict(skill.cost))
        loadout.active_skill_id = None
        loadout.record_cast(skill_id)
        logger.debug("Entity %s cast %s at %s", owner_entity, skill_id, ctx.target)
        self.event_bus.emit(EVENT_SKILL_CAST, owner_entity=owner_entity, skill_id=skill_id, row=row, col=col)
        return True

    def reject(self, owner_entity: int, reason: str, skill_id: str) -> None:
        logger.debug("Skill %s rejected for entity %s: %s", skill_id, owner_entity, reason)
        self.event_bus.emit(
            EVENT_ACTION_REJECTED,
            owner_entity=owner_entity,
            reason=reason,
            action="skill",
            skill_id=skill_id,
        )

    # ------------------------------------------------------------------
    # Effect handlers

    def _entity_for(self, ctx: SkillContext, spec: SkillEffectSpec) -> int:
        match spec.target:
            case "self":
                return ctx.owner_entity
            case "opponent":
                return ctx.opponent_entity
            case _:
                raise ValueError(f"Effect '{spec.slug}' needs a combatant target, got '{spec.target}'")

    def _apply_status(self, ctx: SkillContext, spec: SkillEffectSpec) -> None:
        target = self._entity_for(ctx, spec)
        meta = spec.metadata
        effect = StatusEffect(
            label=str(meta.get("label", ctx.skill.id)),
            damage_multiplier=float(meta.get("damage_multiplier", 1)),
            resource_multiplier=float(meta.get("resource_multiplier", 1)),
            skill_damage_multiplier=float(meta.get("skill_damage_multiplier", 1)),
            skill_damage_reduction=int(meta.get("skill_damage_reduction", 0)),
            mana_conversion=_build(ManaConversion, meta.get("mana_conversion")),
            convert_tiles=_build(ConvertTiles, meta.get("convert_tiles")),
            resource_bonus=_build(ResourceBonus, meta.get("resource_bonus")),
            color_stat_bonus=dict(meta.get("color_stat_bonus", {})),
            extra_turn=bool(meta.get("extra_turn", False)),
        )
        defense_bonus = int(meta.get("defense", 0))
        if defense_bonus:
            self._add_defense(target, defense_bonus)
            effect.on_expire = lambda: self._add_defense(target, -defense_bonus)
        self.effects.add(target, effect, spec.turns or 1)

    def _apply_damage(self, ctx: SkillContext, spec: SkillEffectSpec) -> None:
        meta = spec.metadata
        amount = int(meta.get("amount", 0))
        per_frozen = int(meta.get("per_frozen_tile", 0))
        if per_frozen:
            frozen = sum(1 for tile in tile_index(self.world).values() if tile.frozen)
            amount += per_frozen * frozen
        if meta.get("scale_with_casts"):
            amount *= ctx.cast_count + 1
        if amount <= 0:
            return
        dealt = self.pipeline.apply_damage(
            ctx.owner_entity,
            self._entity_for(ctx, spec),
            amount,
            direct=bool(meta.get("direct", True)),
            skill=bool(meta.get("skill", True)),
        )
        ctx.last_damage = dealt
        if meta.get("lifesteal"):
            self.pipeline.heal(ctx.owner_entity, amount)

    def _apply_heal(self, ctx: SkillContext, spec: SkillEffectSpec) -> None:
        self.pipeline.heal(self._entity_for(ctx, spec), int(spec.metadata.get("amount", 0)))

    def _apply_health_cost(self, ctx: SkillContext, spec: SkillEffectSpec) -> None:
        self.pipeline.lose_health(
            self._entity_for(ctx, spec),
            int(spec.metadata.get("amount", 0)),
            floor=int(spec.metadata.get("floor", 1)),
        )

    def _apply_defense(self, ctx: SkillContext, spec: SkillEffectSpec) -> None:
        self._add_defense(self._entity_for(ctx, spec), int(spec.metadata.get("amount", 0)))

    def _add_defense(self, entity: int, amount: int) -> None:
        try:
            defense = self.world.component_for_entity(entity, Defense)
        except KeyError:
            defense = Defense()
            self.world.add_component(entity, defense)
        defense.value = max(0, defense.value + amount)

    def _apply_freeze(self, ctx: SkillContext, spec: SkillEffectSpec) -> None:
        tiles = tile_index(self.world)
        for pos in self._area(ctx, spec):
            tile = tiles[pos]
            if tile.is_empty():
                continue
            tile.frozen = True
            ctx.affected.append(pos)

    def _apply_ignite(self, ctx: SkillContext, spec: SkillEffectSpec) -> None:
        count = int(spec.metadata.get("count", 1))
        candidates = sorted(
            pos
            for pos, tile in tile_index(self.world).items()
            if not tile.is_empty() and not tile.ignited and not tile.frozen
        )
        tiles = tile_index(self.world)
        for pos in self.rng.sample(candidates, min(count, len(candidates))):
            tiles[pos].ignited = True
            ctx.affected.append(pos)

    def _apply_convert_area(self, ctx: SkillContext, spec: SkillEffectSpec) -> None:
        color = Color(spec.metadata["color"])
        converted = self._recolor(ctx, {pos: color for pos in self._area(ctx, spec)})
        per_tile = int(spec.metadata.get("damage_per_tile", 0))
        if per_tile and converted:
            ctx.last_damage = self.pipeline.apply_damage(
                ctx.owner_entity, ctx.opponent_entity, per_tile * converted, direct=True, skill=True
            )

    def _apply_convert_random(self, ctx: SkillContext, spec: SkillEffectSpec) -> None:
        color = Color(spec.metadata["color"])
        count = int(spec.metadata.get("count", 1))
        if spec.metadata.get("scale_with_casts"):
            count += ctx.cast_count
        candidates = sorted(
            pos for pos, tile in tile_index(self.world).items() if not tile.is_empty() and tile.color is not color
        )
        chosen = self.rng.sample(candidates, min(count, len(candidates)))
        self._recolor(ctx, {pos: color for pos in chosen})

    def _apply_convert_color(self, ctx: SkillContext, spec: SkillEffectSpec) -> None:
        tiles = tile_index(self.world)
        source = tiles[self._require_target(ctx, spec)].color
        if source is Color.EMPTY:
            return
        target_color = spec.metadata.get("color")
        if target_color is None:
            target_color = next(color for color in SPAWNABLE_COLORS if color is not source)
        target_color = Color(target_color)
        self._recolor(ctx, {pos: target_color for pos, tile in tiles.items() if tile.color is source})

    def _apply_pattern_area(self, ctx: SkillContext, spec: SkillEffectSpec) -> None:
        rows, cols = board_dimensions(self.world)
        width = int(spec.metadata.get("width", 2))
        height = int(spec.metadata.get("height", 2))
        colors = [Color(c) for c in spec.metadata["colors"]]
        origin_row = self.rng.randrange(0, rows - height + 1)
        origin_col = self.rng.randrange(0, cols - width + 1)
        assignments = {
            (origin_row + dr, origin_col + dc): colors[(dr + dc) % len(colors)]
            for dr in range(height)
            for dc in range(width)
        }
        self._recolor(ctx, assignments)

    def _apply_copy_block(self, ctx: SkillContext, spec: SkillEffectSpec) -> None:
        target_row, target_col = self._require_target(ctx, spec)
        src_row, src_col = spec.metadata.get("source", (0, 0))
        width = int(spec.metadata.get("width", 2))
        height = int(spec.metadata.get("height", 2))
        tiles = tile_index(self.world)
        assignments = {}
        for dr in range(height):
            for dc in range(width):
                src = tiles.get((src_row + dr, src_col + dc))
                dest = (target_row + dr, target_col + dc)
                if src is None or dest not in tiles:
                    continue
                assignments[dest] = src.color
        self._recolor(ctx, assignments)

    def _apply_destroy_area(self, ctx: SkillContext, spec: SkillEffectSpec) -> None:
        meta = spec.metadata
        positions = self._area(ctx, spec)
        result = self.cascade.clear_tiles(positions, reason=ctx.skill.id)
        ctx.affected.extend((r, c) for r, c, _ in result.destroyed)
        ctx.board_changed = True
        counts: dict[Color, int] = {}
        for _, _, color in result.destroyed:
            counts[color] = counts.get(color, 0) + 1
        if meta.get("collect_resources"):
            for color, count in counts.items():
                self.pipeline.distribute_resources(ctx.owner_entity, color, count)
        damage_per_color: Mapping[Any, int] = meta.get("damage_per_color", {})
        damage = sum(counts.get(Color(color), 0) * amount for color, amount in damage_per_color.items())
        if damage > 0:
            ctx.last_damage = self.pipeline.apply_damage(
                ctx.owner_entity, ctx.opponent_entity, damage, direct=True, skill=True
            )

    def _apply_extend_effects(self, ctx: SkillContext, spec: SkillEffectSpec) -> None:
        self.effects.extend_positive(self._entity_for(ctx, spec), spec.turns or 1)

    # ------------------------------------------------------------------

    def _require_target(self, ctx: SkillContext, spec: SkillEffectSpec) -> Position:
        if ctx.target is None:
            raise ValueError(f"Effect '{spec.slug}' of skill '{ctx.skill.id}' requires a target tile")
        return ctx.target

    def _area(self, ctx: SkillContext, spec: SkillEffectSpec) -> List[Position]:
        meta = spec.metadata
        return area_positions(
            self.world,
            self._require_target(ctx, spec),
            str(meta.get("shape", "square")),
            int(meta.get("radius", 1)),
            width=meta.get("width"),
            height=meta.get("height"),
        )

    def _recolor(self, ctx: SkillContext, assignments: Mapping[Position, Color]) -> int:
        tiles = tile_index(self.world)
        changed = 0
        for pos, color in assignments.items():
            tile = tiles.get(pos)
            if tile is None or tile.is_empty() or tile.color is color:
                continue
            tile.color = color
            tile.animating = True
            ctx.affected.append(pos)
            changed += 1
        if changed:
            ctx.board_changed = True
        return changed


def _build(cls, data):
    if data is None or isinstance(data, cls):
        return data
    return cls(**data)
