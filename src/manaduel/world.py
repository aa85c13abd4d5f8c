from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Optional

from esper import World

from manaduel.components.board import Board
from manaduel.components.board_position import BoardPosition
from manaduel.components.combatants import Combatants
from manaduel.components.defense import Defense
from manaduel.components.effect_list import EffectList
from manaduel.components.game_state import GameState
from manaduel.components.health import Health
from manaduel.components.human_agent import HumanAgent
from manaduel.components.resource_bank import ResourceBank
from manaduel.components.rule_based_agent import RuleBasedAgent
from manaduel.components.skill_loadout import SkillLoadout
from manaduel.components.tile import Tile
from manaduel.components.turn_state import TurnState
from manaduel.constants import (
    AI_DEFAULT_DIFFICULTY,
    DEFAULT_AI_CLASS,
    DEFAULT_HUMAN_CLASS,
    GRID_COLS,
    GRID_ROWS,
    MAX_CASCADE_PASSES,
    MAX_HEALTH,
)
from manaduel.events.bus import EventBus
from manaduel.factories.classes import class_components, get_class_definition
from manaduel.factories.skills import SkillRegistry
from manaduel.systems.board_ops import generate_color_grid
from manaduel.systems.cascade import CascadeResolver
from manaduel.systems.combat_pipeline import CombatPipeline
from manaduel.systems.rule_based_ai_system import RuleBasedAISystem
from manaduel.systems.skill_system import SkillSystem
from manaduel.systems.status_effect_system import StatusEffectSystem
from manaduel.systems.turn_system import TurnSystem


def create_world(
    event_bus: EventBus,
    *,
    human_class: str = DEFAULT_HUMAN_CLASS,
    ai_class: str = DEFAULT_AI_CLASS,
    rows: int = GRID_ROWS,
    cols: int = GRID_COLS,
    ai_difficulty: int = AI_DEFAULT_DIFFICULTY,
    human_controlled: bool = True,
    rng: random.Random | None = None,
) -> World:
    """Build a fresh match: state resources, the board and both combatants.

    ``human_controlled=False`` seats a rule-based agent in the human slot as
    well, which is how headless AI-vs-AI matches are played.
    """
    world = World()
    setattr(world, "random", rng or random.Random())

    # Validate class slugs before any entity exists.
    get_class_definition(human_class)
    get_class_definition(ai_class)

    world.create_entity(Board(rows=rows, cols=cols))
    grid = generate_color_grid(rows, cols, world.random)
    for r in range(rows):
        for c in range(cols):
            world.create_entity(BoardPosition(row=r, col=c), Tile(color=grid[r][c]))

    human_agent = HumanAgent() if human_controlled else RuleBasedAgent(difficulty=ai_difficulty)
    human_ent = _create_combatant(world, human_class, human_agent)
    ai_ent = _create_combatant(world, ai_class, RuleBasedAgent(difficulty=ai_difficulty))

    world.create_entity(
        GameState(),
        TurnState(),
        Combatants(human_entity=human_ent, ai_entity=ai_ent),
    )
    return world


def _create_combatant(world: World, class_slug: str, agent) -> int:
    character, affinity = class_components(class_slug)
    definition = get_class_definition(class_slug)
    entity = world.create_entity(
        agent,
        character,
        affinity,
        Health(current=MAX_HEALTH, max_hp=MAX_HEALTH),
        Defense(),
        ResourceBank(owner_entity=0),
        SkillLoadout(equipped=list(definition.skills)),
        EffectList(),
    )
    world.component_for_entity(entity, ResourceBank).owner_entity = entity
    return entity


@dataclass(slots=True)
class Game:
    """A world plus the systems that run it."""

    world: World
    event_bus: EventBus
    effects: StatusEffectSystem
    pipeline: CombatPipeline
    cascade: CascadeResolver
    skills: SkillSystem
    turns: TurnSystem
    ai: RuleBasedAISystem


def create_game(
    event_bus: EventBus | None = None,
    *,
    world: World | None = None,
    registry: SkillRegistry | None = None,
    wait_for_animation: Optional[Callable[[], None]] = None,
    max_passes: int = MAX_CASCADE_PASSES,
    **world_options,
) -> Game:
    """Wire every system onto ``world`` (created with ``world_options`` if absent).

    The opening turn is not started; call ``game.turns.start()`` once
    subscribers are in place.
    """
    event_bus = event_bus or EventBus()
    if world is None:
        world = create_world(event_bus, **world_options)
    rng = getattr(world, "random", None)
    effects = StatusEffectSystem(world, event_bus)
    pipeline = CombatPipeline(world, event_bus, effects)
    cascade = CascadeResolver(
        world,
        event_bus,
        pipeline,
        rng=rng,
        wait_for_animation=wait_for_animation,
        max_passes=max_passes,
    )
    skills = SkillSystem(world, event_bus, pipeline, effects, cascade, registry=registry, rng=rng)
    turns = TurnSystem(world, event_bus, effects=effects, cascade=cascade, skills=skills, rng=rng)
    ai = RuleBasedAISystem(world, event_bus, turns, skills, rng=rng)
    return Game(
        world=world,
        event_bus=event_bus,
        effects=effects,
        pipeline=pipeline,
        cascade=cascade,
        skills=skills,
        turns=turns,
        ai=ai,
    )
