from __future__ import annotations

from esper import World

from manaduel.components.combatants import Combatants
from manaduel.components.game_state import GameState
from manaduel.components.turn_state import TurnState


def get_game_state(world: World) -> GameState:
    """Return the singleton GameState, creating it if absent."""
    for _, state in world.get_component(GameState):
        return state
    state = GameState()
    world.create_entity(state)
    return state


def get_or_create_turn_state(world: World) -> TurnState:
    """Return the shared TurnState component, creating it if absent."""
    existing = list(world.get_component(TurnState))
    if existing:
        return existing[0][1]
    world.create_entity(TurnState())
    return list(world.get_component(TurnState))[0][1]


def get_combatants(world: World) -> Combatants:
    for _, comp in world.get_component(Combatants):
        return comp
    raise RuntimeError("Combatants component not found")


def find_opponent(world: World, owner_entity: int) -> int:
    """Return the opposing combatant for ``owner_entity``."""
    return get_combatants(world).opponent_of(owner_entity)
