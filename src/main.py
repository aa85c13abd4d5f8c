"""Headless entry point for manaduel.

Plays a full AI-vs-AI match on the rules engine and prints the outcome.
"""
import argparse
import logging
import random
import sys

from manaduel.components.character_class import CharacterClass
from manaduel.components.health import Health
from manaduel.constants import AI_DEFAULT_DIFFICULTY, DEFAULT_AI_CLASS, DEFAULT_HUMAN_CLASS
from manaduel.events.bus import (
    EVENT_EXTRA_TURN_GRANTED,
    EVENT_GAME_OVER,
    EVENT_SKILL_CAST,
    EventBus,
)
from manaduel.factories.classes import CLASS_DEFINITIONS
from manaduel.utils.game_state import get_combatants, get_game_state, get_or_create_turn_state
from manaduel.world import create_game


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play a headless manaduel match between two AIs")
    classes = sorted(CLASS_DEFINITIONS)
    parser.add_argument("--first", default=DEFAULT_HUMAN_CLASS, choices=classes, help="Class of the first player")
    parser.add_argument("--second", default=DEFAULT_AI_CLASS, choices=classes, help="Class of the second player")
    parser.add_argument("--difficulty", type=int, default=AI_DEFAULT_DIFFICULTY, choices=range(1, 6))
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible match")
    parser.add_argument("--max-turns", type=int, default=500)
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    bus = EventBus()
    stats = {"skills": 0, "extra_turns": 0}
    bus.subscribe(EVENT_SKILL_CAST, lambda sender, **payload: stats.__setitem__("skills", stats["skills"] + 1))
    bus.subscribe(
        EVENT_EXTRA_TURN_GRANTED,
        lambda sender, **payload: stats.__setitem__("extra_turns", stats["extra_turns"] + 1),
    )
    bus.subscribe(EVENT_GAME_OVER, lambda sender, **payload: print(f"Winner: entity {payload['winner_entity']}"))

    game = create_game(
        bus,
        human_class=args.first,
        ai_class=args.second,
        ai_difficulty=args.difficulty,
        human_controlled=False,
        rng=random.Random(args.seed),
    )
    game.turns.turn_limit = args.max_turns
    game.turns.start()

    world = game.world
    combatants = get_combatants(world)
    for label, entity in (("first", combatants.human_entity), ("second", combatants.ai_entity)):
        character = world.component_for_entity(entity, CharacterClass)
        health = world.component_for_entity(entity, Health)
        print(f"{label}: {character.name} (entity {entity}) {health.current}/{health.max_hp} HP")
    turn_state = get_or_create_turn_state(world)
    print(f"turns: {turn_state.turn_number - 1}, skills cast: {stats['skills']}, extra turns: {stats['extra_turns']}")
    return 0 if get_game_state(world).is_game_over else 1


if __name__ == "__main__":
    sys.exit(main())
