from __future__ import annotations

import random
from typing import Mapping, Sequence

from esper import World

from manaduel.components.color import Color
from manaduel.components.resource_bank import ResourceBank
from manaduel.events.bus import EventBus
from manaduel.systems.board_ops import apply_color_grid, color_grid
from manaduel.utils.game_state import get_combatants
from manaduel.world import Game, create_game

LETTERS = {
    "R": Color.RED,
    "G": Color.GREEN,
    "B": Color.BLUE,
    "Y": Color.YELLOW,
    "K": Color.BLACK,
    ".": Color.EMPTY,
}

# No matches and no legal swap: every line of three holds three different colors.
STALE_LAYOUT = [
    "RBKGYRBK",
    "GYRBKGYR",
    "BKGYRBKG",
    "YRBKGYRB",
    "KGYRBKGY",
    "RBKGYRBK",
    "GYRBKGYR",
    "BKGYRBKG",
]

# Swapping (0,2) and (1,2) makes RRR on row 0.
THREE_LAYOUT = [
    "RRKGYRBK",
    "GYRBKGYR",
    "BKGYRBKG",
    "YRBKGYRB",
    "KGYRBKGY",
    "RBKGYRBK",
    "GYRBKGYR",
    "BKGYRBKG",
]

# Swapping (1,2) and (2,2) forms a red T with its pivot at (2,2).
T_LAYOUT = [
    "RBKGYRBK",
    "GYRBKGYR",
    "BRGRYBKG",
    "YRRKGYRB",
    "KGRRBKGY",
    "RBKGYRBK",
    "GYRBKGYR",
    "BKGYRBKG",
]


def parse_layout(layout: Sequence[str]) -> list[list[Color]]:
    return [[LETTERS[ch] for ch in row] for row in layout]


def layout_of(world: World) -> list[str]:
    names = {color: letter for letter, color in LETTERS.items()}
    return ["".join(names[color] for color in row) for row in color_grid(world)]


def set_board_colors(world: World, layout: Sequence[str]) -> None:
    """Overwrite every tile color from rows of letters (R G B Y K, '.' for empty)."""
    apply_color_grid(world, parse_layout(layout))


def grant_resources(world: World, owner_entity: int, amounts: Mapping[Color, int]) -> ResourceBank:
    bank = world.component_for_entity(owner_entity, ResourceBank)
    for color, amount in amounts.items():
        bank.add(color, amount)
    return bank


def make_game(seed: int = 7, *, with_ai: bool = False, **options) -> Game:
    """Build a wired game; the AI controller is detached unless ``with_ai``."""
    options.setdefault("rng", random.Random(seed))
    game = create_game(EventBus(), **options)
    if not with_ai:
        game.turns.controllers.clear()
    return game


def players(game: Game) -> tuple[int, int]:
    combatants = get_combatants(game.world)
    return combatants.human_entity, combatants.ai_entity
