import random

from manaduel.ai.move_evaluation import (
    MoveOption,
    evaluate_swap,
    find_top_moves,
    score_matches,
    select_move_by_difficulty,
)
from manaduel.components.color import Color
from manaduel.components.game_state import GamePhase
from manaduel.components.health import Health
from manaduel.components.resource_bank import ResourceBank
from manaduel.events.bus import EVENT_SKILL_CAST, EVENT_TILE_SWAPPED, EVENT_TURN_FORFEITED
from manaduel.systems.board_ops import color_grid, frozen_positions
from manaduel.systems.match_finder import Match
from manaduel.utils.game_state import get_game_state, get_or_create_turn_state

from tests.helpers import (
    STALE_LAYOUT,
    THREE_LAYOUT,
    grant_resources,
    make_game,
    parse_layout,
    players,
    set_board_colors,
)

# Four colors, no red, and no swap that lines up three.
NO_RED_LAYOUT = ["".join("GYBK"[(r + 2 * c) % 4] for c in range(8)) for r in range(8)]

RANKED = [
    MoveOption(src=(0, 0), dst=(0, 1), score=5000),
    MoveOption(src=(1, 0), dst=(1, 1), score=3000),
    MoveOption(src=(2, 0), dst=(2, 1), score=1000),
]


def _capture(game, event):
    events = []
    game.event_bus.subscribe(event, lambda sender, **payload: events.append(payload))
    return events


def test_hardest_difficulty_always_takes_best_move():
    rng = random.Random(0)
    for _ in range(20):
        assert select_move_by_difficulty(RANKED, 5, rng) == RANKED[0]


def test_lower_difficulty_stays_inside_top_moves():
    rng = random.Random(0)
    picks = {select_move_by_difficulty(RANKED, 1, rng) for _ in range(50)}
    assert picks == set(RANKED)
    picks = {select_move_by_difficulty(RANKED, 4, rng) for _ in range(50)}
    assert picks <= set(RANKED[:2])


def test_no_moves_selects_nothing():
    assert select_move_by_difficulty([], 3, random.Random(0)) is None


def test_score_matches_rewards_length_and_primary_color():
    four = Match(color=Color.RED, tiles=((0, 0), (0, 1), (0, 2), (0, 3)))
    three = Match(color=Color.BLUE, tiles=((1, 0), (1, 1), (1, 2)))
    assert score_matches([four], Color.RED) == 8000
    assert score_matches([four, three], Color.BLUE) == 9000
    assert score_matches([three]) == 1000


def test_evaluate_swap_scores_zero_without_match():
    grid = parse_layout(THREE_LAYOUT)
    assert evaluate_swap(grid, (7, 0), (7, 1)) == 0
    assert evaluate_swap(grid, (0, 2), (1, 2), Color.RED) == 6000


def test_find_top_moves_ranks_primary_color_first():
    grid = parse_layout(THREE_LAYOUT)
    moves = find_top_moves(grid, Color.RED)
    assert moves[0] == MoveOption(src=(0, 2), dst=(1, 2), score=6000)
    assert len(moves) <= 5
    assert [m.score for m in moves] == sorted((m.score for m in moves), reverse=True)

    frozen_moves = find_top_moves(grid, Color.RED, frozen={(0, 2)})
    assert all((0, 2) not in (m.src, m.dst) for m in frozen_moves)
    assert find_top_moves(parse_layout(STALE_LAYOUT)) == []


def test_ai_casts_affordable_skill_before_swapping():
    game = make_game()
    human, ai = players(game)
    game.turns.forfeit(human)
    grant_resources(game.world, ai, {Color.BLACK: 3})
    casts = _capture(game, EVENT_SKILL_CAST)

    game.ai.take_turn(ai)

    assert [cast["skill_id"] for cast in casts] == ["void_touch"]
    assert game.effects.product(human, "damage_multiplier") == 1.5
    assert get_game_state(game.world).phase is GamePhase.HUMAN_TURN


def test_ai_targets_first_tile_of_skill_color():
    game = make_game(max_passes=0, ai_class="pyromancer")
    human, ai = players(game)
    set_board_colors(game.world, STALE_LAYOUT)
    game.turns.forfeit(human)
    grant_resources(game.world, ai, {Color.RED: 4, Color.YELLOW: 3})
    casts = _capture(game, EVENT_SKILL_CAST)

    game.ai.take_turn(ai)

    assert (casts[0]["skill_id"], casts[0]["row"], casts[0]["col"]) == ("fireball", 0, 0)
    assert game.world.component_for_entity(human, Health).current == 95


def test_ai_forfeits_without_target_or_move():
    game = make_game(ai_class="pyromancer")
    human, ai = players(game)
    set_board_colors(game.world, NO_RED_LAYOUT)
    game.turns.forfeit(human)
    bank = grant_resources(game.world, ai, {Color.RED: 4, Color.YELLOW: 3})
    forfeited = _capture(game, EVENT_TURN_FORFEITED)

    game.ai.take_turn(ai)

    assert forfeited == [{"owner_entity": ai}]
    assert bank.get(Color.RED) == 4 and bank.get(Color.YELLOW) == 3
    assert get_game_state(game.world).phase is GamePhase.HUMAN_TURN


def test_ai_swaps_best_move_on_hardest_difficulty():
    game = make_game(max_passes=0, ai_difficulty=5)
    human, ai = players(game)
    game.turns.forfeit(human)
    set_board_colors(game.world, THREE_LAYOUT)
    expected = find_top_moves(color_grid(game.world), Color.BLACK, frozen_positions(game.world))[0]
    swaps = _capture(game, EVENT_TILE_SWAPPED)

    game.ai.take_turn(ai)

    assert swaps == [{"src": expected.src, "dst": expected.dst, "owner_entity": ai}]


def test_ai_answers_the_human_automatically():
    game = make_game(max_passes=1, with_ai=True)
    human, ai = players(game)
    set_board_colors(game.world, THREE_LAYOUT)

    assert game.turns.swap((0, 2), (1, 2), owner_entity=human)

    state = get_game_state(game.world)
    assert state.is_game_over or game.turns.current_owner() == human
    assert get_or_create_turn_state(game.world).turn_number >= 3


def test_headless_match_stops_at_turn_limit():
    game = make_game(seed=11, with_ai=True, human_controlled=False)
    game.turns.turn_limit = 6

    game.turns.start()

    state = get_game_state(game.world)
    turn_number = get_or_create_turn_state(game.world).turn_number
    assert state.is_game_over or turn_number == 7
    for entity in players(game):
        assert game.world.component_for_entity(entity, ResourceBank).owner_entity == entity
