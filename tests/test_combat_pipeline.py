import pytest

from manaduel.components.color import Color
from manaduel.components.defense import Defense
from manaduel.components.game_state import GamePhase
from manaduel.components.health import Health
from manaduel.components.resource_bank import ResourceBank
from manaduel.components.status_effect import ManaConversion, ResourceBonus, StatusEffect
from manaduel.events.bus import EVENT_DAMAGE_DEALT, EVENT_DAMAGE_TAKEN, EVENT_GAME_OVER
from manaduel.systems.match_finder import Match
from manaduel.utils.combat_math import round_half_up, split_conversion
from manaduel.utils.game_state import get_game_state

from tests.helpers import make_game, players

RED_THREE = Match(color=Color.RED, tiles=((0, 0), (0, 1), (0, 2)))
RED_T = Match(
    color=Color.RED,
    tiles=((2, 1), (2, 2), (2, 3), (3, 2), (4, 2)),
    special_shape="T",
)


def test_red_three_match_deals_affinity_damage():
    game = make_game()
    human, ai = players(game)
    dealt = []
    game.event_bus.subscribe(EVENT_DAMAGE_DEALT, lambda sender, **payload: dealt.append(payload))

    outcome = game.pipeline.score_pass(human, [RED_THREE], combo=1)

    assert outcome.raw_damage == 3
    assert outcome.damage_dealt == 3
    assert outcome.resources == {Color.RED: 3}
    assert game.world.component_for_entity(ai, Health).current == 97
    assert game.world.component_for_entity(human, ResourceBank).get(Color.RED) == 3
    assert dealt == [{"attacker_entity": human, "defender_entity": ai, "amount": 3, "skill": False}]


def test_match_damage_multipliers():
    game = make_game()
    human, _ = players(game)
    four = Match(color=Color.RED, tiles=((0, 0), (0, 1), (0, 2), (0, 3)))
    assert game.pipeline.match_damage(human, four, combo=1) == pytest.approx(9)
    assert game.pipeline.match_damage(human, RED_T, combo=1) == pytest.approx(18)
    assert game.pipeline.match_damage(human, RED_T, combo=2) == pytest.approx(27)


def test_pass_damage_is_deterministic():
    results = []
    for seed in (1, 2):
        game = make_game(seed=seed)
        human, _ = players(game)
        results.append(game.pipeline.pass_damage(human, [RED_T, RED_THREE], combo=3))
    assert results[0] == results[1] == 42


def test_pass_damage_rounds_the_sum():
    game = make_game()
    human, _ = players(game)
    yellow_a = Match(color=Color.YELLOW, tiles=((0, 0), (0, 1), (0, 2)))
    yellow_b = Match(color=Color.YELLOW, tiles=((5, 0), (5, 1), (5, 2)))
    assert game.pipeline.match_damage(human, yellow_a, combo=2) == pytest.approx(1.5)
    assert game.pipeline.pass_damage(human, [yellow_a, yellow_b], combo=2) == 3
    assert game.pipeline.pass_damage(human, [yellow_a], combo=2) == 2


def test_unaligned_color_deals_no_damage():
    game = make_game()
    human, ai = players(game)
    dealt = []
    game.event_bus.subscribe(EVENT_DAMAGE_DEALT, lambda sender, **payload: dealt.append(payload))
    green = Match(color=Color.GREEN, tiles=((0, 0), (1, 0), (2, 0)))
    outcome = game.pipeline.score_pass(human, [green], combo=1)
    assert outcome.raw_damage == 0
    assert dealt == []
    assert game.world.component_for_entity(ai, Health).current == 100


def test_damage_modifiers_fold_in_order():
    game = make_game()
    human, ai = players(game)
    game.effects.add(human, StatusEffect(damage_multiplier=2, skill_damage_multiplier=1.5), 3)
    game.effects.add(ai, StatusEffect(damage_multiplier=0.5, skill_damage_reduction=2), 3)
    game.world.component_for_entity(ai, Defense).value = 1

    assert game.pipeline.apply_damage(human, ai, 10, direct=True, skill=True) == 13
    assert game.pipeline.apply_damage(human, ai, 10, direct=True, skill=False) == 9
    assert game.pipeline.apply_damage(human, ai, 10, direct=False, skill=False) == 4
    assert game.world.component_for_entity(ai, Health).current == 100 - 13 - 9 - 4


def test_defense_absorbs_small_hits():
    game = make_game()
    human, ai = players(game)
    game.world.component_for_entity(ai, Defense).value = 15
    taken = []
    game.event_bus.subscribe(EVENT_DAMAGE_TAKEN, lambda sender, **payload: taken.append(payload))
    assert game.pipeline.apply_damage(human, ai, 10) == 0
    assert taken[0]["amount"] == 0
    assert taken[0]["health"] == 100


def test_lethal_damage_ends_game_once():
    game = make_game()
    human, ai = players(game)
    over = []
    game.event_bus.subscribe(EVENT_GAME_OVER, lambda sender, **payload: over.append(payload))

    assert game.pipeline.apply_damage(human, ai, 250) == 100
    game.pipeline.apply_damage(human, ai, 5)

    state = get_game_state(game.world)
    assert state.phase is GamePhase.GAME_OVER
    assert state.winner_entity == human
    assert over == [{"winner_entity": human, "loser_entity": ai}]
    assert game.world.component_for_entity(ai, Health).current == 0


def test_self_inflicted_lethal_damage_hands_win_to_opponent():
    game = make_game()
    human, ai = players(game)
    game.world.component_for_entity(human, Health).current = 5
    game.pipeline.apply_damage(human, human, 8, direct=False)
    assert get_game_state(game.world).winner_entity == ai


def test_heal_caps_at_max_and_health_cost_keeps_floor():
    game = make_game()
    human, _ = players(game)
    health = game.world.component_for_entity(human, Health)
    health.current = 90
    assert game.pipeline.heal(human, 20) == 10
    assert health.current == 100
    health.current = 3
    assert game.pipeline.lose_health(human, 5, floor=1) == 2
    assert health.current == 1


def test_resource_multiplier_rounds_half_up():
    game = make_game()
    human, _ = players(game)
    game.effects.add(human, StatusEffect(resource_multiplier=1.5), 2)
    assert game.pipeline.distribute_resources(human, Color.BLUE, 3) == {Color.BLUE: 5}


def test_mana_conversion_keeps_remainder_in_source():
    game = make_game()
    human, _ = players(game)
    game.effects.add(human, StatusEffect(mana_conversion=ManaConversion(Color.RED, Color.BLUE, 3)), 2)
    gained = game.pipeline.distribute_resources(human, Color.RED, 7)
    assert gained == {Color.BLUE: 2, Color.RED: 1}
    untouched = game.pipeline.distribute_resources(human, Color.GREEN, 3)
    assert untouched == {Color.GREEN: 3}


def test_resource_bonus_and_color_stat_bonus():
    game = make_game()
    human, _ = players(game)
    game.effects.add(
        human,
        StatusEffect(
            resource_bonus=ResourceBonus(Color.RED, Color.YELLOW, 1),
            color_stat_bonus={Color.GREEN: 2},
        ),
        2,
    )
    assert game.pipeline.distribute_resources(human, Color.RED, 3) == {Color.RED: 3, Color.YELLOW: 1}
    assert game.pipeline.color_stat(human, Color.GREEN) == 2
    assert game.pipeline.color_stat(human, Color.RED) == 3


@pytest.mark.parametrize("amount, ratio", [(0, 3), (7, 3), (9, 3), (10, 4), (5, 1)])
def test_conversion_round_trip(amount, ratio):
    converted, remainder = split_conversion(amount, ratio)
    assert converted == amount // ratio
    assert remainder == amount % ratio
    assert converted * ratio + remainder == amount


def test_conversion_rejects_non_positive_ratio():
    with pytest.raises(ValueError):
        split_conversion(5, 0)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(1.5) == 2
    assert round_half_up(2.49) == 2
