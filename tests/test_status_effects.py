import random

import pytest

from manaduel.components.color import Color
from manaduel.components.status_effect import ConvertTiles, ManaConversion, StatusEffect
from manaduel.events.bus import EVENT_EFFECT_EXPIRED, EVENT_STATUS_EFFECT_APPLIED
from manaduel.systems.board_ops import color_grid

from tests.helpers import STALE_LAYOUT, make_game, players, set_board_colors


def test_effect_expires_after_owner_turns():
    game = make_game()
    human, _ = players(game)
    applied = []
    expired = []
    expire_calls = []
    game.event_bus.subscribe(EVENT_STATUS_EFFECT_APPLIED, lambda sender, **payload: applied.append(payload))
    game.event_bus.subscribe(EVENT_EFFECT_EXPIRED, lambda sender, **payload: expired.append(payload))

    effect_entity = game.effects.add(
        human,
        StatusEffect(label="haste", on_expire=lambda: expire_calls.append(1)),
        2,
    )
    assert applied[0]["label"] == "haste" and applied[0]["turns"] == 2

    assert game.effects.tick(human) == []
    assert game.effects.remaining_turns(effect_entity) == 1
    assert game.effects.tick(human) == [effect_entity]
    game.effects.tick(human)

    assert expire_calls == [1]
    assert [payload["label"] for payload in expired] == ["haste"]
    assert game.effects.effects(human) == []
    with pytest.raises(KeyError):
        game.effects.remaining_turns(effect_entity)


def test_tick_leaves_other_player_untouched():
    game = make_game()
    human, ai = players(game)
    ai_effect = game.effects.add(ai, StatusEffect(label="curse"), 1)
    game.effects.tick(human)
    assert game.effects.remaining_turns(ai_effect) == 1


def test_multiplicative_and_additive_aggregation():
    game = make_game()
    human, ai = players(game)
    game.effects.add(human, StatusEffect(damage_multiplier=1.5, skill_damage_reduction=2), 3)
    game.effects.add(human, StatusEffect(damage_multiplier=2, skill_damage_reduction=3), 3)
    assert game.effects.product(human, "damage_multiplier") == pytest.approx(3.0)
    assert game.effects.product(human, "resource_multiplier") == pytest.approx(1.0)
    assert game.effects.total(human, "skill_damage_reduction") == 5
    assert game.effects.product(ai, "damage_multiplier") == 1.0
    assert game.effects.total(ai, "skill_damage_reduction") == 0


def test_aggregation_rejects_unknown_fields():
    game = make_game()
    human, _ = players(game)
    with pytest.raises(ValueError):
        game.effects.product(human, "skill_damage_reduction")
    with pytest.raises(ValueError):
        game.effects.total(human, "damage_multiplier")
    with pytest.raises(ValueError):
        game.effects.first(human, "extra_turn")


def test_first_found_fields_and_extra_turn():
    game = make_game()
    human, _ = players(game)
    assert not game.effects.has_extra_turn(human)
    game.effects.add(human, StatusEffect(mana_conversion=ManaConversion(Color.RED, Color.BLUE, 2)), 2)
    game.effects.add(human, StatusEffect(mana_conversion=ManaConversion(Color.RED, Color.GREEN, 3)), 2)
    game.effects.add(human, StatusEffect(extra_turn=True), 1)
    assert game.effects.first(human, "mana_conversion").target is Color.BLUE
    assert game.effects.first(human, "mana_conversion", source=Color.YELLOW) is None
    assert game.effects.has_extra_turn(human)


def test_extend_positive_effects_only():
    game = make_game()
    human, _ = players(game)
    buff = game.effects.add(human, StatusEffect(damage_multiplier=2), 2)
    debuff = game.effects.add(human, StatusEffect(damage_multiplier=0.5), 2)
    assert game.effects.extend_positive(human, 1) == 1
    assert game.effects.remaining_turns(buff) == 3
    assert game.effects.remaining_turns(debuff) == 2


def test_tile_conversion_effect_recolors_tiles():
    game = make_game()
    human, _ = players(game)
    set_board_colors(game.world, STALE_LAYOUT)
    before = sum(row.count(Color.GREEN) for row in color_grid(game.world))
    assert game.effects.apply_tile_conversions(human, random.Random(1)) == []

    game.effects.add(human, StatusEffect(convert_tiles=ConvertTiles(Color.GREEN, 2)), 2)
    converted = game.effects.apply_tile_conversions(human, random.Random(1))

    grid = color_grid(game.world)
    assert len(converted) == 2
    assert all(grid[r][c] is Color.GREEN for r, c in converted)
    assert sum(row.count(Color.GREEN) for row in grid) == before + 2
