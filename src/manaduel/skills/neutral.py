"""Single-color skills available to every class."""
from __future__ import annotations

from manaduel.components.color import Color
from manaduel.components.skill import ClassSkill, SkillEffectSpec


def create_skill_flame_burst() -> ClassSkill:
    return ClassSkill(
        id="flame_burst",
        name="Flame Burst",
        description="Deal 10 damage and ignite 3 random tiles.",
        cost={Color.RED: 4},
        primary_color=Color.RED,
        secondary_color=Color.RED,
        effects=(
            SkillEffectSpec(slug="damage", target="opponent", metadata={"amount": 10}),
            SkillEffectSpec(slug="ignite", target="board", metadata={"count": 3}),
        ),
    )


def create_skill_divine_shield() -> ClassSkill:
    return ClassSkill(
        id="divine_shield",
        name="Divine Shield",
        description="Gain 15 defense for 3 turns.",
        cost={Color.YELLOW: 4},
        primary_color=Color.YELLOW,
        secondary_color=Color.YELLOW,
        effects=(
            SkillEffectSpec(
                slug="status",
                target="self",
                turns=3,
                metadata={"label": "divine_shield", "defense": 15},
            ),
        ),
    )


def create_skill_time_slip() -> ClassSkill:
    return ClassSkill(
        id="time_slip",
        name="Time Slip",
        description="Gain extra actions for 2 turns.",
        cost={Color.BLUE: 4},
        primary_color=Color.BLUE,
        secondary_color=Color.BLUE,
        effects=(
            SkillEffectSpec(
                slug="status",
                target="self",
                turns=2,
                metadata={"label": "time_slip", "extra_turn": True},
            ),
        ),
    )


def create_skill_natures_touch() -> ClassSkill:
    return ClassSkill(
        id="natures_touch",
        name="Nature's Touch",
        description="Convert 4 random tiles to green and extend positive effects by 1 turn.",
        cost={Color.GREEN: 4},
        primary_color=Color.GREEN,
        secondary_color=Color.GREEN,
        effects=(
            SkillEffectSpec(slug="convert_random", target="board", metadata={"color": Color.GREEN, "count": 4}),
            SkillEffectSpec(slug="extend_effects", target="self", turns=1),
        ),
    )


def create_skill_dark_sacrifice() -> ClassSkill:
    return ClassSkill(
        id="dark_sacrifice",
        name="Dark Sacrifice",
        description="Take 8 damage to halve the opponent's damage and resources for 2 turns.",
        cost={Color.BLACK: 4},
        primary_color=Color.BLACK,
        secondary_color=Color.BLACK,
        effects=(
            SkillEffectSpec(slug="damage", target="self", metadata={"amount": 8, "direct": False}),
            SkillEffectSpec(
                slug="status",
                target="opponent",
                turns=2,
                metadata={"label": "dark_sacrifice", "damage_multiplier": 0.5, "resource_multiplier": 0.5},
            ),
        ),
    )
