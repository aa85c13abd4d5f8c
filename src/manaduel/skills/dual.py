from __future__ import annotations

from manaduel.components.color import Color
from manaduel.components.skill import ClassSkill, SkillEffectSpec


def create_skill_phoenix_rebirth() -> ClassSkill:
    return ClassSkill(
        id="phoenix_rebirth",
        name="Phoenix Rebirth",
        description="Deal 8 damage and heal 5 health.",
        cost={Color.RED: 3, Color.YELLOW: 3},
        primary_color=Color.RED,
        secondary_color=Color.YELLOW,
        effects=(
            SkillEffectSpec(slug="damage", target="opponent", metadata={"amount": 8}),
            SkillEffectSpec(slug="heal", target="self", metadata={"amount": 5}),
        ),
    )


def create_skill_alchemists_brew() -> ClassSkill:
    return ClassSkill(
        id="alchemists_brew",
        name="Alchemist's Brew",
        description="For 3 turns every 2 green gained becomes 1 red, and red matches hit harder.",
        cost={Color.GREEN: 3, Color.RED: 3},
        primary_color=Color.GREEN,
        secondary_color=Color.RED,
        effects=(
            SkillEffectSpec(
                slug="status",
                target="self",
                turns=3,
                metadata={
                    "label": "alchemists_brew",
                    "mana_conversion": {"source": Color.GREEN, "target": Color.RED, "ratio": 2},
                    "color_stat_bonus": {Color.RED: 1},
                },
            ),
        ),
    )


def create_skill_frost_ward() -> ClassSkill:
    return ClassSkill(
        id="frost_ward",
        name="Frost Ward",
        description="Reduce incoming skill damage by 3 for 3 turns and sharpen your own skills.",
        cost={Color.BLUE: 3, Color.YELLOW: 3},
        primary_color=Color.BLUE,
        secondary_color=Color.YELLOW,
        effects=(
            SkillEffectSpec(
                slug="status",
                target="self",
                turns=3,
                metadata={
                    "label": "frost_ward",
                    "skill_damage_reduction": 3,
                    "skill_damage_multiplier": 1.5,
                },
            ),
        ),
    )


def create_skill_overgrowth() -> ClassSkill:
    return ClassSkill(
        id="overgrowth",
        name="Overgrowth",
        description="At the start of each of your next 3 turns, 2 random tiles turn green.",
        cost={Color.GREEN: 3, Color.BLACK: 3},
        primary_color=Color.GREEN,
        secondary_color=Color.BLACK,
        effects=(
            SkillEffectSpec(
                slug="status",
                target="self",
                turns=3,
                metadata={"label": "overgrowth", "convert_tiles": {"color": Color.GREEN, "count": 2}},
            ),
        ),
    )
