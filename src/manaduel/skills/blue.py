from __future__ import annotations

from manaduel.components.color import Color
from manaduel.components.skill import ClassSkill, SkillEffectSpec


def create_skill_ice_shard() -> ClassSkill:
    return ClassSkill(
        id="ice_shard",
        name="Ice Shard",
        description="Freeze a tile and its neighbours, dealing 4 damage.",
        cost={Color.BLUE: 4},
        primary_color=Color.BLUE,
        secondary_color=Color.YELLOW,
        requires_target=True,
        effects=(
            SkillEffectSpec(slug="freeze", target="pending_target", metadata={"shape": "cross"}),
            SkillEffectSpec(slug="damage", target="opponent", metadata={"amount": 4}),
        ),
    )


def create_skill_golden_frost() -> ClassSkill:
    return ClassSkill(
        id="golden_frost",
        name="Golden Frost",
        description=(
            "Deal damage equal to the number of frozen tiles, scaled by times cast, "
            "heal the same amount, and double resources for 3 turns."
        ),
        cost={Color.BLUE: 3, Color.YELLOW: 3},
        primary_color=Color.BLUE,
        secondary_color=Color.YELLOW,
        effects=(
            SkillEffectSpec(
                slug="damage",
                target="opponent",
                metadata={"per_frozen_tile": 1, "scale_with_casts": True, "lifesteal": True},
            ),
            SkillEffectSpec(
                slug="status",
                target="self",
                turns=3,
                metadata={"label": "golden_frost", "resource_multiplier": 2},
            ),
        ),
    )


def create_skill_chain_lightning() -> ClassSkill:
    return ClassSkill(
        id="chain_lightning",
        name="Chain Lightning",
        description="Turn the targeted row blue, dealing 2 damage per converted tile.",
        cost={Color.BLUE: 4, Color.BLACK: 3},
        primary_color=Color.BLUE,
        secondary_color=Color.BLACK,
        requires_target=True,
        effects=(
            SkillEffectSpec(
                slug="convert_area",
                target="pending_target",
                metadata={"shape": "row", "color": Color.BLUE, "damage_per_tile": 2},
            ),
        ),
    )


def create_skill_storm_front() -> ClassSkill:
    return ClassSkill(
        id="storm_front",
        name="Storm Front",
        description="1.5x damage and resources for 4 turns.",
        cost={Color.BLUE: 3, Color.BLACK: 3},
        primary_color=Color.BLUE,
        secondary_color=Color.BLACK,
        effects=(
            SkillEffectSpec(
                slug="status",
                target="self",
                turns=4,
                metadata={"label": "storm_front", "damage_multiplier": 1.5, "resource_multiplier": 1.5},
            ),
        ),
    )
