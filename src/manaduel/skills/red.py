from __future__ import annotations

from manaduel.components.color import Color
from manaduel.components.skill import ClassSkill, SkillEffectSpec


def create_skill_fiery_soul() -> ClassSkill:
    return ClassSkill(
        id="fiery_soul",
        name="Fiery Soul",
        description="Double match damage for 3 turns. Red matches also yield 1 yellow.",
        cost={Color.RED: 5},
        primary_color=Color.RED,
        secondary_color=Color.YELLOW,
        effects=(
            SkillEffectSpec(
                slug="status",
                target="self",
                turns=3,
                metadata={
                    "label": "fiery_soul",
                    "damage_multiplier": 2,
                    "resource_bonus": {"match_color": Color.RED, "bonus_color": Color.YELLOW, "amount": 1},
                },
            ),
        ),
    )


def create_skill_fireball() -> ClassSkill:
    return ClassSkill(
        id="fireball",
        name="Fireball",
        description="Blast a red tile, destroying everything within 2 steps. 5 damage per red tile destroyed.",
        cost={Color.RED: 4, Color.YELLOW: 3},
        primary_color=Color.RED,
        secondary_color=Color.YELLOW,
        target_color=Color.RED,
        requires_target=True,
        effects=(
            SkillEffectSpec(
                slug="destroy_area",
                target="pending_target",
                metadata={
                    "shape": "diamond",
                    "radius": 2,
                    "damage_per_color": {Color.RED: 5},
                    "collect_resources": True,
                },
            ),
        ),
    )


def create_skill_blood_surge() -> ClassSkill:
    return ClassSkill(
        id="blood_surge",
        name="Blood Surge",
        description="Sacrifice 5 health to deal 2.5x match damage for 2 turns.",
        cost={Color.RED: 3, Color.BLUE: 3},
        primary_color=Color.RED,
        secondary_color=Color.BLUE,
        effects=(
            SkillEffectSpec(slug="health_cost", target="self", metadata={"amount": 5, "floor": 1}),
            SkillEffectSpec(
                slug="status",
                target="self",
                turns=2,
                metadata={"label": "blood_surge", "damage_multiplier": 2.5},
            ),
        ),
    )


def create_skill_frost_fire() -> ClassSkill:
    return ClassSkill(
        id="frost_fire",
        name="Frost Fire",
        description="Double damage and resources for 3 turns.",
        cost={Color.RED: 4, Color.BLUE: 4},
        primary_color=Color.RED,
        secondary_color=Color.BLUE,
        effects=(
            SkillEffectSpec(
                slug="status",
                target="self",
                turns=3,
                metadata={"label": "frost_fire", "damage_multiplier": 2, "resource_multiplier": 2},
            ),
        ),
    )
