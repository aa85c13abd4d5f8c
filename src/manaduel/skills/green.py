from __future__ import annotations

from manaduel.components.color import Color
from manaduel.components.skill import ClassSkill, SkillEffectSpec


def create_skill_fertile_ground() -> ClassSkill:
    return ClassSkill(
        id="fertile_ground",
        name="Fertile Ground",
        description="Convert random tiles to green; one more tile each time it is cast.",
        cost={Color.GREEN: 2},
        primary_color=Color.GREEN,
        secondary_color=Color.YELLOW,
        effects=(
            SkillEffectSpec(
                slug="convert_random",
                target="board",
                metadata={"color": Color.GREEN, "count": 1, "scale_with_casts": True},
            ),
        ),
    )


def create_skill_golden_growth() -> ClassSkill:
    return ClassSkill(
        id="golden_growth",
        name="Golden Growth",
        description="Weave a random 2x2 area into a green and yellow checkerboard.",
        cost={Color.GREEN: 3, Color.YELLOW: 3},
        primary_color=Color.GREEN,
        secondary_color=Color.YELLOW,
        effects=(
            SkillEffectSpec(
                slug="pattern_area",
                target="board",
                metadata={"width": 2, "height": 2, "colors": (Color.GREEN, Color.YELLOW)},
            ),
        ),
    )


def create_skill_transmutation() -> ClassSkill:
    return ClassSkill(
        id="transmutation",
        name="Transmutation",
        description="Convert every tile of the targeted color into another color.",
        cost={Color.GREEN: 4, Color.RED: 4},
        primary_color=Color.GREEN,
        secondary_color=Color.RED,
        requires_target=True,
        effects=(SkillEffectSpec(slug="convert_color", target="pending_target"),),
    )


def create_skill_catalyst() -> ClassSkill:
    return ClassSkill(
        id="catalyst",
        name="Catalyst",
        description="Double damage and resources for 3 turns.",
        cost={Color.GREEN: 5, Color.RED: 5},
        primary_color=Color.GREEN,
        secondary_color=Color.RED,
        effects=(
            SkillEffectSpec(
                slug="status",
                target="self",
                turns=3,
                metadata={"label": "catalyst", "damage_multiplier": 2, "resource_multiplier": 2},
            ),
        ),
    )
