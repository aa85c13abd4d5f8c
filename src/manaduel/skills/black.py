from __future__ import annotations

from manaduel.components.color import Color
from manaduel.components.skill import ClassSkill, SkillEffectSpec


def create_skill_void_touch() -> ClassSkill:
    return ClassSkill(
        id="void_touch",
        name="Void Touch",
        description="The enemy takes 50% more damage for 3 turns.",
        cost={Color.BLACK: 3},
        primary_color=Color.BLACK,
        secondary_color=Color.BLUE,
        effects=(
            SkillEffectSpec(
                slug="status",
                target="opponent",
                turns=3,
                metadata={"label": "void_touch", "damage_multiplier": 1.5},
            ),
        ),
    )


def create_skill_dark_ritual() -> ClassSkill:
    return ClassSkill(
        id="dark_ritual",
        name="Dark Ritual",
        description="Convert a 2x2 area starting at a black tile to black.",
        cost={Color.BLACK: 3, Color.BLUE: 3},
        primary_color=Color.BLACK,
        secondary_color=Color.BLUE,
        target_color=Color.BLACK,
        requires_target=True,
        effects=(
            SkillEffectSpec(
                slug="convert_area",
                target="pending_target",
                metadata={"shape": "block", "width": 2, "height": 2, "color": Color.BLACK},
            ),
        ),
    )
