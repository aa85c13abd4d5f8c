from __future__ import annotations

from manaduel.components.color import Color
from manaduel.components.skill import ClassSkill, SkillEffectSpec


def create_skill_time_loop() -> ClassSkill:
    return ClassSkill(
        id="time_loop",
        name="Time Loop",
        description="Copy the top-left 2x2 pattern onto the targeted tile.",
        cost={Color.YELLOW: 5, Color.BLUE: 3},
        primary_color=Color.YELLOW,
        secondary_color=Color.BLUE,
        requires_target=True,
        effects=(
            SkillEffectSpec(
                slug="copy_block",
                target="pending_target",
                metadata={"source": (0, 0), "width": 2, "height": 2},
            ),
        ),
    )


def create_skill_temporal_surge() -> ClassSkill:
    return ClassSkill(
        id="temporal_surge",
        name="Temporal Surge",
        description="Take an extra turn.",
        cost={Color.YELLOW: 6, Color.BLUE: 4},
        primary_color=Color.YELLOW,
        secondary_color=Color.BLUE,
        effects=(
            SkillEffectSpec(
                slug="status",
                target="self",
                turns=1,
                metadata={"label": "temporal_surge", "extra_turn": True},
            ),
        ),
    )
