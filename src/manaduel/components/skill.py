from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Optional

from manaduel.components.color import Color

SkillEffectTarget = Literal[
    "self",
    "opponent",
    "pending_target",
    "board",
]


@dataclass(frozen=True, slots=True)
class SkillEffectSpec:
    """Describes one step performed when a skill resolves.

    ``slug`` selects the interpreter branch; ``metadata`` carries its
    parameters (amounts, colors, area shapes).
    """

    slug: str
    target: SkillEffectTarget
    turns: int | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ClassSkill:
    """Immutable catalog entry for a castable skill."""

    id: str
    name: str
    description: str
    cost: Mapping[Color, int]
    primary_color: Color
    secondary_color: Color
    target_color: Optional[Color] = None
    requires_target: bool = False
    effects: tuple[SkillEffectSpec, ...] = ()
