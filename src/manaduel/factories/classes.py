from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from manaduel.components.affinity import Affinity
from manaduel.components.character_class import CharacterClass
from manaduel.components.color import Color
from manaduel.constants import PRIMARY_COLOR_STAT, SECONDARY_COLOR_STAT


@dataclass(frozen=True, slots=True)
class ClassDefinition:
    """Static description of a playable class."""

    slug: str
    name: str
    primary_color: Color
    secondary_color: Color
    skills: Tuple[str, ...]
    description: str = ""


CLASS_DEFINITIONS: Dict[str, ClassDefinition] = {
    definition.slug: definition
    for definition in (
        ClassDefinition("pyromancer", "Pyromancer", Color.RED, Color.YELLOW, ("fiery_soul", "fireball"),
                        "Fire magic with explosive area damage."),
        ClassDefinition("cryomancer", "Cryomancer", Color.BLUE, Color.YELLOW, ("ice_shard", "golden_frost"),
                        "Freezes the board and drains life from frost."),
        ClassDefinition("nature_weaver", "Nature Weaver", Color.GREEN, Color.YELLOW,
                        ("fertile_ground", "golden_growth"), "Reshapes the board into green growth."),
        ClassDefinition("blood_mage", "Blood Mage", Color.RED, Color.BLUE, ("blood_surge", "frost_fire"),
                        "Trades health for overwhelming power."),
        ClassDefinition("shadow_priest", "Shadow Priest", Color.BLACK, Color.BLUE, ("void_touch", "dark_ritual"),
                        "Weakens enemies and spreads darkness."),
        ClassDefinition("alchemist", "Alchemist", Color.GREEN, Color.RED, ("transmutation", "catalyst"),
                        "Transmutes colors and amplifies matches."),
        ClassDefinition("storm_mage", "Storm Mage", Color.BLUE, Color.BLACK, ("chain_lightning", "storm_front"),
                        "Strikes whole rows with lightning."),
        ClassDefinition("time_weaver", "Time Weaver", Color.YELLOW, Color.BLUE, ("time_loop", "temporal_surge"),
                        "Bends turns and replays patterns."),
    )
}


def get_class_definition(slug: str) -> ClassDefinition:
    try:
        return CLASS_DEFINITIONS[slug]
    except KeyError as exc:
        raise KeyError(f"Class '{slug}' is not registered") from exc


def class_components(slug: str) -> Tuple[CharacterClass, Affinity]:
    """Components describing ``slug`` for a player entity."""
    definition = get_class_definition(slug)
    base = {color: 0 for color in Color if color is not Color.EMPTY}
    base[definition.secondary_color] = SECONDARY_COLOR_STAT
    base[definition.primary_color] = PRIMARY_COLOR_STAT
    character = CharacterClass(
        slug=definition.slug,
        name=definition.name,
        primary_color=definition.primary_color,
        secondary_color=definition.secondary_color,
        description=definition.description,
    )
    return character, Affinity(base=base)
