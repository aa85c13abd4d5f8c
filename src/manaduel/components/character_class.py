from dataclasses import dataclass

from manaduel.components.color import Color


@dataclass
class CharacterClass:
    """Identifies the class a combatant plays and its color alignment."""
    slug: str
    name: str
    primary_color: Color
    secondary_color: Color
    description: str = ""
