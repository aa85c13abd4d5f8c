"""Skill catalog builders, grouped by primary color."""

from .black import create_skill_dark_ritual, create_skill_void_touch
from .blue import (
    create_skill_chain_lightning,
    create_skill_golden_frost,
    create_skill_ice_shard,
    create_skill_storm_front,
)
from .dual import (
    create_skill_alchemists_brew,
    create_skill_frost_ward,
    create_skill_overgrowth,
    create_skill_phoenix_rebirth,
)
from .green import (
    create_skill_catalyst,
    create_skill_fertile_ground,
    create_skill_golden_growth,
    create_skill_transmutation,
)
from .neutral import (
    create_skill_dark_sacrifice,
    create_skill_divine_shield,
    create_skill_flame_burst,
    create_skill_natures_touch,
    create_skill_time_slip,
)
from .red import (
    create_skill_blood_surge,
    create_skill_fiery_soul,
    create_skill_fireball,
    create_skill_frost_fire,
)
from .yellow import create_skill_temporal_surge, create_skill_time_loop

__all__ = [
    "create_skill_alchemists_brew",
    "create_skill_blood_surge",
    "create_skill_catalyst",
    "create_skill_chain_lightning",
    "create_skill_dark_ritual",
    "create_skill_dark_sacrifice",
    "create_skill_divine_shield",
    "create_skill_fertile_ground",
    "create_skill_fiery_soul",
    "create_skill_fireball",
    "create_skill_flame_burst",
    "create_skill_frost_fire",
    "create_skill_frost_ward",
    "create_skill_golden_frost",
    "create_skill_golden_growth",
    "create_skill_ice_shard",
    "create_skill_natures_touch",
    "create_skill_overgrowth",
    "create_skill_phoenix_rebirth",
    "create_skill_storm_front",
    "create_skill_temporal_surge",
    "create_skill_time_loop",
    "create_skill_time_slip",
    "create_skill_transmutation",
    "create_skill_void_touch",
]
