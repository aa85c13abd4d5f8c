import math

import matplotlib.pyplot as plt
import numpy as np

from manaduel.constants import PRIMARY_COLOR_STAT, SECONDARY_COLOR_STAT, SPECIAL_SHAPE_MULTIPLIER
from manaduel.utils.combat_math import combo_multiplier, length_multiplier, round_half_up


def match_damage(stat, length, combo, special_shape=False):
    """Rounded damage of a single match, before any status effects."""
    damage = stat * math.ceil(length / 3) * length_multiplier(length)
    if special_shape:
        damage *= SPECIAL_SHAPE_MULTIPLIER
    return round_half_up(damage * combo_multiplier(combo))


# Damage per cascade pass for the common match lengths
combos = np.arange(1, 11)

plt.figure(figsize=(7, 4))
for length in (3, 4, 5):
    damages = [match_damage(PRIMARY_COLOR_STAT, length, int(c)) for c in combos]
    plt.plot(combos, damages, marker="o", label=f"{length}-match, primary color")
shape_damages = [match_damage(PRIMARY_COLOR_STAT, 5, int(c), special_shape=True) for c in combos]
plt.plot(combos, shape_damages, linestyle="--", label="T/L shape, primary color")
secondary = [match_damage(SECONDARY_COLOR_STAT, 3, int(c)) for c in combos]
plt.plot(combos, secondary, linestyle=":", label="3-match, secondary color")
plt.axvline(10, color="gray", linestyle="--", label="Combo extra turn (10)")
plt.xlabel("Combo (cascade pass)")
plt.ylabel("Damage")
plt.title("Match damage by combo")
plt.legend()
plt.grid(True)
plt.show()
