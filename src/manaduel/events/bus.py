from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so systems that are not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# INPUT REQUESTS
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(r,c), dst=(r,c)
EVENT_SKILL_ACTIVATE_REQUEST = "skill_activate_request"  # payload: owner_entity, skill_id
EVENT_SKILL_TARGET_REQUEST = "skill_target_request"      # payload: owner_entity, row, col
EVENT_ACTION_REJECTED = "action_rejected"          # payload: owner_entity, reason=str, action=str


# ============================================================================
# TILE & BOARD MECHANICS
# ============================================================================
EVENT_TILE_SWAPPED = "tile_swapped"                # payload: src=(r,c), dst=(r,c), owner_entity
EVENT_MATCH = "on_match"                           # payload: owner_entity, matches=list[Match], combo=int
EVENT_TILES_DESTROYED = "tiles_destroyed"          # payload: positions=[(r,c),...], exploded=[(r,c),...]
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=list[GravityMove]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(r,c),...]
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[(r,c),...]
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, combo=int, overrun=bool
EVENT_BOARD_CHANGED = "board_changed"              # payload: reason=str, positions=list[(r,c)]
EVENT_BOARD_RESET = "board_reset"                  # payload: reason=str


# ============================================================================
# RESOURCES & DAMAGE
# ============================================================================
EVENT_RESOURCE_GAINED = "on_resource_gained"       # payload: owner_entity, color=Color, amount=int
EVENT_RESOURCES_SPENT = "resources_spent"          # payload: owner_entity, cost=dict
EVENT_DAMAGE_DEALT = "on_damage_dealt"             # payload: attacker_entity, defender_entity, amount, skill=bool
EVENT_DAMAGE_TAKEN = "on_damage_taken"             # payload: defender_entity, attacker_entity, amount, health=int
EVENT_HEALTH_CHANGED = "health_changed"            # payload: entity, current, max_hp, delta


# ============================================================================
# STATUS EFFECTS
# ============================================================================
EVENT_STATUS_EFFECT_APPLIED = "on_status_effect_applied"  # payload: owner_entity, effect_entity, label, turns
EVENT_EFFECT_EXPIRED = "effect_expired"            # payload: owner_entity, effect_entity, label


# ============================================================================
# SKILLS
# ============================================================================
EVENT_SKILL_ACTIVATED = "skill_activated"          # payload: owner_entity, skill_id, active=bool
EVENT_SKILL_CAST = "on_skill_cast"                 # payload: owner_entity, skill_id, row, col


# ============================================================================
# TURN FLOW
# ============================================================================
EVENT_START_OF_TURN = "start_of_turn"              # payload: owner_entity, turn_number=int
EVENT_END_OF_TURN = "end_of_turn"                  # payload: owner_entity, turn_number=int
EVENT_EXTRA_TURN_GRANTED = "on_extra_turn"         # payload: owner_entity, reason=str
EVENT_TURN_FORFEITED = "turn_forfeited"            # payload: owner_entity
EVENT_GAME_OVER = "on_game_over"                   # payload: winner_entity, loser_entity
