GRID_ROWS = 8
GRID_COLS = 8

MIN_MATCH_LENGTH = 3
# Safety bound on destroy/drop/refill passes for a single action.
MAX_CASCADE_PASSES = 20
# Attempts at generating a match-free board with a legal move before giving up.
MAX_BOARD_ATTEMPTS = 200

# Extra turns
COMBO_EXTRA_TURN_THRESHOLD = 10
EXTRA_TURN_MATCH_LENGTHS = (4, 5)

# Damage scaling per match
LENGTH_MULTIPLIERS = {3: 1.0, 4: 1.5}
LONG_MATCH_MULTIPLIER = 2.0  # 5 or more tiles
SPECIAL_SHAPE_MULTIPLIER = 1.5
COMBO_STEP_MULTIPLIER = 0.5

# Ignited tiles blow up a square of this radius when consumed by a match.
IGNITE_RADIUS = 1

# Players
MAX_HEALTH = 100
PRIMARY_COLOR_STAT = 3
SECONDARY_COLOR_STAT = 1
DEFAULT_HUMAN_CLASS = "pyromancer"
DEFAULT_AI_CLASS = "shadow_priest"

# AI move evaluation
AI_TOP_MOVES = 5
AI_MAX_DIFFICULTY = 5
AI_DEFAULT_DIFFICULTY = 3
AI_SCORE_PER_MATCH = 1000
AI_SCORE_PER_EXTRA_TILE = 2000
AI_SCORE_PRIMARY_COLOR = 5000
