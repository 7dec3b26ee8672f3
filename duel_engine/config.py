import re

# Move regex (supports UCI + prefixed)
MOVE_RE = re.compile(r"^[PNBRQK]?[a-h][1-8][a-h][1-8][qrbn]?$", re.IGNORECASE)

# Baseline combat stats per class: hp, die, attack, defense
BASE_STATS = {
    "Pawn":   {"hp": 33, "die": 6, "attack": 1, "defense": 3},
    "Knight": {"hp": 41, "die": 6, "attack": 1, "defense": 3},
    "Bishop": {"hp": 41, "die": 6, "attack": 1, "defense": 3},
    "Rook":   {"hp": 46, "die": 6, "attack": 1, "defense": 3},
    "Queen":  {"hp": 51, "die": 6, "attack": 1, "defense": 3},
    "King":   {"hp": 36, "die": 6, "attack": 1, "defense": 3},
}

DIE_PROGRESSION = (6, 8, 10, 12)

# Pawn evolution: +HP and one die step per stage
EVOLUTION_HP_STEP = 4
MAX_EVOLUTION_STAGE = 2

GUARD_BONUS = 1              # Extra defense on the first hit a combatant takes

PROMOTION_CLASSES = ("Queen", "Rook", "Knight", "Bishop")
BACK_RANK_ORDER = ("Rook", "Knight", "Bishop", "Queen", "King", "Bishop", "Knight", "Rook")

# Type multipliers
SUPER_EFFECTIVE = 1.5
NEUTRAL = 1.0
RESISTED = 0.75
IMMUNE = 0.0

# Key class matchups at neutral typing: (attacker, defender, low, high)
BALANCE_TARGETS = (
    ("Pawn", "Pawn", 0.52, 0.55),
    ("Knight", "Pawn", 0.78, 0.85),
    ("Bishop", "Pawn", 0.78, 0.85),
    ("Rook", "Knight", 0.65, 0.75),
    ("Rook", "Bishop", 0.65, 0.75),
    ("Queen", "Rook", 0.65, 0.75),
)
