from duel_engine.config import SUPER_EFFECTIVE as SE, NEUTRAL as N, RESISTED as RES, IMMUNE as IMM

TYPE_ORDER = (
    "Normal", "Fire", "Water", "Electric", "Grass", "Ice",
    "Fighting", "Poison", "Ground", "Flying", "Psychic",
    "Bug", "Rock", "Ghost", "Dragon",
)

# CHART[attacking][defending]
CHART = (
    #  Nor  Fir  Wat  Ele  Gra  Ice  Fig  Poi  Gro  Fly  Psy  Bug  Roc  Gho  Dra
    (N,   N,   N,   N,   N,   N,   N,   N,   N,   N,   N,   N,   RES, IMM, N),    # Normal
    (N,   RES, RES, N,   SE,  SE,  N,   N,   N,   N,   N,   SE,  RES, N,   RES),  # Fire
    (N,   SE,  RES, N,   RES, N,   N,   N,   SE,  N,   N,   N,   SE,  N,   RES),  # Water
    (N,   N,   SE,  RES, RES, N,   N,   N,   IMM, SE,  N,   N,   N,   N,   RES),  # Electric
    (N,   RES, SE,  N,   RES, N,   N,   RES, SE,  RES, N,   RES, SE,  N,   RES),  # Grass
    (N,   N,   RES, N,   SE,  RES, N,   N,   SE,  SE,  N,   N,   N,   N,   SE),   # Ice
    (SE,  N,   N,   N,   N,   SE,  N,   RES, N,   RES, RES, RES, SE,  IMM, N),    # Fighting
    (N,   N,   N,   N,   SE,  N,   N,   RES, RES, N,   N,   SE,  RES, RES, N),    # Poison
    (N,   SE,  N,   SE,  RES, N,   N,   SE,  N,   IMM, N,   RES, SE,  N,   N),    # Ground
    (N,   N,   N,   RES, SE,  N,   SE,  N,   N,   N,   N,   SE,  RES, N,   N),    # Flying
    (N,   N,   N,   N,   N,   N,   SE,  SE,  N,   N,   RES, N,   N,   N,   N),    # Psychic
    (N,   RES, N,   N,   SE,  N,   RES, RES, N,   RES, SE,  N,   N,   RES, N),    # Bug
    (N,   SE,  N,   N,   N,   SE,  RES, N,   RES, SE,  N,   SE,  N,   N,   N),    # Rock
    (IMM, N,   N,   N,   N,   N,   N,   N,   N,   N,   N,   N,   N,   SE,  N),    # Ghost
    (N,   N,   N,   N,   N,   N,   N,   N,   N,   N,   N,   N,   N,   N,   SE),   # Dragon
)

_TYPE_INDEX = {t: i for i, t in enumerate(TYPE_ORDER)}


def type_effectiveness(attacking, defending):
    """Multiplier of one attacking type against one defending type (unknown types are neutral)."""
    ai, di = _TYPE_INDEX.get(attacking), _TYPE_INDEX.get(defending)
    if ai is None or di is None:
        return N
    return CHART[ai][di]


def type_multiplier(attacker_types, defender_types):
    """
    Damage multiplier for a whole combatant.
    Each attacking type is multiplied across every defending type and the
    attacker keeps its best result.
    """
    best = 0.0
    for atk in attacker_types:
        m = 1.0
        for dfn in defender_types:
            m *= type_effectiveness(atk, dfn)
        best = max(best, m)
    return best


def matchup_score(attacker_types, defender_primary):
    """Coarse matchup grade used by team composition: SE +1, N 0, RES -1, IMM -2."""
    m = type_multiplier(attacker_types, [defender_primary])
    if m >= SE:
        return 1
    if m == N:
        return 0
    if m == IMM:
        return -2
    if m <= RES:
        return -1
    return 0
