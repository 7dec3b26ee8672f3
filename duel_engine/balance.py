"""
Exact win probability of a duel.

The attacker's chance of winning is computed without sampling, as the
analytical counterpart of `combat.resolve_combat`:

1. Damage distributions are enumerated for each side, guard on and off.
2. A bottom-up table P[hA][hB] holds the attacker's win chance once both
   guards are spent. P[h][0] = 1 and P[0][h] = 0. A round in which neither
   side deals damage returns to the same state, giving P = pLoop * P + pOther,
   which is solved as pOther / (1 - pLoop), or 0 when pLoop == 1 (a deadlock
   the attacker can never win).
3. The opening round is played with both guards up and feeds into the table.

Pass ``exact=True`` to run the same computation on ``fractions.Fraction``.
"""
from fractions import Fraction
from typing import NamedTuple

from duel_engine.combat import calculate_damage
from duel_engine.config import BALANCE_TARGETS, BASE_STATS
from duel_engine.piece_profile import PieceClass
from duel_engine.type_chart import type_multiplier


class CombatConfig(NamedTuple):
    hp_a: int
    die_a: int
    attack_a: int
    defense_a: int
    hp_b: int
    die_b: int
    attack_b: int
    defense_b: int
    multiplier_a_to_b: float = 1.0
    multiplier_b_to_a: float = 1.0


class BalanceCheck(NamedTuple):
    attacker: str
    defender: str
    winrate: float
    low: float
    high: float

    @property
    def in_range(self):
        return self.low <= self.winrate <= self.high


def damage_distribution(die, attack, defense, multiplier, guard=False, exact=False):
    """Map of damage -> probability over every face of the die."""
    p = Fraction(1, die) if exact else 1 / die
    dist = {}
    for roll in range(1, die + 1):
        dmg = calculate_damage(roll, attack, defense, multiplier, guard)
        dist[dmg] = dist.get(dmg, 0) + p
    return dist


def calculate_win_probability(config: CombatConfig, exact=False):
    """P(attacker eventually wins) for the duel described by `config`."""
    c = config
    a_on = damage_distribution(c.die_a, c.attack_a, c.defense_b, c.multiplier_a_to_b, True, exact)
    a_off = damage_distribution(c.die_a, c.attack_a, c.defense_b, c.multiplier_a_to_b, False, exact)
    b_on = damage_distribution(c.die_b, c.attack_b, c.defense_a, c.multiplier_b_to_a, True, exact)
    b_off = damage_distribution(c.die_b, c.attack_b, c.defense_a, c.multiplier_b_to_a, False, exact)

    zero = Fraction(0) if exact else 0.0
    one = Fraction(1) if exact else 1.0

    # dp[hA][hB] with guards spent; row 0 stays 0, column 0 is a win
    dp = [[zero] * (c.hp_b + 1) for _ in range(c.hp_a + 1)]
    for h_a in range(1, c.hp_a + 1):
        dp[h_a][0] = one

    for h_b in range(1, c.hp_b + 1):
        for h_a in range(1, c.hp_a + 1):
            p_other = zero
            p_loop = zero
            for dmg_a, p_a in a_off.items():
                new_b = h_b - dmg_a
                if new_b <= 0:
                    p_other += p_a
                    continue
                for dmg_b, p_b in b_off.items():
                    new_a = h_a - dmg_b
                    if new_a <= 0:
                        continue
                    if new_a == h_a and new_b == h_b:
                        p_loop += p_a * p_b
                    else:
                        p_other += p_a * p_b * dp[new_a][new_b]
            dp[h_a][h_b] = zero if p_loop >= 1 else p_other / (1 - p_loop)

    # Opening round, both guards up
    result = zero
    for dmg_a, p_a in a_on.items():
        new_b = c.hp_b - dmg_a
        if new_b <= 0:
            result += p_a
            continue
        for dmg_b, p_b in b_on.items():
            new_a = c.hp_a - dmg_b
            if new_a > 0:
                result += p_a * p_b * dp[new_a][new_b]
    return result


# ---------------- Class matchups ----------------
def _base_stats(piece_class):
    label = piece_class if isinstance(piece_class, str) else PieceClass(piece_class).label
    return BASE_STATS[label]


def _class_config(attacker_class, defender_class, m_ab, m_ba):
    a, d = _base_stats(attacker_class), _base_stats(defender_class)
    return CombatConfig(a["hp"], a["die"], a["attack"], a["defense"],
                        d["hp"], d["die"], d["attack"], d["defense"], m_ab, m_ba)


def class_vs_class_winrate(attacker_class, defender_class, multiplier=1.0):
    """Attacker winrate between two classes' baseline stats, same multiplier both ways."""
    return calculate_win_probability(_class_config(attacker_class, defender_class, multiplier, multiplier))


def class_vs_class_winrate_asym(attacker_class, defender_class, m_ab, m_ba):
    return calculate_win_probability(_class_config(attacker_class, defender_class, m_ab, m_ba))


def custom_winrate(attacker_stats, defender_stats, attacker_types, defender_types):
    """Winrate for arbitrary stat dicts (hp/die/attack/defense) with multipliers from the type chart."""
    a, d = attacker_stats, defender_stats
    return calculate_win_probability(CombatConfig(
        a["hp"], a["die"], a["attack"], a["defense"],
        d["hp"], d["die"], d["attack"], d["defense"],
        type_multiplier(attacker_types, defender_types),
        type_multiplier(defender_types, attacker_types),
    ))


def winrate_matrix(multiplier=1.0):
    """{(attacker, defender): winrate} over every pair of classes."""
    labels = [cls.label for cls in PieceClass]
    return {(atk, dfn): class_vs_class_winrate(atk, dfn, multiplier)
            for atk in labels for dfn in labels}


def evaluate_balance_targets(targets=BALANCE_TARGETS):
    return [BalanceCheck(atk, dfn, class_vs_class_winrate(atk, dfn), low, high)
            for atk, dfn, low, high in targets]
