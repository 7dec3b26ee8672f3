import logging
import math
import random
from typing import NamedTuple

from duel_engine.config import GUARD_BONUS, MAX_EVOLUTION_STAGE
from duel_engine.piece_profile import PieceClass, stats_with_evolution
from duel_engine.type_chart import type_multiplier

logger = logging.getLogger(__name__)

ATTACKER = "attacker"
DEFENDER = "defender"


class CombatantInfo(NamedTuple):
    """What the duel needs to know about one side."""
    name: str
    types: tuple
    hp: int
    attack: int
    defense: int
    die: int

    @classmethod
    def from_piece(cls, piece, species):
        return cls(species.name, tuple(species.types), piece.current_hp,
                   piece.attack, piece.defense, piece.die)


class CombatLogEntry(NamedTuple):
    turn: int
    actor: str
    roll: int
    damage: int
    target_hp_after: int


class CombatResult:
    """Outcome of one duel: winner, the blow-by-blow log and the HP left on both sides."""

    def __init__(self, winner, log, attacker_hp_remaining, defender_hp_remaining,
                 attacker_multiplier=1.0, defender_multiplier=1.0):
        self.winner = winner
        self.log = log
        self.attacker_hp_remaining = attacker_hp_remaining
        self.defender_hp_remaining = defender_hp_remaining
        self.attacker_multiplier = attacker_multiplier
        self.defender_multiplier = defender_multiplier

    @property
    def rounds(self):
        return self.log[-1].turn if self.log else 0

    def __repr__(self):
        return (f"<CombatResult {self.winner} wins after {self.rounds} rounds "
                f"({self.attacker_hp_remaining} vs {self.defender_hp_remaining} hp)>")


# ---------------- Damage ----------------
def calculate_damage(roll, attack, defense, multiplier, guard=False):
    """
    Damage of a single hit: floor(max(0, roll + attack - defense) * multiplier).
    A guarded hit (first one the target takes) counts the target's defense one higher.
    """
    effective_defense = defense + GUARD_BONUS if guard else defense
    return math.floor(max(0, roll + attack - effective_defense) * multiplier)


def roll_die(sides, rng=None):
    rng = rng or random
    return rng.randint(1, sides)


def resolve_combat(attacker, defender, rng=None):
    """
    Simulate a full duel. The attacker strikes first every round and a
    defender knocked to 0 HP does not strike back. Each side's guard
    softens only the first hit it receives.
    """
    m_attacker = type_multiplier(attacker.types, defender.types)
    m_defender = type_multiplier(defender.types, attacker.types)
    a_hp, d_hp = attacker.hp, defender.hp
    attacker_guard = defender_guard = True
    log = []
    turn = 0

    # Neither side can ever hurt the other: the attacker cannot win
    if (calculate_damage(attacker.die, attacker.attack, defender.defense, m_attacker) == 0
            and calculate_damage(defender.die, defender.attack, attacker.defense, m_defender) == 0):
        result = CombatResult(DEFENDER, log, a_hp, d_hp, m_attacker, m_defender)
        logger.info("%s attacked %s: deadlock, defender holds", attacker.name, defender.name)
        return result

    while a_hp > 0 and d_hp > 0:
        turn += 1

        roll = roll_die(attacker.die, rng)
        dmg = calculate_damage(roll, attacker.attack, defender.defense, m_attacker, defender_guard)
        defender_guard = False
        d_hp -= dmg
        log.append(CombatLogEntry(turn, attacker.name, roll, dmg, max(0, d_hp)))
        logger.debug("Round %d: %s rolls %d for %d damage (%s at %d hp)",
                     turn, attacker.name, roll, dmg, defender.name, max(0, d_hp))
        if d_hp <= 0:
            break

        roll = roll_die(defender.die, rng)
        dmg = calculate_damage(roll, defender.attack, attacker.defense, m_defender, attacker_guard)
        attacker_guard = False
        a_hp -= dmg
        log.append(CombatLogEntry(turn, defender.name, roll, dmg, max(0, a_hp)))
        logger.debug("Round %d: %s rolls %d for %d damage (%s at %d hp)",
                     turn, defender.name, roll, dmg, attacker.name, max(0, a_hp))

    winner = ATTACKER if d_hp <= 0 else DEFENDER
    result = CombatResult(winner, log, max(0, a_hp), max(0, d_hp), m_attacker, m_defender)
    logger.info("%s attacked %s: %s", attacker.name, defender.name, result)
    return result


# ---------------- Victory & evolution ----------------
def apply_victory(piece, hp_remaining, catalogue):
    """
    Record a won duel on `piece`. A pawn evolves on each of its first two
    wins: stage +1, stats recomputed for the new stage and HP fully healed.
    """
    piece.current_hp = hp_remaining
    piece.combats_won += 1

    if piece.piece_class != PieceClass.PAWN:
        return piece
    if piece.combats_won <= MAX_EVOLUTION_STAGE and piece.stage < MAX_EVOLUTION_STAGE \
            and piece.combats_won > piece.stage:
        piece.stage += 1
        cls = catalogue.classification(piece.species_id)
        piece.apply_stats(stats_with_evolution(PieceClass.PAWN, piece.stage,
                                               cls.species_mod, cls.target))
        piece.current_hp = piece.max_hp
        logger.info("Piece %s evolved to stage %d (d%d, %d hp)",
                    piece.id, piece.stage, piece.die, piece.max_hp)
    return piece
