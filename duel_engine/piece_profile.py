import copy
import enum
from typing import NamedTuple

import chess

from duel_engine.config import BASE_STATS, DIE_PROGRESSION, EVOLUTION_HP_STEP, MAX_EVOLUTION_STAGE


class PieceClass(enum.IntEnum):
    """Chess role of a piece. Values match python-chess piece types."""
    PAWN = chess.PAWN
    KNIGHT = chess.KNIGHT
    BISHOP = chess.BISHOP
    ROOK = chess.ROOK
    QUEEN = chess.QUEEN
    KING = chess.KING

    @property
    def label(self):
        return self.name.capitalize()

    @classmethod
    def from_label(cls, label):
        return cls[label.upper()]


class Position(NamedTuple):
    """Board coordinate. Row 0 is rank 8 (black's back rank), col 0 is file a."""
    row: int
    col: int

    @property
    def square(self):
        return chess.square(self.col, 7 - self.row)

    @property
    def name(self):
        return chess.square_name(self.square)

    def in_bounds(self):
        return 0 <= self.row < 8 and 0 <= self.col < 8

    @classmethod
    def from_square(cls, square):
        return cls(7 - chess.square_rank(square), chess.square_file(square))

    @classmethod
    def from_name(cls, name):
        return cls.from_square(chess.parse_square(name.lower()))


# ---------------- Stat rules ----------------
def upgrade_die(die):
    """Next die in the 6 -> 8 -> 10 -> 12 progression; the largest die stays put."""
    if die not in DIE_PROGRESSION or die == DIE_PROGRESSION[-1]:
        return die
    return DIE_PROGRESSION[DIE_PROGRESSION.index(die) + 1]


def stats_with_evolution(piece_class, stage=0, species_mod=0, mod_target="defense",
                         king_defense_penalty=0):
    """
    Combat stats of a class at an evolution stage.
    Only pawns evolve (+4 HP and one die step per stage). The species modifier
    goes to attack or defense, and a king may carry a species defense penalty.
    Attack and defense are clamped at zero.
    """
    piece_class = PieceClass(piece_class)
    stats = dict(BASE_STATS[piece_class.label])

    if piece_class == PieceClass.PAWN:
        for _ in range(min(stage, MAX_EVOLUTION_STAGE)):
            stats["hp"] += EVOLUTION_HP_STEP
            stats["die"] = upgrade_die(stats["die"])

    if mod_target == "attack":
        stats["attack"] += species_mod
    else:
        stats["defense"] += species_mod

    if piece_class == PieceClass.KING:
        stats["defense"] -= king_defense_penalty

    stats["attack"] = max(0, stats["attack"])
    stats["defense"] = max(0, stats["defense"])
    return stats


class Piece:
    """A species fighting in a chess role, with its combat stats and square."""

    def __init__(self, piece_id, species_id, piece_class, side, stats,
                 species_mod=0, position=None):
        self.id = piece_id
        self.species_id = species_id
        self.piece_class = PieceClass(piece_class)
        self.side = side
        self.max_hp = stats["hp"]
        self.current_hp = stats["hp"]
        self.attack = max(0, stats["attack"])
        self.defense = max(0, stats["defense"])
        self.die = stats["die"]
        self.stage = 0
        self.combats_won = 0
        self.species_mod = species_mod
        self.position = position

    def to_chess(self) -> chess.Piece:
        return chess.Piece(int(self.piece_class), self.side)

    def symbol(self):
        return self.to_chess().symbol()

    def apply_stats(self, stats):
        self.max_hp = stats["hp"]
        self.attack = max(0, stats["attack"])
        self.defense = max(0, stats["defense"])
        self.die = max(self.die, stats["die"])

    def copy(self):
        return copy.copy(self)

    def __repr__(self):
        where = self.position.name if self.position else "off-board"
        return (f"<Piece {self.id} {chess.COLOR_NAMES[self.side]} {self.piece_class.label} "
                f"#{self.species_id} {self.current_hp}/{self.max_hp}hp d{self.die} @ {where}>")
