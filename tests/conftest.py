"""
Shared pytest fixtures for duel_engine tests.

Game state fixtures are function-scoped so every test gets its own board.
"""
import os
import sys

import chess
import pytest

# Make the package importable when running tests from a checkout
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from duel_engine import (Board, GameState, PieceClass, Position, SpeciesCatalogue,  # noqa: E402
                         TeamSlot, create_piece)

CYCLE_TYPES = (["Normal"], ["Fire"], ["Water"], ["Grass", "Poison"], ["Electric"], ["Rock", "Ground"])

GHOST_ID = 90
BOOSTED_ID = 91       # +1 defense from the classifier
WEAKENED_ID = 92      # -1 attack from the classifier
FRAIL_KING_ID = 93    # carries a king defense penalty


class FixedRolls:
    """Stand-in RNG: replays a list of rolls, then keeps returning `default` (or the max face)."""

    def __init__(self, rolls=(), default=None):
        self.rolls = list(rolls)
        self.default = default
        self.calls = []

    def randint(self, low, high):
        self.calls.append((low, high))
        if self.rolls:
            return self.rolls.pop(0)
        return high if self.default is None else self.default


@pytest.fixture
def catalogue():
    records = [{"id": i, "name": f"Species{i}", "types": CYCLE_TYPES[i % len(CYCLE_TYPES)]}
               for i in range(1, 41)]
    records += [
        {"id": GHOST_ID, "name": "Phantom", "types": ["Ghost"]},
        {"id": BOOSTED_ID, "name": "Shellback", "types": ["Water"],
         "species_mod": 1, "species_mod_target": "defense"},
        {"id": WEAKENED_ID, "name": "Brute", "types": ["Fighting"],
         "species_mod": -1, "species_mod_target": "attack"},
        {"id": FRAIL_KING_ID, "name": "Psion", "types": ["Psychic"], "king_defense_penalty": 1},
    ]
    return SpeciesCatalogue.from_records(records)


def make_team(first_id):
    classes = ([PieceClass.PAWN] * 8 + [PieceClass.ROOK, PieceClass.KNIGHT, PieceClass.BISHOP,
               PieceClass.QUEEN, PieceClass.KING, PieceClass.BISHOP, PieceClass.KNIGHT,
               PieceClass.ROOK])
    return [TeamSlot(first_id + i, cls) for i, cls in enumerate(classes)]


@pytest.fixture
def white_team():
    return make_team(1)


@pytest.fixture
def black_team():
    return make_team(17)


@pytest.fixture
def place(catalogue):
    """place(board, "e4", PieceClass.KNIGHT, chess.WHITE, species_id=1, hp=None) -> Piece"""
    counter = {"n": 0}

    def _place(board, square, piece_class, side, species_id=1, hp=None):
        counter["n"] += 1
        pos = Position.from_name(square)
        piece = create_piece(TeamSlot(species_id, piece_class), side, pos, catalogue,
                             f"test_{counter['n']}")
        if hp is not None:
            piece.current_hp = hp
        board.place(piece, pos)
        return piece

    return _place


@pytest.fixture
def empty_board():
    return Board()


def state_with(board, side=chess.WHITE):
    return GameState(board, active_side=side)
