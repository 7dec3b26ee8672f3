import enum
import itertools
import logging
from typing import NamedTuple, Optional

import chess

from duel_engine.board import Board
from duel_engine.combat import ATTACKER, CombatantInfo, apply_victory, resolve_combat
from duel_engine.config import BACK_RANK_ORDER
from duel_engine.errors import InvalidMove, NoPendingCombat
from duel_engine.moves import (Move, all_legal_moves, is_checkmate, is_in_check, is_stalemate,
                               legal_moves, parse_move)
from duel_engine.piece_profile import Piece, PieceClass, Position, stats_with_evolution

logger = logging.getLogger(__name__)


class GamePhase(str, enum.Enum):
    PLAYING = "playing"
    COMBAT = "combat-pending"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"

    @property
    def is_terminal(self):
        return self in (GamePhase.CHECKMATE, GamePhase.STALEMATE)


class TeamSlot(NamedTuple):
    species_id: int
    piece_class: PieceClass


class PendingCombat(NamedTuple):
    attacker: Piece
    defender: Piece
    move: Move


class GameState:
    """Everything about one game. Transitions return a new state and never touch the old one."""

    def __init__(self, board, active_side=chess.WHITE, phase=GamePhase.PLAYING, move_history=None,
                 turn_number=1, pending_combat=None, last_combat_result=None, winner=None):
        self.board = board
        self.active_side = active_side
        self.phase = phase
        self.move_history = list(move_history or [])
        self.turn_number = turn_number
        self.pending_combat: Optional[PendingCombat] = pending_combat
        self.last_combat_result = last_combat_result
        self.winner = winner

    def copy(self):
        return GameState(self.board.copy(), self.active_side, self.phase, self.move_history,
                         self.turn_number, self.pending_combat, self.last_combat_result, self.winner)

    def __repr__(self):
        return (f"<GameState turn {self.turn_number} {chess.COLOR_NAMES[self.active_side]} "
                f"to move, {self.phase.value}>")


# ---------------- Setup ----------------
def create_piece(slot, side, position, catalogue, piece_id):
    """Build a piece from a team slot. Raises UnknownSpecies for ids missing from the catalogue."""
    species = catalogue.get(slot.species_id)
    cls = catalogue.classification(slot.species_id)
    piece_class = PieceClass(slot.piece_class)
    stats = stats_with_evolution(piece_class, 0, cls.species_mod, cls.target,
                                 species.king_defense_penalty)
    return Piece(piece_id, slot.species_id, piece_class, side, stats, cls.species_mod, position)


def setup_board(white_slots, black_slots, catalogue):
    """
    Place both teams. Back rank follows BACK_RANK_ORDER from file a, taking
    each class's slots in team order and skipping classes the team lacks;
    pawns fill the next rank from file a (eight at most).
    """
    board = Board()
    ids = itertools.count(1)

    for side, back_row, pawn_row, slots in ((chess.WHITE, 7, 6, white_slots),
                                           (chess.BLACK, 0, 1, black_slots)):
        queues = {cls: [s for s in slots if PieceClass(s.piece_class) == cls] for cls in PieceClass}
        back = []
        for label in BACK_RANK_ORDER:
            queue = queues[PieceClass.from_label(label)]
            if queue:
                back.append(queue.pop(0))
        for col, slot in enumerate(back):
            pos = Position(back_row, col)
            board.place(create_piece(slot, side, pos, catalogue, f"piece_{next(ids)}"), pos)
        for col, slot in enumerate(queues[PieceClass.PAWN][:8]):
            pos = Position(pawn_row, col)
            board.place(create_piece(slot, side, pos, catalogue, f"piece_{next(ids)}"), pos)

    return board


def create_game(white_slots, black_slots, catalogue):
    return GameState(setup_board(white_slots, black_slots, catalogue))


# ---------------- Transitions ----------------
def _find_legal(state, move):
    """Return the generated legal move matching `move`, or raise InvalidMove."""
    if not (move.src.in_bounds() and move.dst.in_bounds()):
        raise InvalidMove("Move leaves the board.", context={"src": move.src, "dst": move.dst})
    if state.phase != GamePhase.PLAYING:
        raise InvalidMove(f"Cannot move while the game is {state.phase.value}.",
                          context={"move": move.uci()})
    piece = state.board.piece_at(move.src)
    if piece is None:
        raise InvalidMove(f"No piece at {move.src.name}.", context={"move": move.uci()})
    if piece.side != state.active_side:
        raise InvalidMove(f"The piece at {move.src.name} belongs to "
                          f"{chess.COLOR_NAMES[piece.side]}.", context={"move": move.uci()})
    for legal in legal_moves(state.board, move.src):
        if legal.same_target(move):
            return legal
    raise InvalidMove("Illegal move.", context={"move": move.uci()})


def make_move(state, move):
    """
    Play `move` for the side to move. A quiet move is applied and the turn
    passes; a capture only opens a pending combat.
    """
    legal = _find_legal(state, move)

    if legal.is_capture:
        new = state.copy()
        new.phase = GamePhase.COMBAT
        new.pending_combat = PendingCombat(state.board.piece_at(legal.src).copy(),
                                           state.board.piece_at(legal.dst).copy(), legal)
        logger.debug("Combat declared: %s", legal.uci())
        return new

    new = state.copy()
    new.board.move_piece(legal.src, legal.dst, legal.promotion)
    return _advance_turn(new, legal)


def resolve_pending_combat(state, catalogue, rng=None):
    """Fight the pending duel, apply its outcome to the board and pass the turn."""
    if state.pending_combat is None:
        raise NoPendingCombat("No combat is pending.")

    attacker, defender, move = state.pending_combat
    result = resolve_combat(CombatantInfo.from_piece(attacker, catalogue.get(attacker.species_id)),
                            CombatantInfo.from_piece(defender, catalogue.get(defender.species_id)),
                            rng)

    new = state.copy()
    board = new.board
    if result.winner == ATTACKER:
        winner = board.move_piece(move.src, move.dst, move.promotion)
        apply_victory(winner, result.attacker_hp_remaining, catalogue)
    else:
        board.remove(move.src)
        winner = board.piece_at(move.dst)
        apply_victory(winner, result.defender_hp_remaining, catalogue)

    new.pending_combat = None
    new.last_combat_result = result
    return _advance_turn(new, move)


def _advance_turn(state, move):
    """Swap sides, bump the turn after black and settle terminal conditions (in place)."""
    mover = state.active_side
    state.active_side = not mover
    state.move_history.append(move)
    if mover == chess.BLACK:
        state.turn_number += 1

    board, side = state.board, state.active_side
    state.phase, state.winner = GamePhase.PLAYING, None
    if is_checkmate(board, side):
        state.phase, state.winner = GamePhase.CHECKMATE, mover
    elif is_stalemate(board, side):
        state.phase = GamePhase.STALEMATE

    # A king lost in combat ends the game whatever the check test says
    if not board.has_king(chess.WHITE):
        state.phase, state.winner = GamePhase.CHECKMATE, chess.BLACK
    elif not board.has_king(chess.BLACK):
        state.phase, state.winner = GamePhase.CHECKMATE, chess.WHITE

    if state.phase.is_terminal:
        logger.info("Game over on turn %d: %s (winner: %s)", state.turn_number, state.phase.value,
                    chess.COLOR_NAMES[state.winner] if state.winner is not None else "none")
    return state


class DuelChess:
    """Controller owning one game: routes commands through the two transitions."""

    def __init__(self, white_slots, black_slots, catalogue, rng=None):
        self.catalogue = catalogue
        self.rng = rng
        self.state = create_game(white_slots, black_slots, catalogue)

    @classmethod
    def from_state(cls, state, catalogue, rng=None):
        game = cls.__new__(cls)
        game.catalogue, game.rng, game.state = catalogue, rng, state
        return game

    # ---------------- Main Game Flow ----------------
    def make_move(self, move):
        """Accepts a Move or UCI text ('e2e4', 'Ng1f3', 'e7e8q')."""
        if isinstance(move, str):
            move = parse_move(move)
        try:
            self.state = make_move(self.state, move)
        except InvalidMove as e:
            logger.warning("Rejected move: %s", e)
            raise
        return self.state

    def resolve_combat(self):
        self.state = resolve_pending_combat(self.state, self.catalogue, self.rng)
        return self.state

    # ---------------- Queries ----------------
    @property
    def board(self):
        return self.state.board

    @property
    def phase(self):
        return self.state.phase

    def legal_moves(self, pos=None):
        if pos is None:
            return all_legal_moves(self.board, self.state.active_side)
        if isinstance(pos, str):
            pos = Position.from_name(pos)
        return legal_moves(self.board, pos)

    def in_check(self, side=None):
        return is_in_check(self.board, self.state.active_side if side is None else side)

    def is_over(self):
        return self.state.phase.is_terminal
