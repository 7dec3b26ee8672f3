"""
Move generation and check detection.

Movement rules are delegated to python-chess on a board that never holds
castling rights or an en passant square, so the generated set is exactly:
pawn pushes (double from the start rank), diagonal pawn captures,
promotions on the far rank, knight jumps, sliding rays and king steps.

Legality follows standard chess: a move is legal if, with the capture
assumed to succeed, the mover's king is not attacked afterwards. In a duel
the capture may fail, but the king-safety test stays optimistic on purpose.
"""
from typing import NamedTuple, Optional

import chess

from duel_engine.config import MOVE_RE
from duel_engine.errors import InvalidMove
from duel_engine.piece_profile import PieceClass, Position


class Move(NamedTuple):
    src: Position
    dst: Position
    is_capture: bool = False
    promotion: Optional[PieceClass] = None

    def to_chess(self) -> chess.Move:
        promo = int(self.promotion) if self.promotion is not None else None
        return chess.Move(self.src.square, self.dst.square, promotion=promo)

    def uci(self):
        return self.to_chess().uci()

    def same_target(self, other):
        """Same source, destination and promotion (the capture flag is derived, not matched)."""
        return (self.src, self.dst, self.promotion) == (other.src, other.dst, other.promotion)

    @classmethod
    def from_chess(cls, move: chess.Move, is_capture=False):
        promo = PieceClass(move.promotion) if move.promotion else None
        return cls(Position.from_square(move.from_square), Position.from_square(move.to_square),
                   is_capture, promo)


# -------------------- Parsing helpers --------------------
def parse_move(text: str) -> Move:
    """Parse UCI or prefixed-UCI text ('e2e4', 'e7e8q', 'Ng1f3') into a Move."""
    tok = text.strip()
    if not MOVE_RE.match(tok):
        raise InvalidMove(f"Invalid move format: {text!r}.")
    if tok[0].upper() in "PNBRQK" and len(tok) in (5, 6) and not tok[1].isdigit():
        tok = tok[1:]
    try:
        return Move.from_chess(chess.Move.from_uci(tok.lower()))
    except ValueError:
        raise InvalidMove(f"Invalid move format: {text!r}.") from None


# -------------------- Generation --------------------
def _convert(rules, moves):
    return [Move.from_chess(m, rules.is_capture(m)) for m in moves]


def pseudo_legal_moves(board, pos):
    """Moves of the piece on `pos` ignoring king safety."""
    piece = board.piece_at(pos)
    if piece is None:
        return []
    rules = board.rules_for(piece.side)
    return _convert(rules, rules.generate_pseudo_legal_moves(from_mask=chess.BB_SQUARES[pos.square]))


def legal_moves(board, pos):
    """Moves of the piece on `pos` that do not leave its own king attacked."""
    piece = board.piece_at(pos)
    if piece is None:
        return []
    rules = board.rules_for(piece.side)
    return _convert(rules, rules.generate_legal_moves(from_mask=chess.BB_SQUARES[pos.square]))


def all_legal_moves(board, side):
    rules = board.rules_for(side)
    return _convert(rules, rules.generate_legal_moves())


def apply_move(board, move):
    """Board after `move` with the capture taken as successful. The input board is untouched."""
    after = board.copy()
    after.move_piece(move.src, move.dst, move.promotion)
    return after


# -------------------- Check detection --------------------
def find_king(board, side):
    return board.find_king(side)


def is_square_attacked(board, pos, by_side):
    """
    True if a pseudo-legal capture of `by_side` lands on `pos`. Only squares
    holding an opposing piece can be captured, so empty squares are never attacked.
    """
    target = board.piece_at(pos)
    if target is None or target.side == by_side:
        return False
    return board.rules.is_attacked_by(by_side, pos.square)


def is_in_check(board, side):
    king = find_king(board, side)
    if king is None:
        return False
    return is_square_attacked(board, king, not side)


def is_checkmate(board, side):
    return board.rules_for(side).is_checkmate()


def is_stalemate(board, side):
    return board.rules_for(side).is_stalemate()
