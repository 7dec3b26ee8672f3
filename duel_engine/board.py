import chess

from duel_engine.piece_profile import PieceClass, Position


class Board:
    """
    8x8 board: a python-chess board for occupancy and rules plus the
    per-square Piece records. Every mutator keeps the two in lockstep and
    updates each piece's stored position.
    """

    def __init__(self):
        # Empty board: no castling rights, no en passant square
        self.rules = chess.Board(None)
        self.pieces = {}

    # ---------------- Queries ----------------
    def piece_at(self, pos):
        return self.pieces.get(pos.square)

    def pieces_of(self, side):
        return [p for p in self.pieces.values() if p.side == side]

    def find_king(self, side):
        sq = self.rules.king(side)
        return Position.from_square(sq) if sq is not None else None

    def has_king(self, side):
        return self.rules.king(side) is not None

    def rules_for(self, side) -> chess.Board:
        """Copy of the rules board with `side` to move."""
        board = self.rules.copy(stack=False)
        board.turn = side
        return board

    def __iter__(self):
        return iter(self.pieces.values())

    def __len__(self):
        return len(self.pieces)

    # ---------------- Mutators ----------------
    def place(self, piece, pos):
        if not pos.in_bounds():
            raise ValueError(f"Position {pos} is off the board.")
        if pos.square in self.pieces:
            raise ValueError(f"Square {pos.name} is already occupied.")
        self.rules.set_piece_at(pos.square, piece.to_chess())
        self.pieces[pos.square] = piece
        piece.position = pos

    def remove(self, pos):
        """Take the piece off `pos` and return it (off-board)."""
        piece = self.pieces.pop(pos.square, None)
        if piece is not None:
            self.rules.remove_piece_at(pos.square)
            piece.position = None
        return piece

    def move_piece(self, src, dst, promotion=None):
        """Move the piece on `src` to `dst`, replacing any occupant, and promote if asked."""
        piece = self.remove(src)
        if piece is None:
            raise ValueError(f"No piece on {src.name}.")
        self.remove(dst)
        if promotion is not None:
            piece.piece_class = PieceClass(promotion)
        self.place(piece, dst)
        return piece

    def copy(self):
        clone = Board()
        clone.rules = self.rules.copy(stack=False)
        clone.pieces = {sq: p.copy() for sq, p in self.pieces.items()}
        return clone

    def is_consistent(self):
        """True when piece records, their positions and the rules board all agree."""
        if self.rules.piece_map() != {sq: p.to_chess() for sq, p in self.pieces.items()}:
            return False
        ids = [p.id for p in self.pieces.values()]
        return (len(ids) == len(set(ids))
                and all(p.position is not None and p.position.square == sq
                        for sq, p in self.pieces.items()))

    def __str__(self):
        return str(self.rules)
