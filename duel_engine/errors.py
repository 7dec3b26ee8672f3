"""
Exceptions raised by the duel engine.

Every error is raised before any game state is written, so callers can
simply catch it and ask for another command.
"""


class DuelChessError(Exception):
    """Base class for all engine errors."""

    code = "DUEL_CHESS_ERROR"

    def __init__(self, message, code=None, context=None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self):
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self):
        return {"code": self.code, "message": self.message, "context": self.context}


class InvalidMove(DuelChessError):
    """No movable piece at the source, wrong owner, or target not legal."""

    code = "INVALID_MOVE"


class NoPendingCombat(DuelChessError):
    """Combat resolution requested while no capture is pending."""

    code = "NO_PENDING_COMBAT"


class UnknownSpecies(DuelChessError):
    """Species id missing from the catalogue."""

    code = "UNKNOWN_SPECIES"
