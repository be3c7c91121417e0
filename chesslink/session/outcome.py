"""Game result as seen by one side's rules engine."""

from __future__ import annotations

from chesslink.rules.engine import RulesEngine
from chesslink.rules.types import GameOutcome, PieceColor


def derive_outcome(engine: RulesEngine) -> GameOutcome:
    """Outcome after the last move.

    In a checkmate the side to move has lost, so the winner is its opponent.
    """
    if engine.is_checkmate():
        if engine.turn == PieceColor.BLACK:
            return GameOutcome.WHITE_WINS
        return GameOutcome.BLACK_WINS
    if engine.is_stalemate():
        return GameOutcome.DRAW
    return GameOutcome.IN_PROGRESS
