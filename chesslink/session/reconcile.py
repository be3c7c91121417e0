"""Reconciliation of moves claimed by the remote peer.

The peer's frame is never trusted. The claimed move is replayed on the local
board, the frame that *should* describe the result is encoded locally, and
the two are compared over tag, move, outcome and board. Any difference means
the two rules engines disagree and the game cannot continue.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chesslink.config import FIELD_DELIMITER
from chesslink.networking.protocol import DecodedMessage, MessageTag
from chesslink.networking.serialization import encode_move_message, signed_span
from chesslink.rules.engine import RulesEngine
from chesslink.rules.types import GameOutcome, Move, MoveResult, PieceKind
from chesslink.session.outcome import derive_outcome

logger = logging.getLogger(__name__)

SIGNED_FIELDS = ("tag", "move", "outcome", "board")


class ProtocolViolation(Exception):
    """Data from the peer that contradicts the local game."""


@dataclass(frozen=True, slots=True)
class ReconciledMove:
    """A remote move that replayed cleanly on the local board."""
    move: Move
    outcome: GameOutcome
    frame: bytes  # locally encoded frame, identical to the peer's over the signed span


def play_move(engine: RulesEngine, move: Move) -> Move | None:
    """Apply a move, promoting to a queen when required.

    Returns the move as played (``promotion`` set by the engine, not by the
    caller) or None if it is illegal.
    """
    result = engine.apply_move(move.from_square, move.to_square)
    if result == MoveResult.ILLEGAL:
        return None
    if result == MoveResult.PROMOTION:
        engine.resolve_promotion(PieceKind.QUEEN)
    return Move(move.from_square, move.to_square, promotion=result == MoveResult.PROMOTION)


def first_mismatch(expected: bytes, received: bytes) -> tuple[str, bytes, bytes] | None:
    """Name and contents of the first signed field that differs, or None."""
    expected_span = signed_span(expected)
    received_span = signed_span(received)
    if expected_span == received_span:
        return None
    delim = FIELD_DELIMITER.encode("ascii")
    for name, ours, theirs in zip(
        SIGNED_FIELDS, expected_span.split(delim), received_span.split(delim),
    ):
        if ours != theirs:
            return name, ours, theirs
    return SIGNED_FIELDS[-1], expected_span, received_span


def reconcile(engine: RulesEngine, message: DecodedMessage) -> ReconciledMove:
    """Replay a peer's move frame on the local engine and verify it.

    Raises ProtocolViolation if the move is illegal here or if the peer's
    description of the resulting game differs from ours. The engine has
    already been advanced when a field mismatch is reported; the session is
    torn down in that case.
    """
    if message.tag != MessageTag.MOVE or message.move is None:
        raise ProtocolViolation(f"expected a move frame, got {message.tag.value}")

    claimed = message.move
    played = play_move(engine, claimed)
    if played is None:
        raise ProtocolViolation(f"peer played illegal move {claimed}")

    outcome = derive_outcome(engine)
    expected = encode_move_message(played, outcome, engine)
    mismatch = first_mismatch(expected, message.raw)
    if mismatch is not None:
        field, ours, theirs = mismatch
        logger.error(
            "DESYNC on %s field after %s! Ours: %s, peer's: %s",
            field, played, ours.decode("ascii"), theirs.decode("ascii", "replace"),
        )
        raise ProtocolViolation(f"{field} field disagrees after {played}")

    return ReconciledMove(played, outcome, expected)
