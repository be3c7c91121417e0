"""Session: one game between the local player and one remote peer.

The session owns the authoritative local board, the turn state machine and
the transport. The front end drives it once per frame:

    outcome = session.submit_local_move(move)   # when the user moves
    event = session.poll()                      # every frame, never blocks

A local move completes its whole transition (apply, encode, send, flip the
turn) inside submit_local_move, so poll() never sees a half-made move.

Every failure ends the session with a single SessionTerminated event. The
session never reconnects or retries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto

from chesslink.networking.peer import Transport, TransportClosed, TransportError
from chesslink.networking.protocol import CodecError, MessageTag
from chesslink.networking.serialization import (
    decode_message,
    encode_move_message,
    encode_quit_message,
)
from chesslink.rules.engine import RulesEngine
from chesslink.rules.types import GameOutcome, Move, PieceColor, Square
from chesslink.session.outcome import derive_outcome
from chesslink.session.reconcile import ProtocolViolation, play_move, reconcile
from chesslink.session.turn import TurnOrderError, TurnState, TurnStateMachine

logger = logging.getLogger(__name__)


class TerminationReason(Enum):
    REMOTE_QUIT = auto()         # peer sent ChessQUIT
    LOCAL_QUIT = auto()          # local player left
    PROTOCOL_VIOLATION = auto()  # illegal move, desync, out-of-turn or garbled frame
    TRANSPORT_ERROR = auto()     # send/receive failed or peer disconnected


class MoveOutcome(Enum):
    """Result of submit_local_move."""
    ACCEPTED = auto()
    PROMOTED = auto()        # accepted; pawn promoted to a queen
    ILLEGAL = auto()         # rejected by the rules engine, nothing sent
    OUT_OF_TURN = auto()     # waiting for the peer, nothing sent
    SESSION_CLOSED = auto()  # session is over (or ended while sending)


@dataclass(frozen=True, slots=True)
class MoveApplied:
    """The peer's move was reconciled and applied to the local board."""
    move: Move
    outcome: GameOutcome


@dataclass(frozen=True, slots=True)
class SessionTerminated:
    reason: TerminationReason
    detail: str = ""


SessionEvent = MoveApplied | SessionTerminated


class Session:
    """Move synchronization for one side of a two-player game."""

    def __init__(
        self,
        transport: Transport,
        local_color: PieceColor,
        engine: RulesEngine | None = None,
    ) -> None:
        self._transport = transport
        self._engine = engine if engine is not None else RulesEngine.starting_position()
        self._local_color = local_color
        self._turn = TurnStateMachine.for_color(local_color, to_move=self._engine.turn)
        self._outcome = derive_outcome(self._engine)
        self._termination: SessionTerminated | None = None
        self._undelivered: SessionTerminated | None = None
        self.last_move: Move | None = None

    @property
    def local_color(self) -> PieceColor:
        return self._local_color

    @property
    def engine(self) -> RulesEngine:
        return self._engine

    @property
    def turn_state(self) -> TurnState:
        return self._turn.state

    @property
    def outcome(self) -> GameOutcome:
        return self._outcome

    @property
    def termination(self) -> SessionTerminated | None:
        return self._termination

    @property
    def is_active(self) -> bool:
        return self._termination is None

    def legal_destinations(self, square: Square) -> set[Square]:
        """Where the local player's piece on ``square`` may go right now."""
        if not (self.is_active and self._turn.is_local_turn):
            return set()
        piece = self._engine.piece_at(square)
        if piece is None or piece.color != self._local_color:
            return set()
        return self._engine.legal_destinations(square)

    # --- Local moves ---

    def submit_local_move(self, move: Move) -> MoveOutcome:
        """Play a move for the local side and send it to the peer."""
        if not self.is_active:
            return MoveOutcome.SESSION_CLOSED
        if not self._turn.is_local_turn:
            logger.debug("Ignoring %s: waiting for the peer", move)
            return MoveOutcome.OUT_OF_TURN
        self._check_turn_invariant()

        played = play_move(self._engine, move)
        if played is None:
            logger.debug("Illegal local move %s", move)
            return MoveOutcome.ILLEGAL

        self._outcome = derive_outcome(self._engine)
        frame = encode_move_message(played, self._outcome, self._engine)
        try:
            self._transport.send(frame)
        except TransportError as e:
            logger.warning("Send failed: %s", e)
            self._undelivered = self._terminate(TerminationReason.TRANSPORT_ERROR, str(e))
            return MoveOutcome.SESSION_CLOSED

        self._turn.local_move_sent()
        self.last_move = played
        logger.info("Sent move %s (%s)", played, self._outcome.name)
        return MoveOutcome.PROMOTED if played.promotion else MoveOutcome.ACCEPTED

    # --- Remote moves ---

    def poll(self) -> SessionEvent | None:
        """Process at most one incoming frame. Never blocks."""
        if self._undelivered is not None:
            event, self._undelivered = self._undelivered, None
            return event
        if not self.is_active:
            return None

        try:
            self._transport.poll()
            frame = self._transport.try_receive()
        except TransportClosed:
            return self._terminate(TerminationReason.TRANSPORT_ERROR, "peer disconnected")
        except TransportError as e:
            return self._terminate(TerminationReason.TRANSPORT_ERROR, str(e))
        if frame is None:
            return None

        try:
            message = decode_message(frame)
        except CodecError as e:
            return self.abort(detail=f"malformed frame: {e}")

        if message.tag == MessageTag.QUIT:
            return self._terminate(TerminationReason.REMOTE_QUIT, "opponent quit")
        if self._turn.is_local_turn:
            return self.abort(detail="peer moved out of turn")

        self._check_turn_invariant()
        try:
            reconciled = reconcile(self._engine, message)
        except ProtocolViolation as e:
            return self.abort(detail=str(e))

        self._turn.remote_move_reconciled()
        self._outcome = reconciled.outcome
        self.last_move = reconciled.move
        logger.info("Peer played %s (%s)", reconciled.move, reconciled.outcome.name)
        return MoveApplied(reconciled.move, reconciled.outcome)

    # --- Termination ---

    def abort(
        self,
        reason: TerminationReason = TerminationReason.PROTOCOL_VIOLATION,
        detail: str = "",
    ) -> SessionTerminated:
        """Tell the peer we are quitting (best-effort) and end the session."""
        if self._termination is not None:
            return self._termination
        if reason == TerminationReason.PROTOCOL_VIOLATION:
            logger.error("Protocol violation: %s", detail)
        self._send_quit()
        return self._terminate(reason, detail)

    def quit(self) -> SessionTerminated:
        """The local player leaves the game."""
        return self.abort(TerminationReason.LOCAL_QUIT, "you left the game")

    def _send_quit(self) -> None:
        try:
            self._transport.send(encode_quit_message())
        except TransportError as e:
            logger.warning("Could not notify peer: %s", e)

    def _terminate(self, reason: TerminationReason, detail: str) -> SessionTerminated:
        self._termination = SessionTerminated(reason, detail)
        logger.info("Session ended: %s %s", reason.name, detail)
        return self._termination

    def _check_turn_invariant(self) -> None:
        engine_local = self._engine.turn == self._local_color
        if engine_local != self._turn.is_local_turn:
            raise TurnOrderError(
                f"turn state {self._turn.state.name} disagrees with engine "
                f"({self._engine.turn.name} to move)"
            )
