"""Turn ownership: who may move next.

LOCAL_TO_MOVE -> (local move sent) -> AWAITING_REMOTE
AWAITING_REMOTE -> (remote move reconciled) -> LOCAL_TO_MOVE

Out-of-turn local input is filtered by the session before it reaches this
machine; a transition from the wrong state is a programming error.
"""

from __future__ import annotations

from enum import Enum, auto

from chesslink.rules.types import PieceColor


class TurnState(Enum):
    LOCAL_TO_MOVE = auto()
    AWAITING_REMOTE = auto()


class TurnOrderError(RuntimeError):
    """A turn transition was requested from the wrong state."""


class TurnStateMachine:
    def __init__(self, initial: TurnState) -> None:
        self._state = initial

    @classmethod
    def for_color(
        cls, local_color: PieceColor, to_move: PieceColor = PieceColor.WHITE,
    ) -> TurnStateMachine:
        """Initial state for a side, given which side moves first."""
        if local_color == to_move:
            return cls(TurnState.LOCAL_TO_MOVE)
        return cls(TurnState.AWAITING_REMOTE)

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def is_local_turn(self) -> bool:
        return self._state == TurnState.LOCAL_TO_MOVE

    def local_move_sent(self) -> None:
        if self._state != TurnState.LOCAL_TO_MOVE:
            raise TurnOrderError("local move sent while awaiting the remote side")
        self._state = TurnState.AWAITING_REMOTE

    def remote_move_reconciled(self) -> None:
        if self._state != TurnState.AWAITING_REMOTE:
            raise TurnOrderError("remote move accepted during the local turn")
        self._state = TurnState.LOCAL_TO_MOVE
