"""Tests for the turn state machine."""

import pytest

from chesslink.rules.types import PieceColor
from chesslink.session.turn import TurnOrderError, TurnState, TurnStateMachine


class TestInitialState:
    def test_white_moves_first(self):
        assert TurnStateMachine.for_color(PieceColor.WHITE).state == TurnState.LOCAL_TO_MOVE
        assert TurnStateMachine.for_color(PieceColor.BLACK).state == TurnState.AWAITING_REMOTE

    def test_position_with_black_to_move(self):
        machine = TurnStateMachine.for_color(PieceColor.BLACK, to_move=PieceColor.BLACK)
        assert machine.is_local_turn


class TestTransitions:
    def test_full_cycle(self):
        machine = TurnStateMachine(TurnState.LOCAL_TO_MOVE)
        machine.local_move_sent()
        assert machine.state == TurnState.AWAITING_REMOTE
        machine.remote_move_reconciled()
        assert machine.state == TurnState.LOCAL_TO_MOVE

    def test_send_while_awaiting(self):
        machine = TurnStateMachine(TurnState.AWAITING_REMOTE)
        with pytest.raises(TurnOrderError):
            machine.local_move_sent()
        assert machine.state == TurnState.AWAITING_REMOTE

    def test_reconcile_during_local_turn(self):
        machine = TurnStateMachine(TurnState.LOCAL_TO_MOVE)
        with pytest.raises(TurnOrderError):
            machine.remote_move_reconciled()
        assert machine.state == TurnState.LOCAL_TO_MOVE
