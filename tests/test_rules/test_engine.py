"""Tests for the python-chess rules adapter and outcome derivation."""

import pytest

from chesslink.rules.engine import PromotionError, RulesEngine
from chesslink.rules.types import (
    GameOutcome,
    MoveResult,
    Piece,
    PieceColor,
    PieceKind,
    Square,
)
from chesslink.session.outcome import derive_outcome

PROMOTION_FEN = "8/P7/8/8/8/8/8/k6K w - - 0 1"
STALEMATE_FEN = "7k/5Q2/6K1/8/8/8/8/8 b - - 0 1"


def _sq(name: str) -> Square:
    return Square(ord(name[0]) - ord("a"), int(name[1]) - 1)


def _play(engine: RulesEngine, *moves: str) -> None:
    for uci in moves:
        assert engine.apply_move(_sq(uci[:2]), _sq(uci[2:4])) == MoveResult.NORMAL, uci


class TestTypes:
    def test_on_board(self):
        assert Square(0, 0).on_board
        assert Square(7, 7).on_board
        assert not Square(8, 0).on_board
        assert not Square(0, -1).on_board

    def test_piece_letters(self):
        assert Piece(PieceKind.KNIGHT, PieceColor.WHITE).letter == "N"
        assert Piece(PieceKind.KNIGHT, PieceColor.BLACK).letter == "n"
        assert Piece.from_letter("q") == Piece(PieceKind.QUEEN, PieceColor.BLACK)
        assert Piece.from_letter("K") == Piece(PieceKind.KING, PieceColor.WHITE)

    def test_unknown_letter(self):
        with pytest.raises(KeyError):
            Piece.from_letter("x")


class TestStartingPosition:
    def test_kings(self, engine):
        assert engine.piece_at(_sq("e1")) == Piece(PieceKind.KING, PieceColor.WHITE)
        assert engine.piece_at(_sq("e8")) == Piece(PieceKind.KING, PieceColor.BLACK)
        assert engine.piece_at(_sq("e4")) is None

    def test_white_to_move(self, engine):
        assert engine.turn == PieceColor.WHITE
        assert derive_outcome(engine) == GameOutcome.IN_PROGRESS

    def test_placement_has_32_pieces(self, engine):
        assert len(engine.placement()) == 32


class TestLegalDestinations:
    def test_pawn(self, engine):
        assert engine.legal_destinations(_sq("e2")) == {_sq("e3"), _sq("e4")}

    def test_knight(self, engine):
        assert engine.legal_destinations(_sq("b1")) == {_sq("a3"), _sq("c3")}

    def test_empty_square(self, engine):
        assert engine.legal_destinations(_sq("e4")) == set()

    def test_opponent_piece_not_to_move(self, engine):
        assert engine.legal_destinations(_sq("e7")) == set()

    def test_off_board(self, engine):
        assert engine.legal_destinations(Square(9, 9)) == set()


class TestApplyMove:
    def test_normal_move(self, engine):
        assert engine.apply_move(_sq("e2"), _sq("e4")) == MoveResult.NORMAL
        assert engine.piece_at(_sq("e4")) == Piece(PieceKind.PAWN, PieceColor.WHITE)
        assert engine.turn == PieceColor.BLACK

    def test_illegal_move_leaves_board(self, engine):
        before = engine.fen()
        assert engine.apply_move(_sq("a2"), _sq("a5")) == MoveResult.ILLEGAL
        assert engine.fen() == before

    def test_off_board_is_illegal(self, engine):
        assert engine.apply_move(Square(4, 1), Square(4, 8)) == MoveResult.ILLEGAL

    def test_castling(self, engine):
        _play(engine, "e2e4", "e7e5", "g1f3", "b8c6", "f1c4", "g8f6")
        assert engine.apply_move(_sq("e1"), _sq("g1")) == MoveResult.NORMAL
        assert engine.piece_at(_sq("f1")) == Piece(PieceKind.ROOK, PieceColor.WHITE)


class TestPromotion:
    def test_two_step_promotion(self):
        engine = RulesEngine.from_fen(PROMOTION_FEN)
        assert engine.apply_move(_sq("a7"), _sq("a8")) == MoveResult.PROMOTION
        assert engine.promotion_pending
        assert engine.piece_at(_sq("a8")) is None
        assert engine.turn == PieceColor.WHITE

        engine.resolve_promotion(PieceKind.QUEEN)
        assert not engine.promotion_pending
        assert engine.piece_at(_sq("a8")) == Piece(PieceKind.QUEEN, PieceColor.WHITE)
        assert engine.turn == PieceColor.BLACK

    def test_resolve_without_pending(self, engine):
        with pytest.raises(PromotionError):
            engine.resolve_promotion(PieceKind.QUEEN)

    def test_cannot_promote_to_king(self):
        engine = RulesEngine.from_fen(PROMOTION_FEN)
        engine.apply_move(_sq("a7"), _sq("a8"))
        with pytest.raises(PromotionError):
            engine.resolve_promotion(PieceKind.KING)

    def test_move_while_pending(self):
        engine = RulesEngine.from_fen(PROMOTION_FEN)
        engine.apply_move(_sq("a7"), _sq("a8"))
        with pytest.raises(PromotionError):
            engine.apply_move(_sq("h1"), _sq("h2"))


class TestOutcome:
    def test_black_wins_fools_mate(self, engine):
        _play(engine, "f2f3", "e7e5", "g2g4", "d8h4")
        assert engine.is_checkmate()
        assert derive_outcome(engine) == GameOutcome.BLACK_WINS

    def test_white_wins_scholars_mate(self, engine):
        _play(engine, "e2e4", "e7e5", "f1c4", "b8c6", "d1h5", "g8f6", "h5f7")
        assert derive_outcome(engine) == GameOutcome.WHITE_WINS

    def test_stalemate_is_draw(self):
        engine = RulesEngine.from_fen(STALEMATE_FEN)
        assert engine.is_stalemate()
        assert not engine.is_checkmate()
        assert derive_outcome(engine) == GameOutcome.DRAW
