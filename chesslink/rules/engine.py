"""Rules engine adapter over python-chess.

The synchronization core only needs a narrow view of the rules: piece
lookup, legal destinations, applying a move, resolving a pending promotion
and the checkmate/stalemate predicates. Everything else (castling, en
passant, check detection) is left to python-chess.

Applying a pawn move to the last rank is a two-step operation:
``apply_move`` returns ``MoveResult.PROMOTION`` and leaves the board
untouched until ``resolve_promotion`` names the new piece.
"""

from __future__ import annotations

import chess

from chesslink.rules.types import (
    MoveResult,
    Piece,
    PieceColor,
    PieceKind,
    Placement,
    Square,
)

PROMOTION_KINDS = {PieceKind.KNIGHT, PieceKind.BISHOP, PieceKind.ROOK, PieceKind.QUEEN}


class PromotionError(RuntimeError):
    """resolve_promotion() called without a pending promotion, or with a bad kind."""


def _to_chess_square(square: Square) -> chess.Square:
    return chess.square(square.file, square.rank)


def _from_chess_square(sq: chess.Square) -> Square:
    return Square(chess.square_file(sq), chess.square_rank(sq))


class RulesEngine:
    """One side's authoritative board."""

    def __init__(self, fen: str = chess.STARTING_FEN) -> None:
        self._board = chess.Board(fen)
        self._pending_promotion: tuple[chess.Square, chess.Square] | None = None

    @classmethod
    def starting_position(cls) -> RulesEngine:
        return cls()

    @classmethod
    def from_fen(cls, fen: str) -> RulesEngine:
        return cls(fen)

    @property
    def turn(self) -> PieceColor:
        """The side to move."""
        return PieceColor.WHITE if self._board.turn == chess.WHITE else PieceColor.BLACK

    @property
    def promotion_pending(self) -> bool:
        return self._pending_promotion is not None

    def fen(self) -> str:
        return self._board.fen()

    def piece_at(self, square: Square) -> Piece | None:
        if not square.on_board:
            return None
        piece = self._board.piece_at(_to_chess_square(square))
        if piece is None:
            return None
        color = PieceColor.WHITE if piece.color == chess.WHITE else PieceColor.BLACK
        return Piece(PieceKind(piece.piece_type), color)

    def placement(self) -> Placement:
        """Snapshot of every occupied square."""
        return Placement({
            _from_chess_square(sq): self.piece_at(_from_chess_square(sq))
            for sq in self._board.piece_map()
        })

    def legal_destinations(self, square: Square) -> set[Square]:
        """All squares the piece on ``square`` may legally move to."""
        if not square.on_board or self.promotion_pending:
            return set()
        origin = _to_chess_square(square)
        return {
            _from_chess_square(m.to_square)
            for m in self._board.legal_moves
            if m.from_square == origin
        }

    def apply_move(self, from_square: Square, to_square: Square) -> MoveResult:
        """Play a move for the side to move.

        Returns ILLEGAL (board unchanged) if python-chess has no legal move
        between the two squares.
        """
        if self.promotion_pending:
            raise PromotionError("a promotion must be resolved before the next move")
        if not (from_square.on_board and to_square.on_board):
            return MoveResult.ILLEGAL

        origin = _to_chess_square(from_square)
        target = _to_chess_square(to_square)
        candidates = [
            m for m in self._board.legal_moves
            if m.from_square == origin and m.to_square == target
        ]
        if not candidates:
            return MoveResult.ILLEGAL
        if any(m.promotion is not None for m in candidates):
            self._pending_promotion = (origin, target)
            return MoveResult.PROMOTION
        self._board.push(candidates[0])
        return MoveResult.NORMAL

    def resolve_promotion(self, kind: PieceKind) -> None:
        """Complete a pending promotion by turning the pawn into ``kind``."""
        if self._pending_promotion is None:
            raise PromotionError("no promotion pending")
        if kind not in PROMOTION_KINDS:
            raise PromotionError(f"cannot promote to {kind.name.lower()}")
        origin, target = self._pending_promotion
        self._board.push(chess.Move(origin, target, promotion=int(kind)))
        self._pending_promotion = None

    def is_checkmate(self) -> bool:
        return self._board.is_checkmate()

    def is_stalemate(self) -> bool:
        return self._board.is_stalemate()
