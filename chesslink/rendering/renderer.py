"""Board renderer — draws squares, highlights, pieces and the status bar.

White is always at the bottom. Pieces are drawn as lettered discs so the
game needs no image assets.
"""

from __future__ import annotations

import pygame

from chesslink.config import (
    COLOR_BG,
    COLOR_BLACK_PIECE,
    COLOR_DARK_SQUARE,
    COLOR_DESTINATION,
    COLOR_LIGHT_SQUARE,
    COLOR_SELECTED,
    COLOR_WHITE_PIECE,
    SQUARE_SIZE,
)
from chesslink.rendering.hud import HUD
from chesslink.rules.types import Move, Piece, PieceColor, Square
from chesslink.session.session import Session

PIECE_RADIUS = SQUARE_SIZE * 2 // 5
LAST_MOVE_BORDER = 3


class Renderer:
    """Draws a session's board to the screen."""

    def __init__(self, screen: pygame.Surface) -> None:
        self._screen = screen
        self._font = pygame.font.SysFont("monospace", SQUARE_SIZE // 2, bold=True)
        self._hud = HUD(screen)

    def draw(
        self,
        session: Session,
        selected: Square | None,
        status: tuple[str, bool],
        info: dict[str, str],
    ) -> None:
        """Draw one frame."""
        self._screen.fill(COLOR_BG)
        destinations = session.legal_destinations(selected) if selected else set()
        self._draw_squares(selected, destinations)
        self._draw_last_move(session.last_move)
        self._draw_pieces(session)
        self._hud.draw(status[0], status[1], info)
        pygame.display.flip()

    def _square_rect(self, square: Square) -> pygame.Rect:
        return pygame.Rect(
            square.file * SQUARE_SIZE, (7 - square.rank) * SQUARE_SIZE,
            SQUARE_SIZE, SQUARE_SIZE,
        )

    def _draw_squares(self, selected: Square | None, destinations: set[Square]) -> None:
        for rank in range(8):
            for file in range(8):
                square = Square(file, rank)
                if square == selected:
                    color = COLOR_SELECTED
                elif square in destinations:
                    color = COLOR_DESTINATION
                elif (rank + file) % 2 == 1:
                    color = COLOR_LIGHT_SQUARE
                else:
                    color = COLOR_DARK_SQUARE
                pygame.draw.rect(self._screen, color, self._square_rect(square))

    def _draw_last_move(self, move: Move | None) -> None:
        if move is None:
            return
        for square in (move.from_square, move.to_square):
            pygame.draw.rect(
                self._screen, COLOR_SELECTED, self._square_rect(square), LAST_MOVE_BORDER,
            )

    def _draw_pieces(self, session: Session) -> None:
        engine = session.engine
        for rank in range(8):
            for file in range(8):
                square = Square(file, rank)
                piece = engine.piece_at(square)
                if piece is not None:
                    self._draw_piece(piece, self._square_rect(square).center)

    def _draw_piece(self, piece: Piece, center: tuple[int, int]) -> None:
        if piece.color == PieceColor.WHITE:
            fill, ink = COLOR_WHITE_PIECE, COLOR_BLACK_PIECE
        else:
            fill, ink = COLOR_BLACK_PIECE, COLOR_WHITE_PIECE
        pygame.draw.circle(self._screen, fill, center, PIECE_RADIUS)
        pygame.draw.circle(self._screen, ink, center, PIECE_RADIUS, 2)
        text = self._font.render(piece.letter.upper(), True, ink)
        self._screen.blit(text, text.get_rect(center=center))
