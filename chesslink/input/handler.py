"""Input handler — converts PyGame mouse events to proposed Moves.

Left click: select one of our pieces, then click a destination square.
Clicks are ignored while the session is waiting for the peer.
"""

from __future__ import annotations

import pygame

from chesslink.config import SQUARE_SIZE
from chesslink.input.selection import SquareSelection
from chesslink.rules.types import Move, Square
from chesslink.session.session import Session
from chesslink.session.turn import TurnState


class InputHandler:
    """Converts PyGame mouse events into Moves for a Session."""

    def __init__(self, square_size: int = SQUARE_SIZE) -> None:
        self._square_size = square_size
        self.selection = SquareSelection()

    def screen_to_square(self, sx: int, sy: int) -> Square | None:
        """Convert screen pixel coords to a board square (white at the bottom)."""
        size = self._square_size
        if not (0 <= sx < 8 * size and 0 <= sy < 8 * size):
            return None
        return Square(sx // size, 7 - sy // size)

    def process_events(
        self, events: list[pygame.event.Event], session: Session,
    ) -> Move | None:
        """Process PyGame events and return the first completed move, if any."""
        for event in events:
            if event.type != pygame.MOUSEBUTTONDOWN or event.button != 1:
                continue
            if not session.is_active or session.turn_state != TurnState.LOCAL_TO_MOVE:
                self.selection.clear()
                continue
            square = self.screen_to_square(*event.pos)
            piece = session.engine.piece_at(square) if square is not None else None
            selectable = piece is not None and piece.color == session.local_color
            move = self.selection.click(square, selectable)
            if move is not None:
                return move
        return None
