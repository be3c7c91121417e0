"""Square selection — turns two clicks into a proposed move.

Selection is LOCAL ONLY and never sent to the peer. The first click picks
one of the player's own pieces; the second click names the destination.
"""

from __future__ import annotations

from chesslink.rules.types import Move, Square


class SquareSelection:
    """Tracks the currently selected origin square."""

    def __init__(self) -> None:
        self.start: Square | None = None

    def click(self, square: Square | None, selectable: bool) -> Move | None:
        """Handle a click and return a proposed move once one is complete.

        Args:
            square: The clicked square, or None for a click off the board.
            selectable: Whether the clicked square holds one of our pieces.
        """
        if square is None or not square.on_board:
            self.start = None
            return None
        if self.start is None:
            if selectable:
                self.start = square
            return None
        if square == self.start:
            self.start = None
            return None
        if selectable:
            # Clicking another own piece moves the selection there.
            self.start = square
            return None
        return Move(self.start, square)

    def clear(self) -> None:
        self.start = None
