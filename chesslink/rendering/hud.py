"""Status bar rendering.

Draws a one-line status (whose turn, the result, or why the game ended)
below the board, plus small key/value info on the right.
"""

from __future__ import annotations

import pygame

from chesslink.config import (
    BOARD_SIZE_PX,
    COLOR_STATUS_ALERT,
    COLOR_STATUS_BG,
    COLOR_STATUS_TEXT,
    STATUS_BAR_HEIGHT,
)
from chesslink.rules.types import GameOutcome
from chesslink.session.session import Session, TerminationReason
from chesslink.session.turn import TurnState

_OUTCOME_TEXT = {
    GameOutcome.WHITE_WINS: "Checkmate: white wins",
    GameOutcome.BLACK_WINS: "Checkmate: black wins",
    GameOutcome.DRAW: "Stalemate: draw",
}

_TERMINATION_TEXT = {
    TerminationReason.REMOTE_QUIT: "Opponent quit",
    TerminationReason.LOCAL_QUIT: "You left the game",
    TerminationReason.PROTOCOL_VIOLATION: "Game aborted",
    TerminationReason.TRANSPORT_ERROR: "Connection lost",
}


def status_text(session: Session, hotseat: bool = False) -> tuple[str, bool]:
    """Status line for a session and whether it should be shown as an alert."""
    termination = session.termination
    if termination is not None:
        text = _TERMINATION_TEXT[termination.reason]
        if termination.detail and termination.reason != TerminationReason.LOCAL_QUIT:
            text = f"{text}: {termination.detail}"
        return text, termination.reason != TerminationReason.LOCAL_QUIT
    if session.outcome != GameOutcome.IN_PROGRESS:
        return _OUTCOME_TEXT[session.outcome], False
    if hotseat:
        return f"{session.engine.turn.name.capitalize()} to move", False
    color = session.local_color.name.lower()
    if session.turn_state == TurnState.LOCAL_TO_MOVE:
        return f"Your move ({color})", False
    return f"Waiting for opponent... (you play {color})", False


class HUD:
    """Draws the status bar under the board."""

    def __init__(self, screen: pygame.Surface) -> None:
        self._screen = screen
        self._font = pygame.font.SysFont("monospace", 16)
        self._small_font = pygame.font.SysFont("monospace", 12)

    def draw(self, status: str, alert: bool, info: dict[str, str]) -> None:
        width = self._screen.get_width()
        pygame.draw.rect(
            self._screen, COLOR_STATUS_BG,
            (0, BOARD_SIZE_PX, width, STATUS_BAR_HEIGHT),
        )
        color = COLOR_STATUS_ALERT if alert else COLOR_STATUS_TEXT
        text = self._font.render(status, True, color)
        self._screen.blit(text, (8, BOARD_SIZE_PX + 4))

        line = "  ".join(f"{key}: {value}" for key, value in info.items())
        if line:
            info_surf = self._small_font.render(line, True, COLOR_STATUS_TEXT)
            self._screen.blit(info_surf, (8, BOARD_SIZE_PX + 24))
