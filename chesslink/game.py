"""Game phases and the per-frame loop.

Manages the game lifecycle: CONNECTING -> PLAYING -> FINISHED.
Each frame handles input, polls the session(s) once, then renders.

In hotseat mode two sessions share one window over a loopback transport;
input goes to whichever side is to move, and every move is still encoded,
sent and reconciled by the other side.
"""

from __future__ import annotations

import logging
from enum import Enum, auto

import pygame

from chesslink.config import FPS
from chesslink.input.handler import InputHandler
from chesslink.networking.peer import Transport
from chesslink.rendering.hud import status_text
from chesslink.rendering.renderer import Renderer
from chesslink.rules.types import GameOutcome
from chesslink.session.session import (
    MoveApplied,
    MoveOutcome,
    Session,
    SessionTerminated,
)
from chesslink.session.turn import TurnState

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    CONNECTING = auto()
    PLAYING = auto()
    FINISHED = auto()


class Game:
    """Main game controller. Owns the session(s), input and rendering."""

    def __init__(
        self,
        screen: pygame.Surface,
        session: Session,
        transport: Transport,
        opponent: Session | None = None,
    ) -> None:
        self._screen = screen
        self._session = session
        self._transport = transport
        self._sessions = [session] if opponent is None else [session, opponent]
        self._hotseat = opponent is not None
        self._clock = pygame.time.Clock()

        self._renderer = Renderer(screen)
        self._input = InputHandler()

        self._phase = GamePhase.CONNECTING

    @property
    def phase(self) -> GamePhase:
        return self._phase

    def run(self) -> None:
        """Main game loop. Returns when the window is closed."""
        running = True
        while running:
            events = pygame.event.get()
            for event in events:
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False

            if not running:
                break

            self.update(events)

            if self._phase == GamePhase.CONNECTING:
                self._draw_connecting()
            else:
                self._render()

            self._clock.tick(FPS)

        for session in self._sessions:
            if session.is_active:
                session.quit()
        self._transport.disconnect()

    def update(self, events: list[pygame.event.Event]) -> None:
        """Advance one frame: connect, take input while playing, poll peers.

        A decided game still polls its sessions so a quit or rejection from
        the peer after the final move is seen.
        """
        if self._phase == GamePhase.CONNECTING:
            self._transport.poll()
            if not self._transport.is_connected():
                return
            self._phase = GamePhase.PLAYING
            logger.info(
                "Game started, playing %s", self._session.local_color.name.lower(),
            )

        if self._phase == GamePhase.PLAYING:
            self._handle_input(events)
        self._poll_sessions()

    def _active_session(self) -> Session:
        """The session whose player is to move (hotseat) or the only one."""
        for session in self._sessions:
            if session.turn_state == TurnState.LOCAL_TO_MOVE:
                return session
        return self._session

    def _handle_input(self, events: list[pygame.event.Event]) -> None:
        session = self._active_session()
        move = self._input.process_events(events, session)
        if move is not None:
            result = session.submit_local_move(move)
            self._input.selection.clear()
            if result == MoveOutcome.ILLEGAL:
                logger.debug("Rejected %s", move)

    def _poll_sessions(self) -> None:
        for session in self._sessions:
            event = session.poll()
            if isinstance(event, SessionTerminated):
                logger.info("Game over: %s %s", event.reason.name, event.detail)
                self._phase = GamePhase.FINISHED
            elif isinstance(event, MoveApplied) and event.outcome != GameOutcome.IN_PROGRESS:
                logger.info("Game decided: %s", event.outcome.name)

        if self._session.outcome != GameOutcome.IN_PROGRESS:
            self._phase = GamePhase.FINISHED

    def _render(self) -> None:
        session = self._active_session()
        info = {"FPS": str(int(self._clock.get_fps()))}
        peer_addr = self._transport.get_peer_address()
        if peer_addr and not self._hotseat:
            info["Peer"] = f"{peer_addr[0]}:{peer_addr[1]}"
        self._renderer.draw(
            session,
            self._input.selection.start,
            status_text(session, hotseat=self._hotseat),
            info,
        )

    def _draw_connecting(self) -> None:
        """Draw the waiting-for-opponent screen."""
        sw = self._screen.get_width()
        sh = self._screen.get_height()
        self._screen.fill((20, 20, 30))
        font = pygame.font.SysFont("monospace", 20)
        text = font.render("Waiting for opponent to connect...", True, (200, 200, 200))
        rect = text.get_rect(center=(sw // 2, sh // 2))
        self._screen.blit(text, rect)
        pygame.display.flip()
