"""Tests for the Game loop, run headless under SDL's dummy video driver."""

import pygame
import pytest

from chesslink.config import SCREEN_HEIGHT, SCREEN_WIDTH
from chesslink.game import Game, GamePhase
from chesslink.networking.serialization import encode_quit_message
from chesslink.rules.types import GameOutcome, Move, Square
from chesslink.session.session import MoveApplied, TerminationReason


def _move(uci: str) -> Move:
    def sq(name: str) -> Square:
        return Square(ord(name[0]) - ord("a"), int(name[1]) - 1)
    return Move(sq(uci[:2]), sq(uci[2:4]))


@pytest.fixture
def screen(monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")
    pygame.init()
    surface = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
    yield surface
    pygame.quit()


@pytest.fixture
def mated_white(screen, sessions, link):
    """A game for white where black has just played fool's mate."""
    white, black = sessions
    white_link, _ = link
    for mover, receiver, uci in [
        (white, black, "f2f3"),
        (black, white, "e7e5"),
        (white, black, "g2g4"),
    ]:
        mover.submit_local_move(_move(uci))
        assert isinstance(receiver.poll(), MoveApplied)
    black.submit_local_move(_move("d8h4"))

    game = Game(screen, white, white_link)
    game.update([])
    assert white.outcome == GameOutcome.BLACK_WINS
    assert game.phase == GamePhase.FINISHED
    return game, white, black


class TestGameLoop:
    def test_connects_then_plays(self, screen, sessions, link):
        white, _ = sessions
        white_link, _ = link
        game = Game(screen, white, white_link)
        assert game.phase == GamePhase.CONNECTING
        game.update([])
        assert game.phase == GamePhase.PLAYING

    def test_quit_after_mate_is_seen(self, mated_white):
        game, white, black = mated_white
        black.quit()

        game.update([])
        assert white.termination.reason == TerminationReason.REMOTE_QUIT

    def test_closing_window_after_remote_quit_sends_nothing(self, mated_white, link):
        game, white, black = mated_white
        white_link, _ = link
        black.quit()

        pygame.event.clear()
        pygame.event.post(pygame.event.Event(pygame.QUIT))
        game.update([])
        game.run()

        assert white.termination.reason == TerminationReason.REMOTE_QUIT
        assert encode_quit_message() not in white_link.sent
