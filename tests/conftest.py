"""Shared test fixtures for ChessLink."""

from __future__ import annotations

import pytest

from chesslink.networking.peer import MockTransport
from chesslink.rules.engine import RulesEngine
from chesslink.rules.types import PieceColor
from chesslink.session.session import Session


@pytest.fixture
def engine() -> RulesEngine:
    """A fresh board in the starting position."""
    return RulesEngine.starting_position()


@pytest.fixture
def link() -> tuple[MockTransport, MockTransport]:
    """Two connected loopback transports: (white end, black end)."""
    return MockTransport.pair()


@pytest.fixture
def sessions(link) -> tuple[Session, Session]:
    """White and black sessions joined by a loopback link."""
    white_link, black_link = link
    return Session(white_link, PieceColor.WHITE), Session(black_link, PieceColor.BLACK)
