"""ChessLink entry point.

Usage:
    Host a game (plays black):   python -m chesslink.main --host 3000
    Join a game (plays white):   python -m chesslink.main --join 127.0.0.1:3000
    Hotseat test in one window:  python -m chesslink.main --local
"""

from __future__ import annotations

import argparse
import logging
import sys

import pygame

from chesslink.config import DEFAULT_BIND, SCREEN_HEIGHT, SCREEN_WIDTH
from chesslink.game import Game
from chesslink.rules.types import PieceColor
from chesslink.session.session import Session


def main() -> None:
    parser = argparse.ArgumentParser(description="ChessLink — two-player chess over TCP")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--host", type=int, metavar="PORT",
        help="Listen for the opponent on the given port (you play black)",
    )
    group.add_argument(
        "--join", type=str, metavar="HOST:PORT",
        help="Connect to a listening opponent (you play white)",
    )
    group.add_argument(
        "--local", action="store_true",
        help="Play both sides in one window over a loopback connection",
    )
    parser.add_argument(
        "--bind", type=str, default=DEFAULT_BIND,
        help="Address to listen on with --host",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
    pygame.display.set_caption("ChessLink")

    if args.local:
        _run_local(screen)
    elif args.host is not None:
        _run_host(screen, args.host, args.bind)
    elif args.join is not None:
        _run_join(screen, args.join)

    pygame.quit()


def _run_local(screen: pygame.Surface) -> None:
    """Both colors in one process over MockTransport."""
    from chesslink.networking.peer import MockTransport

    white_link, black_link = MockTransport.pair()
    white = Session(white_link, PieceColor.WHITE)
    black = Session(black_link, PieceColor.BLACK)
    pygame.display.set_caption("ChessLink (hotseat)")
    game = Game(screen, white, white_link, opponent=black)
    game.run()


def _run_host(screen: pygame.Surface, port: int, bind: str) -> None:
    """Listen for the dialer; the listener plays black."""
    from chesslink.networking.tcp_peer import TcpTransport

    transport = TcpTransport()
    transport.host(port, bind=bind)
    pygame.display.set_caption("ChessLink (black)")
    game = Game(screen, Session(transport, PieceColor.BLACK), transport)
    game.run()


def _run_join(screen: pygame.Surface, addr: str) -> None:
    """Dial the listener; the dialer plays white."""
    from chesslink.networking.peer import TransportError
    from chesslink.networking.tcp_peer import TcpTransport

    parts = addr.rsplit(":", 1)
    if len(parts) != 2 or not parts[1].isdigit():
        print(f"Invalid address: {addr}. Expected HOST:PORT")
        sys.exit(1)
    host, port = parts[0], int(parts[1])

    transport = TcpTransport()
    print(f"Connecting to {host}:{port}...")
    try:
        transport.connect(host, port)
    except TransportError as e:
        print(f"Connection failed: {e}")
        sys.exit(1)

    pygame.display.set_caption("ChessLink (white)")
    game = Game(screen, Session(transport, PieceColor.WHITE), transport)
    game.run()


if __name__ == "__main__":
    main()
