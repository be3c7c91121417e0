"""TCP-based Transport implementation.

The listener accepts exactly one peer; the dialer connects with a bounded
blocking connect and then switches to non-blocking mode. Incoming bytes are
buffered so frames split across reads (or several frames in one read) are
delivered whole.
"""

from __future__ import annotations

import logging
import socket

from chesslink.config import (
    CONNECT_TIMEOUT_S,
    DEFAULT_BIND,
    FRAME_SIZE,
    RECV_CHUNK_SIZE,
    SEND_TIMEOUT_S,
)
from chesslink.networking.peer import Transport, TransportClosed, TransportError

logger = logging.getLogger(__name__)


class TcpTransport(Transport):
    """Real TCP transport for a two-player game."""

    def __init__(self) -> None:
        self._listener: socket.socket | None = None
        self._sock: socket.socket | None = None
        self._peer_addr: tuple[str, int] | None = None
        self._buffer = bytearray()
        self._peer_closed = False
        self._recv_error: OSError | None = None

    @property
    def listen_port(self) -> int:
        """Port the listener is bound to (useful when hosting on port 0)."""
        if self._listener is None:
            raise TransportError("not listening")
        return self._listener.getsockname()[1]

    def host(self, port: int, bind: str = DEFAULT_BIND) -> None:
        """Bind a listening socket. The peer is accepted later by poll()."""
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._listener.bind((bind, port))
        self._listener.listen(1)
        self._listener.setblocking(False)
        logger.info("Listening on %s:%d", bind, self.listen_port)

    def connect(self, host: str, port: int, timeout: float = CONNECT_TIMEOUT_S) -> None:
        try:
            sock = socket.create_connection((host, port), timeout=timeout)
        except OSError as e:
            raise TransportError(f"could not connect to {host}:{port}: {e}") from e
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        sock.setblocking(False)
        self._sock = sock
        self._peer_addr = (host, port)
        logger.info("Connected to %s:%d", host, port)

    def poll(self) -> None:
        """Accept a waiting peer and read everything currently available."""
        if self._sock is None and self._listener is not None:
            self._try_accept()
        if self._sock is not None and not self._peer_closed:
            self._drain()

    def _try_accept(self) -> None:
        try:
            conn, addr = self._listener.accept()
        except BlockingIOError:
            return
        conn.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        conn.setblocking(False)
        self._sock = conn
        self._peer_addr = addr[:2]
        # One game per connection: stop listening once the peer is in.
        self._listener.close()
        self._listener = None
        logger.info("Peer connected from %s:%d", addr[0], addr[1])

    def _drain(self) -> None:
        while True:
            try:
                chunk = self._sock.recv(RECV_CHUNK_SIZE)
            except BlockingIOError:
                return
            except OSError as e:
                self._recv_error = e
                return
            if not chunk:
                self._peer_closed = True
                logger.info("Peer closed the connection")
                return
            self._buffer.extend(chunk)

    def is_connected(self) -> bool:
        return self._sock is not None and not self._peer_closed and self._recv_error is None

    def send(self, frame: bytes) -> None:
        if self._sock is None:
            raise TransportError("not connected")
        # Block briefly so a full send buffer cannot cut a frame short.
        self._sock.settimeout(SEND_TIMEOUT_S)
        try:
            self._sock.sendall(frame)
        except OSError as e:
            raise TransportError(f"send failed: {e}") from e
        finally:
            self._sock.setblocking(False)

    def try_receive(self) -> bytes | None:
        if len(self._buffer) >= FRAME_SIZE:
            frame = bytes(self._buffer[:FRAME_SIZE])
            del self._buffer[:FRAME_SIZE]
            return frame
        if self._recv_error is not None:
            raise TransportError(f"receive failed: {self._recv_error}")
        if self._peer_closed:
            if self._buffer:
                logger.warning("Discarding %d bytes of a partial frame", len(self._buffer))
                self._buffer.clear()
            raise TransportClosed("peer closed the connection")
        return None

    def disconnect(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None
        if self._listener is not None:
            self._listener.close()
            self._listener = None

    def get_peer_address(self) -> tuple[str, int] | None:
        return self._peer_addr if self.is_connected() else None
