"""Transport interface and loopback implementation.

Transport is the interface between the session and the byte pipe to the
other player. The session sends whole frames and pulls whole frames; the
transport is responsible for reassembling partial reads.

MockTransport links two in-process endpoints so the full protocol can be
exercised (and played locally) without sockets.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque

from chesslink.config import FRAME_SIZE


class TransportError(ConnectionError):
    """Sending or receiving failed for a reason other than 'no data yet'."""


class TransportClosed(TransportError):
    """The peer closed the connection."""


class Transport(ABC):
    """Abstract byte pipe carrying fixed-size frames between two peers.

    The game loop calls poll() and try_receive() each frame; neither blocks.
    """

    @abstractmethod
    def connect(self, host: str, port: int) -> None:
        """Connect to a listening peer (dialer side)."""
        ...

    @abstractmethod
    def host(self, port: int) -> None:
        """Start listening for the peer (listener side)."""
        ...

    @abstractmethod
    def poll(self) -> None:
        """Pump pending network activity. Call once per frame. Non-blocking."""
        ...

    @abstractmethod
    def is_connected(self) -> bool:
        """Whether the peer is connected."""
        ...

    @abstractmethod
    def send(self, frame: bytes) -> None:
        """Send one frame. Raises TransportError on failure."""
        ...

    @abstractmethod
    def try_receive(self) -> bytes | None:
        """Return one complete frame, or None if none has arrived yet.

        Raises TransportClosed once the peer has gone away and every frame
        it sent has been consumed.
        """
        ...

    @abstractmethod
    def disconnect(self) -> None:
        """Close the connection."""
        ...

    @abstractmethod
    def get_peer_address(self) -> tuple[str, int] | None:
        """Return the (host, port) of the connected peer, or None."""
        ...


class MockTransport(Transport):
    """In-process transport. Frames sent on one end arrive at its partner.

    Usage:
        white, black = MockTransport.pair()
        white.send(frame)
        black.try_receive()  # -> frame
    """

    def __init__(self) -> None:
        self._partner: MockTransport | None = None
        self._inbox: deque[bytes] = deque()
        self._connected = False
        self._peer_closed = False
        self.fail_sends = False
        self.sent: list[bytes] = []

    @classmethod
    def pair(cls) -> tuple[MockTransport, MockTransport]:
        a, b = cls(), cls()
        a._partner, b._partner = b, a
        a._connected = b._connected = True
        return a, b

    def connect(self, host: str, port: int) -> None:
        self._connected = self._partner is not None

    def host(self, port: int) -> None:
        self._connected = self._partner is not None

    def poll(self) -> None:
        pass

    def is_connected(self) -> bool:
        return self._connected and not self._peer_closed

    def send(self, frame: bytes) -> None:
        if self.fail_sends or not self._connected or self._partner is None:
            raise TransportError("mock transport is not connected")
        if self._partner._peer_closed or not self._partner._connected:
            raise TransportClosed("peer has disconnected")
        self.sent.append(frame)
        self._partner._inbox.append(frame)

    def try_receive(self) -> bytes | None:
        if self._inbox:
            return self._inbox.popleft()
        if self._peer_closed:
            raise TransportClosed("peer has disconnected")
        return None

    def disconnect(self) -> None:
        if self._partner is not None:
            self._partner._peer_closed = True
        self._connected = False

    def get_peer_address(self) -> tuple[str, int] | None:
        return ("127.0.0.1", 0) if self.is_connected() else None

    def inject_bytes(self, data: bytes) -> None:
        """Test helper: queue raw data as if the peer had sent it.

        Data longer than a frame is split into FRAME_SIZE chunks.
        """
        for start in range(0, len(data), FRAME_SIZE):
            self._inbox.append(data[start:start + FRAME_SIZE])
