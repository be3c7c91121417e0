"""Tests for the loopback MockTransport."""

import pytest

from chesslink.networking.peer import MockTransport, TransportClosed, TransportError
from chesslink.networking.serialization import encode_quit_message


class TestMockTransport:
    def test_pair_is_connected(self, link):
        white, black = link
        assert white.is_connected()
        assert black.is_connected()

    def test_frames_cross_over(self, link):
        white, black = link
        frame = encode_quit_message()
        white.send(frame)
        assert black.try_receive() == frame
        assert white.try_receive() is None
        assert white.sent == [frame]

    def test_no_data_is_none(self, link):
        _, black = link
        assert black.try_receive() is None

    def test_frames_arrive_in_order(self, link):
        white, black = link
        white.send(b"a" * 128)
        white.send(b"b" * 128)
        assert black.try_receive() == b"a" * 128
        assert black.try_receive() == b"b" * 128

    def test_disconnect_is_distinct_from_no_data(self, link):
        white, black = link
        white.send(b"x" * 128)
        white.disconnect()
        # Already-sent frames are still delivered first.
        assert black.try_receive() == b"x" * 128
        with pytest.raises(TransportClosed):
            black.try_receive()

    def test_send_to_closed_peer_fails(self, link):
        white, black = link
        black.disconnect()
        with pytest.raises(TransportClosed):
            white.send(b"x" * 128)

    def test_fail_sends(self, link):
        white, _ = link
        white.fail_sends = True
        with pytest.raises(TransportError):
            white.send(b"x" * 128)

    def test_unpaired_cannot_send(self):
        lonely = MockTransport()
        lonely.connect("127.0.0.1", 1)
        assert not lonely.is_connected()
        with pytest.raises(TransportError):
            lonely.send(b"x")

    def test_inject_splits_into_frames(self, link):
        _, black = link
        black.inject_bytes(b"a" * 128 + b"b" * 10)
        assert black.try_receive() == b"a" * 128
        assert black.try_receive() == b"b" * 10
