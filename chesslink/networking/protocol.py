"""Network protocol definitions.

Defines the message tags, the decoded message type and the codec errors
shared by the serializer and the session. The byte layout itself lives in
serialization.py.

Wire format (ASCII, exactly FRAME_SIZE bytes):
    ChessMOVE:<move>:<outcome>:<board>:<padding>
    ChessQUIT::<padding>

    move     from file A-H, from rank 1-8, to file, to rank, 'q' or '0'
    outcome  1-0 white wins, 0-1 black wins, 1-1 draw, 0-0 in progress
    board    ranks 8 down to 1, each row run-length encoded and followed by '/'
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from chesslink.config import MOVE_TAG, QUIT_TAG
from chesslink.rules.types import GameOutcome, Move, Placement


class MessageTag(Enum):
    """Wire message types exchanged between peers."""
    MOVE = MOVE_TAG
    QUIT = QUIT_TAG


class CodecError(ValueError):
    """A frame could not be decoded."""


class TruncatedFrameError(CodecError):
    """Fewer bytes than a full frame."""


class MalformedFieldError(CodecError):
    """A field is missing, out of range or not valid ASCII."""


@dataclass(frozen=True, slots=True)
class DecodedMessage:
    """A decoded frame.

    The outcome and board fields of a MOVE frame are kept as received: the
    receiver recomputes them from its own board instead of trusting them.
    ``outcome`` and ``placement`` parse them on demand.
    """
    tag: MessageTag
    raw: bytes
    move: Move | None = None
    outcome_field: str = ""
    board_field: str = ""

    @property
    def outcome(self) -> GameOutcome:
        from chesslink.networking.serialization import decode_outcome
        return decode_outcome(self.outcome_field)

    @property
    def placement(self) -> Placement:
        from chesslink.networking.serialization import decode_board
        return decode_board(self.board_field)
