"""ASCII serialization for ChessLink wire messages.

Every frame is exactly FRAME_SIZE bytes of ASCII text: colon-separated
fields followed by '0' padding. See protocol.py for the field layout.

The board descriptor lists ranks from 8 down to 1. Each run of empty squares
is written as its exact length, a single digit from 1 to 8, and every row
(including the last) is followed by '/'.
"""

from __future__ import annotations

from typing import Protocol

from chesslink.config import (
    FIELD_DELIMITER,
    FRAME_SIZE,
    MOVE_TAG,
    PADDING_CHAR,
    QUIT_TAG,
    ROW_SEPARATOR,
    SIGNED_FIELD_COUNT,
)
from chesslink.networking.protocol import (
    DecodedMessage,
    MalformedFieldError,
    MessageTag,
    TruncatedFrameError,
)
from chesslink.rules.types import GameOutcome, Move, Piece, Placement, Square


class BoardView(Protocol):
    def piece_at(self, square: Square) -> Piece | None: ...


_DELIM = FIELD_DELIMITER.encode("ascii")

_OUTCOME_CODES: dict[GameOutcome, str] = {
    GameOutcome.WHITE_WINS: "1-0",
    GameOutcome.BLACK_WINS: "0-1",
    GameOutcome.DRAW: "1-1",
    GameOutcome.IN_PROGRESS: "0-0",
}
_CODE_OUTCOMES: dict[str, GameOutcome] = {v: k for k, v in _OUTCOME_CODES.items()}

PROMOTION_MARKER = "q"
NO_PROMOTION_MARKER = "0"
MOVE_FIELD_LEN = 5


# --- Frame padding ---

def _frame(text: str) -> bytes:
    """Pad a message to exactly FRAME_SIZE bytes."""
    data = text.encode("ascii")
    if len(data) > FRAME_SIZE:
        raise ValueError(f"Message too long for a frame: {len(data)} bytes")
    return data.ljust(FRAME_SIZE, PADDING_CHAR.encode("ascii"))


# --- Squares and moves ---

def encode_square(square: Square) -> str:
    """Square(4, 1) -> 'E2'."""
    return f"{chr(ord('A') + square.file)}{chr(ord('1') + square.rank)}"


def decode_square(text: str) -> Square:
    """Inverse of encode_square. Raises MalformedFieldError when off the board."""
    if len(text) != 2:
        raise MalformedFieldError(f"Bad square descriptor {text!r}")
    square = Square(ord(text[0]) - ord("A"), ord(text[1]) - ord("1"))
    if not square.on_board:
        raise MalformedFieldError(f"Square {text!r} is off the board")
    return square


def encode_move(move: Move) -> str:
    marker = PROMOTION_MARKER if move.promotion else NO_PROMOTION_MARKER
    return encode_square(move.from_square) + encode_square(move.to_square) + marker


def decode_move(text: str) -> Move:
    if len(text) != MOVE_FIELD_LEN:
        raise MalformedFieldError(f"Bad move descriptor {text!r}")
    marker = text[4]
    if marker not in (PROMOTION_MARKER, NO_PROMOTION_MARKER):
        raise MalformedFieldError(f"Unknown promotion marker {marker!r}")
    return Move(
        decode_square(text[0:2]),
        decode_square(text[2:4]),
        promotion=marker == PROMOTION_MARKER,
    )


# --- Outcome ---

def encode_outcome(outcome: GameOutcome) -> str:
    return _OUTCOME_CODES[outcome]


def decode_outcome(text: str) -> GameOutcome:
    try:
        return _CODE_OUTCOMES[text]
    except KeyError:
        raise MalformedFieldError(f"Unknown outcome descriptor {text!r}") from None


# --- Board ---

def encode_board(board: BoardView) -> str:
    """Run-length encode the board, rank 8 first."""
    parts: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        for file in range(8):
            piece = board.piece_at(Square(file, rank))
            if piece is None:
                empty += 1
                continue
            if empty:
                parts.append(str(empty))
                empty = 0
            parts.append(piece.letter)
        if empty:
            parts.append(str(empty))
        parts.append(ROW_SEPARATOR)
    return "".join(parts)


def decode_board(text: str) -> Placement:
    """Inverse of encode_board."""
    rows = text.split(ROW_SEPARATOR)
    # Trailing separator leaves an empty ninth element.
    if len(rows) != 9 or rows[8] != "":
        raise MalformedFieldError(f"Board descriptor must hold 8 rows: {text!r}")

    pieces: dict[Square, Piece] = {}
    for row_index, row in enumerate(rows[:8]):
        rank = 7 - row_index
        file = 0
        prev_digit = False
        for ch in row:
            if ch.isdigit():
                if prev_digit or ch not in "12345678":
                    raise MalformedFieldError(f"Bad empty run in row {row!r}")
                file += int(ch)
                prev_digit = True
                continue
            prev_digit = False
            if file > 7:
                raise MalformedFieldError(f"Row {row!r} overflows the board")
            try:
                pieces[Square(file, rank)] = Piece.from_letter(ch)
            except KeyError:
                raise MalformedFieldError(f"Unknown piece letter {ch!r}") from None
            file += 1
        if file != 8:
            raise MalformedFieldError(f"Row {row!r} does not cover 8 squares")
    return Placement(pieces)


# --- Whole messages ---

def encode_move_message(move: Move, outcome: GameOutcome, board: BoardView) -> bytes:
    """Build a ChessMOVE frame describing ``move`` and the position after it."""
    fields = [MOVE_TAG, encode_move(move), encode_outcome(outcome), encode_board(board)]
    return _frame(FIELD_DELIMITER.join(fields) + FIELD_DELIMITER)


def encode_quit_message() -> bytes:
    return _frame(QUIT_TAG + FIELD_DELIMITER + FIELD_DELIMITER)


def decode_message(data: bytes) -> DecodedMessage:
    """Decode one frame.

    Raises TruncatedFrameError if the frame is short, MalformedFieldError for
    anything else that does not parse.
    """
    if len(data) < FRAME_SIZE:
        raise TruncatedFrameError(f"Frame has {len(data)} of {FRAME_SIZE} bytes")
    if len(data) > FRAME_SIZE:
        raise MalformedFieldError(f"Frame has {len(data)} bytes, expected {FRAME_SIZE}")
    try:
        text = data.decode("ascii")
    except UnicodeDecodeError:
        raise MalformedFieldError("Frame is not ASCII") from None

    fields = text.split(FIELD_DELIMITER, SIGNED_FIELD_COUNT)
    try:
        tag = MessageTag(fields[0])
    except ValueError:
        raise MalformedFieldError(f"Unknown tag {fields[0][:16]!r}") from None

    if tag == MessageTag.QUIT:
        return DecodedMessage(tag=tag, raw=data)

    if len(fields) <= SIGNED_FIELD_COUNT:
        raise MalformedFieldError("Move frame is missing a delimiter")
    return DecodedMessage(
        tag=tag,
        raw=data,
        move=decode_move(fields[1]),
        outcome_field=fields[2],
        board_field=fields[3],
    )


def signed_span(frame: bytes) -> bytes:
    """The part of a frame up to and including its fourth delimiter.

    This covers tag, move, outcome and board; padding is excluded. Returns
    the whole frame if it has fewer delimiters.
    """
    end = -1
    for _ in range(SIGNED_FIELD_COUNT):
        end = frame.find(_DELIM, end + 1)
        if end < 0:
            return frame
    return frame[:end + 1]
