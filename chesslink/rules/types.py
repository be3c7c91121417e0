"""Board value types shared by the rules engine, the codec and the front end.

Squares use 0-based (file, rank) coordinates: file 0 is the A-file, rank 0
is white's back rank.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, auto


class PieceColor(IntEnum):
    WHITE = 0
    BLACK = 1


class PieceKind(IntEnum):
    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


_KIND_LETTERS: dict[PieceKind, str] = {
    PieceKind.PAWN: "P",
    PieceKind.KNIGHT: "N",
    PieceKind.BISHOP: "B",
    PieceKind.ROOK: "R",
    PieceKind.QUEEN: "Q",
    PieceKind.KING: "K",
}
_LETTER_KINDS: dict[str, PieceKind] = {v: k for k, v in _KIND_LETTERS.items()}


class GameOutcome(Enum):
    IN_PROGRESS = auto()
    WHITE_WINS = auto()
    BLACK_WINS = auto()
    DRAW = auto()


class MoveResult(Enum):
    """What the rules engine did with a proposed move."""
    NORMAL = auto()
    PROMOTION = auto()   # pawn reached the last rank; resolve_promotion() pending
    ILLEGAL = auto()


@dataclass(frozen=True, slots=True)
class Square:
    file: int
    rank: int

    @property
    def on_board(self) -> bool:
        return 0 <= self.file <= 7 and 0 <= self.rank <= 7

    def __str__(self) -> str:
        return f"{chr(ord('a') + self.file)}{self.rank + 1}"


@dataclass(frozen=True, slots=True)
class Move:
    """A move from one square to another.

    ``promotion`` is True when a pawn promotes. Promotion is always to a
    queen; no other piece can be chosen.
    """
    from_square: Square
    to_square: Square
    promotion: bool = False

    def __str__(self) -> str:
        return f"{self.from_square}{self.to_square}{'q' if self.promotion else ''}"


@dataclass(frozen=True, slots=True)
class Piece:
    kind: PieceKind
    color: PieceColor

    @property
    def letter(self) -> str:
        """Wire letter: uppercase for white, lowercase for black."""
        letter = _KIND_LETTERS[self.kind]
        return letter if self.color == PieceColor.WHITE else letter.lower()

    @classmethod
    def from_letter(cls, letter: str) -> Piece:
        """Inverse of ``letter``. Raises KeyError for an unknown letter."""
        kind = _LETTER_KINDS[letter.upper()]
        color = PieceColor.WHITE if letter.isupper() else PieceColor.BLACK
        return cls(kind, color)


class Placement:
    """Read-only snapshot of which piece stands on which square."""

    def __init__(self, pieces: dict[Square, Piece] | None = None) -> None:
        self._pieces: dict[Square, Piece] = dict(pieces or {})

    def piece_at(self, square: Square) -> Piece | None:
        return self._pieces.get(square)

    def __len__(self) -> int:
        return len(self._pieces)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Placement):
            return NotImplemented
        return self._pieces == other._pieces

    def __repr__(self) -> str:
        return f"Placement({len(self._pieces)} pieces)"
