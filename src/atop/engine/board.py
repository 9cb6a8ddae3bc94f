from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, List, Optional, Tuple

from .move import file_of, rank_of, square


STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

EMPTY = 0


class PieceType(IntEnum):
    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class Side(IntEnum):
    """Side tag, also the sign of a piece value.

    FIRST moves on even plies and starts on ranks 6-7; SECOND starts on
    ranks 0-1.
    """

    FIRST = 1
    SECOND = -1

    @property
    def opponent(self) -> "Side":
        return Side.SECOND if self is Side.FIRST else Side.FIRST


PIECE_TO_CHAR = {
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}
CHAR_TO_PIECE = {v: k for k, v in PIECE_TO_CHAR.items()}

BACK_RANK = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def make_piece(ptype: PieceType, side: Side) -> int:
    return int(ptype) * int(side)


def piece_type(piece: int) -> PieceType:
    return PieceType(abs(piece))


def piece_side(piece: int) -> Side:
    return Side.FIRST if piece > 0 else Side.SECOND


def side_for_ply(ply: int) -> Side:
    """Return the side to move after ``ply`` half-moves."""
    return Side.FIRST if ply % 2 == 0 else Side.SECOND


def piece_char(piece: int) -> str:
    ch = PIECE_TO_CHAR[piece_type(piece)]
    return ch.upper() if piece > 0 else ch


@dataclass
class Board:
    """Plain 8x8 cell storage.

    Notes:
    - Cells are indexed by square (``file * 8 + rank``); each holds a signed
      piece value or ``EMPTY``.
    - The board does not know whose turn it is; the session derives that from
      its ply counter.
    """

    cells: List[int] = field(default_factory=lambda: [EMPTY] * 64)

    @classmethod
    def startpos(cls) -> "Board":
        """Create a board set up in the initial position.

        Returns:
            Board: Board with the First side on ranks 6-7 and the Second side
                on ranks 0-1.
        """
        board = cls()
        for f, ptype in enumerate(BACK_RANK):
            board[square(f, 0)] = make_piece(ptype, Side.SECOND)
            board[square(f, 1)] = make_piece(PieceType.PAWN, Side.SECOND)
            board[square(f, 6)] = make_piece(PieceType.PAWN, Side.FIRST)
            board[square(f, 7)] = make_piece(ptype, Side.FIRST)
        return board

    @classmethod
    def from_fen(cls, placement: str) -> "Board":
        """Create a board from a FEN-style piece placement string.

        Args:
            placement (str): Eight ``/``-separated rows, rank 0 first. Uppercase
                letters are First-side pieces, lowercase Second-side pieces and
                digits runs of empty squares. Trailing FEN fields, if present,
                are ignored since the board stores no turn or rights.

        Returns:
            Board: Board holding the described pieces.

        Raises:
            ValueError: If the placement is empty, has the wrong number of rows,
                or a row has an invalid piece or does not cover 8 squares.
        """
        if not placement or not isinstance(placement, str):
            raise ValueError("placement must be a non-empty string")
        rows = placement.strip().split()[0].split("/")
        if len(rows) != 8:
            raise ValueError("placement must have 8 rows")
        board = cls()
        for rank, row in enumerate(rows):
            file = 0
            for ch in row:
                if ch.isdigit():
                    n = int(ch)
                    if n < 1 or n > 8:
                        raise ValueError("invalid empty count in placement row")
                    file += n
                else:
                    if ch.lower() not in CHAR_TO_PIECE:
                        raise ValueError(f"invalid piece in placement: {ch!r}")
                    if file >= 8:
                        raise ValueError("too many squares in placement row")
                    side = Side.FIRST if ch.isupper() else Side.SECOND
                    board[square(file, rank)] = make_piece(CHAR_TO_PIECE[ch.lower()], side)
                    file += 1
            if file != 8:
                raise ValueError("row does not sum to 8 squares in placement")
        return board

    def to_fen(self) -> str:
        """Serialize the cells into a placement string (see ``from_fen``)."""
        return "/".join(self._row_fen(rank) for rank in range(8))

    def _row_fen(self, rank: int) -> str:
        run = 0
        row: List[str] = []
        for file in range(8):
            piece = self[square(file, rank)]
            if piece == EMPTY:
                run += 1
                continue
            if run > 0:
                row.append(str(run))
                run = 0
            row.append(piece_char(piece))
        if run > 0:
            row.append(str(run))
        return "".join(row)

    def rows(self) -> List[str]:
        """Return 8 strings of 8 characters, rank 0 first, ``.`` for empty."""
        out: List[str] = []
        for rank in range(8):
            out.append(
                "".join(
                    piece_char(p) if p != EMPTY else "."
                    for p in (self[square(file, rank)] for file in range(8))
                )
            )
        return out

    def __getitem__(self, sq: int) -> int:
        return self.cells[sq]

    def __setitem__(self, sq: int, piece: int) -> None:
        self.cells[sq] = piece

    def copy(self) -> "Board":
        return Board(cells=list(self.cells))

    def pieces(self, side: Optional[Side] = None) -> Iterator[Tuple[int, int]]:
        """Yield ``(square, piece)`` for occupied squares, optionally one side only."""
        for sq, piece in enumerate(self.cells):
            if piece == EMPTY:
                continue
            if side is not None and piece_side(piece) is not side:
                continue
            yield sq, piece

    def king_square(self, side: Side) -> Optional[int]:
        """Locate ``side``'s king; ``None`` once it has been exploded."""
        king = make_piece(PieceType.KING, side)
        for sq, piece in enumerate(self.cells):
            if piece == king:
                return sq
        return None

    def __str__(self) -> str:
        return "\n".join(self.rows())


def coords(sq: int) -> Tuple[int, int]:
    return file_of(sq), rank_of(sq)
