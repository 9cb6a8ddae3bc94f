from __future__ import annotations

from dataclasses import dataclass


FILES = "abcdefgh"
MAX_SQUARE = 63


def square(file: int, rank: int) -> int:
    """Encode a ``(file, rank)`` pair as a single square index.

    Args:
        file (int): File in range 0..7 (``a`` is 0).
        rank (int): Rank in range 0..7, where 0 is the Second side's home rank.

    Returns:
        int: ``file * 8 + rank``.

    Raises:
        ValueError: If either coordinate is off the board.
    """
    if not in_bounds(file, rank):
        raise ValueError(f"square off the board: ({file}, {rank})")
    return file * 8 + rank


def file_of(sq: int) -> int:
    return sq // 8


def rank_of(sq: int) -> int:
    return sq % 8


def in_bounds(file: int, rank: int) -> bool:
    return 0 <= file < 8 and 0 <= rank < 8


@dataclass(frozen=True)
class Move:
    """A stored or played move.

    Attributes:
        from_sq (int): Origin square index (``file * 8 + rank``).
        to_sq (int): Destination square index.
    """

    from_sq: int
    to_sq: int

    def to_uci(self) -> str:
        """Serialize the move as two coordinate names, e.g. ``"e2e4"``."""
        return square_to_str(self.from_sq) + square_to_str(self.to_sq)


def parse_uci(text: str) -> Move:
    """Parse a coordinate move string.

    Args:
        text (str): Two concatenated square names such as ``"e2e4"``.

    Returns:
        Move: Parsed move.

    Raises:
        ValueError: If the string has an invalid length or squares.
    """
    if len(text) != 4:
        raise ValueError(f"invalid move length: {text!r}")
    return Move(str_to_square(text[0:2]), str_to_square(text[2:4]))


def str_to_square(s: str) -> int:
    """Convert a square name into a square index.

    Names follow the usual board labels: files ``a``..``h`` and ranks
    ``1``..``8`` counted from the First side, so ``"e2"`` is ``(4, 6)``.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        int: Square index.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    file = ord(s[0]) - ord("a")
    rank = 8 - int(s[1])
    return square(file, rank)


def square_to_str(idx: int) -> str:
    """Convert a square index into its name.

    Args:
        idx (int): Square index in range 0..63.

    Returns:
        str: Square name for ``idx``.

    Raises:
        ValueError: If ``idx`` is outside the valid square range.
    """
    if idx < 0 or idx > MAX_SQUARE:
        raise ValueError(f"invalid square index: {idx}")
    return FILES[file_of(idx)] + str(8 - rank_of(idx))
