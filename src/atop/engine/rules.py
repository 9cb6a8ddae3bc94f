from __future__ import annotations

from typing import Iterable, List, Set, Tuple

from .board import EMPTY, Board, PieceType, Side, coords, make_piece, piece_side, piece_type
from .move import Move, in_bounds, square


KNIGHT_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (1, 2),
    (1, -2),
    (2, 1),
    (2, -1),
    (-1, 2),
    (-1, -2),
    (-2, 1),
    (-2, -1),
)
KING_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)
ROOK_DIRS: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))
BISHOP_DIRS: Tuple[Tuple[int, int], ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))


def neighbours(sq: int) -> Iterable[int]:
    """Yield the (up to 8) squares adjacent to ``sq``."""
    f, r = coords(sq)
    for df, dr in KING_OFFSETS:
        tf, tr = f + df, r + dr
        if in_bounds(tf, tr):
            yield square(tf, tr)


def generate_destinations(
    board: Board, piece: int, origin: int, apply_check_filter: bool = True
) -> Set[int]:
    """Return the squares ``piece`` standing on ``origin`` may move to.

    Args:
        board (Board): Position to evaluate. Never mutated.
        piece (int): Signed piece value; its sign decides the moving side.
        origin (int): Square the piece stands on.
        apply_check_filter (bool): When true, drop destinations after which the
            mover's own king would be in check (or exploded).

    Returns:
        Set[int]: Destination squares.

    Notes:
        The check filter calls ``is_in_check`` which in turn generates enemy
        destinations with the filter off, so recursion is at most one level.
    """
    side = piece_side(piece)
    ptype = piece_type(piece)
    if ptype is PieceType.PAWN:
        candidates = _pawn_targets(board, side, origin)
    elif ptype is PieceType.KNIGHT:
        candidates = _step_targets(board, side, origin, KNIGHT_OFFSETS, may_capture=True)
    elif ptype is PieceType.KING:
        # Kings never capture: they only step onto empty squares.
        candidates = _step_targets(board, side, origin, KING_OFFSETS, may_capture=False)
    elif ptype is PieceType.ROOK:
        candidates = _ray_targets(board, side, origin, ROOK_DIRS)
    elif ptype is PieceType.BISHOP:
        candidates = _ray_targets(board, side, origin, BISHOP_DIRS)
    elif ptype is PieceType.QUEEN:
        candidates = _ray_targets(board, side, origin, ROOK_DIRS + BISHOP_DIRS)
    else:
        raise ValueError(f"unknown piece type: {ptype!r}")

    if not apply_check_filter:
        return set(candidates)
    return {to for to in candidates if not _leaves_king_in_check(board, side, origin, to)}


def _pawn_targets(board: Board, side: Side, origin: int) -> List[int]:
    f, r = coords(origin)
    # First-side pawns walk toward rank 0, Second-side pawns toward rank 7.
    step = -int(side)
    start_rank = 6 if side is Side.FIRST else 1
    out: List[int] = []

    one = r + step
    if not (0 <= one < 8):
        return out
    if board[square(f, one)] == EMPTY:
        out.append(square(f, one))
        two = r + 2 * step
        if r == start_rank and board[square(f, two)] == EMPTY:
            out.append(square(f, two))
    for df in (-1, 1):
        tf = f + df
        if not (0 <= tf < 8):
            continue
        target = board[square(tf, one)]
        if target != EMPTY and piece_side(target) is not side:
            out.append(square(tf, one))
    return out


def _step_targets(
    board: Board,
    side: Side,
    origin: int,
    offsets: Tuple[Tuple[int, int], ...],
    *,
    may_capture: bool,
) -> List[int]:
    f, r = coords(origin)
    out: List[int] = []
    for df, dr in offsets:
        tf, tr = f + df, r + dr
        if not in_bounds(tf, tr):
            continue
        to = square(tf, tr)
        target = board[to]
        if target == EMPTY:
            out.append(to)
        elif may_capture and piece_side(target) is not side:
            out.append(to)
    return out


def _ray_targets(
    board: Board, side: Side, origin: int, dirs: Tuple[Tuple[int, int], ...]
) -> List[int]:
    f, r = coords(origin)
    out: List[int] = []
    for df, dr in dirs:
        tf, tr = f, r
        while True:
            tf += df
            tr += dr
            if not in_bounds(tf, tr):
                break
            to = square(tf, tr)
            target = board[to]
            if target == EMPTY:
                out.append(to)
                continue
            if piece_side(target) is not side:
                out.append(to)
            break
    return out


def _leaves_king_in_check(board: Board, side: Side, from_sq: int, to_sq: int) -> bool:
    scratch = board.copy()
    simulate_capture(scratch, from_sq, to_sq)
    return is_in_check(scratch, side)


def is_capture(board: Board, to_sq: int) -> bool:
    return board[to_sq] != EMPTY


def simulate_capture(board: Board, from_sq: int, to_sq: int) -> None:
    """Play ``from_sq`` -> ``to_sq`` on ``board`` in place.

    A quiet move relocates the piece. A capture explodes: the captured piece,
    the capturing piece and every non-pawn piece adjacent to ``to_sq`` are
    removed, and ``to_sq`` is left empty.
    """
    if is_capture(board, to_sq):
        board[to_sq] = EMPTY
        for sq in neighbours(to_sq):
            piece = board[sq]
            if piece != EMPTY and piece_type(piece) is not PieceType.PAWN:
                board[sq] = EMPTY
    else:
        board[to_sq] = board[from_sq]
    board[from_sq] = EMPTY


def is_in_check(board: Board, side: Side) -> bool:
    """Return True if ``side``'s king is attacked, or missing.

    A missing king counts as check so that a move exploding one's own king is
    never accepted. Adjacent kings never give check.
    """
    king_sq = board.king_square(side)
    if king_sq is None:
        return True

    enemy_king = make_piece(PieceType.KING, side.opponent)
    if any(board[sq] == enemy_king for sq in neighbours(king_sq)):
        return False

    for sq, piece in board.pieces(side.opponent):
        if king_sq in generate_destinations(board, piece, sq, apply_check_filter=False):
            return True
    return False


def legal_moves(board: Board, side: Side) -> List[Move]:
    """Return every legal move for ``side``, ordered by origin then destination."""
    moves: List[Move] = []
    for sq, piece in board.pieces(side):
        for to in sorted(generate_destinations(board, piece, sq, apply_check_filter=True)):
            moves.append(Move(sq, to))
    return moves
