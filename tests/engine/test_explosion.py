from __future__ import annotations

from atop.engine.board import EMPTY, Board, PieceType, Side, make_piece
from atop.engine.move import square
from atop.engine.rules import simulate_capture


FIRST = Side.FIRST
SECOND = Side.SECOND


def test_capture_explodes_neighbours_but_spares_pawns() -> None:
    b = Board()
    b[square(4, 4)] = make_piece(PieceType.ROOK, SECOND)
    b[square(5, 5)] = make_piece(PieceType.KNIGHT, SECOND)
    b[square(4, 3)] = make_piece(PieceType.PAWN, SECOND)
    b[square(3, 3)] = make_piece(PieceType.BISHOP, FIRST)

    simulate_capture(b, square(3, 3), square(4, 4))

    assert b[square(4, 4)] == EMPTY
    assert b[square(3, 3)] == EMPTY
    assert b[square(5, 5)] == EMPTY
    assert b[square(4, 3)] == make_piece(PieceType.PAWN, SECOND)


def test_capture_leaves_destination_and_origin_empty() -> None:
    b = Board.from_fen("4k3/8/8/3p4/8/8/8/3QK3")
    # Queen d1 takes d5 along the open file
    simulate_capture(b, square(3, 7), square(3, 3))
    assert b[square(3, 3)] == EMPTY
    assert b[square(3, 7)] == EMPTY
    assert b.to_fen() == "4k3/8/8/8/8/8/8/4K3"


def test_quiet_move_relocates_piece() -> None:
    b = Board.startpos()
    simulate_capture(b, square(6, 7), square(5, 5))
    assert b[square(5, 5)] == make_piece(PieceType.KNIGHT, FIRST)
    assert b[square(6, 7)] == EMPTY


def test_blast_removes_both_sides_and_kings() -> None:
    # Second king e8 sits next to the captured piece on d7
    b = Board.from_fen("3rk3/2Pn1N2/8/8/8/7B/8/4K3")
    simulate_capture(b, square(7, 5), square(3, 1))
    assert b[square(3, 1)] == EMPTY  # captured knight
    assert b[square(7, 5)] == EMPTY  # capturing bishop
    assert b[square(3, 0)] == EMPTY  # rook d8
    assert b[square(4, 0)] == EMPTY  # king e8
    assert b[square(2, 1)] == make_piece(PieceType.PAWN, FIRST)  # pawn c7 survives
    # f7 knight is two files away and untouched
    assert b[square(5, 1)] == make_piece(PieceType.KNIGHT, FIRST)
    assert b.king_square(SECOND) is None


def test_capturing_pawn_is_consumed() -> None:
    b = Board.from_fen("4k3/8/8/3p4/4P3/8/8/4K3")
    simulate_capture(b, square(4, 4), square(3, 3))
    assert b[square(3, 3)] == EMPTY
    assert b[square(4, 4)] == EMPTY
