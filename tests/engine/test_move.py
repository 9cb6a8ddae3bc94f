from __future__ import annotations

import pytest

from atop.engine.move import Move, parse_uci, square, square_to_str, str_to_square


def test_square_encoding_is_file_major() -> None:
    assert square(0, 0) == 0
    assert square(4, 6) == 38
    assert square(7, 7) == 63


@pytest.mark.parametrize(
    "name,coords",
    [
        ("a8", (0, 0)),
        ("e2", (4, 6)),
        ("e4", (4, 4)),
        ("h1", (7, 7)),
    ],
)
def test_square_names(name: str, coords: tuple[int, int]) -> None:
    sq = square(*coords)
    assert str_to_square(name) == sq
    assert square_to_str(sq) == name


def test_parse_and_format_move() -> None:
    mv = parse_uci("e2e4")
    assert mv == Move(square(4, 6), square(4, 4))
    assert mv.to_uci() == "e2e4"


@pytest.mark.parametrize("text", ["", "e2", "e2e", "e2e9", "i2e4", "e2e4q"])
def test_parse_rejects_bad_moves(text: str) -> None:
    with pytest.raises(ValueError):
        parse_uci(text)


def test_square_bounds() -> None:
    with pytest.raises(ValueError):
        square(8, 0)
    with pytest.raises(ValueError):
        square_to_str(64)
