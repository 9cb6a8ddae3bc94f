from __future__ import annotations

from .board import Board, Side
from .rules import legal_moves, simulate_capture


def perft(board: Board, side: Side, depth: int) -> int:
    """Compute the perft node count for ``board`` with ``side`` to move.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Each child is played on a copy with explosion semantics, so ``board`` is
    left untouched.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    nodes = 0
    for m in legal_moves(board, side):
        if depth == 1:
            nodes += 1
            continue
        child = board.copy()
        simulate_capture(child, m.from_sq, m.to_sq)
        nodes += perft(child, side.opponent, depth - 1)
    return nodes
