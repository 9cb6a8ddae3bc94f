#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import time
import os
import sys

# Allow running this script directly via `python scripts/perft.py`
# by adding the repo's src/ directory to sys.path.
SRC_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from atop.engine.board import Board, STARTPOS_FEN, Side
from atop.engine.perft import perft


def main() -> None:
    parser = argparse.ArgumentParser(description="Count atomic-chess move-tree nodes to a depth")
    parser.add_argument(
        "--placement", type=str, default=STARTPOS_FEN, help="Piece placement (default: startpos)"
    )
    parser.add_argument(
        "--side", choices=["first", "second"], default="first", help="Side to move (default: first)"
    )
    parser.add_argument("--depth", type=int, default=3, help="Perft depth (default: 3)")
    args = parser.parse_args()

    board = Board.from_fen(args.placement)
    side = Side.FIRST if args.side == "first" else Side.SECOND
    start = time.perf_counter()
    nodes = perft(board, side, args.depth)
    dt = time.perf_counter() - start
    print(f"nodes={nodes} depth={args.depth} time_ms={int(dt*1000)} nps={int(nodes/max(dt,1e-9))}")


if __name__ == "__main__":
    main()
