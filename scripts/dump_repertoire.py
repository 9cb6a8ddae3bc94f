#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import os
import sys

SRC_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from atop.repertoire.codec import display_description
from atop.repertoire.store import DEFAULT_STORE, RepertoireStore


def main() -> None:
    parser = argparse.ArgumentParser(description="Print every stored line of a repertoire")
    parser.add_argument("--db", type=str, default=DEFAULT_STORE, help="Store path (default: atop.db)")
    parser.add_argument(
        "--notes", action="store_true", help="Append each move's description in brackets"
    )
    args = parser.parse_args()

    tree = RepertoireStore(args.db).load()
    for line in tree.iter_lines():
        parts = []
        for node in line:
            token = node.move.to_uci()
            if args.notes and node.description:
                token += f" [{display_description(node.description)}]"
            parts.append(token)
        print(" ".join(parts))
    print(f"# {tree.count()} moves", file=sys.stderr)


if __name__ == "__main__":
    main()
