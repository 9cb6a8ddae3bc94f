from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from ..engine.board import EMPTY, Board, Side, piece_side, side_for_ply
from ..engine.move import Move
from ..engine.rules import generate_destinations, is_in_check, simulate_capture
from ..errors import IllegalMoveError
from .codec import encode_description
from .store import RepertoireStore
from .tree import Node, OpeningTree


logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Live board paired with a cursor into the opening tree.

    Responsibility: the only place where the board and the tree change
    together. Invariant: ``len(undo_stack) == ply == cursor.depth()``.
    """

    tree: OpeningTree
    store: Optional[RepertoireStore] = None
    board: Board = field(default_factory=Board.startpos)
    cursor: Node = field(init=False)
    undo_stack: List[Board] = field(default_factory=list, init=False)
    ply: int = field(default=0, init=False)
    in_check: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.cursor = self.tree.root

    @classmethod
    def open(cls, path: str) -> "Session":
        store = RepertoireStore(path)
        return cls(tree=store.load(), store=store)

    @property
    def side_to_move(self) -> Side:
        return side_for_ply(self.ply)

    def snapshot(self) -> Board:
        return self.board.copy()

    def legal_destinations(self, sq: int) -> Set[int]:
        """Destinations for the piece on ``sq``; empty unless it is the mover's."""
        piece = self.board[sq]
        if piece == EMPTY or piece_side(piece) is not self.side_to_move:
            return set()
        return generate_destinations(self.board, piece, sq, apply_check_filter=True)

    def apply_move(self, from_sq: int, to_sq: int) -> bool:
        """Play a move, follow or grow the tree, and report check.

        Returns:
            bool: Whether the side now to move is in check.

        Raises:
            IllegalMoveError: If the move is not legal for the side to move.
                Nothing is changed in that case.
            StorageError: If a new node could not be persisted. The move has
                been applied and recorded in memory regardless.
        """
        if to_sq not in self.legal_destinations(from_sq):
            raise IllegalMoveError(from_sq, to_sq, f"illegal move: {Move(from_sq, to_sq).to_uci()}")

        self.undo_stack.append(self.board.copy())
        simulate_capture(self.board, from_sq, to_sq)
        self.ply += 1

        self.cursor, created = self.tree.record_move(self.cursor, from_sq, to_sq)
        self.in_check = is_in_check(self.board, self.side_to_move)
        if created:
            logger.info("new line recorded: %s", " ".join(m.to_uci() for m in self.path()))
            self._persist()
        return self.in_check

    def undo_one_ply(self) -> bool:
        """Step back one move; returns False (and does nothing) at the start."""
        if not self.undo_stack:
            return False
        parent = self.cursor.parent
        if parent is None:
            raise RuntimeError("cursor is at the root but the undo stack is not empty")
        self.board = self.undo_stack.pop()
        self.cursor = parent
        self.ply -= 1
        self.in_check = is_in_check(self.board, self.side_to_move)
        return True

    def children(self) -> List[Node]:
        return list(self.cursor.children)

    def child(self, index: int) -> Node:
        if index < 0 or index >= len(self.cursor.children):
            raise IndexError(f"no stored move with index {index}")
        return self.cursor.children[index]

    def select_child(self, index: int) -> bool:
        """Replay the stored move at ``index`` below the cursor."""
        node = self.child(index)
        return self.apply_move(node.from_sq, node.to_sq)

    def get_description(self, node: Node) -> str:
        return node.description

    def set_description(self, node: Node, text: str) -> None:
        encode_description(text)
        node.description = text
        self._persist()

    def path(self) -> List[Move]:
        return self.cursor.path()

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save(self.tree)
