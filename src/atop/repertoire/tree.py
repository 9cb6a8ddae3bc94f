from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from ..engine.move import Move


@dataclass(eq=False)
class Node:
    """One stored move and its annotation.

    A node owns its children in insertion order. The parent link is a weak
    reference used only for navigation; ownership runs strictly downward from
    the tree's root.

    Attributes:
        from_sq (int): Origin square (unused on the root).
        to_sq (int): Destination square (unused on the root).
        description (str): Free text annotation, never containing NUL.
        children (List[Node]): Stored replies, oldest first.
    """

    from_sq: int = 0
    to_sq: int = 0
    description: str = ""
    children: List["Node"] = field(default_factory=list)
    _parent: Optional["weakref.ReferenceType[Node]"] = field(default=None, init=False, repr=False)

    @property
    def parent(self) -> Optional["Node"]:
        return self._parent() if self._parent is not None else None

    @property
    def move(self) -> Move:
        return Move(self.from_sq, self.to_sq)

    def find_child(self, from_sq: int, to_sq: int) -> Optional["Node"]:
        for child in self.children:
            if child.from_sq == from_sq and child.to_sq == to_sq:
                return child
        return None

    def add_child(self, from_sq: int, to_sq: int, description: str = "") -> "Node":
        child = Node(from_sq=from_sq, to_sq=to_sq, description=description)
        child._parent = weakref.ref(self)
        self.children.append(child)
        return child

    def depth(self) -> int:
        d = 0
        node = self.parent
        while node is not None:
            d += 1
            node = node.parent
        return d

    def path(self) -> List[Move]:
        """Moves from the root down to this node (empty for the root)."""
        moves: List[Move] = []
        node: Optional[Node] = self
        while node is not None and node.parent is not None:
            moves.append(node.move)
            node = node.parent
        moves.reverse()
        return moves

    def __eq__(self, other: object) -> bool:
        # Structural: fields and ordered children, never the parent link.
        if not isinstance(other, Node):
            return NotImplemented
        pairs = [(self, other)]
        while pairs:
            a, b = pairs.pop()
            if (a.from_sq, a.to_sq, a.description) != (b.from_sq, b.to_sq, b.description):
                return False
            if len(a.children) != len(b.children):
                return False
            pairs.extend(zip(a.children, b.children))
        return True


class OpeningTree:
    """Owner of the root node; the whole tree is persisted as one unit."""

    def __init__(self, root: Optional[Node] = None) -> None:
        self.root = root if root is not None else Node()

    def record_move(self, cursor: Node, from_sq: int, to_sq: int) -> Tuple[Node, bool]:
        """Follow or create the ``(from_sq, to_sq)`` edge below ``cursor``.

        Returns:
            Tuple[Node, bool]: The node now reached and whether it was created.
                Existing children are matched by exact move in insertion order,
                so a position reached by another move order is a separate node.
        """
        existing = cursor.find_child(from_sq, to_sq)
        if existing is not None:
            return existing, False
        return cursor.add_child(from_sq, to_sq), True

    def count(self) -> int:
        """Number of stored moves (the root is not counted)."""
        return sum(1 for _ in self.walk()) - 1

    def walk(self) -> Iterator[Node]:
        """Pre-order traversal starting at the root."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def iter_lines(self) -> Iterator[List[Node]]:
        """Yield every root-to-leaf line as the list of nodes along it."""
        for node in self.walk():
            if node is self.root or node.children:
                continue
            line: List[Node] = []
            cur: Optional[Node] = node
            while cur is not None and cur is not self.root:
                line.append(cur)
                cur = cur.parent
            line.reverse()
            yield line

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OpeningTree):
            return NotImplemented
        return self.root == other.root

    def __repr__(self) -> str:
        return f"OpeningTree(moves={self.count()})"
