"""Byte format of the repertoire store.

Grammar::

    List  := Node* TERMINATOR
    Node  := from to description NUL List

``from`` and ``to`` are single bytes in 0..63, so they never collide with the
0xFF terminator. The description is any run of bytes without NUL. Valid UTF-8
reads as ordinary text; other bytes are carried through ``surrogateescape`` so
they are written back unchanged. A store is the root's child list; there is
no header, version tag or checksum.
"""

from __future__ import annotations

from typing import BinaryIO, List, Tuple

from ..engine.move import MAX_SQUARE
from ..errors import CorruptStoreError
from .tree import Node, OpeningTree


TERMINATOR = 0xFF
NUL = 0x00
TEXT_ERRORS = "surrogateescape"


def encode_description(text: str) -> bytes:
    raw = text.encode("utf-8", TEXT_ERRORS)
    if b"\x00" in raw:
        raise ValueError("description must not contain NUL characters")
    return raw


def encode_tree(tree: OpeningTree) -> bytes:
    """Serialize ``tree`` into its store bytes."""
    out = bytearray()
    # Frames are (node, index of next child to write).
    stack: List[Tuple[Node, int]] = [(tree.root, 0)]
    while stack:
        node, idx = stack.pop()
        if idx == len(node.children):
            out.append(TERMINATOR)
            continue
        child = node.children[idx]
        stack.append((node, idx + 1))
        out.append(child.from_sq)
        out.append(child.to_sq)
        out += encode_description(child.description)
        out.append(NUL)
        stack.append((child, 0))
    return bytes(out)


def write_tree(tree: OpeningTree, stream: BinaryIO) -> int:
    """Write ``tree`` to ``stream``; returns the number of bytes written."""
    data = encode_tree(tree)
    stream.write(data)
    return len(data)


def decode_tree(data: bytes) -> OpeningTree:
    """Rebuild a tree from store bytes.

    The parser keeps an explicit stack of list contexts, the chain of nodes
    whose child lists are still open. A record is appended to the list on top
    of the stack and opens its own child list; a terminator closes the list on
    top. Closing the root's list ends the stream.

    Raises:
        CorruptStoreError: On a square byte above 63, a description missing its
            NUL, a missing terminator at end of input, or bytes after the
            root list has been closed.
    """
    tree = OpeningTree()
    stack: List[Node] = [tree.root]
    pos = 0
    n = len(data)
    while stack:
        if pos >= n:
            raise CorruptStoreError("unexpected end of data, list not terminated", pos)
        head = data[pos]
        if head == TERMINATOR:
            stack.pop()
            pos += 1
            continue
        if head > MAX_SQUARE:
            raise CorruptStoreError(f"invalid origin square byte 0x{head:02x}", pos)
        if pos + 1 >= n:
            raise CorruptStoreError("unexpected end of data, missing destination square", pos + 1)
        to_sq = data[pos + 1]
        if to_sq > MAX_SQUARE:
            raise CorruptStoreError(f"invalid destination square byte 0x{to_sq:02x}", pos + 1)
        start = pos + 2
        end = data.find(b"\x00", start)
        if end < 0:
            raise CorruptStoreError("description is not NUL-terminated", n)
        description = data[start:end].decode("utf-8", TEXT_ERRORS)
        node = stack[-1].add_child(head, to_sq, description)
        stack.append(node)
        pos = end + 1
    if pos != n:
        raise CorruptStoreError("trailing data after end of tree", pos)
    return tree


def read_tree(stream: BinaryIO) -> OpeningTree:
    return decode_tree(stream.read())


def display_description(text: str) -> str:
    """Printable form of a description; undecodable bytes become U+FFFD."""
    return text.encode("utf-8", TEXT_ERRORS).decode("utf-8", "replace")
