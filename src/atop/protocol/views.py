from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..engine.board import Board, Side
from ..engine.move import square_to_str
from ..repertoire.codec import display_description
from ..repertoire.session import Session
from ..repertoire.tree import Node


class MoveView(BaseModel):
    index: Optional[int] = Field(default=None, description="Position among the cursor's children")
    from_square: str
    to_square: str
    move: str = Field(..., description="Coordinate move, e.g. e2e4")
    description: str


class BoardView(BaseModel):
    placement: str
    rows: List[str] = Field(..., description="Rank 0 first, '.' for empty squares")


class LegalView(BaseModel):
    square: str
    destinations: List[str]


class ChildrenView(BaseModel):
    children: List[MoveView]


class StateView(BaseModel):
    ply: int
    side_to_move: Literal["first", "second"]
    in_check: bool
    placement: str
    path: List[str]
    children: List[MoveView]
    undone: Optional[bool] = None


def move_view(node: Node, index: Optional[int] = None) -> MoveView:
    return MoveView(
        index=index,
        from_square=square_to_str(node.from_sq),
        to_square=square_to_str(node.to_sq),
        move=node.move.to_uci(),
        description=display_description(node.description),
    )


def children_view(session: Session) -> ChildrenView:
    return ChildrenView(children=[move_view(n, i) for i, n in enumerate(session.children())])


def board_view(board: Board) -> BoardView:
    return BoardView(placement=board.to_fen(), rows=board.rows())


def state_view(session: Session, *, undone: Optional[bool] = None) -> StateView:
    return StateView(
        ply=session.ply,
        side_to_move="first" if session.side_to_move is Side.FIRST else "second",
        in_check=session.in_check,
        placement=session.board.to_fen(),
        path=[m.to_uci() for m in session.path()],
        children=children_view(session).children,
        undone=undone,
    )
