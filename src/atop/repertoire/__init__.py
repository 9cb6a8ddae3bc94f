from __future__ import annotations

from typing import Optional

from .session import Session
from .store import DEFAULT_STORE, RepertoireStore
from .tree import Node, OpeningTree


__all__ = ["Node", "OpeningTree", "RepertoireStore", "Session", "open_repertoire"]


def open_repertoire(path: Optional[str] = None) -> Session:
    return Session.open(path or DEFAULT_STORE)
