from __future__ import annotations

import json
import logging
import sys
import time
import uuid
from typing import Callable, Iterable, List, Optional

from pydantic import BaseModel

from ..engine.move import parse_uci, square_to_str, str_to_square
from ..repertoire.session import Session
from .error import CommandError, exception_envelope
from .views import LegalView, board_view, children_view, move_view, state_view


logger = logging.getLogger(__name__)

Writer = Callable[[str], None]


class RepertoireProtocol:
    """Line protocol adapter around a repertoire session.

    Notes:
    - The session stays pure; all parsing and output live here.
    - One command per line, one JSON object written per command. Errors are
      written as an ``{"error": {...}}`` envelope and never stop the loop.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    # ---- Command handlers ----
    def cmd_state(self, write: Writer) -> None:
        _emit(write, state_view(self.session))

    def cmd_board(self, write: Writer) -> None:
        _emit(write, board_view(self.session.snapshot()))

    def cmd_legal(self, args: List[str], write: Writer) -> None:
        sq = str_to_square(_single_arg(args, "legal <square>"))
        dests = sorted(self.session.legal_destinations(sq))
        _emit(write, LegalView(square=square_to_str(sq), destinations=[square_to_str(d) for d in dests]))

    def cmd_move(self, args: List[str], write: Writer) -> None:
        mv = parse_uci(_single_arg(args, "move <from><to>"))
        self.session.apply_move(mv.from_sq, mv.to_sq)
        _emit(write, state_view(self.session))

    def cmd_undo(self, write: Writer) -> None:
        undone = self.session.undo_one_ply()
        _emit(write, state_view(self.session, undone=undone))

    def cmd_children(self, write: Writer) -> None:
        _emit(write, children_view(self.session))

    def cmd_select(self, args: List[str], write: Writer) -> None:
        self.session.select_child(_parse_index(_single_arg(args, "select <index>")))
        _emit(write, state_view(self.session))

    def cmd_describe(self, args: List[str], text: str, write: Writer) -> None:
        # describe <index|.> <text...>; "." targets the move just played
        if not args:
            raise CommandError("bad_request", "usage: describe <index|.> <text>")
        target = args[0]
        if target == ".":
            node = self.session.cursor
            if node is self.session.tree.root:
                raise CommandError("bad_request", "no move has been played yet")
            index = None
        else:
            index = _parse_index(target)
            node = self.session.child(index)
        self.session.set_description(node, text)
        _emit(write, move_view(node, index))

    # ---- Dispatch ----
    def handle_line(self, raw: str, write: Writer) -> bool:
        """Run one command line; returns False once the loop should stop."""
        line = raw.strip()
        if not line:
            return True
        parts = line.split()
        cmd, args = parts[0].lower(), parts[1:]
        if cmd == "quit":
            return False

        request_id = str(uuid.uuid4())
        start = time.perf_counter()
        logger.info("request", extra={"request_id": request_id, "command": cmd})
        status = "ok"
        try:
            self._dispatch(cmd, args, line, write)
        except Exception as exc:
            status = "error"
            write(json.dumps(exception_envelope(exc, request_id)))
        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.info(
            "response",
            extra={
                "request_id": request_id,
                "command": cmd,
                "status": status,
                "duration_ms": duration_ms,
            },
        )
        return True

    def _dispatch(self, cmd: str, args: List[str], line: str, write: Writer) -> None:
        if cmd == "state":
            self.cmd_state(write)
        elif cmd == "board":
            self.cmd_board(write)
        elif cmd == "legal":
            self.cmd_legal(args, write)
        elif cmd == "move":
            self.cmd_move(args, write)
        elif cmd == "undo":
            self.cmd_undo(write)
        elif cmd == "children":
            self.cmd_children(write)
        elif cmd == "select":
            self.cmd_select(args, write)
        elif cmd == "describe":
            self.cmd_describe(args, _rest_after(line, 2), write)
        else:
            raise CommandError("bad_request", f"unknown command: {cmd}")


def _emit(write: Writer, view: BaseModel) -> None:
    write(view.model_dump_json(exclude_none=True))


def _single_arg(args: List[str], usage: str) -> str:
    if len(args) != 1:
        raise CommandError("bad_request", f"usage: {usage}")
    return args[0]


def _parse_index(token: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise CommandError("bad_request", f"invalid index: {token!r}")


def _rest_after(line: str, n_tokens: int) -> str:
    # Text after the first n whitespace-separated tokens, inner spacing kept.
    parts = line.split(None, n_tokens)
    return parts[n_tokens] if len(parts) > n_tokens else ""


def _default_writer(line: str) -> None:
    sys.stdout.write(line + "\n")
    sys.stdout.flush()


def run_loop(
    session: Session, lines: Optional[Iterable[str]] = None, write: Writer = _default_writer
) -> None:
    proto = RepertoireProtocol(session)
    for raw in lines if lines is not None else sys.stdin:
        if not proto.handle_line(raw, write):
            break
