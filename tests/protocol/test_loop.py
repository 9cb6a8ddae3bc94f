from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from atop.protocol.loop import RepertoireProtocol, run_loop
from atop.repertoire.codec import decode_tree
from atop.repertoire.session import Session
from atop.repertoire.tree import OpeningTree


def capture_writer(buf: List[str]):
    def _w(line: str) -> None:
        buf.append(line)

    return _w


def _proto() -> RepertoireProtocol:
    return RepertoireProtocol(Session(tree=OpeningTree()))


def send(proto: RepertoireProtocol, line: str) -> Dict[str, Any]:
    out: List[str] = []
    assert proto.handle_line(line, capture_writer(out))
    assert len(out) == 1
    return json.loads(out[0])


def test_initial_state() -> None:
    state = send(_proto(), "state")
    assert state["ply"] == 0
    assert state["side_to_move"] == "first"
    assert state["in_check"] is False
    assert state["path"] == []
    assert state["children"] == []
    assert state["placement"] == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


def test_board_and_legal() -> None:
    proto = _proto()
    board = send(proto, "board")
    assert board["rows"][6] == "PPPPPPPP"
    legal = send(proto, "legal e2")
    assert legal["square"] == "e2"
    assert set(legal["destinations"]) == {"e3", "e4"}


def test_move_undo_and_children() -> None:
    proto = _proto()
    state = send(proto, "move e2e4")
    assert state["path"] == ["e2e4"]
    assert state["side_to_move"] == "second"

    state = send(proto, "undo")
    assert state["undone"] is True
    assert state["ply"] == 0
    assert state["children"][0]["move"] == "e2e4"
    assert state["children"][0]["index"] == 0

    state = send(proto, "undo")
    assert state["undone"] is False

    kids = send(proto, "children")["children"]
    assert [(k["from_square"], k["to_square"]) for k in kids] == [("e2", "e4")]


def test_select_and_describe() -> None:
    proto = _proto()
    send(proto, "move e2e4")
    send(proto, "undo")
    state = send(proto, "select 0")
    assert state["path"] == ["e2e4"]

    view = send(proto, "describe . open  game")
    assert view["description"] == "open  game"
    assert "index" not in view

    send(proto, "undo")
    view = send(proto, "describe 0 king's pawn")
    assert view["index"] == 0
    assert send(proto, "children")["children"][0]["description"] == "king's pawn"


def test_errors_use_envelope() -> None:
    proto = _proto()
    err = send(proto, "move e2e5")["error"]
    assert err["code"] == "illegal_move"
    assert err["type"] == "client_error"
    assert err["request_id"]

    assert send(proto, "move e2")["error"]["code"] == "bad_request"
    assert send(proto, "move")["error"]["code"] == "bad_request"
    assert send(proto, "legal z9")["error"]["code"] == "bad_request"
    assert send(proto, "fly away")["error"]["code"] == "bad_request"
    assert send(proto, "select 3")["error"]["code"] == "not_found"
    assert send(proto, "select x")["error"]["code"] == "bad_request"
    assert send(proto, "describe . nothing played")["error"]["code"] == "bad_request"

    # The session is untouched by failed commands
    assert send(proto, "state")["ply"] == 0


def test_undecodable_description_is_shown_with_replacement_char() -> None:
    tree = decode_tree(bytes([38, 36]) + b"caf\xe9" + bytes([0x00, 0xFF, 0xFF]))
    proto = RepertoireProtocol(Session(tree=tree))
    (child,) = send(proto, "children")["children"]
    assert child["description"] == "caf\ufffd"
    assert send(proto, "state")["children"][0]["description"] == "caf\ufffd"


def test_blank_and_quit() -> None:
    proto = _proto()
    out: List[str] = []
    assert proto.handle_line("   \n", capture_writer(out))
    assert out == []
    assert proto.handle_line("quit", capture_writer(out)) is False


def test_run_loop_persists_and_stops_at_quit(tmp_path: Path) -> None:
    path = str(tmp_path / "atop.db")
    out: List[str] = []
    run_loop(
        Session.open(path),
        ["move e2e4", "describe . main line", "quit", "move e7e5"],
        capture_writer(out),
    )
    assert len(out) == 2
    reopened = Session.open(path)
    (child,) = reopened.tree.root.children
    assert child.description == "main line"
    assert child.children == []
