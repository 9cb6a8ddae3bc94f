from __future__ import annotations

import logging

import pytest

from atop.errors import CorruptStoreError, IllegalMoveError, StorageError
from atop.protocol.error import CommandError, error_envelope, exception_envelope


def test_error_envelope_shape() -> None:
    body = error_envelope(code="bad_request", message="oops", err_type="client_error", request_id="r1")
    assert body == {
        "error": {
            "code": "bad_request",
            "message": "oops",
            "type": "client_error",
            "request_id": "r1",
        }
    }


@pytest.mark.parametrize(
    "exc,code,err_type",
    [
        (CommandError("bad_request", "usage: undo"), "bad_request", "client_error"),
        (IllegalMoveError(38, 35), "illegal_move", "client_error"),
        (CorruptStoreError("bad origin", 3), "corrupt_store", "server_error"),
        (StorageError("atop.db", "cannot write store"), "storage_error", "server_error"),
        (IndexError("no child 4"), "not_found", "client_error"),
        (ValueError("bad square"), "bad_request", "client_error"),
    ],
)
def test_exception_mapping(exc: Exception, code: str, err_type: str) -> None:
    err = exception_envelope(exc, "req")["error"]
    assert err["code"] == code
    assert err["type"] == err_type
    assert err["message"] == str(exc)
    assert err["request_id"] == "req"


def test_unexpected_exception_is_internal_and_logged(caplog: pytest.LogCaptureFixture) -> None:
    try:
        raise RuntimeError("secret detail")
    except RuntimeError as exc:
        with caplog.at_level(logging.ERROR, logger="atop.protocol.error"):
            err = exception_envelope(exc, "req")["error"]
    assert err["code"] == "internal_error"
    assert err["type"] == "server_error"
    assert err["message"] == "Internal Error"
    assert any(r.message == "Unhandled exception" for r in caplog.records)
