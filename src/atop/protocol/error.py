from __future__ import annotations

import logging
from typing import Any, Dict, Tuple

from ..errors import CorruptStoreError, IllegalMoveError, StorageError


logger = logging.getLogger(__name__)


class CommandError(Exception):
    """A command line that could not be understood or carried out."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


def error_envelope(
    *,
    code: str,
    message: str,
    err_type: str,
    request_id: str,
) -> Dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "type": err_type,
            "request_id": request_id,
        }
    }


def exception_envelope(exc: Exception, request_id: str) -> Dict[str, Any]:
    code, err_type, message = _classify(exc)
    if code == "internal_error":
        logger.exception("Unhandled exception", extra={"request_id": request_id})
    return error_envelope(code=code, message=message, err_type=err_type, request_id=request_id)


def _classify(exc: Exception) -> Tuple[str, str, str]:
    if isinstance(exc, CommandError):
        return exc.code, "client_error", exc.message
    if isinstance(exc, IllegalMoveError):
        return "illegal_move", "client_error", str(exc)
    if isinstance(exc, CorruptStoreError):
        return "corrupt_store", "server_error", str(exc)
    if isinstance(exc, StorageError):
        return "storage_error", "server_error", str(exc)
    if isinstance(exc, IndexError):
        return "not_found", "client_error", str(exc)
    if isinstance(exc, ValueError):
        return "bad_request", "client_error", str(exc)
    return "internal_error", "server_error", "Internal Error"
