from __future__ import annotations


class AtopError(Exception):
    """Base class for errors raised by the repertoire core."""


class StorageError(AtopError):
    """The repertoire store could not be read or written."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class CorruptStoreError(AtopError, ValueError):
    """Store contents do not follow the repertoire byte grammar.

    Attributes:
        offset (int): Byte offset at which decoding failed.
        reason (str): Short description of what was expected.
    """

    def __init__(self, reason: str, offset: int) -> None:
        super().__init__(f"corrupt store at byte {offset}: {reason}")
        self.reason = reason
        self.offset = offset


class IllegalMoveError(AtopError, ValueError):
    """A move was requested that the rule engine does not allow."""

    def __init__(self, from_sq: int, to_sq: int, reason: str = "illegal move") -> None:
        super().__init__(reason)
        self.from_sq = from_sq
        self.to_sq = to_sq
