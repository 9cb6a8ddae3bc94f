from __future__ import annotations

import logging
import os
from typing import Union

from ..errors import StorageError
from .codec import decode_tree, encode_tree
from .tree import OpeningTree


logger = logging.getLogger(__name__)

DEFAULT_STORE = "atop.db"


class RepertoireStore:
    """File-backed persistence for an opening tree.

    Notes:
    - A missing or zero-length file loads as an empty repertoire.
    - ``save`` rewrites the whole file each time; there is no journal, so an
      interrupted write can leave a truncated store behind.
    """

    def __init__(self, path: Union[str, "os.PathLike[str]"] = DEFAULT_STORE) -> None:
        self.path = os.fspath(path)

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def load(self) -> OpeningTree:
        if not self.exists():
            logger.info("no store at %s, starting with an empty repertoire", self.path)
            return OpeningTree()
        try:
            with open(self.path, "rb") as f:
                data = f.read()
        except OSError as e:
            raise StorageError(self.path, f"cannot read store: {e.strerror or e}") from e
        if not data:
            logger.info("store %s is empty, starting with an empty repertoire", self.path)
            return OpeningTree()
        tree = decode_tree(data)
        logger.info("loaded %d moves from %s", tree.count(), self.path)
        return tree

    def save(self, tree: OpeningTree) -> None:
        data = encode_tree(tree)
        try:
            with open(self.path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise StorageError(self.path, f"cannot write store: {e.strerror or e}") from e
        logger.debug("saved %d bytes to %s", len(data), self.path)
