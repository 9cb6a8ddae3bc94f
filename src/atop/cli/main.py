from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional

from ..errors import CorruptStoreError, StorageError
from ..protocol.loop import run_loop
from ..repertoire.session import Session
from ..repertoire.store import DEFAULT_STORE


logger = logging.getLogger(__name__)


@dataclass
class Settings:
    store_path: str = DEFAULT_STORE
    log_level: str = "WARNING"


def parse_args(argv: Optional[List[str]] = None) -> Settings:
    parser = argparse.ArgumentParser(
        prog="atop", description="Atomic chess opening repertoire (stdio command protocol)"
    )
    parser.add_argument(
        "--db", type=str, default=DEFAULT_STORE, help=f"Repertoire store path (default: {DEFAULT_STORE})"
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for stderr output (default: WARNING)",
    )
    args = parser.parse_args(argv)
    return Settings(store_path=args.db, log_level=args.log_level)


def main(argv: Optional[List[str]] = None) -> int:
    settings = parse_args(argv)
    # stdout carries the protocol, so logs go to stderr
    logging.basicConfig(level=getattr(logging, settings.log_level), stream=sys.stderr)

    try:
        session = Session.open(settings.store_path)
    except (StorageError, CorruptStoreError) as e:
        logger.error("cannot open repertoire: %s", e)
        return 1
    run_loop(session)
    return 0


if __name__ == "__main__":
    sys.exit(main())
