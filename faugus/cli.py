"""``faugus-run --game <id>``: launch one configured title and exit."""
from __future__ import annotations

import argparse
import logging
import shlex
import sys
from typing import List, Optional

from .config import ConfigStore
from .errors import FaugusError
from .launch import execute, prepare_launch

_LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="faugus-run", description="Launch a Faugus Launcher game.")
    parser.add_argument("--game", required=True, metavar="ID", help="identifier of the game to launch")
    parser.add_argument("--dry-run", action="store_true", help="print the command instead of running it")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    game_id = args.game.strip()
    if not game_id:
        print("faugus-run: --game needs a non-empty identifier", file=sys.stderr)
        return EXIT_FAILURE

    store = ConfigStore()
    try:
        request = prepare_launch(game_id, store)
        for warning in request.warnings:
            print(f"faugus-run: warning: {warning}", file=sys.stderr)
        if args.dry_run:
            for key, value in request.env.items():
                print(f"{key}={shlex.quote(value)}")
            print(shlex.join(request.argv))
            return EXIT_OK
        execute(request, store)
    except FaugusError as exc:
        _LOGGER.debug("Launch of %s failed", game_id, exc_info=True)
        print(f"faugus-run: {exc}", file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
