"""
``please`` command line.

    alfred-please --wallets wallets.json '{"kind": "send", "amount": "20",
        "currency": "XLM", "from": "master", "to": "jennifer"}'
    alfred-please --wallets wallets.json --testnet -y --file offer.json

The statement is a JSON statement document (see alfred_please.statement),
given inline or with --file. On success the transaction hash is printed
to stdout. Any failure prints its message to stderr and exits 1; a
declined confirmation exits 1 as well, after submitting nothing.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from alfred_please.config import EngineConfig
from alfred_please.confirm import TerminalGate
from alfred_please.engine import Engine
from alfred_please.errors import PleaseError, UserDeclined
from alfred_please.selection import TerminalSelector
from alfred_please.statement import parse_statement_text
from alfred_please.stellar.horizon_client import HorizonClient
from alfred_please.wallet import InMemoryWalletStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="alfred-please",
        description="Resolve a statement into a signed Stellar transaction and submit it",
    )
    parser.add_argument("statement", nargs="?", help="JSON statement document")
    parser.add_argument("--file", "-f", type=Path, help="read the statement from a file")
    parser.add_argument(
        "--wallets", type=Path, required=True, help="wallet store JSON document"
    )
    parser.add_argument(
        "--yes", "-y", action="store_true", default=None,
        help="if set, no confirmation prompt will be shown",
    )
    parser.add_argument(
        "--testnet", action="store_true", default=None, help="use the test network"
    )
    parser.add_argument("--horizon-url", help="Horizon endpoint override")
    parser.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    return parser


def _read_statement_text(args: argparse.Namespace) -> str:
    if args.file is not None:
        return args.file.read_text(encoding="utf-8")
    if args.statement is not None:
        return args.statement
    return sys.stdin.read()


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = EngineConfig.from_env().with_overrides(
            testnet=args.testnet,
            auto_confirm=args.yes,
            horizon_url=args.horizon_url,
        )
        statement = parse_statement_text(_read_statement_text(args))
        store = InMemoryWalletStore.load_json(args.wallets)
    except PleaseError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    except (OSError, ValueError, KeyError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    engine = Engine(
        store,
        HorizonClient(config.resolved_horizon_url),
        selector=TerminalSelector(),
        gate=TerminalGate(),
        config=config,
    )

    try:
        result = asyncio.run(engine.run(statement))
    except UserDeclined as exc:
        logger.info("declined: %s", exc.message)
        print(exc.message, file=sys.stderr)
        return 1
    except PleaseError as exc:
        logger.debug("statement failed with %s", exc.kind, exc_info=True)
        print(exc.message, file=sys.stderr)
        return 1

    print(result.tx_hash)
    return 0


if __name__ == "__main__":
    sys.exit(main())
