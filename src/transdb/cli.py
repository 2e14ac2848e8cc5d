# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Command-line entry point.

Reads harness input, pushes every transaction, settles the ledger and
writes the applied transaction ids and final balances.

Usage:
    transdb input.txt -o out.txt
    transdb --duplicates sum --log-level INFO < input.txt
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .core import DuplicateAccountError, LedgerSettings
from .io import LedgerInputError, read_input, run, write_output

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transdb",
        description="Apply transfer batches to a ledger and settle it.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Input file (defaults to stdin)",
    )
    parser.add_argument(
        "-o",
        "--output",
        default="-",
        help="Output file (defaults to stdout)",
    )
    parser.add_argument(
        "--duplicates",
        choices=["last", "first", "sum", "reject"],
        default="last",
        help="How repeated account ids in the initial balances collapse",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    settings = LedgerSettings(duplicate_accounts=args.duplicates)

    try:
        if args.input == "-":
            parsed = read_input(sys.stdin)
        else:
            with open(args.input, encoding="utf-8") as fin:
                parsed = read_input(fin)
        ledger = run(parsed.accounts, parsed.transactions, settings=settings)
    except (LedgerInputError, DuplicateAccountError) as e:
        print(f"transdb: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"transdb: {e}", file=sys.stderr)
        return 1

    if args.output == "-":
        write_output(ledger, sys.stdout)
    else:
        with open(args.output, "w", encoding="utf-8") as fout:
            write_output(ledger, fout)

    logger.info(f"Wrote {len(ledger)} balances")
    return 0


if __name__ == "__main__":
    sys.exit(main())
