# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Text input and output for the ledger harness.

Input is a line-oriented stream of whitespace separated integers:

    <n_accounts>
    <account_id> <balance>          (n_accounts lines)
    <n_transactions>
    <n_transfers>                   (per transaction)
    <from> <to> <amount>            (n_transfers lines)

Blank lines are skipped and tokens beyond the ones a record needs are
ignored. Output lists the sorted applied transaction ids followed by the
balances sorted by account id, each list preceded by its length.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Sequence, TextIO, Tuple

from pydantic import Field

from .core import Account, Ledger, LedgerSettings, Model, Transfer

logger = logging.getLogger(__name__)


class LedgerInputError(ValueError):
    """Raised when harness input is malformed or truncated."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class LedgerInput(Model):
    """Parsed harness input: initial accounts and the transactions to push."""

    accounts: List[Account] = Field(default_factory=list)
    transactions: List[List[Transfer]] = Field(default_factory=list)

    @property
    def transfer_count(self) -> int:
        return sum(len(transaction) for transaction in self.transactions)


class _LineReader:
    """Yields the integer fields of successive non-blank lines."""

    def __init__(self, stream: TextIO):
        self._lines: Iterator[Tuple[int, str]] = enumerate(stream, start=1)
        self.line_number = 0

    def read(self, count: int, what: str) -> List[int]:
        for line_number, line in self._lines:
            self.line_number = line_number
            tokens = line.split()
            if not tokens:
                continue
            if len(tokens) < count:
                raise LedgerInputError(
                    f"expected {count} integers for {what}, got {len(tokens)}",
                    line_number,
                )
            try:
                return [int(token) for token in tokens[:count]]
            except ValueError:
                raise LedgerInputError(
                    f"non-integer value in {what}: {line.strip()!r}", line_number
                ) from None

        raise LedgerInputError(f"unexpected end of input while reading {what}")

    def read_count(self, what: str) -> int:
        (count,) = self.read(1, what)
        if count < 0:
            raise LedgerInputError(f"negative {what}: {count}", self.line_number)
        return count


def read_input(stream: TextIO) -> LedgerInput:
    """
    Parse the harness input format.

    Args:
        stream: Text stream positioned at the account count

    Returns:
        LedgerInput with accounts in file order and transactions in push order

    Raises:
        LedgerInputError: If a record is missing, short or not integral
    """
    reader = _LineReader(stream)

    accounts = []
    for _ in range(reader.read_count("account count")):
        account_id, balance = reader.read(2, "account balance")
        accounts.append(Account(account_id=account_id, balance=balance))

    transactions = []
    for _ in range(reader.read_count("transaction count")):
        transaction = []
        for _ in range(reader.read_count("transfer count")):
            transaction.append(Transfer.from_tuple(reader.read(3, "transfer")))
        transactions.append(transaction)

    parsed = LedgerInput(accounts=accounts, transactions=transactions)
    logger.debug(
        f"Read {len(parsed.accounts)} accounts and {len(parsed.transactions)} "
        f"transactions ({parsed.transfer_count} transfers)"
    )
    return parsed


def run(
    accounts: Sequence[Account],
    transactions: Sequence[Sequence[Transfer]],
    settings: Optional[LedgerSettings] = None,
) -> Ledger:
    """Build a ledger, push every transaction in order and settle it."""
    ledger = Ledger(accounts, settings=settings)
    for transaction in transactions:
        ledger.push_transaction(transaction)
    ledger.settle()
    return ledger


def write_output(ledger: Ledger, stream: TextIO) -> None:
    """Write the applied transaction ids and final balances in harness format."""
    applied = sorted(ledger.get_applied_transactions())
    stream.write(f"{len(applied)}\n")
    for transaction_id in applied:
        stream.write(f"{transaction_id}\n")

    balances = sorted(ledger.get_balances(), key=lambda account: account.account_id)
    stream.write(f"{len(balances)}\n")
    for account in balances:
        stream.write(f"{account.account_id} {account.balance}\n")
