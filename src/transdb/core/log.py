# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Condensed per-account view of a transaction.

A transaction of M transfers touching N distinct accounts is reduced to N
net deltas. Applying, rolling back and scoring a transaction during
settlement then costs O(N) rather than O(M), and every account appears in
the log exactly once.

Construction is all-or-nothing: ``build_transaction_log`` either returns a
complete TransactionLog or an UnknownAccount result describing the first
transfer that failed validation. A partial log is never observable.

Example:
    ```python
    from transdb.core import Transfer, UnknownAccount, build_transaction_log

    result = build_transaction_log(
        [Transfer(1, 2, 5), Transfer(2, 3, 2)],
        transaction_id=0,
        validate=ledger.validate_transfer,
    )
    if isinstance(result, UnknownAccount):
        ...
    result.net_change(2)  # 3
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Iterator, Mapping, Tuple, Union

import pandas as pd

from .records import Transfer

TransferValidator = Callable[[Transfer], bool]


class UnknownAccountError(LookupError):
    """Raised form of UnknownAccount for callers that want an exception."""

    def __init__(self, rejection: UnknownAccount):
        super().__init__(rejection.message)
        self.rejection = rejection


@dataclass(frozen=True, slots=True)
class UnknownAccount:
    """
    Result of a transaction that referenced an account the ledger does not hold.

    Attributes:
        transaction_id: Id the transaction would have received
        transfer: First transfer that failed validation
        transfer_index: Position of that transfer within the transaction
    """

    transaction_id: int
    transfer: Transfer
    transfer_index: int

    @property
    def message(self) -> str:
        return (
            f"Transaction {self.transaction_id} rejected: transfer "
            f"#{self.transfer_index} ({self.transfer.from_account} -> "
            f"{self.transfer.to_account}, {self.transfer.amount}) "
            f"references an unknown account"
        )

    def to_error(self) -> UnknownAccountError:
        return UnknownAccountError(self)


class TransactionLog:
    """
    Immutable net-delta map for one validated transaction.

    Instances are produced by ``build_transaction_log``; the entries are held
    behind a read-only mapping proxy and there is no mutating API.
    """

    __slots__ = ("_transaction_id", "_entries")

    def __init__(self, transaction_id: int, entries: Mapping[int, int]):
        self._transaction_id = transaction_id
        self._entries = MappingProxyType(dict(entries))

    @property
    def transaction_id(self) -> int:
        return self._transaction_id

    def net_change(self, account_id: int) -> int:
        """Net delta for ``account_id``, or 0 if the transaction never touched it."""
        return self._entries.get(account_id, 0)

    def entries(self) -> Iterator[Tuple[int, int]]:
        """Iterate ``(account_id, net_change)`` pairs; each call starts afresh."""
        return iter(self._entries.items())

    def touches(self, account_id: int) -> bool:
        """True if some transfer in the transaction referenced ``account_id``."""
        return account_id in self._entries

    def total(self) -> int:
        """Sum of all deltas. Transfers only move value, so this is always 0."""
        return sum(self._entries.values())

    def to_dataframe(self) -> pd.DataFrame:
        """
        Materialize the log as a DataFrame.

        Returns:
            DataFrame with ``account_id`` and ``net_change`` columns, one row
            per touched account, ordered by account id.
        """
        df = pd.DataFrame(
            sorted(self._entries.items()),
            columns=["account_id", "net_change"],
        )
        return df.astype({"account_id": "int64", "net_change": "int64"})

    def __contains__(self, account_id: object) -> bool:
        return account_id in self._entries

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransactionLog):
            return NotImplemented
        return (
            self._transaction_id == other._transaction_id
            and self._entries == other._entries
        )

    def __hash__(self) -> int:
        return hash((self._transaction_id, frozenset(self._entries.items())))

    def __repr__(self) -> str:
        return f"TransactionLog(transaction_id={self._transaction_id}, entries={dict(self._entries)})"


def build_transaction_log(
    transaction: Iterable[Transfer],
    transaction_id: int,
    validate: TransferValidator,
) -> Union[TransactionLog, UnknownAccount]:
    """
    Condense a transaction into a TransactionLog.

    Transfers are folded in order: the ``from`` account is debited and the
    ``to`` account credited, each entry created on first touch. Validation
    runs before each transfer is folded; the first failure abandons the
    whole transaction.

    Args:
        transaction: Ordered transfers of one atomic transaction
        transaction_id: Id assigned to the resulting log
        validate: Predicate deciding whether a transfer is acceptable

    Returns:
        The complete TransactionLog, or UnknownAccount for the first
        transfer that failed validation
    """
    entries: Dict[int, int] = {}
    for index, transfer in enumerate(transaction):
        # A single bad transfer voids the entire transaction
        if not validate(transfer):
            return UnknownAccount(
                transaction_id=transaction_id,
                transfer=transfer,
                transfer_index=index,
            )

        entries[transfer.from_account] = (
            entries.get(transfer.from_account, 0) - transfer.amount
        )
        entries[transfer.to_account] = (
            entries.get(transfer.to_account, 0) + transfer.amount
        )

    return TransactionLog(transaction_id, entries)
