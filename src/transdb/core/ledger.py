# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Optimistic transactional ledger with greedy settlement.

Transactions are applied to account balances as soon as they are pushed,
which may leave some balances negative. ``settle()`` restores the
non-negative invariant by rolling back pending transactions one at a time,
always choosing the transaction whose rollback leaves the fewest of its own
accounts negative. The choice is a greedy heuristic and makes no attempt to
find the globally smallest set of rollbacks.

The ledger is single-threaded: push, settle and the queries all read and
write the balance map without synchronization, so callers sharing a ledger
across threads must serialize access themselves.

Example:
    ```python
    from transdb.core import Account, Ledger, Transfer

    ledger = Ledger([Account(1, 10), Account(2, 5)])
    ledger.push_transaction([Transfer(1, 2, 3)])
    ledger.settle()

    ledger.get_applied_transactions()  # [0]
    ledger.get_balances()  # [Account(1, 7), Account(2, 8)]
    ```
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, Iterable, List, Optional, Set

import pandas as pd

from .log import TransactionLog, UnknownAccount, build_transaction_log
from .records import Account, Transaction, Transfer
from .settings import LedgerSettings

logger = logging.getLogger(__name__)


class DuplicateAccountError(ValueError):
    """Raised when initial balances repeat an account id under the 'reject' policy."""


class Ledger:
    """
    In-memory account ledger with optimistic application and greedy settlement.

    State:
    - accounts: live balance per account id, fixed set after construction
    - pending: logs applied since the last settle, in push order
    - applied: ids that survived settlement; only grows
    - next_transaction_id: advanced once per accepted push
    """

    def __init__(
        self,
        initial_balances: Iterable[Account],
        settings: Optional[LedgerSettings] = None,
    ):
        """
        Build the account map from the initial balances.

        Args:
            initial_balances: Starting accounts. Repeated ids collapse according
                to ``settings.duplicate_accounts`` (last occurrence wins by default).
            settings: Ledger configuration; defaults to LedgerSettings()

        Raises:
            DuplicateAccountError: If an id repeats and the policy is 'reject'
        """
        self.settings = settings if settings is not None else LedgerSettings()

        self._accounts: Dict[int, int] = self._load_accounts(initial_balances)
        self._pending: Dict[int, TransactionLog] = {}
        self._applied: Set[int] = set()
        self._next_transaction_id = 0
        self._rejections: Deque[UnknownAccount] = deque(
            maxlen=self.settings.max_tracked_rejections
        )
        self._rejected_count = 0

        logger.debug(f"Ledger created with {len(self._accounts)} accounts")

    def _load_accounts(self, initial_balances: Iterable[Account]) -> Dict[int, int]:
        policy = self.settings.duplicate_accounts
        accounts: Dict[int, int] = {}
        for account in initial_balances:
            if account.account_id not in accounts:
                accounts[account.account_id] = account.balance
                continue

            if self.settings.strict_accounts:
                raise DuplicateAccountError(
                    f"Account {account.account_id} appears more than once in initial balances"
                )
            logger.warning(
                f"Duplicate initial balance for account {account.account_id}; "
                f"collapsing with policy '{policy}'"
            )
            if policy == "last":
                accounts[account.account_id] = account.balance
            elif policy == "sum":
                accounts[account.account_id] += account.balance
            # 'first' keeps the existing balance

        return accounts

    # Validation

    def account_exists(self, account_id: int) -> bool:
        """Check if ``account_id`` is one of the ledger's accounts."""
        return account_id in self._accounts

    def validate_transfer(self, transfer: Transfer) -> bool:
        """A transfer is valid when both of its accounts exist."""
        return self.account_exists(transfer.from_account) and self.account_exists(
            transfer.to_account
        )

    # Intake

    def push_transaction(self, transaction: Transaction) -> None:
        """
        Validate a transaction and apply it optimistically.

        If any transfer references an unknown account, the whole transaction
        is dropped: balances, the pending buffer and the id counter are left
        untouched and the rejection is logged. Otherwise the condensed log
        is applied to the balances (which may go negative), buffered until
        the next settle, and the id counter advances.

        Args:
            transaction: Ordered transfers forming one atomic transaction
        """
        result = build_transaction_log(
            transaction, self._next_transaction_id, self.validate_transfer
        )

        if isinstance(result, UnknownAccount):
            self._rejected_count += 1
            if self.settings.track_rejections:
                self._rejections.append(result)
            if self.settings.log_rejections:
                logger.warning(result.message)
            return

        self._apply(result)
        self._pending[result.transaction_id] = result
        self._next_transaction_id += 1
        logger.debug(
            f"Transaction {result.transaction_id} applied to {len(result)} accounts"
        )

    def _apply(self, tlog: TransactionLog) -> None:
        for account_id, delta in tlog.entries():
            self._accounts[account_id] += delta

    def rollback(self, tlog: TransactionLog) -> None:
        """
        Reverse the effect of ``tlog`` on the live balances.

        Every account in the log exists in the ledger, since accounts are
        never removed after construction.
        """
        for account_id, delta in tlog.entries():
            self._accounts[account_id] -= delta

    # Settlement

    def negative_accounts(self) -> List[int]:
        """Ids of accounts whose current balance is below zero."""
        return [
            account_id
            for account_id, balance in self._accounts.items()
            if balance < 0
        ]

    def invalidity_score(self, tlog: TransactionLog) -> int:
        """
        Count the accounts of ``tlog`` left negative if it alone were rolled back.

        Only the accounts the log touches are considered. Nothing is mutated.
        """
        return sum(
            1
            for account_id, delta in tlog.entries()
            if self._accounts[account_id] - delta < 0
        )

    def settle(self) -> None:
        """
        Restore the non-negative invariant and commit surviving transactions.

        While any balance is negative, the pending transaction with the lowest
        invalidity score (ties broken by the lower id) is rolled back and
        discarded. Once no balance is negative, every remaining pending id is
        committed to the applied set and the pending buffer is cleared.

        Runs at most one iteration per pending transaction. Calling settle
        again with nothing pending changes nothing.
        """
        pending_at_start = len(self._pending)
        rolled_back: List[int] = []

        while self.negative_accounts():
            if not self._pending:
                # Only reachable when initial balances were already negative
                logger.warning(
                    f"Settlement exhausted pending transactions with negative "
                    f"accounts remaining: {sorted(self.negative_accounts())}"
                )
                break

            candidate = min(
                self._pending.values(),
                key=lambda tlog: (self.invalidity_score(tlog), tlog.transaction_id),
            )
            self.rollback(candidate)
            del self._pending[candidate.transaction_id]
            rolled_back.append(candidate.transaction_id)
            logger.debug(f"Rolled back transaction {candidate.transaction_id}")

        self._applied.update(self._pending)
        committed = len(self._pending)
        self._pending.clear()

        if pending_at_start:
            logger.info(
                f"Settled {pending_at_start} pending transactions: "
                f"{committed} committed, {len(rolled_back)} rolled back"
            )

    # Queries

    def get_balances(self) -> List[Account]:
        """Snapshot of every account, ordered by account id."""
        return [
            Account(account_id=account_id, balance=balance)
            for account_id, balance in sorted(self._accounts.items())
        ]

    def get_applied_transactions(self) -> List[int]:
        """Ids of all committed transactions, ascending. Empty before the first settle."""
        return sorted(self._applied)

    def pending_transaction_ids(self) -> List[int]:
        """Ids awaiting settlement, in push order."""
        return list(self._pending)

    def get_balance(self, account_id: int) -> int:
        """
        Current balance of one account.

        Raises:
            KeyError: If the account does not exist
        """
        return self._accounts[account_id]

    def total_balance(self) -> int:
        """Sum of all balances; unchanged by any accepted push or rollback."""
        return sum(self._accounts.values())

    @property
    def next_transaction_id(self) -> int:
        return self._next_transaction_id

    @property
    def rejected_count(self) -> int:
        return self._rejected_count

    @property
    def rejections(self) -> List[UnknownAccount]:
        """
        Most recent rejected pushes, oldest first.

        Empty unless ``settings.track_rejections`` is on; at most
        ``settings.max_tracked_rejections`` are kept.
        """
        return list(self._rejections)

    def balances_frame(self) -> pd.DataFrame:
        """
        Materialize the current balances as a DataFrame.

        Returns:
            DataFrame with ``account_id`` and ``balance`` columns sorted by
            account id.
        """
        df = pd.DataFrame(
            sorted(self._accounts.items()),
            columns=["account_id", "balance"],
        )
        return df.astype({"account_id": "int64", "balance": "int64"})

    def __len__(self) -> int:
        return len(self._accounts)

    def __repr__(self) -> str:
        return (
            f"Ledger(accounts={len(self._accounts)}, pending={len(self._pending)}, "
            f"applied={len(self._applied)})"
        )


def create_ledger(
    initial_balances: Iterable[Account],
    settings: Optional[LedgerSettings] = None,
) -> Ledger:
    """Build a Ledger from initial balances."""
    return Ledger(initial_balances, settings=settings)
