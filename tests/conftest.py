# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Test utilities and fixtures for transdb testing.

This module provides convenient helpers for building accounts, transfers
and ledgers from compact literals.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

import pytest

from transdb.core import Account, Ledger, LedgerSettings, Transfer


def accounts(balances: Dict[int, int]) -> List[Account]:
    """Build Account records from an ``{account_id: balance}`` mapping."""
    return [Account(account_id, balance) for account_id, balance in balances.items()]


def transaction(*triples: Tuple[int, int, int]) -> List[Transfer]:
    """Build a transaction from ``(from, to, amount)`` triples."""
    return [Transfer.from_tuple(triple) for triple in triples]


def balances_of(ledger: Ledger) -> Dict[int, int]:
    """Current balances as an ``{account_id: balance}`` mapping."""
    return {account.account_id: account.balance for account in ledger.get_balances()}


def make_ledger(
    balances: Dict[int, int],
    transactions: Iterable[List[Transfer]] = (),
    **settings,
) -> Ledger:
    """Create a ledger and push the given transactions without settling."""
    ledger = Ledger(accounts(balances), settings=LedgerSettings(**settings))
    for t in transactions:
        ledger.push_transaction(t)
    return ledger


@pytest.fixture
def two_accounts() -> Ledger:
    """Ledger with accounts 1:10 and 2:5."""
    return make_ledger({1: 10, 2: 5})


@pytest.fixture
def three_accounts() -> Ledger:
    """Ledger with accounts 1:10, 2:0 and 3:0."""
    return make_ledger({1: 10, 2: 0, 3: 0})
