# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Core record structures for the transactional ledger.

Accounts and transfers are immutable value records. The ledger keeps its
live balances in a plain mapping and hands out Account snapshots, so no
record is ever mutated after construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple


@dataclass(frozen=True, slots=True)
class Account:
    """
    Snapshot of a single account.

    Attributes:
        account_id: Identity of the account
        balance: Balance at the time the snapshot was taken
    """

    account_id: int
    balance: int

    @classmethod
    def from_tuple(cls, pair: Tuple[int, int]) -> Account:
        account_id, balance = pair
        return cls(account_id=int(account_id), balance=int(balance))


@dataclass(frozen=True, slots=True)
class Transfer:
    """
    Directed movement of ``amount`` from one account to another.

    The amount is not validated beyond the existence of both accounts: zero
    and negative amounts are legal and simply move value the other way.

    Attributes:
        from_account: Account debited by ``amount``
        to_account: Account credited by ``amount``
        amount: Amount moved
    """

    from_account: int
    to_account: int
    amount: int

    @classmethod
    def from_tuple(cls, triple: Tuple[int, int, int]) -> Transfer:
        from_account, to_account, amount = triple
        return cls(
            from_account=int(from_account),
            to_account=int(to_account),
            amount=int(amount),
        )


# An ordered batch of transfers submitted as one atomic unit
Transaction = Sequence[Transfer]
