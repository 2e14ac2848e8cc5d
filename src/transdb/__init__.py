# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
transdb - In-memory transactional ledger

Accepts batches of account-to-account transfers, applies them optimistically
and settles the ledger by rolling back the pending transactions that keep
balances negative.

Example Usage:
    ```python
    from transdb import Account, Ledger, Transfer

    ledger = Ledger([Account(1, 10), Account(2, 0), Account(3, 0)])
    ledger.push_transaction([Transfer(1, 2, 5)])
    ledger.push_transaction([Transfer(1, 3, 20)])
    ledger.settle()

    print(ledger.get_applied_transactions())  # [0]
    ```
"""

import logging

from .core import (
    Account,
    DuplicateAccountError,
    Ledger,
    LedgerSettings,
    TransactionLog,
    Transfer,
    UnknownAccount,
    UnknownAccountError,
    build_transaction_log,
    create_ledger,
)

__version__ = "0.1.0"

# Library logging stays silent unless the application configures handlers
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Account",
    "DuplicateAccountError",
    "Ledger",
    "LedgerSettings",
    "TransactionLog",
    "Transfer",
    "UnknownAccount",
    "UnknownAccountError",
    "build_transaction_log",
    "create_ledger",
    "__version__",
]
