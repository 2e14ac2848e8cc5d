# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
transdb core

Account and transfer records, the condensed transaction log, and the
ledger that applies transactions optimistically and settles them.
"""

from .ledger import DuplicateAccountError, Ledger, create_ledger
from .log import (
    TransactionLog,
    TransferValidator,
    UnknownAccount,
    UnknownAccountError,
    build_transaction_log,
)
from .model import Model
from .records import Account, Transaction, Transfer
from .settings import DuplicateAccountPolicy, LedgerSettings

__all__ = [
    # Records
    "Account",
    "Transfer",
    "Transaction",
    # Transaction log
    "TransactionLog",
    "TransferValidator",
    "UnknownAccount",
    "UnknownAccountError",
    "build_transaction_log",
    # Ledger
    "Ledger",
    "DuplicateAccountError",
    "create_ledger",
    # Configuration
    "LedgerSettings",
    "DuplicateAccountPolicy",
    "Model",
]
