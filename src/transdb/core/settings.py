# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Configuration settings for the transactional ledger.

This module provides the Pydantic model that configures ledger behavior
around account initialization and rejected transactions.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DuplicateAccountPolicy = Literal["last", "first", "sum", "reject"]


class LedgerSettings(BaseModel):
    """
    Configuration for ledger construction and transaction intake.

    Settings are passed explicitly to each Ledger; there is no process-wide
    settings object.
    """

    # Account initialization
    duplicate_accounts: DuplicateAccountPolicy = Field(
        default="last",
        description=(
            "How repeated account ids in the initial balances collapse: "
            "'last' or 'first' occurrence wins, 'sum' adds the balances, "
            "'reject' raises DuplicateAccountError"
        ),
    )

    # Rejected transactions
    log_rejections: bool = Field(
        default=True,
        description="Emit a warning for every transaction rejected for an unknown account",
    )

    track_rejections: bool = Field(
        default=True,
        description="Keep the UnknownAccount results of rejected pushes for inspection",
    )

    max_tracked_rejections: int = Field(
        default=1000,
        ge=1,
        description="Number of most recent rejections kept when tracking is on",
    )

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",  # Prevent typos in field names
    )

    @property
    def strict_accounts(self) -> bool:
        """Check if duplicate initial accounts are treated as an error."""
        return self.duplicate_accounts == "reject"
