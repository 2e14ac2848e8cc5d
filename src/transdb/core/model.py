# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base Pydantic model with common configuration.

    Immutable models for parsed inputs and value objects. Mutable ledger
    state lives in the Ledger itself, never in a model.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",  # Catches typos in field names immediately
    )
