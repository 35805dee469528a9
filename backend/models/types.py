"""Shared type definitions for type checking.

Uses NewType for IDs to provide compile-time type safety - prevents mixing
a subscription ID with a validator index.

Uses TypeAlias for values that are purely structural.
"""

from enum import Enum
from typing import NewType, TypeAlias

# ID types using NewType for type safety
SubscriptionID = NewType("SubscriptionID", int)
ValidatorIndex = NewType("ValidatorIndex", int)

# Structural aliases using TypeAlias
Epoch: TypeAlias = int  # consensus epoch, 0 means not yet established
Gwei: TypeAlias = int  # 1 ETH = 1e9 Gwei
EmailAddress: TypeAlias = str


class EventName(str, Enum):
    """Event kinds a user can subscribe to (users_subscriptions.event_name)."""

    VALIDATOR_BALANCE_DECREASED = "validator_balance_decreased"
    VALIDATOR_GOT_SLASHED = "validator_got_slashed"

    def __str__(self) -> str:
        return self.value
