"""Pydantic models for data validation and type checking."""

from models.notification import (
    BalanceDecreasedMatch,
    Notification,
    SubscriptionMatch,
    ValidatorBalanceDecreasedNotification,
    ValidatorSlashedNotification,
)
from models.types import EventName

__all__ = [
    "EventName",
    "Notification",
    "ValidatorBalanceDecreasedNotification",
    "ValidatorSlashedNotification",
    "SubscriptionMatch",
    "BalanceDecreasedMatch",
]
