"""Pydantic models for the notification pipeline.

Notifications form a tagged union keyed by ``event_name``: one frozen model
per event kind, each carrying only the payload its message needs.
"""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.types import EmailAddress, Epoch, EventName, Gwei, SubscriptionID, ValidatorIndex
from shared.utils import parse_timestamp


class NotificationBase(BaseModel):
    """Fields every notification variant carries."""

    model_config = ConfigDict(frozen=True)

    subscription_id: SubscriptionID
    recipient: EmailAddress = Field(..., min_length=3)


class ValidatorBalanceDecreasedNotification(NotificationBase):
    """A subscribed validator's balance dropped between two epochs."""

    event_name: Literal[EventName.VALIDATOR_BALANCE_DECREASED] = EventName.VALIDATOR_BALANCE_DECREASED
    validator_index: ValidatorIndex
    epoch: Epoch
    prev_balance: Gwei
    balance: Gwei


class ValidatorSlashedNotification(NotificationBase):
    """A subscribed validator was slashed."""

    event_name: Literal[EventName.VALIDATOR_GOT_SLASHED] = EventName.VALIDATOR_GOT_SLASHED
    validator_index: ValidatorIndex
    epoch: Epoch


Notification = Annotated[
    Union[ValidatorBalanceDecreasedNotification, ValidatorSlashedNotification],
    Field(discriminator="event_name"),
]


class SubscriptionMatch(BaseModel):
    """Row returned by a detection query: one subscription matching one validator."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: SubscriptionID
    email: EmailAddress = Field(..., min_length=3)
    validatorindex: ValidatorIndex
    last_sent_ts: datetime | None = None

    @field_validator("last_sent_ts", mode="before")
    @classmethod
    def _parse_last_sent(cls, value):
        return parse_timestamp(value)


class BalanceDecreasedMatch(SubscriptionMatch):
    """Detection row for the balance decreased query."""

    balance: Gwei = Field(..., ge=0)
    prevbalance: Gwei = Field(..., ge=0)
