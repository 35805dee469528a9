"""
Event detectors for the notification pipeline.

A detector turns one detection query into notifications for one event kind.
Detectors are registered in DETECTORS; the sender runs the enabled ones one
after another each cycle and knows nothing else about them.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, cast

from supabase import Client

from config.notification_settings import NOTIFICATION_DETECTORS
from models.notification import (
    BalanceDecreasedMatch,
    Notification,
    SubscriptionMatch,
    ValidatorBalanceDecreasedNotification,
    ValidatorSlashedNotification,
)
from models.types import Epoch, EventName
from notifications.rate_limit import cutoff_timestamp, is_rate_limited
from notifications.store import fetch_subscription_matches


@dataclass(frozen=True)
class Detector:
    """One pluggable event detector."""

    event_name: EventName
    function_name: str
    row_model: type[SubscriptionMatch]
    build: Callable[[SubscriptionMatch, Epoch], Notification]

    def detect(self, supabase: Client, latest_epoch: Epoch, now: datetime) -> list[Notification]:
        """
        Find notifications for subscriptions of this event kind.

        Compares the latest epoch with the one before it. Query and
        validation errors propagate to the caller unchanged.

        Args:
            supabase: Database client
            latest_epoch: Latest indexed epoch (0 if none yet)
            now: Current time, used for the cooldown cutoff

        Returns:
            One notification per matching (subscription, validator) row,
            in query order
        """
        if not latest_epoch:
            return []

        rows = fetch_subscription_matches(
            supabase,
            self.function_name,
            self.event_name,
            latest_epoch,
            latest_epoch - 1,
            cutoff_timestamp(now),
        )

        notifications = []
        for row in rows:
            match = self.row_model.model_validate(row)
            # The query already filters on the cutoff
            if is_rate_limited(match.last_sent_ts, now):
                continue
            notifications.append(self.build(match, latest_epoch))

        return notifications


def _build_balance_decreased(match: SubscriptionMatch, epoch: Epoch) -> Notification:
    match = cast(BalanceDecreasedMatch, match)
    return ValidatorBalanceDecreasedNotification(
        subscription_id=match.id,
        recipient=match.email,
        validator_index=match.validatorindex,
        epoch=epoch,
        prev_balance=match.prevbalance,
        balance=match.balance,
    )


def _build_slashed(match: SubscriptionMatch, epoch: Epoch) -> Notification:
    return ValidatorSlashedNotification(
        subscription_id=match.id,
        recipient=match.email,
        validator_index=match.validatorindex,
        epoch=epoch,
    )


VALIDATOR_BALANCE_DECREASED = Detector(
    event_name=EventName.VALIDATOR_BALANCE_DECREASED,
    function_name="validator_balance_decreased_subscriptions",
    row_model=BalanceDecreasedMatch,
    build=_build_balance_decreased,
)

VALIDATOR_SLASHED = Detector(
    event_name=EventName.VALIDATOR_GOT_SLASHED,
    function_name="validator_slashed_subscriptions",
    row_model=SubscriptionMatch,
    build=_build_slashed,
)

# Detector registry
DETECTORS: dict[EventName, Detector] = {
    detector.event_name: detector
    for detector in (VALIDATOR_BALANCE_DECREASED, VALIDATOR_SLASHED)
}


def get_detector(event_name: str) -> Detector:
    """Return the detector for event_name; raises KeyError if unknown."""
    try:
        return DETECTORS[EventName(event_name)]
    except ValueError:
        raise KeyError(f"Unknown event name: {event_name}")


def enabled_detectors(names: list[str] | None = None) -> list[Detector]:
    """
    Resolve the detectors to run.

    Args:
        names: Event names to enable. Defaults to NOTIFICATION_DETECTORS;
               an empty list enables every registered detector.

    Returns:
        Detectors in the order given (registry order when all are enabled)

    Raises:
        ValueError: If a name is not a registered event kind
    """
    if names is None:
        names = NOTIFICATION_DETECTORS

    if not names:
        return list(DETECTORS.values())

    detectors = []
    for name in names:
        try:
            detectors.append(get_detector(name))
        except KeyError:
            raise ValueError(f"NOTIFICATION_DETECTORS: unknown event name '{name}'")
    return detectors
