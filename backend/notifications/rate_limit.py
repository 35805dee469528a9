"""
Cooldown between two notifications for the same subscription.

Detection queries receive the cutoff as a Unix timestamp and exclude every
subscription whose last_sent_ts is not older than it. Returned rows are
checked again with ``is_rate_limited`` before they become notifications.
"""

from datetime import datetime, timedelta

from config.notification_settings import NOTIFICATION_RATE_LIMIT_SECONDS

NOTIFICATION_RATE_LIMIT = timedelta(seconds=NOTIFICATION_RATE_LIMIT_SECONDS)


def rate_limit_cutoff(now: datetime, window: timedelta = NOTIFICATION_RATE_LIMIT) -> datetime:
    """Subscriptions last sent at or after this moment are suppressed."""
    return now - window


def cutoff_timestamp(now: datetime, window: timedelta = NOTIFICATION_RATE_LIMIT) -> int:
    """Cutoff as whole Unix seconds, the form the detection queries take."""
    return int(rate_limit_cutoff(now, window).timestamp())


def is_rate_limited(
    last_sent: datetime | None, now: datetime, window: timedelta = NOTIFICATION_RATE_LIMIT
) -> bool:
    """
    Check whether a subscription is still inside its cooldown window.

    Args:
        last_sent: Last successful send for the subscription, None if never sent
        now: Current time (timezone aware)
        window: Cooldown length

    Returns:
        True if the subscription must not be notified yet
    """
    if last_sent is None:
        return False
    return last_sent >= rate_limit_cutoff(now, window)
