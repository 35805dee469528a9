"""
Collection phase of a notification cycle.

Reads the latest epoch, runs the enabled detectors one after another and
aggregates their output. Any detector error aborts the whole collection;
nothing from a partial collection is ever dispatched.
"""

from datetime import datetime

from supabase import Client

from notifications.aggregator import NotificationAggregator, NotificationSnapshot
from notifications.detectors import Detector
from notifications.store import get_latest_epoch
from shared.utils import utc_now


def collect_notifications(
    supabase: Client, detectors: list[Detector], now: datetime | None = None
) -> NotificationSnapshot:
    """
    Collect this cycle's notifications.

    Args:
        supabase: Database client
        detectors: Detectors to run, in order
        now: Current time for the cooldown cutoff (defaults to now, UTC)

    Returns:
        Immutable recipient -> event kind -> notifications snapshot;
        empty while no epoch has been indexed yet
    """
    now = now or utc_now()
    aggregator = NotificationAggregator()

    latest_epoch = get_latest_epoch(supabase)
    if not latest_epoch:
        return aggregator.snapshot()

    for detector in detectors:
        aggregator.absorb_all(detector.detect(supabase, latest_epoch, now))

    return aggregator.snapshot()
