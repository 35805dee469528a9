"""
CLI script running the notification sender.

Every cycle collects notifications for the latest epoch, sends one email per
recipient and records the sent subscriptions, then sleeps for the poll
interval. A failed collection is retried after a short backoff.

Usage:
    # Run forever
    uv run python -m notifications.notifications_sender

    # Run a single cycle and exit
    uv run python -m notifications.notifications_sender --once

    # Dry run (collect and render, don't send emails or record anything)
    uv run python -m notifications.notifications_sender --once --dry-run
"""

import argparse
import sys
import time
from typing import Callable

from supabase import Client

from config.notification_settings import (
    NOTIFICATION_ERROR_BACKOFF_SECONDS,
    NOTIFICATION_INTERVAL_SECONDS,
    NOTIFICATION_MAX_WORKERS,
)
from notifications.collector import collect_notifications
from notifications.detectors import Detector, enabled_detectors
from notifications.dispatcher import SendEmail, dispatch_notifications
from notifications.email_sender import send_notification_email
from notifications.error_logger import log_notification_error
from shared.db import get_supabase_client
from shared.utils import print_summary


def run_cycle(
    supabase: Client,
    detectors: list[Detector],
    send_email: SendEmail = send_notification_email,
    max_workers: int = NOTIFICATION_MAX_WORKERS,
    dry_run: bool = False,
) -> dict[str, int]:
    """
    Run one collect -> dispatch cycle.

    Collection errors propagate; delivery errors are handled per recipient.

    Returns:
        Dictionary with stats: recipients, sent, failed, record_failed, previewed
    """
    start = time.monotonic()

    snapshot = collect_notifications(supabase, detectors)
    stats = dispatch_notifications(
        supabase, snapshot, max_workers=max_workers, send_email=send_email, dry_run=dry_run
    )

    print_summary(
        stats["recipients"],
        stats["sent"],
        stats["failed"],
        stats["record_failed"],
        time.monotonic() - start,
        previewed=stats["previewed"],
    )
    return stats


def run_notifications_sender(
    supabase: Client,
    detectors: list[Detector],
    interval: float = NOTIFICATION_INTERVAL_SECONDS,
    error_backoff: float = NOTIFICATION_ERROR_BACKOFF_SECONDS,
    send_email: SendEmail = send_notification_email,
    dry_run: bool = False,
    once: bool = False,
    sleep: Callable[[float], None] = time.sleep,
) -> dict[str, int] | None:
    """
    Run notification cycles forever (or once).

    Args:
        supabase: Database client
        detectors: Detectors to run each cycle
        interval: Seconds to sleep after a completed cycle
        error_backoff: Seconds to sleep after a failed collection
        send_email: Delivery function
        dry_run: If True, nothing is sent or recorded
        once: If True, return after the first cycle
        sleep: Sleep function

    Returns:
        Stats of the cycle when once is True (None if it failed);
        never returns otherwise
    """
    print(f"Starting notification sender with {len(detectors)} detector(s): "
          f"{', '.join(d.event_name.value for d in detectors)}")

    while True:
        try:
            stats = run_cycle(supabase, detectors, send_email=send_email, dry_run=dry_run)
        except Exception as e:
            print(f"✗ Error collecting notifications: {e}")
            error_file = log_notification_error(
                error_type="detection",
                error_message=str(e),
                context={"detectors": [d.event_name.value for d in detectors]},
            )
            if error_file:
                print(f"    Error details logged to: {error_file}")
            if once:
                return None
            sleep(error_backoff)
            continue

        if once:
            return stats
        sleep(interval)


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Send validator notification emails"
    )

    parser.add_argument(
        "--once", action="store_true", help="Run a single cycle and exit"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Dry run mode (don't send emails or update subscriptions)",
    )

    parser.add_argument(
        "--interval",
        type=float,
        default=NOTIFICATION_INTERVAL_SECONDS,
        help=f"Seconds between cycles (default: {NOTIFICATION_INTERVAL_SECONDS})",
    )

    args = parser.parse_args()

    try:
        detectors = enabled_detectors()
        supabase = get_supabase_client()
    except ValueError as e:
        print(f"✗ {e}")
        sys.exit(1)

    stats = run_notifications_sender(
        supabase,
        detectors,
        interval=args.interval,
        dry_run=args.dry_run,
        once=args.once,
    )

    if args.once and stats is None:
        sys.exit(1)


if __name__ == "__main__":
    main()
