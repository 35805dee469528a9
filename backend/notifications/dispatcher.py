"""
Concurrent delivery of aggregated notification emails.

Each recipient in a cycle's snapshot gets one task on a bounded thread pool:
render -> send -> mark subscriptions sent. Tasks are independent; a failure
for one recipient is logged and never touches another. dispatch_notifications()
returns only after every task has finished.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Dict

from supabase import Client

from config.notification_settings import NOTIFICATION_MAX_WORKERS, NOTIFICATION_SUBJECT
from notifications.aggregator import NotificationSnapshot, RecipientNotifications, subscription_ids
from notifications.email_sender import send_notification_email
from notifications.error_logger import log_notification_error
from notifications.render import build_message_html, build_message_text
from notifications.store import update_subscriptions_last_sent
from shared.utils import utc_now

SENT = "sent"
FAILED = "failed"
RECORD_FAILED = "record_failed"
PREVIEWED = "previewed"

SendEmail = Callable[..., Dict[str, Any]]


def deliver_to_recipient(
    supabase: Client,
    recipient: str,
    events: RecipientNotifications,
    send_email: SendEmail = send_notification_email,
    dry_run: bool = False,
) -> str:
    """
    Render, send and record one recipient's notification email.

    last_sent_ts is only written after the email was accepted, and only
    for the subscriptions included in it.

    Returns:
        SENT, FAILED (email not delivered), RECORD_FAILED (delivered,
        but last_sent_ts could not be updated) or PREVIEWED (dry run)
    """
    ids = subscription_ids(events)
    text_body = build_message_text(events)

    if dry_run:
        preview = text_body[:200].replace("\n", " ")
        print(f"  [DRY RUN] Would send {len(ids)} notification(s) to {recipient}: {preview!r}")
        return PREVIEWED

    result = send_email(recipient, NOTIFICATION_SUBJECT, text_body, build_message_html(events))

    if not result["success"]:
        error_msg = str(result.get("error", "Unknown error"))
        print(f"  ✗ Failed to send notification email to {recipient}: {error_msg}")
        log_notification_error(
            error_type="sending",
            error_message=error_msg,
            context={
                "recipient": recipient,
                "notification_count": len(ids),
                "subscription_ids": ids,
            },
        )
        return FAILED

    try:
        update_subscriptions_last_sent(supabase, ids, utc_now())
    except Exception as e:
        print(f"  ⚠️  Sent to {recipient} but could not update sent-time of {len(ids)} subscription(s): {e}")
        log_notification_error(
            error_type="recording",
            error_message=str(e),
            context={
                "recipient": recipient,
                "email_id": result.get("email_id"),
                "subscription_ids": ids,
            },
        )
        return RECORD_FAILED

    print(f"  ✓ Sent {len(ids)} notification(s) to {recipient}")
    return SENT


def dispatch_notifications(
    supabase: Client,
    snapshot: NotificationSnapshot,
    max_workers: int = NOTIFICATION_MAX_WORKERS,
    send_email: SendEmail = send_notification_email,
    dry_run: bool = False,
) -> dict[str, int]:
    """
    Deliver every recipient's notifications concurrently.

    Args:
        supabase: Database client used to record sent subscriptions
        snapshot: Recipient -> event kind -> notifications for this cycle
        max_workers: Maximum number of recipients handled at once
        send_email: Delivery function (defaults to the Resend sender)
        dry_run: If True, render and print only; nothing is sent or recorded

    Returns:
        Dictionary with stats: recipients, sent, failed, record_failed, previewed
    """
    stats = {"recipients": len(snapshot), SENT: 0, FAILED: 0, RECORD_FAILED: 0, PREVIEWED: 0}
    if not snapshot:
        return stats

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(snapshot)))) as executor:
        futures = {
            executor.submit(deliver_to_recipient, supabase, recipient, events, send_email, dry_run): recipient
            for recipient, events in snapshot.items()
        }

        for future in as_completed(futures):
            recipient = futures[future]
            try:
                outcome = future.result()
            except Exception as e:
                print(f"  ✗ Error delivering notifications to {recipient}: {e}")
                log_notification_error(
                    error_type="sending",
                    error_message=str(e),
                    context={"recipient": recipient},
                )
                outcome = FAILED
            stats[outcome] += 1

    return stats
