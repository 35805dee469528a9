"""
Persistence access for the notification pipeline.

All queries go through the Supabase client. Detection queries are Postgres
functions called over RPC (see sql/notification_functions.sql) so the
join between balances, validators and subscriptions runs in one statement.
"""

from datetime import datetime
from typing import Any, cast

from supabase import Client

from models.types import Epoch, EventName, SubscriptionID


def get_latest_epoch(supabase: Client) -> Epoch:
    """
    Get the latest epoch indexed by the explorer.

    Returns:
        Latest epoch number, 0 if no epoch has been indexed yet
    """
    response = (
        supabase.table("epochs")
        .select("epoch")
        .order("epoch", desc=True)
        .limit(1)
        .execute()
    )

    if not response.data:
        return 0

    row = cast(dict[str, Any], response.data[0])
    return int(row.get("epoch") or 0)


def fetch_subscription_matches(
    supabase: Client,
    function_name: str,
    event_name: EventName,
    latest_epoch: Epoch,
    prev_epoch: Epoch,
    cutoff: int,
) -> list[dict[str, Any]]:
    """
    Run a detection query.

    Args:
        supabase: Database client
        function_name: Postgres function implementing the detection
        event_name: Event kind of the subscriptions to match
        latest_epoch: Latest indexed epoch
        prev_epoch: Epoch to compare against
        cutoff: Unix timestamp; subscriptions sent at or after it are excluded

    Returns:
        Raw rows (subscription id, email, validator index, event payload, last_sent_ts)
    """
    response = supabase.rpc(
        function_name,
        {
            "p_event_name": event_name.value,
            "p_latest_epoch": latest_epoch,
            "p_prev_epoch": prev_epoch,
            "p_cutoff": cutoff,
        },
    ).execute()

    return cast(list[dict[str, Any]], response.data or [])


def update_subscriptions_last_sent(
    supabase: Client, subscription_ids: list[SubscriptionID], sent_at: datetime
) -> None:
    """Set last_sent_ts for all given subscriptions in a single update."""
    if not subscription_ids:
        return

    supabase.table("users_subscriptions").update(
        {"last_sent_ts": sent_at.isoformat()}
    ).in_("id", subscription_ids).execute()
