"""
Per-cycle aggregation of detected notifications.

Groups notifications by recipient, then by event kind, keeping detection
order. Each cycle builds its own aggregator and hands an immutable snapshot
to the dispatcher, so a running dispatch never sees the next cycle's data.
"""

from types import MappingProxyType
from typing import Mapping

from models.notification import Notification
from models.types import EmailAddress, EventName, SubscriptionID

# recipient -> event kind -> notifications in detection order
RecipientNotifications = Mapping[EventName, tuple[Notification, ...]]
NotificationSnapshot = Mapping[EmailAddress, RecipientNotifications]


class NotificationAggregator:
    """Collects detector output for one collection cycle."""

    def __init__(self) -> None:
        self._by_recipient: dict[EmailAddress, dict[EventName, list[Notification]]] = {}

    def reset(self) -> None:
        """Drop everything absorbed so far."""
        self._by_recipient = {}

    def absorb(self, recipient: EmailAddress, event_name: EventName, notification: Notification) -> None:
        """Append a notification to the recipient's list for its event kind."""
        events = self._by_recipient.setdefault(recipient, {})
        events.setdefault(event_name, []).append(notification)

    def absorb_all(self, notifications: list[Notification]) -> None:
        for notification in notifications:
            self.absorb(notification.recipient, notification.event_name, notification)

    def __len__(self) -> int:
        return len(self._by_recipient)

    def snapshot(self) -> NotificationSnapshot:
        """Freeze the current state; later absorb/reset calls do not affect it."""
        return MappingProxyType({
            recipient: MappingProxyType({
                event_name: tuple(notifications)
                for event_name, notifications in events.items()
            })
            for recipient, events in self._by_recipient.items()
        })


def subscription_ids(events: RecipientNotifications) -> list[SubscriptionID]:
    """Subscription IDs of every notification in a recipient's message."""
    return [n.subscription_id for notifications in events.values() for n in notifications]
