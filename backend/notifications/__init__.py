"""
Validator notification system.

This module handles:
- Detecting subscribed validator events for the latest epoch
- Rate-limiting repeat notifications per subscription
- Aggregating notifications per recipient and event kind
- Sending one notification email per recipient via Resend
- Recording when subscriptions were last notified
"""

from .collector import collect_notifications
from .dispatcher import dispatch_notifications
from .notifications_sender import run_cycle, run_notifications_sender

__all__ = [
    'collect_notifications',
    'dispatch_notifications',
    'run_cycle',
    'run_notifications_sender',
]
