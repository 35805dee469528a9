# Runtime settings for the notification sender, read once from the
# environment (and a local .env file) at import time.

import os

from dotenv import load_dotenv

load_dotenv()


def int_env(name: str, default: int) -> int:
    """Read an integer setting; unset or empty means default."""
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


# Public site used to build links in notification emails
SITE_DOMAIN = os.getenv("SITE_DOMAIN", "beaconcha.in")

# Minimum time between two successful notifications for one subscription
NOTIFICATION_RATE_LIMIT_SECONDS = int_env("NOTIFICATION_RATE_LIMIT_SECONDS", 600)

# Sleep after a completed cycle
NOTIFICATION_INTERVAL_SECONDS = int_env("NOTIFICATION_INTERVAL_SECONDS", 60)

# Sleep after a failed collection, before collecting again
NOTIFICATION_ERROR_BACKOFF_SECONDS = int_env("NOTIFICATION_ERROR_BACKOFF_SECONDS", 10)

# Upper bound on recipients delivered to in parallel
NOTIFICATION_MAX_WORKERS = int_env("NOTIFICATION_MAX_WORKERS", 10)

NOTIFICATION_SUBJECT = "beaconcha.in: Notification"

NOTIFICATION_FROM_EMAIL = os.getenv("NOTIFICATION_FROM_EMAIL", "notifications@beaconcha.in")

# Comma separated event names; empty means every registered detector runs
NOTIFICATION_DETECTORS = [
    name.strip()
    for name in os.getenv("NOTIFICATION_DETECTORS", "").split(",")
    if name.strip()
]
