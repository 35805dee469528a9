"""
Error logging utility for notification system.

Writes one timestamped report file per pipeline error (detection, sending,
recording) for debugging. Reports may be written from several dispatch
threads at once, so file names carry microseconds and the error type.
"""

import os
from datetime import datetime
from typing import Any

LOG_DIR = os.getenv(
    "NOTIFICATION_LOG_DIR", os.path.join(os.path.dirname(__file__), "logs")
)


def log_notification_error(
    error_type: str, error_message: str, context: dict[str, Any] | None = None
) -> str:
    """
    Log a notification error to a timestamped file.

    Args:
        error_type: Type of error ('detection', 'sending' or 'recording')
        error_message: The error message
        context: Optional dictionary with additional context (recipient, epoch, subscription_ids, ...)

    Returns:
        Path to the log file created, "" if the report could not be written
    """
    try:
        return _write_report(error_type, error_message, context)
    except OSError as e:
        print(f"  ⚠️  Could not write error report to {LOG_DIR}: {e}")
        return ""


def _write_report(
    error_type: str, error_message: str, context: dict[str, Any] | None
) -> str:
    os.makedirs(LOG_DIR, exist_ok=True)

    now = datetime.now()
    filename = os.path.join(
        LOG_DIR,
        f"notification_{error_type}_error_{now.strftime('%Y%m%d_%H%M%S_%f')}_{os.getpid()}.txt",
    )

    # Same-microsecond reports from different threads get a counter suffix
    base, ext = os.path.splitext(filename)
    counter = 1
    while True:
        try:
            f = open(filename, "x", encoding="utf-8")
            break
        except FileExistsError:
            filename = f"{base}_{counter}{ext}"
            counter += 1

    with f:
        f.write(f"Notification Error Report - {now}\n")
        f.write("=" * 60 + "\n\n")
        f.write(f"Error Type: {error_type}\n")
        f.write(f"Error Message: {error_message}\n\n")

        if context:
            f.write("Context:\n")
            f.write("-" * 60 + "\n")
            for key, value in context.items():
                f.write(f"{key}: {value}\n")

    return filename
