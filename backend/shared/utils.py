from datetime import datetime, timezone
from decimal import Decimal

from dateutil import parser as date_parser

GWEI_PER_ETH = Decimal(10) ** 9


def gwei_to_eth(gwei: int) -> Decimal:
    """Convert an integer Gwei amount to an exact ETH amount."""
    return Decimal(gwei) / GWEI_PER_ETH


def format_eth(amount: Decimal) -> str:
    """Format an ETH amount without trailing zeros (32.050000000 -> 32.05)."""
    return format(amount.normalize(), "f")


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """Parse a database timestamp into an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = date_parser.isoparse(value)
        except (ValueError, OverflowError, TypeError):
            dt = date_parser.parse(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def print_summary(
    recipients: int, sent: int, failed: int, record_failed: int, duration: float, previewed: int = 0
) -> None:
    """Print notification cycle summary."""
    print(f"\n{'=' * 60}")
    print(f"[{datetime.now()}] Notifications Completed{' (DRY RUN)' if previewed else ''}")
    print(f"{'=' * 60}")
    print(f"Recipients:     {recipients}")
    if previewed:
        print(f"Previewed:      {previewed}")
    print(f"✓ Sent:         {sent}")
    print(f"✗ Failed:       {failed}")
    print(f"⚠️  Not recorded: {record_failed}")
    print(f"Duration:       {duration:.2f}s")
    print(f"{'=' * 60}\n")


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)
