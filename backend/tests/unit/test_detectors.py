"""
Unit tests for notifications/detectors.py

Tests detection queries, row conversion, rate limiting of returned rows
and the detector registry.
"""

import unittest
from datetime import datetime, timedelta, timezone

from pydantic import ValidationError

from models.notification import ValidatorBalanceDecreasedNotification, ValidatorSlashedNotification
from models.types import EventName
from notifications.detectors import (
    DETECTORS,
    VALIDATOR_BALANCE_DECREASED,
    VALIDATOR_SLASHED,
    enabled_detectors,
    get_detector,
)
from tests.fixtures.mock_helpers import create_mock_supabase
from tests.fixtures.notification_factory import create_test_balance_row, create_test_slashed_row

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)
BALANCE_FN = "validator_balance_decreased_subscriptions"
SLASHED_FN = "validator_slashed_subscriptions"


class TestBalanceDecreasedDetector(unittest.TestCase):
    """Tests for the validator balance decreased detector."""

    def test_zero_epoch_is_noop(self):
        """No epoch established yet: nothing queried, nothing returned."""
        supabase = create_mock_supabase()

        result = VALIDATOR_BALANCE_DECREASED.detect(supabase, 0, NOW)

        self.assertEqual(result, [])
        supabase.rpc.assert_not_called()

    def test_query_parameters(self):
        """Query receives event name, latest/previous epoch and cutoff."""
        supabase = create_mock_supabase(rpc_data={BALANCE_FN: []})

        VALIDATOR_BALANCE_DECREASED.detect(supabase, 100, NOW)

        supabase.rpc.assert_called_once_with(
            BALANCE_FN,
            {
                "p_event_name": "validator_balance_decreased",
                "p_latest_epoch": 100,
                "p_prev_epoch": 99,
                "p_cutoff": int((NOW - timedelta(seconds=600)).timestamp()),
            },
        )

    def test_row_becomes_notification(self):
        """Each row becomes one notification for the latest epoch."""
        supabase = create_mock_supabase(rpc_data={BALANCE_FN: [create_test_balance_row()]})

        result = VALIDATOR_BALANCE_DECREASED.detect(supabase, 100, NOW)

        self.assertEqual(len(result), 1)
        notification = result[0]
        self.assertIsInstance(notification, ValidatorBalanceDecreasedNotification)
        self.assertEqual(notification.subscription_id, 7)
        self.assertEqual(notification.recipient, "a@x.com")
        self.assertEqual(notification.validator_index, 42)
        self.assertEqual(notification.balance, 32_050_000_000)
        self.assertEqual(notification.prev_balance, 32_100_000_000)
        self.assertEqual(notification.epoch, 100)
        self.assertEqual(notification.event_name, EventName.VALIDATOR_BALANCE_DECREASED)

    def test_one_notification_per_row_in_query_order(self):
        """Rows keep their order; no merging across subscriptions."""
        rows = [
            create_test_balance_row(subscription_id=3, email="b@x.com"),
            create_test_balance_row(subscription_id=1, email="a@x.com", validator_index=5),
            create_test_balance_row(subscription_id=2, email="a@x.com", validator_index=6),
        ]
        supabase = create_mock_supabase(rpc_data={BALANCE_FN: rows})

        result = VALIDATOR_BALANCE_DECREASED.detect(supabase, 100, NOW)

        self.assertEqual([n.subscription_id for n in result], [3, 1, 2])

    def test_recently_sent_row_is_dropped(self):
        """Rows inside the cooldown are never turned into notifications."""
        recent = (NOW - timedelta(minutes=5)).isoformat()
        old = (NOW - timedelta(minutes=30)).isoformat()
        rows = [
            create_test_balance_row(subscription_id=7, last_sent_ts=recent),
            create_test_balance_row(subscription_id=8, last_sent_ts=old),
        ]
        supabase = create_mock_supabase(rpc_data={BALANCE_FN: rows})

        result = VALIDATOR_BALANCE_DECREASED.detect(supabase, 100, NOW)

        self.assertEqual([n.subscription_id for n in result], [8])

    def test_naive_last_sent_is_treated_as_utc(self):
        """Timestamps without offset (timestamp columns) are read as UTC."""
        recent = (NOW - timedelta(minutes=5)).replace(tzinfo=None).isoformat()
        supabase = create_mock_supabase(
            rpc_data={BALANCE_FN: [create_test_balance_row(last_sent_ts=recent)]}
        )

        result = VALIDATOR_BALANCE_DECREASED.detect(supabase, 100, NOW)

        self.assertEqual(result, [])

    def test_query_error_propagates(self):
        """Query errors are raised unchanged, without retries."""
        error = RuntimeError("connection reset")
        supabase = create_mock_supabase(rpc_error=error)

        with self.assertRaises(RuntimeError) as ctx:
            VALIDATOR_BALANCE_DECREASED.detect(supabase, 100, NOW)

        self.assertIs(ctx.exception, error)
        self.assertEqual(supabase.rpc.call_count, 1)

    def test_malformed_row_raises(self):
        """Rows missing required columns fail validation."""
        row = create_test_balance_row()
        del row["balance"]
        supabase = create_mock_supabase(rpc_data={BALANCE_FN: [row]})

        with self.assertRaises(ValidationError):
            VALIDATOR_BALANCE_DECREASED.detect(supabase, 100, NOW)


class TestSlashedDetector(unittest.TestCase):
    """Tests for the validator slashed detector."""

    def test_row_becomes_notification(self):
        """Slashing rows produce slashed notifications."""
        supabase = create_mock_supabase(rpc_data={SLASHED_FN: [create_test_slashed_row()]})

        result = VALIDATOR_SLASHED.detect(supabase, 100, NOW)

        self.assertEqual(len(result), 1)
        self.assertIsInstance(result[0], ValidatorSlashedNotification)
        self.assertEqual(result[0].subscription_id, 8)
        self.assertEqual(result[0].epoch, 100)
        self.assertEqual(supabase.rpc.call_args[0][1]["p_event_name"], "validator_got_slashed")


class TestDetectorRegistry(unittest.TestCase):
    """Tests for get_detector() and enabled_detectors()."""

    def test_registry_contains_detectors(self):
        """Both event kinds are registered."""
        self.assertIs(DETECTORS[EventName.VALIDATOR_BALANCE_DECREASED], VALIDATOR_BALANCE_DECREASED)
        self.assertIs(DETECTORS[EventName.VALIDATOR_GOT_SLASHED], VALIDATOR_SLASHED)

    def test_get_detector_by_name(self):
        """Detectors are looked up by event name string."""
        self.assertIs(get_detector("validator_got_slashed"), VALIDATOR_SLASHED)

    def test_get_detector_unknown(self):
        """Unknown event names raise KeyError."""
        with self.assertRaises(KeyError):
            get_detector("validator_exploded")

    def test_empty_selection_enables_all(self):
        """No selection runs every registered detector."""
        self.assertEqual(enabled_detectors([]), list(DETECTORS.values()))

    def test_selection_subset(self):
        """A detector can be switched off by leaving it out."""
        self.assertEqual(enabled_detectors(["validator_balance_decreased"]), [VALIDATOR_BALANCE_DECREASED])

    def test_selection_unknown_name(self):
        """Unknown names in the selection are a configuration error."""
        with self.assertRaises(ValueError):
            enabled_detectors(["validator_balance_decreased", "nope"])


if __name__ == "__main__":
    unittest.main()
