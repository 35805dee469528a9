"""
Unit tests for config/notification_settings.py
"""

import os
import unittest
from unittest.mock import patch

from config.notification_settings import int_env


class TestIntEnv(unittest.TestCase):
    """Tests for int_env() function."""

    @patch.dict(os.environ, {}, clear=True)
    def test_unset_uses_default(self):
        """Missing variable falls back to the default."""
        self.assertEqual(int_env("NOTIFICATION_MAX_WORKERS", 10), 10)

    @patch.dict(os.environ, {"NOTIFICATION_MAX_WORKERS": ""})
    def test_empty_uses_default(self):
        """Empty variable falls back to the default."""
        self.assertEqual(int_env("NOTIFICATION_MAX_WORKERS", 10), 10)

    @patch.dict(os.environ, {"NOTIFICATION_MAX_WORKERS": "4"})
    def test_parses_integer(self):
        """Set variable is parsed."""
        self.assertEqual(int_env("NOTIFICATION_MAX_WORKERS", 10), 4)

    @patch.dict(os.environ, {"NOTIFICATION_INTERVAL_SECONDS": "1m"})
    def test_invalid_value_names_variable(self):
        """Non-integer value raises ValueError naming the variable and value."""
        with self.assertRaises(ValueError) as ctx:
            int_env("NOTIFICATION_INTERVAL_SECONDS", 60)

        self.assertIn("NOTIFICATION_INTERVAL_SECONDS", str(ctx.exception))
        self.assertIn("'1m'", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
