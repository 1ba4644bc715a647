import json
import logging
import os
import unittest
from unittest.mock import patch

from pos_api.config import Settings
from pos_api.core.logging import JsonFormatter


class SettingsTest(unittest.TestCase):
    def test_db_conn_is_accepted_as_database_url(self):
        env = {"DB_CONN": "postgresql://pos@db.example.com/pos", "PORT": "9090"}
        with patch.dict(os.environ, env):
            os.environ.pop("DATABASE_URL", None)
            settings = Settings(_env_file=None)
        self.assertEqual(settings.DATABASE_URL, "postgresql://pos@db.example.com/pos")
        self.assertEqual(settings.PORT, 9090)

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.DATABASE_URL, "sqlite:///./pos.db")
        self.assertEqual(settings.PORT, 8080)
        self.assertFalse(settings.LOG_JSON)


class JsonFormatterTest(unittest.TestCase):
    def test_formats_record_as_json(self):
        record = logging.LogRecord(
            name="pos_api.services.checkout_service",
            level=logging.WARNING,
            pathname=__file__,
            lineno=1,
            msg="Checkout rejected: %s",
            args=("stock not enough for product 3",),
            exc_info=None,
        )
        payload = json.loads(JsonFormatter().format(record))
        self.assertEqual(payload["level"], "WARNING")
        self.assertEqual(payload["logger"], "pos_api.services.checkout_service")
        self.assertEqual(payload["message"], "Checkout rejected: stock not enough for product 3")
        self.assertIn("timestamp", payload)
        self.assertNotIn("transaction_id", payload)

    def test_includes_checkout_context(self):
        record = logging.LogRecord(
            name="pos_api.services.checkout_service",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="Checkout committed",
            args=(),
            exc_info=None,
        )
        record.transaction_id = 12
        record.total_amount = 2500
        payload = json.loads(JsonFormatter().format(record))
        self.assertEqual(payload["transaction_id"], 12)
        self.assertEqual(payload["total_amount"], 2500)
        self.assertNotIn("product_id", payload)


if __name__ == "__main__":
    unittest.main()
