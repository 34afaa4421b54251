import logging
import os
import unittest
from unittest import mock

from storefront.core.config import Settings
from storefront.core.logging import setup_logging

class TestSettings(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            s = Settings(_env_file=None)
        self.assertEqual(s.port, 8080)
        self.assertFalse(s.enforce_unique_code)
        self.assertEqual(s.products_file, "products.json")

    def test_env_prefix(self):
        env = {"STORE_ENFORCE_UNIQUE_CODE": "true", "STORE_DATA_DIR": "/tmp/shop"}
        with mock.patch.dict(os.environ, env, clear=True):
            s = Settings(_env_file=None)
        self.assertTrue(s.enforce_unique_code)
        self.assertEqual(s.data_dir, "/tmp/shop")

class TestLogging(unittest.TestCase):
    def test_setup_logging_installs_one_handler(self):
        root = logging.getLogger()
        level = root.level
        self.addCleanup(root.setLevel, level)

        setup_logging("debug")
        setup_logging("DEBUG")
        ours = [h for h in root.handlers if h.get_name() == "storefront"]
        self.assertEqual(len(ours), 1)
        self.assertEqual(root.level, logging.DEBUG)
