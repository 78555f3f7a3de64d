"""
Tests for the logging setup.
"""

import logging
import unittest

from rich.logging import RichHandler

from uavexec.log import configure_logging, get_logger


class TestConfigureLogging(unittest.TestCase):
    """Test configure_logging function."""

    def setUp(self):
        self.logger = logging.getLogger("uavexec")
        self.saved_handlers = list(self.logger.handlers)
        self.saved_level = self.logger.level

    def tearDown(self):
        self.logger.handlers = self.saved_handlers
        self.logger.setLevel(self.saved_level)

    def test_attaches_single_rich_handler(self):
        """Repeated calls keep one handler and update the level."""
        configure_logging(logging.DEBUG)
        logger = configure_logging(logging.WARNING)

        rich_handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
        self.assertEqual(len(rich_handlers), 1)
        self.assertEqual(logger.level, logging.WARNING)

    def test_module_loggers_are_children(self):
        """Module loggers propagate to the package logger."""
        with self.assertLogs("uavexec", level="INFO") as captured:
            get_logger("uavexec.cee.engine").info("activated")
        self.assertEqual(captured.records[0].name, "uavexec.cee.engine")


if __name__ == "__main__":
    unittest.main()
