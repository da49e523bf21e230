import logging
import sys
from unittest import TestCase
from unittest.mock import MagicMock, patch

from timebox import Regex, is_match, matches
from timebox.logging import FORMAT, init_logger, init_sentry


class LoggingTests(TestCase):
    def setUp(self):
        super().setUp()
        self.logger = logging.getLogger("timebox")
        self.addCleanup(setattr, self.logger, "handlers", list(self.logger.handlers))
        self.addCleanup(self.logger.setLevel, self.logger.level)
        self.logger.handlers = []

    def test_init_logger(self):
        for debug, level in ((True, logging.DEBUG), (False, logging.INFO)):
            with self.subTest(debug=debug):
                init_logger(debug)
                handler = self.logger.handlers[-1]

                self.assertEqual(self.logger.level, level)
                self.assertIs(handler.stream, sys.stdout)
                self.assertEqual(handler.formatter._fmt, FORMAT)

    def test_init_logger_twice_keeps_one_handler(self):
        init_logger(False)
        count = len(self.logger.handlers)
        init_logger(True)

        self.assertEqual(len(self.logger.handlers), count)
        self.assertEqual(self.logger.level, logging.DEBUG)

    def test_init_sentry(self):
        sentry_sdk = MagicMock()
        with patch.dict(sys.modules, {"sentry_sdk": sentry_sdk}):
            with patch.dict("os.environ", {"TIMEBOX_SENTRY_DSN": "https://key@sentry.invalid/1"}):
                init_sentry("1.2.3")

        sentry_sdk.init.assert_called_once_with(
            dsn="https://key@sentry.invalid/1", release="timebox@1.2.3"
        )

    def test_init_sentry_not_installed(self):
        with patch.dict(sys.modules, {"sentry_sdk": None}):
            init_sentry("1.2.3")

    def test_timeouts_logged_at_debug(self):
        self.logger.setLevel(logging.DEBUG)
        with self.assertLogs("timebox.matching", logging.DEBUG) as log:
            is_match(Regex(r"^(a+)+$"), "a" * 40 + "!", timeout=50)
            list(matches(Regex("a", "g"), "aaa", timeout=0))

        output = "\n".join(log.output)
        self.assertIn("timed out after 50 ms", output)
        self.assertIn("no time left", output)
