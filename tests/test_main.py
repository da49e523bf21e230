import contextlib
import io
import json
import logging
import os
import tempfile
import unittest
from unittest.mock import patch

import regex

import timebox.__main__ as timebox_main


class ArgParseTests(unittest.TestCase):
    def test_parse_args_defaults(self):
        with patch("sys.stdin", io.StringIO("")):
            args = timebox_main.parse_args([r"\d+"])

        self.assertEqual(args.mode, "all")
        self.assertEqual(args.regex.flags, "g")
        self.assertIsNone(args.timeout)
        self.assertIsNone(args.match_timeout)

    def test_parse_args_options(self):
        with patch("sys.stdin", io.StringIO("")):
            args = timebox_main.parse_args(
                ["a", "-f", "i", "-m", "first", "--timeout", "50", "--engine", "regex"]
            )

        self.assertEqual(args.regex.flags, "i")
        self.assertEqual(args.timeout, 50.0)
        self.assertEqual(args.regex.compiled.__class__, regex.compile("a").__class__)

    def test_parse_args_invalid_regex_exits(self):
        for argv in (["("], ["a", "-f", "q"]):
            with self.subTest(argv=argv), self.assertRaises(SystemExit) as cm:
                with contextlib.redirect_stderr(io.StringIO()) as stderr:
                    timebox_main.parse_args(argv)

            self.assertEqual(cm.exception.code, 2)
            self.assertIn("invalid regex", stderr.getvalue())

    @patch("sys.argv", [""])
    def test_parse_args_pattern_missing_exits(self):
        with self.assertRaises(SystemExit) as cm:
            with contextlib.redirect_stderr(io.StringIO()) as stderr:
                timebox_main.parse_args()

        self.assertEqual(cm.exception.code, 2)
        self.assertIn("the following arguments are required: pattern", stderr.getvalue())


class EntrypointTests(unittest.TestCase):
    """Integration tests of the CLI entrypoint."""

    def setUp(self):
        super().setUp()
        for name in ("init_logger", "init_sentry"):
            patcher = patch(f"timebox.__main__.{name}")
            patcher.start()
            self.addCleanup(patcher.stop)
        logging.getLogger("timebox").setLevel(logging.WARNING)

    def run_main(self, argv: list[str], stdin: str = "") -> tuple[str, int]:
        code = 0
        with patch("sys.argv", ["", *argv]), patch("sys.stdin", io.StringIO(stdin)):
            with contextlib.redirect_stdout(io.StringIO()) as stdout:
                try:
                    timebox_main.main()
                except SystemExit as e:
                    code = e.code
        return stdout.getvalue(), code

    def test_all_matches(self):
        output, code = self.run_main([r"\d+"], "a1 b22 c333")
        lines = [json.loads(line) for line in output.splitlines()]

        self.assertEqual(code, 0)
        self.assertEqual([(m["match"], m["index"]) for m in lines], [("1", 1), ("22", 4), ("333", 8)])

    def test_first_match(self):
        output, code = self.run_main([r"(?P<n>\d)", "-m", "first"], "ab7")

        self.assertEqual(code, 0)
        self.assertEqual(
            json.loads(output), {"match": "7", "index": 2, "groups": ["7"], "named_groups": {"n": "7"}}
        )

    def test_test_mode(self):
        self.assertEqual(self.run_main(["b", "-m", "test"], "abc"), ("true\n", 0))
        self.assertEqual(self.run_main(["x", "-m", "test"], "abc"), ("false\n", 1))

    def test_no_match_exits_1(self):
        self.assertEqual(self.run_main(["x"], "abc"), ("", 1))
        self.assertEqual(self.run_main(["x", "-m", "first"], "abc"), ("", 1))

    def test_timeout_is_no_match(self):
        output, code = self.run_main(
            [r"^(a+)+$", "-m", "test", "--timeout", "50"], "a" * 40 + "!"
        )
        self.assertEqual((output, code), ("false\n", 1))

    def test_reads_file(self):
        with tempfile.NamedTemporaryFile("w", suffix=".txt", delete=False) as f:
            f.write("one two")
        self.addCleanup(os.unlink, f.name)

        output, code = self.run_main([r"\w+", f.name])

        self.assertEqual(code, 0)
        self.assertEqual([json.loads(line)["match"] for line in output.splitlines()], ["one", "two"])
