import argparse
import json
import re
import sys

import regex

from timebox import DEBUG, Regex, __version__, first_match, is_match, matches
from timebox.logging import init_logger, init_sentry
from timebox.result import Match

ENGINES = {"re": re, "regex": regex}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse the command-line arguments and return the populated namespace."""
    parser = argparse.ArgumentParser(
        prog="timebox",
        description="Match a regular expression against text with time limits.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("pattern", help="the regular expression to match")
    parser.add_argument(
        "file",
        nargs="?",
        type=argparse.FileType("r", encoding="utf-8"),
        default=sys.stdin,
        help="file to read the subject from; defaults to stdin",
    )
    parser.add_argument("-f", "--flags", default="", help="regex flag letters, any of agimsxy")
    parser.add_argument(
        "-m",
        "--mode",
        choices=("test", "first", "all"),
        default="all",
        help="test for a match, find the first match, or find all matches",
    )
    parser.add_argument("--timeout", type=float, help="time limit in milliseconds")
    parser.add_argument(
        "--match-timeout",
        type=float,
        help="time limit in milliseconds for each match; only used with --mode all",
    )
    parser.add_argument("--engine", choices=tuple(ENGINES), default="re", help="regex engine")

    args = parser.parse_args(argv)

    flags = args.flags
    if args.mode == "all" and "g" not in flags:
        flags += "g"

    try:
        args.regex = Regex(args.pattern, flags, engine=ENGINES[args.engine])
    except (re.error, regex.error, ValueError) as e:
        parser.error(f"invalid regex: {e}")

    return args


def _dump(match: Match) -> str:
    return json.dumps(
        {
            "match": match.match,
            "index": match.index,
            "groups": match.groups,
            "named_groups": dict(match.named_groups),
        }
    )


def main() -> None:
    """Match a regex against a file or stdin and print the results."""
    init_sentry(__version__)
    init_logger(DEBUG)

    args = parse_args()
    string = args.file.read()
    if args.file is not sys.stdin:
        args.file.close()

    if args.mode == "test":
        found = is_match(args.regex, string, timeout=args.timeout)
        print("true" if found else "false")
    elif args.mode == "first":
        match = first_match(args.regex, string, timeout=args.timeout)
        found = match is not None
        if found:
            print(_dump(match))
    else:
        found = False
        for match in matches(
            args.regex, string, timeout=args.timeout, match_timeout=args.match_timeout
        ):
            found = True
            print(_dump(match))

    if not found:
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
