"""
Setup for applications which embed timebox, such as its command line interface.

Library modules only log through `logging.getLogger(__name__)`. Nothing is printed until an
application calls `init_logger`, which is left to the caller so timebox never adds handlers to a
host application's logging on its own.
"""
import logging
import os
import sys

__all__ = ("FORMAT", "init_logger", "init_sentry")

FORMAT = "%(asctime)s | %(process)5s | %(name)30s | %(levelname)8s | %(message)s"

log = logging.getLogger("timebox")


def init_logger(debug: bool) -> None:
    """
    Print timebox's log records to stdout.

    Timeouts, killed workers and stopped iterations are only logged at the DEBUG level, so they
    show up only if `debug` is True. Calling this again changes the level but doesn't attach a
    second handler.
    """
    log.setLevel(logging.DEBUG if debug else logging.INFO)
    log.propagate = True

    if any(getattr(handler, "_timebox", False) for handler in log.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(FORMAT))
    handler._timebox = True
    log.addHandler(handler)


def init_sentry(version: str) -> None:
    """Report errors to Sentry, tagged with timebox's `version`, if `sentry_sdk` is available."""
    try:
        import sentry_sdk
    except ImportError:
        return

    sentry_sdk.init(
        dsn=os.environ.get("TIMEBOX_SENTRY_DSN", ""),
        release=f"timebox@{version}",
    )
