"""Calling functions with time limits."""
import signal
import time
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from timebox.errors import FunctionTimeoutError

__all__ = ("time_limit",)

# Smallest delay the timer is armed with; zero would disarm it.
_MIN_DELAY = 1e-6


@contextmanager
def time_limit(timeout: float, owner: Any = None) -> Generator[None, None, None]:
    """
    Context manager to run a block of code with a time limit.

    A timer which is already running outside the block keeps working. Its ticks still reach its
    own handler at the usual times, which may raise its own error or return and let the block
    carry on. On exit it is re-armed with its remaining time and its interval.

    Args:
        timeout: Timeout limit in seconds.
        owner: Stored on the raised error to tell apart whose deadline was breached.

    Raises:
        FunctionTimeoutError: If the block takes longer than `timeout` seconds.
    """
    start = time.monotonic()
    deadline = start + timeout
    previous_delay, previous_interval = signal.getitimer(signal.ITIMER_REAL)
    # Absolute time of the outer timer's next tick, or None once it has nothing left to fire.
    outer_tick = start + previous_delay if previous_delay else None

    def arm() -> None:
        target = deadline if outer_tick is None else min(deadline, outer_tick)
        signal.setitimer(signal.ITIMER_REAL, max(target - time.monotonic(), _MIN_DELAY))

    def signal_handler(signum, frame):
        nonlocal outer_tick
        if outer_tick is not None and outer_tick <= deadline:
            outer_tick = outer_tick + previous_interval if previous_interval else None
            if callable(previous_handler):
                previous_handler(signum, frame)
            arm()
            return

        raise FunctionTimeoutError(timeout * 1000, owner=owner)

    previous_handler = signal.signal(signal.SIGALRM, signal_handler)

    # ITIMER_PROF would be more appropriate, but SIGPROF doesn't seem to interrupt sleeps.
    arm()

    try:
        yield
    finally:
        # Clear the timer if the block finishes early.
        signal.setitimer(signal.ITIMER_REAL, 0)
        signal.signal(
            signal.SIGALRM, signal.SIG_DFL if previous_handler is None else previous_handler
        )
        if outer_tick is not None:
            signal.setitimer(
                signal.ITIMER_REAL,
                max(outer_tick - time.monotonic(), _MIN_DELAY),
                previous_interval,
            )
