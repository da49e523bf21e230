import time
from collections.abc import Callable

__all__ = ("time_span",)


def time_span() -> Callable[[], float]:
    """Start a stopwatch and return a function which gives the elapsed time in milliseconds."""
    start = time.perf_counter_ns()

    def elapsed() -> float:
        return (time.perf_counter_ns() - start) / 1_000_000

    return elapsed
