"""Cumulative time budgets shared by the steps of an iteration."""
import math

__all__ = ("TimeBudget", "to_milliseconds")


def to_milliseconds(value: float | None, name: str = "timeout") -> float | None:
    """Normalise a duration: None for unbounded, otherwise a non-negative number of milliseconds."""
    if value is None or value == math.inf:
        return None
    if math.isnan(value) or value < 0:
        raise ValueError(f"{name} must be a non-negative number of milliseconds, got {value!r}.")
    return value


class TimeBudget:
    """
    Milliseconds left for an iteration, decremented by the measured cost of each step.

    An unbounded budget is represented by `remaining` being None and is never decremented.
    """

    def __init__(self, total: float | None = None):
        self.remaining = to_milliseconds(total)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(remaining={self.remaining!r})"

    @property
    def unbounded(self) -> bool:
        return self.remaining is None

    @property
    def exhausted(self) -> bool:
        return self.remaining is not None and self.remaining <= 0

    def step_timeout(self, step_limit: float | None = None) -> float | None:
        """Return the deadline for the next step: the smaller of the budget and `step_limit`."""
        step_limit = to_milliseconds(step_limit, "step_limit")
        bounds = [bound for bound in (self.remaining, step_limit) if bound is not None]
        return min(bounds) if bounds else None

    def charge(self, elapsed: float) -> None:
        """Subtract `elapsed` milliseconds, rounded up to a whole millisecond."""
        if self.remaining is None:
            return
        self.remaining = max(self.remaining - math.ceil(elapsed), 0)
