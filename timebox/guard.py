"""Wrapping functions so that every call is bounded by a deadline."""
import functools
import math
from collections.abc import Callable
from typing import Any, TypeVar

from timebox.context import EvaluationContext, Invocation, SignalContext
from timebox.errors import FunctionTimeoutError

__all__ = ("guard_timeout",)

_T = TypeVar("_T")


def guard_timeout(
    function: Callable[..., _T],
    *,
    timeout: float | None = None,
    context: EvaluationContext | None = None,
) -> Callable[..., _T]:
    """
    Return a wrapper which calls `function` inside an evaluation context with a deadline.

    Calling the wrapper returns whatever `function` returns. If the call takes longer than
    `timeout`, it is aborted and `FunctionTimeoutError` is raised instead. Any other exception
    raised by `function` propagates unchanged.

    Args:
        function: The function to guard.
        timeout: Deadline in milliseconds for each call. None or infinity means no deadline.
            A deadline of zero or less has already elapsed, so the function is never called.
            A NaN deadline raises ValueError when the wrapper is called.
        context: The context to evaluate calls in. A new `SignalContext` is created if omitted.
            It must not be shared by two calls which are in flight at the same time.
    """
    if context is None:
        context = SignalContext()
    if timeout == math.inf:
        timeout = None

    @functools.wraps(function)
    def wrapper(*args: Any, **kwargs: Any) -> _T:
        if timeout is not None and math.isnan(timeout):
            raise ValueError(f"timeout must be a number of milliseconds, got {timeout!r}.")
        if timeout is not None and timeout <= 0:
            raise FunctionTimeoutError(timeout, owner=context)

        context.invocation = Invocation(function, args, kwargs)
        try:
            return context.evaluate(timeout)
        finally:
            context.invocation = None

    name = getattr(function, "__name__", "<anonymous>")
    wrapper.__name__ = f"guard_timeout({'<anonymous>' if name == '<lambda>' else name})"

    return wrapper
