from typing import Any

__all__ = ("FunctionTimeoutError", "GuardError", "UsageError", "is_timeout_error")


class FunctionTimeoutError(TimeoutError):
    """
    Raised when a guarded function does not finish before its deadline.

    `owner` is the evaluation context whose deadline was breached, so that a caller which nests
    guarded calls can tell its own timeout apart from one belonging to an outer call.
    """

    def __init__(self, timeout: float | None, message: str | None = None, owner: Any = None):
        if message is None:
            message = f"Function call timed out after {timeout} milliseconds."
        super().__init__(message)
        self.timeout = timeout
        self.owner = owner


class GuardError(RuntimeError):
    """Raised when the evaluation context fails to report a result."""


class UsageError(ValueError):
    """Raised when an operation is called in a way its contract forbids."""


def is_timeout_error(error: object) -> bool:
    """
    Return True if `error` was raised because a guarded call ran past its deadline.

    A builtin `TimeoutError` raised by the guarded function itself is not a timeout of the guard.
    """
    return isinstance(error, FunctionTimeoutError)
