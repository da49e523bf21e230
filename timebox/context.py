"""Evaluation contexts which run a recorded call under a wall-clock deadline."""
import logging
import multiprocessing
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from multiprocessing.connection import Connection
from typing import Any

from timebox.errors import FunctionTimeoutError, GuardError
from timebox.limits.timed import time_limit

__all__ = ("EvaluationContext", "Invocation", "ProcessContext", "SignalContext")

log = logging.getLogger(__name__)


@dataclass
class Invocation:
    """A single call of a guarded function, recorded on the context which evaluates it."""

    function: Callable[..., Any]
    args: tuple = ()
    kwargs: dict[str, Any] = field(default_factory=dict)

    def __call__(self) -> Any:
        return self.function(*self.args, **self.kwargs)


class EvaluationContext:
    """
    A reusable sandbox which evaluates the invocation recorded on it.

    A context may serve many calls one after another, but never two in-flight calls at once.
    No locking is done to enforce this.
    """

    def __init__(self):
        self.invocation: Invocation | None = None

    def evaluate(self, timeout: float | None) -> Any:
        """
        Evaluate the recorded invocation and return its result.

        Args:
            timeout: Deadline in milliseconds, or None for no deadline.

        Raises:
            FunctionTimeoutError: If the invocation did not finish before the deadline.
        """
        raise NotImplementedError


class SignalContext(EvaluationContext):
    """
    Evaluate calls in the current process, interrupted by SIGALRM once the deadline passes.

    Deadlines can only be enforced from the main thread. Side effects of the function are visible
    to the caller, including those of an interrupted call.
    """

    def evaluate(self, timeout: float | None) -> Any:
        invocation = self.invocation
        if timeout is None:
            return invocation()

        if threading.current_thread() is not threading.main_thread():
            raise RuntimeError(
                "A SignalContext can only enforce a timeout from the main thread; "
                "use a ProcessContext instead."
            )

        with time_limit(timeout / 1000, owner=self):
            return invocation()


def _run_invocation(invocation: Invocation, sender: Connection) -> None:
    """Run `invocation` in the worker process and send its outcome through `sender`."""
    try:
        outcome = ("ok", invocation())
    except Exception as e:
        outcome = ("error", e)

    try:
        sender.send(outcome)
    except Exception as e:
        sender.send(("error", GuardError(f"{e.__class__.__name__}: Failed to send the result.")))
    finally:
        sender.close()


class ProcessContext(EvaluationContext):
    """
    Evaluate calls in a forked worker process which is killed once the deadline passes.

    Only the result travels back to the caller, so side effects of the function never reach the
    calling process. Results and exceptions must be picklable.
    """

    def __init__(self):
        super().__init__()
        self._mp = multiprocessing.get_context("fork")

    def evaluate(self, timeout: float | None) -> Any:
        receiver, sender = self._mp.Pipe(duplex=False)
        worker = self._mp.Process(
            target=_run_invocation, args=(self.invocation, sender), daemon=True
        )
        worker.start()
        # Only the worker writes; close the parent's copy so EOF is seen if the worker dies.
        sender.close()

        try:
            if not receiver.poll(None if timeout is None else timeout / 1000):
                log.debug(f"Worker {worker.pid} exceeded {timeout} ms. Killing it.")
                worker.kill()
                raise FunctionTimeoutError(timeout, owner=self)

            try:
                status, payload = receiver.recv()
            except EOFError as e:
                worker.join()
                raise GuardError(
                    f"Worker exited with code {worker.exitcode} without returning a result."
                ) from e
            except Exception as e:
                raise GuardError(f"{e.__class__.__name__}: Failed to receive the result.") from e
        finally:
            worker.join()
            receiver.close()

        if status == "error":
            raise payload

        return payload
