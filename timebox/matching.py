"""
Regular expression matching where every match attempt is bounded by a deadline.

A helper never raises for its own deadline: a single match which times out is reported as no
match, and an iteration which runs out of time simply ends. The deadline of an enclosing guarded
call still propagates.
"""
import logging
from collections.abc import Iterator
from typing import Any

from timebox.budget import TimeBudget, to_milliseconds
from timebox.context import SignalContext
from timebox.errors import FunctionTimeoutError, UsageError
from timebox.guard import guard_timeout
from timebox.pattern import Regex
from timebox.result import Match
from timebox.utils.timespan import time_span

__all__ = ("MatchCursor", "first_match", "is_match", "matches")

log = logging.getLogger(__name__)


def _as_regex(regex: Regex | Any) -> Regex:
    """Wrap a pattern string or compiled pattern in a Regex without flags."""
    if isinstance(regex, Regex):
        return regex
    return Regex(regex)


def is_match(regex: Regex | Any, string: str, *, timeout: float | None = None) -> bool:
    """
    Return True if `regex` matches `string`.

    If matching takes longer than `timeout` milliseconds, return False. The given regex is never
    mutated, even when it is global or sticky.
    """
    regex = _as_regex(regex)
    context = SignalContext()
    try:
        return guard_timeout(
            lambda: regex.clone().test(string), timeout=timeout, context=context
        )()
    except FunctionTimeoutError as e:
        if e.owner is not context:
            raise
        log.debug(f"Matching {regex!r} timed out after {timeout} ms.")
        return False


def first_match(
    regex: Regex | Any, string: str, *, timeout: float | None = None
) -> Match | None:
    """
    Return the first match of `regex` in `string`, or None if there is no match.

    If matching takes longer than `timeout` milliseconds, return None.
    """
    regex = _as_regex(regex)
    context = SignalContext()
    try:
        result = guard_timeout(
            lambda: regex.clone().exec(string), timeout=timeout, context=context
        )()
    except FunctionTimeoutError as e:
        if e.owner is not context:
            raise
        log.debug(f"Matching {regex!r} timed out after {timeout} ms.")
        return None

    if result is None:
        return None

    return Match.from_match(result)


class MatchCursor:
    """Successive matches of a regex over one subject string."""

    def __init__(self, regex: Regex, string: str):
        self.regex = regex
        self.string = string
        self._scanner: Iterator[Any] | None = None

    def advance(self) -> Any:
        """Return the next engine match object, or None once there are no more matches."""
        if self._scanner is None:
            self._scanner = self.regex.scan(self.string)
        return next(self._scanner, None)


def matches(
    regex: Regex | Any,
    string: str,
    *,
    timeout: float | None = None,
    match_timeout: float | None = None,
) -> Iterator[Match]:
    """
    Lazily iterate over every match of `regex` in `string`.

    The regex must be global. Nothing is matched until the iterator is first advanced.

    Args:
        regex: A global Regex.
        string: The subject string.
        timeout: Total milliseconds allowed for the whole iteration.
        match_timeout: Milliseconds allowed for finding each match.

    Raises:
        UsageError: If the regex is not global.
    """
    regex = _as_regex(regex)
    if not regex.is_global:
        raise UsageError(
            "The regex must have the global flag, otherwise, use `first_match()` instead"
        )

    budget = TimeBudget(timeout)
    match_timeout = to_milliseconds(match_timeout, "match_timeout")

    return _iter_matches(MatchCursor(regex.clone(), string), budget, match_timeout)


def _iter_matches(
    cursor: MatchCursor, budget: TimeBudget, match_timeout: float | None
) -> Iterator[Match]:
    context = SignalContext()

    while True:
        step_timeout = budget.step_timeout(match_timeout)
        if step_timeout is not None and step_timeout <= 0:
            log.debug(f"Stopped matching {cursor.regex!r}: no time left for another match.")
            return

        advance = guard_timeout(cursor.advance, timeout=step_timeout, context=context)

        end = time_span()
        try:
            result = advance()
        except FunctionTimeoutError as e:
            if e.owner is not context:
                raise
            log.debug(f"Stopped matching {cursor.regex!r}: timed out after {step_timeout} ms.")
            return
        budget.charge(end())

        if result is None:
            return

        yield Match.from_match(result)
