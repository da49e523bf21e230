import os
from importlib import metadata

DEBUG = os.environ.get("TIMEBOX_DEBUG", False)

try:
    __version__ = metadata.version("timebox")
except metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0.0+unknown"

from timebox.context import EvaluationContext, ProcessContext, SignalContext  # noqa: E402
from timebox.errors import (  # noqa: E402
    FunctionTimeoutError,
    GuardError,
    UsageError,
    is_timeout_error,
)
from timebox.guard import guard_timeout  # noqa: E402
from timebox.matching import first_match, is_match, matches  # noqa: E402
from timebox.pattern import Regex  # noqa: E402
from timebox.result import Match  # noqa: E402

__all__ = (
    "DEBUG",
    "EvaluationContext",
    "FunctionTimeoutError",
    "GuardError",
    "Match",
    "ProcessContext",
    "Regex",
    "SignalContext",
    "UsageError",
    "first_match",
    "guard_timeout",
    "is_match",
    "is_timeout_error",
    "matches",
)
