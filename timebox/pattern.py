"""A regular expression which carries scan flags and a scan position, like a stateful matcher."""
import re
from collections.abc import Iterator
from types import ModuleType
from typing import Any

__all__ = ("FLAG_NAMES", "Regex")

# Flag letters in canonical order, mapped to the engine flag they enable.
# "g" and "y" only affect how the regex scans, so they have no engine counterpart.
FLAG_NAMES = {
    "a": "ASCII",
    "g": None,
    "i": "IGNORECASE",
    "m": "MULTILINE",
    "s": "DOTALL",
    "x": "VERBOSE",
    "y": None,
}


def _is_compiled(pattern: Any) -> bool:
    return hasattr(pattern, "finditer") and hasattr(pattern, "pattern")


class Regex:
    """
    A compiled pattern together with scan flags and a mutable scan position.

    Global (`g`) and sticky (`y`) regexes remember where the last match ended in `last_index`,
    and the next `exec` continues from there. The compiled pattern itself is immutable and is
    shared between clones.
    """

    def __init__(self, pattern: Any, flags: str = "", *, engine: ModuleType = re):
        """
        Compile `pattern` with the given flag letters.

        Args:
            pattern: Pattern source, or a pattern already compiled by `re` or `regex`.
            flags: Any of "agimsxy", each at most once. Engine flags can't be combined with an
                already compiled pattern.
            engine: Module used to compile a source string, either `re` or `regex`.
        """
        for letter in flags:
            if letter not in FLAG_NAMES:
                raise ValueError(f"Invalid regular expression flag {letter!r}.")
            if flags.count(letter) > 1:
                raise ValueError(f"Duplicate regular expression flag {letter!r}.")

        self.flags = "".join(letter for letter in FLAG_NAMES if letter in flags)
        engine_flags = [FLAG_NAMES[letter] for letter in self.flags if FLAG_NAMES[letter]]

        if _is_compiled(pattern):
            if engine_flags:
                raise ValueError("Cannot process flags argument with a compiled pattern.")
            self.compiled = pattern
        else:
            compile_flags = 0
            for name in engine_flags:
                compile_flags |= getattr(engine, name)
            self.compiled = engine.compile(pattern, compile_flags)

        self.last_index = 0

    @property
    def source(self) -> Any:
        return self.compiled.pattern

    @property
    def is_global(self) -> bool:
        return "g" in self.flags

    @property
    def is_sticky(self) -> bool:
        return "y" in self.flags

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.source!r}, {self.flags!r})"

    def clone(self) -> "Regex":
        """Return a copy with the same pattern and flags, scanning from the start."""
        clone = self.__class__.__new__(self.__class__)
        clone.compiled = self.compiled
        clone.flags = self.flags
        clone.last_index = 0
        return clone

    def _attempt(self, string: Any, pos: int) -> Any:
        if self.is_sticky:
            return self.compiled.match(string, pos)
        return self.compiled.search(string, pos)

    def exec(self, string: Any) -> Any:
        """
        Attempt one match against `string` and return the engine's match object, or None.

        Global and sticky regexes start at `last_index` and update it; others always search the
        whole string and leave it untouched.
        """
        if not (self.is_global or self.is_sticky):
            return self._attempt(string, 0)

        if self.last_index > len(string):
            self.last_index = 0
            return None

        match = self._attempt(string, self.last_index)
        self.last_index = 0 if match is None else match.end()
        return match

    def test(self, string: Any) -> bool:
        """Return True if `string` matches, updating `last_index` like `exec` does."""
        return self.exec(string) is not None

    def scan(self, string: Any) -> Iterator[Any]:
        """Lazily iterate over every match in `string`, starting at `last_index`."""
        if not self.is_sticky:
            return self.compiled.finditer(string, self.last_index)
        return self._scan_sticky(string)

    def _scan_sticky(self, string: Any) -> Iterator[Any]:
        pos = self.last_index
        while pos <= len(string):
            match = self.compiled.match(string, pos)
            if match is None:
                return

            yield match
            # An empty match would otherwise be found again at the same position.
            pos = match.end() if match.end() > match.start() else match.end() + 1
