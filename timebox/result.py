"""Types for representing the result of a match."""
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

__all__ = ("Match",)


@dataclass(frozen=True)
class Match:
    """
    A single match of a regex against a subject string.

    `named_groups` is stored as a read-only mapping, so a Match can't be changed once created.
    """

    match: str
    index: int
    groups: tuple[str | None, ...] = ()
    named_groups: Mapping[str, str | None] = field(default_factory=dict)
    input: str = field(default="", repr=False)

    def __post_init__(self):
        object.__setattr__(self, "groups", tuple(self.groups))
        object.__setattr__(self, "named_groups", MappingProxyType(dict(self.named_groups)))

    def __hash__(self) -> int:
        return hash(
            (self.match, self.index, self.groups, frozenset(self.named_groups.items()), self.input)
        )

    @property
    def end(self) -> int:
        """Index just past the end of the matched text."""
        return self.index + len(self.match)

    @classmethod
    def from_match(cls, match: Any) -> "Match":
        """Create a Match from a match object of `re` or `regex`."""
        return cls(
            match=match.group(0),
            index=match.start(),
            groups=match.groups(),
            named_groups=match.groupdict(),
            input=match.string,
        )
