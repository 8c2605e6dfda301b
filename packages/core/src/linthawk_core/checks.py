"""Problem values produced by the rule checks."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class Severity(IntEnum):
    INFO = 0
    WARNING = 1
    BUG = 2
    FATAL = 3

    @classmethod
    def parse(cls, value: str | int | Severity) -> Severity:
        """Accept an enum member, its integer value or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown severity: {value!r}. Choose one of: info, warning, bug, fatal.")

    def __str__(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class Problem:
    lines: tuple[int, ...]
    reporter: str
    text: str
    severity: Severity
    fragment: str = ""

    def __post_init__(self):
        # Callers commonly pass lists; keep the value hashable and immutable.
        object.__setattr__(self, "lines", tuple(self.lines))
