"""Level table: maps total experience to named tiers.

The table is an ascending list of ``(threshold, name)`` pairs with a 0
floor. At or beyond the highest threshold there is no further level, so the
"next" level is reported as the current one and the in-level percentage
saturates at 100.
"""

from __future__ import annotations

import bisect
from collections.abc import Iterable, Sequence
from typing import NamedTuple


class Level(NamedTuple):
    threshold: int
    name: str


class LevelTable:
    """Immutable, sorted lookup of level boundaries."""

    def __init__(self, levels: Iterable[Level | tuple[int, str]]) -> None:
        entries = sorted(Level(int(t), str(n)) for t, n in levels)
        if not entries:
            raise ValueError("Level table cannot be empty")
        thresholds = [entry.threshold for entry in entries]
        if thresholds[0] != 0:
            raise ValueError("Level table must contain a 0 threshold floor")
        if len(set(thresholds)) != len(thresholds):
            raise ValueError(f"Duplicate level thresholds: {thresholds}")
        self._levels: tuple[Level, ...] = tuple(entries)
        self._thresholds = thresholds

    @classmethod
    def from_pairs(cls, pairs: Sequence[Sequence]) -> LevelTable:
        """Build from config data such as ``[[0, "Dabbling"], [500, "Novice"]]``."""
        levels = []
        for pair in pairs:
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise ValueError(f"Level entry must be [threshold, name]: {pair!r}")
            try:
                threshold = int(pair[0])
            except (TypeError, ValueError) as e:
                raise ValueError(f"Level threshold must be an integer: {pair!r}") from e
            levels.append(Level(threshold, str(pair[1])))
        return cls(levels)

    @property
    def levels(self) -> tuple[Level, ...]:
        return self._levels

    @property
    def max_level(self) -> Level:
        return self._levels[-1]

    def __len__(self) -> int:
        return len(self._levels)

    def __iter__(self):
        return iter(self._levels)

    def to_pairs(self) -> list[list]:
        return [[level.threshold, level.name] for level in self._levels]

    def level_for(self, total_exp: float) -> tuple[Level, Level]:
        """Return ``(current, next)`` for a total; ``next == current`` at the top."""
        index = bisect.bisect_right(self._thresholds, total_exp) - 1
        index = max(index, 0)
        current = self._levels[index]
        if index + 1 < len(self._levels):
            return current, self._levels[index + 1]
        return current, current

    def is_max_level(self, total_exp: float) -> bool:
        return total_exp >= self.max_level.threshold

    def percentage_within_level(self, total_exp: float) -> float:
        current, upcoming = self.level_for(total_exp)
        if upcoming == current:
            return 100.0
        span = upcoming.threshold - current.threshold
        return max(0.0, 100.0 * (total_exp - current.threshold) / span)


DEFAULT_LEVELS = LevelTable(
    [
        Level(0, "Dabbling"),
        Level(500, "Novice"),
        Level(1500, "Apprentice"),
        Level(3500, "Journeyman"),
        Level(7000, "Adept"),
        Level(12000, "Expert"),
        Level(20000, "Master"),
        Level(35000, "Grandmaster"),
    ]
)
