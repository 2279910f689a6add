"""Rarity levels of satoshis, derived from their degree notation."""

from __future__ import annotations

from enum import Enum
from functools import total_ordering


@total_ordering
class Rarity(Enum):
    """How rare a satoshi is, ordered from common to mythic."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"

    @property
    def _rank(self) -> int:
        return list(type(self)).index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Rarity):
            return NotImplemented
        return self._rank < other._rank

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_sat(cls, sat) -> Rarity:
        """Classify a sat by which parts of its degree are zero."""
        degree = sat.degree()
        hour, minute, second, third = (
            degree.hour,
            degree.minute,
            degree.second,
            degree.third,
        )
        if hour == 0 and minute == 0 and second == 0 and third == 0:
            return cls.MYTHIC
        if minute == 0 and second == 0 and third == 0:
            return cls.LEGENDARY
        if minute == 0 and third == 0:
            return cls.EPIC
        if second == 0 and third == 0:
            return cls.RARE
        if third == 0:
            return cls.UNCOMMON
        return cls.COMMON

    @classmethod
    def parse(cls, s: str) -> Rarity:
        """Parse a lower-case rarity name."""
        for member in cls:
            if member.value == s:
                return member
        raise ValueError(f"invalid rarity: {s}")