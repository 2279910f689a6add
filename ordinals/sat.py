"""Satoshi ordinal numbers and the notations used to name them."""

from __future__ import annotations

import math
import re
from bisect import bisect_right
from dataclasses import dataclass
from decimal import Decimal
from functools import total_ordering
from typing import ClassVar

from .rarity import Rarity

COIN_VALUE = 100_000_000
SUBSIDY_HALVING_INTERVAL = 210_000
DIFFCHANGE_INTERVAL = 2016
CYCLE_EPOCHS = 6

_INITIAL_SUBSIDY = 50 * COIN_VALUE
_EPOCH_COUNT = 34
_HALVING_INCREMENT = SUBSIDY_HALVING_INTERVAL % DIFFCHANGE_INTERVAL
_U64_MAX = 2**64 - 1
_U64_PATTERN = re.compile(r"\+?[0-9]+")
_ALPHABET = "abcdefghijklmnopqrstuvwxyz"


def _parse_u64(text: str) -> int:
    if not _U64_PATTERN.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    value = int(text)
    if value > _U64_MAX:
        raise ValueError(f"integer out of range: {text}")
    return value


def _epoch_subsidy(epoch: int) -> int:
    return _INITIAL_SUBSIDY >> epoch if epoch < 64 else 0


def _compute_starting_sats() -> tuple[int, ...]:
    sats = [0]
    for epoch in range(_EPOCH_COUNT - 1):
        sats.append(sats[-1] + _epoch_subsidy(epoch) * SUBSIDY_HALVING_INTERVAL)
    return tuple(sats)


_STARTING_SATS = _compute_starting_sats()


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


@dataclass(frozen=True)
class Degree:
    """Position of a sat as cycle, epoch offset, period offset and block offset."""

    hour: int
    minute: int
    second: int
    third: int

    def __str__(self) -> str:
        return f"{self.hour}°{self.minute}′{self.second}″{self.third}‴"


@total_ordering
@dataclass(frozen=True, eq=False)
class Sat:
    """A satoshi, identified by its ordinal number."""

    n: int

    SUPPLY: ClassVar[int] = 2_099_999_997_690_000
    LAST: ClassVar[Sat]

    def __post_init__(self) -> None:
        if isinstance(self.n, bool) or not isinstance(self.n, int):
            raise TypeError(f"sat number must be an integer, not {type(self.n).__name__}")
        if not 0 <= self.n <= _U64_MAX:
            raise ValueError(f"sat number out of range: {self.n}")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Sat):
            return self.n == other.n
        if isinstance(other, int) and not isinstance(other, bool):
            return self.n == other
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, Sat):
            return self.n < other.n
        if isinstance(other, int) and not isinstance(other, bool):
            return self.n < other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.n)

    def __str__(self) -> str:
        return str(self.n)

    def __int__(self) -> int:
        return self.n

    def __index__(self) -> int:
        return self.n

    def __add__(self, other: int) -> Sat:
        if isinstance(other, bool) or not isinstance(other, int):
            return NotImplemented
        return Sat(self.n + other)

    def epoch(self) -> int:
        """The halving epoch this sat was mined in."""
        return bisect_right(_STARTING_SATS, self.n) - 1

    def _epoch_starting_sat(self) -> int:
        epoch = self.epoch()
        return _STARTING_SATS[epoch] if epoch < len(_STARTING_SATS) else Sat.SUPPLY

    def epoch_position(self) -> int:
        """Offset of this sat from the first sat of its epoch."""
        return self.n - self._epoch_starting_sat()

    def height(self) -> int:
        """Height of the block whose subsidy contained this sat."""
        epoch = self.epoch()
        return epoch * SUBSIDY_HALVING_INTERVAL + self.epoch_position() // _epoch_subsidy(epoch)

    def cycle(self) -> int:
        return self.epoch() // CYCLE_EPOCHS

    def period(self) -> int:
        return self.height() // DIFFCHANGE_INTERVAL

    def third(self) -> int:
        """Offset of this sat within its block's subsidy."""
        return self.epoch_position() % _epoch_subsidy(self.epoch())

    def percentile(self) -> str:
        return f"{_format_float(self.n / Sat.LAST.n * 100.0)}%"

    def degree(self) -> Degree:
        height = self.height()
        return Degree(
            hour=self.cycle(),
            minute=height % SUBSIDY_HALVING_INTERVAL,
            second=height % DIFFCHANGE_INTERVAL,
            third=self.third(),
        )

    def decimal(self) -> str:
        """Block height and offset, joined by a period."""
        return f"{self.height()}.{self.third()}"

    def rarity(self) -> Rarity:
        return Rarity.from_sat(self)

    def is_common(self) -> bool:
        """Cheap check for whether this sat's rarity is common."""
        epoch = self.epoch()
        return (self.n - self._epoch_starting_sat()) % _epoch_subsidy(epoch) != 0

    def name(self) -> str:
        x = Sat.SUPPLY - self.n
        letters = []
        while x > 0:
            letters.append(_ALPHABET[(x - 1) % 26])
            x = (x - 1) // 26
        return "".join(reversed(letters))

    @classmethod
    def parse(cls, s: str) -> Sat:
        """Parse a sat from its number, name, degree, percentile or decimal notation."""
        if any("a" <= c <= "z" for c in s):
            return cls._from_name(s)
        if "°" in s:
            return cls._from_degree(s)
        if "%" in s:
            return cls._from_percentile(s)
        if "." in s:
            return cls._from_decimal(s)
        sat = cls(_parse_u64(s))
        if sat > cls.LAST:
            raise ValueError("invalid sat")
        return sat

    @classmethod
    def _from_name(cls, s: str) -> Sat:
        x = 0
        for c in s:
            if not "a" <= c <= "z":
                raise ValueError(f"invalid character in sat name: {c}")
            x = x * 26 + ord(c) - ord("a") + 1
        if x > cls.SUPPLY:
            raise ValueError("sat name out of range")
        return cls(cls.SUPPLY - x)

    @classmethod
    def _from_degree(cls, degree: str) -> Sat:
        cycle_text, sep, rest = degree.partition("°")
        if not sep:
            raise ValueError("missing degree symbol")
        cycle_number = _parse_u64(cycle_text)

        epoch_text, sep, rest = rest.partition("′")
        if not sep:
            raise ValueError("missing minute symbol")
        epoch_offset = _parse_u64(epoch_text)
        if epoch_offset >= SUBSIDY_HALVING_INTERVAL:
            raise ValueError("invalid epoch offset")

        period_text, sep, rest = rest.partition("″")
        if not sep:
            raise ValueError("missing second symbol")
        period_offset = _parse_u64(period_text)
        if period_offset >= DIFFCHANGE_INTERVAL:
            raise ValueError("invalid period offset")

        cycle_start_epoch = cycle_number * CYCLE_EPOCHS

        # Between valid epoch and period offsets the difference grows by 336 each halving.
        relationship = period_offset + SUBSIDY_HALVING_INTERVAL * CYCLE_EPOCHS - epoch_offset
        if relationship % _HALVING_INCREMENT != 0:
            raise ValueError(
                "relationship between epoch offset and period offset must be multiple of 336"
            )

        epochs_since_cycle_start = relationship % DIFFCHANGE_INTERVAL // _HALVING_INCREMENT
        epoch = cycle_start_epoch + epochs_since_cycle_start
        height = epoch * SUBSIDY_HALVING_INTERVAL + epoch_offset

        block_text, sep, rest = rest.partition("‴")
        block_offset = _parse_u64(block_text) if sep else 0

        if rest:
            raise ValueError("trailing characters")
        if block_offset >= subsidy(height):
            raise ValueError("invalid block offset")

        return starting_sat(height) + block_offset

    @classmethod
    def _from_decimal(cls, decimal: str) -> Sat:
        height_text, sep, offset_text = decimal.partition(".")
        if not sep:
            raise ValueError("missing period")
        height = _parse_u64(height_text)
        offset = _parse_u64(offset_text)
        if offset >= subsidy(height):
            raise ValueError("invalid block offset")
        return starting_sat(height) + offset

    @classmethod
    def _from_percentile(cls, percentile: str) -> Sat:
        if not percentile.endswith("%"):
            raise ValueError(f"invalid percentile: {percentile}")
        body = percentile[:-1]
        if not body or body != body.strip() or "_" in body:
            raise ValueError(f"invalid percentile: {percentile}")
        try:
            value = float(body)
        except ValueError:
            raise ValueError(f"invalid percentile: {percentile}") from None

        if value < 0.0:
            raise ValueError(f"invalid percentile: {_format_float(value)}")

        last = float(cls.LAST.n)
        scaled = value / 100.0 * last
        if math.isnan(scaled):
            return cls(0)
        if math.isinf(scaled):
            raise ValueError(f"invalid percentile: {_format_float(value)}")

        rounded = math.floor(scaled)
        if scaled - rounded >= 0.5:
            rounded += 1
        if rounded > last:
            raise ValueError(f"invalid percentile: {_format_float(value)}")
        return cls(int(rounded))


Sat.LAST = Sat(Sat.SUPPLY - 1)


def subsidy(height: int) -> int:
    """Block subsidy, in sats, at the given height."""
    return _epoch_subsidy(height // SUBSIDY_HALVING_INTERVAL)


def starting_sat(height: int) -> Sat:
    """First sat of the subsidy of the block at the given height."""
    epoch = height // SUBSIDY_HALVING_INTERVAL
    epoch_start = _STARTING_SATS[epoch] if epoch < len(_STARTING_SATS) else Sat.SUPPLY
    return Sat(epoch_start + (height - epoch * SUBSIDY_HALVING_INTERVAL) * _epoch_subsidy(epoch))


def epoch_starting_sats() -> list[Sat]:
    """The first sat of every epoch, through the first epoch without subsidy."""
    return [Sat(n) for n in _STARTING_SATS]