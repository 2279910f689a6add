"""What a wallet sends: an amount, an inscription or a specific sat."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Union

from .inscription_id import InscriptionId
from .sat_point import SatPoint

_U64_MAX = 2**64 - 1
_NUMBER = re.compile(r"[0-9]*\.?[0-9]*")
_DENOMINATIONS = {
    "btc": 8,
    "cbtc": 6,
    "mbtc": 5,
    "ubtc": 2,
    "bit": 2,
    "bits": 2,
    "sat": 0,
    "sats": 0,
    "satoshi": 0,
    "satoshis": 0,
    "nbtc": -1,
    "msat": -3,
    "pbtc": -4,
}


@dataclass(frozen=True, order=True)
class Amount:
    """A quantity of bitcoin, in sats."""

    sat: int

    def __str__(self) -> str:
        return f"{self.sat} sat"

    @classmethod
    def parse(cls, s: str) -> Amount:
        """Parse "<number> <denomination>", such as "1.5 BTC"."""
        parts = s.split(" ")
        if len(parts) != 2:
            raise ValueError(f"invalid amount, expected number and denomination: {s!r}")
        number, unit = parts
        precision = _DENOMINATIONS.get(unit.lower())
        if precision is None:
            raise ValueError(f"unknown denomination: {unit}")
        if not _NUMBER.fullmatch(number) or not any(c.isdigit() for c in number):
            raise ValueError(f"invalid amount: {number!r}")
        try:
            value = Decimal(number).scaleb(precision)
        except InvalidOperation:
            raise ValueError(f"invalid amount: {number!r}") from None
        if value != value.to_integral_value():
            raise ValueError(f"amount too precise: {s}")
        sats = int(value)
        if sats > _U64_MAX:
            raise ValueError(f"amount too big: {s}")
        return cls(sats)


@dataclass(frozen=True)
class Outgoing:
    """The thing to send, of one of three kinds."""

    value: Union[Amount, InscriptionId, SatPoint]

    @classmethod
    def parse(cls, s: str) -> Outgoing:
        if ":" in s:
            return cls(SatPoint.parse(s))
        if len(s.encode()) >= 66:
            return cls(InscriptionId.parse(s))
        if " " in s:
            return cls(Amount.parse(s))
        for i, c in enumerate(s):
            if c.isalpha():
                return cls(Amount.parse(s[:i] + " " + s[i:]))
        return cls(Amount.parse(s))