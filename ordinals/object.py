"""Parsing of any of the objects that users can name on the command line."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from .inscription_id import InscriptionId
from .representation import Representation
from .sat import Sat
from .sat_point import OutPoint, SatPoint

_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_BECH32_CONST = 1
_BECH32M_CONST = 0x2BC830A3
_GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)
_HRPS = ("bc", "tb", "bcrt")
_U128_MAX = 2**128 - 1


def _polymod(values) -> int:
    chk = 1
    for value in values:
        top = chk >> 25
        chk = (chk & 0x1FFFFFF) << 5 ^ value
        for i, gen in enumerate(_GENERATOR):
            if (top >> i) & 1:
                chk ^= gen
    return chk


def _hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _convert_bits(data, from_bits: int, to_bits: int, pad: bool) -> list[int]:
    acc = bits = 0
    result = []
    maxv = (1 << to_bits) - 1
    for value in data:
        acc = (acc << from_bits) | value
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            result.append((acc >> bits) & maxv)
    if pad:
        if bits:
            result.append((acc << (to_bits - bits)) & maxv)
    elif bits >= from_bits or (acc << (to_bits - bits)) & maxv:
        raise ValueError("invalid padding in address")
    return result


@dataclass(frozen=True)
class Address:
    """A segwit address on mainnet, testnet/signet or regtest."""

    hrp: str
    version: int
    program: bytes

    def __str__(self) -> str:
        data = [self.version] + _convert_bits(self.program, 8, 5, True)
        const = _BECH32_CONST if self.version == 0 else _BECH32M_CONST
        mod = _polymod(_hrp_expand(self.hrp) + data + [0] * 6) ^ const
        checksum = [(mod >> 5 * (5 - i)) & 31 for i in range(6)]
        return self.hrp + "1" + "".join(_CHARSET[d] for d in data + checksum)

    @classmethod
    def parse(cls, s: str) -> Address:
        if s.lower() != s and s.upper() != s:
            raise ValueError("mixed case address")
        if len(s) > 90 or any(not 33 <= ord(c) <= 126 for c in s):
            raise ValueError("invalid address characters or length")
        s = s.lower()
        pos = s.rfind("1")
        if pos < 1 or pos + 7 > len(s):
            raise ValueError("invalid address separator position")
        hrp = s[:pos]
        if hrp not in _HRPS:
            raise ValueError(f"unknown address prefix: {hrp}")
        try:
            data = [_CHARSET.index(c) for c in s[pos + 1 :]]
        except ValueError:
            raise ValueError("invalid bech32 character") from None
        const = _polymod(_hrp_expand(hrp) + data)
        payload = data[:-6]
        if not payload:
            raise ValueError("empty witness program")
        version = payload[0]
        if version > 16:
            raise ValueError(f"invalid witness version: {version}")
        expected = _BECH32_CONST if version == 0 else _BECH32M_CONST
        if const != expected:
            raise ValueError("invalid address checksum")
        program = bytes(_convert_bits(payload[1:], 5, 8, False))
        if not 2 <= len(program) <= 40:
            raise ValueError("invalid witness program length")
        if version == 0 and len(program) not in (20, 32):
            raise ValueError("invalid segwit v0 program length")
        return cls(hrp, version, program)


@dataclass(frozen=True)
class Object:
    """A parsed object: address, hash, inscription id, integer, outpoint, sat or satpoint."""

    value: Union[Address, bytes, InscriptionId, int, OutPoint, Sat, SatPoint]

    def __str__(self) -> str:
        if isinstance(self.value, bytes):
            return self.value.hex()
        return str(self.value)

    @classmethod
    def parse(cls, s: str) -> Object:
        rep = Representation.detect(s)
        if rep is Representation.ADDRESS:
            return cls(Address.parse(s))
        if rep in (
            Representation.DECIMAL,
            Representation.DEGREE,
            Representation.PERCENTILE,
            Representation.NAME,
        ):
            return cls(Sat.parse(s))
        if rep is Representation.HASH:
            return cls(bytes.fromhex(s))
        if rep is Representation.INSCRIPTION_ID:
            return cls(InscriptionId.parse(s))
        if rep is Representation.INTEGER:
            if not re.fullmatch(r"[0-9]+", s) or int(s) > _U128_MAX:
                raise ValueError(f"invalid integer: {s!r}")
            return cls(int(s))
        if rep is Representation.OUT_POINT:
            return cls(OutPoint.parse(s))
        return cls(SatPoint.parse(s))