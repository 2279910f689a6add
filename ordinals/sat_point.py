"""Transaction outputs and locations of sats within them."""

from __future__ import annotations

import re
import struct
from dataclasses import dataclass, field

from .inscription_id import parse_txid

_U32_MAX = 2**32 - 1
_U64_MAX = 2**64 - 1
_U64 = re.compile(r"\+?[0-9]+")
_ENCODED_LEN = 32 + 4 + 8


@dataclass(frozen=True, order=True)
class OutPoint:
    """A transaction output: transaction id and output index."""

    _key: bytes = field(init=False, repr=False, compare=True)
    txid: str = field(compare=False)
    vout: int = field(compare=False)

    def __init__(self, txid: str, vout: int) -> None:
        txid = parse_txid(txid)
        if not 0 <= vout <= _U32_MAX:
            raise ValueError(f"vout out of range: {vout}")
        object.__setattr__(self, "txid", txid)
        object.__setattr__(self, "vout", vout)
        object.__setattr__(self, "_key", bytes.fromhex(txid)[::-1] + vout.to_bytes(4, "big"))

    def __repr__(self) -> str:
        return f"OutPoint(txid={self.txid!r}, vout={self.vout})"

    def __str__(self) -> str:
        return f"{self.txid}:{self.vout}"

    @classmethod
    def parse(cls, s: str) -> OutPoint:
        if s.count(":") != 1:
            raise ValueError(f"invalid outpoint: {s}")
        txid, _, vout = s.partition(":")
        if not vout.isascii() or not vout.isdigit():
            raise ValueError(f"invalid vout: {vout!r}")
        if len(vout) > 1 and vout.startswith("0"):
            raise ValueError(f"vout has leading zeros: {vout}")
        index = int(vout)
        if index > _U32_MAX:
            raise ValueError(f"vout too large: {vout}")
        return cls(parse_txid(txid), index)


@dataclass(frozen=True, order=True)
class SatPoint:
    """A sat's location: an output and an offset into it."""

    outpoint: OutPoint
    offset: int

    def __str__(self) -> str:
        return f"{self.outpoint}:{self.offset}"

    @classmethod
    def parse(cls, s: str) -> SatPoint:
        outpoint, sep, offset = s.rpartition(":")
        if not sep:
            raise ValueError(f"invalid satpoint: {s}")
        parsed = OutPoint.parse(outpoint)
        if not _U64.fullmatch(offset) or int(offset) > _U64_MAX:
            raise ValueError(f"invalid offset: {offset!r}")
        return cls(parsed, int(offset))

    def encode(self) -> bytes:
        """Consensus encoding: txid bytes, vout and offset, little endian."""
        return (
            bytes.fromhex(self.outpoint.txid)[::-1]
            + struct.pack("<IQ", self.outpoint.vout, self.offset)
        )

    @classmethod
    def decode(cls, data: bytes) -> SatPoint:
        if len(data) != _ENCODED_LEN:
            raise ValueError(f"satpoint encoding must be {_ENCODED_LEN} bytes, got {len(data)}")
        txid = data[:32][::-1].hex()
        vout, offset = struct.unpack("<IQ", data[32:])
        return cls(OutPoint(txid, vout), offset)