"""Consensus decoding of transactions, including segwit witnesses."""

from __future__ import annotations

import io
import struct
from dataclasses import dataclass, field
from typing import BinaryIO, Optional

from .sat_point import OutPoint

_MAX_VEC_SIZE = 4_000_000
_TAPROOT_ANNEX_PREFIX = 0x50
_COMPACT_SIZES = {0xFD: (2, 0xFD), 0xFE: (4, 0x10000), 0xFF: (8, 0x100000000)}


class DecodeError(ValueError):
    """Bytes do not hold a valid transaction."""


@dataclass
class TxIn:
    previous_output: OutPoint
    script_sig: bytes = b""
    sequence: int = 0xFFFFFFFF
    witness: list[bytes] = field(default_factory=list)


@dataclass
class TxOut:
    value: int
    script_pubkey: bytes


def _read_exact(stream: BinaryIO, n: int) -> bytes:
    buffer = bytearray()
    while len(buffer) < n:
        chunk = stream.read(n - len(buffer))
        if not chunk:
            raise DecodeError("unexpected end of data")
        buffer += chunk
    return bytes(buffer)


def _read_u8(stream: BinaryIO) -> int:
    return _read_exact(stream, 1)[0]


def _read_u32(stream: BinaryIO) -> int:
    return struct.unpack("<I", _read_exact(stream, 4))[0]


def _read_compact_size(stream: BinaryIO) -> int:
    first = _read_u8(stream)
    if first not in _COMPACT_SIZES:
        return first
    width, minimum = _COMPACT_SIZES[first]
    value = int.from_bytes(_read_exact(stream, width), "little")
    if value < minimum:
        raise DecodeError("non-minimal varint")
    return value


def _read_bytes(stream: BinaryIO) -> bytes:
    size = _read_compact_size(stream)
    if size > _MAX_VEC_SIZE:
        raise DecodeError(f"oversized vector allocation: {size} bytes")
    return _read_exact(stream, size)


def _read_input(stream: BinaryIO) -> TxIn:
    txid = _read_exact(stream, 32)[::-1].hex()
    vout = _read_u32(stream)
    script_sig = _read_bytes(stream)
    sequence = _read_u32(stream)
    return TxIn(OutPoint(txid, vout), script_sig, sequence)


def _read_output(stream: BinaryIO) -> TxOut:
    (value,) = struct.unpack("<Q", _read_exact(stream, 8))
    return TxOut(value, _read_bytes(stream))


def _read_witness(stream: BinaryIO) -> list[bytes]:
    return [_read_bytes(stream) for _ in range(_read_compact_size(stream))]


@dataclass
class Transaction:
    version: int
    lock_time: int
    inputs: list[TxIn] = field(default_factory=list)
    outputs: list[TxOut] = field(default_factory=list)

    @classmethod
    def read(cls, stream: BinaryIO) -> Transaction:
        """Read one transaction from a binary stream, leaving any further bytes unread."""
        (version,) = struct.unpack("<i", _read_exact(stream, 4))
        input_count = _read_compact_size(stream)
        if input_count == 0:
            flag = _read_u8(stream)
            if flag != 1:
                raise DecodeError(f"unsupported segwit version: {flag}")
            inputs = [_read_input(stream) for _ in range(_read_compact_size(stream))]
            outputs = [_read_output(stream) for _ in range(_read_compact_size(stream))]
            for tx_in in inputs:
                tx_in.witness = _read_witness(stream)
            if not any(tx_in.witness for tx_in in inputs):
                raise DecodeError("witness flag set but no witnesses present")
        else:
            inputs = [_read_input(stream) for _ in range(input_count)]
            outputs = [_read_output(stream) for _ in range(_read_compact_size(stream))]
        lock_time = _read_u32(stream)
        return cls(version, lock_time, inputs, outputs)

    @classmethod
    def decode(cls, data: bytes) -> Transaction:
        """Decode a transaction that must span all of data."""
        stream = io.BytesIO(data)
        tx = cls.read(stream)
        if stream.tell() != len(data):
            raise DecodeError("data not consumed entirely when explicitly deserializing")
        return tx


def tapscript(witness: list[bytes]) -> Optional[bytes]:
    """The script of a taproot script-path spend, skipping an annex if there is one."""
    if not witness:
        return None
    last = witness[-1]
    position = 3 if len(witness) >= 2 and last[:1] == bytes([_TAPROOT_ANNEX_PREFIX]) else 2
    if len(witness) < position:
        return None
    return witness[len(witness) - position]