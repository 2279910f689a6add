"""Building and reading the push and opcode instructions of a script."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

OP_0 = OP_FALSE = 0x00
OP_PUSHDATA1 = 0x4C
OP_PUSHDATA2 = 0x4D
OP_PUSHDATA4 = 0x4E
OP_IF = 0x63
OP_ENDIF = 0x68
OP_CHECKSIG = 0xAC

_PUSHDATA_WIDTHS = {OP_PUSHDATA1: 1, OP_PUSHDATA2: 2, OP_PUSHDATA4: 4}
_MAX_PUSH = 0xFFFFFFFF


class ScriptError(ValueError):
    """A script could not be split into instructions."""


@dataclass(frozen=True)
class Op:
    """An opcode that does not push data."""

    opcode: int


@dataclass(frozen=True)
class Push:
    """A data push; OP_0 reads as an empty push."""

    data: bytes


Instruction = Union[Op, Push]


class ScriptBuilder:
    """Accumulates opcodes and data pushes into a script."""

    def __init__(self, script: bytes = b"") -> None:
        self._script = bytearray(script)

    def push_opcode(self, opcode: int | Op) -> ScriptBuilder:
        if isinstance(opcode, Op):
            opcode = opcode.opcode
        if not 0 <= opcode <= 0xFF:
            raise ValueError(f"opcode out of range: {opcode}")
        self._script.append(opcode)
        return self

    def push_slice(self, data: bytes) -> ScriptBuilder:
        """Push data with the shortest push opcode that can hold its length."""
        data = bytes(data)
        size = len(data)
        if size < OP_PUSHDATA1:
            self._script.append(size)
        elif size < 0x100:
            self._script += bytes([OP_PUSHDATA1, size])
        elif size < 0x10000:
            self._script.append(OP_PUSHDATA2)
            self._script += size.to_bytes(2, "little")
        elif size <= _MAX_PUSH:
            self._script.append(OP_PUSHDATA4)
            self._script += size.to_bytes(4, "little")
        else:
            raise ValueError(f"push of {size} bytes is too large")
        self._script += data
        return self

    def to_bytes(self) -> bytes:
        return bytes(self._script)


def instructions(script: bytes) -> Iterator[Instruction]:
    """Yield the instructions of a script, raising ScriptError where it is cut short."""
    data = bytes(script)
    pos = 0
    end = len(data)
    while pos < end:
        opcode = data[pos]
        pos += 1
        if opcode < OP_PUSHDATA1:
            size = opcode
        elif opcode in _PUSHDATA_WIDTHS:
            width = _PUSHDATA_WIDTHS[opcode]
            if pos + width > end:
                raise ScriptError("unexpected end of script")
            size = int.from_bytes(data[pos : pos + width], "little")
            pos += width
        else:
            yield Op(opcode)
            continue
        if pos + size > end:
            raise ScriptError("unexpected end of script")
        yield Push(data[pos : pos + size])
        pos += size