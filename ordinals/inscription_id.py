"""Identifiers of inscriptions: a transaction id and an index."""

from __future__ import annotations

import re
from dataclasses import dataclass

_TXID_LEN = 64
_MIN_LEN = _TXID_LEN + 2
_U32_MAX = 2**32 - 1
_HEX = re.compile(r"[0-9a-fA-F]{64}")
_INDEX = re.compile(r"\+?[0-9]+")


class ParseError(ValueError):
    """An inscription id could not be parsed."""


class CharacterError(ParseError):
    def __init__(self, char: str) -> None:
        super().__init__(f"invalid character: '{char}'")
        self.char = char


class LengthError(ParseError):
    def __init__(self, length: int) -> None:
        super().__init__(f"invalid length: {length}")
        self.length = length


class SeparatorError(ParseError):
    def __init__(self, separator: str) -> None:
        super().__init__(f"invalid seprator: `{separator}`")
        self.separator = separator


class TxidError(ParseError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"invalid txid: {reason}")


class InvalidIndexError(ParseError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"invalid index: {reason}")


def parse_txid(s: str) -> str:
    """Validate a hex transaction id and return it in lower case."""
    if len(s) != _TXID_LEN:
        raise TxidError(f"expected {_TXID_LEN} hex characters, got {len(s)}")
    if not _HEX.fullmatch(s):
        raise TxidError(f"not hexadecimal: {s}")
    return s.lower()


@dataclass(frozen=True)
class InscriptionId:
    """An inscription, named by its reveal transaction and position within it."""

    txid: str
    index: int

    def __str__(self) -> str:
        return f"{self.txid}i{self.index}"

    @classmethod
    def parse(cls, s: str) -> InscriptionId:
        for char in s:
            if not char.isascii():
                raise CharacterError(char)
        if len(s) < _MIN_LEN:
            raise LengthError(len(s))
        separator = s[_TXID_LEN]
        if separator != "i":
            raise SeparatorError(separator)
        txid = parse_txid(s[:_TXID_LEN])
        vout = s[_TXID_LEN + 1 :]
        if not _INDEX.fullmatch(vout):
            raise InvalidIndexError(f"invalid digit in {vout!r}")
        index = int(vout)
        if index > _U32_MAX:
            raise InvalidIndexError("number too large to fit in target type")
        return cls(txid, index)