"""Recognising which notation a string is written in."""

from __future__ import annotations

import re
from enum import Enum

_XDIGIT = "[0-9a-fA-F]"


class Representation(Enum):
    """Notations for objects that the parser recognises, in priority order."""

    ADDRESS = r"(bc|BC|tb|TB|bcrt|BCRT)1.*"
    DECIMAL = r".*\..*"
    DEGREE = r".*°.*′.*″(.*‴)?"
    HASH = _XDIGIT + r"{64}"
    INSCRIPTION_ID = _XDIGIT + r"{64}i\d+"
    INTEGER = r"[0-9]*"
    NAME = r"[a-z]{1,11}"
    OUT_POINT = _XDIGIT + r"{64}:\d+"
    PERCENTILE = r".*%"
    SAT_POINT = _XDIGIT + r"{64}:\d+:\d+"

    @property
    def pattern(self) -> re.Pattern[str]:
        return _COMPILED[self]

    @classmethod
    def detect(cls, s: str) -> Representation:
        """Return the first notation whose pattern matches all of s."""
        for representation in cls:
            if representation.pattern.fullmatch(s):
                return representation
        raise ValueError("unrecognized object")


_COMPILED = {rep: re.compile(rep.value) for rep in Representation}