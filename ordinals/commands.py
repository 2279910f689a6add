"""The read-only commands and the JSON form of what they return."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any, BinaryIO, Iterable

from .inscription import Inscription
from .inscription_id import InscriptionId
from .object import Object
from .rarity import Rarity
from .sat import Sat, epoch_starting_sats
from .sat_point import OutPoint, SatPoint
from .transaction import Transaction


@dataclass(frozen=True)
class ListOutput:
    """One range of sats held by an output."""

    output: OutPoint
    start: int
    end: int
    size: int
    offset: int
    rarity: Rarity
    name: str


def decode(stream: BinaryIO) -> dict[str, list[Inscription]]:
    """Read one transaction from stream and return the inscriptions it reveals."""
    transaction = Transaction.read(stream)
    return {
        "inscriptions": [
            found.inscription for found in Inscription.from_transaction(transaction)
        ]
    }


def epochs() -> dict[str, list[Sat]]:
    """The first sat of each reward epoch."""
    return {"starting_sats": epoch_starting_sats()}


def list_ranges(outpoint: OutPoint, ranges: Iterable[tuple[int, int]]) -> list[ListOutput]:
    """Describe the sat ranges of an output, with each range's offset into it."""
    outputs = []
    offset = 0
    for start, end in ranges:
        size = end - start
        first = Sat(start)
        outputs.append(
            ListOutput(
                output=outpoint,
                start=start,
                end=end,
                size=size,
                offset=offset,
                rarity=first.rarity(),
                name=first.name(),
            )
        )
        offset += size
    return outputs


def parse_object(text: str) -> dict[str, Object]:
    """Parse an object from any of the notations the parser knows."""
    return {"object": Object.parse(text)}


def _optional_bytes(data: bytes | None) -> list[int] | None:
    return None if data is None else list(data)


def _jsonable(value: Any) -> Any:
    if isinstance(value, Sat):
        return value.n
    if isinstance(value, (Rarity, OutPoint, SatPoint, InscriptionId, Object)):
        return str(value)
    if isinstance(value, Inscription):
        return {
            "body": _optional_bytes(value.body),
            "content_type": _optional_bytes(value.content_type),
            "unrecognized_even_field": value.unrecognized_even_field,
        }
    if isinstance(value, ListOutput):
        return {
            "output": str(value.output),
            "start": value.start,
            "end": value.end,
            "size": value.size,
            "offset": value.offset,
            "rarity": str(value.rarity),
            "name": value.name,
        }
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, (bytes, bytearray)):
        return list(value)
    return value


def print_json(value: Any) -> None:
    """Write value to standard output as indented JSON followed by a newline."""
    sys.stdout.write(json.dumps(_jsonable(value), indent=2, ensure_ascii=False))
    sys.stdout.write("\n")