"""Inscriptions: content enveloped in taproot scripts, and how to find them."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .media import Media, content_type_for_path
from .script import OP_ENDIF, OP_FALSE, OP_IF, Op, Push, ScriptBuilder, ScriptError, instructions
from .transaction import Transaction, tapscript

PROTOCOL_ID = b"ord"
BODY_TAG = b""
CONTENT_TYPE_TAG = b"\x01"
_CHUNK_SIZE = 520
_ENVELOPE = (Push(b""), Op(OP_IF), Push(PROTOCOL_ID))


class InscriptionError(ValueError):
    """A witness could not be read for inscriptions."""


class InvalidInscription(InscriptionError):
    def __init__(self) -> None:
        super().__init__("invalid inscription")


class NoTapscript(InscriptionError):
    def __init__(self) -> None:
        super().__init__("witness has no tapscript")


class ScriptParseError(InscriptionError):
    def __init__(self, error: ScriptError) -> None:
        super().__init__(f"script error: {error}")
        self.error = error


@dataclass(frozen=True)
class Inscription:
    content_type: Optional[bytes] = None
    body: Optional[bytes] = None
    unrecognized_even_field: bool = False

    @classmethod
    def from_transaction(cls, tx: Transaction) -> list[TransactionInscription]:
        """Inscriptions in every input whose witness parses, with their positions."""
        result = []
        for index, tx_in in enumerate(tx.inputs):
            try:
                inscriptions = parse_witness(tx_in.witness)
            except InscriptionError:
                continue
            result.extend(
                TransactionInscription(inscription, index, offset)
                for offset, inscription in enumerate(inscriptions)
            )
        return result

    @classmethod
    def from_file(cls, path) -> Inscription:
        path = Path(path)
        try:
            body = path.read_bytes()
        except OSError as err:
            raise OSError(f"io error reading {path}") from err
        content_type = content_type_for_path(path)
        return cls(content_type=content_type.encode(), body=body)

    def append_reveal_script(self, builder: ScriptBuilder) -> ScriptBuilder:
        """Append this inscription's envelope to builder and return the builder."""
        builder.push_opcode(OP_FALSE).push_opcode(OP_IF).push_slice(PROTOCOL_ID)
        if self.content_type is not None:
            builder.push_slice(CONTENT_TYPE_TAG).push_slice(self.content_type)
        if self.body is not None:
            builder.push_slice(BODY_TAG)
            for start in range(0, len(self.body), _CHUNK_SIZE):
                builder.push_slice(self.body[start : start + _CHUNK_SIZE])
        return builder.push_opcode(OP_ENDIF)

    def media(self) -> Media:
        if self.body is None:
            return Media.UNKNOWN
        content_type = self.content_type_str()
        if content_type is None:
            return Media.UNKNOWN
        try:
            return Media.parse(content_type)
        except ValueError:
            return Media.UNKNOWN

    def content_length(self) -> Optional[int]:
        return None if self.body is None else len(self.body)

    def content_type_str(self) -> Optional[str]:
        """The content type as text, or None if absent or not UTF-8."""
        if self.content_type is None:
            return None
        try:
            return self.content_type.decode("utf-8")
        except UnicodeDecodeError:
            return None

    def to_witness(self) -> list[bytes]:
        return [self.append_reveal_script(ScriptBuilder()).to_bytes(), b""]


@dataclass(frozen=True)
class TransactionInscription:
    inscription: Inscription
    tx_in_index: int
    tx_in_offset: int


class _NoInscription(Exception):
    pass


_UNSET = object()


class _Parser:
    def __init__(self, script: bytes) -> None:
        self._instructions = instructions(script)
        self._peeked = _UNSET

    def parse_all(self) -> list[Inscription]:
        inscriptions = []
        while True:
            try:
                inscriptions.append(self._parse_one())
            except _NoInscription:
                return inscriptions

    def _parse_one(self) -> Inscription:
        self._enter_envelope()
        fields: dict[bytes, bytes] = {}
        while True:
            instruction = self._advance()
            if isinstance(instruction, Push):
                tag = instruction.data
                if tag == BODY_TAG:
                    body = bytearray()
                    while not self._accept(Op(OP_ENDIF)):
                        body += self._expect_push()
                    fields[BODY_TAG] = bytes(body)
                    break
                if tag in fields:
                    raise InvalidInscription()
                fields[tag] = self._expect_push()
            elif instruction == Op(OP_ENDIF):
                break
            else:
                raise InvalidInscription()

        body = fields.pop(BODY_TAG, None)
        content_type = fields.pop(CONTENT_TYPE_TAG, None)
        unrecognized_even = any(tag and tag[0] % 2 == 0 for tag in fields)
        return Inscription(content_type, body, unrecognized_even)

    def _advance(self):
        if self._peeked is not _UNSET:
            instruction, self._peeked = self._peeked, _UNSET
            return instruction
        try:
            return next(self._instructions)
        except StopIteration:
            raise _NoInscription from None
        except ScriptError as err:
            raise ScriptParseError(err) from err

    def _peek(self):
        if self._peeked is _UNSET:
            try:
                self._peeked = next(self._instructions)
            except StopIteration:
                return None
            except ScriptError as err:
                raise ScriptParseError(err) from err
        return self._peeked

    def _enter_envelope(self) -> None:
        while not self._match(_ENVELOPE):
            pass

    def _match(self, expected) -> bool:
        return all(self._advance() == instruction for instruction in expected)

    def _expect_push(self) -> bytes:
        instruction = self._advance()
        if not isinstance(instruction, Push):
            raise InvalidInscription()
        return instruction.data

    def _accept(self, instruction) -> bool:
        if self._peek() == instruction:
            self._advance()
            return True
        return False


def parse_witness(witness: list[bytes]) -> list[Inscription]:
    """All inscriptions in a witness's tapscript; raises on the first malformed one."""
    script = tapscript(witness)
    if script is None:
        raise NoTapscript()
    return _Parser(script).parse_all()