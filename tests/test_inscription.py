import pytest

from ordinals.inscription import (
    Inscription,
    InvalidInscription,
    NoTapscript,
    ScriptParseError,
    TransactionInscription,
    parse_witness,
)
from ordinals.media import Media
from ordinals.sat_point import OutPoint
from ordinals.script import (
    OP_CHECKSIG,
    OP_ENDIF,
    OP_FALSE,
    OP_IF,
    ScriptBuilder,
    ScriptError,
    instructions,
)
from ordinals.transaction import Transaction, TxIn

NULL_OUTPOINT = OutPoint("00" * 32, 0xFFFFFFFF)
PLAIN = "text/plain;charset=utf-8"


def envelope(pushes):
    builder = ScriptBuilder().push_opcode(OP_FALSE).push_opcode(OP_IF)
    for push in pushes:
        builder.push_slice(push)
    return [builder.push_opcode(OP_ENDIF).to_bytes(), b""]


def inscription(content_type, body):
    if isinstance(body, str):
        body = body.encode()
    return Inscription(content_type=content_type.encode(), body=bytes(body))


def tx_with(*witnesses):
    return Transaction(
        version=0,
        lock_time=0,
        inputs=[TxIn(NULL_OUTPOINT, b"", 0, list(w)) for w in witnesses],
        outputs=[],
    )


def test_empty():
    with pytest.raises(NoTapscript):
        parse_witness([])


def test_ignore_key_path_spends():
    with pytest.raises(NoTapscript):
        parse_witness([b""])


def test_ignore_key_path_spends_with_annex():
    with pytest.raises(NoTapscript):
        parse_witness([b"", b"\x50"])


def test_ignore_unparsable_scripts():
    with pytest.raises(ScriptParseError) as info:
        parse_witness([b"\x01", b""])
    assert isinstance(info.value.error, ScriptError)


def test_no_inscription():
    assert parse_witness([b"", b""]) == []


def test_duplicate_field():
    with pytest.raises(InvalidInscription):
        parse_witness(envelope([b"ord", b"\x01", PLAIN.encode(), b"\x01", PLAIN.encode(), b"", b"ord"]))


def test_valid():
    assert parse_witness(envelope([b"ord", b"\x01", PLAIN.encode(), b"", b"ord"])) == [
        inscription(PLAIN, "ord")
    ]


def test_valid_with_unknown_tag():
    witness = envelope([b"ord", b"\x01", PLAIN.encode(), b"\x03", b"bar", b"", b"ord"])
    assert parse_witness(witness) == [inscription(PLAIN, "ord")]


def test_no_content_tag():
    assert parse_witness(envelope([b"ord", b"\x01", PLAIN.encode()])) == [
        Inscription(content_type=PLAIN.encode(), body=None)
    ]


def test_no_content_type():
    assert parse_witness(envelope([b"ord", b"", b"foo"])) == [
        Inscription(content_type=None, body=b"foo")
    ]


def test_valid_body_in_multiple_pushes():
    witness = envelope([b"ord", b"\x01", PLAIN.encode(), b"", b"foo", b"bar"])
    assert parse_witness(witness) == [inscription(PLAIN, "foobar")]


def test_valid_body_in_zero_pushes():
    assert parse_witness(envelope([b"ord", b"\x01", PLAIN.encode(), b""])) == [
        inscription(PLAIN, "")
    ]


def test_valid_body_in_multiple_empty_pushes():
    witness = envelope([b"ord", b"\x01", PLAIN.encode()] + [b""] * 6)
    assert parse_witness(witness) == [inscription(PLAIN, "")]


def test_valid_ignore_trailing():
    script = (
        ScriptBuilder()
        .push_opcode(OP_FALSE)
        .push_opcode(OP_IF)
        .push_slice(b"ord")
        .push_slice(b"\x01")
        .push_slice(PLAIN.encode())
        .push_slice(b"")
        .push_slice(b"ord")
        .push_opcode(OP_ENDIF)
        .push_opcode(OP_CHECKSIG)
        .to_bytes()
    )
    assert parse_witness([script, b""]) == [inscription(PLAIN, "ord")]


def test_valid_ignore_preceding():
    script = (
        ScriptBuilder()
        .push_opcode(OP_CHECKSIG)
        .push_opcode(OP_FALSE)
        .push_opcode(OP_IF)
        .push_slice(b"ord")
        .push_slice(b"\x01")
        .push_slice(PLAIN.encode())
        .push_slice(b"")
        .push_slice(b"ord")
        .push_opcode(OP_ENDIF)
        .to_bytes()
    )
    assert parse_witness([script, b""]) == [inscription(PLAIN, "ord")]


def test_do_not_ignore_inscriptions_after_first():
    builder = ScriptBuilder()
    for body in (b"foo", b"bar"):
        builder.push_opcode(OP_FALSE).push_opcode(OP_IF).push_slice(b"ord")
        builder.push_slice(b"\x01").push_slice(PLAIN.encode()).push_slice(b"").push_slice(body)
        builder.push_opcode(OP_ENDIF)
    assert parse_witness([builder.to_bytes(), b""]) == [
        inscription(PLAIN, "foo"),
        inscription(PLAIN, "bar"),
    ]


def test_invalid_utf8_does_not_render_inscription_invalid():
    witness = envelope([b"ord", b"\x01", PLAIN.encode(), b"", bytes([0b10000000])])
    assert parse_witness(witness) == [inscription(PLAIN, bytes([0b10000000]))]


def test_no_endif():
    script = ScriptBuilder().push_opcode(OP_FALSE).push_opcode(OP_IF).push_slice(b"ord").to_bytes()
    assert parse_witness([script, b""]) == []


def test_no_op_false():
    script = ScriptBuilder().push_opcode(OP_IF).push_slice(b"ord").push_opcode(OP_ENDIF).to_bytes()
    assert parse_witness([script, b""]) == []


def test_empty_envelope():
    assert parse_witness(envelope([])) == []


def test_wrong_magic_number():
    assert parse_witness(envelope([b"foo"])) == []


def test_extract_from_transaction():
    tx = tx_with(envelope([b"ord", b"\x01", PLAIN.encode(), b"", b"ord"]))
    assert Inscription.from_transaction(tx) == [
        TransactionInscription(inscription(PLAIN, "ord"), 0, 0)
    ]


def test_extract_from_second_input():
    tx = tx_with([], inscription("foo", b"\x01" * 1040).to_witness())
    assert Inscription.from_transaction(tx) == [
        TransactionInscription(inscription("foo", b"\x01" * 1040), 1, 0)
    ]


def test_extract_from_second_envelope():
    builder = ScriptBuilder()
    inscription("foo", b"\x01" * 100).append_reveal_script(builder)
    inscription("bar", b"\x01" * 100).append_reveal_script(builder)
    tx = tx_with([builder.to_bytes(), b""])
    assert Inscription.from_transaction(tx) == [
        TransactionInscription(inscription("foo", b"\x01" * 100), 0, 0),
        TransactionInscription(inscription("bar", b"\x01" * 100), 0, 1),
    ]


def test_inscribe_png():
    witness = envelope([b"ord", b"\x01", b"image/png", b"", b"\x01" * 100])
    assert parse_witness(witness) == [inscription("image/png", b"\x01" * 100)]


@pytest.mark.parametrize(
    "size, count", [(0, 7), (1, 8), (520, 8), (521, 9), (1040, 9), (1041, 10)]
)
def test_reveal_script_chunks_data(size, count):
    script = inscription("foo", bytes(size)).append_reveal_script(ScriptBuilder()).to_bytes()
    assert len(list(instructions(script))) == count


def test_chunked_data_is_parsable():
    item = inscription("foo", b"\x01" * 1040)
    assert parse_witness(item.to_witness()) == [item]


def test_round_trip_with_no_fields():
    empty = Inscription(content_type=None, body=None)
    assert parse_witness(empty.to_witness()) == [empty]


def test_unknown_odd_fields_are_ignored():
    assert parse_witness(envelope([b"ord", b"\x03", b"\x00"])) == [
        Inscription(content_type=None, body=None, unrecognized_even_field=False)
    ]


def test_unknown_even_fields():
    assert parse_witness(envelope([b"ord", b"\x02", b"\x00"])) == [
        Inscription(content_type=None, body=None, unrecognized_even_field=True)
    ]


def test_invalid_opcode_in_fields():
    witness = envelope([b"ord"])
    script = (
        ScriptBuilder()
        .push_opcode(OP_FALSE)
        .push_opcode(OP_IF)
        .push_slice(b"ord")
        .push_opcode(OP_CHECKSIG)
        .push_opcode(OP_ENDIF)
        .to_bytes()
    )
    assert parse_witness(witness) == [Inscription()]
    with pytest.raises(InvalidInscription):
        parse_witness([script, b""])


def test_invalid_witness_skipped_in_transaction():
    tx = tx_with([b"\x01", b""], inscription("foo", b"bar").to_witness())
    assert Inscription.from_transaction(tx) == [
        TransactionInscription(inscription("foo", b"bar"), 1, 0)
    ]


def test_media_of_known_type():
    assert inscription("image/png", b"x").media() is Media.IMAGE


def test_media_without_body_is_unknown():
    assert Inscription(content_type=b"image/png", body=None).media() is Media.UNKNOWN


def test_media_of_unknown_type():
    assert inscription("foo", b"x").media() is Media.UNKNOWN


def test_content_length():
    assert inscription(PLAIN, "ord").content_length() == 3
    assert Inscription().content_length() is None


def test_content_type_str():
    assert inscription(PLAIN, "ord").content_type_str() == PLAIN
    assert Inscription(content_type=b"\xff", body=b"").content_type_str() is None


def test_from_file(tmp_path):
    path = tmp_path / "hello.txt"
    path.write_bytes(b"hello")
    assert Inscription.from_file(path) == Inscription(content_type=PLAIN.encode(), body=b"hello")


def test_from_file_unsupported_extension(tmp_path):
    path = tmp_path / "hello.foo"
    path.write_bytes(b"hello")
    with pytest.raises(ValueError, match="unsupported file extension"):
        Inscription.from_file(path)


def test_from_file_missing(tmp_path):
    with pytest.raises(OSError, match="io error reading"):
        Inscription.from_file(tmp_path / "missing.txt")