import pytest

from ordinals.sat_point import OutPoint, SatPoint

TXID = "1" * 64


def test_from_str_ok():
    assert SatPoint.parse(TXID + ":1:1") == SatPoint(OutPoint.parse(TXID + ":1"), 1)


@pytest.mark.parametrize(
    "text",
    ["abc", "abc:xyz", TXID + ":1", TXID + ":1:foo"],
)
def test_from_str_err(text):
    with pytest.raises(ValueError):
        SatPoint.parse(text)


def test_display_round_trip():
    text = "0123456789ABCDEF" * 4 + ":123:456"
    sat_point = SatPoint.parse(text)
    assert str(sat_point) == text.lower()
    assert SatPoint.parse(str(sat_point)) == sat_point


def test_encode_round_trip():
    sat_point = SatPoint.parse("0123456789abcdef" * 4 + ":5:7")
    data = sat_point.encode()
    assert len(data) == 44
    assert SatPoint.decode(data) == sat_point


def test_encode_layout():
    sat_point = SatPoint(OutPoint("00" * 31 + "ff", 1), 2)
    data = sat_point.encode()
    assert data[0] == 0xFF
    assert data[32:36] == b"\x01\x00\x00\x00"
    assert data[36:] == b"\x02" + b"\x00" * 7


def test_decode_bad_length():
    with pytest.raises(ValueError):
        SatPoint.decode(b"\x00" * 10)


def test_outpoint_rejects_extra_colon():
    with pytest.raises(ValueError):
        OutPoint.parse(TXID + ":1:2")


def test_ordering_by_offset():
    outpoint = OutPoint(TXID, 0)
    assert SatPoint(outpoint, 1) < SatPoint(outpoint, 2)