import pytest

from plates.plate_format import format_plate, is_valid_plate, normalize_plate, plate_kind, strip_plate


def test_normalize_uppercases_and_drops_punctuation():
    assert normalize_plate("abc-1234") == "ABC1234"
    assert normalize_plate(" abc 1d23 ") == "ABC1D23"
    assert normalize_plate("a.b/c_1*2#3$4") == "ABC1234"


@pytest.mark.parametrize(
    "plate,kind",
    [
        ("ABC1234", "legacy"),
        ("ABC1D23", "mercosul"),
        ("AB1234", None),
        ("ABCD123", None),
        ("ABC12345", None),
        ("ABC1DD3", None),
        ("1BC1234", None),
        ("", None),
    ],
)
def test_plate_kind(plate, kind):
    assert plate_kind(plate) == kind
    assert is_valid_plate(plate) is (kind is not None)


def test_format_plate_inserts_hyphen():
    assert format_plate("ABC1234") == "ABC-1234"
    assert format_plate("ABC1D23") == "ABC-1D23"


@pytest.mark.parametrize("plate", ["ABC1234", "XYZ9A87", "QWE0000"])
def test_format_then_strip_returns_plate(plate):
    assert strip_plate(format_plate(plate)) == plate
