import pytest

from dental_chart.services.odontogram.numbering import (
    ALL_TEETH,
    LOWER_ROW,
    UPPER_ROW,
    NumberingMapper,
    to_display,
    to_internal,
)


@pytest.mark.parametrize("internal_id", ALL_TEETH)
def test_fdi_round_trip(internal_id: int):
    assert to_internal(to_display(internal_id)) == internal_id


@pytest.mark.parametrize(
    ("internal_id", "fdi"),
    [(1, "18"), (8, "11"), (9, "21"), (16, "28"), (17, "38"), (24, "31"), (25, "41"), (32, "48")],
)
def test_fdi_anchor_points(internal_id: int, fdi: str):
    assert to_display(internal_id) == fdi
    assert to_internal(fdi) == internal_id


def test_display_codes_are_unique_two_digit_codes():
    codes = [to_display(tooth) for tooth in ALL_TEETH]
    assert len(set(codes)) == 32
    assert all(len(code) == 2 and code[0] in "1234" and code[1] in "12345678" for code in codes)


def test_unknown_ids_fall_back_to_input():
    assert to_display(33) == "33"
    assert to_display(0) == "0"
    assert to_internal("99") == "99"
    assert to_internal(55) == 55


def test_to_internal_accepts_integer_fdi():
    assert to_internal(16) == 3


def test_universal_notation_is_identity():
    mapper = NumberingMapper("universal")
    assert mapper.to_display(3) == "3"
    assert mapper.to_internal("3") == 3
    assert mapper.to_internal("40") == "40"


def test_chart_rows_cover_every_tooth_once():
    assert sorted(UPPER_ROW + LOWER_ROW) == list(ALL_TEETH)
    assert [to_display(tooth) for tooth in UPPER_ROW[:2]] == ["18", "17"]
    assert [to_display(tooth) for tooth in LOWER_ROW[:2]] == ["48", "47"]
    assert to_display(LOWER_ROW[-1]) == "38"
