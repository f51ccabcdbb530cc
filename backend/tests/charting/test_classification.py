import pytest

from dental_chart.services.odontogram.classification import (
    classify,
    describe_tooth,
    position_in_quadrant,
    tooth_type_label,
)
from dental_chart.services.odontogram.numbering import ALL_TEETH


@pytest.mark.parametrize(
    ("internal_id", "arch", "quadrant", "tooth_type"),
    [
        (1, "upper", 1, "molar"),
        (3, "upper", 1, "molar"),
        (4, "upper", 1, "premolar"),
        (6, "upper", 1, "canine"),
        (7, "upper", 1, "lateral_incisor"),
        (8, "upper", 1, "central_incisor"),
        (9, "upper", 2, "central_incisor"),
        (11, "upper", 2, "canine"),
        (13, "upper", 2, "premolar"),
        (16, "upper", 2, "molar"),
        (17, "lower", 3, "molar"),
        (21, "lower", 3, "premolar"),
        (24, "lower", 3, "central_incisor"),
        (25, "lower", 4, "central_incisor"),
        (26, "lower", 4, "lateral_incisor"),
        (27, "lower", 4, "canine"),
        (30, "lower", 4, "molar"),
        (32, "lower", 4, "molar"),
    ],
)
def test_classify(internal_id, arch, quadrant, tooth_type):
    info = classify(internal_id)
    assert (info.arch, info.quadrant, info.tooth_type) == (arch, quadrant, tooth_type)


def test_type_counts_per_mouth():
    counts = {}
    for tooth in ALL_TEETH:
        tooth_type = classify(tooth).tooth_type
        counts[tooth_type] = counts.get(tooth_type, 0) + 1
    assert counts == {
        "molar": 12,
        "premolar": 8,
        "canine": 4,
        "lateral_incisor": 4,
        "central_incisor": 4,
    }


@pytest.mark.parametrize("internal_id", [0, 33, -1])
def test_classify_rejects_unknown_ids(internal_id):
    with pytest.raises(ValueError):
        classify(internal_id)


def test_position_counts_from_midline():
    assert position_in_quadrant(8) == 1
    assert position_in_quadrant(1) == 8
    assert position_in_quadrant(9) == 1
    assert position_in_quadrant(17) == 8
    assert position_in_quadrant(25) == 1


def test_describe_tooth():
    assert describe_tooth(3) == "Upper Right First Molar"
    assert describe_tooth(11) == "Upper Left Canine"
    assert describe_tooth(20) == "Lower Left Second Premolar"
    assert describe_tooth(32) == "Lower Right Third Molar"


def test_tooth_type_label():
    assert tooth_type_label("lateral_incisor") == "Lateral Incisor"
