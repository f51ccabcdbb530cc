import pytest

from dental_chart.services.odontogram.classification import TOOTH_TYPES
from dental_chart.services.odontogram.geometry import (
    _upper_spec,
    format_path,
    mirror_path,
    shapes_for,
    surface_diagram_paths,
)


@pytest.mark.parametrize(
    ("tooth_type", "roots"),
    [
        ("central_incisor", 1),
        ("lateral_incisor", 1),
        ("canine", 1),
        ("premolar", 2),
        ("molar", 3),
    ],
)
@pytest.mark.parametrize("arch", ["upper", "lower"])
def test_root_counts(tooth_type, roots, arch):
    assert shapes_for(tooth_type, arch).root_count == roots


@pytest.mark.parametrize("tooth_type", TOOTH_TYPES)
def test_lower_is_vertical_mirror_of_upper(tooth_type):
    upper = shapes_for(tooth_type, "upper")
    lower = shapes_for(tooth_type, "lower")
    assert upper.crown_path != lower.crown_path
    assert upper.crown_top > lower.crown_top
    assert lower.crown_top == 0.0
    assert upper.crown_bottom == 90
    crown, roots = _upper_spec(tooth_type, 44, 90)
    assert lower.crown_path == format_path(mirror_path(crown, 90))
    assert lower.root_paths == tuple(format_path(mirror_path(root, 90)) for root in roots)


def test_crown_silhouettes_differ_by_type():
    crowns = {shapes_for(tooth_type, "upper").crown_path for tooth_type in TOOTH_TYPES}
    assert len(crowns) == len(TOOTH_TYPES)


def test_shapes_are_cached():
    assert shapes_for("molar", "upper") is shapes_for("molar", "upper")


def test_mirror_and_format():
    spec = (("M", 1, 10), ("Q", 2, 0, 3, 20), ("Z",))
    assert format_path(spec) == "M 1,10 Q 2,0 3,20 Z"
    assert format_path(mirror_path(spec, 90)) == "M 1,80 Q 2,90 3,70 Z"
    assert mirror_path(mirror_path(spec, 90), 90) == spec


def test_surface_diagram_has_five_regions():
    paths = surface_diagram_paths(44)
    assert set(paths) == {"top", "bottom", "left", "right", "center"}
    assert paths["top"] == "M 0,0 L 44,0 L 30.8,13.2 L 13.2,13.2 Z"
