import pytest

from dental_chart.services.odontogram.conditions import SurfaceName
from dental_chart.services.odontogram.surfaces import resolve

UPPER = ("upper", 1), ("upper", 2)
LOWER = ("lower", 3), ("lower", 4)


@pytest.mark.parametrize(("arch", "quadrant"), UPPER + LOWER)
def test_layout_covers_all_surfaces(arch, quadrant):
    layout = resolve(arch, quadrant)
    assert layout.center == SurfaceName.occlusal
    assert {layout.top, layout.bottom} == {SurfaceName.buccal, SurfaceName.lingual}
    assert {layout.left, layout.right} == {SurfaceName.mesial, SurfaceName.distal}


@pytest.mark.parametrize(("arch", "quadrant"), UPPER)
def test_upper_buccal_is_on_top(arch, quadrant):
    assert resolve(arch, quadrant).top == SurfaceName.buccal


@pytest.mark.parametrize(("arch", "quadrant"), LOWER)
def test_lower_buccal_is_at_bottom(arch, quadrant):
    assert resolve(arch, quadrant).bottom == SurfaceName.buccal


def test_mesial_distal_flip_across_midline():
    q1 = resolve("upper", 1)
    q2 = resolve("upper", 2)
    assert (q1.left, q1.right) == (SurfaceName.distal, SurfaceName.mesial)
    assert (q2.left, q2.right) == (SurfaceName.mesial, SurfaceName.distal)
    assert (resolve("lower", 4).right, resolve("lower", 3).left) == (
        SurfaceName.mesial,
        SurfaceName.mesial,
    )


def test_surface_at_and_position_of_agree():
    layout = resolve("lower", 3)
    for position in ("top", "bottom", "left", "right", "center"):
        assert layout.position_of(layout.surface_at(position)) == position


def test_unknown_quadrant_rejected():
    with pytest.raises(ValueError):
        resolve("upper", 5)
