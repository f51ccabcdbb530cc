from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from dental_chart.services.odontogram.classification import ArchType, ToothType
from dental_chart.services.odontogram.surfaces import Position

TOOTH_WIDTH = 44
TOOTH_HEIGHT = 90

CROWN_RATIO = 0.42
DIAGRAM_INNER_RATIO = 0.3

Segment = tuple
PathSpec = tuple[Segment, ...]


@dataclass(frozen=True)
class ToothShape:
    crown_path: str
    root_paths: tuple[str, ...]
    crown_top: float
    crown_bottom: float

    @property
    def root_count(self) -> int:
        return len(self.root_paths)


def _num(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_path(spec: PathSpec) -> str:
    parts: list[str] = []
    for segment in spec:
        command, *coords = segment
        if not coords:
            parts.append(command)
            continue
        points = [f"{_num(coords[i])},{_num(coords[i + 1])}" for i in range(0, len(coords), 2)]
        parts.append(f"{command} {' '.join(points)}")
    return " ".join(parts)


def mirror_path(spec: PathSpec, height: float) -> PathSpec:
    mirrored: list[Segment] = []
    for command, *coords in spec:
        flipped = [value if i % 2 == 0 else height - value for i, value in enumerate(coords)]
        mirrored.append((command, *flipped))
    return tuple(mirrored)


def _root(cx: float, base: float, bulge_y: float, xs: tuple[float, float, float, float, float], tip_y: float) -> PathSpec:
    left, ctrl_left, tip_x, ctrl_right, right = xs
    return (
        ("M", cx + left, base),
        ("Q", cx + ctrl_left, bulge_y, cx + tip_x, tip_y),
        ("Q", cx + ctrl_right, bulge_y, cx + right, base),
        ("Z",),
    )


def _upper_spec(tooth_type: ToothType, w: float, h: float) -> tuple[PathSpec, tuple[PathSpec, ...]]:
    """Crown and root outlines for an upper tooth: roots point up, the crown sits at the bottom."""
    cx = w / 2
    top = h - h * CROWN_RATIO

    if tooth_type == "central_incisor":
        crown = (
            ("M", cx - 12, top),
            ("Q", cx - 14, h, cx, h),
            ("Q", cx + 14, h, cx + 12, top),
            ("Z",),
        )
        roots = (_root(cx, top, 4, (-4, -3, 0, 3, 4), 2),)
    elif tooth_type == "lateral_incisor":
        crown = (
            ("M", cx - 10, top),
            ("Q", cx - 12, h, cx, h),
            ("Q", cx + 12, h, cx + 10, top),
            ("Z",),
        )
        roots = (_root(cx, top, 6, (-3, -2, 0, 2, 3), 3),)
    elif tooth_type == "canine":
        crown = (
            ("M", cx - 10, top),
            ("Q", cx - 12, h - 6, cx, h),
            ("Q", cx + 12, h - 6, cx + 10, top),
            ("Z",),
        )
        roots = (_root(cx, top, 2, (-4, -3, 0, 3, 4), 0),)
    elif tooth_type == "premolar":
        crown = (
            ("M", cx - 11, top + 2),
            ("L", cx - 8, top),
            ("L", cx - 3, top + 4),
            ("L", cx + 3, top + 4),
            ("L", cx + 8, top),
            ("L", cx + 11, top + 2),
            ("Q", cx + 13, h, cx, h),
            ("Q", cx - 13, h, cx - 11, top + 2),
            ("Z",),
        )
        roots = (
            _root(cx, top, 10, (-5, -6, -3, -1, -1), 4),
            _root(cx, top, 10, (1, 1, 3, 6, 5), 4),
        )
    else:
        crown = (
            ("M", cx - 16, top + 2),
            ("L", cx - 12, top),
            ("L", cx - 4, top + 3),
            ("L", cx + 4, top + 3),
            ("L", cx + 12, top),
            ("L", cx + 16, top + 2),
            ("Q", cx + 17, h, cx, h),
            ("Q", cx - 17, h, cx - 16, top + 2),
            ("Z",),
        )
        roots = (
            _root(cx, top, 12, (-10, -12, -8, -5, -5), 4),
            _root(cx, top, 14, (-2, -1, 0, 1, 2), 6),
            _root(cx, top, 12, (5, 5, 8, 12, 10), 4),
        )
    return crown, roots


@lru_cache(maxsize=None)
def shapes_for(
    tooth_type: ToothType,
    arch: ArchType,
    width: float = TOOTH_WIDTH,
    height: float = TOOTH_HEIGHT,
) -> ToothShape:
    crown, roots = _upper_spec(tooth_type, width, height)
    crown_top = height - height * CROWN_RATIO
    crown_bottom = height
    if arch == "lower":
        crown = mirror_path(crown, height)
        roots = tuple(mirror_path(root, height) for root in roots)
        crown_top, crown_bottom = 0.0, height * CROWN_RATIO
    return ToothShape(
        crown_path=format_path(crown),
        root_paths=tuple(format_path(root) for root in roots),
        crown_top=crown_top,
        crown_bottom=crown_bottom,
    )


@lru_cache(maxsize=None)
def surface_diagram_paths(size: float) -> dict[Position, str]:
    """Five-region odontogram square: four trapezoids around a central square."""
    s = size
    o = s * DIAGRAM_INNER_RATIO
    w = s - o
    specs: dict[Position, PathSpec] = {
        "top": (("M", 0, 0), ("L", s, 0), ("L", w, o), ("L", o, o), ("Z",)),
        "bottom": (("M", o, w), ("L", w, w), ("L", s, s), ("L", 0, s), ("Z",)),
        "left": (("M", 0, 0), ("L", o, o), ("L", o, w), ("L", 0, s), ("Z",)),
        "right": (("M", s, 0), ("L", s, s), ("L", w, w), ("L", w, o), ("Z",)),
        "center": (("M", o, o), ("L", w, o), ("L", w, w), ("L", o, w), ("Z",)),
    }
    return {position: format_path(spec) for position, spec in specs.items()}


def surface_label_anchors(size: float) -> dict[Position, tuple[float, float]]:
    s = size
    o = s * DIAGRAM_INNER_RATIO
    return {
        "top": (s / 2, o / 2 + 1),
        "bottom": (s / 2, s - o / 2 - 1),
        "left": (o / 2, s / 2),
        "right": (s - o / 2, s / 2),
        "center": (s / 2, s / 2),
    }
