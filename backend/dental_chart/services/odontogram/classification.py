from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ArchType = Literal["upper", "lower"]
ToothType = Literal["molar", "premolar", "canine", "lateral_incisor", "central_incisor"]

TOOTH_TYPES: tuple[ToothType, ...] = (
    "molar",
    "premolar",
    "canine",
    "lateral_incisor",
    "central_incisor",
)

QUADRANT_NAMES: dict[int, str] = {
    1: "Upper Right",
    2: "Upper Left",
    3: "Lower Left",
    4: "Lower Right",
}

_TYPE_GROUPS: tuple[tuple[ToothType, tuple[int, ...]], ...] = (
    ("molar", (1, 2, 3, 14, 15, 16, 17, 18, 19, 30, 31, 32)),
    ("premolar", (4, 5, 12, 13, 20, 21, 28, 29)),
    ("canine", (6, 11, 22, 27)),
    ("lateral_incisor", (7, 10, 23, 26)),
    ("central_incisor", (8, 9, 24, 25)),
)

_TOOTH_TYPES: dict[int, ToothType] = {
    tooth: tooth_type for tooth_type, teeth in _TYPE_GROUPS for tooth in teeth
}

# Position within the quadrant, counted from the midline (FDI second digit).
_POSITION_NAMES: dict[int, str] = {
    1: "Central Incisor",
    2: "Lateral Incisor",
    3: "Canine",
    4: "First Premolar",
    5: "Second Premolar",
    6: "First Molar",
    7: "Second Molar",
    8: "Third Molar",
}


@dataclass(frozen=True)
class ToothInfo:
    arch: ArchType
    quadrant: int
    tooth_type: ToothType

    @property
    def is_upper(self) -> bool:
        return self.arch == "upper"


def _quadrant_for(internal_id: int) -> int:
    if 1 <= internal_id <= 8:
        return 1
    if 9 <= internal_id <= 16:
        return 2
    if 17 <= internal_id <= 24:
        return 3
    return 4


def classify(internal_id: int) -> ToothInfo:
    tooth_type = _TOOTH_TYPES.get(internal_id)
    if tooth_type is None:
        raise ValueError(f"Unknown tooth id: {internal_id} (expected 1-32)")
    quadrant = _quadrant_for(internal_id)
    arch: ArchType = "upper" if quadrant in (1, 2) else "lower"
    return ToothInfo(arch=arch, quadrant=quadrant, tooth_type=tooth_type)


def position_in_quadrant(internal_id: int) -> int:
    quadrant = classify(internal_id).quadrant
    offset = (internal_id - 1) % 8
    # Quadrants 1 and 3 count toward the midline, 2 and 4 away from it.
    if quadrant in (1, 3):
        return 8 - offset
    return offset + 1


def describe_tooth(internal_id: int) -> str:
    info = classify(internal_id)
    return f"{QUADRANT_NAMES[info.quadrant]} {_POSITION_NAMES[position_in_quadrant(internal_id)]}"


def tooth_type_label(tooth_type: ToothType) -> str:
    return tooth_type.replace("_", " ").title()
