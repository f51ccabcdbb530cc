from __future__ import annotations

from typing import Literal

Notation = Literal["fdi", "universal"]

# Universal 1..32 runs upper right -> upper left -> lower left -> lower right.
UNIVERSAL_TO_FDI: dict[int, str] = {
    1: "18", 2: "17", 3: "16", 4: "15", 5: "14", 6: "13", 7: "12", 8: "11",
    9: "21", 10: "22", 11: "23", 12: "24", 13: "25", 14: "26", 15: "27", 16: "28",
    17: "38", 18: "37", 19: "36", 20: "35", 21: "34", 22: "33", 23: "32", 24: "31",
    25: "41", 26: "42", 27: "43", 28: "44", 29: "45", 30: "46", 31: "47", 32: "48",
}

FDI_TO_UNIVERSAL: dict[str, int] = {fdi: universal for universal, fdi in UNIVERSAL_TO_FDI.items()}

ALL_TEETH: tuple[int, ...] = tuple(range(1, 33))

# Chart column order as seen from the front: patient right on the viewer's left.
UPPER_ROW: tuple[int, ...] = tuple(range(1, 17))
LOWER_ROW: tuple[int, ...] = tuple(range(32, 16, -1))


def to_display(internal_id: int, notation: Notation = "fdi") -> str:
    if notation == "universal":
        return str(internal_id)
    return UNIVERSAL_TO_FDI.get(internal_id, str(internal_id))


def to_internal(display_id, notation: Notation = "fdi"):
    key = str(display_id).strip()
    if notation == "universal":
        if key.isdigit() and int(key) in UNIVERSAL_TO_FDI:
            return int(key)
        return display_id
    return FDI_TO_UNIVERSAL.get(key, display_id)


class NumberingMapper:
    """Converts internal Universal ids to the chart's display notation and back."""

    def __init__(self, notation: Notation = "fdi") -> None:
        self.notation = notation

    def to_display(self, internal_id: int) -> str:
        return to_display(internal_id, self.notation)

    def to_internal(self, display_id):
        return to_internal(display_id, self.notation)
