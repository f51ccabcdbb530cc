from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from dental_chart.services.odontogram.classification import ArchType
from dental_chart.services.odontogram.conditions import SurfaceName

Position = Literal["top", "bottom", "left", "right", "center"]

POSITIONS: tuple[Position, ...] = ("top", "bottom", "left", "right", "center")


@dataclass(frozen=True)
class SurfaceLayout:
    top: SurfaceName
    bottom: SurfaceName
    left: SurfaceName
    right: SurfaceName
    center: SurfaceName = SurfaceName.occlusal

    def surface_at(self, position: Position) -> SurfaceName:
        if position not in POSITIONS:
            raise ValueError(f"Unknown surface position: {position}")
        return getattr(self, position)

    def position_of(self, surface: SurfaceName) -> Position:
        for position in POSITIONS:
            if getattr(self, position) == surface:
                return position
        raise ValueError(f"Surface not in layout: {surface}")


def resolve(arch: ArchType, quadrant: int) -> SurfaceLayout:
    if quadrant not in (1, 2, 3, 4):
        raise ValueError(f"Unknown quadrant: {quadrant}")
    # Buccal faces the lips: up on the upper row, down on the lower row.
    if arch == "upper":
        top, bottom = SurfaceName.buccal, SurfaceName.lingual
    else:
        top, bottom = SurfaceName.lingual, SurfaceName.buccal
    # Quadrants 1 and 4 sit left of the midline on the chart, so mesial faces right.
    if quadrant in (1, 4):
        left, right = SurfaceName.distal, SurfaceName.mesial
    else:
        left, right = SurfaceName.mesial, SurfaceName.distal
    return SurfaceLayout(top=top, bottom=bottom, left=left, right=right)
