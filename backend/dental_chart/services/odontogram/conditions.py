from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Literal, Union

ChartMode = Literal["surface", "whole"]


class SurfaceName(str, enum.Enum):
    buccal = "buccal"
    lingual = "lingual"
    mesial = "mesial"
    distal = "distal"
    occlusal = "occlusal"


# Fixed order used by the 1-5 keyboard shortcuts and the detail panel rows.
SURFACE_ORDER: tuple[SurfaceName, ...] = tuple(SurfaceName)

SURFACE_LETTERS: dict[SurfaceName, str] = {
    SurfaceName.buccal: "B",
    SurfaceName.lingual: "L",
    SurfaceName.mesial: "M",
    SurfaceName.distal: "D",
    SurfaceName.occlusal: "O",
}


class SurfaceCondition(str, enum.Enum):
    healthy = "healthy"
    caries = "caries"
    composite = "composite"
    amalgam = "amalgam"
    gold = "gold"
    ceramic = "ceramic"
    sealant = "sealant"
    root_canal = "root_canal"


class WholeToothCondition(str, enum.Enum):
    crown = "crown"
    veneer = "veneer"
    missing = "missing"
    implant = "implant"
    pontic = "pontic"
    fracture = "fracture"
    impacted = "impacted"


Condition = Union[SurfaceCondition, WholeToothCondition]


@dataclass(frozen=True)
class ConditionInfo:
    label: str
    color: str
    category: ChartMode


CATALOG: dict[Condition, ConditionInfo] = {
    SurfaceCondition.healthy: ConditionInfo("Healthy", "#D4D4D8", "surface"),
    SurfaceCondition.caries: ConditionInfo("Caries", "#EF4444", "surface"),
    SurfaceCondition.composite: ConditionInfo("Composite", "#60A5FA", "surface"),
    SurfaceCondition.amalgam: ConditionInfo("Amalgam", "#9CA3AF", "surface"),
    SurfaceCondition.gold: ConditionInfo("Gold Filling", "#FBBF24", "surface"),
    SurfaceCondition.ceramic: ConditionInfo("Ceramic", "#E2E8F0", "surface"),
    SurfaceCondition.sealant: ConditionInfo("Sealant", "#34D399", "surface"),
    SurfaceCondition.root_canal: ConditionInfo("Root Canal", "#FB923C", "surface"),
    WholeToothCondition.crown: ConditionInfo("Crown", "#A78BFA", "whole"),
    WholeToothCondition.veneer: ConditionInfo("Veneer", "#22D3EE", "whole"),
    WholeToothCondition.missing: ConditionInfo("Missing", "#52525B", "whole"),
    WholeToothCondition.implant: ConditionInfo("Implant", "#2DD4BF", "whole"),
    WholeToothCondition.pontic: ConditionInfo("Pontic", "#818CF8", "whole"),
    WholeToothCondition.fracture: ConditionInfo("Fracture", "#DC2626", "whole"),
    WholeToothCondition.impacted: ConditionInfo("Impacted", "#78716C", "whole"),
}


def condition_info(condition: Condition) -> ConditionInfo:
    return CATALOG[condition]


def category_of(condition: Condition) -> ChartMode:
    if isinstance(condition, WholeToothCondition):
        return "whole"
    return "surface"


def conditions_for(mode: ChartMode) -> list[Condition]:
    return [condition for condition, info in CATALOG.items() if info.category == mode]


def parse_condition(value: str) -> Condition:
    try:
        return SurfaceCondition(value)
    except ValueError:
        pass
    try:
        return WholeToothCondition(value)
    except ValueError:
        raise ValueError(f"Unknown condition: {value}") from None


def toggle_surface(current: SurfaceCondition, applied: SurfaceCondition) -> SurfaceCondition:
    if current == applied:
        return SurfaceCondition.healthy
    return applied


def toggle_whole(
    current: WholeToothCondition | None, applied: WholeToothCondition
) -> WholeToothCondition | None:
    if current == applied:
        return None
    return applied


@dataclass(frozen=True)
class ModeState:
    mode: ChartMode = "surface"
    active_condition: Condition = SurfaceCondition.caries

    def switch_mode(self, mode: ChartMode) -> ModeState:
        if mode not in ("surface", "whole"):
            raise ValueError(f"Unknown chart mode: {mode}")
        if category_of(self.active_condition) == mode:
            return replace(self, mode=mode)
        return ModeState(mode=mode, active_condition=conditions_for(mode)[0])

    def select_condition(self, condition: Condition) -> ModeState:
        if category_of(condition) != self.mode:
            raise ValueError(
                f"Condition '{condition.value}' is not selectable in {self.mode} mode"
            )
        return replace(self, active_condition=condition)
