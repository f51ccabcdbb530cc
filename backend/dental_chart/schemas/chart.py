from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from dental_chart.services.odontogram.conditions import (
    SurfaceCondition,
    SurfaceName,
    WholeToothCondition,
)
from dental_chart.services.odontogram.numbering import ALL_TEETH


class SurfaceMap(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    buccal: SurfaceCondition = SurfaceCondition.healthy
    lingual: SurfaceCondition = SurfaceCondition.healthy
    mesial: SurfaceCondition = SurfaceCondition.healthy
    distal: SurfaceCondition = SurfaceCondition.healthy
    occlusal: SurfaceCondition = SurfaceCondition.healthy

    def get(self, surface: SurfaceName) -> SurfaceCondition:
        return getattr(self, SurfaceName(surface).value)

    def with_surface(self, surface: SurfaceName, condition: SurfaceCondition) -> SurfaceMap:
        if not isinstance(condition, SurfaceCondition):
            raise ValueError(f"Not a surface condition: {condition!r}")
        return self.model_copy(update={SurfaceName(surface).value: condition})

    def items(self) -> list[tuple[SurfaceName, SurfaceCondition]]:
        return [(surface, self.get(surface)) for surface in SurfaceName]


class ToothRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    whole_condition: WholeToothCondition | None = None
    surfaces: SurfaceMap = Field(default_factory=SurfaceMap)
    mobility: int = Field(default=0, ge=0, le=3)
    note: str = ""

    @field_validator("note", mode="before")
    @classmethod
    def _coerce_empty_note(cls, value):
        if value is None:
            return ""
        return value

    @property
    def status(self) -> str:
        if self.whole_condition == WholeToothCondition.missing:
            return "missing"
        return "present"

    @property
    def is_missing(self) -> bool:
        return self.whole_condition == WholeToothCondition.missing


class HistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    tooth_id: str
    description: str
    timestamp: datetime


class ChartState(BaseModel):
    model_config = ConfigDict(frozen=True)

    teeth: dict[int, ToothRecord]
    history: tuple[HistoryEntry, ...] = ()

    @model_validator(mode="after")
    def _require_all_teeth(self) -> ChartState:
        missing = sorted(set(ALL_TEETH) - set(self.teeth))
        extra = sorted(set(self.teeth) - set(ALL_TEETH))
        if missing or extra:
            raise ValueError(
                f"Chart must hold exactly teeth 1-32 (missing={missing}, unexpected={extra})"
            )
        return self

    @classmethod
    def empty(cls) -> ChartState:
        return cls(teeth={tooth: ToothRecord() for tooth in ALL_TEETH})

    def tooth(self, internal_id: int) -> ToothRecord:
        record = self.teeth.get(internal_id)
        if record is None:
            raise ValueError(f"Unknown tooth id: {internal_id}")
        return record

    def with_tooth(self, internal_id: int, record: ToothRecord) -> ChartState:
        if internal_id not in self.teeth:
            raise ValueError(f"Unknown tooth id: {internal_id}")
        teeth = dict(self.teeth)
        teeth[internal_id] = record
        return self.model_copy(update={"teeth": teeth})

    def with_history(self, entry: HistoryEntry) -> ChartState:
        return self.model_copy(update={"history": (*self.history, entry)})
