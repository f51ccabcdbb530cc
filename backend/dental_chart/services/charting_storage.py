from __future__ import annotations

import enum
import logging
from typing import Iterable, Protocol

from pydantic import BaseModel, Field

from dental_chart.schemas.chart import ChartState, SurfaceMap, ToothRecord
from dental_chart.services.odontogram.conditions import (
    Condition,
    SurfaceCondition,
    SurfaceName,
    WholeToothCondition,
    parse_condition,
)
from dental_chart.services.odontogram.numbering import ALL_TEETH, NumberingMapper
from dental_chart.services.odontogram.persistence import PersistenceCallbacks

logger = logging.getLogger("dental_chart.storage")


class StoredCondition(str, enum.Enum):
    HEALTHY = "HEALTHY"
    CAVITY = "CAVITY"
    FILLED = "FILLED"
    CROWN = "CROWN"
    MISSING = "MISSING"
    IMPLANT = "IMPLANT"
    ROOT_CANAL = "ROOT_CANAL"


CHART_TO_STORED: dict[Condition, StoredCondition] = {
    SurfaceCondition.healthy: StoredCondition.HEALTHY,
    SurfaceCondition.caries: StoredCondition.CAVITY,
    SurfaceCondition.composite: StoredCondition.FILLED,
    SurfaceCondition.amalgam: StoredCondition.FILLED,
    SurfaceCondition.gold: StoredCondition.FILLED,
    SurfaceCondition.ceramic: StoredCondition.FILLED,
    SurfaceCondition.sealant: StoredCondition.FILLED,
    SurfaceCondition.root_canal: StoredCondition.ROOT_CANAL,
    WholeToothCondition.crown: StoredCondition.CROWN,
    WholeToothCondition.veneer: StoredCondition.CROWN,
    WholeToothCondition.pontic: StoredCondition.CROWN,
    WholeToothCondition.missing: StoredCondition.MISSING,
    WholeToothCondition.implant: StoredCondition.IMPLANT,
    WholeToothCondition.fracture: StoredCondition.HEALTHY,
    WholeToothCondition.impacted: StoredCondition.HEALTHY,
}

STORED_TO_SURFACE: dict[StoredCondition, SurfaceCondition] = {
    StoredCondition.HEALTHY: SurfaceCondition.healthy,
    StoredCondition.CAVITY: SurfaceCondition.caries,
    StoredCondition.FILLED: SurfaceCondition.composite,
    StoredCondition.ROOT_CANAL: SurfaceCondition.root_canal,
}

STORED_TO_WHOLE: dict[StoredCondition, WholeToothCondition] = {
    StoredCondition.CROWN: WholeToothCondition.crown,
    StoredCondition.MISSING: WholeToothCondition.missing,
    StoredCondition.IMPLANT: WholeToothCondition.implant,
}

SURFACE_TO_STORED: dict[SurfaceName, str] = {
    SurfaceName.mesial: "M",
    SurfaceName.occlusal: "O",
    SurfaceName.distal: "D",
    SurfaceName.buccal: "B",
    SurfaceName.lingual: "L",
}

STORED_TO_SURFACE_NAME: dict[str, SurfaceName] = {letter: name for name, letter in SURFACE_TO_STORED.items()}


class StoredSurface(BaseModel):
    surface: str
    condition: StoredCondition = StoredCondition.HEALTHY


class StoredTooth(BaseModel):
    tooth_number: int = Field(..., ge=1, le=32)
    current_condition: StoredCondition = StoredCondition.HEALTHY
    surfaces: list[StoredSurface] = Field(default_factory=list)
    mobility: int | None = None
    notes: str | None = None


def storage_condition_for(condition: Condition | str | None) -> StoredCondition:
    if condition is None:
        return StoredCondition.HEALTHY
    if isinstance(condition, str) and not isinstance(condition, enum.Enum):
        condition = parse_condition(condition)
    return CHART_TO_STORED.get(condition, StoredCondition.HEALTHY)


def storage_surface_for(surface: SurfaceName | str) -> str:
    return SURFACE_TO_STORED[SurfaceName(surface)]


def _record_from_storage(row: StoredTooth) -> ToothRecord:
    surfaces = SurfaceMap()
    for stored in row.surfaces:
        name = STORED_TO_SURFACE_NAME.get(stored.surface.upper())
        condition = STORED_TO_SURFACE.get(stored.condition)
        if name is None or condition is None:
            logger.warning(
                "Skipping stored surface %s=%s on tooth %s",
                stored.surface,
                stored.condition.value,
                row.tooth_number,
            )
            continue
        surfaces = surfaces.with_surface(name, condition)
    mobility = min(max(row.mobility or 0, 0), 3)
    return ToothRecord(
        whole_condition=STORED_TO_WHOLE.get(row.current_condition),
        surfaces=surfaces,
        mobility=mobility,
        note=row.notes or "",
    )


def chart_state_from_storage(rows: Iterable[StoredTooth | dict]) -> ChartState:
    teeth = {tooth: ToothRecord() for tooth in ALL_TEETH}
    for raw in rows:
        row = raw if isinstance(raw, StoredTooth) else StoredTooth.model_validate(raw)
        teeth[row.tooth_number] = _record_from_storage(row)
    return ChartState(teeth=teeth)


class ChartingStore(Protocol):
    # A current_condition of None leaves the stored condition unchanged.
    async def update_tooth(
        self,
        tooth_number: int,
        *,
        current_condition: StoredCondition | None = None,
        mobility: int | None = None,
        notes: str | None = None,
    ) -> None:
        raise NotImplementedError

    async def update_surfaces(self, tooth_number: int, surfaces: list[StoredSurface]) -> None:
        raise NotImplementedError


class StorageCallbacks:
    """Persistence callbacks that translate chart edits into store writes.

    Chart tooth ids arrive in the chart notation and are written under Universal numbers.
    """

    def __init__(
        self,
        store: ChartingStore,
        chart: ChartState | None = None,
        mapper: NumberingMapper | None = None,
    ) -> None:
        self.store = store
        self.mapper = mapper or NumberingMapper()
        self._conditions: dict[int, StoredCondition] = {}
        if chart is not None:
            for tooth, record in chart.teeth.items():
                self._conditions[tooth] = storage_condition_for(record.whole_condition)

    def _universal(self, tooth_id) -> int | None:
        universal = self.mapper.to_internal(tooth_id)
        if universal not in ALL_TEETH:
            logger.warning("Unknown chart tooth id %s; not persisted.", tooth_id)
            return None
        return universal

    def as_callbacks(self) -> PersistenceCallbacks:
        return PersistenceCallbacks(
            on_surface_change=self.surface_changed,
            on_whole_tooth_change=self.whole_tooth_changed,
            on_mobility_change=self.mobility_changed,
            on_note_change=self.note_changed,
            on_reset_tooth=self.tooth_reset,
        )

    async def surface_changed(self, tooth_id, surface: str, condition: str) -> None:
        universal = self._universal(tooth_id)
        if universal is None:
            return
        update = StoredSurface(surface=storage_surface_for(surface), condition=storage_condition_for(condition))
        await self.store.update_surfaces(universal, [update])

    async def whole_tooth_changed(self, tooth_id, condition: str | None) -> None:
        universal = self._universal(tooth_id)
        if universal is None:
            return
        stored = storage_condition_for(condition)
        self._conditions[universal] = stored
        await self.store.update_tooth(universal, current_condition=stored)

    async def mobility_changed(self, tooth_id, mobility: int) -> None:
        universal = self._universal(tooth_id)
        if universal is None:
            return
        await self.store.update_tooth(
            universal,
            current_condition=self._conditions.get(universal),
            mobility=mobility,
        )

    async def note_changed(self, tooth_id, note: str) -> None:
        universal = self._universal(tooth_id)
        if universal is None:
            return
        await self.store.update_tooth(
            universal,
            current_condition=self._conditions.get(universal),
            notes=note,
        )

    async def tooth_reset(self, tooth_id) -> None:
        universal = self._universal(tooth_id)
        if universal is None:
            return
        self._conditions[universal] = StoredCondition.HEALTHY
        await self.store.update_tooth(
            universal, current_condition=StoredCondition.HEALTHY, mobility=0, notes=""
        )
        await self.store.update_surfaces(
            universal,
            [StoredSurface(surface=letter, condition=StoredCondition.HEALTHY) for letter in "MODBL"],
        )
