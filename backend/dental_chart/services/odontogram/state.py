from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Union

from dental_chart.schemas.chart import ChartState, HistoryEntry, SurfaceMap, ToothRecord
from dental_chart.services.odontogram.conditions import (
    SurfaceCondition,
    SurfaceName,
    WholeToothCondition,
    condition_info,
    toggle_surface,
    toggle_whole,
)
from dental_chart.services.odontogram.numbering import NumberingMapper

logger = logging.getLogger("dental_chart.state")


@dataclass(frozen=True)
class ApplySurfaceCondition:
    tooth: int
    surface: SurfaceName
    condition: SurfaceCondition


@dataclass(frozen=True)
class ApplyWholeCondition:
    tooth: int
    condition: WholeToothCondition


@dataclass(frozen=True)
class ClearWholeCondition:
    tooth: int


@dataclass(frozen=True)
class SetMobility:
    tooth: int
    mobility: int


@dataclass(frozen=True)
class EditNote:
    tooth: int
    note: str


@dataclass(frozen=True)
class ResetTooth:
    tooth: int


ChartAction = Union[
    ApplySurfaceCondition,
    ApplyWholeCondition,
    ClearWholeCondition,
    SetMobility,
    EditNote,
    ResetTooth,
]


@dataclass(frozen=True)
class ChartChange:
    """What persistence needs to hear about after a mutation."""

    kind: str
    tooth: int
    surface: SurfaceName | None = None
    value: object = None


@dataclass(frozen=True)
class Transition:
    state: ChartState
    description: str | None
    change: ChartChange | None


def reduce(state: ChartState, action: ChartAction) -> Transition:
    """Apply one action to the chart. History is left to the caller."""
    record = state.tooth(action.tooth)

    if isinstance(action, ApplySurfaceCondition):
        if not isinstance(action.condition, SurfaceCondition):
            raise ValueError(f"Not a surface condition: {action.condition!r}")
        surface = SurfaceName(action.surface)
        previous = record.surfaces.get(surface)
        updated = toggle_surface(previous, action.condition)
        label = condition_info(action.condition).label
        if updated == SurfaceCondition.healthy and previous == action.condition:
            description = f"{surface.value}: cleared (was {label})"
        else:
            description = f"{surface.value}: {label}"
        record = record.model_copy(update={"surfaces": record.surfaces.with_surface(surface, updated)})
        change = ChartChange("surface", action.tooth, surface=surface, value=updated)
        return Transition(state.with_tooth(action.tooth, record), description, change)

    if isinstance(action, ApplyWholeCondition):
        if not isinstance(action.condition, WholeToothCondition):
            raise ValueError(f"Not a whole-tooth condition: {action.condition!r}")
        updated_whole = toggle_whole(record.whole_condition, action.condition)
        label = condition_info(action.condition).label
        description = f"Removed {label}" if updated_whole is None else f"Set {label}"
        record = record.model_copy(update={"whole_condition": updated_whole})
        change = ChartChange("whole", action.tooth, value=updated_whole)
        return Transition(state.with_tooth(action.tooth, record), description, change)

    if isinstance(action, ClearWholeCondition):
        record = record.model_copy(update={"whole_condition": None})
        change = ChartChange("whole", action.tooth, value=None)
        return Transition(
            state.with_tooth(action.tooth, record), "Cleared whole tooth condition", change
        )

    if isinstance(action, SetMobility):
        if action.mobility not in (0, 1, 2, 3):
            raise ValueError(f"Mobility must be 0-3, got {action.mobility}")
        record = record.model_copy(update={"mobility": action.mobility})
        change = ChartChange("mobility", action.tooth, value=action.mobility)
        return Transition(
            state.with_tooth(action.tooth, record), f"Mobility set to {action.mobility}", change
        )

    if isinstance(action, EditNote):
        record = record.model_copy(update={"note": action.note or ""})
        return Transition(state.with_tooth(action.tooth, record), None, None)

    if isinstance(action, ResetTooth):
        change = ChartChange("reset", action.tooth)
        return Transition(
            state.with_tooth(action.tooth, ToothRecord(surfaces=SurfaceMap())),
            "Reset to healthy",
            change,
        )

    raise ValueError(f"Unsupported chart action: {action!r}")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ChartStateStore:
    def __init__(
        self,
        state: ChartState | None = None,
        *,
        mapper: NumberingMapper | None = None,
        clock: Callable[[], datetime] = _now,
    ) -> None:
        self._state = state if state is not None else ChartState.empty()
        self.mapper = mapper or NumberingMapper()
        self._clock = clock

    @property
    def state(self) -> ChartState:
        return self._state

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return self._state.history

    def replace(self, state: ChartState) -> None:
        self._state = state

    def dispatch(self, action: ChartAction) -> Transition:
        transition = reduce(self._state, action)
        state = transition.state
        if transition.description is not None:
            entry = HistoryEntry(
                tooth_id=self.mapper.to_display(action.tooth),
                description=transition.description,
                timestamp=self._clock(),
            )
            state = state.with_history(entry)
        self._state = state
        logger.debug(
            "Chart action %s on tooth %s: %s",
            type(action).__name__,
            action.tooth,
            transition.description,
        )
        return Transition(state, transition.description, transition.change)
