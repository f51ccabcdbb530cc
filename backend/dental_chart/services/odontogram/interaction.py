from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Union

from dental_chart.services.odontogram.classification import classify
from dental_chart.services.odontogram.conditions import (
    SURFACE_ORDER,
    ChartMode,
    Condition,
    ModeState,
    SurfaceCondition,
    SurfaceName,
    WholeToothCondition,
)
from dental_chart.services.odontogram.keyboard import KeyEvent
from dental_chart.services.odontogram.state import (
    ApplySurfaceCondition,
    ApplyWholeCondition,
    ChartChange,
    ChartStateStore,
    ClearWholeCondition,
    EditNote,
    ResetTooth,
    SetMobility,
)
from dental_chart.services.odontogram.surfaces import Position, resolve

logger = logging.getLogger("dental_chart.interaction")


@dataclass(frozen=True)
class SurfaceTarget:
    tooth: int
    position: Position


@dataclass(frozen=True)
class CrownTarget:
    tooth: int


@dataclass(frozen=True)
class ModeTarget:
    mode: ChartMode


@dataclass(frozen=True)
class ConditionTarget:
    condition: Condition


@dataclass(frozen=True)
class ClearWholeTarget:
    tooth: int


@dataclass(frozen=True)
class MobilityTarget:
    tooth: int
    mobility: int


@dataclass(frozen=True)
class ResetToothTarget:
    tooth: int


@dataclass(frozen=True)
class SurfaceRowTarget:
    tooth: int
    surface: SurfaceName


HitTarget = Union[
    SurfaceTarget,
    CrownTarget,
    ModeTarget,
    ConditionTarget,
    ClearWholeTarget,
    MobilityTarget,
    ResetToothTarget,
    SurfaceRowTarget,
]


@dataclass(frozen=True)
class ViewState:
    selected_tooth: int | None = None
    selected_surface: SurfaceName | None = None
    mode: ModeState = field(default_factory=ModeState)

    def select(self, tooth: int | None, surface: SurfaceName | None = None) -> ViewState:
        return replace(self, selected_tooth=tooth, selected_surface=surface)


@dataclass(frozen=True)
class Outcome:
    redraw: bool = False
    change: ChartChange | None = None

    @property
    def mutated(self) -> bool:
        return self.change is not None


IGNORED = Outcome()


class InteractionController:
    """Interprets clicks and keys against the current mode and selection."""

    def __init__(self, store: ChartStateStore, view: ViewState | None = None) -> None:
        self.store = store
        self.view = view or ViewState()

    def reset_selection(self) -> None:
        self.view = self.view.select(None)

    def click(self, target: HitTarget) -> Outcome:
        if isinstance(target, SurfaceTarget):
            return self._click_surface(target)
        if isinstance(target, CrownTarget):
            return self._click_crown(target.tooth)
        if isinstance(target, ModeTarget):
            self.view = replace(self.view, mode=self.view.mode.switch_mode(target.mode))
            return Outcome(redraw=True)
        if isinstance(target, ConditionTarget):
            self.view = replace(self.view, mode=self.view.mode.select_condition(target.condition))
            return Outcome(redraw=True)
        if isinstance(target, ClearWholeTarget):
            transition = self.store.dispatch(ClearWholeCondition(target.tooth))
            return Outcome(redraw=True, change=transition.change)
        if isinstance(target, MobilityTarget):
            transition = self.store.dispatch(SetMobility(target.tooth, target.mobility))
            return Outcome(redraw=True, change=transition.change)
        if isinstance(target, ResetToothTarget):
            transition = self.store.dispatch(ResetTooth(target.tooth))
            return Outcome(redraw=True, change=transition.change)
        if isinstance(target, SurfaceRowTarget):
            self.view = self.view.select(target.tooth, SurfaceName(target.surface))
            return Outcome(redraw=True)
        raise ValueError(f"Unsupported click target: {target!r}")

    def _click_surface(self, target: SurfaceTarget) -> Outcome:
        if self.view.mode.mode == "whole":
            return self._click_crown(target.tooth)

        record = self.store.state.tooth(target.tooth)
        if record.is_missing:
            logger.debug("Surface edit ignored on missing tooth %s", target.tooth)
            return IGNORED

        info = classify(target.tooth)
        surface = resolve(info.arch, info.quadrant).surface_at(target.position)
        self.view = self.view.select(target.tooth, surface)

        condition = self.view.mode.active_condition
        if not isinstance(condition, SurfaceCondition):
            return Outcome(redraw=True)
        transition = self.store.dispatch(ApplySurfaceCondition(target.tooth, surface, condition))
        return Outcome(redraw=True, change=transition.change)

    def _click_crown(self, tooth: int) -> Outcome:
        if self.view.mode.mode == "surface":
            keep = self.view.selected_surface if self.view.selected_tooth == tooth else None
            self.view = self.view.select(tooth, keep)
            return Outcome(redraw=True)

        self.view = self.view.select(tooth, None)
        condition = self.view.mode.active_condition
        if not isinstance(condition, WholeToothCondition):
            return Outcome(redraw=True)
        transition = self.store.dispatch(ApplyWholeCondition(tooth, condition))
        return Outcome(redraw=True, change=transition.change)

    def key_down(self, event: KeyEvent) -> Outcome:
        if event.from_text_input:
            return IGNORED
        if event.key == "Escape":
            self.reset_selection()
            return Outcome(redraw=True)
        if self.view.selected_tooth is not None and event.key in ("1", "2", "3", "4", "5"):
            surface = SURFACE_ORDER[int(event.key) - 1]
            self.view = self.view.select(self.view.selected_tooth, surface)
            return Outcome(redraw=True)
        return IGNORED

    def note_input(self, text: str) -> Outcome:
        tooth = self.view.selected_tooth
        if tooth is None:
            return IGNORED
        self.store.dispatch(EditNote(tooth, text))
        return IGNORED

    def note_commit(self, text: str) -> Outcome:
        tooth = self.view.selected_tooth
        if tooth is None:
            return IGNORED
        self.store.dispatch(EditNote(tooth, text))
        return Outcome(change=ChartChange("note", tooth, value=text or ""))
