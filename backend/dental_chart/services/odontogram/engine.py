from __future__ import annotations

import asyncio
import logging

from dental_chart.core.settings import Settings, settings as default_settings
from dental_chart.schemas.chart import ChartState
from dental_chart.services.odontogram.conditions import ModeState, SurfaceCondition, parse_condition
from dental_chart.services.odontogram.interaction import (
    HitTarget,
    InteractionController,
    Outcome,
    ViewState,
)
from dental_chart.services.odontogram.keyboard import KeyboardSource, KeyEvent
from dental_chart.services.odontogram.numbering import NumberingMapper
from dental_chart.services.odontogram.persistence import CallbackDispatcher, PersistenceCallbacks
from dental_chart.services.odontogram.render import Scene, render_scene
from dental_chart.services.odontogram.state import ChartStateStore
from dental_chart.services.odontogram.surface import RenderSurface

logger = logging.getLogger("dental_chart.engine")


def _initial_mode(settings: Settings) -> ModeState:
    try:
        condition = parse_condition(settings.default_condition)
    except ValueError:
        condition = None
    if not isinstance(condition, SurfaceCondition):
        logger.warning(
            "Default condition %r is not a surface condition; using caries.",
            settings.default_condition,
        )
        condition = SurfaceCondition.caries
    return ModeState(mode="surface", active_condition=condition)


class DentalChartEngine:
    """Interactive odontogram bound to one rendering surface.

    Every input runs synchronously: controller -> store -> redraw, and only then
    are the persistence callbacks fired.
    """

    def __init__(
        self,
        surface: RenderSurface,
        callbacks: PersistenceCallbacks | None = None,
        *,
        keyboard: KeyboardSource | None = None,
        settings: Settings | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.mapper = NumberingMapper(self.settings.chart_notation)
        self.store = ChartStateStore(mapper=self.mapper)
        self.controller = InteractionController(
            self.store, ViewState(mode=_initial_mode(self.settings))
        )
        self.dispatcher = CallbackDispatcher(callbacks, mapper=self.mapper, loop=loop)
        self._surface: RenderSurface | None = surface
        self._unsubscribe = None

        surface.acquire(self)
        self.scene = self._redraw()
        if keyboard is not None:
            self._unsubscribe = keyboard.subscribe(self.key_down)

    @property
    def destroyed(self) -> bool:
        return self._surface is None

    @property
    def view(self) -> ViewState:
        return self.controller.view

    def _require_live(self) -> RenderSurface:
        if self._surface is None:
            raise RuntimeError("Dental chart engine has been destroyed")
        return self._surface

    def _redraw(self) -> Scene:
        surface = self._require_live()
        scene = render_scene(self.store.state, self.controller.view, self.settings, self.mapper)
        surface.draw(scene)
        self.scene = scene
        return scene

    def _apply(self, outcome: Outcome) -> Outcome:
        if outcome.redraw:
            self._redraw()
        if outcome.change is not None:
            self.dispatcher.notify(outcome.change)
        return outcome

    def load_teeth_data(self, state: ChartState) -> None:
        self._require_live()
        if not isinstance(state, ChartState):
            state = ChartState.model_validate(state)
        self.store.replace(state.model_copy(deep=True))
        self.controller.reset_selection()
        logger.info("Dental chart loaded (%s history entries).", len(state.history))
        self._redraw()

    def get_teeth_data(self) -> ChartState:
        return self.store.state.model_copy(deep=True)

    def click(self, target: HitTarget) -> Outcome:
        self._require_live()
        return self._apply(self.controller.click(target))

    def key_down(self, event: KeyEvent) -> Outcome:
        self._require_live()
        return self._apply(self.controller.key_down(event))

    def note_input(self, text: str) -> Outcome:
        self._require_live()
        return self._apply(self.controller.note_input(text))

    def note_commit(self, text: str) -> Outcome:
        self._require_live()
        return self._apply(self.controller.note_commit(text))

    def destroy(self) -> None:
        if self._surface is None:
            return
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._surface.release(self)
        self._surface = None
        logger.info("Dental chart destroyed (%s pending persistence callbacks).", self.dispatcher.pending)
