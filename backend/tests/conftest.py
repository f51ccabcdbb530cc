from datetime import datetime, timezone

import pytest

from dental_chart.core.settings import Settings
from dental_chart.schemas.chart import ChartState
from dental_chart.services.odontogram.engine import DentalChartEngine
from dental_chart.services.odontogram.keyboard import KeyboardHub
from dental_chart.services.odontogram.persistence import PersistenceCallbacks
from dental_chart.services.odontogram.surface import MarkupSurface


class CallbackRecorder:
    def __init__(self):
        self.calls = []

    def _record(self, name):
        def callback(*args):
            self.calls.append((name, *args))

        return callback

    def callbacks(self) -> PersistenceCallbacks:
        return PersistenceCallbacks(
            on_surface_change=self._record("surface"),
            on_whole_tooth_change=self._record("whole"),
            on_mobility_change=self._record("mobility"),
            on_note_change=self._record("note"),
            on_reset_tooth=self._record("reset"),
        )

    def named(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def chart_settings():
    return Settings(_env_file=None, chart_notation="fdi", history_display_limit=20)


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def surface():
    return MarkupSurface()


@pytest.fixture
def keyboard():
    return KeyboardHub()


@pytest.fixture
def recorder():
    return CallbackRecorder()


@pytest.fixture
def engine(surface, keyboard, recorder, chart_settings):
    chart = DentalChartEngine(
        surface,
        recorder.callbacks(),
        keyboard=keyboard,
        settings=chart_settings,
    )
    chart.load_teeth_data(ChartState.empty())
    yield chart
    chart.destroy()
