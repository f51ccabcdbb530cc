import asyncio
import logging

import pytest

from dental_chart.services.odontogram.conditions import SurfaceCondition, SurfaceName, WholeToothCondition
from dental_chart.services.odontogram.numbering import NumberingMapper
from dental_chart.services.odontogram.persistence import CallbackDispatcher, PersistenceCallbacks
from dental_chart.services.odontogram.state import ChartChange

OCCLUSAL_CARIES = ChartChange("surface", 3, surface=SurfaceName.occlusal, value=SurfaceCondition.caries)


async def _drain():
    for _ in range(5):
        await asyncio.sleep(0)


def test_sync_callbacks_receive_display_ids():
    calls = []
    dispatcher = CallbackDispatcher(
        PersistenceCallbacks(
            on_surface_change=lambda *args: calls.append(("surface", *args)),
            on_whole_tooth_change=lambda *args: calls.append(("whole", *args)),
            on_reset_tooth=lambda *args: calls.append(("reset", *args)),
        )
    )
    dispatcher.notify(OCCLUSAL_CARIES)
    dispatcher.notify(ChartChange("whole", 1, value=WholeToothCondition.missing))
    dispatcher.notify(ChartChange("whole", 1, value=None))
    dispatcher.notify(ChartChange("reset", 32))
    assert calls == [
        ("surface", "16", "occlusal", "caries"),
        ("whole", "18", "missing"),
        ("whole", "18", None),
        ("reset", "48"),
    ]


def test_unset_callbacks_are_skipped():
    dispatcher = CallbackDispatcher(mapper=NumberingMapper("universal"))
    dispatcher.notify(ChartChange("mobility", 3, value=2))
    assert dispatcher.pending == 0


def test_unknown_change_kind():
    with pytest.raises(ValueError):
        CallbackDispatcher().notify(ChartChange("bridge", 3))


def test_coroutine_callbacks_are_not_awaited():
    seen = []

    async def on_surface_change(tooth_id, surface, condition):
        seen.append((tooth_id, surface, condition))

    async def scenario():
        dispatcher = CallbackDispatcher(PersistenceCallbacks(on_surface_change=on_surface_change))
        dispatcher.notify(OCCLUSAL_CARIES)
        assert seen == []
        assert dispatcher.pending == 1
        await _drain()
        return dispatcher

    dispatcher = asyncio.run(scenario())
    assert seen == [("16", "occlusal", "caries")]
    assert dispatcher.pending == 0


def test_failed_coroutine_is_logged(caplog):
    async def on_mobility_change(tooth_id, mobility):
        raise ConnectionError("store offline")

    async def scenario():
        dispatcher = CallbackDispatcher(PersistenceCallbacks(on_mobility_change=on_mobility_change))
        dispatcher.notify(ChartChange("mobility", 8, value=2))
        await _drain()
        return dispatcher

    with caplog.at_level(logging.WARNING, logger="dental_chart.persistence"):
        dispatcher = asyncio.run(scenario())
    assert dispatcher.pending == 0
    assert "on_mobility_change" in caplog.text
    assert "store offline" in caplog.text


def test_coroutine_without_loop_is_dropped(caplog):
    async def on_note_change(tooth_id, note):
        raise AssertionError("should never run")

    dispatcher = CallbackDispatcher(PersistenceCallbacks(on_note_change=on_note_change))
    with caplog.at_level(logging.WARNING, logger="dental_chart.persistence"):
        dispatcher.notify(ChartChange("note", 8, value="hello"))
    assert dispatcher.pending == 0
    assert "No event loop" in caplog.text


def test_explicit_loop_is_used():
    seen = []

    async def on_reset_tooth(tooth_id):
        seen.append(tooth_id)

    loop = asyncio.new_event_loop()
    try:
        dispatcher = CallbackDispatcher(PersistenceCallbacks(on_reset_tooth=on_reset_tooth), loop=loop)
        dispatcher.notify(ChartChange("reset", 9))
        assert dispatcher.pending == 1
        loop.run_until_complete(_drain())
    finally:
        loop.close()
    assert seen == ["21"]
    assert dispatcher.pending == 0
