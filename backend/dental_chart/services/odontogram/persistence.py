from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

from dental_chart.services.odontogram.numbering import NumberingMapper
from dental_chart.services.odontogram.state import ChartChange

logger = logging.getLogger("dental_chart.persistence")

Callback = Callable[..., Union[None, Awaitable[Any]]]


@dataclass
class PersistenceCallbacks:
    on_surface_change: Optional[Callback] = None
    on_whole_tooth_change: Optional[Callback] = None
    on_mobility_change: Optional[Callback] = None
    on_note_change: Optional[Callback] = None
    on_reset_tooth: Optional[Callback] = None


class CallbackDispatcher:
    """Fires persistence callbacks without waiting on them.

    Plain callables run inline. Coroutines are scheduled as tasks on the running
    loop (or the loop handed to the dispatcher) and left to finish on their own;
    a failed task is logged and otherwise ignored, there is no retry and no
    rollback of the chart.
    """

    def __init__(
        self,
        callbacks: PersistenceCallbacks | None = None,
        *,
        mapper: NumberingMapper | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.callbacks = callbacks or PersistenceCallbacks()
        self.mapper = mapper or NumberingMapper()
        self._loop = loop
        self._pending: set[asyncio.Future] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def notify(self, change: ChartChange) -> None:
        tooth_id = self.mapper.to_display(change.tooth)
        if change.kind == "surface":
            value = change.value.value if change.value is not None else None
            self._fire("on_surface_change", tooth_id, change.surface.value, value)
        elif change.kind == "whole":
            value = change.value.value if change.value is not None else None
            self._fire("on_whole_tooth_change", tooth_id, value)
        elif change.kind == "mobility":
            self._fire("on_mobility_change", tooth_id, change.value)
        elif change.kind == "note":
            self._fire("on_note_change", tooth_id, change.value)
        elif change.kind == "reset":
            self._fire("on_reset_tooth", tooth_id)
        else:
            raise ValueError(f"Unknown chart change: {change.kind}")

    def _fire(self, name: str, *args: Any) -> None:
        callback = getattr(self.callbacks, name)
        if callback is None:
            return
        result = callback(*args)
        if inspect.isawaitable(result):
            self._schedule(name, result, args)

    def _schedule(self, name: str, awaitable: Awaitable[Any], args: tuple) -> None:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = None
        if loop is None or loop.is_closed():
            logger.warning("No event loop for %s%s; persistence skipped.", name, args)
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return
        future = asyncio.ensure_future(awaitable, loop=loop)
        self._pending.add(future)
        future.add_done_callback(lambda done: self._finished(name, args, done))

    def _finished(self, name: str, args: tuple, future: asyncio.Future) -> None:
        self._pending.discard(future)
        if future.cancelled():
            logger.warning("Persistence callback %s%s was cancelled.", name, args)
            return
        exc = future.exception()
        if exc is not None:
            logger.warning(
                "Persistence callback %s%s failed: %s", name, args, exc, exc_info=exc
            )
