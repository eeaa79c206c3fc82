"""Periodic Tick Driver - advances running timers once per interval."""

import asyncio
import contextlib
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from neural_os.core import get_logger
from neural_os.blueprint.models import Archetype
from .resolver import find_key_of_kind
from .values import FINISHED_KEY, RUNNING_KEY, ValueKind, to_bool, to_number

logger = get_logger(__name__)


def advance_timer(data: Mapping[str, Any]) -> Mapping[str, Any]:
    """
    One tick of a timer data bag.

    Decrements the time field (first numeric entry) by one while running;
    on reaching zero the timer stops and is marked finished. Bags that are
    not running are returned as-is.

    The Timer block displays its own ``value_key``, which can differ from the
    counted field when a bag holds another number before the time.
    """
    if not to_bool(data.get(RUNNING_KEY)):
        return data

    time_key = find_key_of_kind(data, ValueKind.NUMBER)
    if time_key is None:
        logger.debug("timer_without_time_field", keys=list(data.keys()))
        return data

    remaining = to_number(data[time_key])
    updated = dict(data)
    if remaining > 0:
        remaining -= 1
        updated[time_key] = remaining
    if remaining <= 0:
        updated[time_key] = 0
        updated[RUNNING_KEY] = False
        updated[FINISHED_KEY] = True
        logger.info("timer_finished", key=time_key)
    return updated


def advance_apps(apps: Iterable[Any]) -> list[Any]:
    """
    Advance every running Regulator app by one tick.

    Apps are replaced, not mutated; untouched apps are returned as the same
    objects so callers can detect changes by identity.
    """
    result = []
    for app in apps:
        if app.archetype == Archetype.REGULATOR and to_bool(app.data.get(RUNNING_KEY)):
            data = advance_timer(app.data)
            if data is not app.data:
                app = app.model_copy(update={"data": data})
        result.append(app)
    return result


class TickDriver:
    """
    Fixed-interval clock calling ``on_tick`` on the running event loop.

    Each tick completes before the next sleep starts, so ticks never overlap.
    An exception from ``on_tick`` is logged as ``tick_failed`` and counted in
    ``failures``; the clock keeps running.
    ``stop()`` cancels the loop; use ``async with`` to tie the driver to a
    scope so no periodic work outlives its host.
    """

    def __init__(self, on_tick: Callable[[], Any], interval: float = 1.0) -> None:
        if interval <= 0:
            raise ValueError("Tick interval must be positive")
        self.on_tick = on_tick
        self.interval = interval
        self.ticks = 0
        self.failures = 0
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking on the current event loop (no-op if already running)."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("tick_driver_started", interval=self.interval)

    async def stop(self) -> None:
        """Cancel the tick loop and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("tick_driver_stopped", ticks=self.ticks, failures=self.failures)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.ticks += 1
            try:
                self.on_tick()
            except Exception as e:
                # A failed tick is logged; later ticks still run
                self.failures += 1
                logger.error("tick_failed", tick=self.ticks, error=str(e), exc_info=True)

    async def __aenter__(self) -> "TickDriver":
        self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.stop()
