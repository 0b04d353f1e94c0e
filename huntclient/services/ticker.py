from __future__ import annotations
import asyncio
import inspect
from typing import Any, Callable
import structlog

log = structlog.get_logger()

class RepeatingTask:
    """
    Calls `callback` every `interval` seconds on the running loop until stopped.

    The callback may be sync or async; returning False ends the loop. Owners
    must call stop() (or use `async with`) on teardown so no tick outlives
    the screen that scheduled it.
    """

    def __init__(self, interval: float, callback: Callable[[], Any], *, name: str = "tick"):
        self.interval = interval
        self.callback = callback
        self.name = name
        self.ticks = 0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> RepeatingTask:
        if not self.running:
            self._task = asyncio.create_task(self._loop(), name=self.name)
        return self

    async def _loop(self) -> None:
        while True:
            result = self.callback()
            if inspect.isawaitable(result):
                result = await result
            self.ticks += 1
            if result is False:
                return
            await asyncio.sleep(self.interval)

    async def wait(self) -> None:
        if self._task is not None:
            await self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        if not task.done():
            task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        log.debug("repeating_task_stopped", name=self.name, ticks=self.ticks)

    async def __aenter__(self) -> RepeatingTask:
        return self.start()

    async def __aexit__(self, *exc) -> None:
        await self.stop()
