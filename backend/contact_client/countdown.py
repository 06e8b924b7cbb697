"""Repeating one-second tick for the contact form cooldown."""

import asyncio
from collections.abc import Awaitable, Callable


class Countdown:
    """
    Calls `on_tick` every `interval` seconds until it returns False or the
    countdown is cancelled.

    Usage:
        countdown = Countdown(controller.tick)
        countdown.start()   # needs a running event loop
        ...
        countdown.cancel()  # on teardown
    """

    def __init__(
        self,
        on_tick: Callable[[], bool],
        interval: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.on_tick = on_tick
        self.interval = interval
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """(Re)start ticking; an earlier run is cancelled first."""
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while True:
            await self._sleep(self.interval)
            if not self.on_tick():
                break

    def cancel(self) -> None:
        task = self._task
        self._task = None
        # on_tick may cancel from inside the task; returning False ends it
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
