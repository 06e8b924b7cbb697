"""Tests for the cooldown ticker."""

import asyncio

import pytest

from contact_client.countdown import Countdown


async def _no_wait(seconds: float) -> None:
    await asyncio.sleep(0)


class TestCountdown:
    @pytest.mark.asyncio
    async def test_ticks_until_false(self) -> None:
        remaining = [3]

        def on_tick() -> bool:
            remaining[0] -= 1
            return remaining[0] > 0

        countdown = Countdown(on_tick, sleep=_no_wait)
        countdown.start()
        for _ in range(20):
            await asyncio.sleep(0)

        assert remaining == [0]
        assert not countdown.running

    @pytest.mark.asyncio
    async def test_cancel_stops_ticking(self) -> None:
        ticks = []
        countdown = Countdown(lambda: ticks.append(1) or True, interval=60)
        countdown.start()
        assert countdown.running

        countdown.cancel()
        await asyncio.sleep(0)

        assert not countdown.running
        assert ticks == []

    @pytest.mark.asyncio
    async def test_restart_replaces_previous_run(self) -> None:
        countdown = Countdown(lambda: True, interval=60)
        countdown.start()
        first = countdown._task

        countdown.start()
        await asyncio.sleep(0)
        await asyncio.sleep(0)

        assert first.cancelled()
        assert countdown.running
        countdown.cancel()

    @pytest.mark.asyncio
    async def test_cancel_from_inside_tick(self) -> None:
        ticks = []

        def on_tick() -> bool:
            ticks.append(1)
            countdown.cancel()
            return False

        countdown = Countdown(on_tick, sleep=_no_wait)
        countdown.start()
        for _ in range(5):
            await asyncio.sleep(0)

        assert ticks == [1]
        assert not countdown.running
