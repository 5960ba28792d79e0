"""Tests for the fixed-interval poll scheduler."""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from homeassistant.core import HomeAssistant
from homeassistant.util import dt as dt_util
from pytest_homeassistant_custom_component.common import async_fire_time_changed

from custom_components.tasmota_http.scheduler import PollScheduler

INTERVAL = timedelta(seconds=1)


def _device(device_id: str = "plug", poll=None) -> MagicMock:
    device = MagicMock()
    device.device_id = device_id
    device.poll = poll or AsyncMock()
    return device


async def _tick(
    hass: HomeAssistant, count: int = 1, wait_polls: bool = True
) -> None:
    for _ in range(count):
        async_fire_time_changed(hass, dt_util.utcnow() + INTERVAL)
        await hass.async_block_till_done(wait_background_tasks=wait_polls)


class TestPollScheduler:
    """Test PollScheduler."""

    @pytest.mark.parametrize("interval", [timedelta(0), timedelta(seconds=-1)])
    async def test_interval_must_be_positive(self, hass: HomeAssistant, interval):
        with pytest.raises(ValueError):
            PollScheduler(hass, interval)

    async def test_polls_every_interval(self, hass: HomeAssistant):
        scheduler = PollScheduler(hass, INTERVAL)
        device = _device()
        try:
            scheduler.start(device)
            await _tick(hass, 3)
            assert device.poll.await_count == 3
        finally:
            await scheduler.async_stop()

    async def test_first_poll_waits_one_interval(self, hass: HomeAssistant):
        scheduler = PollScheduler(hass, INTERVAL)
        device = _device()
        try:
            scheduler.start(device)
            await hass.async_block_till_done()
            device.poll.assert_not_called()
        finally:
            await scheduler.async_stop()

    async def test_start_twice_keeps_one_timer(self, hass: HomeAssistant):
        scheduler = PollScheduler(hass, INTERVAL)
        device = _device()
        try:
            scheduler.start(device)
            scheduler.start(device)
            await _tick(hass)
            assert device.poll.await_count == 1
        finally:
            await scheduler.async_stop()

    async def test_devices_are_independent(self, hass: HomeAssistant):
        scheduler = PollScheduler(hass, INTERVAL)
        plug = _device("plug")
        bulb = _device("bulb")
        try:
            scheduler.start(plug)
            scheduler.start(bulb)
            await _tick(hass)
            scheduler.stop("plug")
            await _tick(hass, 2)

            assert plug.poll.await_count == 1
            assert bulb.poll.await_count == 3
            assert scheduler.is_polling("bulb")
            assert not scheduler.is_polling("plug")
        finally:
            await scheduler.async_stop()

    async def test_slow_polls_overlap(self, hass: HomeAssistant):
        release = asyncio.Event()
        running = 0
        peak = 0

        async def slow_poll():
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await release.wait()
            running -= 1

        scheduler = PollScheduler(hass, INTERVAL)
        try:
            scheduler.start(_device(poll=slow_poll))
            await _tick(hass, 2, wait_polls=False)
            assert peak == 2
        finally:
            release.set()
            await scheduler.async_stop()

    async def test_async_stop_cancels_in_flight_polls(self, hass: HomeAssistant):
        started = asyncio.Event()
        cancelled = asyncio.Event()

        async def hanging_poll():
            started.set()
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.set()
                raise

        device = _device(poll=AsyncMock(side_effect=hanging_poll))
        scheduler = PollScheduler(hass, INTERVAL)
        scheduler.start(device)
        await _tick(hass, wait_polls=False)
        await asyncio.wait_for(started.wait(), 1)

        await scheduler.async_stop()

        assert cancelled.is_set()
        assert not scheduler.is_polling("plug")

        await _tick(hass, wait_polls=False)
        assert device.poll.await_count == 1

    async def test_stop_unknown_device_is_noop(self, hass: HomeAssistant):
        PollScheduler(hass, INTERVAL).stop("missing")

    async def test_failing_poll_is_logged_and_polling_continues(
        self, hass: HomeAssistant, caplog
    ):
        device = _device(poll=AsyncMock(side_effect=RuntimeError("boom")))
        scheduler = PollScheduler(hass, INTERVAL)
        try:
            with caplog.at_level(logging.ERROR):
                scheduler.start(device)
                await _tick(hass, 2)
        finally:
            await scheduler.async_stop()

        assert device.poll.await_count == 2
        assert "Failed to poll plug" in caplog.text
