"""Fixed-interval polling of Tasmota devices."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.event import async_track_time_interval

from .device import TasmotaDevice

_LOGGER = logging.getLogger(__name__)


class PollScheduler:
    """One repeating, cancellable poll timer per device.

    Every tick starts a new background poll without waiting for the previous
    one, so a slow device may have several polls in flight.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        interval: timedelta,
        logger: logging.Logger | None = None,
    ) -> None:
        if interval <= timedelta(0):
            raise ValueError("Poll interval must be positive")
        self._hass = hass
        self._interval = interval
        self._logger = logger or _LOGGER
        self._timers: dict[str, Callable[[], None]] = {}
        self._in_flight: dict[str, set[asyncio.Task[None]]] = {}

    @property
    def interval(self) -> timedelta:
        return self._interval

    def is_polling(self, device_id: str) -> bool:
        return device_id in self._timers

    @callback
    def start(self, device: TasmotaDevice) -> None:
        device_id = device.device_id
        if device_id in self._timers:
            return
        self._logger.debug("Polling %s every %s", device_id, self._interval)

        polls: set[asyncio.Task[None]] = set()
        self._in_flight[device_id] = polls

        @callback
        def _poll(now: datetime) -> None:
            task = self._hass.async_create_background_task(
                device.poll(), f"tasmota_http poll {device_id}"
            )
            polls.add(task)
            task.add_done_callback(polls.discard)
            task.add_done_callback(
                lambda t: self._poll_done(device_id, t)
            )

        self._timers[device_id] = async_track_time_interval(
            self._hass,
            _poll,
            self._interval,
            name=f"tasmota_http poll timer {device_id}",
        )

    @callback
    def stop(self, device_id: str) -> None:
        unsub = self._timers.pop(device_id, None)
        if unsub is not None:
            unsub()
        for task in self._in_flight.pop(device_id, set()):
            task.cancel()

    async def async_stop(self) -> None:
        """Cancel every timer and in-flight poll and wait for them."""
        tasks = [task for polls in self._in_flight.values() for task in polls]
        for device_id in list(self._timers):
            self.stop(device_id)
        await asyncio.gather(*tasks, return_exceptions=True)

    def _poll_done(self, device_id: str, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._logger.error("Failed to poll %s", device_id, exc_info=exc)
