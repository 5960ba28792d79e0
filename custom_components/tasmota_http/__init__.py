"""Support for Tasmota devices over their local HTTP API."""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

from homeassistant import config_entries, core
from homeassistant.const import CONF_HOST, CONF_NAME, CONF_PASSWORD, CONF_PORT
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.helpers.config_validation import config_entry_only_config_schema

from .api import TasmotaClient
from .const import (
    CMD_POWER,
    CONF_DEBUG,
    CONF_POLL_INTERVAL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_PORT,
    DOMAIN,
)
from .device import async_create_device
from .exceptions import (
    TasmotaAuthenticationError,
    TasmotaConnectionError,
    TasmotaError,
)
from .models import Features, TasmotaRuntimeData
from .scheduler import PollScheduler

CONFIG_SCHEMA = config_entry_only_config_schema(DOMAIN)

_LOGGER = logging.getLogger(__name__)

PLATFORMS = ["light", "sensor", "switch"]

SETUP_ATTEMPTS = 3
SETUP_RETRY_DELAY = 3


async def async_setup(hass: core.HomeAssistant, config: dict) -> bool:
    """Set up the Tasmota HTTP component."""
    return True


async def async_setup_entry(
    hass: core.HomeAssistant, entry: config_entries.ConfigEntry
) -> bool:
    """Set up a Tasmota device from a config entry."""
    hass.data.setdefault(DOMAIN, {})

    if entry.options.get(CONF_DEBUG):
        logging.getLogger(__package__).setLevel(logging.DEBUG)

    host = entry.data[CONF_HOST]
    client = TasmotaClient(
        host=host,
        port=entry.data.get(CONF_PORT, DEFAULT_PORT),
        password=entry.data.get(CONF_PASSWORD),
        session=async_get_clientsession(hass),
        logger=_LOGGER,
    )

    try:
        for remaining in reversed(range(SETUP_ATTEMPTS)):
            try:
                await client.get_status(CMD_POWER)
                break
            except TasmotaConnectionError:
                if remaining == 0:
                    raise
                await asyncio.sleep(SETUP_RETRY_DELAY)

        device = await async_create_device(
            client,
            entry.unique_id or host,
            entry.data.get(CONF_NAME) or entry.title or host,
            Features.from_options(entry.options),
            logger=_LOGGER,
        )
    except TasmotaConnectionError:
        _LOGGER.error(
            "Connection error: check if you have specified "
            "the device's HOST and PORT correctly."
        )
        return False
    except TasmotaAuthenticationError:
        _LOGGER.error(
            "Authentication error: check if you have specified "
            "the device's web admin PASSWORD correctly."
        )
        return False
    except TasmotaError as exc:
        _LOGGER.error("Could not set up %s: %s", host, exc)
        return False

    await device.poll()

    interval = entry.options.get(CONF_POLL_INTERVAL, DEFAULT_POLL_INTERVAL)
    scheduler = PollScheduler(
        hass, timedelta(milliseconds=interval), logger=_LOGGER
    )
    scheduler.start(device)
    entry.async_on_unload(scheduler.async_stop)

    hass.data[DOMAIN][entry.entry_id] = TasmotaRuntimeData(
        client=client, device=device, scheduler=scheduler
    )
    entry.async_on_unload(entry.add_update_listener(_async_update_listener))

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    return True


async def _async_update_listener(
    hass: core.HomeAssistant, entry: config_entries.ConfigEntry
) -> None:
    """Rebuild the device when feature flags or the interval change."""
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(
    hass: core.HomeAssistant,
    config_entry: config_entries.ConfigEntry,
) -> bool:
    """Unload a config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(
        config_entry, PLATFORMS
    )

    if unload_ok:
        data: TasmotaRuntimeData | None = hass.data[DOMAIN].pop(
            config_entry.entry_id, None
        )
        if data is not None:
            await data.scheduler.async_stop()
            await data.client.close()

    return unload_ok
