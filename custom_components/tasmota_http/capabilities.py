"""Capability detection for Tasmota devices."""

from __future__ import annotations

import enum
import logging
from typing import Any

from .api import TasmotaClient
from .const import (
    CMD_COLOR,
    CMD_CT,
    CMD_DIMMER,
    MAX_RELAY_CHANNELS,
    STATE_OFF,
    STATE_ON,
)
from .exceptions import TasmotaError

_LOGGER = logging.getLogger(__name__)


class PropertyKind(enum.Enum):
    """Property kinds a light can be built from."""

    ON_OFF = "on"
    BRIGHTNESS = "brightness"
    COLOR = "color"
    COLOR_TEMPERATURE = "color_temperature"
    COLOR_MODE = "color_mode"


DIMMABLE_LIGHT = frozenset({PropertyKind.ON_OFF, PropertyKind.BRIGHTNESS})
COLOR_TEMPERATURE_LIGHT = DIMMABLE_LIGHT | {PropertyKind.COLOR_TEMPERATURE}
COLOR_LIGHT = DIMMABLE_LIGHT | {PropertyKind.COLOR}
COLOR_CT_LIGHT = COLOR_LIGHT | {
    PropertyKind.COLOR_TEMPERATURE,
    PropertyKind.COLOR_MODE,
}


async def probe_channels(
    client: TasmotaClient, logger: logging.Logger | None = None
) -> list[int]:
    """Return the relay channels (1-based, ascending) the device answers for.

    A failed request only marks that one channel as unavailable.
    """
    logger = logger or _LOGGER
    channels: list[int] = []

    for channel in range(1, MAX_RELAY_CHANNELS + 1):
        if await _is_channel_available(client, channel, logger):
            channels.append(channel)

    return channels


async def _is_channel_available(
    client: TasmotaClient, channel: int, logger: logging.Logger
) -> bool:
    command = f"POWER{channel}"
    try:
        result = await client.get_status(command)
    except TasmotaError as exc:
        logger.debug("Channel %s not available: %s", channel, exc)
        return False

    available = result.get(command) in (STATE_ON, STATE_OFF)
    if available:
        logger.debug("Detected channel %s", channel)
    else:
        logger.debug("Channel %s not available: %s", channel, result)
    return available


async def detect_light_capabilities(
    client: TasmotaClient,
    color_mode: bool = False,
    logger: logging.Logger | None = None,
) -> frozenset[PropertyKind]:
    """Work out which light properties the device supports.

    Returns an empty set for devices without a dimmer (relays and plugs).
    Transport errors propagate: without an answer the device cannot be
    classified.
    """
    logger = logger or _LOGGER

    dimmer = await client.get_status(CMD_DIMMER)
    if dimmer.get("Dimmer") is None:
        logger.debug("%s has no dimmer, treating it as a plug", client.host)
        return frozenset()

    has_ct = (await client.get_status(CMD_CT)).get("CT") is not None
    has_color = _is_color(await client.get_status(CMD_COLOR))
    logger.debug(
        "%s capabilities: color=%s, ct=%s", client.host, has_color, has_ct
    )

    if has_color and has_ct and color_mode:
        return COLOR_CT_LIGHT
    if has_color:
        return COLOR_LIGHT
    if has_ct:
        return COLOR_TEMPERATURE_LIGHT
    return DIMMABLE_LIGHT


def _is_color(result: dict[str, Any]) -> bool:
    color = result.get("Color")
    return isinstance(color, str) and len(color) >= 6
