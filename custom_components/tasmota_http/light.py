"""Support for Tasmota lights."""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.light import (
    ATTR_BRIGHTNESS,
    ATTR_COLOR_TEMP_KELVIN,
    ATTR_RGB_COLOR,
    ColorMode,
    LightEntity,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import COLOR_MODE_TEMPERATURE, DOMAIN, MAX_KELVIN, MIN_KELVIN
from .device import LightDevice
from .entity import TasmotaEntity
from .models import TasmotaRuntimeData

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up a Tasmota light from a config entry."""
    data: TasmotaRuntimeData = hass.data[DOMAIN][config_entry.entry_id]

    if isinstance(data.device, LightDevice):
        async_add_entities([TasmotaLight(data.device)])


def brightness_to_percent(brightness: int) -> int:
    """Home Assistant 0..255 to Tasmota dimmer 0..100."""
    return round(brightness * 100 / 255)


def percent_to_brightness(percent: int) -> int:
    return round(percent * 255 / 100)


class TasmotaLight(TasmotaEntity, LightEntity):
    """Representation of a Tasmota light."""

    _attr_name = None  # Use device name
    _attr_min_color_temp_kelvin = MIN_KELVIN
    _attr_max_color_temp_kelvin = MAX_KELVIN

    def __init__(self, device: LightDevice) -> None:
        super().__init__(device, device.properties.values())
        props = device.properties
        self._on = props["on"]
        self._brightness = props.get("brightness")
        self._color = props.get("color")
        self._color_temperature = props.get("color_temperature")
        self._color_mode = props.get("color_mode")

        color_modes: set[ColorMode] = set()
        if self._color is not None:
            color_modes.add(ColorMode.RGB)
        if self._color_temperature is not None:
            color_modes.add(ColorMode.COLOR_TEMP)
        if not color_modes:
            color_modes.add(
                ColorMode.BRIGHTNESS
                if self._brightness is not None
                else ColorMode.ONOFF
            )
        self._attr_supported_color_modes = color_modes

    @property
    def available(self) -> bool:
        return self._on.value is not None

    @property
    def is_on(self) -> bool | None:
        return self._on.value

    @property
    def brightness(self) -> int | None:
        if self._brightness is None or self._brightness.value is None:
            return None
        return percent_to_brightness(self._brightness.value)

    @property
    def rgb_color(self) -> tuple[int, int, int] | None:
        if self._color is None or not self._color.value:
            return None
        value = self._color.value.lstrip("#")
        return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))

    @property
    def color_temp_kelvin(self) -> int | None:
        if self._color_temperature is None:
            return None
        return self._color_temperature.value

    @property
    def color_mode(self) -> ColorMode:
        supported = self._attr_supported_color_modes
        if self._color_mode is not None and self._color_mode.value:
            if self._color_mode.value == COLOR_MODE_TEMPERATURE:
                return ColorMode.COLOR_TEMP
            return ColorMode.RGB
        if ColorMode.RGB in supported:
            return ColorMode.RGB
        return next(iter(supported))

    async def async_turn_on(self, **kwargs: Any) -> None:
        _LOGGER.debug("turn_on called with kwargs: %s", kwargs)
        await self._on.write(True)

        if ATTR_BRIGHTNESS in kwargs and self._brightness is not None:
            await self._brightness.write(
                brightness_to_percent(kwargs[ATTR_BRIGHTNESS])
            )

        if ATTR_RGB_COLOR in kwargs and self._color is not None:
            red, green, blue = kwargs[ATTR_RGB_COLOR]
            await self._color.write(f"#{red:02x}{green:02x}{blue:02x}")

        if (
            ATTR_COLOR_TEMP_KELVIN in kwargs
            and self._color_temperature is not None
        ):
            kelvin = kwargs[ATTR_COLOR_TEMP_KELVIN]
            await self._color_temperature.write(
                min(max(kelvin, MIN_KELVIN), MAX_KELVIN)
            )

    async def async_turn_off(self, **kwargs: Any) -> None:
        await self._on.write(False)
