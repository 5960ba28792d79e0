"""Support for Tasmota relays and power plugs."""

from __future__ import annotations

import logging

from homeassistant.components.switch import SwitchDeviceClass, SwitchEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .device import PowerPlugDevice
from .entity import TasmotaEntity
from .models import TasmotaRuntimeData
from .properties import OnOffProperty

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up Tasmota switches from a config entry."""
    data: TasmotaRuntimeData = hass.data[DOMAIN][config_entry.entry_id]
    device = data.device

    if not isinstance(device, PowerPlugDevice):
        return

    single = len(device.on_off_properties) == 1
    async_add_entities(
        TasmotaSwitch(device, prop, single)
        for prop in device.on_off_properties
    )


class TasmotaSwitch(TasmotaEntity, SwitchEntity):
    """One relay channel of a Tasmota plug."""

    _attr_device_class = SwitchDeviceClass.OUTLET

    def __init__(
        self, device: PowerPlugDevice, prop: OnOffProperty, single: bool
    ) -> None:
        super().__init__(device, [prop], prop.name)
        self._prop = prop
        # A lone relay takes the device name.
        self._attr_name = None if single else prop.title

    @property
    def available(self) -> bool:
        return self._prop.value is not None

    @property
    def is_on(self) -> bool | None:
        return self._prop.value

    async def async_turn_on(self, **kwargs) -> None:
        await self._prop.write(True)

    async def async_turn_off(self, **kwargs) -> None:
        await self._prop.write(False)
